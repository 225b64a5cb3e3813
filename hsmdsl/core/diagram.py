# hsmdsl/core/diagram.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from hsmdsl.core.frames import ROOT, StateId, TransitionId
from hsmdsl.core.stereotypes import Stereotype


@dataclass
class Diagram:
    """
    Fully resolved state diagram: the state hierarchy, transitions and every
    annotation attached to them. Built once by the assembler and not modified
    afterwards. Map keys are inserted in identifier order.
    """

    state_parent: Dict[StateId, StateId] = field(default_factory=dict)
    state_children: Dict[StateId, Set[StateId]] = field(default_factory=dict)
    state_children_are_concurrent: Set[StateId] = field(default_factory=set)
    state_alias: Dict[StateId, str] = field(default_factory=dict)
    state_description: Dict[StateId, List[str]] = field(default_factory=dict)
    state_note: Dict[StateId, List[str]] = field(default_factory=dict)
    state_stereotype: Dict[StateId, Stereotype] = field(default_factory=dict)
    transition_from: Dict[TransitionId, StateId] = field(default_factory=dict)
    transition_to: Dict[TransitionId, StateId] = field(default_factory=dict)
    state_transition_out: Dict[StateId, Set[TransitionId]] = field(default_factory=dict)
    state_transition_in: Dict[StateId, Set[TransitionId]] = field(default_factory=dict)
    transition_note: Dict[TransitionId, List[str]] = field(default_factory=dict)
    note: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when the source declared nothing at all."""
        return self == Diagram()

    def states(self) -> List[StateId]:
        """Every state except the implicit root, in path order."""
        return sorted(self.state_parent)

    def transitions(self) -> List[TransitionId]:
        return sorted(self.transition_from)

    def children_of(self, state: StateId = ROOT) -> List[StateId]:
        """Direct children of ``state`` in path order; the root by default."""
        return sorted(self.state_children.get(state, ()))
