# hsmdsl/runtime/context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Assembly of a Diagram from line records.

The Context walks the lines in textual order, resolves every name through its
Scope while tracking the stack of enclosing composite states, and appends what
it learns to a fact log. ``diagram()`` folds the resolved hierarchy and the log
into a Diagram.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from hsmdsl.core.diagram import Diagram
from hsmdsl.core.frames import Frame, Frames, StateId, TransitionId
from hsmdsl.core.stereotypes import Stereotype
from hsmdsl.parser.lines import (
    Concurrent,
    Endpoint,
    FloatingNote,
    Ignored,
    Line,
    StateBlock,
    StateDeclaration,
    StateNote,
    Transition,
    TransitionNote,
)
from hsmdsl.runtime.scope import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Fact:
    """Something learned about the diagram while reading it."""

    def apply(self, diagram: Diagram) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class StateAliased(_Fact):
    state: StateId
    alias: str

    def apply(self, diagram: Diagram) -> None:
        diagram.state_alias.setdefault(self.state, self.alias)


@dataclass(frozen=True)
class StateDescribed(_Fact):
    state: StateId
    description: str

    def apply(self, diagram: Diagram) -> None:
        diagram.state_description.setdefault(self.state, []).append(self.description)


@dataclass(frozen=True)
class StateNoted(_Fact):
    state: StateId
    content: str

    def apply(self, diagram: Diagram) -> None:
        diagram.state_note.setdefault(self.state, []).append(self.content)


@dataclass(frozen=True)
class StateStereotyped(_Fact):
    state: StateId
    stereotype: Stereotype

    def apply(self, diagram: Diagram) -> None:
        diagram.state_stereotype.setdefault(self.state, self.stereotype)


@dataclass(frozen=True)
class StateConcurrent(_Fact):
    state: StateId

    def apply(self, diagram: Diagram) -> None:
        diagram.state_children_are_concurrent.add(self.state)


@dataclass(frozen=True)
class TransitionCreated(_Fact):
    transition: TransitionId

    def apply(self, diagram: Diagram) -> None:
        transition = self.transition
        diagram.transition_from.setdefault(transition, transition.source)
        diagram.transition_to.setdefault(transition, transition.target)
        diagram.state_transition_out.setdefault(transition.source, set()).add(transition)
        diagram.state_transition_in.setdefault(transition.target, set()).add(transition)


@dataclass(frozen=True)
class TransitionNoted(_Fact):
    transition: TransitionId
    content: str

    def apply(self, diagram: Diagram) -> None:
        diagram.transition_note.setdefault(self.transition, []).append(self.content)


@dataclass(frozen=True)
class FloatingNoted(_Fact):
    content: str

    def apply(self, diagram: Diagram) -> None:
        diagram.note.append(self.content)


class Context:
    """
    Builds one Diagram. A Context is used for a single parse and is not shared.

    :param scope: Name resolver to use; a fresh one by default.
    """

    def __init__(self, scope: Optional[Scope] = None) -> None:
        self._scope = scope if scope is not None else Scope()
        self._frames: List[Frame] = []
        self._log: List[_Fact] = []

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def facts(self) -> Sequence[_Fact]:
        return tuple(self._log)

    def process_lines(self, lines: Iterable[Line]) -> None:
        for line in lines:
            self.process_line(line)

    def process_line(self, line: Line) -> None:
        if isinstance(line, StateBlock):
            self._process_block(line)
        elif isinstance(line, StateDeclaration):
            self._process_declaration(line)
        elif isinstance(line, Transition):
            self._process_transition(line)
        elif isinstance(line, StateNote):
            self._process_state_note(line)
        elif isinstance(line, TransitionNote):
            self._process_transition_note(line)
        elif isinstance(line, FloatingNote):
            self._log.append(FloatingNoted(line.content))
        elif isinstance(line, Concurrent):
            self._process_concurrent()
        elif isinstance(line, Ignored):
            logger.debug(f"Ignoring {line.kind.name.lower()} line")
        else:
            raise TypeError(f"Unsupported line record: {line!r}")

    def _resolve(self, written: Sequence[Frame]) -> StateId:
        return StateId(self._scope.resume_or_insert(self._frames, written))

    def _process_block(self, block: StateBlock) -> None:
        state = self._resolve(block.name)
        if block.alias is not None:
            self._log.append(StateAliased(state, block.alias))
        saved = self._frames
        self._frames = list(state.frames)
        logger.debug(f"Entering composite state {state}")
        try:
            self.process_lines(block.lines)
        finally:
            self._frames = saved
        logger.debug(f"Leaving composite state {state}")

    def _process_declaration(self, declaration: StateDeclaration) -> None:
        state = self._resolve(declaration.name)
        if declaration.alias is not None:
            self._log.append(StateAliased(state, declaration.alias))
        if declaration.stereotype is not None:
            self._log.append(StateStereotyped(state, declaration.stereotype))
        if declaration.description is not None:
            self._log.append(StateDescribed(state, declaration.description))

    def _process_endpoint(self, endpoint: Endpoint) -> StateId:
        state = self._resolve(endpoint.frames)
        if endpoint.stereotype is not None:
            self._log.append(StateStereotyped(state, endpoint.stereotype))
        return state

    def _process_transition(self, transition: Transition) -> None:
        source = self._process_endpoint(transition.source)
        target = self._process_endpoint(transition.target)
        self._log.append(TransitionCreated(TransitionId(source, target, transition.description)))

    def _process_state_note(self, note: StateNote) -> None:
        state = self._resolve(note.name)
        for content in note.content:
            self._log.append(StateNoted(state, content))

    def _process_transition_note(self, note: TransitionNote) -> None:
        last = self._last_transition()
        if last is None:
            logger.warning("Dropping note on link: no transition has been declared yet")
            return
        for content in note.content:
            self._log.append(TransitionNoted(last, content))

    def _last_transition(self) -> Optional[TransitionId]:
        for fact in reversed(self._log):
            if isinstance(fact, TransitionCreated):
                return fact.transition
        return None

    def _process_concurrent(self) -> None:
        if not self._frames:
            logger.debug("Concurrency separator at top level has no effect")
            return
        state = self._resolve(self._frames)
        self._log.append(StateConcurrent(state))

    def diagram(self) -> Diagram:
        """
        Fold the resolved hierarchy and the fact log into a Diagram. Never fails.

        :return: The assembled diagram; maps are keyed in identifier order.
        """
        diagram = Diagram()
        for path in self._scope.flatten():
            self._add_path(diagram, path)
        for fact in self._log:
            fact.apply(diagram)
        _sort_keys(diagram)
        logger.debug(
            f"Assembled diagram with {len(diagram.state_parent)} states "
            f"and {len(diagram.transition_from)} transitions"
        )
        return diagram

    @staticmethod
    def _add_path(diagram: Diagram, path: Frames) -> None:
        for i in range(1, len(path) + 1):
            child = StateId(path[:i])
            parent = StateId(path[: i - 1])
            diagram.state_parent.setdefault(child, parent)
            diagram.state_children.setdefault(parent, set()).add(child)


def _sort_keys(diagram: Diagram) -> None:
    for name in (
        "state_parent",
        "state_children",
        "state_alias",
        "state_description",
        "state_note",
        "state_stereotype",
        "transition_from",
        "transition_to",
        "state_transition_out",
        "state_transition_in",
        "transition_note",
    ):
        mapping = getattr(diagram, name)
        setattr(diagram, name, {key: mapping[key] for key in sorted(mapping)})
