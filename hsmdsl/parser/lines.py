# hsmdsl/parser/lines.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Records produced by the line parser, one per logical line of diagram text.
Names are kept as written; resolution into the hierarchy happens later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple, Union

from hsmdsl.core.frames import Frame
from hsmdsl.core.stereotypes import Stereotype

Name = Tuple[Frame, ...]


@dataclass(frozen=True)
class StateDeclaration:
    """``state X``, ``state "Long" as X <<choice>> : text`` or the implicit ``X : text``."""

    name: Name
    alias: Optional[str] = None
    stereotype: Optional[Stereotype] = None
    description: Optional[str] = None
    keyword: bool = True  # False for the implicit ``X : text`` form


@dataclass
class StateBlock:
    """A composite state and the lines of its body."""

    name: Name
    alias: Optional[str] = None
    lines: List[Line] = field(default_factory=list)


@dataclass(frozen=True)
class Endpoint:
    """
    One side of a transition. ``pseudostate`` is set for ``[*]``, ``[H]`` and ``[H*]``,
    either alone (empty name) or suffixed to a name.
    """

    name: Name = ()
    pseudostate: Optional[Frame] = None
    stereotype: Optional[Stereotype] = None

    @property
    def frames(self) -> Name:
        if self.pseudostate is None:
            return self.name
        return self.name + (self.pseudostate,)


@dataclass(frozen=True)
class Transition:
    source: Endpoint
    target: Endpoint
    description: Optional[str] = None


@dataclass
class StateNote:
    name: Name
    position: str = "right"
    content: List[str] = field(default_factory=list)


@dataclass
class TransitionNote:
    """Note attached to the most recently declared transition."""

    content: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FloatingNote:
    content: str
    alias: str = ""


class Separator(Enum):
    DASHES = auto()  # --
    BARS = auto()  # ||


@dataclass(frozen=True)
class Concurrent:
    separator: Separator = Separator.DASHES


class IgnoredKind(Enum):
    SKINPARAM = auto()
    STYLE = auto()
    JSON = auto()
    HIDE = auto()
    SCALE = auto()
    DIRECTION = auto()


@dataclass(frozen=True)
class Ignored:
    """A styling or layout line that has no effect on the diagram model."""

    kind: IgnoredKind


Line = Union[
    StateDeclaration,
    StateBlock,
    Transition,
    StateNote,
    TransitionNote,
    FloatingNote,
    Concurrent,
    Ignored,
]
