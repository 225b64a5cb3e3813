# hsmdsl/core/frames.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Identity model for diagram states and transitions.

A :class:`Frame` is one segment of a hierarchical path. A :class:`StateId` is a
fully resolved path from the implicit diagram root, and a :class:`TransitionId`
identifies a transition by its endpoints and optional label.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering
from typing import Iterator, Optional, Tuple, Union


class FrameKind(IntEnum):
    """Kinds of path segment, declared in their sort order."""

    START = 0  # [*] as a source
    END = 1  # [*] as a target
    HISTORY = 2  # [H]
    DEEP_HISTORY = 3  # [H*]
    NAMED = 4


@total_ordering
@dataclass(frozen=True)
class Frame:
    """
    One addressable segment of a path: a named state or a pseudostate.

    Frames order as Start < End < History < DeepHistory < named frames, with
    named frames ordered by name.
    """

    kind: FrameKind
    name: str = ""

    START = None  # type: Frame
    END = None  # type: Frame
    HISTORY = None  # type: Frame
    DEEP_HISTORY = None  # type: Frame

    @classmethod
    def named(cls, name: str) -> Frame:
        return cls(FrameKind.NAMED, name)

    @property
    def is_pseudostate(self) -> bool:
        return self.kind is not FrameKind.NAMED

    def _key(self) -> Tuple[int, str]:
        return (int(self.kind), self.name)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        if self.kind in (FrameKind.START, FrameKind.END):
            return "[*]"
        if self.kind is FrameKind.HISTORY:
            return "[H]"
        if self.kind is FrameKind.DEEP_HISTORY:
            return "[H*]"
        return self.name

    def __repr__(self) -> str:
        if self.is_pseudostate:
            return f"Frame.{self.kind.name}"
        return f"Frame.named({self.name!r})"


Frame.START = Frame(FrameKind.START)
Frame.END = Frame(FrameKind.END)
Frame.HISTORY = Frame(FrameKind.HISTORY)
Frame.DEEP_HISTORY = Frame(FrameKind.DEEP_HISTORY)

Frames = Tuple[Frame, ...]


@total_ordering
@dataclass(frozen=True)
class StateId:
    """
    Fully qualified address of a state. The empty path is the diagram root.
    """

    frames: Frames = ()

    @property
    def is_root(self) -> bool:
        return not self.frames

    @property
    def parent(self) -> StateId:
        """The enclosing state; the root is its own parent."""
        return StateId(self.frames[:-1])

    @property
    def last(self) -> Optional[Frame]:
        return self.frames[-1] if self.frames else None

    def child(self, frame: Union[Frame, str]) -> StateId:
        if isinstance(frame, str):
            frame = Frame.named(frame)
        return StateId(self.frames + (frame,))

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.frames)

    def __len__(self) -> int:
        return len(self.frames)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, StateId):
            return NotImplemented
        return self.frames < other.frames

    def __str__(self) -> str:
        if not self.frames:
            return "Root"
        return ".".join(str(frame) for frame in self.frames)

    def __repr__(self) -> str:
        return f"StateId({str(self)!r})"


def state_id(*parts: Union[Frame, str]) -> StateId:
    """
    Build a StateId from names and frames, e.g. ``state_id("A", "B", Frame.END)``.
    """
    return StateId(tuple(part if isinstance(part, Frame) else Frame.named(part) for part in parts))


ROOT = StateId()


@total_ordering
@dataclass(frozen=True)
class TransitionId:
    """
    Identity of a transition. Re-declaring the same endpoints with the same label
    yields the same transition.
    """

    source: StateId
    target: StateId
    label: Optional[str] = None

    def _key(self) -> Tuple[StateId, StateId, bool, str]:
        return (self.source, self.target, self.label is not None, self.label or "")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TransitionId):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        arrow = f"{self.source} --> {self.target}"
        return arrow if self.label is None else f"{arrow} : {self.label}"
