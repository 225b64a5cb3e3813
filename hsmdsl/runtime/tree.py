# hsmdsl/runtime/tree.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Trie of resolved state paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from hsmdsl.core.frames import Frame, Frames


@dataclass
class Tree:
    """
    Every path inserted is recorded once; shared prefixes share nodes, so each
    prefix of an inserted path is itself present in the tree.
    """

    children: Dict[Frame, Tree] = field(default_factory=dict)

    def insert(self, frames: Sequence[Frame]) -> None:
        node = self
        for frame in frames:
            node = node.children.setdefault(frame, Tree())

    def __contains__(self, frames: object) -> bool:
        if not isinstance(frames, (tuple, list)):
            return False
        node = self
        for frame in frames:
            child = node.children.get(frame)
            if child is None:
                return False
            node = child
        return True

    def flatten(self) -> List[Frames]:
        """
        Walk depth-first with children in Frame order and return every path that
        ends at a leaf. An empty tree flattens to no paths.
        """
        paths: List[Frames] = []
        self._walk((), paths)
        return paths

    def _walk(self, prefix: Frames, paths: List[Frames]) -> None:
        if not self.children:
            if prefix:
                paths.append(prefix)
            return
        for frame in sorted(self.children):
            self.children[frame]._walk(prefix + (frame,), paths)

    def __str__(self) -> str:
        lines: List[str] = []
        self._render(0, lines)
        return "\n".join(lines)

    def _render(self, depth: int, lines: List[str]) -> None:
        for frame in sorted(self.children):
            lines.append("  " * depth + str(frame))
            self.children[frame]._render(depth + 1, lines)
