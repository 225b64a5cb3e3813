# hsmdsl/runtime/scope.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Name resolution for hierarchical diagrams.

Names are often written before the block that declares them, or written
unqualified from a scope other than the one they belong to. The resolver
remembers, for every name, the enclosing path under which it was first bound
and sends later unqualified mentions of that name back into that scope.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from hsmdsl.core.frames import Frame, Frames
from hsmdsl.runtime.tree import Tree

logger = logging.getLogger(__name__)


class Scope:
    """
    Resolves written paths to fully qualified ones and records them in a Tree.
    """

    def __init__(self, tree: Optional[Tree] = None) -> None:
        self.tree = tree if tree is not None else Tree()
        self.context_resume: Dict[Frame, Frames] = {}

    def restore_context(self, enclosing: Sequence[Frame], written: Sequence[Frame]) -> Frames:
        """
        Qualify ``written`` against the remembered binding of its first segment, or
        against ``enclosing`` when there is none. A pseudostate written inside a
        block always belongs to that block.

        :param enclosing: Frames of the textual nesting the name appears in.
        :param written: The path as written, possibly a single name.
        :return: The fully qualified path.
        """
        if not written:
            return ()
        head = written[0]
        context: Optional[Frames] = None
        if not (head.is_pseudostate and enclosing):
            context = self.context_resume.get(head)
        prefix = context if context is not None else tuple(enclosing)
        return prefix + tuple(written)

    def save_context(self, path: Frames) -> None:
        """Remember the enclosing path of ``path``'s last segment, unless already known."""
        if not path:
            return
        self.context_resume.setdefault(path[-1], path[:-1])

    def insert(self, path: Frames) -> None:
        """
        Record ``path`` in the tree and remember the binding of each of its named
        prefixes. A trailing pseudostate is never remembered.
        """
        self.tree.insert(path)
        end = len(path) - 1 if path and path[-1].is_pseudostate else len(path)
        for i in range(1, end + 1):
            self.save_context(path[:i])

    def resume_or_insert(self, enclosing: Sequence[Frame], written: Sequence[Frame]) -> Frames:
        """
        Resolve a written path and make sure it exists in the hierarchy.

        :param enclosing: Frames of the textual nesting the name appears in.
        :param written: The path as written.
        :return: The fully qualified path now present in the tree.
        """
        resolved = self.restore_context(enclosing, written)
        self.insert(resolved)
        logger.debug(f"Resolved {_dotted(written)} in {_dotted(enclosing) or 'Root'} to {_dotted(resolved)}")
        return resolved

    def flatten(self) -> List[Frames]:
        return self.tree.flatten()


def _dotted(frames: Sequence[Frame]) -> str:
    return ".".join(str(frame) for frame in frames)
