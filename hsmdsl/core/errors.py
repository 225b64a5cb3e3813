# hsmdsl/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Sequence


class DiagramError(Exception):
    """
    Base exception class for errors within the state diagram library.
    """


class DiagramSyntaxError(DiagramError):
    """
    Raised when the diagram text contains a line that cannot be recognized, or when a
    block or note is never closed. Parsing stops at the first such error.

    :param reason: Short description of the failure.
    :param line: 1-based line number in the source text.
    :param column: 1-based column within that line, 0 when unknown.
    :param text: The offending line as written.
    :param expected: Grammar terminals that would have been accepted at that position.
    """

    def __init__(
        self,
        reason: str,
        line: int,
        column: int = 0,
        text: str = "",
        expected: Sequence[str] = (),
    ) -> None:
        self.reason = reason
        self.line = line
        self.column = column
        self.text = text
        self.expected = sorted(set(expected))
        super().__init__(self._compose())

    def _compose(self) -> str:
        where = f"line {self.line}" if self.column <= 0 else f"line {self.line}, column {self.column}"
        message = f"{self.reason} at {where}"
        if self.text:
            message += f":\n    {self.text}"
            if self.column > 0:
                message += "\n    " + " " * (self.column - 1) + "^"
        if self.expected:
            message += "\nexpected one of: " + ", ".join(self.expected)
        return message


class ValidationError(DiagramError):
    """
    Raised when a parsed diagram violates a structural rule required by consumers.
    """
