# hsmdsl/parser/dialects.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Front ends for the supported diagram dialects.

Both front ends locate the diagram body, number its lines as they appear in
the full text, and hand them to the line reader and the assembler.
"""

from __future__ import annotations

import html
import logging
import re
from typing import List, Tuple

from hsmdsl.core.diagram import Diagram
from hsmdsl.core.errors import DiagramSyntaxError
from hsmdsl.interfaces.types import Dialect, ParseResult
from hsmdsl.parser.reader import LineReader, NumberedLine
from hsmdsl.runtime.context import Context

logger = logging.getLogger(__name__)

_START_UML = re.compile(r"@startuml\b")
_END_UML = re.compile(r"@enduml\b")
_MERMAID_HEADER = re.compile(r"stateDiagram(?:-v2)?\b")
_FRONT_MATTER = "---"
_MERMAID_COMMENT = "%%"


def _assemble(lines: List[NumberedLine], dialect: Dialect) -> Diagram:
    records = LineReader(dialect).read(lines)
    context = Context()
    context.process_lines(records)
    return context.diagram()


def parse_plantuml(text: str) -> ParseResult:
    """
    Parse one ``@startuml`` ... ``@enduml`` diagram.

    :param text: Source text; only whitespace may precede ``@startuml``.
    :return: The diagram and the text following ``@enduml`` and its trailing whitespace.
    :raises DiagramSyntaxError: On missing delimiters or unrecognized lines.
    """
    physical = text.splitlines(keepends=True)
    index = 0
    while index < len(physical) and not physical[index].strip():
        index += 1
    if index == len(physical) or not _START_UML.match(physical[index].strip()):
        number = min(index, max(len(physical) - 1, 0)) + 1
        found = physical[index].strip() if index < len(physical) else ""
        raise DiagramSyntaxError("expected @startuml", number, 1, found, ["@startuml"])

    body: List[NumberedLine] = []
    for number in range(index + 2, len(physical) + 1):
        line = physical[number - 1]
        if _END_UML.match(line.strip()):
            consumed = sum(len(previous) for previous in physical[:number])
            remainder = line.strip()[len("@enduml") :].lstrip() + text[consumed:]
            return _assemble(body, Dialect.PLANTUML), remainder.lstrip()
        body.append((number, line.rstrip("\r\n")))
    raise DiagramSyntaxError("expected @enduml before end of input", len(physical), 0, "", ["@enduml"])


def _strip_mermaid_comment(line: str) -> str:
    position = line.find(_MERMAID_COMMENT)
    if position >= 0:
        line = line[:position]
    return html.unescape(line)


def parse_mermaid(text: str) -> ParseResult:
    """
    Parse a Mermaid ``stateDiagram-v2`` diagram. The body runs to the end of the
    text, so the remainder is always empty.

    :param text: Source text, optionally starting with ``---`` front matter.
    :return: The diagram and an empty remainder.
    :raises DiagramSyntaxError: On a missing header or unrecognized lines.
    """
    physical = [line.rstrip("\r\n") for line in text.splitlines()]
    numbered: List[Tuple[int, str]] = [(i + 1, line) for i, line in enumerate(physical)]
    cursor = 0

    def skip_blank(position: int) -> int:
        while position < len(numbered) and not _strip_mermaid_comment(numbered[position][1]).strip():
            position += 1
        return position

    cursor = skip_blank(cursor)
    if cursor == len(numbered):
        return Diagram(), ""

    if numbered[cursor][1].strip() == _FRONT_MATTER:
        opened = numbered[cursor][0]
        cursor += 1
        while cursor < len(numbered) and numbered[cursor][1].strip() != _FRONT_MATTER:
            cursor += 1
        if cursor == len(numbered):
            raise DiagramSyntaxError("front matter is never closed with '---'", opened, 0, _FRONT_MATTER)
        logger.debug(f"Skipped front matter on lines {opened} to {numbered[cursor][0]}")
        cursor = skip_blank(cursor + 1)
        if cursor == len(numbered):
            return Diagram(), ""

    number, header = numbered[cursor]
    header = _strip_mermaid_comment(header).strip()
    if not _MERMAID_HEADER.match(header):
        raise DiagramSyntaxError("expected stateDiagram-v2 header", number, 1, header, ["stateDiagram-v2"])
    body = [(n, _strip_mermaid_comment(line)) for n, line in numbered[cursor + 1 :]]
    return _assemble(body, Dialect.MERMAID), ""


def parse(text: str, dialect: Dialect = Dialect.PLANTUML) -> ParseResult:
    """
    Parse ``text`` with the front end for ``dialect``.

    :raises DiagramSyntaxError: If the text is not a valid diagram.
    """
    if dialect is Dialect.MERMAID:
        return parse_mermaid(text)
    return parse_plantuml(text)
