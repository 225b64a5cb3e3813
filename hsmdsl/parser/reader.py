# hsmdsl/parser/reader.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Turns the body of a diagram into line records.

Every physical line is stripped and handed to the line grammar. Composite
blocks are read recursively until their closing ``}``; note bodies are read
until ``end note``; styling blocks are skipped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional, Sequence, Tuple

from lark import Token, Transformer
from lark.exceptions import UnexpectedInput

from hsmdsl.core.errors import DiagramSyntaxError
from hsmdsl.core.frames import Frame
from hsmdsl.core.stereotypes import Stereotype
from hsmdsl.interfaces.types import Dialect
from hsmdsl.parser.grammar import LINE_PARSER
from hsmdsl.parser.lines import (
    Concurrent,
    Endpoint,
    FloatingNote,
    Ignored,
    IgnoredKind,
    Line,
    Name,
    Separator,
    StateBlock,
    StateDeclaration,
    StateNote,
    Transition,
    TransitionNote,
)

logger = logging.getLogger(__name__)

NumberedLine = Tuple[int, str]

_END_NOTE = re.compile(r"end\s+note\b", re.IGNORECASE)
_END_STYLE = re.compile(r"</style>", re.IGNORECASE)
_DOTTED = re.compile(r"\w+(?:\.\w+)*")
_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t"}


class _Follow(Enum):
    """What the reader must collect after an opening line."""

    NOTHING = auto()
    BLOCK = auto()
    NOTE = auto()
    SKINPARAM = auto()
    STYLE = auto()
    JSON = auto()


@dataclass
class _Parsed:
    line: Line
    follow: _Follow = _Follow.NOTHING
    depth: int = 0  # open braces still to close for skinparam/json blocks


@dataclass(frozen=True)
class _Binding:
    name: Name
    alias: Optional[str] = None


@dataclass(frozen=True)
class _EndpointSpec:
    name: Name
    marker: Optional[str]
    stereotype: Optional[Stereotype]


def unescape(quoted: str) -> str:
    """
    Strip the surrounding quotes of a quoted string and resolve its escapes
    (``\\\\``, ``\\"``, ``\\n`` and ``\\t``). Unknown escapes are kept as written.
    """
    body = quoted[1:-1]
    out: List[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(_ESCAPES.get(nxt, char + nxt))
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def clean_description(raw: str) -> str:
    """Drop the leading colon and surrounding spaces, and an outer ``""...""`` pair."""
    text = raw[1:].strip() if raw.startswith(":") else raw.strip()
    if text.startswith('""') and text.endswith('""') and len(text) > 4:
        text = text[2:-2]
    return text


def _names(parts: Iterable[str]) -> Name:
    return tuple(Frame.named(part) for part in parts)


def _pseudostate(marker: str, as_source: bool) -> Frame:
    if marker == "[H]":
        return Frame.HISTORY
    if marker == "[H*]":
        return Frame.DEEP_HISTORY
    return Frame.START if as_source else Frame.END


def _brace_depth(text: str) -> int:
    return text.count("{") - text.count("}")


class _LineTransformer(Transformer):
    """Builds line records from the parse tree of one line."""

    def plantuml_line(self, children):
        return children[0]

    def mermaid_line(self, children):
        return children[0]

    # names

    def dotted_name(self, children):
        return _names(str(token) for token in children)

    def scoped_name(self, children):
        (child,) = children
        if isinstance(child, Token):
            text = unescape(str(child))
            if _DOTTED.fullmatch(text):
                return _names(text.split("."))
            return (Frame.named(text),)
        return child

    def visual_first(self, children):
        visual, name = children
        return _Binding(name, unescape(str(visual)))

    def visual_last(self, children):
        name, visual = children
        return _Binding(name, unescape(str(visual)))

    def plain_binding(self, children):
        return _Binding(children[0])

    def stereotype(self, children):
        return Stereotype.parse(str(children[0]))

    def description(self, children):
        return clean_description(str(children[0]))

    # states

    def state_block(self, children):
        binding = children[0]
        closed = any(isinstance(child, Token) and child.type == "BLOCK_CLOSE" for child in children)
        block = StateBlock(name=binding.name, alias=binding.alias)
        return _Parsed(block, _Follow.NOTHING if closed else _Follow.BLOCK)

    def state_declaration(self, children):
        binding = children[0]
        stereotype = next((child for child in children[1:] if isinstance(child, Stereotype)), None)
        description = next((child for child in children[1:] if isinstance(child, str)), None)
        return _Parsed(
            StateDeclaration(
                name=binding.name,
                alias=binding.alias,
                stereotype=stereotype,
                description=description,
            )
        )

    def implicit_declaration(self, children):
        binding, description = children
        return _Parsed(
            StateDeclaration(name=binding.name, alias=binding.alias, description=description, keyword=False)
        )

    # transitions

    def bare_endpoint(self, children):
        return _EndpointSpec((), str(children[0]), None)

    def named_endpoint(self, children):
        name = children[0]
        marker = None
        stereotype = None
        for child in children[1:]:
            if isinstance(child, Stereotype):
                stereotype = child
            elif isinstance(child, Token) and child.type == "PSEUDOSTATE":
                marker = str(child)
        return _EndpointSpec(name, marker, stereotype)

    def transition(self, children):
        source, target = children[0], children[1]
        description = children[2] if len(children) > 2 else None
        return _Parsed(
            Transition(
                source=self._endpoint(source, as_source=True),
                target=self._endpoint(target, as_source=False),
                description=description,
            )
        )

    @staticmethod
    def _endpoint(written: _EndpointSpec, as_source: bool) -> Endpoint:
        pseudostate = None if written.marker is None else _pseudostate(written.marker, as_source)
        return Endpoint(name=written.name, pseudostate=pseudostate, stereotype=written.stereotype)

    # notes

    def floating_note(self, children):
        content, alias = children[0], children[1]
        return _Parsed(FloatingNote(content=unescape(str(content)), alias=str(alias)))

    def state_note(self, children):
        position, name = children[0], children[1]
        description = children[2] if len(children) > 2 else None
        note = StateNote(name=name, position=str(position).lower())
        if description is None:
            return _Parsed(note, _Follow.NOTE)
        note.content.append(description)
        return _Parsed(note)

    def link_note(self, children):
        note = TransitionNote()
        if not children:
            return _Parsed(note, _Follow.NOTE)
        note.content.append(children[0])
        return _Parsed(note)

    # everything else

    def concurrent(self, children):
        separator = Separator.BARS if str(children[0]) == "||" else Separator.DASHES
        return _Parsed(Concurrent(separator))

    def skinparam(self, children):
        depth = _brace_depth(str(children[0]))
        if depth > 0:
            return _Parsed(Ignored(IgnoredKind.SKINPARAM), _Follow.SKINPARAM, depth)
        return _Parsed(Ignored(IgnoredKind.SKINPARAM))

    def style(self, children):
        if _END_STYLE.search(str(children[0])):
            return _Parsed(Ignored(IgnoredKind.STYLE))
        return _Parsed(Ignored(IgnoredKind.STYLE), _Follow.STYLE)

    def json(self, children):
        depth = _brace_depth(str(children[0]))
        if depth > 0:
            return _Parsed(Ignored(IgnoredKind.JSON), _Follow.JSON, depth)
        return _Parsed(Ignored(IgnoredKind.JSON))

    def hide_directive(self, children):
        return _Parsed(Ignored(IgnoredKind.HIDE))

    def scale_directive(self, children):
        return _Parsed(Ignored(IgnoredKind.SCALE))

    def direction_directive(self, children):
        return _Parsed(Ignored(IgnoredKind.DIRECTION))


class _Cursor:
    """Position within the numbered lines of a diagram body."""

    def __init__(self, lines: Sequence[NumberedLine]) -> None:
        self._lines = lines
        self._index = 0

    def exhausted(self) -> bool:
        return self._index >= len(self._lines)

    def next(self) -> NumberedLine:
        line = self._lines[self._index]
        self._index += 1
        return line

    def last_number(self) -> int:
        return self._lines[-1][0] if self._lines else 0


class LineReader:
    """
    Reads a diagram body into a nested list of line records.

    :param dialect: Selects the dialect-specific line grammar.
    """

    def __init__(self, dialect: Dialect = Dialect.PLANTUML) -> None:
        self._dialect = dialect
        self._start = "mermaid_line" if dialect is Dialect.MERMAID else "plantuml_line"
        self._transformer = _LineTransformer()

    def read(self, lines: Sequence[NumberedLine]) -> List[Line]:
        """
        :param lines: ``(line number, text)`` pairs of the diagram body, numbered
            as in the full source text.
        :return: The top-level line records, with block bodies nested.
        :raises DiagramSyntaxError: On unrecognized lines and unterminated constructs.
        """
        return self._read_body(_Cursor(lines), opened_at=None)

    def parse_line(self, text: str, number: int = 1) -> Line:
        """Parse a single stripped line, ignoring any multi-line continuation."""
        return self._parse(text, number).line

    def _read_body(self, cursor: _Cursor, opened_at: Optional[NumberedLine]) -> List[Line]:
        result: List[Line] = []
        while not cursor.exhausted():
            number, raw = cursor.next()
            text = raw.strip()
            if not text or self._is_comment(text):
                continue
            if text == "}":
                if opened_at is not None:
                    return result
                raise DiagramSyntaxError("unmatched closing brace", number, 1, text)
            parsed = self._parse(text, number)
            self._collect(parsed, cursor, (number, text))
            result.append(parsed.line)
        if opened_at is not None:
            raise DiagramSyntaxError(
                f"block opened at line {opened_at[0]} is never closed",
                cursor.last_number() or opened_at[0],
                0,
                opened_at[1],
            )
        return result

    def _collect(self, parsed: _Parsed, cursor: _Cursor, opening: NumberedLine) -> None:
        if parsed.follow is _Follow.BLOCK:
            logger.debug(f"Reading block opened at line {opening[0]}")
            parsed.line.lines.extend(self._read_body(cursor, opened_at=opening))
        elif parsed.follow is _Follow.NOTE:
            parsed.line.content.extend(self._read_note(cursor, opening))
        elif parsed.follow is _Follow.STYLE:
            self._skip_until(cursor, opening, lambda text: bool(_END_STYLE.search(text)))
        elif parsed.follow in (_Follow.SKINPARAM, _Follow.JSON):
            self._skip_braces(cursor, opening, parsed.depth)

    def _read_note(self, cursor: _Cursor, opening: NumberedLine) -> List[str]:
        content: List[str] = []
        while not cursor.exhausted():
            _, raw = cursor.next()
            text = raw.strip()
            if _END_NOTE.match(text):
                return content
            content.append(text)
        raise DiagramSyntaxError(
            f"note opened at line {opening[0]} is never closed with 'end note'",
            cursor.last_number() or opening[0],
            0,
            opening[1],
        )

    def _skip_until(self, cursor: _Cursor, opening: NumberedLine, is_last) -> None:
        while not cursor.exhausted():
            _, raw = cursor.next()
            if is_last(raw):
                return
        raise DiagramSyntaxError(
            f"block opened at line {opening[0]} is never closed",
            cursor.last_number() or opening[0],
            0,
            opening[1],
        )

    def _skip_braces(self, cursor: _Cursor, opening: NumberedLine, depth: int) -> None:
        remaining = depth

        def closes(text: str) -> bool:
            nonlocal remaining
            remaining += _brace_depth(text)
            return remaining <= 0

        self._skip_until(cursor, opening, closes)

    def _is_comment(self, text: str) -> bool:
        return self._dialect is Dialect.PLANTUML and text.startswith("'")

    def _parse(self, text: str, number: int) -> _Parsed:
        try:
            tree = LINE_PARSER.parse(text, start=self._start)
        except UnexpectedInput as error:
            raise _syntax_error(error, text, number) from error
        return self._transformer.transform(tree)


def _syntax_error(error: UnexpectedInput, text: str, number: int) -> DiagramSyntaxError:
    column = getattr(error, "column", -1)
    if not isinstance(column, int) or column <= 0:
        column = len(text) + 1
    expected = getattr(error, "allowed", None) or getattr(error, "expected", None) or ()
    return DiagramSyntaxError(
        "unrecognized syntax",
        number,
        column,
        text,
        [_describe_terminal(name) for name in expected],
    )


def _describe_terminal(name: str) -> str:
    try:
        terminal = LINE_PARSER.get_terminal(name)
    except KeyError:
        return name
    if name.startswith("__"):
        return repr(terminal.pattern.value)
    return name.lstrip("_")
