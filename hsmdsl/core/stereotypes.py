# hsmdsl/core/stereotypes.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StereotypeKind(Enum):
    START = "start"
    CHOICE = "choice"
    FORK = "fork"
    JOIN = "join"
    END = "end"
    SDL_RECEIVE = "sdlreceive"
    ENTRY_POINT = "entryPoint"
    EXIT_POINT = "exitPoint"
    INPUT_PIN = "inputPin"
    OUTPUT_PIN = "outputPin"
    EXPANSION_INPUT = "expansionInput"
    EXPANSION_OUTPUT = "expansionOutput"
    OTHER = ""  # anything not listed above, kept verbatim


_BY_LOWERED = {kind.value.lower(): kind for kind in StereotypeKind if kind is not StereotypeKind.OTHER}


@dataclass(frozen=True)
class Stereotype:
    """
    A ``<<stereotype>>`` attached to a state. Recognized names are stored with their
    canonical spelling; unrecognized ones keep the text as written.
    """

    kind: StereotypeKind
    text: str

    @classmethod
    def of(cls, kind: StereotypeKind) -> Stereotype:
        if kind is StereotypeKind.OTHER:
            raise ValueError("OTHER stereotypes need their text; use Stereotype.other()")
        return cls(kind, kind.value)

    @classmethod
    def other(cls, text: str) -> Stereotype:
        return cls(StereotypeKind.OTHER, text)

    @classmethod
    def parse(cls, text: str) -> Stereotype:
        """
        Interpret a stereotype name, with or without its ``<<`` ``>>`` delimiters.

        :param text: The stereotype as written, e.g. ``<<Choice>>`` or ``fork``.
        :return: The matching stereotype, or an OTHER stereotype carrying the text.
        """
        name = text.strip()
        if name.startswith("<<") and name.endswith(">>"):
            name = name[2:-2].strip()
        kind = _BY_LOWERED.get(name.lower())
        if kind is None:
            return cls.other(name)
        return cls.of(kind)

    @property
    def is_other(self) -> bool:
        return self.kind is StereotypeKind.OTHER

    def __str__(self) -> str:
        return f"<<{self.text}>>"
