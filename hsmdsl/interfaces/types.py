# hsmdsl/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Tuple

if TYPE_CHECKING:
    from hsmdsl.core.diagram import Diagram


class Dialect(Enum):
    PLANTUML = "plantuml"
    MERMAID = "mermaid"


# Result of parsing one diagram: the diagram and the text after it
ParseResult = Tuple["Diagram", str]

# Validation rule: returns the messages of every violation found
DiagramRule = Callable[["Diagram"], List[str]]
