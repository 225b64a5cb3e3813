"""hsmdsl: parser for PlantUML and Mermaid state diagrams

This package reads the textual state-diagram dialects of PlantUML and Mermaid and
produces a fully resolved, hierarchical Diagram ready for code generation.

Responsibilities:
    - Recognizing the diagram grammar one line at a time
    - Resolving loosely scoped, forward-referenced names into qualified paths
    - Collecting aliases, descriptions, notes, stereotypes and concurrency markers
    - Optional structural validation of the result

Interactions:
    - Client code through parse, parse_plantuml and parse_mermaid
    - lark for line grammar recognition
    - Logging system for diagnostics

Cross-cutting Concerns:
    Error Handling:
        - DiagramSyntaxError for the first unrecognized line, with position and expectations
        - ValidationError from the opt-in Validator

    Logging:
        - Module-level loggers, DEBUG for resolution, WARNING for dropped constructs
"""

from hsmdsl.core.diagram import Diagram
from hsmdsl.core.errors import DiagramError, DiagramSyntaxError, ValidationError
from hsmdsl.core.frames import Frame, FrameKind, StateId, TransitionId, state_id
from hsmdsl.core.stereotypes import Stereotype, StereotypeKind
from hsmdsl.core.validations import Validator
from hsmdsl.interfaces.types import Dialect
from hsmdsl.parser.dialects import parse, parse_mermaid, parse_plantuml

__all__ = [
    "Diagram",
    "DiagramError",
    "DiagramSyntaxError",
    "Dialect",
    "Frame",
    "FrameKind",
    "StateId",
    "Stereotype",
    "StereotypeKind",
    "TransitionId",
    "ValidationError",
    "Validator",
    "parse",
    "parse_mermaid",
    "parse_plantuml",
    "state_id",
]
