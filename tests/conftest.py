# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import textwrap

import pytest


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "mermaid: mark test as exercising the Mermaid front end")


@pytest.fixture
def error_classes():
    """Provides a tuple of error classes for quick reference."""
    from hsmdsl.core.errors import DiagramError, DiagramSyntaxError, ValidationError

    return (DiagramError, DiagramSyntaxError, ValidationError)


@pytest.fixture
def scope():
    """A fresh name resolver."""
    from hsmdsl.runtime.scope import Scope

    return Scope()


@pytest.fixture
def reader():
    """A PlantUML line reader."""
    from hsmdsl.parser.reader import LineReader

    return LineReader()


@pytest.fixture
def validator():
    """A validator with the default rules."""
    from hsmdsl.core.validations import Validator

    return Validator()


@pytest.fixture
def assemble():
    """
    Build a Diagram from body lines, without @startuml/@enduml delimiters.
    """
    from hsmdsl.parser.reader import LineReader
    from hsmdsl.runtime.context import Context

    def _assemble(*lines):
        context = Context()
        context.process_lines(LineReader().read(list(enumerate(lines, start=1))))
        return context.diagram()

    return _assemble


@pytest.fixture
def plantuml():
    """
    Parse an indented PlantUML document and check that nothing follows @enduml.
    """
    from hsmdsl import parse_plantuml

    def _parse(text):
        diagram, remainder = parse_plantuml(textwrap.dedent(text))
        assert remainder == ""
        return diagram

    return _parse


@pytest.fixture
def mermaid():
    """Parse an indented Mermaid document."""
    from hsmdsl import parse_mermaid

    def _parse(text):
        diagram, remainder = parse_mermaid(textwrap.dedent(text))
        assert remainder == ""
        return diagram

    return _parse
