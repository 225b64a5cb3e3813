# tests/unit/test_diagram.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from hsmdsl.core.diagram import Diagram
from hsmdsl.core.frames import Frame, StateId, state_id


def test_default_diagram_is_empty():
    assert Diagram().is_empty()


def test_floating_note_alone_is_not_empty():
    assert not Diagram(note=["hello"]).is_empty()


def test_queries(assemble):
    diagram = assemble("[*] --> B", "B --> A", "state B {", "  [*] --> C", "}")
    assert diagram.states() == [
        state_id(Frame.START),
        state_id("A"),
        state_id("B"),
        state_id("B", Frame.START),
        state_id("B", "C"),
    ]
    assert diagram.children_of() == [state_id(Frame.START), state_id("A"), state_id("B")]
    assert diagram.children_of(state_id("B")) == [state_id("B", Frame.START), state_id("B", "C")]
    assert diagram.children_of(state_id("A")) == []
    assert [str(t) for t in diagram.transitions()] == ["[*] --> B", "B --> A", "B.[*] --> B.C"]
    assert StateId() not in diagram.state_parent
