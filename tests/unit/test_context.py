# tests/unit/test_context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging

from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from hsmdsl.core.frames import Frame, StateId, TransitionId, state_id
from hsmdsl.core.stereotypes import Stereotype, StereotypeKind
from hsmdsl.parser.lines import Endpoint, StateDeclaration, Transition
from hsmdsl.runtime.context import Context, StateAliased, TransitionCreated

ROOT = StateId()


def test_empty_context_builds_empty_diagram():
    assert Context().diagram().is_empty()


def test_simple_transition(assemble):
    diagram = assemble("[*] --> A", "A --> [*]")
    assert diagram.state_parent == {
        state_id(Frame.START): ROOT,
        state_id(Frame.END): ROOT,
        state_id("A"): ROOT,
    }
    assert diagram.state_children == {ROOT: {state_id(Frame.START), state_id(Frame.END), state_id("A")}}
    enter = TransitionId(state_id(Frame.START), state_id("A"))
    leave = TransitionId(state_id("A"), state_id(Frame.END))
    assert diagram.transition_from == {enter: state_id(Frame.START), leave: state_id("A")}
    assert diagram.transition_to == {enter: state_id("A"), leave: state_id(Frame.END)}
    assert diagram.state_transition_out == {state_id(Frame.START): {enter}, state_id("A"): {leave}}
    assert diagram.state_transition_in == {state_id("A"): {enter}, state_id(Frame.END): {leave}}


def test_redeclaration_is_idempotent(assemble):
    once = assemble("state A", "A --> B")
    twice = assemble("state A", "state A", "A --> B", "A --> B")
    assert once == twice
    assert len(twice.transition_from) == 1


def test_labels_distinguish_transitions(assemble):
    diagram = assemble("A --> B", "A --> B : go")
    assert diagram.state_transition_out[state_id("A")] == {
        TransitionId(state_id("A"), state_id("B")),
        TransitionId(state_id("A"), state_id("B"), "go"),
    }


def test_forward_reference_resolves_into_later_block(assemble):
    diagram = assemble("A --> B.C", "state B {", "  state C", "}")
    assert diagram.state_parent[state_id("B", "C")] == state_id("B")
    assert diagram.state_children[state_id("B")] == {state_id("B", "C")}
    assert diagram.transition_to[TransitionId(state_id("A"), state_id("B", "C"))] == state_id("B", "C")


def test_history_reentry_from_inside_and_outside(assemble):
    diagram = assemble(
        "state State3 {",
        "  State1 --> State2",
        "  State2 --> [H]",
        "}",
        "X --> State3[H]",
    )
    history = state_id("State3", Frame.HISTORY)
    assert diagram.state_parent[history] == state_id("State3")
    assert diagram.state_transition_in[history] == {
        TransitionId(state_id("State3", "State2"), history),
        TransitionId(state_id("X"), history),
    }


def test_history_at_top_level_belongs_to_root(assemble):
    diagram = assemble("S --> [H]")
    assert diagram.state_parent[state_id(Frame.HISTORY)] == ROOT


def test_reopened_composite_resumes_nested_scope(assemble):
    diagram = assemble(
        "state NotShooting {",
        "  state Configuring {",
        "  }",
        "}",
        "state Configuring {",
        "  A --> B",
        "}",
    )
    assert diagram.state_children[state_id("NotShooting", "Configuring")] == {
        state_id("NotShooting", "Configuring", "A"),
        state_id("NotShooting", "Configuring", "B"),
    }
    assert state_id("Configuring") not in diagram.state_parent


def test_aliased_block_pushes_its_scope(assemble):
    diagram = assemble('state "Long" as L {', "  X --> Y", "}")
    assert diagram.state_alias == {state_id("L"): "Long"}
    assert diagram.state_children[state_id("L")] == {state_id("L", "X"), state_id("L", "Y")}


def test_concurrency_marks_enclosing_composite(assemble):
    diagram = assemble(
        "--",
        "state Active {",
        "  [*] --> A",
        "  --",
        "  [*] --> B",
        "}",
    )
    assert diagram.state_children_are_concurrent == {state_id("Active")}
    assert diagram.state_children[state_id("Active")] == {
        state_id("Active", Frame.START),
        state_id("Active", "A"),
        state_id("Active", "B"),
    }


def test_top_level_concurrency_has_no_effect(assemble):
    assert assemble("||").is_empty()


def test_first_alias_wins(assemble):
    diagram = assemble('state "First" as A', 'state "Second" as A')
    assert diagram.state_alias == {state_id("A"): "First"}


def test_descriptions_and_notes_accumulate(assemble):
    diagram = assemble(
        "A : one",
        "A : two",
        "note left of A : first",
        "note right of A",
        "  second",
        "  third",
        "end note",
    )
    assert diagram.state_description == {state_id("A"): ["one", "two"]}
    assert diagram.state_note == {state_id("A"): ["first", "second", "third"]}


def test_stereotypes_from_declarations_and_endpoints(assemble):
    diagram = assemble(
        "state F <<fork>>",
        'state "Choice" as C <<choice>>',
        "[*] --> F",
        "F --> J <<join>>",
        "state F <<end>>",
    )
    assert diagram.state_stereotype == {
        state_id("C"): Stereotype.of(StereotypeKind.CHOICE),
        state_id("F"): Stereotype.of(StereotypeKind.FORK),
        state_id("J"): Stereotype.of(StereotypeKind.JOIN),
    }
    assert diagram.state_alias == {state_id("C"): "Choice"}


def test_link_note_attaches_to_latest_transition(assemble):
    diagram = assemble(
        "A --> B",
        "state C {",
        "  X --> Y : inner",
        "}",
        "note on link",
        "  about inner",
        "end note",
    )
    inner = TransitionId(state_id("C", "X"), state_id("C", "Y"), "inner")
    assert diagram.transition_note == {inner: ["about inner"]}


def test_link_note_without_transition_is_dropped(assemble, caplog):
    with caplog.at_level(logging.WARNING, logger="hsmdsl.runtime.context"):
        diagram = assemble("note on link : orphan")
    assert diagram.is_empty()
    assert "no transition" in caplog.text


def test_floating_note_does_not_create_states(assemble):
    diagram = assemble("state foo", 'note "This is a floating note" as N1')
    assert diagram.note == ["This is a floating note"]
    assert list(diagram.state_parent) == [state_id("foo")]


def test_maps_are_keyed_in_identifier_order(assemble):
    diagram = assemble("Z --> A", "M --> [*]", "[*] --> Z")
    assert list(diagram.state_parent) == sorted(diagram.state_parent)
    assert list(diagram.transition_from) == sorted(diagram.transition_from)


def test_process_line_records_facts():
    context = Context()
    context.process_line(StateDeclaration(name=(Frame.named("A"),), alias="Alpha"))
    context.process_line(Transition(Endpoint((Frame.named("A"),)), Endpoint(pseudostate=Frame.END)))
    assert context.facts == (
        StateAliased(state_id("A"), "Alpha"),
        TransitionCreated(TransitionId(state_id("A"), state_id(Frame.END))),
    )


def test_process_line_rejects_unknown_records():
    with pytest.raises(TypeError):
        Context().process_line("state A")


_names = st.sampled_from(["A", "B", "C", "D", "E"])
_endpoints = st.one_of(_names, st.just("[*]"), st.builds(lambda a, b: f"{a}.{b}", _names, _names))


@pytest.mark.property
@settings(max_examples=50, deadline=None)
@given(pairs=st.lists(st.tuples(_endpoints, _endpoints), max_size=12))
def test_hierarchy_and_transitions_stay_consistent(pairs):
    from hsmdsl.parser.reader import LineReader

    context = Context()
    lines = [(number, f"{source} --> {target}") for number, (source, target) in enumerate(pairs, start=1)]
    context.process_lines(LineReader().read(lines))
    diagram = context.diagram()

    for child, parent in diagram.state_parent.items():
        assert child in diagram.state_children[parent]
        assert child.parent == parent
    for parent, children in diagram.state_children.items():
        for child in children:
            assert diagram.state_parent[child] == parent
    for transition, source in diagram.transition_from.items():
        assert source == transition.source
        assert diagram.transition_to[transition] == transition.target
        assert source in diagram.state_parent
        assert transition.target in diagram.state_parent
        assert transition in diagram.state_transition_out[source]
        assert transition in diagram.state_transition_in[transition.target]
