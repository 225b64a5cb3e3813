# hsmdsl/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import List, Optional, Sequence

from hsmdsl.core.diagram import Diagram
from hsmdsl.core.errors import ValidationError
from hsmdsl.core.frames import FrameKind, StateId
from hsmdsl.interfaces.types import DiagramRule


class Validator:
    """
    Checks a parsed diagram against the structural rules a code generator relies
    on. Parsing never runs these checks; callers opt in.

    :param rules: Rules to apply instead of the default ones.
    """

    def __init__(self, rules: Optional[Sequence[DiagramRule]] = None) -> None:
        self._rules_engine = _ValidationRulesEngine(rules)

    def validate_diagram(self, diagram: Diagram) -> None:
        """
        :param diagram: The diagram to validate.
        :raises ValidationError: With the first violation found.
        """
        errors = self._rules_engine.collect(diagram)
        if errors:
            raise ValidationError(errors[0])

    def collect_errors(self, diagram: Diagram) -> List[str]:
        """
        :param diagram: The diagram to validate.
        :return: Every violation found, empty when the diagram is valid.
        """
        return self._rules_engine.collect(diagram)


class _ValidationRulesEngine:
    """
    Internal engine applying a list of rules and gathering their messages.
    """

    def __init__(self, rules: Optional[Sequence[DiagramRule]] = None) -> None:
        self._rules: List[DiagramRule] = list(rules) if rules is not None else _DefaultValidationRules.all()

    def collect(self, diagram: Diagram) -> List[str]:
        errors: List[str] = []
        for rule in self._rules:
            errors.extend(rule(diagram))
        return errors


def _describe(state: StateId) -> str:
    return "the special state Root" if state.is_root else f"state {state}"


def _has_child_of_kind(diagram: Diagram, state: StateId, kind: FrameKind) -> bool:
    return any(child.last.kind is kind for child in diagram.state_children.get(state, ()))


class _DefaultValidationRules:
    """
    Built-in rules: composite states entered or left by transitions need the
    matching pseudostates, pseudostates are leaves and the root has no outgoing
    transitions.
    """

    @classmethod
    def all(cls) -> List[DiagramRule]:
        return [
            cls.validate_pseudostates_are_leaves,
            cls.validate_exit_needs_end,
            cls.validate_entry_needs_start,
            cls.validate_root_has_no_exit,
        ]

    @staticmethod
    def validate_pseudostates_are_leaves(diagram: Diagram) -> List[str]:
        errors = []
        for state in diagram.state_children:
            for frame in state.frames:
                if frame.is_pseudostate:
                    errors.append(f"the special state {frame.kind.name.title().replace('_', '')} cannot have children")
                    break
        return errors

    @staticmethod
    def validate_exit_needs_end(diagram: Diagram) -> List[str]:
        return [
            f"{_describe(state)} must contain an End state"
            for state in diagram.state_children
            if diagram.state_transition_out.get(state) and not _has_child_of_kind(diagram, state, FrameKind.END)
        ]

    @staticmethod
    def validate_entry_needs_start(diagram: Diagram) -> List[str]:
        return [
            f"{_describe(state)} must contain a Start state"
            for state in diagram.state_children
            if diagram.state_transition_in.get(state) and not _has_child_of_kind(diagram, state, FrameKind.START)
        ]

    @staticmethod
    def validate_root_has_no_exit(diagram: Diagram) -> List[str]:
        if diagram.state_transition_out.get(StateId()):
            return ["no transition can lead out of the special state Root"]
        return []
