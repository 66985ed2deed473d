"""Tests for PluginDefinition — validation, activation and enhancement plans."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from weaveplan.domain.definition import PluginDefinition
from weaveplan.domain.elements import TypeDescription, constructor, method
from weaveplan.domain.errors import ConfigurationConflict, DefinitionError, InvalidPosition
from weaveplan.domain.matching import by_name, named
from weaveplan.domain.points import ConstructorInterceptPoint, MethodInterceptPoint
from weaveplan.domain.types import DefinitionState, ElementKind, PositionCheck
from weaveplan.domain.witness import WitnessRequirement


def _always(_name: str) -> bool:
    return True


def _never(_name: str) -> bool:
    return False


def _insert_definition(**kwargs: Any) -> PluginDefinition:
    return PluginDefinition(
        "x-insert",
        by_name("X"),
        [MethodInterceptPoint(named("insert").taking(2, "Encoder"), "H1")],
        **kwargs,
    )


class TestConstructionValidation:
    def test_conflicting_handlers_rejected(self) -> None:
        with pytest.raises(ConfigurationConflict) as excinfo:
            PluginDefinition(
                "conflict",
                by_name("X"),
                [
                    MethodInterceptPoint(named("insert").taking(2, "Encoder"), "H1"),
                    MethodInterceptPoint(named("insert").taking(0, "java.util.List"), "H2"),
                ],
            )
        assert excinfo.value.detail["handlers"] == ["H1", "H2"]
        assert excinfo.value.detail["points"] == [0, 1]
        assert excinfo.value.code == "CONFIGURATION_CONFLICT"

    def test_same_pattern_different_handler_is_a_conflict(self) -> None:
        with pytest.raises(ConfigurationConflict):
            PluginDefinition(
                "conflict",
                by_name("X"),
                [
                    MethodInterceptPoint(named("find"), "H1"),
                    MethodInterceptPoint(named("find"), "H2"),
                ],
            )

    def test_overlapping_wildcard_constructors_conflict(self) -> None:
        with pytest.raises(ConfigurationConflict):
            PluginDefinition(
                "ctors",
                by_name("X"),
                [ConstructorInterceptPoint("H1"), ConstructorInterceptPoint("H2")],
            )

    def test_disjoint_overloads_with_different_handlers_allowed(self) -> None:
        definition = PluginDefinition(
            "group",
            by_name("X"),
            [
                MethodInterceptPoint(named("group").taking(1, "boolean"), "H1"),
                MethodInterceptPoint(named("group").taking(1, "com.mongodb.DBObject"), "H2"),
            ],
        )
        assert len(definition.points) == 2

    def test_overlap_with_same_handler_allowed(self) -> None:
        definition = PluginDefinition(
            "aggregate",
            by_name("X"),
            [
                MethodInterceptPoint(named("aggregate").taking(2, "RP"), "H"),
                MethodInterceptPoint(named("aggregate").taking(1, "RP"), "H"),
            ],
        )
        assert len(definition.points) == 2

    def test_overlap_with_same_handler_different_override_args_conflicts(self) -> None:
        with pytest.raises(ConfigurationConflict, match="override_args") as excinfo:
            PluginDefinition(
                "insert",
                by_name("X"),
                [
                    MethodInterceptPoint(named("insert"), "H1"),
                    MethodInterceptPoint(named("insert").taking(0, "A"), "H1", override_args=True),
                ],
            )
        assert excinfo.value.detail["points"] == [0, 1]

    def test_disjoint_points_may_differ_on_override_args(self) -> None:
        definition = PluginDefinition(
            "insert",
            by_name("X"),
            [
                MethodInterceptPoint(named("insert").taking(0, "A"), "H1"),
                MethodInterceptPoint(named("insert").taking(0, "B"), "H1", override_args=True),
            ],
        )
        target = TypeDescription("X", methods=(method("insert", "A"), method("insert", "B")))
        plan = definition.enhancement_plan(target, _always)
        assert [(d.element.param_types, d.override_args) for d in plan] == [
            (("A",), False),
            (("B",), True),
        ]

    def test_exact_duplicate_point_rejected(self) -> None:
        point = MethodInterceptPoint(named("drop"), "H")
        with pytest.raises(DefinitionError, match="twice"):
            PluginDefinition("dup", by_name("X"), [point, MethodInterceptPoint(named("drop"), "H")])

    def test_no_points_rejected(self) -> None:
        with pytest.raises(DefinitionError, match="no intercept points"):
            PluginDefinition("empty", by_name("X"), [])

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(DefinitionError):
            PluginDefinition("", by_name("X"), [ConstructorInterceptPoint("H")])


class TestPositionCheck:
    known = TypeDescription(
        "X",
        methods=(method("insert", "a", "b"), method("insert", "a")),
    )

    def test_position_beyond_every_overload_rejected(self) -> None:
        with pytest.raises(InvalidPosition) as excinfo:
            _insert_definition(known_signatures=self.known)
        assert excinfo.value.detail["position"] == 2
        assert excinfo.value.detail["widest"] == 2

    def test_warn_mode_logs_and_keeps_point(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="weaveplan"):
            definition = _insert_definition(
                known_signatures=self.known, position_check=PositionCheck.WARN
            )
        assert len(definition.points) == 1
        assert "constrains argument 2" in caplog.text

    def test_off_mode_skips_check(self) -> None:
        definition = _insert_definition(
            known_signatures=self.known, position_check=PositionCheck.OFF
        )
        assert definition.check_positions(self.known)

    def test_reachable_position_passes(self) -> None:
        known = TypeDescription("X", methods=(method("insert", "a", "b", "Encoder"),))
        assert _insert_definition(known_signatures=known).check_positions(known) == []

    def test_unknown_method_not_checked(self) -> None:
        known = TypeDescription("X", methods=(method("update", "a"),))
        assert _insert_definition(known_signatures=known).check_positions(known) == []


class TestEnhancementPlan:
    def test_insert_pinned_on_encoder_position(self) -> None:
        target = TypeDescription(
            "X",
            methods=(method("insert", "a", "b", "Encoder"), method("insert", "a", "b")),
        )
        directives = _insert_definition().enhancement_plan(target, _always)

        assert len(directives) == 1
        (directive,) = directives
        assert directive.element_kind is ElementKind.METHOD
        assert directive.element.ref == "insert/3"
        assert directive.handler_id == "H1"

    def test_unlisted_method_names_yield_nothing(self) -> None:
        target = TypeDescription("X", methods=(method("getName"), method("drop", "a", "b", "c")))
        assert _insert_definition().enhancement_plan(target, _always) == []

    def test_other_type_yields_nothing(self) -> None:
        target = TypeDescription("Y", methods=(method("insert", "a", "b", "Encoder"),))
        assert _insert_definition().enhancement_plan(target, _always) == []

    def test_unresolvable_witness_yields_nothing(self) -> None:
        definition = _insert_definition(witness=WitnessRequirement(["com.example.Witness"]))
        target = TypeDescription("X", methods=(method("insert", "a", "b", "Encoder"),))
        assert definition.class_match.matches("X")
        assert definition.enhancement_plan(target, _never) == []
        assert definition.state is DefinitionState.INACTIVE

    def test_constructor_and_method_plan(self) -> None:
        definition = PluginDefinition(
            "mixed",
            by_name("X"),
            [
                ConstructorInterceptPoint("ctor"),
                MethodInterceptPoint(named("find"), "finder"),
            ],
        )
        target = TypeDescription(
            "X",
            constructors=(constructor(), constructor("java.lang.String")),
            methods=(method("find"), method("find", "q")),
        )
        plan = definition.enhancement_plan(target, _always)
        assert [(d.element_kind, d.element.ref, d.handler_id) for d in plan] == [
            (ElementKind.CONSTRUCTOR, "<init>/0", "ctor"),
            (ElementKind.CONSTRUCTOR, "<init>/1", "ctor"),
            (ElementKind.METHOD, "find/0", "finder"),
            (ElementKind.METHOD, "find/1", "finder"),
        ]


class TestState:
    def test_validated_until_first_query(self) -> None:
        definition = _insert_definition(witness=WitnessRequirement(["w.W"]))
        assert definition.state is DefinitionState.VALIDATED
        assert definition.is_active(_always) is True
        assert definition.state is DefinitionState.ACTIVE

    def test_active_is_terminal(self) -> None:
        definition = _insert_definition(witness=WitnessRequirement(["w.W"]))
        definition.is_active(_always)
        assert definition.is_active(_never) is True

    def test_to_dict(self) -> None:
        data = _insert_definition().to_dict()
        assert data["name"] == "x-insert"
        assert data["target"] == "X"
        assert data["witness"] == []
        assert data["state"] == "validated"
        assert data["points"] == [
            {"kind": "method", "match": "insert[2=Encoder]", "handler": "H1", "override_args": False}
        ]
