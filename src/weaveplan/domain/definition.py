"""PluginDefinition — one immutable interception rule set per target type.

Lifecycle per process::

    construct -> validated -> (first witness query) -> active | inactive

Construction validates every point up front and raises on a malformed
definition; after that nothing in here raises. ``active`` and ``inactive``
are terminal.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from weaveplan.domain.elements import TypeDescription
from weaveplan.domain.errors import ConfigurationConflict, DefinitionError, InvalidPosition
from weaveplan.domain.matching import ClassMatch
from weaveplan.domain.points import (
    InterceptDirective,
    InterceptPoint,
    MethodInterceptPoint,
    resolve,
)
from weaveplan.domain.types import DefinitionState, PositionCheck, WitnessState
from weaveplan.domain.witness import TypeResolver, WitnessRequirement

logger = logging.getLogger(__name__)


class PluginDefinition:
    """Aggregates a class match, ordered intercept points and a witness gate.

    Parameters:
        name: Identifier used by the registry and in diagnostics.
        class_match: Which type this definition enhances.
        points: Intercept points; declaration order is precedence for
            diagnostics and plan order.
        witness: Activation gate. Defaults to always active.
        known_signatures: Optional declared members of the target, used to
            reject constraint positions no overload can satisfy.
        position_check: Whether such positions are ignored, logged or fatal.

    Raises:
        DefinitionError: Empty name, no points, or an exact duplicate point.
        ConfigurationConflict: Two points could match one concrete signature
            with different handlers.
        InvalidPosition: With ``known_signatures`` and ``position_check=error``,
            a position beyond every overload of the method.
    """

    def __init__(
        self,
        name: str,
        class_match: ClassMatch,
        points: Iterable[InterceptPoint],
        witness: WitnessRequirement | None = None,
        *,
        known_signatures: TypeDescription | None = None,
        position_check: PositionCheck = PositionCheck.ERROR,
    ) -> None:
        if not name or not name.strip():
            msg = "Plugin definition name must not be empty"
            raise DefinitionError(msg)
        self._name = name
        self._class_match = class_match
        self._points: tuple[InterceptPoint, ...] = tuple(points)
        self._witness = witness or WitnessRequirement()

        self._validate_points()
        if known_signatures is not None and position_check is not PositionCheck.OFF:
            self._validate_positions(known_signatures, position_check)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def class_match(self) -> ClassMatch:
        return self._class_match

    @property
    def target_name(self) -> str:
        return self._class_match.target_name

    @property
    def points(self) -> tuple[InterceptPoint, ...]:
        return self._points

    @property
    def witness(self) -> WitnessRequirement:
        return self._witness

    @property
    def state(self) -> DefinitionState:
        witness_state = self._witness.state
        if witness_state is WitnessState.PENDING:
            return DefinitionState.VALIDATED
        if witness_state is WitnessState.ACTIVE:
            return DefinitionState.ACTIVE
        return DefinitionState.INACTIVE

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_active(self, resolver: TypeResolver) -> bool:
        return self._witness.is_satisfied(resolver)

    def enhancement_plan(
        self,
        target_type: TypeDescription,
        resolver: TypeResolver,
    ) -> list[InterceptDirective]:
        """Ordered directives for *target_type*; empty when not applicable."""
        if not self._class_match.matches(target_type.name):
            return []
        if not self.is_active(resolver):
            return []
        return resolve(self._points, target_type.elements())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self._name,
            "target": self.target_name,
            "witness": sorted(self._witness.required_type_names),
            "state": str(self.state),
            "points": [
                {
                    "kind": str(p.kind),
                    "match": p.describe(),
                    "handler": p.handler_id,
                    "override_args": p.override_args,
                }
                for p in self._points
            ],
        }

    def __repr__(self) -> str:
        return (
            f"PluginDefinition(name={self._name!r}, target={self.target_name!r}, "
            f"points={len(self._points)})"
        )

    # ------------------------------------------------------------------
    # Construction-time validation
    # ------------------------------------------------------------------

    def _validate_points(self) -> None:
        if not self._points:
            msg = f"Plugin definition {self._name!r} declares no intercept points"
            raise DefinitionError(msg, definition=self._name)

        for i, first in enumerate(self._points):
            for j in range(i + 1, len(self._points)):
                second = self._points[j]
                if first == second:
                    msg = (
                        f"Plugin definition {self._name!r} declares intercept point "
                        f"{first.describe()} twice (#{i} and #{j})"
                    )
                    raise DefinitionError(msg, definition=self._name, points=[i, j])
                same_handler = first.handler_id == second.handler_id
                if same_handler and first.override_args == second.override_args:
                    continue
                if first.overlaps(second):
                    if same_handler:
                        msg = (
                            f"Plugin definition {self._name!r}: {first.describe()} (#{i}) and "
                            f"{second.describe()} (#{j}) can match the same signature with "
                            f"handler {first.handler_id} but disagree on override_args"
                        )
                    else:
                        msg = (
                            f"Plugin definition {self._name!r}: {first.describe()} -> "
                            f"{first.handler_id} (#{i}) and {second.describe()} -> "
                            f"{second.handler_id} (#{j}) can match the same signature"
                        )
                    raise ConfigurationConflict(
                        msg,
                        definition=self._name,
                        points=[i, j],
                        handlers=[first.handler_id, second.handler_id],
                    )

    def check_positions(self, known: TypeDescription) -> list[InvalidPosition]:
        """Find method points whose positions no declared overload can reach.

        Best effort: methods absent from *known* are not checked.
        """
        issues: list[InvalidPosition] = []
        for index, point in enumerate(self._points):
            if not isinstance(point, MethodInterceptPoint):
                continue
            max_position = point.pattern.max_position
            overloads = known.overloads(point.pattern.name)
            if max_position is None or not overloads:
                continue
            widest = max(o.arity for o in overloads)
            if max_position < widest:
                continue
            msg = (
                f"Plugin definition {self._name!r}: {point.describe()} (#{index}) "
                f"constrains argument {max_position} but no overload of "
                f"{point.pattern.name!r} takes more than {widest} arguments"
            )
            issues.append(
                InvalidPosition(
                    msg,
                    definition=self._name,
                    point=index,
                    position=max_position,
                    widest=widest,
                )
            )
        return issues

    def _validate_positions(self, known: TypeDescription, check: PositionCheck) -> None:
        issues = self.check_positions(known)
        if issues and check is PositionCheck.ERROR:
            raise issues[0]
        for issue in issues:
            logger.warning(issue.message)
