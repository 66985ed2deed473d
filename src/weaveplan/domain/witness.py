"""Witness requirement — feature-detection gate for a whole definition.

Evaluated at most once per process: the set of resolvable types cannot
meaningfully change once the host has started. Class loading is
concurrent, so the first evaluation runs under a lock and every later
caller reads the memoized boolean.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from weaveplan.domain.errors import DefinitionError
from weaveplan.domain.types import WitnessState

logger = logging.getLogger(__name__)

TypeResolver = Callable[[str], bool]


class WitnessRequirement:
    """Companion type names whose runtime presence activates a definition.

    Parameters:
        required_type_names: Witness type names. Empty means always active.
        require_all: When False (default) at least one witness must resolve;
            when True every witness must.
    """

    def __init__(
        self,
        required_type_names: Iterable[str] = (),
        *,
        require_all: bool = False,
    ) -> None:
        names = frozenset(required_type_names)
        if any(not n or not n.strip() for n in names):
            msg = "Witness type names must not be empty"
            raise DefinitionError(msg)
        self._names = names
        self._require_all = require_all
        self._lock = threading.Lock()
        self._satisfied: bool | None = None

    @property
    def required_type_names(self) -> frozenset[str]:
        return self._names

    @property
    def require_all(self) -> bool:
        return self._require_all

    @property
    def state(self) -> WitnessState:
        satisfied = self._satisfied
        if satisfied is None:
            return WitnessState.PENDING
        return WitnessState.ACTIVE if satisfied else WitnessState.INACTIVE

    def is_satisfied(self, resolver: TypeResolver) -> bool:
        """Evaluate once with *resolver*; later calls return the memo.

        The resolver passed on the first call is the only one ever used.
        """
        satisfied = self._satisfied
        if satisfied is not None:
            return satisfied
        with self._lock:
            if self._satisfied is None:
                self._satisfied = self._evaluate(resolver)
            return self._satisfied

    def _evaluate(self, resolver: TypeResolver) -> bool:
        if not self._names:
            return True
        # Sorted for a deterministic resolver call order.
        names = sorted(self._names)
        if self._require_all:
            result = all(self._resolves(resolver, n) for n in names)
        else:
            result = any(self._resolves(resolver, n) for n in names)
        logger.debug("Witness %s evaluated: %s", names, result)
        return result

    @staticmethod
    def _resolves(resolver: TypeResolver, name: str) -> bool:
        try:
            return bool(resolver(name))
        except Exception:
            logger.debug("Type resolver failed for %s", name, exc_info=True)
            return False

    def __repr__(self) -> str:
        return (
            f"WitnessRequirement({sorted(self._names)!r}, "
            f"require_all={self._require_all}, state={self.state.value!r})"
        )
