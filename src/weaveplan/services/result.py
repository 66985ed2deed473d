"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: Service operations return a ServiceResult and never raise for
a rejected definition or an unreachable position; those become a failed
result carrying the error's stable ``code``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from weaveplan.domain.errors import DefinitionError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_definition_error(cls, exc: DefinitionError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=dict(exc.detail))


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"plan"``, ``"check"``, ``"definitions"``).
        data: Operation-specific payload.
        warnings: Non-fatal issues, printed to stderr by the CLI.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata such as counts.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        op: str,
        data: dict[str, Any],
        *,
        warnings: list[str] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data, warnings=warnings or [], meta=meta)

    @classmethod
    def failure(
        cls,
        op: str,
        error: ServiceError | DefinitionError,
        *,
        data: dict[str, Any] | None = None,
    ) -> ServiceResult:
        if isinstance(error, DefinitionError):
            error = ServiceError.from_definition_error(error)
        return cls(ok=False, op=op, data=data or {}, error=error)
