"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: public service operations return ServiceResult; exceptions
below the service layer are translated here, never in commands.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from simpledoc.errors import SimpleDocError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"check"``, ``"migrate"``).
        data: Operation-specific payload.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (repository root, docs root).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError(code=code, message=message, detail=detail or {}),
            meta=meta,
        )

    @classmethod
    def from_exception(cls, op: str, exc: SimpleDocError) -> ServiceResult:
        """Failure carrying the exception's code and single-line message."""
        message = " ".join(str(exc).split()) or exc.__class__.__name__
        return cls.failure(op, exc.code, message)
