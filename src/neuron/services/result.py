"""ServiceResult and ServiceError — what every service method hands back.

Expected outcomes that are not successes (nothing due, no match, provider
down) come back as ``ok=False`` results carrying an error code; commands
choose how to show them. Exceptions are reserved for programming errors.

Error codes in use: ``INVALID_PATH``, ``INVALID_RATING``, ``INVALID_STYLE``,
``NOT_FOUND``, ``STORAGE_ERROR``, ``PROVIDER_UNAVAILABLE``,
``PROVIDER_PROTOCOL_ERROR``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Machine-readable code, human message, and optional context."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    ``data`` is only meaningful when ``ok``; ``error`` is set exactly when
    it is not. ``warnings`` collects per-item problems that did not stop
    the operation, such as files skipped during sync.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error else None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build an ``ok=False`` result; keyword arguments become ``error.detail``."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
