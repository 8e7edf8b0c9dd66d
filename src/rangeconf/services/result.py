"""ServiceResult and ServiceError — the contract between services and the CLI.

Services never let a domain failure escape as an exception.  Both error
tiers of the engine are folded into a :class:`ServiceError` here:

* a returned ``RangeError`` (bad data) becomes ``INVALID_CONFIGURATION``
  with the offending path, value and range description;
* a raised ``ConfigFatalError`` (bad program or schema) keeps its kind
  as the error code and its report detail.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from rangeconf.domain.errors import ConfigFatalError, FatalKind
from rangeconf.domain.ranges import RangeError, format_path


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_range_error(
        cls, err: RangeError, plain: Callable[[Any], Any] = lambda v: v
    ) -> ServiceError:
        """Describe a validation failure; ``plain`` makes the value serializable."""
        return cls(
            code=FatalKind.INVALID_CONFIGURATION.value,
            message=err.describe(),
            detail={
                "path": format_path(err.path),
                "value": plain(err.value),
                "range": err.range.description if err.range is not None else None,
            },
        )

    @classmethod
    def from_fatal(
        cls, exc: ConfigFatalError, plain: Callable[[Any], Any] = lambda v: v
    ) -> ServiceError:
        return cls(code=exc.kind.value, message=exc.report.message, detail=plain(exc.detail))


class ServiceResult(BaseModel):
    """Return type of every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"validate"``, ``"defaults"``, ``"diff"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata; ``meta["telemetry"]`` holds the span tree
            when ``--verbose`` is on.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, error: ServiceError) -> ServiceResult:
        return cls(ok=False, op=op, error=error)
