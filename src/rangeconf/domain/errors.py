"""Fatal error reporting for programmer and schema mismatches.

Data that does not fit a range is reported as a returned ``RangeError``
value (see :mod:`rangeconf.domain.ranges`).  Everything in this module is
the other tier: conditions that indicate a bug in the calling code or the
schema itself.  They are raised immediately and never recovered internally.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, NoReturn

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class FatalKind(StrEnum):
    """Closed set of fatal conditions."""

    NOT_A_MAP = "NOT_A_MAP"
    UNKNOWN_SCHEMA_KEY = "UNKNOWN_SCHEMA_KEY"
    MISSING_PROFILE = "MISSING_PROFILE"
    UNKNOWN_ACCESS_PATH = "UNKNOWN_ACCESS_PATH"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    DUPLICATE_SCHEMA_KEY = "DUPLICATE_SCHEMA_KEY"
    INVALID_SCHEMA_ELEMENT = "INVALID_SCHEMA_ELEMENT"
    FOLD_PRECONDITION = "FOLD_PRECONDITION"


class FatalReport(BaseModel):
    """Structured payload of a fatal condition.

    Attributes:
        kind: Which fatal condition occurred.
        source: Name of the operation that reported it (e.g. ``"apply_profiles"``).
        message: Human-readable description.
        detail: Free-form fields identifying the offending input.
    """

    model_config = {"frozen": True}

    kind: FatalKind
    source: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ConfigFatalError(Exception):
    """Raised by :func:`report`. Carries the :class:`FatalReport`."""

    def __init__(self, report: FatalReport) -> None:
        super().__init__(f"{report.source}: {report.message}")
        self.report = report

    @property
    def kind(self) -> FatalKind:
        return self.report.kind

    @property
    def detail(self) -> dict[str, Any]:
        return self.report.detail


def report(kind: FatalKind, source: str, message: str, **detail: Any) -> NoReturn:
    """Report a fatal condition. Never returns.

    Examples:
        >>> report(FatalKind.MISSING_PROFILE, "apply_profiles", "no such profile", name="x")
        Traceback (most recent call last):
        ...
        rangeconf.domain.errors.ConfigFatalError: apply_profiles: no such profile
    """
    payload = FatalReport(kind=kind, source=source, message=message, detail=detail)
    logger.debug("%s [%s]: %s", source, kind.value, message)
    raise ConfigFatalError(payload)
