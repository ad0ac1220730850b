"""
Application-level exceptions.

Domain exceptions with stable error codes so the API server and CLI can
report failures consistently. Only structurally invalid input and broken
configuration are errors; a failed checksum or an undefined travel speed is
a risk signal, never an exception.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    INVALID_CONFIGURATION = "invalid_configuration"


class RiskEngineError(Exception):
    """Base class for all risk engine errors."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InvalidInputError(RiskEngineError):
    """A required event field is missing or malformed; no result is produced."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, *, field: str | None = None, domain: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.domain = domain

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["field"] = self.field
        out["domain"] = self.domain
        return out


class ConfigurationError(RiskEngineError):
    """Threshold table, weights or override file cannot be used."""

    kind = ErrorKind.INVALID_CONFIGURATION
