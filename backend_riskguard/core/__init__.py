"""
Core utilities — shared errors and cross-cutting concerns.

Provides the typed exceptions used across the analysis engine, API server
and CLI.
"""

from backend_riskguard.core.exceptions import (
    ConfigurationError,
    ErrorKind,
    InvalidInputError,
    RiskEngineError,
)

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "InvalidInputError",
    "RiskEngineError",
]
