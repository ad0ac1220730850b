"""
Structured logging for Backend RiskGuard.

get_logger() returns a structlog logger that renders JSON records with
event_type and a UTC timestamp. Card numbers and sender IDs are masked.
"""

from backend_riskguard.riskguard_logging.logger import get_logger, mask_identifier

__all__ = ["get_logger", "mask_identifier"]
