"""
Alerts — caller-side block decisions, location alerts and in-memory stores.

Consumes AnalysisResult values after evaluation; the engine itself never
writes to the blocklist.
"""

from backend_riskguard.alerts.engine import (
    AlertAction,
    AlertSeverity,
    AlertType,
    LocationAlert,
    blocking_identifier,
    derive_location_alert,
    should_block,
)
from backend_riskguard.alerts.stores import Blocklist, RecentAnalyses

__all__ = [
    "AlertAction",
    "AlertSeverity",
    "AlertType",
    "LocationAlert",
    "blocking_identifier",
    "derive_location_alert",
    "should_block",
    "Blocklist",
    "RecentAnalyses",
]
