"""Command-line tools for Backend RiskGuard."""
