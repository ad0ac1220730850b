"""
Backend RiskGuard — deterministic risk scoring for fraud-monitoring events.

Scores card transactions, OTP messages, URLs, phishing submissions, generic
transactions and geospatial transactions with explainable rule-based signal
analyzers. Modular architecture with clear separation between the analysis
engine, caller-side stores and alerts, and the API server.
"""

__version__ = "0.1.0"
