"""
API server package — HTTP interface to the risk engine.

Evaluates submitted events and exposes the caller-side stores (recent
analyses, blocklist). Delegates all scoring to the analysis engine.
"""
