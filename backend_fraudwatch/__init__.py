"""
Backend FraudWatch — payment transaction ingestion and fraud flagging.

Records incoming transactions in an in-memory ledger, scores each one against
recent and full history, keeps the resulting fraud reports, and emails a
reviewer when a suspicious pattern is detected.
"""

__version__ = "0.1.0"
