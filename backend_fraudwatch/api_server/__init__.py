"""
API server package — HTTP interface for transaction intake and listings.

Delegates validation, recording, and scoring to the ingestion orchestrator.
"""
