"""Domain models and the ledger-application engine.

This package contains the event and snapshot (Pydantic) models, the transaction
ledger used to resolve disputes and the per-account balance engine. Nothing here
reads input or writes output, so the state machine can be tested in isolation.
"""

__all__ = [
    "account_engine",
    "ledger",
    "ledger_store",
]
