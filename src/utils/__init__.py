"""Output helpers for account snapshots."""
