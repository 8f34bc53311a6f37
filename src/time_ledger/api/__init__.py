"""HTTP API for the time ledger."""
