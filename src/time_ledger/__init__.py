"""Time ledger: attendance aggregation, overtime, leave balances and timesheets."""

__version__ = "0.1.0"
