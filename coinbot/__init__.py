"""Trade signals, portfolio records, Slack reports and transaction CSV import."""

__version__ = "0.1.0"