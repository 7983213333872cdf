"""Building-committee bookkeeping: debt, balance and maintenance engines."""

__version__ = "0.1.0"
