"""Services: ledger reading, debt and balance engines, maintenance recurrence."""
