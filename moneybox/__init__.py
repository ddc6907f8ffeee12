"""
Moneybox Ledger

Accounts, withdrawals and transfers with balance and pay-in limit rules,
using Decimal for all monetary values.
"""

__version__ = "1.0.0"
