"""Ledger — fungible token учётные книги.

- TokenLedger: balances, allowances, owner-gated mint/burn
- atomic: journal/rollback scope над несколькими ledgers
"""

from .atomic import atomic
from .token_ledger import TOKEN_DECIMALS, LedgerJournal, TokenLedger, validate_amount

__all__ = [
    "TokenLedger",
    "LedgerJournal",
    "TOKEN_DECIMALS",
    "validate_amount",
    "atomic",
]
