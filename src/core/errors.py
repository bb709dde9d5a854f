"""
Ledger Errors — таксономия ошибок ledger и reaction систем

Все ошибки fail-fast: операция прерывается целиком, частичных эффектов нет.
Сообщения содержат все числа, участвующие в проверке.
"""

from typing import Any


# =============================================================================
# BASE
# =============================================================================


class LedgerError(Exception):
    """Базовый класс для всех ошибок ledger/reaction/gating модулей."""

    pass


# =============================================================================
# AUTHORIZATION
# =============================================================================


class Unauthorized(LedgerError):
    """Caller не совпадает с требуемой identity (owner / authorized minter)."""

    def __init__(self, caller: str, required: str, action: str = "call"):
        self.caller = caller
        self.required = required
        self.action = action
        super().__init__(
            f"Unauthorized: {action} requires {required}, got caller {caller}"
        )


# =============================================================================
# BALANCES
# =============================================================================


class InsufficientBalance(LedgerError):
    """Баланс источника меньше запрошенного количества."""

    def __init__(self, account: str, balance: int, required: int, token: str = ""):
        self.account = account
        self.balance = balance
        self.required = required
        self.token = token
        prefix = f"{token}: " if token else ""
        super().__init__(
            f"{prefix}Insufficient balance for {account}: "
            f"balance={balance}, required={required}"
        )


class InsufficientAllowance(LedgerError):
    """Allowance (owner → spender) меньше запрошенного количества."""

    def __init__(
        self, owner: str, spender: str, allowance: int, required: int, token: str = ""
    ):
        self.owner = owner
        self.spender = spender
        self.allowance = allowance
        self.required = required
        self.token = token
        prefix = f"{token}: " if token else ""
        super().__init__(
            f"{prefix}Insufficient allowance {owner} -> {spender}: "
            f"allowance={allowance}, required={required}"
        )


class InsufficientReactant(LedgerError):
    """
    Domain-вариант InsufficientBalance для reaction операций.

    Называет species и требуемое количество.
    """

    def __init__(self, species: Any, available: int, required: int, reaction: str = ""):
        self.species = species
        self.available = available
        self.required = required
        self.reaction = reaction
        species_label = getattr(species, "symbol", str(species))
        suffix = f" for {reaction}" if reaction else ""
        super().__init__(
            f"Insufficient {species_label}{suffix}: "
            f"required={required}, available={available}"
        )


# =============================================================================
# GATING
# =============================================================================


class CooldownActive(LedgerError):
    """Прошло меньше времени, чем требует cooldown threshold."""

    def __init__(self, caller: str, remaining_sec: int, threshold_sec: int):
        self.caller = caller
        self.remaining_sec = remaining_sec
        self.threshold_sec = threshold_sec
        super().__init__(
            f"Cooldown active for {caller}: {remaining_sec}s remaining "
            f"(threshold {threshold_sec}s)"
        )


# =============================================================================
# INPUT VALIDATION
# =============================================================================


class InvalidAddress(LedgerError, ValueError):
    """Zero/пустая identity там, где требуется реальная."""

    def __init__(self, address: Any):
        self.address = address
        super().__init__(f"Invalid address: {address!r}")


class InvalidAmount(LedgerError, ValueError):
    """Количество не является неотрицательным целым."""

    def __init__(self, amount: Any):
        self.amount = amount
        super().__init__(f"Amount must be a non-negative integer, got {amount!r}")
