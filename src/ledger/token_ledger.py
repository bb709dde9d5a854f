"""TokenLedger — учётная книга одного fungible токена.

Состояние:
- balances: address → неотрицательное целое
- allowances: (owner, spender) → неотрицательное целое
- total_supply: меняется только через mint (+) и burn (-)
- owner: фиксированная identity, единственная имеющая право на mint/burn

Инвариант: total_supply == sum(balances) после каждой операции.
Все проверки выполняются до мутаций: неуспешная операция не меняет состояние.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Final, List, Optional, Tuple

from src.core.domain.events import ApprovalEvent, EventLog, TransferEvent
from src.core.domain.identity import (
    ZERO_ADDRESS,
    derive_address,
    normalize_address,
    normalize_contract_address,
)
from src.core.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAmount,
    Unauthorized,
)

logger = logging.getLogger(__name__)


# Неделимые единицы
TOKEN_DECIMALS: Final[int] = 0


def validate_amount(amount: Any) -> int:
    """
    Проверка количества.

    Raises:
        InvalidAmount: Если amount не int, bool или отрицательный
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount(amount)
    return amount


@dataclass
class LedgerJournal:
    """Undo-журнал: прежние значения только затронутых записей.

    None означает, что записи до изменения не было.
    """

    total_supply: int
    balances: Dict[str, Optional[int]] = field(default_factory=dict)
    allowances: Dict[Tuple[str, str], Optional[int]] = field(default_factory=dict)

    def touched(self) -> int:
        return len(self.balances) + len(self.allowances)


class TokenLedger:
    """Fungible ledger с owner-gated mint/burn и стандартными transfer/allowance.

    Caller identity передаётся явно в каждую мутирующую операцию.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        owner: str,
        initial_supply: int = 0,
        event_log: Optional[EventLog] = None,
        address: Optional[str] = None,
    ):
        """
        Args:
            name: Название токена
            symbol: Тикер токена
            owner: Identity создателя (единственный mint/burn authority)
            initial_supply: Начальный supply, зачисляется owner
            event_log: Общий журнал событий (создаётся, если не передан)
            address: Identity ledger (по умолчанию derive_address(owner, symbol))
        """
        if not name or not symbol:
            raise ValueError("Token name and symbol must be non-empty")

        self._name = name
        self._symbol = symbol
        self._owner = normalize_address(owner)
        self._address = normalize_contract_address(address) if address else derive_address(
            "ledger", self._owner, symbol
        )
        self.events = event_log if event_log is not None else EventLog()

        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0
        self._journals: List[LedgerJournal] = []

        initial_supply = validate_amount(initial_supply)
        if initial_supply > 0:
            self._credit_new_supply(self._owner, initial_supply)

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decimals(self) -> int:
        return TOKEN_DECIMALS

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def address(self) -> str:
        return self._address

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(_key(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((_key(owner), _key(spender)), 0)

    def holders(self) -> Dict[str, int]:
        """Все ненулевые балансы."""
        return {a: b for a, b in self._balances.items() if b > 0}

    # -------------------------------------------------------------------------
    # Transfers & allowances
    # -------------------------------------------------------------------------

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        """
        Перевод от caller к to.

        Raises:
            InvalidAddress: Если caller или to нулевой/пустой
            InvalidAmount: Если amount некорректен
            InsufficientBalance: Если баланс caller < amount
        """
        sender = normalize_address(caller)
        recipient = normalize_address(to)
        amount = validate_amount(amount)

        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(sender, balance, amount, token=self._symbol)

        self._move(sender, recipient, amount)
        return True

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        """Установка allowance (перезапись, не сложение)."""
        owner = normalize_address(caller)
        spender = normalize_address(spender)
        amount = validate_amount(amount)

        self._set_allowance((owner, spender), amount)
        self.events.emit(
            ApprovalEvent(token=self._address, owner=owner, spender=spender, value=amount)
        )
        return True

    def transfer_from(self, caller: str, from_address: str, to: str, amount: int) -> bool:
        """
        Перевод от from_address к to за счёт allowance caller.

        Порядок проверок: баланс from_address, затем allowance.

        Raises:
            InsufficientBalance: Если баланс from_address < amount
            InsufficientAllowance: Если allowance (from_address → caller) < amount
        """
        spender = normalize_address(caller)
        source = normalize_address(from_address)
        recipient = normalize_address(to)
        amount = validate_amount(amount)

        balance = self._balances.get(source, 0)
        if balance < amount:
            raise InsufficientBalance(source, balance, amount, token=self._symbol)

        allowed = self._allowances.get((source, spender), 0)
        if allowed < amount:
            raise InsufficientAllowance(source, spender, allowed, amount, token=self._symbol)

        self._set_allowance((source, spender), allowed - amount)
        self._move(source, recipient, amount)
        return True

    # -------------------------------------------------------------------------
    # Owner-gated supply control
    # -------------------------------------------------------------------------

    def mint(self, caller: str, to: str, amount: int) -> None:
        """
        Выпуск amount единиц на баланс to.

        Raises:
            Unauthorized: Если caller не owner
        """
        self._require_owner(caller, "mint")
        recipient = normalize_address(to)
        amount = validate_amount(amount)

        self._credit_new_supply(recipient, amount)

    def burn(self, caller: str, from_address: str, amount: int) -> None:
        """
        Сжигание amount единиц с баланса from_address.

        Raises:
            Unauthorized: Если caller не owner
            InsufficientBalance: Если баланс from_address < amount
        """
        self._require_owner(caller, "burn")
        source = normalize_address(from_address)
        amount = validate_amount(amount)

        balance = self._balances.get(source, 0)
        if balance < amount:
            raise InsufficientBalance(source, balance, amount, token=self._symbol)

        self._set_balance(source, balance - amount)
        self._total_supply -= amount
        self.events.emit(
            TransferEvent(
                token=self._address, from_address=source, to_address=ZERO_ADDRESS, value=amount
            )
        )
        logger.debug("%s burn %d from %s (supply=%d)", self._symbol, amount, source, self._total_supply)

    # -------------------------------------------------------------------------
    # Undo journal
    # -------------------------------------------------------------------------

    @property
    def journal_depth(self) -> int:
        return len(self._journals)

    def begin_journal(self) -> LedgerJournal:
        """Начало записи undo-журнала (журналы вкладываются)."""
        journal = LedgerJournal(total_supply=self._total_supply)
        self._journals.append(journal)
        return journal

    def commit_journal(self) -> None:
        """Фиксация верхнего журнала: прежние значения переходят в родительский."""
        journal = self._pop_journal()
        if self._journals:
            parent = self._journals[-1]
            for account, old in journal.balances.items():
                parent.balances.setdefault(account, old)
            for key, old in journal.allowances.items():
                parent.allowances.setdefault(key, old)

    def rollback_journal(self) -> int:
        """Возврат затронутых записей и supply к началу верхнего журнала.

        События не затрагиваются.

        Returns:
            Количество восстановленных записей
        """
        journal = self._pop_journal()
        for account, old in journal.balances.items():
            if old is None:
                self._balances.pop(account, None)
            else:
                self._balances[account] = old
        for key, old in journal.allowances.items():
            if old is None:
                self._allowances.pop(key, None)
            else:
                self._allowances[key] = old
        self._total_supply = journal.total_supply
        logger.debug("%s rolled back %d entr(ies)", self._symbol, journal.touched())
        return journal.touched()

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _pop_journal(self) -> LedgerJournal:
        if not self._journals:
            raise RuntimeError(f"{self._symbol}: no open journal")
        return self._journals.pop()

    def _set_balance(self, account: str, value: int) -> None:
        if self._journals:
            self._journals[-1].balances.setdefault(account, self._balances.get(account))
        self._balances[account] = value

    def _set_allowance(self, key: Tuple[str, str], value: int) -> None:
        if self._journals:
            self._journals[-1].allowances.setdefault(key, self._allowances.get(key))
        self._allowances[key] = value

    def _require_owner(self, caller: Any, action: str) -> None:
        if not isinstance(caller, str) or caller.strip().lower() != self._owner:
            raise Unauthorized(str(caller), self._owner, action=f"{self._symbol}.{action}")

    def _credit_new_supply(self, recipient: str, amount: int) -> None:
        self._set_balance(recipient, self._balances.get(recipient, 0) + amount)
        self._total_supply += amount
        self.events.emit(
            TransferEvent(
                token=self._address, from_address=ZERO_ADDRESS, to_address=recipient, value=amount
            )
        )
        logger.debug("%s mint %d to %s (supply=%d)", self._symbol, amount, recipient, self._total_supply)

    def _move(self, source: str, recipient: str, amount: int) -> None:
        self._set_balance(source, self._balances.get(source, 0) - amount)
        self._set_balance(recipient, self._balances.get(recipient, 0) + amount)
        self.events.emit(
            TransferEvent(
                token=self._address, from_address=source, to_address=recipient, value=amount
            )
        )

    def __repr__(self) -> str:
        return (
            f"TokenLedger(symbol={self._symbol!r}, address={self._address!r}, "
            f"total_supply={self._total_supply})"
        )


def _key(account: Any) -> str:
    """Ключ для query-операций: некорректный адрес просто не имеет баланса."""
    return account.strip().lower() if isinstance(account, str) else ""
