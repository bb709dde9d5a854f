"""CooldownFaucet — токен с cooldown-gated выпуском.

- claim: mint drip_amount вызывающему, не чаще одного раза за cooldown
- signal: novelty SignalEvent без изменения балансов (тот же cooldown)
- mint: single-address authorization — только authorized_minter

Faucet является owner своего TokenLedger; внешние identity выпускают
токены только через claim или через authorized_minter.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from src.core.domain.events import EventLog, SignalEvent
from src.core.domain.identity import derive_address, normalize_address, normalize_contract_address
from src.core.errors import Unauthorized
from src.gating.cooldown import CooldownConfig, CooldownGate
from src.ledger.atomic import atomic
from src.ledger.token_ledger import TokenLedger, validate_amount

logger = logging.getLogger(__name__)


def _wall_clock() -> int:
    return int(time.time())


@dataclass(frozen=True)
class FaucetConfig:
    """Конфигурация faucet токена."""

    name: str = "Cooldown Token"
    symbol: str = "CDT"
    drip_amount: int = 10
    cooldown: CooldownConfig = field(default_factory=CooldownConfig)

    def __post_init__(self):
        validate_amount(self.drip_amount)


class CooldownFaucet:
    """Cooldown-gated faucet поверх TokenLedger."""

    def __init__(
        self,
        authorized_minter: str,
        config: Optional[FaucetConfig] = None,
        event_log: Optional[EventLog] = None,
        clock: Optional[Callable[[], int]] = None,
        address: Optional[str] = None,
    ):
        """
        Args:
            authorized_minter: Единственная identity с правом прямого mint
            config: Конфигурация faucet
            event_log: Общий журнал событий
            clock: Источник времени (Unix секунды), по умолчанию wall-clock
            address: Identity faucet (по умолчанию derive_address)
        """
        self.config = config or FaucetConfig()
        self.authorized_minter = normalize_address(authorized_minter)
        self.address = normalize_contract_address(address) if address else derive_address(
            "faucet", self.authorized_minter, self.config.symbol
        )
        self.events = event_log if event_log is not None else EventLog()
        self._clock = clock or _wall_clock

        self.gate = CooldownGate(self.config.cooldown)
        self.token = TokenLedger(
            name=self.config.name,
            symbol=self.config.symbol,
            owner=self.address,
            event_log=self.events,
            address=derive_address("ledger", self.address, self.config.symbol),
        )

    # -------------------------------------------------------------------------
    # Gated operations
    # -------------------------------------------------------------------------

    def claim(self, caller: str, now_ts: Optional[int] = None) -> int:
        """
        Mint drip_amount на баланс caller.

        Returns:
            Новый баланс caller

        Raises:
            CooldownActive: Если cooldown caller не истёк
        """
        account = normalize_address(caller)
        now = self._now(now_ts)
        self.gate.require(account, now)

        amount = self.config.drip_amount
        self._gated(
            account,
            now,
            f"claimed {amount} {self.config.symbol}",
            lambda: self.token.mint(self.address, account, amount),
        )
        logger.info("%s claimed %d %s at %d", account, amount, self.config.symbol, now)
        return self.token.balance_of(account)

    def signal(self, caller: str, message: str, now_ts: Optional[int] = None) -> SignalEvent:
        """
        Novelty signal без изменения балансов.

        Raises:
            CooldownActive: Если cooldown caller не истёк
            ValueError: Если message пустой
        """
        if not message or not message.strip():
            raise ValueError("Signal message must be non-empty")

        account = normalize_address(caller)
        now = self._now(now_ts)
        self.gate.require(account, now)

        return self._gated(account, now, message.strip(), None)

    # -------------------------------------------------------------------------
    # Authorized mint
    # -------------------------------------------------------------------------

    def mint(self, caller: str, to: str, amount: int) -> None:
        """
        Прямой mint (без cooldown).

        Raises:
            Unauthorized: Если caller не authorized_minter
        """
        if not isinstance(caller, str) or caller.strip().lower() != self.authorized_minter:
            raise Unauthorized(str(caller), self.authorized_minter, action=f"{self.config.symbol}.mint")
        self.token.mint(self.address, to, amount)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        return self.token.balance_of(account)

    def last_cooldown_start(self, caller: str) -> Optional[int]:
        return self.gate.last_cooldown_start(caller)

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _now(self, now_ts: Optional[int]) -> int:
        return self._clock() if now_ts is None else now_ts

    def _gated(
        self,
        account: str,
        now: int,
        message: str,
        effect: Optional[Callable[[], None]],
    ) -> SignalEvent:
        """Эффект + запись cooldown + SignalEvent как одна атомарная операция."""
        previous_start = self.gate.last_cooldown_start(account)

        def undo_record() -> None:
            self.gate.restore(account, previous_start)

        with atomic([self.token], self.events, on_rollback=[undo_record]):
            if effect is not None:
                effect()
            self.gate.record(account, now)
            event = self.events.emit(
                SignalEvent(source=self.address, caller=account, message=message, ts=now)
            )
        return event
