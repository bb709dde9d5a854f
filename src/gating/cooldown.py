"""Cooldown Gate — минимальный интервал между gated вызовами одного caller.

Threshold зависит от time-of-day bucket момента начала cooldown T:
- hour = (T // 3600) mod 24
- hour < day_split_hour → early_threshold_sec
- иначе → late_threshold_sec

Caller без записи всегда допускается.
Вызов в момент T + threshold (и позже) допускается.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from src.core.domain.identity import normalize_address
from src.core.errors import CooldownActive

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class CooldownConfig:
    """Конфигурация cooldown gate."""

    day_split_hour: int = 12
    early_threshold_sec: int = 60
    late_threshold_sec: int = 120

    def __post_init__(self):
        if not 0 <= self.day_split_hour <= HOURS_PER_DAY:
            raise ValueError(f"day_split_hour must be in [0, 24], got {self.day_split_hour}")
        if self.early_threshold_sec < 0 or self.late_threshold_sec < 0:
            raise ValueError("Cooldown thresholds must be non-negative")


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class CooldownCheckResult:
    """Результат проверки cooldown."""

    allowed: bool
    block_reason: str

    caller: str
    last_cooldown_start: Optional[int]
    threshold_sec: int
    remaining_sec: int

    # Детали
    details: str


# =============================================================================
# GATE
# =============================================================================


class CooldownGate:
    """Cooldown gate с time-of-day зависимым threshold."""

    def __init__(self, config: Optional[CooldownConfig] = None):
        self.config = config or CooldownConfig()
        self._last_start: Dict[str, int] = {}

    def threshold_for(self, start_ts: int) -> int:
        """Threshold для cooldown, начатого в start_ts."""
        hour = (start_ts // SECONDS_PER_HOUR) % HOURS_PER_DAY
        if hour < self.config.day_split_hour:
            return self.config.early_threshold_sec
        return self.config.late_threshold_sec

    def last_cooldown_start(self, caller: str) -> Optional[int]:
        return self._last_start.get(normalize_address(caller))

    def evaluate(self, caller: str, now_ts: int) -> CooldownCheckResult:
        """
        Оценка допуска caller в момент now_ts (Unix секунды).

        Clock, отстающий от записанного начала cooldown, считается как elapsed = 0:
        remaining_sec никогда не превышает threshold_sec.

        Returns:
            CooldownCheckResult с решением о допуске

        Raises:
            ValueError: Если now_ts отрицательный
        """
        if now_ts < 0:
            raise ValueError(f"now_ts must be non-negative, got {now_ts}")

        account = normalize_address(caller)
        start = self._last_start.get(account)

        if start is None:
            return CooldownCheckResult(
                allowed=True,
                block_reason="",
                caller=account,
                last_cooldown_start=None,
                threshold_sec=0,
                remaining_sec=0,
                details="No previous cooldown recorded",
            )

        threshold = self.threshold_for(start)
        elapsed = max(now_ts - start, 0)
        if elapsed < threshold:
            remaining = threshold - elapsed
            return CooldownCheckResult(
                allowed=False,
                block_reason="cooldown_active",
                caller=account,
                last_cooldown_start=start,
                threshold_sec=threshold,
                remaining_sec=remaining,
                details=f"Elapsed {elapsed}s < threshold {threshold}s, remaining {remaining}s",
            )

        return CooldownCheckResult(
            allowed=True,
            block_reason="",
            caller=account,
            last_cooldown_start=start,
            threshold_sec=threshold,
            remaining_sec=0,
            details=f"Elapsed {elapsed}s >= threshold {threshold}s",
        )

    def require(self, caller: str, now_ts: int) -> CooldownCheckResult:
        """
        Raises:
            CooldownActive: Если cooldown не истёк
        """
        result = self.evaluate(caller, now_ts)
        if not result.allowed:
            logger.debug("cooldown block for %s: %s", result.caller, result.details)
            raise CooldownActive(result.caller, result.remaining_sec, result.threshold_sec)
        return result

    def record(self, caller: str, now_ts: int) -> None:
        """Фиксация начала нового cooldown."""
        if now_ts < 0:
            raise ValueError(f"now_ts must be non-negative, got {now_ts}")
        self._last_start[normalize_address(caller)] = now_ts

    def restore(self, caller: str, start_ts: Optional[int]) -> None:
        """Возврат записи caller к прежнему значению (None — удалить)."""
        account = normalize_address(caller)
        if start_ts is None:
            self._last_start.pop(account, None)
        else:
            self._last_start[account] = start_ts
