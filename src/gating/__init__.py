"""Gating — ограничения поверх ledger операций.

- CooldownGate: time-of-day зависимый cooldown между вызовами
- CooldownFaucet: cooldown-gated выпуск, novelty signals, single-address mint
"""

from .cooldown import CooldownCheckResult, CooldownConfig, CooldownGate
from .faucet import CooldownFaucet, FaucetConfig

__all__ = [
    "CooldownConfig",
    "CooldownCheckResult",
    "CooldownGate",
    "FaucetConfig",
    "CooldownFaucet",
]
