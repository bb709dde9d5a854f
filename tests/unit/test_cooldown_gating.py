"""Тесты для CooldownGate и CooldownFaucet.

Coverage:
- Time-of-day bucket threshold
- Граница T + threshold
- CooldownActive без изменений состояния
- Faucet: claim, signal, single-address mint
"""

import pytest

from src.core.domain import SignalEvent
from src.core.errors import CooldownActive, InvalidAddress, InvalidAmount, Unauthorized
from src.gating import (
    CooldownConfig,
    CooldownFaucet,
    CooldownGate,
    FaucetConfig,
)


MINTER = "0x" + "aa" * 20
ALICE = "0x" + "bb" * 20
BOB = "0x" + "cc" * 20

DAY = 86400
MIDNIGHT = DAY * 19000
MORNING_TS = MIDNIGHT + 9 * 3600  # hour 9 → early bucket
EVENING_TS = MIDNIGHT + 15 * 3600  # hour 15 → late bucket


class TestCooldownGate:
    """Тесты cooldown gate."""

    def test_first_call_allowed(self):
        gate = CooldownGate()

        result = gate.evaluate(ALICE, MORNING_TS)

        assert result.allowed
        assert result.last_cooldown_start is None
        assert result.remaining_sec == 0

    def test_threshold_buckets(self):
        gate = CooldownGate()

        assert gate.threshold_for(MORNING_TS) == 60
        assert gate.threshold_for(EVENING_TS) == 120
        assert gate.threshold_for(MIDNIGHT + 11 * 3600 + 3599) == 60
        assert gate.threshold_for(MIDNIGHT + 12 * 3600) == 120

    def test_repeat_before_threshold_blocked(self):
        gate = CooldownGate()
        gate.record(ALICE, MORNING_TS)

        result = gate.evaluate(ALICE, MORNING_TS + 59)

        assert not result.allowed
        assert result.block_reason == "cooldown_active"
        assert result.threshold_sec == 60
        assert result.remaining_sec == 1

    def test_repeat_at_threshold_allowed(self):
        gate = CooldownGate()
        gate.record(ALICE, MORNING_TS)

        assert gate.evaluate(ALICE, MORNING_TS + 60).allowed
        assert gate.evaluate(ALICE, MORNING_TS + 61).allowed

    def test_late_bucket_threshold(self):
        gate = CooldownGate()
        gate.record(ALICE, EVENING_TS)

        assert not gate.evaluate(ALICE, EVENING_TS + 60).allowed
        assert gate.evaluate(ALICE, EVENING_TS + 120).allowed

    def test_require_raises(self):
        gate = CooldownGate()
        gate.record(ALICE, MORNING_TS)

        with pytest.raises(CooldownActive) as exc:
            gate.require(ALICE, MORNING_TS + 10)

        assert exc.value.remaining_sec == 50
        assert exc.value.threshold_sec == 60

    def test_callers_independent(self):
        gate = CooldownGate()
        gate.record(ALICE, MORNING_TS)

        assert gate.evaluate(BOB, MORNING_TS + 1).allowed

    def test_custom_config(self):
        gate = CooldownGate(
            CooldownConfig(day_split_hour=6, early_threshold_sec=5, late_threshold_sec=600)
        )

        assert gate.threshold_for(MIDNIGHT + 3600) == 5
        assert gate.threshold_for(MORNING_TS) == 600

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            CooldownConfig(day_split_hour=25)
        with pytest.raises(ValueError):
            CooldownConfig(early_threshold_sec=-1)

    def test_clock_behind_recorded_start_clamped(self):
        """Clock откатился назад: remaining не превышает threshold."""
        gate = CooldownGate()
        gate.record(ALICE, MORNING_TS)

        result = gate.evaluate(ALICE, MORNING_TS - 500)

        assert not result.allowed
        assert result.remaining_sec == result.threshold_sec == 60

    def test_negative_now_rejected(self):
        gate = CooldownGate()

        with pytest.raises(ValueError):
            gate.evaluate(ALICE, -1)
        with pytest.raises(ValueError):
            gate.record(ALICE, -1)


class TestCooldownFaucet:
    """Тесты cooldown-gated faucet."""

    @pytest.fixture
    def faucet(self) -> CooldownFaucet:
        return CooldownFaucet(authorized_minter=MINTER, clock=lambda: MORNING_TS)

    def test_claim_mints_drip(self, faucet):
        balance = faucet.claim(ALICE)

        assert balance == 10
        assert faucet.token.total_supply == 10
        assert faucet.last_cooldown_start(ALICE) == MORNING_TS

    def test_claim_emits_signal(self, faucet):
        faucet.claim(ALICE)

        signals = faucet.events.of_kind("signal")
        assert len(signals) == 1
        assert signals[0].caller == ALICE
        assert signals[0].ts == MORNING_TS
        assert "claimed 10 CDT" in signals[0].message

    def test_repeat_claim_blocked(self, faucet):
        faucet.claim(ALICE, now_ts=MORNING_TS)
        events_before = len(faucet.events)

        with pytest.raises(CooldownActive):
            faucet.claim(ALICE, now_ts=MORNING_TS + 59)

        assert faucet.balance_of(ALICE) == 10
        assert faucet.last_cooldown_start(ALICE) == MORNING_TS
        assert len(faucet.events) == events_before

    def test_claim_after_cooldown(self, faucet):
        faucet.claim(ALICE, now_ts=MORNING_TS)
        faucet.claim(ALICE, now_ts=MORNING_TS + 60)

        assert faucet.balance_of(ALICE) == 20
        assert faucet.last_cooldown_start(ALICE) == MORNING_TS + 60

    def test_signal_without_balance_effect(self, faucet):
        event = faucet.signal(ALICE, "  hello world  ")

        assert isinstance(event, SignalEvent)
        assert event.message == "hello world"
        assert faucet.balance_of(ALICE) == 0
        assert faucet.token.total_supply == 0

    def test_signal_shares_cooldown_with_claim(self, faucet):
        faucet.claim(ALICE, now_ts=MORNING_TS)

        with pytest.raises(CooldownActive):
            faucet.signal(ALICE, "too soon", now_ts=MORNING_TS + 30)

    def test_empty_signal_rejected(self, faucet):
        with pytest.raises(ValueError, match="non-empty"):
            faucet.signal(ALICE, "   ")
        assert faucet.last_cooldown_start(ALICE) is None

    def test_authorized_mint(self, faucet):
        faucet.mint(MINTER, BOB, 500)

        assert faucet.balance_of(BOB) == 500

    def test_unauthorized_mint(self, faucet):
        with pytest.raises(Unauthorized):
            faucet.mint(ALICE, ALICE, 500)

        assert faucet.balance_of(ALICE) == 0
        assert faucet.token.total_supply == 0

    def test_minter_cannot_bypass_through_ledger(self, faucet):
        """Owner ledger — сам faucet, не minter."""
        with pytest.raises(Unauthorized):
            faucet.token.mint(MINTER, MINTER, 1)

    def test_custom_config(self):
        faucet = CooldownFaucet(
            authorized_minter=MINTER,
            config=FaucetConfig(name="Signal", symbol="SIG", drip_amount=3),
            clock=lambda: EVENING_TS,
        )

        faucet.claim(ALICE)
        with pytest.raises(CooldownActive) as exc:
            faucet.claim(ALICE, now_ts=EVENING_TS + 100)

        assert faucet.balance_of(ALICE) == 3
        assert faucet.token.symbol == "SIG"
        assert exc.value.threshold_sec == 120

    def test_invalid_drip_rejected(self):
        with pytest.raises(InvalidAmount):
            FaucetConfig(drip_amount=-5)

    def test_malformed_custom_address_rejected(self):
        with pytest.raises(InvalidAddress):
            CooldownFaucet(authorized_minter=MINTER, address="alice")

    def test_custom_address_accepted(self):
        custom = "0x" + "ef" * 20
        faucet = CooldownFaucet(authorized_minter=MINTER, address=custom, clock=lambda: MORNING_TS)

        event = faucet.signal(ALICE, "hello")

        assert faucet.address == custom
        assert event.source == custom
        assert faucet.token.owner == custom


class TestFaucetAtomicity:
    """Доставка событий подписчикам и откат claim."""

    @pytest.fixture
    def faucet(self) -> CooldownFaucet:
        return CooldownFaucet(authorized_minter=MINTER, clock=lambda: MORNING_TS)

    def test_subscriber_sees_committed_claim(self, faucet):
        seen = []
        faucet.events.subscribe(
            lambda event: seen.append(
                (event.kind, faucet.balance_of(ALICE), faucet.last_cooldown_start(ALICE))
            )
        )

        faucet.claim(ALICE)

        assert seen == [("transfer", 10, MORNING_TS), ("signal", 10, MORNING_TS)]

    def test_failed_claim_restores_cooldown_and_notifies_no_one(self, faucet, monkeypatch):
        faucet.claim(ALICE)
        seen = []
        faucet.events.subscribe(seen.append)
        events_before = len(faucet.events)
        emit = faucet.events.emit

        def emit_rejecting_signals(event):
            if event.kind == "signal":
                raise RuntimeError("signal rejected")
            return emit(event)

        monkeypatch.setattr(faucet.events, "emit", emit_rejecting_signals)

        with pytest.raises(RuntimeError):
            faucet.claim(ALICE, now_ts=MORNING_TS + 60)

        assert faucet.last_cooldown_start(ALICE) == MORNING_TS
        assert faucet.balance_of(ALICE) == 10
        assert faucet.token.total_supply == 10
        assert len(faucet.events) == events_before
        assert seen == []

    def test_raising_subscriber_does_not_revert_claim(self, faucet):
        def broken(event):
            raise RuntimeError("subscriber failure")

        faucet.events.subscribe(broken)

        with pytest.raises(RuntimeError):
            faucet.claim(ALICE)

        assert faucet.balance_of(ALICE) == 10
        assert faucet.last_cooldown_start(ALICE) == MORNING_TS
        assert not faucet.events.in_scope
        with pytest.raises(CooldownActive):
            faucet.claim(ALICE)
