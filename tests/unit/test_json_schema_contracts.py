"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация записей, сгенерированных ledger / coordinator / faucet
- Детекция нарушений required полей, типов и constraints
- Валидация при emit (EventLog(validate_records=True))
"""

import pytest

from src.core.contracts import (
    LEDGER_EVENT_CONTRACT,
    REACTION_STATS_CONTRACT,
    ContractValidator,
    ContractViolation,
    contract_validator,
    load_schema,
    validate_ledger_event,
    validate_reaction_stats,
)
from src.core.domain import EventLog, Species, TransferEvent
from src.core.errors import LedgerError
from src.gating import CooldownFaucet
from src.reactions import H2EquilibriumSystem, HeliumFormationSystem


DEPLOYER = "0x" + "11" * 20
ALICE = "0x" + "22" * 20


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def helium_after_reactions() -> HeliumFormationSystem:
    """Система после нескольких реакций и переводов."""
    system = HeliumFormationSystem(deployer=DEPLOYER)
    system.pp_fusion(DEPLOYER)
    system.complete_pp_chain(DEPLOYER)

    proton = system.ledger(Species.PROTON)
    proton.approve(DEPLOYER, ALICE, 10)
    proton.transfer_from(ALICE, DEPLOYER, ALICE, 4)
    return system


@pytest.fixture
def valid_transfer_record():
    return {
        "kind": "transfer",
        "token": "0x" + "ab" * 20,
        "from_address": DEPLOYER,
        "to_address": ALICE,
        "value": 5,
    }


# =============================================================================
# SCHEMAS
# =============================================================================


class TestSchemaLoading:
    """Тесты загрузки схем и ContractValidator."""

    @pytest.mark.parametrize("name", [LEDGER_EVENT_CONTRACT, REACTION_STATS_CONTRACT])
    def test_schemas_load(self, name):
        schema = load_schema(name)
        assert schema["$schema"].endswith("2020-12/schema")

    def test_validator_cached(self):
        assert contract_validator(LEDGER_EVENT_CONTRACT) is contract_validator(LEDGER_EVENT_CONTRACT)

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ContractValidator(LEDGER_EVENT_CONTRACT, schema_dir=tmp_path / "nope")

    def test_invalid_schema_rejected(self, tmp_path):
        (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            load_schema("broken", schema_dir=tmp_path)

    def test_custom_schema_dir(self, tmp_path):
        (tmp_path / "positive.json").write_text(
            '{"$schema": "https://json-schema.org/draft/2020-12/schema",'
            ' "type": "object", "required": ["n"],'
            ' "properties": {"n": {"type": "integer", "minimum": 1}}}',
            encoding="utf-8",
        )
        validator = ContractValidator("positive", schema_dir=tmp_path)

        assert validator.is_valid({"n": 3})
        assert validator.errors({"n": 0}) == ["n: 0 is less than the minimum of 1"]
        assert validator.errors({}) == ["<root>: 'n' is a required property"]

    def test_violation_carries_errors(self, valid_transfer_record):
        valid_transfer_record["value"] = "five"

        with pytest.raises(ContractViolation) as exc:
            validate_ledger_event(valid_transfer_record)

        assert exc.value.contract == LEDGER_EVENT_CONTRACT
        assert exc.value.errors
        assert isinstance(exc.value, LedgerError)
        assert isinstance(exc.value, ValueError)


# =============================================================================
# VALIDATION ON EMIT
# =============================================================================


class TestValidatedEventLog:
    """EventLog(validate_records=True) отклоняет записи вне контракта."""

    def test_valid_event_appended(self):
        log = EventLog(validate_records=True)

        log.emit(
            TransferEvent(
                token="0x" + "ab" * 20, from_address=DEPLOYER, to_address=ALICE, value=1
            )
        )

        assert len(log) == 1

    def test_invalid_event_rejected_before_append(self):
        log = EventLog(validate_records=True)
        seen = []
        log.subscribe(seen.append)

        with pytest.raises(ContractViolation):
            log.emit(
                TransferEvent(token="alice", from_address=DEPLOYER, to_address=ALICE, value=1)
            )

        assert len(log) == 0
        assert seen == []

    def test_unvalidated_log_accepts_anything_well_typed(self):
        log = EventLog()

        log.emit(TransferEvent(token="alice", from_address=DEPLOYER, to_address=ALICE, value=1))

        assert len(log) == 1


# =============================================================================
# =============================================================================
# LEDGER EVENTS
# =============================================================================


class TestLedgerEventContract:
    """Записи событий соответствуют ledger_event.json."""

    def test_all_emitted_records_valid(self, helium_after_reactions):
        records = helium_after_reactions.events.to_records()
        validator = contract_validator(LEDGER_EVENT_CONTRACT)

        assert {r["kind"] for r in records} == {"transfer", "approval", "reaction"}
        for record in records:
            validator.validate(record)

    def test_h2_records_valid(self):
        system = H2EquilibriumSystem(deployer=DEPLOYER)
        system.form_h2(DEPLOYER)
        system.dissociate_h2(DEPLOYER)

        for record in system.events.to_records():
            validate_ledger_event(record)

    def test_signal_records_valid(self):
        faucet = CooldownFaucet(authorized_minter=DEPLOYER, clock=lambda: 1_000_000)
        faucet.claim(ALICE)
        faucet.signal(DEPLOYER, "novelty")

        records = faucet.events.to_records()
        assert [r["kind"] for r in records] == ["transfer", "signal", "signal"]
        for record in records:
            validate_ledger_event(record)

    def test_reaction_record_shape(self, helium_after_reactions):
        reaction = helium_after_reactions.events.of_kind("reaction")[-1]
        record = reaction.model_dump(mode="json")

        assert record["consumed"] == {"p": 4}
        assert record["produced"] == {"He-4": 1, "e+": 2, "ve": 2}
        assert record["energy_released"] == 26

    def test_valid_transfer(self, valid_transfer_record):
        validate_ledger_event(valid_transfer_record)

    def test_missing_required_field(self, valid_transfer_record):
        del valid_transfer_record["value"]

        with pytest.raises(ContractViolation):
            validate_ledger_event(valid_transfer_record)

    def test_negative_value(self, valid_transfer_record):
        valid_transfer_record["value"] = -1

        assert not contract_validator(LEDGER_EVENT_CONTRACT).is_valid(valid_transfer_record)

    def test_unknown_kind(self, valid_transfer_record):
        valid_transfer_record["kind"] = "teleport"

        errors = contract_validator(LEDGER_EVENT_CONTRACT).errors(valid_transfer_record)
        assert errors

    def test_bad_token_address(self, valid_transfer_record):
        valid_transfer_record["token"] = "not-an-address"

        with pytest.raises(ContractViolation):
            validate_ledger_event(valid_transfer_record)


# =============================================================================
# REACTION STATS
# =============================================================================


class TestReactionStatsContract:
    """ReactionStats соответствует reaction_stats.json."""

    def test_stats_valid(self, helium_after_reactions):
        stats = helium_after_reactions.get_reaction_stats()

        contract_validator(REACTION_STATS_CONTRACT).validate(stats.model_dump(mode="json"))

    def test_fresh_h2_stats_valid(self):
        stats = H2EquilibriumSystem(deployer=DEPLOYER).get_reaction_stats()

        validate_reaction_stats(stats.model_dump(mode="json"))

    def test_bad_counter_name(self, helium_after_reactions):
        data = helium_after_reactions.get_reaction_stats().model_dump(mode="json")
        data["counters"]["PPFusion"] = 1

        with pytest.raises(ContractViolation):
            validate_reaction_stats(data)

    def test_negative_energy(self, helium_after_reactions):
        data = helium_after_reactions.get_reaction_stats().model_dump(mode="json")
        data["total_energy_released"] = -26

        assert not contract_validator(REACTION_STATS_CONTRACT).is_valid(data)
