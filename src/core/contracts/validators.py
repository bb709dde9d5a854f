"""
JSON Schema Contract Validators

Проверка JSON записей ledger по контрактам contracts/schema/*.json
(jsonschema, Draft 2020-12).

Контракты:
- ledger_event: transfer / approval / reaction / signal записи
  (EventLog(validate_records=True) проверяет каждую запись при emit)
- reaction_stats: снапшот ReactionStats
  (CoordinatorConfig(validate_contracts=True) проверяет get_reaction_stats)

Нарушение контракта — ContractViolation со списком всех ошибок.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft202012Validator

from src.core.errors import LedgerError


DEFAULT_SCHEMA_DIR = Path(__file__).parent.parent.parent.parent / "contracts" / "schema"

LEDGER_EVENT_CONTRACT = "ledger_event"
REACTION_STATS_CONTRACT = "reaction_stats"


class ContractViolation(LedgerError, ValueError):
    """Запись не соответствует JSON Schema контракту."""

    def __init__(self, contract: str, errors: List[str]):
        self.contract = contract
        self.errors = errors
        super().__init__(f"{contract} contract violated: " + "; ".join(errors))


def load_schema(schema_name: str, schema_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Загрузка и meta-валидация схемы.

    Raises:
        FileNotFoundError: Если директория или файл схемы не найдены
        ValueError: Если файл не является валидной JSON Schema
    """
    directory = schema_dir or DEFAULT_SCHEMA_DIR
    schema_path = directory / f"{schema_name}.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}")

    return schema


class ContractValidator:
    """Валидатор одного контракта."""

    def __init__(self, contract: str, schema_dir: Optional[Path] = None):
        self.contract = contract
        self._validator = Draft202012Validator(load_schema(contract, schema_dir))

    def errors(self, data: Dict[str, Any]) -> List[str]:
        """Все нарушения в виде 'path: message' (пустой список — запись валидна)."""
        found = sorted(self._validator.iter_errors(data), key=lambda e: list(e.absolute_path))
        return [f"{'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}" for e in found]

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ContractViolation: Если запись нарушает контракт
        """
        errors = self.errors(data)
        if errors:
            raise ContractViolation(self.contract, errors)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return not self.errors(data)


@lru_cache(maxsize=None)
def contract_validator(contract: str) -> ContractValidator:
    """Кэшированный валидатор контракта из директории по умолчанию."""
    return ContractValidator(contract)


def validate_ledger_event(data: Dict[str, Any]) -> None:
    contract_validator(LEDGER_EVENT_CONTRACT).validate(data)


def validate_reaction_stats(data: Dict[str, Any]) -> None:
    contract_validator(REACTION_STATS_CONTRACT).validate(data)
