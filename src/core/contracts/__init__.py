"""
Contract Validation Module

Валидация JSON записей событий и статистики по JSON Schema контрактам.
"""

from .validators import (
    LEDGER_EVENT_CONTRACT,
    REACTION_STATS_CONTRACT,
    ContractValidator,
    ContractViolation,
    contract_validator,
    load_schema,
    validate_ledger_event,
    validate_reaction_stats,
)

__all__ = [
    "LEDGER_EVENT_CONTRACT",
    "REACTION_STATS_CONTRACT",
    "ContractValidator",
    "ContractViolation",
    "contract_validator",
    "load_schema",
    "validate_ledger_event",
    "validate_reaction_stats",
]
