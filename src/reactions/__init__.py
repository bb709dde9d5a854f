"""Reactions — fixed-ratio конверсии между species ledgers.

- rules: стехиометрические таблицы и проверки сохранения
- coordinator: generic ReactionCoordinator
- systems: HeliumFormationSystem (pp-chain), H2EquilibriumSystem
"""

from .coordinator import CoordinatorConfig, ReactionCoordinator
from .rules import (
    H2_EQUILIBRIUM_RULES,
    PP_CHAIN_ENERGY_MEV,
    PP_CHAIN_RULES,
    ConservationDelta,
    ReactionRule,
    check_conservation,
    validate_rule_table,
)
from .systems import H2EquilibriumSystem, HeliumFormationSystem

__all__ = [
    "ReactionRule",
    "ConservationDelta",
    "check_conservation",
    "validate_rule_table",
    "PP_CHAIN_RULES",
    "PP_CHAIN_ENERGY_MEV",
    "H2_EQUILIBRIUM_RULES",
    "CoordinatorConfig",
    "ReactionCoordinator",
    "HeliumFormationSystem",
    "H2EquilibriumSystem",
]
