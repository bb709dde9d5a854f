"""
Domain models and value objects.

Contains identities, token species, observable events and reaction statistics.
"""

from src.core.domain.events import (
    ApprovalEvent,
    EventLog,
    LedgerEvent,
    ReactionEvent,
    SignalEvent,
    TransferEvent,
)
from src.core.domain.identity import (
    ZERO_ADDRESS,
    derive_address,
    is_zero_address,
    normalize_address,
    normalize_contract_address,
)
from src.core.domain.reaction_stats import ReactionStats
from src.core.domain.species import Species, SpeciesProperties

__all__ = [
    # Identity
    "ZERO_ADDRESS",
    "derive_address",
    "is_zero_address",
    "normalize_address",
    "normalize_contract_address",
    # Species
    "Species",
    "SpeciesProperties",
    # Events
    "TransferEvent",
    "ApprovalEvent",
    "ReactionEvent",
    "SignalEvent",
    "LedgerEvent",
    "EventLog",
    # Stats
    "ReactionStats",
]
