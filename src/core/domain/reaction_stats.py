"""
ReactionStats — снапшот статистики координатора

Immutable Pydantic модель. Совместимость с JSON Schema:
contracts/schema/reaction_stats.json
"""

from typing import Dict, Tuple

from pydantic import BaseModel, Field


class ReactionStats(BaseModel):
    """
    Счётчики реакций, суммарная энергия и total supply по species.

    Порядок ключей в словарях совпадает с порядком правил/species координатора.
    """

    coordinator: str = Field(..., min_length=1, description="Адрес координатора")
    counters: Dict[str, int] = Field(..., description="counter name → число реакций")
    total_energy_released: int = Field(..., ge=0, description="Суммарная энергия (MeV)")
    total_supplies: Dict[str, int] = Field(..., description="species symbol → total supply")

    model_config = {"frozen": True}

    def as_tuple(self) -> Tuple[int, ...]:
        """Плоский кортеж: счётчики, энергия, total supplies."""
        return (
            *self.counters.values(),
            self.total_energy_released,
            *self.total_supplies.values(),
        )
