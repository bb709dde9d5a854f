"""
Species — виды токенов reaction систем

Каждый species — отдельный fungible токен со своим ledger.
Для проверки законов сохранения каждому species сопоставлены:
- mass_number: число нуклонов (physics) или атомов (chemistry)
- charge: электрический заряд в единицах e
- lepton_number: лептонное число
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


# =============================================================================
# PROPERTIES
# =============================================================================


@dataclass(frozen=True)
class SpeciesProperties:
    """Метаданные токена и сохраняющиеся величины species."""

    token_name: str
    symbol: str
    mass_number: int
    charge: int
    lepton_number: int = 0


# =============================================================================
# SPECIES
# =============================================================================


class Species(str, Enum):
    """
    Species reaction систем.

    Physics variant (pp-chain): PROTON ... GAMMA
    Chemistry variant (H2 equilibrium): HYDROGEN, DIHYDROGEN
    """

    PROTON = "PROTON"
    DEUTERIUM = "DEUTERIUM"
    HELIUM_3 = "HELIUM_3"
    HELIUM_4 = "HELIUM_4"
    POSITRON = "POSITRON"
    NEUTRINO = "NEUTRINO"
    GAMMA = "GAMMA"

    HYDROGEN = "HYDROGEN"
    DIHYDROGEN = "DIHYDROGEN"

    @property
    def properties(self) -> SpeciesProperties:
        return _SPECIES_PROPERTIES[self]

    @property
    def token_name(self) -> str:
        return self.properties.token_name

    @property
    def symbol(self) -> str:
        return self.properties.symbol

    @property
    def mass_number(self) -> int:
        return self.properties.mass_number

    @property
    def charge(self) -> int:
        return self.properties.charge

    @property
    def lepton_number(self) -> int:
        return self.properties.lepton_number


_SPECIES_PROPERTIES: Dict[Species, SpeciesProperties] = {
    Species.PROTON: SpeciesProperties("Proton", "p", mass_number=1, charge=1),
    Species.DEUTERIUM: SpeciesProperties("Deuterium", "D", mass_number=2, charge=1),
    Species.HELIUM_3: SpeciesProperties("Helium-3", "He-3", mass_number=3, charge=2),
    Species.HELIUM_4: SpeciesProperties("Helium-4", "He-4", mass_number=4, charge=2),
    # Антилептон: lepton_number = -1
    Species.POSITRON: SpeciesProperties(
        "Positron", "e+", mass_number=0, charge=1, lepton_number=-1
    ),
    Species.NEUTRINO: SpeciesProperties(
        "Electron Neutrino", "ve", mass_number=0, charge=0, lepton_number=1
    ),
    Species.GAMMA: SpeciesProperties("Gamma Photon", "y", mass_number=0, charge=0),
    # Нейтральные атомы/молекулы: сохраняется число атомов
    Species.HYDROGEN: SpeciesProperties("Hydrogen", "H", mass_number=1, charge=0),
    Species.DIHYDROGEN: SpeciesProperties("Dihydrogen", "H2", mass_number=2, charge=0),
}
