"""Concrete reaction systems.

- HeliumFormationSystem: pp-chain (7 species, 5 реакций, energy accumulator)
- H2EquilibriumSystem: 2 H <-> H2 (2 species)
"""

from typing import Optional

from src.core.domain.events import EventLog, ReactionEvent
from src.core.domain.species import Species
from src.reactions.coordinator import CoordinatorConfig, ReactionCoordinator
from src.reactions.rules import H2_EQUILIBRIUM_RULES, PP_CHAIN_RULES


# Начальная аллокация deployer по умолчанию
DEFAULT_INITIAL_PROTONS = 1000
DEFAULT_INITIAL_HYDROGEN = 1000


# =============================================================================
# PHYSICS VARIANT
# =============================================================================


class HeliumFormationSystem(ReactionCoordinator):
    """pp-chain: формирование гелия из протонов.

    | reaction          | consumes    | produces               |
    |-------------------|-------------|------------------------|
    | pp_fusion         | 2 p         | 1 D + 1 e+ + 1 ve      |
    | pd_fusion         | 1 D + 1 p   | 1 He-3 + 1 y           |
    | he3_fusion        | 2 He-3      | 1 He-4 + 2 p           |
    | complete_pp_chain | 4 p         | 1 He-4 + 2 e+ + 2 ve   |
    | alpha_decay       | 1 He-4      | 2 D                    |

    complete_pp_chain ведёт собственный учёт (свой счётчик, +26 MeV) и не
    увеличивает счётчики sub-reactions.
    """

    SPECIES = (
        Species.PROTON,
        Species.DEUTERIUM,
        Species.HELIUM_3,
        Species.HELIUM_4,
        Species.POSITRON,
        Species.NEUTRINO,
        Species.GAMMA,
    )

    def __init__(
        self,
        deployer: str,
        config: Optional[CoordinatorConfig] = None,
        event_log: Optional[EventLog] = None,
        address: Optional[str] = None,
    ):
        super().__init__(
            species=self.SPECIES,
            rules=PP_CHAIN_RULES,
            deployer=deployer,
            config=config or CoordinatorConfig(
                initial_allocation={Species.PROTON: DEFAULT_INITIAL_PROTONS}
            ),
            event_log=event_log,
            address=address,
        )

    def pp_fusion(self, caller: str) -> ReactionEvent:
        return self.react(caller, "pp_fusion")

    def pd_fusion(self, caller: str) -> ReactionEvent:
        return self.react(caller, "pd_fusion")

    def he3_fusion(self, caller: str) -> ReactionEvent:
        return self.react(caller, "he3_fusion")

    def complete_pp_chain(self, caller: str) -> ReactionEvent:
        return self.react(caller, "complete_pp_chain")

    def alpha_decay(self, caller: str) -> ReactionEvent:
        return self.react(caller, "alpha_decay")

    @property
    def pp_fusion_count(self) -> int:
        return self.reaction_count("pp_fusion")

    @property
    def pd_fusion_count(self) -> int:
        return self.reaction_count("pd_fusion")

    @property
    def he3_fusion_count(self) -> int:
        return self.reaction_count("he3_fusion")

    @property
    def complete_pp_chain_count(self) -> int:
        return self.reaction_count("complete_pp_chain")

    @property
    def alpha_decay_count(self) -> int:
        return self.reaction_count("alpha_decay")


# =============================================================================
# CHEMISTRY VARIANT
# =============================================================================


class H2EquilibriumSystem(ReactionCoordinator):
    """Равновесие 2 H <-> H2.

    form_h2 сжигает 2 H и выпускает 1 H2; dissociate_h2 — обратно.
    """

    SPECIES = (Species.HYDROGEN, Species.DIHYDROGEN)

    def __init__(
        self,
        deployer: str,
        config: Optional[CoordinatorConfig] = None,
        event_log: Optional[EventLog] = None,
        address: Optional[str] = None,
    ):
        super().__init__(
            species=self.SPECIES,
            rules=H2_EQUILIBRIUM_RULES,
            deployer=deployer,
            config=config or CoordinatorConfig(
                initial_allocation={Species.HYDROGEN: DEFAULT_INITIAL_HYDROGEN}
            ),
            event_log=event_log,
            address=address,
        )

    def form_h2(self, caller: str) -> ReactionEvent:
        return self.react(caller, "form_h2")

    def dissociate_h2(self, caller: str) -> ReactionEvent:
        return self.react(caller, "dissociate_h2")

    @property
    def formation_count(self) -> int:
        return self.reaction_count("form_h2")

    @property
    def dissociation_count(self) -> int:
        return self.reaction_count("dissociate_h2")
