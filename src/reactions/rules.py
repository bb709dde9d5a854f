"""Reaction rules — стехиометрические таблицы реакций.

Каждое правило — атомарная конверсия с фиксированными целыми коэффициентами:
сжечь inputs у caller, выпустить outputs тому же caller.

Законы сохранения (mass number, charge, lepton number) проверяются для
каждого правила при создании координатора.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

from src.core.domain.species import Species


Stoichiometry = Tuple[Tuple[Species, int], ...]


@dataclass(frozen=True)
class ConservationDelta:
    """Разница outputs - inputs по сохраняющимся величинам."""

    mass_number: int
    charge: int
    lepton_number: int

    @property
    def is_balanced(self) -> bool:
        return self.mass_number == 0 and self.charge == 0 and self.lepton_number == 0


@dataclass(frozen=True)
class ReactionRule:
    """Правило реакции.

    key: идентификатор операции (например, 'pp_fusion')
    counter: имя счётчика, увеличиваемого при каждом выполнении
    inputs / outputs: кортежи (species, quantity)
    energy_mev: прибавка к total_energy_released
    label: короткое имя для описаний
    """

    key: str
    counter: str
    inputs: Stoichiometry
    outputs: Stoichiometry
    energy_mev: int = 0
    label: str = ""

    def __post_init__(self):
        if not self.inputs or not self.outputs:
            raise ValueError(f"Rule {self.key}: inputs and outputs must be non-empty")
        for species, qty in (*self.inputs, *self.outputs):
            if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
                raise ValueError(f"Rule {self.key}: quantity for {species} must be a positive int")
        if self.energy_mev < 0:
            raise ValueError(f"Rule {self.key}: energy_mev must be non-negative")

    @property
    def species(self) -> Tuple[Species, ...]:
        return tuple(s for s, _ in (*self.inputs, *self.outputs))

    def consumed(self) -> Dict[str, int]:
        return {s.symbol: q for s, q in self.inputs}

    def produced(self) -> Dict[str, int]:
        return {s.symbol: q for s, q in self.outputs}

    def describe(self) -> str:
        """
        Человекочитаемое описание.

        Пример: "4 p -> 1 He-4 + 2 e+ + 2 ve (26 MeV)"
        """
        lhs = " + ".join(f"{q} {s.symbol}" for s, q in self.inputs)
        rhs = " + ".join(f"{q} {s.symbol}" for s, q in self.outputs)
        text = f"{lhs} -> {rhs}"
        if self.energy_mev:
            text += f" ({self.energy_mev} MeV)"
        if self.label:
            text = f"{self.label}: {text}"
        return text

    def conservation_delta(self) -> ConservationDelta:
        return ConservationDelta(
            mass_number=_side_sum(self.outputs, "mass_number") - _side_sum(self.inputs, "mass_number"),
            charge=_side_sum(self.outputs, "charge") - _side_sum(self.inputs, "charge"),
            lepton_number=(
                _side_sum(self.outputs, "lepton_number") - _side_sum(self.inputs, "lepton_number")
            ),
        )


def _side_sum(side: Stoichiometry, attr: str) -> int:
    return sum(getattr(species, attr) * qty for species, qty in side)


# =============================================================================
# VALIDATION
# =============================================================================


def check_conservation(rule: ReactionRule) -> None:
    """
    Raises:
        ValueError: Если правило нарушает сохранение mass number / charge / lepton number
    """
    delta = rule.conservation_delta()
    if not delta.is_balanced:
        raise ValueError(
            f"Rule {rule.key} violates conservation: "
            f"dA={delta.mass_number}, dZ={delta.charge}, dL={delta.lepton_number}"
        )


def validate_rule_table(rules: Sequence[ReactionRule], species: Iterable[Species]) -> None:
    """
    Проверка таблицы правил координатора.

    - уникальные ключи и счётчики
    - все species правил присутствуют в координаторе
    - сохранение для каждого правила
    """
    known = set(species)
    keys = [r.key for r in rules]
    counters = [r.counter for r in rules]

    if not rules:
        raise ValueError("Rule table must not be empty")
    if len(set(keys)) != len(keys):
        raise ValueError(f"Duplicate reaction keys: {keys}")
    if len(set(counters)) != len(counters):
        raise ValueError(f"Duplicate reaction counters: {counters}")

    for rule in rules:
        missing = [s for s in rule.species if s not in known]
        if missing:
            raise ValueError(f"Rule {rule.key} uses species without a ledger: {missing}")
        check_conservation(rule)


# =============================================================================
# RULE TABLES
# =============================================================================

# Энергия полной pp-цепочки (MeV)
PP_CHAIN_ENERGY_MEV = 26

PP_CHAIN_RULES: Tuple[ReactionRule, ...] = (
    ReactionRule(
        key="pp_fusion",
        counter="pp_fusion_count",
        inputs=((Species.PROTON, 2),),
        outputs=((Species.DEUTERIUM, 1), (Species.POSITRON, 1), (Species.NEUTRINO, 1)),
        label="pp-fusion",
    ),
    ReactionRule(
        key="pd_fusion",
        counter="pd_fusion_count",
        inputs=((Species.DEUTERIUM, 1), (Species.PROTON, 1)),
        outputs=((Species.HELIUM_3, 1), (Species.GAMMA, 1)),
        label="pd-fusion",
    ),
    ReactionRule(
        key="he3_fusion",
        counter="he3_fusion_count",
        inputs=((Species.HELIUM_3, 2),),
        outputs=((Species.HELIUM_4, 1), (Species.PROTON, 2)),
        label="He3-fusion",
    ),
    # Shortcut: собственный счётчик и энергия, sub-reaction счётчики не меняются
    ReactionRule(
        key="complete_pp_chain",
        counter="complete_pp_chain_count",
        inputs=((Species.PROTON, 4),),
        outputs=((Species.HELIUM_4, 1), (Species.POSITRON, 2), (Species.NEUTRINO, 2)),
        energy_mev=PP_CHAIN_ENERGY_MEV,
        label="pp-chain",
    ),
    ReactionRule(
        key="alpha_decay",
        counter="alpha_decay_count",
        inputs=((Species.HELIUM_4, 1),),
        outputs=((Species.DEUTERIUM, 2),),
        label="alpha-decay",
    ),
)

H2_EQUILIBRIUM_RULES: Tuple[ReactionRule, ...] = (
    ReactionRule(
        key="form_h2",
        counter="formation_count",
        inputs=((Species.HYDROGEN, 2),),
        outputs=((Species.DIHYDROGEN, 1),),
        label="H2 formation",
    ),
    ReactionRule(
        key="dissociate_h2",
        counter="dissociation_count",
        inputs=((Species.DIHYDROGEN, 1),),
        outputs=((Species.HYDROGEN, 2),),
        label="H2 dissociation",
    ),
)
