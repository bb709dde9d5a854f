"""ReactionCoordinator — атомарные конверсии между species ledgers.

Координатор владеет одним TokenLedger на каждый species (owner каждого
ledger — identity координатора) и выполняет реакции по таблице правил:

1. Проверка: caller держит >= требуемого количества каждого входа
   (иначе InsufficientReactant с названием species и количеством)
2. Burn входов у caller
3. Mint выходов caller
4. Инкремент счётчика реакции (+ energy accumulator)
5. ReactionEvent с описанием

Шаги 2-5 выполняются внутри atomic scope: при любой ошибке состояние всех
ledgers, счётчики и журнал событий возвращаются к исходному. Подписчики
журнала получают события реакции только после её фиксации.
Порядок реакций не навязывается: каждая реакция — независимая конверсия.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple

from src.core.contracts import validate_reaction_stats
from src.core.domain.events import EventLog, ReactionEvent
from src.core.domain.identity import derive_address, normalize_address, normalize_contract_address
from src.core.domain.reaction_stats import ReactionStats
from src.core.domain.species import Species
from src.core.errors import InsufficientReactant
from src.ledger.atomic import atomic
from src.ledger.token_ledger import TokenLedger, validate_amount
from src.reactions.rules import ReactionRule, validate_rule_table

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class CoordinatorConfig:
    """Конфигурация координатора.

    initial_allocation: species → количество, зачисляемое deployer при создании
    validate_contracts: проверять события и статистику по JSON Schema контрактам
    """

    initial_allocation: Mapping[Species, int] = field(default_factory=dict)
    validate_contracts: bool = False


# =============================================================================
# COORDINATOR
# =============================================================================


class ReactionCoordinator:
    """Координатор реакций над набором species ledgers."""

    def __init__(
        self,
        species: Sequence[Species],
        rules: Sequence[ReactionRule],
        deployer: str,
        config: Optional[CoordinatorConfig] = None,
        event_log: Optional[EventLog] = None,
        address: Optional[str] = None,
    ):
        """
        Args:
            species: Species в порядке, используемом query-операциями
            rules: Таблица правил реакций
            deployer: Identity создателя (получает initial_allocation)
            config: Конфигурация (по умолчанию пустая аллокация)
            event_log: Общий журнал событий
            address: Identity координатора (по умолчанию derive_address)
        """
        if len(species) < 2:
            raise ValueError("A reaction coordinator requires at least two species")
        if len(set(species)) != len(species):
            raise ValueError(f"Duplicate species: {list(species)}")

        validate_rule_table(rules, species)

        self.config = config or CoordinatorConfig()
        self.deployer = normalize_address(deployer)
        self.address = normalize_contract_address(address) if address else derive_address(
            "coordinator", type(self).__name__, self.deployer
        )
        self.events = (
            event_log if event_log is not None
            else EventLog(validate_records=self.config.validate_contracts)
        )

        self._species: Tuple[Species, ...] = tuple(species)
        self._rules: Dict[str, ReactionRule] = {r.key: r for r in rules}
        self._counters: Dict[str, int] = {r.counter: 0 for r in rules}
        self._total_energy_released = 0

        # Species ledgers создаются один раз и не заменяются
        self._ledgers: Dict[Species, TokenLedger] = {
            s: TokenLedger(
                name=s.token_name,
                symbol=s.symbol,
                owner=self.address,
                event_log=self.events,
                address=derive_address("species", self.address, s.value),
            )
            for s in self._species
        }

        for s, qty in self.config.initial_allocation.items():
            if s not in self._ledgers:
                raise ValueError(f"Initial allocation for unknown species {s}")
            qty = validate_amount(qty)
            if qty > 0:
                self._ledgers[s].mint(self.address, self.deployer, qty)

    # -------------------------------------------------------------------------
    # Reactions
    # -------------------------------------------------------------------------

    def react(self, caller: str, key: str) -> ReactionEvent:
        """
        Выполнение реакции key от имени caller.

        Returns:
            ReactionEvent с описанием выполненной реакции

        Raises:
            KeyError: Если реакция неизвестна
            InsufficientReactant: Если caller не хватает какого-либо входа
        """
        if key not in self._rules:
            raise KeyError(f"Unknown reaction: {key}")

        rule = self._rules[key]
        account = normalize_address(caller)

        for species, required in rule.inputs:
            available = self._ledgers[species].balance_of(account)
            if available < required:
                logger.debug(
                    "%s rejected for %s: %s available=%d required=%d",
                    key, account, species.symbol, available, required,
                )
                raise InsufficientReactant(species, available, required, reaction=key)

        counters_before = dict(self._counters)
        energy_before = self._total_energy_released

        def undo_counters() -> None:
            self._counters = counters_before
            self._total_energy_released = energy_before

        with atomic(self._ledgers.values(), self.events, on_rollback=[undo_counters]):
            for species, qty in rule.inputs:
                self._ledgers[species].burn(self.address, account, qty)
            for species, qty in rule.outputs:
                self._ledgers[species].mint(self.address, account, qty)

            self._counters[rule.counter] += 1
            self._total_energy_released += rule.energy_mev

            event = self.events.emit(
                ReactionEvent(
                    coordinator=self.address,
                    reaction=rule.key,
                    caller=account,
                    consumed=rule.consumed(),
                    produced=rule.produced(),
                    energy_released=rule.energy_mev,
                    description=rule.describe(),
                    sequence=self._counters[rule.counter],
                )
            )

        logger.info("%s by %s: %s", key, account, event.description)
        return event

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def species(self) -> Tuple[Species, ...]:
        return self._species

    @property
    def rules(self) -> Tuple[ReactionRule, ...]:
        return tuple(self._rules.values())

    @property
    def total_energy_released(self) -> int:
        return self._total_energy_released

    def ledger(self, species: Species) -> TokenLedger:
        if species not in self._ledgers:
            raise KeyError(f"No ledger for species {species}")
        return self._ledgers[species]

    def balance_of(self, species: Species, account: str) -> int:
        return self.ledger(species).balance_of(account)

    def reaction_count(self, key: str) -> int:
        if key not in self._rules:
            raise KeyError(f"Unknown reaction: {key}")
        return self._counters[self._rules[key].counter]

    def get_user_balances(self, account: str) -> Tuple[int, ...]:
        """Балансы account по всем species (в порядке species)."""
        return tuple(self._ledgers[s].balance_of(account) for s in self._species)

    def get_reaction_stats(self) -> ReactionStats:
        """
        Снимок счётчиков, энергии и supply.

        Raises:
            ContractViolation: Если validate_contracts и снимок нарушает контракт
        """
        stats = ReactionStats(
            coordinator=self.address,
            counters=dict(self._counters),
            total_energy_released=self._total_energy_released,
            total_supplies={s.symbol: self._ledgers[s].total_supply for s in self._species},
        )
        if self.config.validate_contracts:
            validate_reaction_stats(stats.model_dump(mode="json"))
        return stats

    def get_token_addresses(self) -> Tuple[str, ...]:
        return tuple(self._ledgers[s].address for s in self._species)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(address={self.address!r}, "
            f"species={[s.symbol for s in self._species]})"
        )
