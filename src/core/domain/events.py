"""
Events — наблюдаемые записи ledger и reaction систем

Immutable Pydantic модели (frozen=True) для всех событий:
- TransferEvent: изменение балансов (mint: ZERO_ADDRESS → to, burn: from → ZERO_ADDRESS)
- ApprovalEvent: изменение allowance
- ReactionEvent: описание выполненной реакции
- SignalEvent: novelty signal от gated вызовов

Совместимость с JSON Schema: contracts/schema/ledger_event.json
"""

import logging
from typing import Callable, Dict, Iterator, List, Literal, Union

from pydantic import BaseModel, Field

from src.core.contracts import validate_ledger_event

logger = logging.getLogger(__name__)


# =============================================================================
# EVENT MODELS
# =============================================================================


class TransferEvent(BaseModel):
    """Изменение балансов токена."""

    kind: Literal["transfer"] = "transfer"
    token: str = Field(..., min_length=1, description="Адрес ledger токена")
    from_address: str = Field(..., min_length=1, description="Источник (ZERO_ADDRESS для mint)")
    to_address: str = Field(..., min_length=1, description="Получатель (ZERO_ADDRESS для burn)")
    value: int = Field(..., ge=0, description="Количество (неделимые единицы)")

    model_config = {"frozen": True}


class ApprovalEvent(BaseModel):
    """Изменение allowance (overwrite)."""

    kind: Literal["approval"] = "approval"
    token: str = Field(..., min_length=1, description="Адрес ledger токена")
    owner: str = Field(..., min_length=1, description="Владелец средств")
    spender: str = Field(..., min_length=1, description="Получатель разрешения")
    value: int = Field(..., ge=0, description="Новое значение allowance")

    model_config = {"frozen": True}


class ReactionEvent(BaseModel):
    """
    Запись о выполненной реакции.

    consumed/produced — словари symbol → количество.
    """

    kind: Literal["reaction"] = "reaction"
    coordinator: str = Field(..., min_length=1, description="Адрес координатора")
    reaction: str = Field(..., min_length=1, description="Ключ реакции (например, 'pp_fusion')")
    caller: str = Field(..., min_length=1, description="Инициатор реакции")
    consumed: Dict[str, int] = Field(..., description="Сожжённые входы")
    produced: Dict[str, int] = Field(..., description="Выпущенные выходы")
    energy_released: int = Field(0, ge=0, description="Выделенная энергия (MeV)")
    description: str = Field(..., min_length=1, description="Человекочитаемое описание")
    sequence: int = Field(..., ge=1, description="Порядковый номер реакции этого вида")

    model_config = {"frozen": True}


class SignalEvent(BaseModel):
    """Novelty signal от cooldown-gated вызова."""

    kind: Literal["signal"] = "signal"
    source: str = Field(..., min_length=1, description="Адрес источника сигнала")
    caller: str = Field(..., min_length=1, description="Инициатор")
    message: str = Field(..., min_length=1, description="Текст сигнала")
    ts: int = Field(..., ge=0, description="Unix timestamp (секунды)")

    model_config = {"frozen": True}


LedgerEvent = Union[TransferEvent, ApprovalEvent, ReactionEvent, SignalEvent]


# =============================================================================
# EVENT LOG
# =============================================================================


class EventLog:
    """
    Append-only журнал событий.

    Подписчики уведомляются сразу при emit только вне atomic scope.
    Внутри scope (begin_scope/end_scope) события копятся и доставляются
    после успешного завершения внешнего scope, когда состояние уже
    зафиксировано. События откаченной операции (truncate) не доставляются.

    validate_records=True: каждая запись проверяется по контракту
    ledger_event.json до добавления в журнал.
    """

    def __init__(self, validate_records: bool = False):
        self.validate_records = validate_records
        self._events: List[LedgerEvent] = []
        self._subscribers: List[Callable[[LedgerEvent], None]] = []
        self._scope_depth = 0
        self._scope_start = 0

    def emit(self, event: LedgerEvent) -> LedgerEvent:
        if self.validate_records:
            validate_ledger_event(event.model_dump(mode="json"))

        self._events.append(event)
        logger.debug("event %s: %s", event.kind, event.model_dump())
        if self._scope_depth == 0:
            self._notify([event])
        return event

    def subscribe(self, callback: Callable[[LedgerEvent], None]) -> None:
        self._subscribers.append(callback)

    # -------------------------------------------------------------------------
    # Scopes
    # -------------------------------------------------------------------------

    @property
    def in_scope(self) -> bool:
        return self._scope_depth > 0

    def begin_scope(self) -> int:
        """
        Открытие scope отложенной доставки.

        Returns:
            mark для truncate при откате
        """
        if self._scope_depth == 0:
            self._scope_start = len(self._events)
        self._scope_depth += 1
        return len(self._events)

    def end_scope(self) -> None:
        """
        Закрытие scope. Внешний scope доставляет накопленные события.

        Исключение подписчика пробрасывается: к этому моменту состояние
        операции уже зафиксировано.
        """
        if self._scope_depth == 0:
            raise RuntimeError("end_scope called without an open scope")
        self._scope_depth -= 1
        if self._scope_depth == 0:
            pending = self._events[self._scope_start:]
            self._scope_start = len(self._events)
            self._notify(pending)

    def mark(self) -> int:
        """Текущая позиция журнала (для последующего truncate)."""
        return len(self._events)

    def truncate(self, mark: int) -> None:
        """Удаление всех событий после mark (они не будут доставлены)."""
        if mark < 0 or mark > len(self._events):
            raise ValueError(f"Invalid event log mark {mark} (length {len(self._events)})")
        if self._scope_depth > 0 and mark < self._scope_start:
            raise ValueError(f"Cannot truncate below open scope start {self._scope_start}")
        del self._events[mark:]

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def of_kind(self, kind: str) -> List[LedgerEvent]:
        return [e for e in self._events if e.kind == kind]

    def to_records(self) -> List[dict]:
        """JSON-совместимые записи всех событий."""
        return [e.model_dump(mode="json") for e in self._events]

    def _notify(self, events: List[LedgerEvent]) -> None:
        for event in events:
            for callback in list(self._subscribers):
                callback(event)

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index: int) -> LedgerEvent:
        return self._events[index]
