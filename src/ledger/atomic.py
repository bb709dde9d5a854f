"""Atomic scope — all-or-nothing выполнение над несколькими ledgers.

Внутри scope каждый ledger ведёт undo-журнал затронутых записей, а журнал
событий откладывает доставку подписчикам. Если тело scope завершается
исключением, журналы откатываются, события scope удаляются, вызываются
on_rollback callbacks, исключение пробрасывается дальше. При успехе журналы
фиксируются и подписчики получают события уже после фиксации состояния.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, Optional, Sequence

from src.core.domain.events import EventLog
from src.ledger.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


@contextmanager
def atomic(
    ledgers: Iterable[TokenLedger],
    event_log: Optional[EventLog] = None,
    on_rollback: Sequence[Callable[[], None]] = (),
) -> Iterator[None]:
    """
    Journal/rollback scope.

    Args:
        ledgers: Ledgers, затрагиваемые операцией
        event_log: Журнал, события которого откатываются вместе с состоянием
        on_rollback: Откат состояния вне ledgers (счётчики, cooldown записи)
    """
    ledgers = list(ledgers)
    mark = event_log.begin_scope() if event_log is not None else None
    for ledger in ledgers:
        ledger.begin_journal()

    try:
        yield
    except BaseException as e:
        try:
            touched = sum(ledger.rollback_journal() for ledger in ledgers)
            if event_log is not None:
                event_log.truncate(mark)
            for undo in on_rollback:
                undo()
        finally:
            if event_log is not None:
                event_log.end_scope()
        logger.warning(
            "atomic scope rolled back %d ledger(s), %d entr(ies): %s", len(ledgers), touched, e
        )
        raise

    for ledger in ledgers:
        ledger.commit_journal()
    if event_log is not None:
        event_log.end_scope()
