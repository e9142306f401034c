from datetime import datetime, timezone
from typing import Optional

from reservation_engine.platform.database.unit_of_work import AbstractUnitOfWork
from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.platform.metrics.reservation_metrics import metrics


class ExpireReservationsUseCase:
    """
    Delete every HOLD whose deadline has passed (one set-based statement).

    Expired holds already stop blocking seats through the live predicate, so this is
    garbage collection: running it twice in a row is a no-op the second time.
    """

    def __init__(self, *, uow: AbstractUnitOfWork):
        self.uow = uow

    @Logger.io
    async def execute(self, *, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        async with self.uow:
            expired_count = await self.uow.reservation_command_repo.delete_expired_holds(now=now)
            await self.uow.commit()

        metrics.record_expired(count=expired_count)
        if expired_count:
            Logger.base.info(f'🧹 [SWEEPER] Expired {expired_count} hold reservation(s).')
        return expired_count
