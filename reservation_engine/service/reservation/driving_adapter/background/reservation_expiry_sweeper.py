from typing import Callable, Optional

import anyio
from anyio.abc import TaskGroup

from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.platform.metrics.reservation_metrics import metrics
from reservation_engine.service.reservation.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)


class ReservationExpirySweeper:
    """
    Periodically reclaims abandoned holds.

    Each tick builds a fresh use case (fresh unit of work, fresh transaction).
    A failing tick is logged and the next one simply tries again.
    """

    def __init__(
        self,
        *,
        expire_use_case_factory: Callable[[], ExpireReservationsUseCase],
        interval_seconds: float,
    ) -> None:
        self.expire_use_case_factory = expire_use_case_factory
        self.interval_seconds = interval_seconds

    async def run_once(self) -> Optional[int]:
        try:
            return await self.expire_use_case_factory().execute()
        except Exception as e:
            metrics.record_sweep_failure()
            Logger.base.error(f'❌ [SWEEPER] Expiry run failed, retrying next tick: {e}')
            return None

    async def run_forever(self) -> None:
        Logger.base.info(f'🧹 [SWEEPER] Started, interval={self.interval_seconds}s')
        while True:
            await self.run_once()
            await anyio.sleep(self.interval_seconds)

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self.run_forever, name='reservation-expiry-sweeper')
