from datetime import datetime, timedelta, timezone
import random
from typing import List, Optional, Self
from uuid import UUID

import anyio
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import DBAPIError

from reservation_engine.platform.config.core_setting import settings
from reservation_engine.platform.database.db_error import is_serialization_failure
from reservation_engine.platform.database.unit_of_work import (
    AbstractUnitOfWork,
    get_serializable_unit_of_work,
)
from reservation_engine.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
)
from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.platform.metrics.reservation_metrics import metrics
from reservation_engine.service.reservation.domain.entity.reservation_entity import (
    Reservation,
    generate_id,
)


SEATS_ALREADY_RESERVED = 'One or more seats are already reserved'


class CreateReservationUseCase:
    """
    Place a HOLD on a set of seats for a show.

    The whole operation runs in one SERIALIZABLE transaction:
    1. Load the show (NotFound if absent)
    2. Load the requested seats of the show's screen (NotFound if any id is unknown
       or belongs to another screen)
    3. Check that no live reservation covers any requested seat (Conflict)
    4. Freeze per-seat prices and persist the reservation with its reserved seats

    Two concurrent creates that both pass step 3 for overlapping seats cannot both
    commit: PostgreSQL aborts one with a serialization failure (40001) or a deadlock
    (40P01). PostgreSQL also aborts transactions whose seats do not overlap, since its
    predicate locks can cover a whole page or table, so an aborted transaction is run
    again from step 1. The rerun sees the winner's reservation when the seats really
    overlap and fails with Conflict at step 3. A Conflict is never retried.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        hold_window: Optional[timedelta] = None,
        max_attempts: Optional[int] = None,
        retry_delay_seconds: Optional[float] = None,
    ):
        self.uow = uow
        self.hold_window = hold_window or timedelta(minutes=settings.RESERVATION_HOLD_MINUTES)
        self.max_attempts = max(1, max_attempts or settings.RESERVATION_CREATE_MAX_ATTEMPTS)
        self.retry_delay_seconds = (
            settings.RESERVATION_CREATE_RETRY_DELAY_SECONDS
            if retry_delay_seconds is None
            else retry_delay_seconds
        )
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_serializable_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        show_id: UUID,
        seat_ids: List[UUID],
        user_id: str,
        now: Optional[datetime] = None,
    ) -> Reservation:
        if not seat_ids:
            raise DomainError('At least one seat must be reserved')
        if len(set(seat_ids)) != len(seat_ids):
            raise DomainError('Seat IDs must be unique')

        now = now or datetime.now(timezone.utc)
        with (
            self.tracer.start_as_current_span(
                'use_case.create_reservation',
                attributes={
                    'show.id': str(show_id),
                    'seat.count': len(seat_ids),
                    'user.id': user_id,
                },
            ) as span,
            metrics.track_operation(operation='create'),
        ):
            reservation = await self._create_with_rerun(
                show_id=show_id, seat_ids=seat_ids, user_id=user_id, now=now
            )
            span.set_attribute('reservation.id', str(reservation.id))

        Logger.base.info(
            f'🎟️ [CREATE] Reservation {reservation.id} held {len(seat_ids)} seat(s) '
            f'for show {show_id} until {reservation.expires_at}'
        )
        return reservation

    async def _create_with_rerun(
        self, *, show_id: UUID, seat_ids: List[UUID], user_id: str, now: datetime
    ) -> Reservation:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._create_in_transaction(
                    show_id=show_id, seat_ids=seat_ids, user_id=user_id, now=now
                )
            except DBAPIError as e:
                if not is_serialization_failure(e):
                    raise
                if attempt >= self.max_attempts:
                    Logger.base.warning(
                        f'⚔️ [CREATE] Still aborted after {attempt} attempts: show={show_id}'
                    )
                    raise ConflictError(SEATS_ALREADY_RESERVED) from e

                delay = random.uniform(0, self.retry_delay_seconds * attempt)
                Logger.base.info(
                    f'🔁 [CREATE] Transaction aborted by a concurrent one, '
                    f'attempt {attempt}/{self.max_attempts}, rerun in {delay:.3f}s: show={show_id}'
                )
                await anyio.sleep(delay)

    async def _create_in_transaction(
        self, *, show_id: UUID, seat_ids: List[UUID], user_id: str, now: datetime
    ) -> Reservation:
        async with self.uow:
            show = await self.uow.show_catalog_query_repo.get_show(show_id=show_id)
            if not show:
                raise NotFoundError(f'Show with ID {show_id} not found')

            seats = await self.uow.show_catalog_query_repo.get_seats_of_screen(
                screen_id=show.screen_id, seat_ids=seat_ids
            )
            if len(seats) != len(seat_ids):
                raise NotFoundError('One or more seat IDs are invalid')

            if await self.uow.reservation_command_repo.exists_live_claim(
                show_id=show.id, seat_ids=seat_ids, now=now
            ):
                raise ConflictError(SEATS_ALREADY_RESERVED)

            seats_by_id = {seat.id: seat for seat in seats}
            reservation = Reservation.hold(
                id=generate_id(),
                user_id=user_id,
                show=show,
                seats=[seats_by_id[seat_id] for seat_id in seat_ids],
                now=now,
                hold_window=self.hold_window,
            )
            await self.uow.reservation_command_repo.create(reservation=reservation)
            await self.uow.commit()

        return reservation
