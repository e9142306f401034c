from abc import ABC, abstractmethod
from datetime import datetime
from typing import Collection, Optional
from uuid import UUID

from reservation_engine.service.reservation.domain.entity.reservation_entity import Reservation


class IReservationCommandRepo(ABC):
    """
    Repository interface for reservation writes.

    Implementations operate on the session owned by the unit of work; nothing is
    committed here.
    """

    @abstractmethod
    async def exists_live_claim(
        self, *, show_id: UUID, seat_ids: Collection[UUID], now: datetime
    ) -> bool:
        """
        Whether any of the seats is covered by a live reservation of the show.

        Live means CONFIRMED, or HOLD with a deadline after `now`.
        """
        pass

    @abstractmethod
    async def create(self, *, reservation: Reservation) -> Reservation:
        """Insert the reservation together with its reserved seats"""
        pass

    @abstractmethod
    async def get_for_update(
        self, *, reservation_id: UUID, user_id: Optional[str] = None
    ) -> Optional[Reservation]:
        """
        Load a reservation, taking an exclusive row lock.

        With `user_id`, only a reservation held by that user is returned, so a
        foreign reservation looks exactly like a missing one.
        """
        pass

    @abstractmethod
    async def update_status(self, *, reservation: Reservation) -> Reservation:
        """Persist status and expires_at of an already locked reservation"""
        pass

    @abstractmethod
    async def delete(self, *, reservation_id: UUID) -> None:
        """Delete the reserved seats, then the reservation itself"""
        pass

    @abstractmethod
    async def delete_expired_holds(self, *, now: datetime) -> int:
        """Set-based delete of HOLD reservations whose deadline is before `now`"""
        pass
