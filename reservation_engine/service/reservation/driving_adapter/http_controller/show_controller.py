from uuid import UUID

from fastapi import APIRouter, Depends

from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.app.query.get_show_seat_availability_use_case import (
    GetShowSeatAvailabilityUseCase,
)
from reservation_engine.service.reservation.driving_adapter.http_controller.schema.show_schema import (
    ShowSeatAvailabilityResponse,
)


router = APIRouter()


@router.get('/{show_id}/seats')
@Logger.io
async def get_show_seats(
    show_id: UUID,
    use_case: GetShowSeatAvailabilityUseCase = Depends(GetShowSeatAvailabilityUseCase.depends),
) -> ShowSeatAvailabilityResponse:
    """Seat map of a show; a seat is RESERVED while a live reservation covers it."""
    availability = await use_case.execute(show_id=show_id)
    return ShowSeatAvailabilityResponse.from_entity(availability)
