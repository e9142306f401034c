from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from opentelemetry import trace

from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.service.reservation.app.command.confirm_reservation_use_case import (
    ConfirmReservationUseCase,
)
from reservation_engine.service.reservation.app.command.create_reservation_use_case import (
    CreateReservationUseCase,
)
from reservation_engine.service.reservation.app.command.release_reservation_use_case import (
    ReleaseReservationUseCase,
)
from reservation_engine.service.reservation.app.query.get_reservation_use_case import (
    GetReservationUseCase,
)
from reservation_engine.service.reservation.driving_adapter.http_controller.auth.user_identity import (
    get_current_user_id,
)
from reservation_engine.service.reservation.driving_adapter.http_controller.schema.reservation_schema import (
    ReservationCreateRequest,
    ReservationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: ReservationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: CreateReservationUseCase = Depends(CreateReservationUseCase.depends),
) -> ReservationResponse:
    with tracer.start_as_current_span('controller.create_reservation') as span:
        span.set_attribute('show.id', str(request.show_id))
        span.set_attribute('seat.count', len(request.seat_ids))

        reservation = await use_case.execute(
            show_id=request.show_id,
            seat_ids=request.seat_ids,
            user_id=user_id,
        )

        span.set_attribute('reservation.id', str(reservation.id))
        return ReservationResponse.from_entity(reservation)


@router.get('/{reservation_id}')
@Logger.io
async def get_reservation(
    reservation_id: UUID,
    user_id: str = Depends(get_current_user_id),
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.execute(reservation_id=reservation_id, user_id=user_id)
    return ReservationResponse.from_entity(reservation)


@router.post('/{reservation_id}/confirm', status_code=status.HTTP_200_OK)
@Logger.io
async def confirm_reservation(
    reservation_id: UUID,
    user_id: str = Depends(get_current_user_id),
    use_case: ConfirmReservationUseCase = Depends(ConfirmReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.execute(reservation_id=reservation_id, user_id=user_id)
    return ReservationResponse.from_entity(reservation)


@router.delete('/{reservation_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def release_reservation(
    reservation_id: UUID,
    user_id: str = Depends(get_current_user_id),
    use_case: ReleaseReservationUseCase = Depends(ReleaseReservationUseCase.depends),
) -> Response:
    await use_case.execute(reservation_id=reservation_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
