"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from reservation_engine.platform.config.core_setting import Settings
from reservation_engine.platform.database.orm_db_setting import Database, new_session
from reservation_engine.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from reservation_engine.service.reservation.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)
from reservation_engine.service.reservation.driven_adapter.repo.reservation_query_repo_impl import (
    ReservationQueryRepoImpl,
)
from reservation_engine.service.reservation.driven_adapter.repo.show_catalog_query_repo_impl import (
    ShowCatalogQueryRepoImpl,
)
from reservation_engine.service.reservation.driving_adapter.background.reservation_expiry_sweeper import (
    ReservationExpirySweeper,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager, event-loop-aware)
    database = providers.Singleton(Database)

    # Read repositories (stateless - use session_factory per call)
    show_catalog_query_repo = providers.Singleton(
        ShowCatalogQueryRepoImpl, session_factory=database.provided.session
    )
    reservation_query_repo = providers.Singleton(
        ReservationQueryRepoImpl, session_factory=database.provided.session
    )

    # Unit of work for work outside a request (opens its own session per transaction)
    background_unit_of_work = providers.Factory(SqlAlchemyUnitOfWork, session_factory=new_session)

    # Expiry sweeper
    expire_reservations_use_case = providers.Factory(
        ExpireReservationsUseCase, uow=background_unit_of_work
    )
    reservation_expiry_sweeper = providers.Singleton(
        ReservationExpirySweeper,
        expire_use_case_factory=expire_reservations_use_case.provider,
        interval_seconds=config_service.provided.RESERVATION_SWEEP_INTERVAL_SECONDS,
    )


container = Container()
