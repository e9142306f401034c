"""
Test Configuration and Fixtures

This module provides:
- Test database setup (create, reset schema, alembic upgrade) at session start
- Table cleanup before each integration test
- Catalog fixtures (movie, screen, seats, show) written straight to PostgreSQL
- A session-scoped TestClient running a test app without the expiry sweeper

Architecture:
- Unit tests (test/**/unit/): Override fixtures with mocks in their own conftest.py
- Integration tests: Use the real database with proper cleanup; skipped (and reported) when
  PostgreSQL is unreachable; the run aborts instead when integration tests are selected
  explicitly (-m integration, an integration path, or RESERVATION_REQUIRE_DB=1)
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# settings reads POSTGRES_DB and friends at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ['POSTGRES_DB'] = 'reservation_engine_test_db'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # The sweeper is driven explicitly by tests
    os.environ['RESERVATION_SWEEP_ENABLED'] = 'false'

    # Enough connections for the concurrent-create tests
    os.environ.setdefault('DB_POOL_SIZE', '5')
    os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '10')


_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator, AsyncIterator, Generator  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from dataclasses import dataclass  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402
from uuid import UUID  # noqa: E402

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from dotenv import load_dotenv  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402


# =============================================================================
# Pytest Hooks: Detect test type and setup accordingly
# =============================================================================
_database_error: str | None = None


def _is_unit_test_only_run(config: pytest.Config) -> bool:
    markexpr = config.getoption('markexpr', default='')
    if markexpr and 'unit' in str(markexpr) and 'not unit' not in str(markexpr):
        return True

    args = config.args or []
    test_paths = [arg for arg in args if arg and not arg.startswith('-')]
    return bool(test_paths and all('/unit' in path or '\\unit' in path for path in test_paths))


def _is_integration_run(config: pytest.Config) -> bool:
    if os.environ.get('RESERVATION_REQUIRE_DB', '').lower() in ('1', 'true', 'yes'):
        return True

    markexpr = str(config.getoption('markexpr', default='') or '')
    if 'integration' in markexpr and 'not integration' not in markexpr:
        return True

    args = config.args or []
    return any('/integration' in arg or '\\integration' in arg for arg in args)


def pytest_sessionstart(session: pytest.Session) -> None:
    global _database_error
    if _is_unit_test_only_run(session.config):
        return

    try:
        asyncio.run(_setup_test_database())
        # env.py runs its own event loop, so migrations run after ours has closed
        _run_migrations()
    except Exception as e:  # connection refused, auth failure, missing driver
        _database_error = f'PostgreSQL unavailable: {type(e).__name__}: {e}'

    if _database_error and _is_integration_run(session.config):
        pytest.exit(
            f'{_database_error}. Integration tests were requested and cannot be skipped.',
            returncode=pytest.ExitCode.USAGE_ERROR,
        )


def pytest_report_header(config: pytest.Config) -> str:
    if _is_unit_test_only_run(config):
        return 'database: not used (unit tests only)'
    if _database_error:
        return f'database: {_database_error} -> integration tests will be SKIPPED'
    return f'database: {_get_db_config()["test_db"]} ready'


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'unit' in markers:
            continue
        if _database_error:
            item.add_marker(pytest.mark.skip(reason=_database_error))
        else:
            item.fixturenames.insert(0, 'clean_database')


def pytest_terminal_summary(terminalreporter: Any) -> None:
    if not _database_error:
        return
    skipped = [
        report
        for report in terminalreporter.stats.get('skipped', [])
        if _database_error in str(report.longrepr)
    ]
    if skipped:
        terminalreporter.section('database unavailable', sep='!', red=True, bold=True)
        terminalreporter.write_line(
            f'{len(skipped)} integration test(s) did NOT run: {_database_error}', red=True
        )
        terminalreporter.write_line(
            'Concurrency guarantees are unverified. '
            'Set RESERVATION_REQUIRE_DB=1 to fail instead of skipping.',
            red=True,
        )


# =============================================================================
# Database Configuration
# =============================================================================
def _get_db_config() -> dict[str, str]:
    root = Path(__file__).parent.parent
    env_file = root / '.env' if (root / '.env').exists() else root / '.env.example'
    load_dotenv(env_file)

    return {
        'user': os.getenv('POSTGRES_USER', 'postgres'),
        'password': os.getenv('POSTGRES_PASSWORD', 'postgres'),
        'host': os.getenv('POSTGRES_SERVER', 'localhost'),
        'port': os.getenv('POSTGRES_PORT', '5432'),
        'test_db': os.getenv('POSTGRES_DB', 'reservation_engine_test_db'),
    }


def _get_test_database_url() -> str:
    cfg = _get_db_config()
    return (
        f'postgresql+asyncpg://{cfg["user"]}:{cfg["password"]}'
        f'@{cfg["host"]}:{cfg["port"]}/{cfg["test_db"]}'
    )


# =============================================================================
# Database Setup and Cleanup
# =============================================================================
async def _setup_test_database() -> None:
    db_url = _get_test_database_url()
    cfg = _get_db_config()

    # Create database if not exists
    postgres_url = db_url.replace(f'/{cfg["test_db"]}', '/postgres')
    engine = create_async_engine(postgres_url, isolation_level='AUTOCOMMIT')
    try:
        async with engine.begin() as conn:
            result = await conn.execute(
                text('SELECT 1 FROM pg_database WHERE datname = :name'), {'name': cfg['test_db']}
            )
            if not result.fetchone():
                await conn.execute(text(f'CREATE DATABASE "{cfg["test_db"]}"'))
    finally:
        await engine.dispose()

    # Reset schema
    reset_engine = create_async_engine(db_url)
    try:
        async with reset_engine.begin() as conn:
            await conn.execute(text('DROP SCHEMA public CASCADE'))
            await conn.execute(text('CREATE SCHEMA public'))
    finally:
        await reset_engine.dispose()


def _run_migrations() -> None:
    from reservation_engine.platform.constant.path import ALEMBIC_INI

    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option('sqlalchemy.url', _get_test_database_url())
    command.upgrade(alembic_cfg, 'head')


_RESERVATION_TABLES = ['reserved_seat', 'reservation', 'show', 'seat', 'screen', 'movie']


async def _clean_all_tables() -> None:
    engine = create_async_engine(_get_test_database_url())
    try:
        async with engine.begin() as conn:
            quoted = [f'"{t}"' for t in _RESERVATION_TABLES]
            await conn.execute(text(f'TRUNCATE {", ".join(quoted)} CASCADE'))
    finally:
        await engine.dispose()


# =============================================================================
# Integration Test Fixtures
# =============================================================================
@pytest.fixture(scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    await _clean_all_tables()
    yield

    from reservation_engine.platform.database.orm_db_setting import _engine_manager

    # Release connections opened on this test's loop while the loop is still alive
    if _engine_manager._loop is asyncio.get_running_loop():
        await _engine_manager.dispose()


@pytest.fixture
def execute_sql_statement() -> Any:
    async def _execute(
        statement: str, params: dict[str, Any] | None = None, fetch: bool = False
    ) -> list[dict[str, Any]] | None:
        engine = create_async_engine(_get_test_database_url())
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(statement), params or {})
                if fetch:
                    return [dict(row._mapping) for row in result]
                return None
        finally:
            await engine.dispose()

    return _execute


# =============================================================================
# Catalog Fixtures
# =============================================================================
@dataclass
class SeededShow:
    show_id: UUID
    screen_id: UUID
    movie_id: UUID
    base_price: Decimal
    seat_ids: dict[str, UUID]  # 'A1' -> seat id


async def _insert_show(
    *,
    seats: dict[str, str],
    base_price: Decimal = Decimal('10.00'),
    title: str = 'Test Movie',
    screen_name: str = 'Screen 1',
) -> SeededShow:
    from reservation_engine.service.reservation.domain.entity.reservation_entity import (
        generate_id,
    )

    movie_id, screen_id, show_id = generate_id(), generate_id(), generate_id()
    seat_ids = {label: generate_id() for label in seats}
    start_time = datetime.now(timezone.utc) + timedelta(days=1)

    engine = create_async_engine(_get_test_database_url())
    try:
        async with engine.begin() as conn:
            await conn.execute(
                text(
                    'INSERT INTO movie (id, title, description, duration) '
                    "VALUES (:id, :title, '', 120)"
                ),
                {'id': movie_id, 'title': title},
            )
            await conn.execute(
                text('INSERT INTO screen (id, name, seats) VALUES (:id, :name, :seats)'),
                {'id': screen_id, 'name': screen_name, 'seats': len(seats)},
            )
            for label, seat_type in seats.items():
                await conn.execute(
                    text(
                        'INSERT INTO seat (id, screen_id, "row", number, seat_type) '
                        'VALUES (:id, :screen_id, :row, :number, :seat_type)'
                    ),
                    {
                        'id': seat_ids[label],
                        'screen_id': screen_id,
                        'row': label[0],
                        'number': int(label[1:]),
                        'seat_type': seat_type,
                    },
                )
            await conn.execute(
                text(
                    'INSERT INTO "show" (id, movie_id, screen_id, start_time, duration, base_price) '
                    'VALUES (:id, :movie_id, :screen_id, :start_time, 120, :base_price)'
                ),
                {
                    'id': show_id,
                    'movie_id': movie_id,
                    'screen_id': screen_id,
                    'start_time': start_time,
                    'base_price': base_price,
                },
            )
    finally:
        await engine.dispose()

    return SeededShow(
        show_id=show_id,
        screen_id=screen_id,
        movie_id=movie_id,
        base_price=base_price,
        seat_ids=seat_ids,
    )


@pytest.fixture
async def seeded_show(clean_database: None) -> SeededShow:
    """S1: A1 standard, A2 premium, A3 accessible, B1 standard; base price 10.00"""
    return await _insert_show(
        seats={'A1': 'STANDARD', 'A2': 'PREMIUM', 'A3': 'ACCESSIBLE', 'B1': 'STANDARD'},
    )


@pytest.fixture
async def other_show(clean_database: None) -> SeededShow:
    """A second show on its own screen"""
    return await _insert_show(
        seats={'A1': 'STANDARD'}, title='Other Movie', screen_name='Screen 2'
    )


# =============================================================================
# Session-scoped Fixtures
# =============================================================================
@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    """Minimal lifespan for testing - no tracing exporter, no sweeper."""
    from reservation_engine.platform.config.di import container
    from reservation_engine.platform.config.wire_modules import WIRE_MODULES
    from reservation_engine.platform.database.orm_db_setting import dispose_engine
    from reservation_engine.platform.logging.loguru_io import Logger

    Logger.base.info('🧪 [Test App] Starting up...')
    container.wire(modules=WIRE_MODULES)

    yield

    await dispose_engine()
    container.unwire()
    Logger.base.info('👋 [Test App] Shutdown complete')


@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    from reservation_engine.platform.app_factory import create_app

    app = create_app(
        lifespan=lifespan_for_tests,
        title_suffix=' (Test)',
        description='Test Application - no expiry sweeper',
        service_name='test-reservation-engine',
    )
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {'X-User-Id': 'user-1'}


@pytest.fixture
def another_user_headers() -> dict[str, str]:
    return {'X-User-Id': 'user-2'}
