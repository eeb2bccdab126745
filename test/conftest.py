"""
Test Configuration and Fixtures

- Environment is pinned before any application import (settings read env at import time)
- Integration tests get a fresh SQLite file per test; the engine manager is
  pointed at it and the schema is created from the ORM metadata
- Passenger and trip fixtures built on test/shared/seed.py
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_dir = Path(__file__).parent

    test_log_dir = test_dir / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{test_dir / "test_log" / "bootstrap.db"}'
    os.environ['ENABLE_HOLD_SWEEPER'] = 'false'
    os.environ['PAYSTACK_BASE_URL'] = 'https://paystack.test'
    os.environ['PAYSTACK_SECRET_KEY'] = 'sk_test_suite'
    os.environ.setdefault('DEBUG', 'false')


_early_setup_test_environment()

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402

from src.platform.config.di import container  # noqa: E402
from src.platform.database.orm_db_setting import (  # noqa: E402
    create_db_and_tables,
    engine_manager,
)
from src.service.reservation.domain.entity.trip_entity import TripEntity  # noqa: E402
from src.service.shared_kernel.domain.entity.user_entity import UserEntity  # noqa: E402
from test.shared.seed import (  # noqa: E402
    ANOTHER_PASSENGER_EMAIL,
    ANOTHER_PASSENGER_NAME,
    TEST_PASSENGER_EMAIL,
    TEST_PASSENGER_NAME,
    create_trip,
    create_user,
)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    # Anything not explicitly unit is treated as integration
    for item in items:
        if item.get_closest_marker('unit') is None and item.get_closest_marker('integration') is None:
            item.add_marker(pytest.mark.integration)


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[str, None]:
    """Fresh SQLite database for one test."""
    url = f'sqlite+aiosqlite:///{tmp_path / "bus_booking_test.db"}'
    engine_manager.reset(url)
    await create_db_and_tables()
    try:
        yield url
    finally:
        await container.hold_expiry_scheduler().shutdown()
        container.reset_singletons()
        await engine_manager.dispose()
        engine_manager.reset()


@pytest.fixture
async def passenger(database: str) -> UserEntity:
    return await create_user(name=TEST_PASSENGER_NAME, email=TEST_PASSENGER_EMAIL)


@pytest.fixture
async def another_passenger(database: str) -> UserEntity:
    return await create_user(name=ANOTHER_PASSENGER_NAME, email=ANOTHER_PASSENGER_EMAIL)


@pytest.fixture
async def trip(database: str) -> TripEntity:
    return await create_trip(seat_count=10)
