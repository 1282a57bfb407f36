"""Shared pytest fixtures for hotelbook tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from helpers import (  # noqa: E402
    FEATURES,
    GUEST_PRICE,
    ROOMS,
    SERVICES,
    USERS,
)
from hotelbook.domain.reservations import ReservationManager  # noqa: E402
from hotelbook.domain.rooms import RoomCatalog  # noqa: E402
from hotelbook.infra.memory_store import MemoryUnitOfWork  # noqa: E402


@pytest.fixture
def uow():
    """In-memory unit of work seeded with users, rooms and the catalog."""
    uow = MemoryUnitOfWork()
    uow.seed(*USERS, *FEATURES, *ROOMS, *SERVICES, GUEST_PRICE)
    return uow


@pytest.fixture
def manager(uow):
    return ReservationManager(uow)


@pytest.fixture
def catalog(uow):
    return RoomCatalog(uow)
