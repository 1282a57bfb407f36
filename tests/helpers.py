"""Shared test data and builders for hotelbook tests.

These are NOT fixtures - they are regular values and functions.
"""

from __future__ import annotations

from datetime import date

from hotelbook.domain.inputs import CreateReservationInput
from hotelbook.domain.models import (
    Category,
    Feature,
    GuestPrice,
    Room,
    Service,
    User,
)
from hotelbook.infra.time import today

NEXT_YEAR = today().year + 1

USERS = [
    User(id="user-1", name="Ana", email="ana@example.com"),
    User(id="user-2", name="Bruno", email="bruno@example.com"),
    User(id="user-3", name="Carla", email="carla@example.com"),
]

WIFI = Feature(id="feat-wifi", name="wifi")
TV = Feature(id="feat-tv", name="tv")
MINIBAR = Feature(id="feat-minibar", name="minibar")
FEATURES = [WIFI, TV, MINIBAR]

ROOMS = [
    Room(id="room-101", number=101, category=Category.SUITE, price_cents=10000, features=[WIFI]),
    Room(id="room-102", number=102, category=Category.SUITE_PREMIUM, price_cents=20000, features=[WIFI, TV]),
    Room(id="room-103", number=103, category=Category.SUITE, price_cents=12000),
    Room(id="room-201", number=201, category=Category.LOFT, price_cents=15000),
    Room(id="room-202", number=202, category=Category.LOFT_PREMIUM, price_cents=30000),
    Room(id="room-301", number=301, category=Category.STANDARD, price_cents=5000),
]

BREAKFAST = Service(id="svc-breakfast", type="breakfast", price_cents=5000)
SPA = Service(id="svc-spa", type="spa", price_cents=8000)
SERVICES = [BREAKFAST, SPA]

GUEST_PRICE = GuestPrice(id="gp-1", name="guest", price_cents=2000)


def stay(
    start: date,
    end: date,
    *,
    room_id: str = "room-101",
    guests: int = 1,
    services: list[str] | None = None,
) -> CreateReservationInput:
    """Build a check-in body for a stay from start to end."""
    names = {
        "guest_name1": "Ana",
        "guest_last_name1": "Silva",
    }
    if guests >= 2:
        names.update(guest_name2="Bia", guest_last_name2="Silva")
    if guests >= 3:
        names.update(guest_name3="Caio", guest_last_name3="Silva")
    return CreateReservationInput(
        room_id=room_id,
        start_day=start.day,
        start_month=start.month,
        start_year=start.year,
        end_day=end.day,
        end_month=end.month,
        end_year=end.year,
        services=services or [],
        **names,
    )
