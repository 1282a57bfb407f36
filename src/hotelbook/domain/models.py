"""Domain entities for rooms, reservations and the pricing catalog.

All amounts are integer cents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Category(str, Enum):
    SUITE = "SUITE"
    SUITE_PREMIUM = "SUITE_PREMIUM"
    LOFT = "LOFT"
    LOFT_PREMIUM = "LOFT_PREMIUM"
    STANDARD = "STANDARD"


class ReservationStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"


# Coarse category codes accepted by room search. Adding a family is a data
# change here, not a new branch in the search code.
CATEGORY_CODES: dict[int, tuple[Category, ...]] = {
    1: (Category.SUITE, Category.SUITE_PREMIUM),
    2: (Category.SUITE, Category.SUITE_PREMIUM),
    3: (Category.LOFT, Category.LOFT_PREMIUM),
    4: (Category.LOFT, Category.LOFT_PREMIUM),
}

ROOM_IMAGES: dict[Category, list[str]] = {
    Category.SUITE: [
        "/static/rooms/suite/bedroom.jpg",
        "/static/rooms/suite/bathroom.jpg",
        "/static/rooms/suite/view.jpg",
    ],
    Category.SUITE_PREMIUM: [
        "/static/rooms/suite-premium/bedroom.jpg",
        "/static/rooms/suite-premium/lounge.jpg",
        "/static/rooms/suite-premium/jacuzzi.jpg",
    ],
    Category.LOFT: [
        "/static/rooms/loft/living.jpg",
        "/static/rooms/loft/bedroom.jpg",
    ],
    Category.LOFT_PREMIUM: [
        "/static/rooms/loft-premium/living.jpg",
        "/static/rooms/loft-premium/terrace.jpg",
        "/static/rooms/loft-premium/bedroom.jpg",
    ],
}


@dataclass
class User:
    id: str
    name: str
    email: str


@dataclass
class Feature:
    id: str
    name: str


@dataclass
class Room:
    id: str
    number: int
    category: Category
    price_cents: int
    image: str | None = None
    features: list[Feature] = field(default_factory=list)
    # Derived from category, never persisted.
    images: list[str] = field(default_factory=list)

    def feature_ids(self) -> set[str]:
        return {f.id for f in self.features}


@dataclass
class Service:
    id: str
    type: str
    price_cents: int


@dataclass
class ServiceCharge:
    """Service attached to a reservation, priced at booking time."""

    id: str
    reservation_id: str
    service_id: str
    service_type: str
    price_cents: int


@dataclass
class GuestPrice:
    id: str
    name: str
    price_cents: int


@dataclass
class MonthlyProfit:
    year: int
    month: int
    profit_cents: int = 0


@dataclass
class Reservation:
    id: str
    user_id: str
    room_id: str
    start_date: date
    end_date: date
    price_cents: int
    status: ReservationStatus = ReservationStatus.ACTIVE
    guest_name1: str | None = None
    guest_last_name1: str | None = None
    guest_name2: str | None = None
    guest_last_name2: str | None = None
    guest_name3: str | None = None
    guest_last_name3: str | None = None
    services: list[ServiceCharge] = field(default_factory=list)
    # Eager-loaded relations, only filled by queries that ask for them.
    user: User | None = None
    room: Room | None = None

    @property
    def is_finished(self) -> bool:
        return self.status == ReservationStatus.FINISHED
