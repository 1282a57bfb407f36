"""Persistence interface consumed by the domain.

The domain never talks to a database directly: every operation opens a
transaction through a UnitOfWork and works on the Store it yields.
Implementations:

- PgStore / PgUnitOfWork (hotelbook.infra.pg_store): PostgreSQL, raw SQL.
- MemoryStore / MemoryUnitOfWork (hotelbook.infra.memory_store): in process.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol, Sequence

from hotelbook.domain.models import (
    Category,
    Feature,
    GuestPrice,
    MonthlyProfit,
    Reservation,
    ReservationStatus,
    Room,
    Service,
    ServiceCharge,
    User,
)


@dataclass(frozen=True)
class ReservationCriteria:
    """Filter for reservation reads. All given fields combine with AND.

    The window uses closed-interval overlap: a reservation matches when
    start_date <= window_end and end_date >= window_start. A missing
    bound leaves that side open.
    """

    user_id: str | None = None
    room_id: str | None = None
    status: ReservationStatus | None = None
    window_start: date | None = None
    window_end: date | None = None
    with_relations: bool = False
    limit: int | None = None


@dataclass(frozen=True)
class RoomCriteria:
    categories: tuple[Category, ...] = ()
    number: int | None = None
    min_price: int | None = None
    max_price: int | None = None
    exclude_ids: frozenset[str] = field(default_factory=frozenset)


class Store(Protocol):
    # users
    def get_user(self, user_id: str, *, lock: bool = False) -> User | None: ...

    # rooms
    def get_room(self, room_id: str, *, lock: bool = False) -> Room | None: ...

    def find_room_by_number(self, number: int) -> Room | None: ...

    def find_rooms_by_category(self, category: Category) -> list[Room]: ...

    def search_rooms(
        self, criteria: RoomCriteria, *, offset: int, limit: int
    ) -> tuple[list[Room], int]: ...

    def add_room(self, room: Room) -> Room: ...

    def save_rooms(self, rooms: Sequence[Room]) -> list[Room]: ...

    def remove_room(self, room: Room) -> None: ...

    # catalog
    def get_feature(self, feature_id: str) -> Feature | None: ...

    def find_features(
        self,
        *,
        ids: Sequence[str] | None = None,
        names: Sequence[str] | None = None,
        exclude_ids: Sequence[str] | None = None,
    ) -> list[Feature]: ...

    def list_services(self) -> list[Service]: ...

    def get_guest_price(self, name: str) -> GuestPrice | None: ...

    # reservations
    def get_reservation(
        self, reservation_id: str, *, lock: bool = False
    ) -> Reservation | None: ...

    def find_reservations(self, criteria: ReservationCriteria) -> list[Reservation]: ...

    def add_reservation(self, reservation: Reservation) -> Reservation: ...

    def add_service_charges(self, charges: Sequence[ServiceCharge]) -> None: ...

    def save_reservation(self, reservation: Reservation) -> Reservation: ...

    # profit
    def get_monthly_profit(self, year: int, month: int) -> MonthlyProfit | None: ...

    def add_monthly_profit(
        self, year: int, month: int, amount_cents: int
    ) -> MonthlyProfit: ...


class UnitOfWork(Protocol):
    def transaction(self) -> AbstractContextManager[Store]:
        """Open a transaction: commit on normal exit, roll back on error."""
        ...
