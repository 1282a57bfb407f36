"""PostgreSQL Store backed by the raw SQL repositories.

Schema the repositories expect (created by the deployment, not here):

    users                (id text PRIMARY KEY, name text, email text)
    rooms                (id text PRIMARY KEY, number integer UNIQUE,
                          category text, price_cents integer, image text)
    features             (id text PRIMARY KEY, name text UNIQUE)
    room_features        (room_id text REFERENCES rooms,
                          feature_id text REFERENCES features,
                          PRIMARY KEY (room_id, feature_id))
    services             (id text PRIMARY KEY, type text UNIQUE, price_cents integer)
    guest_prices         (id text PRIMARY KEY, name text UNIQUE, price_cents integer)
    reservations         (id text PRIMARY KEY, user_id text REFERENCES users,
                          room_id text REFERENCES rooms, start_date date,
                          end_date date, status text, price_cents integer,
                          guest_name1..3 text, guest_last_name1..3 text,
                          created_at timestamptz DEFAULT now(),
                          updated_at timestamptz DEFAULT now())
    reservation_services (id text PRIMARY KEY,
                          reservation_id text REFERENCES reservations,
                          service_id text REFERENCES services,
                          price_cents integer)
    monthly_profits      (year integer, month integer, profit_cents integer,
                          UNIQUE (year, month))

Ids are text so the ``= ANY(%s)`` filters compare against text arrays.
The (year, month) unique constraint backs the profit upsert.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import (
    Category,
    Feature,
    GuestPrice,
    MonthlyProfit,
    Reservation,
    Room,
    Service,
    ServiceCharge,
    User,
)
from hotelbook.infra.db import get_conn, txn
from hotelbook.infra.repositories import (
    catalog_repository,
    profits_repository,
    reservations_repository,
    rooms_repository,
    users_repository,
)
from hotelbook.infra.store import ReservationCriteria, RoomCriteria
from hotelbook.settings import Settings


class PgStore:
    """Store bound to one cursor, i.e. one open transaction."""

    def __init__(self, cur: PgCursor) -> None:
        self.cur = cur

    def get_user(self, user_id: str, *, lock: bool = False) -> User | None:
        return users_repository.fetch_user(self.cur, user_id, lock=lock)

    def get_room(self, room_id: str, *, lock: bool = False) -> Room | None:
        return rooms_repository.fetch_room(self.cur, room_id, lock=lock)

    def find_room_by_number(self, number: int) -> Room | None:
        return rooms_repository.fetch_room_by_number(self.cur, number)

    def find_rooms_by_category(self, category: Category) -> list[Room]:
        return rooms_repository.fetch_rooms_by_category(self.cur, category)

    def search_rooms(
        self, criteria: RoomCriteria, *, offset: int, limit: int
    ) -> tuple[list[Room], int]:
        return rooms_repository.search_rooms(
            self.cur, criteria, offset=offset, limit=limit
        )

    def add_room(self, room: Room) -> Room:
        rooms_repository.insert_room(self.cur, room)
        return room

    def save_rooms(self, rooms: Sequence[Room]) -> list[Room]:
        for room in rooms:
            rooms_repository.update_room(self.cur, room)
        return list(rooms)

    def remove_room(self, room: Room) -> None:
        rooms_repository.delete_room(self.cur, room.id)

    def get_feature(self, feature_id: str) -> Feature | None:
        return catalog_repository.fetch_feature(self.cur, feature_id)

    def find_features(
        self,
        *,
        ids: Sequence[str] | None = None,
        names: Sequence[str] | None = None,
        exclude_ids: Sequence[str] | None = None,
    ) -> list[Feature]:
        return catalog_repository.find_features(
            self.cur, ids=ids, names=names, exclude_ids=exclude_ids
        )

    def list_services(self) -> list[Service]:
        return catalog_repository.fetch_services(self.cur)

    def get_guest_price(self, name: str) -> GuestPrice | None:
        return catalog_repository.fetch_guest_price(self.cur, name)

    def get_reservation(
        self, reservation_id: str, *, lock: bool = False
    ) -> Reservation | None:
        return reservations_repository.fetch_reservation(
            self.cur, reservation_id, lock=lock
        )

    def find_reservations(self, criteria: ReservationCriteria) -> list[Reservation]:
        return reservations_repository.find_reservations(self.cur, criteria)

    def add_reservation(self, reservation: Reservation) -> Reservation:
        reservations_repository.insert_reservation(self.cur, reservation)
        return reservation

    def add_service_charges(self, charges: Sequence[ServiceCharge]) -> None:
        reservations_repository.insert_service_charges(self.cur, charges)

    def save_reservation(self, reservation: Reservation) -> Reservation:
        reservations_repository.update_reservation_status(
            self.cur, reservation.id, reservation.status
        )
        return reservation

    def get_monthly_profit(self, year: int, month: int) -> MonthlyProfit | None:
        return profits_repository.fetch_monthly_profit(self.cur, year, month)

    def add_monthly_profit(
        self, year: int, month: int, amount_cents: int
    ) -> MonthlyProfit:
        return profits_repository.upsert_monthly_profit(
            self.cur, year=year, month=month, amount_cents=amount_cents
        )


class PgUnitOfWork:
    """Opens one connection per transaction at the configured isolation level."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    @contextmanager
    def transaction(self) -> Iterator[PgStore]:
        conn = get_conn(self.settings.database_url)
        try:
            with txn(conn, isolation_level=self.settings.isolation_level) as cur:
                yield PgStore(cur)
        finally:
            conn.close()
