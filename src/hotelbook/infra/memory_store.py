"""In-memory Store.

Used by tests and local runs without Postgres. Transactions are serialized
by a re-entrant lock and rolled back by restoring a snapshot of the state,
so the same commit/rollback guarantees hold as with the Postgres store.
Entities are copied on the way in and out: changing a returned object has
no effect until it is saved.
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Iterator, Sequence

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
from hotelbook.infra.store import ReservationCriteria, RoomCriteria


@dataclass
class MemoryState:
    users: dict[str, User] = field(default_factory=dict)
    rooms: dict[str, Room] = field(default_factory=dict)
    features: dict[str, Feature] = field(default_factory=dict)
    services: dict[str, Service] = field(default_factory=dict)
    guest_prices: dict[str, GuestPrice] = field(default_factory=dict)
    reservations: dict[str, Reservation] = field(default_factory=dict)
    charges: dict[str, ServiceCharge] = field(default_factory=dict)
    profits: dict[tuple[int, int], MonthlyProfit] = field(default_factory=dict)


def _matches(reservation: Reservation, criteria: ReservationCriteria) -> bool:
    if criteria.user_id is not None and reservation.user_id != criteria.user_id:
        return False
    if criteria.room_id is not None and reservation.room_id != criteria.room_id:
        return False
    if criteria.status is not None and reservation.status != criteria.status:
        return False
    if criteria.window_end is not None and reservation.start_date > criteria.window_end:
        return False
    if criteria.window_start is not None and reservation.end_date < criteria.window_start:
        return False
    return True


class MemoryStore:
    def __init__(self, state: MemoryState) -> None:
        self.state = state

    # users

    def get_user(self, user_id: str, *, lock: bool = False) -> User | None:
        return copy.deepcopy(self.state.users.get(user_id))

    # rooms

    def get_room(self, room_id: str, *, lock: bool = False) -> Room | None:
        return copy.deepcopy(self.state.rooms.get(room_id))

    def find_room_by_number(self, number: int) -> Room | None:
        for room in self.state.rooms.values():
            if room.number == number:
                return copy.deepcopy(room)
        return None

    def find_rooms_by_category(self, category: Category) -> list[Room]:
        rooms = [r for r in self.state.rooms.values() if r.category == category]
        return copy.deepcopy(sorted(rooms, key=lambda r: r.number))

    def search_rooms(
        self, criteria: RoomCriteria, *, offset: int, limit: int
    ) -> tuple[list[Room], int]:
        matching = [
            room
            for room in sorted(self.state.rooms.values(), key=lambda r: r.number)
            if (not criteria.categories or room.category in criteria.categories)
            and (criteria.number is None or room.number == criteria.number)
            and (criteria.min_price is None or room.price_cents >= criteria.min_price)
            and (criteria.max_price is None or room.price_cents <= criteria.max_price)
            and room.id not in criteria.exclude_ids
        ]
        return copy.deepcopy(matching[offset : offset + limit]), len(matching)

    def add_room(self, room: Room) -> Room:
        self.state.rooms[room.id] = copy.deepcopy(replace(room, images=[]))
        return room

    def save_rooms(self, rooms: Sequence[Room]) -> list[Room]:
        for room in rooms:
            self.state.rooms[room.id] = copy.deepcopy(replace(room, images=[]))
        return list(rooms)

    def remove_room(self, room: Room) -> None:
        self.state.rooms.pop(room.id, None)

    # catalog

    def get_feature(self, feature_id: str) -> Feature | None:
        return copy.deepcopy(self.state.features.get(feature_id))

    def find_features(
        self,
        *,
        ids: Sequence[str] | None = None,
        names: Sequence[str] | None = None,
        exclude_ids: Sequence[str] | None = None,
    ) -> list[Feature]:
        features = [
            f
            for f in self.state.features.values()
            if (ids is None or f.id in ids)
            and (names is None or f.name in names)
            and (not exclude_ids or f.id not in exclude_ids)
        ]
        return copy.deepcopy(sorted(features, key=lambda f: f.name))

    def list_services(self) -> list[Service]:
        return copy.deepcopy(sorted(self.state.services.values(), key=lambda s: s.type))

    def get_guest_price(self, name: str) -> GuestPrice | None:
        return copy.deepcopy(self.state.guest_prices.get(name))

    # reservations

    def _load(self, reservation: Reservation, with_relations: bool) -> Reservation:
        loaded = copy.deepcopy(reservation)
        loaded.services = [
            copy.deepcopy(c)
            for c in self.state.charges.values()
            if c.reservation_id == reservation.id
        ]
        if with_relations:
            loaded.user = copy.deepcopy(self.state.users.get(reservation.user_id))
            room = self.state.rooms.get(reservation.room_id)
            loaded.room = copy.deepcopy(replace(room, features=[])) if room else None
        return loaded

    def get_reservation(
        self, reservation_id: str, *, lock: bool = False
    ) -> Reservation | None:
        reservation = self.state.reservations.get(reservation_id)
        if reservation is None:
            return None
        return self._load(reservation, with_relations=False)

    def find_reservations(self, criteria: ReservationCriteria) -> list[Reservation]:
        found = sorted(
            (r for r in self.state.reservations.values() if _matches(r, criteria)),
            key=lambda r: (r.start_date, r.id),
        )
        if criteria.limit is not None:
            found = found[: criteria.limit]
        return [self._load(r, criteria.with_relations) for r in found]

    def _store_reservation(self, reservation: Reservation) -> None:
        self.state.reservations[reservation.id] = copy.deepcopy(
            replace(reservation, services=[], user=None, room=None)
        )

    def add_reservation(self, reservation: Reservation) -> Reservation:
        self._store_reservation(reservation)
        return reservation

    def add_service_charges(self, charges: Sequence[ServiceCharge]) -> None:
        for charge in charges:
            self.state.charges[charge.id] = copy.deepcopy(charge)

    def save_reservation(self, reservation: Reservation) -> Reservation:
        self._store_reservation(reservation)
        return reservation

    # profit

    def get_monthly_profit(self, year: int, month: int) -> MonthlyProfit | None:
        return copy.deepcopy(self.state.profits.get((year, month)))

    def add_monthly_profit(
        self, year: int, month: int, amount_cents: int
    ) -> MonthlyProfit:
        profit = self.state.profits.setdefault(
            (year, month), MonthlyProfit(year=year, month=month)
        )
        profit.profit_cents += amount_cents
        return copy.deepcopy(profit)


class MemoryUnitOfWork:
    def __init__(self, state: MemoryState | None = None) -> None:
        self.state = state or MemoryState()
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[MemoryStore]:
        with self._lock:
            snapshot = copy.deepcopy(self.state)
            try:
                yield MemoryStore(self.state)
            except Exception:
                # Restore in place so existing references see the rollback.
                self.state.__dict__.update(snapshot.__dict__)
                raise

    def seed(self, *entities: object) -> None:
        """Insert catalog data, users and rooms directly, outside the domain."""
        state = self.state
        with self._lock:
            for entity in entities:
                entity = copy.deepcopy(entity)
                if isinstance(entity, User):
                    state.users[entity.id] = entity
                elif isinstance(entity, Room):
                    state.rooms[entity.id] = entity
                elif isinstance(entity, Feature):
                    state.features[entity.id] = entity
                elif isinstance(entity, Service):
                    state.services[entity.id] = entity
                elif isinstance(entity, GuestPrice):
                    state.guest_prices[entity.name] = entity
                elif isinstance(entity, Reservation):
                    state.reservations[entity.id] = entity
                else:
                    raise TypeError(f"Cannot seed {type(entity).__name__}")
