"""Room search, detail views and (bulk) updates.

Bulk mode (apply_to_all) targets every room sharing the target room's
category. All rooms are saved as one batch inside one transaction, so a
failure on any room leaves every room untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence
from uuid import uuid4

from hotelbook.domain.availability import occupied_room_ids
from hotelbook.domain.errors import (
    ApplyToAllConflictError,
    ApplyToAllRequiredError,
    DuplicateFeatureError,
    DuplicateRoomNumberError,
    FeatureAddDeleteConflictError,
    FeatureNotFoundError,
    IncompleteDateWindowError,
    InvalidCategoryError,
    InvalidPaginationError,
    InvalidPriceRangeError,
    InvalidRangeError,
    NegativePriceError,
    RoomNotFoundError,
)
from hotelbook.domain.inputs import CreateRoomInput, RoomFilters, UpdateRoomInput
from hotelbook.domain.models import (
    CATEGORY_CODES,
    ROOM_IMAGES,
    Feature,
    Room,
    Service,
)
from hotelbook.infra.store import RoomCriteria, Store, UnitOfWork
from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)

NO_ROOMS_MESSAGE = "No rooms found matching the criteria."


@dataclass
class RoomPage:
    data: list[Room]
    total: int
    current_page: int
    total_pages: int
    message: str | None = None


@dataclass
class RoomDetails:
    room: Room
    services: list[Service]


@dataclass
class AdminRoomView:
    room: Room
    available_features: list[Feature]


def _build_criteria(store: Store, filters: RoomFilters | None) -> RoomCriteria:
    """Validate search filters and turn them into store criteria."""
    if filters is None:
        return RoomCriteria()

    categories = ()
    if filters.category is not None:
        if filters.category not in CATEGORY_CODES:
            raise InvalidCategoryError()
        categories = CATEGORY_CODES[filters.category]

    for bound in (filters.min_price, filters.max_price):
        if bound is not None and bound < 0:
            raise NegativePriceError()
    if (
        filters.min_price is not None
        and filters.max_price is not None
        and filters.min_price > filters.max_price
    ):
        raise InvalidPriceRangeError()

    excluded: frozenset[str] = frozenset()
    has_start = filters.starting_date is not None
    has_end = filters.ending_date is not None
    if has_start and has_end:
        if filters.starting_date > filters.ending_date:
            raise InvalidRangeError("Start date cannot be after end date.")
        excluded = frozenset(
            occupied_room_ids(store, filters.starting_date, filters.ending_date)
        )
    elif has_start or has_end:
        raise IncompleteDateWindowError()

    return RoomCriteria(
        categories=categories,
        number=filters.number,
        min_price=filters.min_price,
        max_price=filters.max_price,
        exclude_ids=excluded,
    )


def _resolve_features_to_delete(store: Store, refs: Sequence[str]) -> list[Feature]:
    """Resolve feature references (names, or ids) for deletion.

    Raises:
        FeatureNotFoundError: Any reference matches no feature.
    """
    by_name = store.find_features(names=refs)
    found_names = {f.name for f in by_name}
    leftover = [r for r in refs if r not in found_names]
    by_id = store.find_features(ids=leftover) if leftover else []

    resolved = {f.id: f for f in [*by_name, *by_id]}
    matched = found_names | {f.id for f in by_id}
    if any(ref not in matched for ref in refs):
        raise FeatureNotFoundError("One or more features to delete not found")
    return list(resolved.values())


def _drop_features(room: Room, features: Sequence[Feature]) -> None:
    drop = {f.id for f in features}
    room.features = [f for f in room.features if f.id not in drop]


class RoomCatalog:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    # ── Reads ─────────────────────────────────────────────────────────────

    def search(
        self,
        page: int,
        limit: int,
        filters: RoomFilters | None = None,
    ) -> RoomPage:
        """Paginated room search; all filters combine with AND.

        Raises:
            InvalidPaginationError: page or limit below 1.
            InvalidCategoryError: Unknown category code.
            NegativePriceError, InvalidPriceRangeError: Bad price bounds.
            IncompleteDateWindowError: Only one of the dates given.
            InvalidRangeError: Starting date after ending date.
        """
        if page < 1:
            raise InvalidPaginationError("Page number must be greater than 0.")
        if limit < 1:
            raise InvalidPaginationError("Limit must be greater than 0.")

        with self.uow.transaction() as store:
            criteria = _build_criteria(store, filters)
            rooms, total = store.search_rooms(
                criteria, offset=(page - 1) * limit, limit=limit
            )

        return RoomPage(
            data=rooms,
            total=total,
            current_page=page,
            total_pages=math.ceil(total / limit),
            message=NO_ROOMS_MESSAGE if total == 0 else None,
        )

    def get_room(self, room_id: str) -> RoomDetails:
        """Guest view: room with features and images, plus the service catalog."""
        with self.uow.transaction() as store:
            room = store.get_room(room_id)
            if room is None:
                raise RoomNotFoundError(f"Room with ID {room_id} not found")
            services = store.list_services()

        room.images = list(ROOM_IMAGES.get(room.category, []))
        return RoomDetails(room=room, services=services)

    def get_room_admin(self, room_id: str) -> AdminRoomView:
        """Admin view: room plus the catalog features it does not have yet."""
        with self.uow.transaction() as store:
            room = store.get_room(room_id)
            if room is None:
                raise RoomNotFoundError()
            available = store.find_features(exclude_ids=sorted(room.feature_ids()))

        return AdminRoomView(room=room, available_features=available)

    # ── Writes ────────────────────────────────────────────────────────────

    def create_room(self, body: CreateRoomInput) -> Room:
        with self.uow.transaction() as store:
            if store.find_room_by_number(body.number) is not None:
                raise DuplicateRoomNumberError(body.number)

            room = store.add_room(
                Room(
                    id=str(uuid4()),
                    number=body.number,
                    category=body.category,
                    price_cents=body.price_cents,
                    image=body.image,
                )
            )

        logger.info(
            "room created",
            extra={"extra_fields": {"room_id": room.id, "number": room.number}},
        )
        return room

    def update_room(
        self,
        room_id: str,
        body: UpdateRoomInput,
        apply_to_all: bool = False,
    ) -> Room | list[Room]:
        """Update one room, or every room of its category with apply_to_all.

        Returns:
            The updated room, or the list of updated rooms in bulk mode.

        Raises:
            RoomNotFoundError: Unknown room.
            ApplyToAllRequiredError: features_ids given without apply_to_all.
            ApplyToAllConflictError: number given with apply_to_all.
            FeatureAddDeleteConflictError: A feature both added and deleted.
            FeatureNotFoundError: A feature id or name does not resolve.
            DuplicateFeatureError: A room already has a feature being added.
            DuplicateRoomNumberError: New number already used by another room.
        """
        with self.uow.transaction() as store:
            room = store.get_room(room_id, lock=True)
            if room is None:
                raise RoomNotFoundError()

            if body.features_ids is not None and not apply_to_all:
                raise ApplyToAllRequiredError()
            if body.number is not None and apply_to_all:
                raise ApplyToAllConflictError()

            if apply_to_all:
                rooms = self._apply_to_category(store, room, body)
                logger.info(
                    "rooms updated in bulk",
                    extra={
                        "extra_fields": {
                            "category": room.category.value,
                            "room_count": len(rooms),
                        },
                    },
                )
                return rooms

            if body.features_to_delete:
                _drop_features(
                    room, _resolve_features_to_delete(store, body.features_to_delete)
                )

            if body.number is not None and body.number != room.number:
                if store.find_room_by_number(body.number) is not None:
                    raise DuplicateRoomNumberError(body.number)

            for name, value in body.scalar_changes().items():
                setattr(room, name, value)

            [saved] = store.save_rooms([room])
            return saved

    def _apply_to_category(
        self, store: Store, room: Room, body: UpdateRoomInput
    ) -> list[Room]:
        rooms = store.find_rooms_by_category(room.category)

        if body.features_ids:
            to_add = store.find_features(ids=body.features_ids)

            to_delete = set(body.features_to_delete or ())
            for feature in to_add:
                if feature.name in to_delete or feature.id in to_delete:
                    raise FeatureAddDeleteConflictError(feature.name)

            if len({f.id for f in to_add}) != len(set(body.features_ids)):
                raise FeatureNotFoundError()

            for r in rooms:
                duplicates = [fid for fid in body.features_ids if fid in r.feature_ids()]
                if duplicates:
                    raise DuplicateFeatureError(r.id, duplicates)
                r.features = [*r.features, *to_add]

        if body.features_to_delete:
            removed = _resolve_features_to_delete(store, body.features_to_delete)
            for r in rooms:
                _drop_features(r, removed)

        changes = body.scalar_changes()
        for r in rooms:
            for name, value in changes.items():
                setattr(r, name, value)

        return store.save_rooms(rooms)

    def add_feature(self, room_id: str, feature_id: str) -> Room:
        """Attach one feature to a room; a no-op if it is already attached."""
        with self.uow.transaction() as store:
            room = store.get_room(room_id, lock=True)
            if room is None:
                raise RoomNotFoundError()

            feature = store.get_feature(feature_id)
            if feature is None:
                raise FeatureNotFoundError("Feature not found")

            if feature.id not in room.feature_ids():
                room.features = [*room.features, feature]
            [saved] = store.save_rooms([room])
            return saved

    def delete_room(self, room_id: str) -> Room:
        with self.uow.transaction() as store:
            room = store.get_room(room_id, lock=True)
            if room is None:
                raise RoomNotFoundError()
            store.remove_room(room)

        logger.info("room deleted", extra={"extra_fields": {"room_id": room_id}})
        return room
