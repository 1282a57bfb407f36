"""Room availability over date ranges.

Overlap formula (closed intervals):  s1 <= e2 AND e1 >= s2
Touching dates count as overlapping: a stay ending on the 10th blocks a
stay starting on the 10th.

Reservation status is not filtered: finished reservations keep occupying
their dates.
"""

from __future__ import annotations

import logging
from datetime import date

from hotelbook.domain.errors import RoomUnavailableError
from hotelbook.infra.store import ReservationCriteria, Store

logger = logging.getLogger(__name__)


def ranges_overlap(s1: date, e1: date, s2: date, e2: date) -> bool:
    return s1 <= e2 and e1 >= s2


def find_conflicting_reservation(
    store: Store,
    *,
    room_id: str,
    start: date,
    end: date,
) -> str | None:
    """Return the id of the first reservation overlapping the range, if any."""
    rows = store.find_reservations(
        ReservationCriteria(
            room_id=room_id,
            window_start=start,
            window_end=end,
            limit=1,
        )
    )
    if not rows:
        return None

    conflicting = rows[0]
    logger.warning(
        "room conflict detected",
        extra={
            "extra_fields": {
                "room_id": room_id,
                "requested_start": start.isoformat(),
                "requested_end": end.isoformat(),
                "conflicting_reservation_id": conflicting.id,
                "existing_start": conflicting.start_date.isoformat(),
                "existing_end": conflicting.end_date.isoformat(),
            },
        },
    )
    return conflicting.id


def is_overlapping(store: Store, room_id: str, start: date, end: date) -> bool:
    return (
        find_conflicting_reservation(store, room_id=room_id, start=start, end=end)
        is not None
    )


def assert_room_available(
    store: Store, room_id: str, start: date, end: date
) -> None:
    """Raise RoomUnavailableError if the room is booked over the range."""
    conflicting_id = find_conflicting_reservation(
        store, room_id=room_id, start=start, end=end
    )
    if conflicting_id is not None:
        raise RoomUnavailableError(
            room_id=room_id,
            conflicting_reservation_id=conflicting_id,
            start=start,
            end=end,
        )


def occupied_room_ids(store: Store, start: date, end: date) -> set[str]:
    """Ids of rooms holding at least one reservation overlapping the range."""
    reservations = store.find_reservations(
        ReservationCriteria(window_start=start, window_end=end)
    )
    return {r.room_id for r in reservations}
