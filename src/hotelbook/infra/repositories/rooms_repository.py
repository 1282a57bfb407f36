"""Rooms repository - persistence for rooms and their features.

Uses raw SQL with psycopg2 (no ORM). Features are stored in the
room_features join table; saving a room rewrites its join rows.
"""

from typing import Sequence

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import Category, Feature, Room
from hotelbook.infra.store import RoomCriteria

_ROOM_COLUMNS = "id, number, category, price_cents, image"


def _room_from_row(row: tuple) -> Room:
    return Room(
        id=str(row[0]),
        number=row[1],
        category=Category(row[2]),
        price_cents=row[3],
        image=row[4],
    )


def fetch_features_for_rooms(
    cur: PgCursor, room_ids: Sequence[str]
) -> dict[str, list[Feature]]:
    """Map each room id to its features (rooms without features are absent)."""
    if not room_ids:
        return {}

    cur.execute(
        """
        SELECT rf.room_id, f.id, f.name
        FROM room_features rf
        JOIN features f ON f.id = rf.feature_id
        WHERE rf.room_id = ANY(%s)
        ORDER BY f.name
        """,
        (list(room_ids),),
    )
    features: dict[str, list[Feature]] = {}
    for room_id, feature_id, name in cur.fetchall():
        features.setdefault(str(room_id), []).append(
            Feature(id=str(feature_id), name=name)
        )
    return features


def _with_features(cur: PgCursor, rooms: list[Room]) -> list[Room]:
    features = fetch_features_for_rooms(cur, [r.id for r in rooms])
    for room in rooms:
        room.features = features.get(room.id, [])
    return rooms


def fetch_room(cur: PgCursor, room_id: str, *, lock: bool = False) -> Room | None:
    """Fetch a room with its features.

    Args:
        cur: Database cursor (within transaction).
        room_id: Room id.
        lock: If True, lock the room row with FOR UPDATE until commit.
    """
    suffix = " FOR UPDATE" if lock else ""
    cur.execute(
        f"SELECT {_ROOM_COLUMNS} FROM rooms WHERE id = %s{suffix}",
        (room_id,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return _with_features(cur, [_room_from_row(row)])[0]


def fetch_room_by_number(cur: PgCursor, number: int) -> Room | None:
    cur.execute(
        f"SELECT {_ROOM_COLUMNS} FROM rooms WHERE number = %s",
        (number,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return _with_features(cur, [_room_from_row(row)])[0]


def fetch_rooms_by_category(cur: PgCursor, category: Category) -> list[Room]:
    """All rooms of a category, locked for a bulk update."""
    cur.execute(
        f"""
        SELECT {_ROOM_COLUMNS} FROM rooms
        WHERE category = %s
        ORDER BY number
        FOR UPDATE
        """,
        (category.value,),
    )
    return _with_features(cur, [_room_from_row(row) for row in cur.fetchall()])


def search_rooms(
    cur: PgCursor,
    criteria: RoomCriteria,
    *,
    offset: int,
    limit: int,
) -> tuple[list[Room], int]:
    """Page of rooms matching criteria, ordered by number, plus total count."""
    conditions: list[str] = []
    params: list = []

    if criteria.categories:
        conditions.append("category = ANY(%s)")
        params.append([c.value for c in criteria.categories])
    if criteria.number is not None:
        conditions.append("number = %s")
        params.append(criteria.number)
    if criteria.min_price is not None:
        conditions.append("price_cents >= %s")
        params.append(criteria.min_price)
    if criteria.max_price is not None:
        conditions.append("price_cents <= %s")
        params.append(criteria.max_price)
    if criteria.exclude_ids:
        conditions.append("NOT (id = ANY(%s))")
        params.append(sorted(criteria.exclude_ids))

    where = " AND ".join(conditions) or "TRUE"

    cur.execute(f"SELECT count(*) FROM rooms WHERE {where}", params)
    total = cur.fetchone()[0]

    cur.execute(
        f"""
        SELECT {_ROOM_COLUMNS} FROM rooms
        WHERE {where}
        ORDER BY number
        LIMIT %s OFFSET %s
        """,
        [*params, limit, offset],
    )
    rooms = [_room_from_row(row) for row in cur.fetchall()]
    return _with_features(cur, rooms), total


def insert_room(cur: PgCursor, room: Room) -> None:
    cur.execute(
        f"""
        INSERT INTO rooms ({_ROOM_COLUMNS})
        VALUES (%s, %s, %s, %s, %s)
        """,
        (room.id, room.number, room.category.value, room.price_cents, room.image),
    )
    replace_room_features(cur, room.id, [f.id for f in room.features])


def update_room(cur: PgCursor, room: Room) -> None:
    cur.execute(
        """
        UPDATE rooms
        SET number = %s, category = %s, price_cents = %s, image = %s
        WHERE id = %s
        """,
        (room.number, room.category.value, room.price_cents, room.image, room.id),
    )
    replace_room_features(cur, room.id, [f.id for f in room.features])


def replace_room_features(
    cur: PgCursor, room_id: str, feature_ids: Sequence[str]
) -> None:
    cur.execute("DELETE FROM room_features WHERE room_id = %s", (room_id,))
    for feature_id in dict.fromkeys(feature_ids):
        cur.execute(
            "INSERT INTO room_features (room_id, feature_id) VALUES (%s, %s)",
            (room_id, feature_id),
        )


def delete_room(cur: PgCursor, room_id: str) -> None:
    cur.execute("DELETE FROM room_features WHERE room_id = %s", (room_id,))
    cur.execute("DELETE FROM rooms WHERE id = %s", (room_id,))
