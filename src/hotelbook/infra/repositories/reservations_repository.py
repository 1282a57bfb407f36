"""Reservations repository - persistence for reservations and service charges.

Uses raw SQL with psycopg2 (no ORM).
"""

from typing import Sequence

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import (
    Category,
    Reservation,
    ReservationStatus,
    Room,
    ServiceCharge,
    User,
)
from hotelbook.infra.store import ReservationCriteria

_COLUMNS = (
    "id",
    "user_id",
    "room_id",
    "start_date",
    "end_date",
    "status",
    "price_cents",
    "guest_name1",
    "guest_last_name1",
    "guest_name2",
    "guest_last_name2",
    "guest_name3",
    "guest_last_name3",
)
_SELECT = ", ".join(f"res.{c}" for c in _COLUMNS)
_RELATION_SELECT = (
    "u.id, u.name, u.email, "
    "r.id, r.number, r.category, r.price_cents, r.image"
)


def _reservation_from_row(row: tuple) -> Reservation:
    return Reservation(
        id=str(row[0]),
        user_id=str(row[1]),
        room_id=str(row[2]),
        start_date=row[3],
        end_date=row[4],
        status=ReservationStatus(row[5]),
        price_cents=row[6],
        guest_name1=row[7],
        guest_last_name1=row[8],
        guest_name2=row[9],
        guest_last_name2=row[10],
        guest_name3=row[11],
        guest_last_name3=row[12],
    )


def _attach_relations(reservation: Reservation, row: tuple) -> None:
    n = len(_COLUMNS)
    reservation.user = User(id=str(row[n]), name=row[n + 1], email=row[n + 2])
    reservation.room = Room(
        id=str(row[n + 3]),
        number=row[n + 4],
        category=Category(row[n + 5]),
        price_cents=row[n + 6],
        image=row[n + 7],
    )


def fetch_service_charges(
    cur: PgCursor, reservation_ids: Sequence[str]
) -> dict[str, list[ServiceCharge]]:
    if not reservation_ids:
        return {}

    cur.execute(
        """
        SELECT rs.id, rs.reservation_id, rs.service_id, s.type, rs.price_cents
        FROM reservation_services rs
        JOIN services s ON s.id = rs.service_id
        WHERE rs.reservation_id = ANY(%s)
        ORDER BY rs.id
        """,
        (list(reservation_ids),),
    )
    charges: dict[str, list[ServiceCharge]] = {}
    for row in cur.fetchall():
        charge = ServiceCharge(
            id=str(row[0]),
            reservation_id=str(row[1]),
            service_id=str(row[2]),
            service_type=row[3],
            price_cents=row[4],
        )
        charges.setdefault(charge.reservation_id, []).append(charge)
    return charges


def _with_charges(cur: PgCursor, reservations: list[Reservation]) -> list[Reservation]:
    charges = fetch_service_charges(cur, [r.id for r in reservations])
    for reservation in reservations:
        reservation.services = charges.get(reservation.id, [])
    return reservations


def fetch_reservation(
    cur: PgCursor, reservation_id: str, *, lock: bool = False
) -> Reservation | None:
    """Fetch one reservation with its service charges.

    Args:
        cur: Database cursor (within transaction).
        reservation_id: Reservation id.
        lock: If True, lock the row with FOR UPDATE until commit.
    """
    suffix = " FOR UPDATE" if lock else ""
    cur.execute(
        f"SELECT {_SELECT} FROM reservations res WHERE res.id = %s{suffix}",
        (reservation_id,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return _with_charges(cur, [_reservation_from_row(row)])[0]


def find_reservations(
    cur: PgCursor, criteria: ReservationCriteria
) -> list[Reservation]:
    """Reservations matching criteria, ordered by start date.

    The date window uses closed-interval overlap against each reservation
    (start_date <= window_end AND end_date >= window_start), regardless of
    status.
    """
    conditions: list[str] = []
    params: list = []

    if criteria.user_id is not None:
        conditions.append("res.user_id = %s")
        params.append(criteria.user_id)
    if criteria.room_id is not None:
        conditions.append("res.room_id = %s")
        params.append(criteria.room_id)
    if criteria.status is not None:
        conditions.append("res.status = %s")
        params.append(criteria.status.value)
    if criteria.window_end is not None:
        conditions.append("res.start_date <= %s")
        params.append(criteria.window_end)
    if criteria.window_start is not None:
        conditions.append("res.end_date >= %s")
        params.append(criteria.window_start)

    where = " AND ".join(conditions) or "TRUE"
    select = _SELECT
    joins = ""
    if criteria.with_relations:
        select = f"{_SELECT}, {_RELATION_SELECT}"
        joins = (
            "JOIN users u ON u.id = res.user_id "
            "JOIN rooms r ON r.id = res.room_id"
        )

    query = (
        f"SELECT {select} FROM reservations res {joins} "
        f"WHERE {where} ORDER BY res.start_date, res.id"
    )
    if criteria.limit is not None:
        query += " LIMIT %s"
        params.append(criteria.limit)

    cur.execute(query, params)

    reservations = []
    for row in cur.fetchall():
        reservation = _reservation_from_row(row)
        if criteria.with_relations:
            _attach_relations(reservation, row)
        reservations.append(reservation)
    return _with_charges(cur, reservations)


def insert_reservation(cur: PgCursor, reservation: Reservation) -> None:
    cur.execute(
        f"""
        INSERT INTO reservations ({", ".join(_COLUMNS)})
        VALUES ({", ".join(["%s"] * len(_COLUMNS))})
        """,
        (
            reservation.id,
            reservation.user_id,
            reservation.room_id,
            reservation.start_date,
            reservation.end_date,
            reservation.status.value,
            reservation.price_cents,
            reservation.guest_name1,
            reservation.guest_last_name1,
            reservation.guest_name2,
            reservation.guest_last_name2,
            reservation.guest_name3,
            reservation.guest_last_name3,
        ),
    )


def insert_service_charges(cur: PgCursor, charges: Sequence[ServiceCharge]) -> None:
    for charge in charges:
        cur.execute(
            """
            INSERT INTO reservation_services (id, reservation_id, service_id, price_cents)
            VALUES (%s, %s, %s, %s)
            """,
            (charge.id, charge.reservation_id, charge.service_id, charge.price_cents),
        )


def update_reservation_status(
    cur: PgCursor, reservation_id: str, status: ReservationStatus
) -> None:
    cur.execute(
        "UPDATE reservations SET status = %s, updated_at = now() WHERE id = %s",
        (status.value, reservation_id),
    )
