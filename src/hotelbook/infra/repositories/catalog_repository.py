"""Catalog repository - features, services and guest prices.

Uses raw SQL with psycopg2 (no ORM).
"""

from typing import Sequence

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import Feature, GuestPrice, Service
from hotelbook.infra.db import fetchall, fetchone


def fetch_feature(cur: PgCursor, feature_id: str) -> Feature | None:
    row = fetchone(cur, "SELECT id, name FROM features WHERE id = %s", (feature_id,))
    if row is None:
        return None
    return Feature(id=str(row[0]), name=row[1])


def find_features(
    cur: PgCursor,
    *,
    ids: Sequence[str] | None = None,
    names: Sequence[str] | None = None,
    exclude_ids: Sequence[str] | None = None,
) -> list[Feature]:
    """Find features matching every given filter.

    Args:
        cur: Database cursor.
        ids: Keep only these ids.
        names: Keep only these names.
        exclude_ids: Drop these ids.

    Returns:
        Features ordered by name.
    """
    conditions: list[str] = []
    params: list = []

    if ids is not None:
        conditions.append("id = ANY(%s)")
        params.append(list(ids))
    if names is not None:
        conditions.append("name = ANY(%s)")
        params.append(list(names))
    if exclude_ids:
        conditions.append("NOT (id = ANY(%s))")
        params.append(list(exclude_ids))

    where = " AND ".join(conditions) or "TRUE"
    cur.execute(
        f"SELECT id, name FROM features WHERE {where} ORDER BY name",
        params,
    )
    return [Feature(id=str(row[0]), name=row[1]) for row in cur.fetchall()]


def fetch_services(cur: PgCursor) -> list[Service]:
    rows = fetchall(cur, "SELECT id, type, price_cents FROM services ORDER BY type")
    return [Service(id=str(row[0]), type=row[1], price_cents=row[2]) for row in rows]


def fetch_guest_price(cur: PgCursor, name: str) -> GuestPrice | None:
    row = fetchone(
        cur,
        "SELECT id, name, price_cents FROM guest_prices WHERE name = %s",
        (name,),
    )
    if row is None:
        return None
    return GuestPrice(id=str(row[0]), name=row[1], price_cents=row[2])
