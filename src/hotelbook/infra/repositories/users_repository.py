"""Users repository - read access to user accounts.

Uses raw SQL with psycopg2 (no ORM). Accounts are managed by the auth
service; this core only resolves them.
"""

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import User
from hotelbook.infra.db import fetchone


def fetch_user(cur: PgCursor, user_id: str, *, lock: bool = False) -> User | None:
    """Fetch a user by id, optionally locking the row until commit."""
    suffix = " FOR UPDATE" if lock else ""
    row = fetchone(
        cur,
        "SELECT id, name, email FROM users WHERE id = %s" + suffix,
        (user_id,),
    )
    if row is None:
        return None
    return User(id=str(row[0]), name=row[1], email=row[2])
