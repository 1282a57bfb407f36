"""Monthly profit repository.

Uses raw SQL with psycopg2 (no ORM). Profit rows are keyed by
(year, month) and only ever grow.
"""

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import MonthlyProfit
from hotelbook.infra.db import fetchone


def fetch_monthly_profit(cur: PgCursor, year: int, month: int) -> MonthlyProfit | None:
    row = fetchone(
        cur,
        "SELECT year, month, profit_cents FROM monthly_profits "
        "WHERE year = %s AND month = %s",
        (year, month),
    )
    if row is None:
        return None
    return MonthlyProfit(year=row[0], month=row[1], profit_cents=row[2])


def upsert_monthly_profit(
    cur: PgCursor,
    *,
    year: int,
    month: int,
    amount_cents: int,
) -> MonthlyProfit:
    """Create the (year, month) row or add amount_cents to it, atomically."""
    cur.execute(
        """
        INSERT INTO monthly_profits (year, month, profit_cents)
        VALUES (%s, %s, %s)
        ON CONFLICT (year, month)
        DO UPDATE SET profit_cents = monthly_profits.profit_cents + EXCLUDED.profit_cents
        RETURNING year, month, profit_cents
        """,
        (year, month, amount_cents),
    )
    row = cur.fetchone()
    return MonthlyProfit(year=row[0], month=row[1], profit_cents=row[2])
