"""Typed input structs for the core operations.

Validated by pydantic at the boundary, so the domain only sees well-typed
values. Business-rule validation (ranges, conflicts) stays in the domain.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from hotelbook.domain.models import Category, ReservationStatus


# ── Reservations ──────────────────────────────────────────────────────────────


class CreateReservationInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    room_id: str
    start_day: int
    start_month: int
    start_year: int
    end_day: int
    end_month: int
    end_year: int
    guest_name1: str
    guest_last_name1: str
    guest_name2: str | None = None
    guest_last_name2: str | None = None
    guest_name3: str | None = None
    guest_last_name3: str | None = None
    services: list[str] = Field(default_factory=list)

    def guest_names(self) -> list[str | None]:
        return [self.guest_name1, self.guest_name2, self.guest_name3]


class ReservationFilters(BaseModel):
    """Optional status and start/end date parts for reservation queries."""

    model_config = ConfigDict(extra="forbid")

    status: ReservationStatus | None = None
    start_day: int | None = None
    start_month: int | None = None
    start_year: int | None = None
    end_day: int | None = None
    end_month: int | None = None
    end_year: int | None = None


# ── Rooms ─────────────────────────────────────────────────────────────────────


class RoomFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: int | None = None
    number: int | None = None
    min_price: int | None = None
    max_price: int | None = None
    starting_date: date | None = None
    ending_date: date | None = None


class CreateRoomInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    number: int
    category: Category
    price_cents: int = Field(ge=0)
    image: str | None = None


class UpdateRoomInput(BaseModel):
    """Partial room update.

    features_ids are feature ids to add; features_to_delete are feature
    names (ids are accepted too).
    """

    model_config = ConfigDict(extra="forbid")

    number: int | None = None
    category: Category | None = None
    price_cents: int | None = Field(default=None, ge=0)
    image: str | None = None
    features_ids: list[str] | None = None
    features_to_delete: list[str] | None = None

    def scalar_changes(self) -> dict:
        """Scalar fields explicitly set, excluding feature lists."""
        return self.model_dump(
            exclude_none=True,
            exclude={"features_ids", "features_to_delete"},
        )


# ── Payments ──────────────────────────────────────────────────────────────────


class PaymentInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reservation_id: str
    description: str
    amount_cents: int = Field(gt=0)
    payer_email: str | None = None
