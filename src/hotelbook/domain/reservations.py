"""Reservation lifecycle: check-in, checkout and reservation queries.

Check-in runs inside a single transaction:
validate dates → lock user → lock room → stay length → active reservation
check → overlap check → price → insert reservation + service charges →
monthly profit. Any failure rolls back every write.

States: active → finished (terminal).
"""

from __future__ import annotations

from datetime import date
from uuid import uuid4

from hotelbook.domain.availability import assert_room_available
from hotelbook.domain.dates import calendar_date, resolve_date_window, stay_length
from hotelbook.domain.errors import (
    AlreadyFinishedError,
    DuplicateActiveReservationError,
    InvalidDateError,
    InvalidRangeError,
    MaxStayExceededError,
    ReservationNotFoundError,
    RoomNotFoundError,
    UserNotFoundError,
)
from hotelbook.domain.inputs import CreateReservationInput, ReservationFilters
from hotelbook.domain.models import Reservation, ReservationStatus
from hotelbook.domain.pricing import PricingEngine, load_pricing_config
from hotelbook.infra.store import ReservationCriteria, UnitOfWork
from hotelbook.infra.time import today
from hotelbook.observability.logging import get_logger
from hotelbook.settings import Settings

logger = get_logger(__name__)


def _validate_date_parts(body: CreateReservationInput) -> tuple[date, date]:
    """Strict numeric checks for check-in dates.

    Raises:
        InvalidDateError: Any part out of range, a past year, or start after end.
    """
    current_year = today().year

    invalid = (
        body.start_year < current_year
        or body.end_year < current_year
        or not 1 <= body.start_month <= 12
        or not 1 <= body.end_month <= 12
        or not 1 <= body.start_day <= 31
        or not 1 <= body.end_day <= 31
    )
    if invalid:
        raise InvalidDateError()

    try:
        start = calendar_date(body.start_year, body.start_month, body.start_day)
        end = calendar_date(body.end_year, body.end_month, body.end_day)
    except (ValueError, OverflowError):
        # Year outside what datetime.date can represent.
        raise InvalidDateError() from None
    if start > end:
        raise InvalidDateError()

    return start, end


def _count_guests(body: CreateReservationInput) -> int:
    return sum(1 for name in body.guest_names() if name)


def _criteria_from_filters(
    filters: ReservationFilters | None,
    *,
    user_id: str | None = None,
    room_id: str | None = None,
    with_relations: bool = False,
) -> ReservationCriteria:
    if filters is None:
        return ReservationCriteria(
            user_id=user_id, room_id=room_id, with_relations=with_relations
        )

    window_start, window_end = resolve_date_window(
        (filters.start_day, filters.start_month, filters.start_year),
        (filters.end_day, filters.end_month, filters.end_year),
    )
    return ReservationCriteria(
        user_id=user_id,
        room_id=room_id,
        status=filters.status,
        window_start=window_start,
        window_end=window_end,
        with_relations=with_relations,
    )


class ReservationManager:
    def __init__(self, uow: UnitOfWork, settings: Settings | None = None) -> None:
        self.uow = uow
        self.settings = settings or Settings()

    def check_in(self, user_id: str, body: CreateReservationInput) -> Reservation:
        """Create an active reservation for user_id.

        Args:
            user_id: Booking user.
            body: Room, date parts, guests and requested service types.

        Returns:
            The persisted reservation with its final price and service charges.

        Raises:
            InvalidDateError: Date parts out of range or start after end.
            UserNotFoundError: Unknown user.
            RoomNotFoundError: Unknown room.
            InvalidRangeError: Zero-night stay.
            MaxStayExceededError: Stay longer than the configured maximum.
            DuplicateActiveReservationError: User already has an active reservation.
            RoomUnavailableError: Room booked over an overlapping range.
            GuestSurchargeConfigMissingError, ServiceNotFoundError: From pricing.
        """
        start, end = _validate_date_parts(body)

        with self.uow.transaction() as store:
            # Row locks serialize concurrent bookings of the same user/room.
            user = store.get_user(user_id, lock=True)
            if user is None:
                raise UserNotFoundError()

            room = store.get_room(body.room_id, lock=True)
            if room is None:
                raise RoomNotFoundError()

            nights = stay_length(start, end)
            if nights <= 0:
                raise InvalidRangeError("Invalid date range")
            if nights > self.settings.max_stay_days:
                raise MaxStayExceededError(self.settings.max_stay_days)

            active = store.find_reservations(
                ReservationCriteria(
                    user_id=user.id, status=ReservationStatus.ACTIVE, limit=1
                )
            )
            if active:
                raise DuplicateActiveReservationError()

            assert_room_available(store, room.id, start, end)

            reservation_id = str(uuid4())
            engine = PricingEngine(
                load_pricing_config(store, self.settings.guest_price_name)
            )
            quote = engine.price(
                room,
                nights,
                _count_guests(body),
                body.services,
                reservation_id=reservation_id,
            )

            reservation = store.add_reservation(
                Reservation(
                    id=reservation_id,
                    user_id=user.id,
                    room_id=room.id,
                    start_date=start,
                    end_date=end,
                    price_cents=quote.total_cents,
                    status=ReservationStatus.ACTIVE,
                    guest_name1=body.guest_name1,
                    guest_last_name1=body.guest_last_name1,
                    guest_name2=body.guest_name2,
                    guest_last_name2=body.guest_last_name2,
                    guest_name3=body.guest_name3,
                    guest_last_name3=body.guest_last_name3,
                )
            )
            if quote.charges:
                store.add_service_charges(quote.charges)
            reservation.services = list(quote.charges)

            # Revenue is booked under the requested start month, before
            # calendar normalization.
            store.add_monthly_profit(
                body.start_year, body.start_month, quote.total_cents
            )

        logger.info(
            "reservation checked in",
            extra={
                "extra_fields": {
                    "reservation_id": reservation.id,
                    "room_id": room.id,
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                    "nights": nights,
                    "price_cents": reservation.price_cents,
                },
            },
        )
        return reservation

    def checkout(self, reservation_id: str) -> Reservation:
        """Finish an active reservation. Price and profit are left untouched."""
        with self.uow.transaction() as store:
            reservation = store.get_reservation(reservation_id, lock=True)
            if reservation is None:
                raise ReservationNotFoundError()

            if reservation.is_finished:
                raise AlreadyFinishedError()

            reservation.status = ReservationStatus.FINISHED
            reservation = store.save_reservation(reservation)

        logger.info(
            "reservation checked out",
            extra={"extra_fields": {"reservation_id": reservation_id}},
        )
        return reservation

    def get_reservation(self, reservation_id: str) -> Reservation:
        with self.uow.transaction() as store:
            reservation = store.get_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError()
        return reservation

    def get_reservations(
        self, user_id: str, filters: ReservationFilters | None = None
    ) -> list[Reservation]:
        """Reservations of one user, optionally filtered by status and dates."""
        criteria = _criteria_from_filters(filters, user_id=user_id)
        with self.uow.transaction() as store:
            return store.find_reservations(criteria)

    def get_all_reservations(
        self, filters: ReservationFilters | None = None
    ) -> list[Reservation]:
        """Every reservation, with user and room loaded."""
        criteria = _criteria_from_filters(filters, with_relations=True)
        with self.uow.transaction() as store:
            return store.find_reservations(criteria)

    def get_reservations_room(
        self, room_id: str, filters: ReservationFilters | None = None
    ) -> list[Reservation]:
        """Reservations of one room, with user and room loaded."""
        criteria = _criteria_from_filters(
            filters, room_id=room_id, with_relations=True
        )
        with self.uow.transaction() as store:
            return store.find_reservations(criteria)
