"""Tests for reservation queries by user, by room and across the hotel."""

from dataclasses import replace
from datetime import date

import pytest

from hotelbook.domain.errors import IncompleteDateError, InvalidRangeError
from hotelbook.domain.inputs import ReservationFilters
from hotelbook.domain.models import Reservation, ReservationStatus

from helpers import NEXT_YEAR, stay


def _reservation(res_id, user_id, room_id, start, end, status=ReservationStatus.ACTIVE):
    return Reservation(
        id=res_id,
        user_id=user_id,
        room_id=room_id,
        start_date=start,
        end_date=end,
        price_cents=10000,
        status=status,
    )


@pytest.fixture
def history(uow):
    uow.seed(
        _reservation(
            "res-a", "user-1", "room-101",
            date(2025, 1, 10), date(2025, 1, 12),
            status=ReservationStatus.FINISHED,
        ),
        _reservation(
            "res-b", "user-1", "room-201",
            date(2025, 3, 1), date(2025, 3, 4),
            status=ReservationStatus.FINISHED,
        ),
        _reservation("res-c", "user-1", "room-101", date(2025, 5, 20), date(2025, 5, 25)),
        _reservation("res-d", "user-2", "room-101", date(2025, 3, 2), date(2025, 3, 3)),
    )
    return uow


def _ids(reservations):
    return [r.id for r in reservations]


class TestGetReservations:
    def test_check_in_round_trip(self, manager):
        created = manager.check_in(
            "user-3",
            stay(date(NEXT_YEAR, 8, 1), date(NEXT_YEAR, 8, 3), services=["spa"]),
        )

        [fetched] = manager.get_reservations("user-3")

        assert fetched == replace(created, user=None, room=None)

    def test_no_filter_returns_all_of_user(self, manager, history):
        assert _ids(manager.get_reservations("user-1")) == ["res-a", "res-b", "res-c"]

    def test_empty_filter_object(self, manager, history):
        assert _ids(manager.get_reservations("user-1", ReservationFilters())) == [
            "res-a",
            "res-b",
            "res-c",
        ]

    def test_status_filter(self, manager, history):
        result = manager.get_reservations(
            "user-1", ReservationFilters(status=ReservationStatus.ACTIVE)
        )
        assert _ids(result) == ["res-c"]

    def test_date_window_overlap(self, manager, history):
        filters = ReservationFilters(
            start_day=12, start_month=1, start_year=2025,
            end_day=1, end_month=3, end_year=2025,
        )
        assert _ids(manager.get_reservations("user-1", filters)) == ["res-a", "res-b"]

    def test_window_and_status_combine(self, manager, history):
        filters = ReservationFilters(
            status=ReservationStatus.ACTIVE,
            start_day=1, start_month=1, start_year=2025,
            end_day=31, end_month=12, end_year=2025,
        )
        assert _ids(manager.get_reservations("user-1", filters)) == ["res-c"]

    def test_open_ended_window(self, manager, history):
        filters = ReservationFilters(start_day=1, start_month=4, start_year=2025)
        assert _ids(manager.get_reservations("user-1", filters)) == ["res-c"]

    def test_incomplete_date(self, manager, history):
        with pytest.raises(IncompleteDateError):
            manager.get_reservations(
                "user-1", ReservationFilters(start_day=1, start_year=2025)
            )

    def test_inverted_window(self, manager, history):
        filters = ReservationFilters(
            start_day=2, start_month=3, start_year=2025,
            end_day=1, end_month=3, end_year=2025,
        )
        with pytest.raises(InvalidRangeError):
            manager.get_reservations("user-1", filters)

    @pytest.mark.parametrize(
        "filters",
        [
            ReservationFilters(start_day=1, start_month=1, start_year=0),
            ReservationFilters(end_day=10**9, end_month=1, end_year=2025),
        ],
    )
    def test_unrepresentable_date(self, manager, history, filters):
        with pytest.raises(InvalidRangeError):
            manager.get_reservations("user-1", filters)

    def test_unknown_user_has_no_reservations(self, manager, history):
        assert manager.get_reservations("ghost") == []


class TestGetAllReservations:
    def test_returns_everything_with_relations(self, manager, history):
        result = manager.get_all_reservations()

        assert _ids(result) == ["res-a", "res-b", "res-d", "res-c"]
        assert all(r.user is not None and r.room is not None for r in result)
        assert result[2].user.id == "user-2"
        assert result[2].room.number == 101

    def test_window(self, manager, history):
        filters = ReservationFilters(
            start_day=3, start_month=3, start_year=2025,
            end_day=3, end_month=3, end_year=2025,
        )
        assert _ids(manager.get_all_reservations(filters)) == ["res-b", "res-d"]

    def test_status(self, manager, history):
        filters = ReservationFilters(status=ReservationStatus.FINISHED)
        assert _ids(manager.get_all_reservations(filters)) == ["res-a", "res-b"]


class TestGetReservationsRoom:
    def test_room_scope(self, manager, history):
        result = manager.get_reservations_room("room-101")
        assert _ids(result) == ["res-a", "res-d", "res-c"]
        assert {r.room.id for r in result} == {"room-101"}

    def test_room_window(self, manager, history):
        filters = ReservationFilters(
            start_day=1, start_month=3, start_year=2025,
            end_day=31, end_month=3, end_year=2025,
        )
        assert _ids(manager.get_reservations_room("room-101", filters)) == ["res-d"]

    def test_room_incomplete_window(self, manager, history):
        with pytest.raises(IncompleteDateError):
            manager.get_reservations_room(
                "room-101", ReservationFilters(end_month=3, end_year=2025)
            )
