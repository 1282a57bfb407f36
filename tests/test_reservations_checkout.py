"""Tests for checkout."""

from datetime import date

import pytest

from hotelbook.domain.errors import AlreadyFinishedError, ReservationNotFoundError
from hotelbook.domain.models import ReservationStatus

from helpers import NEXT_YEAR, stay


@pytest.fixture
def reservation(manager):
    return manager.check_in(
        "user-1", stay(date(NEXT_YEAR, 6, 1), date(NEXT_YEAR, 6, 4))
    )


def test_checkout_finishes_reservation(manager, reservation):
    finished = manager.checkout(reservation.id)

    assert finished.status == ReservationStatus.FINISHED
    assert manager.get_reservation(reservation.id).status == ReservationStatus.FINISHED


def test_checkout_keeps_price_and_profit(manager, uow, reservation):
    manager.checkout(reservation.id)

    assert manager.get_reservation(reservation.id).price_cents == reservation.price_cents
    with uow.transaction() as store:
        assert store.get_monthly_profit(NEXT_YEAR, 6).profit_cents == reservation.price_cents


def test_second_checkout_fails(manager, uow, reservation):
    manager.checkout(reservation.id)

    with pytest.raises(AlreadyFinishedError):
        manager.checkout(reservation.id)

    with uow.transaction() as store:
        assert store.get_monthly_profit(NEXT_YEAR, 6).profit_cents == reservation.price_cents


def test_unknown_reservation(manager):
    with pytest.raises(ReservationNotFoundError):
        manager.checkout("res-missing")


def test_get_unknown_reservation(manager):
    with pytest.raises(ReservationNotFoundError):
        manager.get_reservation("res-missing")
