"""Tests for payment preference creation and gateway callbacks."""

from datetime import date

import pytest

from hotelbook.domain.errors import AlreadyFinishedError, ReservationNotFoundError
from hotelbook.domain.inputs import PaymentInput
from hotelbook.domain.models import ReservationStatus
from hotelbook.domain.payments import PaymentService, PreferenceHandle

from helpers import NEXT_YEAR, stay


class FakeGateway:
    def __init__(self):
        self.calls: list[PaymentInput] = []

    def initiate_preference(self, payment):
        self.calls.append(payment)
        return PreferenceHandle(
            id=f"pref-{len(self.calls)}",
            init_point=f"https://pay.example.com/checkout/pref-{len(self.calls)}",
        )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def payments(uow, gateway):
    return PaymentService(uow, gateway)


@pytest.fixture
def reservation(manager):
    return manager.check_in(
        "user-1", stay(date(NEXT_YEAR, 6, 1), date(NEXT_YEAR, 6, 3))
    )


def _payment(reservation_id, amount=12000):
    return PaymentInput(
        reservation_id=reservation_id,
        description="Room 101, 2 nights",
        amount_cents=amount,
    )


class TestCreatePreference:
    def test_delegates_to_gateway(self, payments, gateway, reservation):
        handle = payments.create_preference(_payment(reservation.id))

        assert handle.id == "pref-1"
        assert gateway.calls[0].reservation_id == reservation.id

    def test_unknown_reservation(self, payments, gateway):
        with pytest.raises(ReservationNotFoundError):
            payments.create_preference(_payment("res-missing"))
        assert gateway.calls == []


class TestCallbacks:
    def test_success_keeps_reservation_active(self, payments, manager, reservation):
        confirmed = payments.on_payment_success(reservation.id)

        assert confirmed.status == ReservationStatus.ACTIVE
        assert manager.get_reservation(reservation.id).status == ReservationStatus.ACTIVE

    def test_success_is_idempotent(self, payments, reservation):
        payments.on_payment_success(reservation.id)
        again = payments.on_payment_success(reservation.id)
        assert again.status == ReservationStatus.ACTIVE

    def test_success_unknown_reservation(self, payments):
        with pytest.raises(ReservationNotFoundError):
            payments.on_payment_success("res-missing")

    def test_success_after_checkout(self, payments, manager, reservation):
        manager.checkout(reservation.id)
        with pytest.raises(AlreadyFinishedError):
            payments.on_payment_success(reservation.id)

    def test_failure_changes_nothing(self, payments, manager, reservation):
        assert payments.on_payment_failure(reservation.id) is None

        stored = manager.get_reservation(reservation.id)
        assert stored.status == ReservationStatus.ACTIVE
        assert stored.price_cents == reservation.price_cents
