"""Payment callbacks.

The gateway itself lives outside this package: it receives a
PaymentInput, returns a preference handle (checkout link) and later
notifies success or failure for a reservation id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from hotelbook.domain.errors import AlreadyFinishedError, ReservationNotFoundError
from hotelbook.domain.inputs import PaymentInput
from hotelbook.domain.models import Reservation, ReservationStatus
from hotelbook.infra.store import UnitOfWork
from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PreferenceHandle:
    id: str
    init_point: str


class PaymentGateway(Protocol):
    def initiate_preference(self, payment: PaymentInput) -> PreferenceHandle: ...


class PaymentService:
    def __init__(self, uow: UnitOfWork, gateway: PaymentGateway) -> None:
        self.uow = uow
        self.gateway = gateway

    def create_preference(self, payment: PaymentInput) -> PreferenceHandle:
        """Start a payment for an existing reservation.

        Raises:
            ReservationNotFoundError: Unknown reservation.
        """
        with self.uow.transaction() as store:
            if store.get_reservation(payment.reservation_id) is None:
                raise ReservationNotFoundError()

        handle = self.gateway.initiate_preference(payment)
        logger.info(
            "payment preference created",
            extra={
                "extra_fields": {
                    "reservation_id": payment.reservation_id,
                    "preference_id": handle.id,
                    "amount_cents": payment.amount_cents,
                },
            },
        )
        return handle

    def on_payment_success(self, reservation_id: str) -> Reservation:
        """Confirm the reservation as active. Safe to call more than once.

        Raises:
            ReservationNotFoundError: Unknown reservation.
            AlreadyFinishedError: Reservation was already checked out.
        """
        with self.uow.transaction() as store:
            reservation = store.get_reservation(reservation_id, lock=True)
            if reservation is None:
                raise ReservationNotFoundError()
            if reservation.is_finished:
                raise AlreadyFinishedError()

            if reservation.status != ReservationStatus.ACTIVE:
                reservation.status = ReservationStatus.ACTIVE
                reservation = store.save_reservation(reservation)

        logger.info(
            "payment succeeded",
            extra={"extra_fields": {"reservation_id": reservation_id}},
        )
        return reservation

    def on_payment_failure(self, reservation_id: str) -> None:
        """Record the failure; the reservation is left as it is."""
        logger.warning(
            "payment failed",
            extra={"extra_fields": {"reservation_id": reservation_id}},
        )
