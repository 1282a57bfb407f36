"""Error taxonomy for the reservation core.

Three families, so the boundary layer can map them to responses:

- ValidationError: malformed or contradictory input. Fix the input.
- NotFoundError: a referenced entity does not exist.
- ConflictError: a business rule rejects the operation.

Nothing here is retried automatically.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable


class HotelbookError(Exception):
    """Base class for all domain errors."""

    default_message = "Operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ── Validation ────────────────────────────────────────────────────────────────


class ValidationError(HotelbookError):
    default_message = "Invalid input"


class IncompleteDateError(ValidationError):
    default_message = "Incomplete date information provided."


class InvalidDateError(ValidationError):
    default_message = "Invalid date"


class InvalidRangeError(ValidationError):
    default_message = "Start date cannot be later than end date."


class InvalidPaginationError(ValidationError):
    default_message = "Page and limit must be greater than 0."


class NegativePriceError(ValidationError):
    default_message = "Price bounds cannot be negative."


class InvalidPriceRangeError(ValidationError):
    default_message = "Minimum price cannot be greater than maximum price."


class IncompleteDateWindowError(ValidationError):
    default_message = "Both start date and end date must be provided."


class InvalidCategoryError(ValidationError):
    default_message = "Invalid category value."


class ApplyToAllRequiredError(ValidationError):
    default_message = "applyToAll is required when featuresIds is provided"


class ApplyToAllConflictError(ValidationError):
    default_message = "applyToAll cannot be used together with number"


class FeatureAddDeleteConflictError(ValidationError):
    """A feature was listed both for addition and for deletion."""

    def __init__(self, feature_name: str) -> None:
        self.feature_name = feature_name
        super().__init__(
            f"You can't add and delete the same feature: {feature_name}"
        )


# ── Not found ─────────────────────────────────────────────────────────────────


class NotFoundError(HotelbookError):
    default_message = "Not found"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


class RoomNotFoundError(NotFoundError):
    default_message = "Room not found"


class ReservationNotFoundError(NotFoundError):
    default_message = "Reservation not found"


class FeatureNotFoundError(NotFoundError):
    default_message = "One or more features not found"


class ServiceNotFoundError(NotFoundError):
    def __init__(self, service_type: str) -> None:
        self.service_type = service_type
        super().__init__(f"Service of type {service_type} not found")


class GuestSurchargeConfigMissingError(NotFoundError):
    def __init__(self, name: str = "guest") -> None:
        self.name = name
        super().__init__(f"Guest price '{name}' not found")


# ── Conflict ──────────────────────────────────────────────────────────────────


class ConflictError(HotelbookError):
    default_message = "Conflict"


class DuplicateActiveReservationError(ConflictError):
    default_message = "You already have an active reservation"


class RoomUnavailableError(ConflictError):
    """Raised when a room already has a reservation overlapping the range."""

    def __init__(
        self,
        room_id: str,
        conflicting_reservation_id: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> None:
        self.room_id = room_id
        self.conflicting_reservation_id = conflicting_reservation_id
        self.start = start
        self.end = end
        super().__init__(
            "There is already a reservation during these dates for this room."
        )


class MaxStayExceededError(ConflictError):
    def __init__(self, max_days: int = 15) -> None:
        self.max_days = max_days
        super().__init__(f"Maximum {max_days} days")


class DuplicateRoomNumberError(ConflictError):
    def __init__(self, number: int) -> None:
        self.number = number
        super().__init__(
            f"Room {number} already exists, try another number or update it"
        )


class DuplicateFeatureError(ConflictError):
    def __init__(self, room_id: str, feature_ids: Iterable[str]) -> None:
        self.room_id = room_id
        self.feature_ids = list(feature_ids)
        super().__init__(
            f"Feature(s) with id(s) {', '.join(self.feature_ids)} "
            f"already exist(s) in room {room_id}"
        )


class AlreadyFinishedError(ConflictError):
    default_message = "Reservation already finished"
