"""Reservation pricing.

total = nightly rate * nights + guests * guest surcharge + selected services

The engine never reads the store itself: the surcharge and the service
catalog come in through PricingConfig, built once per check-in inside the
booking transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence
from uuid import uuid4

from hotelbook.domain.errors import (
    GuestSurchargeConfigMissingError,
    ServiceNotFoundError,
)
from hotelbook.domain.models import Room, Service, ServiceCharge
from hotelbook.infra.store import Store

DEFAULT_GUEST_PRICE_NAME = "guest"


@dataclass(frozen=True)
class PricingConfig:
    """Pricing inputs that do not depend on the request.

    Attributes:
        guest_surcharge_cents: Per-guest surcharge, None when not configured.
        services: Service catalog keyed by service type.
        guest_price_name: Name the surcharge is looked up by.
    """

    guest_surcharge_cents: int | None
    services: Mapping[str, Service] = field(default_factory=dict)
    guest_price_name: str = DEFAULT_GUEST_PRICE_NAME


@dataclass(frozen=True)
class PriceQuote:
    total_cents: int
    nights: int
    guest_count: int
    charges: list[ServiceCharge]


def load_pricing_config(
    store: Store,
    guest_price_name: str = DEFAULT_GUEST_PRICE_NAME,
) -> PricingConfig:
    """Read the current surcharge and service catalog from the store."""
    guest_price = store.get_guest_price(guest_price_name)
    return PricingConfig(
        guest_surcharge_cents=guest_price.price_cents if guest_price else None,
        services={s.type: s for s in store.list_services()},
        guest_price_name=guest_price_name,
    )


class PricingEngine:
    def __init__(self, config: PricingConfig) -> None:
        self.config = config

    def price(
        self,
        room: Room,
        nights: int,
        guest_count: int,
        service_types: Sequence[str] = (),
        *,
        reservation_id: str = "",
    ) -> PriceQuote:
        """Compute the total for a stay.

        Each accepted service yields a ServiceCharge snapshot at the catalog
        price of this moment, so later catalog changes do not reprice
        existing bookings.

        Raises:
            GuestSurchargeConfigMissingError: No surcharge configured.
            ServiceNotFoundError: A service type is not in the catalog.
        """
        surcharge = self.config.guest_surcharge_cents
        if surcharge is None:
            raise GuestSurchargeConfigMissingError(self.config.guest_price_name)

        total = room.price_cents * nights + guest_count * surcharge

        charges: list[ServiceCharge] = []
        for service_type in service_types:
            service = self.config.services.get(service_type)
            if service is None:
                raise ServiceNotFoundError(service_type)
            total += service.price_cents
            charges.append(
                ServiceCharge(
                    id=str(uuid4()),
                    reservation_id=reservation_id,
                    service_id=service.id,
                    service_type=service.type,
                    price_cents=service.price_cents,
                )
            )

        return PriceQuote(
            total_cents=total,
            nights=nights,
            guest_count=guest_count,
            charges=charges,
        )
