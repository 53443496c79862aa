"""Delivery address, payment method and delivery zones."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import ValidationError

CITY_NAME = "Iligan City"
ZONE_PREFIX = "Brgy."


class PaymentMethod(Enum):
    """Payment method label; no payment protocol is involved."""

    COD = "COD"
    E_WALLET = "E-Wallet"
    CREDIT_CARD = "CreditCard"


@dataclass(frozen=True)
class DeliveryZone:
    """A zone from the external zone registry."""

    name: str
    is_active: bool = True


@dataclass(frozen=True)
class Address:
    recipient_name: str
    phone: str
    detail: str
    zone: str
    payment_method: PaymentMethod = PaymentMethod.COD

    def validate(self, active_zones: Iterable[DeliveryZone]) -> None:
        """Check the address may be used to place an order.

        All text fields must be non-blank and the zone must be one of the
        *active* zones currently offered by the registry.
        """
        missing = [
            label
            for label, value in (
                ("recipient name", self.recipient_name),
                ("phone", self.phone),
                ("zone", self.zone),
                ("address detail", self.detail),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise ValidationError(f"Missing delivery details: {', '.join(missing)}")

        offered = {z.name for z in active_zones if z.is_active}
        zone = self.zone.strip()
        if zone not in offered:
            raise ValidationError(f"Zone '{zone}' is not an active delivery zone")

    def compose(self) -> str:
        """Single-line shipping address, e.g. ``Iligan City, Brgy. Tibanga • 12 Rizal St``.

        The zone is always written as ``Brgy. <zone>`` so it can be found
        again in the composed string.
        """
        return f"{CITY_NAME}, {ZONE_PREFIX} {self.zone.strip()} • {self.detail.strip()}"
