"""Domain service: map an order's delivery zone to a coordinate.

There is no geocoding here.  Each known zone has a fixed mock coordinate
laid out on a small grid around the city centre, which is good enough to
draw a rider moving between two points and nothing more.  Arbitrary
addresses are NOT resolved: anything unrecognised lands on the default
coordinate.
"""

from __future__ import annotations

import structlog

from storefront.domain.model.address import ZONE_PREFIX
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Coordinate

logger = structlog.get_logger(__name__)

CITY_CENTER = Coordinate(lat=8.2280, lng=124.2452)

KNOWN_ZONES = (
    "Abuno", "Acmac", "Bagong Silang", "Bonbonon", "Bunawan", "Buru-un",
    "Dalipuga", "Del Carmen", "Digkilaan", "Ditucalan", "Dulag", "Hinaplanon",
    "Hindang", "Kabacsanan", "Kalilangan", "Kiwalan", "Lanipao", "Luinab",
    "Mahayahay", "Mainit", "Mandulog", "Maria Cristina", "Palao", "Panoroganan",
    "Poblacion", "Puga-an", "Rogongon", "San Miguel", "San Roque", "Santiago",
    "Saray", "Santa Elena", "Santa Filomena", "Santo Rosario", "Suarez",
    "Tambacan", "Tibanga", "Tipanoy", "Tomas L. Cabili", "Tubod", "Ubaldo Laya",
    "Upper Hinaplanon", "Upper Tominobo", "Villa Verde",
)

_GRID_STEP = 0.001


def _grid_coordinates(names: tuple[str, ...], origin: Coordinate) -> dict[str, Coordinate]:
    return {
        name: Coordinate(
            lat=origin.lat + (index % 5) * _GRID_STEP,
            lng=origin.lng + (index // 5 % 5) * _GRID_STEP,
        )
        for index, name in enumerate(names)
    }


class ZoneLocator:
    """Resolves the destination coordinate of an order.

    The structured ``delivery_zone`` stored on the order is used first.
    Orders without it fall back to looking for ``Brgy. <zone>`` inside the
    composed shipping address; the longest matching zone name wins so that
    "Upper Hinaplanon" is not mistaken for "Hinaplanon".
    """

    def __init__(
        self,
        coordinates: dict[str, Coordinate] | None = None,
        default: Coordinate = CITY_CENTER,
    ) -> None:
        self._coordinates = (
            dict(coordinates) if coordinates is not None
            else _grid_coordinates(KNOWN_ZONES, CITY_CENTER)
        )
        self._default = default

    @property
    def default(self) -> Coordinate:
        return self._default

    def coordinate_for_zone(self, zone: str | None) -> Coordinate | None:
        if not zone:
            return None
        return self._coordinates.get(zone.strip())

    def match_address(self, shipping_address: str) -> str | None:
        """Best-effort zone lookup inside a free-text address."""
        matches = [
            name for name in self._coordinates
            if f"{ZONE_PREFIX} {name}" in shipping_address
        ]
        if not matches:
            return None
        return max(matches, key=len)

    def locate(self, order: Order) -> Coordinate:
        coordinate = self.coordinate_for_zone(order.delivery_zone)
        if coordinate is not None:
            return coordinate

        zone = self.match_address(order.shipping_address or "")
        if zone is not None:
            return self._coordinates[zone]

        logger.info(
            "Zone not recognised, using default destination",
            order_id=order.id,
            delivery_zone=order.delivery_zone,
        )
        return self._default
