"""
Freight quote service: CEP -> coordinates via ViaCEP + OpenCage, then a
great-circle distance and a tiered price.

Expects env: OPENCAGE_API_KEY; optional VIACEP_API_URL, OPENCAGE_API_URL,
HTTP_TIMEOUT_SEC.
"""

import math
import os
from dataclasses import dataclass

from aws_lambda_powertools import Logger

from schemas import Location, Quote
from shared import opencage, viacep
from shared.errors import ConfigurationError, CoordinatesNotFoundError
from shared.http_client import DEFAULT_TIMEOUT_SEC

logger = Logger(service="freight")

EARTH_RADIUS_KM = 6371.0088

# Pricing tiers: (upper bound in km, flat price). Above the last bound the
# price grows linearly from the last flat price.
FLAT_TIERS = ((10.0, 10.0), (50.0, 50.0))
PRICE_PER_EXTRA_KM = 2.0


def _env(key: str, default: str | None = None) -> str:
    value = os.environ.get(key) or default
    if not value and key == "OPENCAGE_API_KEY":
        raise ConfigurationError(f"required environment variable not set: {key}")
    return value or ""


@dataclass(frozen=True)
class FreightSettings:
    opencage_api_key: str
    viacep_api_url: str = viacep.DEFAULT_API_BASE
    opencage_api_url: str = opencage.DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT_SEC

    @classmethod
    def from_env(cls) -> "FreightSettings":
        raw_timeout = _env("HTTP_TIMEOUT_SEC", str(DEFAULT_TIMEOUT_SEC))
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(f"HTTP_TIMEOUT_SEC must be a number, got {raw_timeout!r}") from e
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigurationError(f"HTTP_TIMEOUT_SEC must be a positive number, got {raw_timeout!r}")
        return cls(
            opencage_api_key=_env("OPENCAGE_API_KEY"),
            viacep_api_url=_env("VIACEP_API_URL", viacep.DEFAULT_API_BASE),
            opencage_api_url=_env("OPENCAGE_API_URL", opencage.DEFAULT_API_BASE),
            timeout=timeout,
        )


def distance_km(origin: tuple[float, float], destination: tuple[float, float]) -> float:
    """Haversine distance in km between two (lng, lat) points."""
    lng1, lat1 = map(math.radians, origin)
    lng2, lat2 = map(math.radians, destination)
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def shipping_cost(distance: float) -> float:
    """Flat price up to each tier bound (inclusive), then PRICE_PER_EXTRA_KM per km beyond the last."""
    for bound, price in FLAT_TIERS:
        if distance <= bound:
            return price
    last_bound, last_price = FLAT_TIERS[-1]
    return last_price + (distance - last_bound) * PRICE_PER_EXTRA_KM


def geocode_query(address: viacep.ViaCepAddress) -> str:
    return f"{address.logradouro}, {address.localidade}, {address.uf}, Brazil"


def display_name(address: viacep.ViaCepAddress) -> str:
    return f"{address.logradouro}, {address.bairro}, {address.localidade} - {address.uf}, {address.cep}"


class FreightQuoteService:
    def __init__(self, settings: FreightSettings):
        self.settings = settings

    def resolve_location(self, cep: str) -> Location:
        """
        Resolve a validated CEP: ViaCEP first, then OpenCage with the returned address.

        Raises:
            CepNotFoundError: ViaCEP does not know the CEP (OpenCage is not called).
            CoordinatesNotFoundError: OpenCage has no result for the address.
            UpstreamServiceError: Transport failure on either call.
        """
        address = viacep.lookup_cep(cep, self.settings.viacep_api_url, self.settings.timeout)
        query = geocode_query(address)
        coordinates = opencage.geocode(
            query,
            self.settings.opencage_api_key,
            self.settings.opencage_api_url,
            self.settings.timeout,
        )
        if coordinates is None:
            logger.info("No geocoding result", extra={"cep": cep, "address": query})
            raise CoordinatesNotFoundError(cep, query)

        lat, lng = coordinates
        return Location(cep=cep, lat=lat, lng=lng, display_name=display_name(address))

    def quote(self, origin_cep: str, destination_cep: str) -> Quote:
        """
        Quote freight between two validated CEPs.

        Origin is resolved before destination, so an origin failure is the one
        reported when both sides would fail.
        """
        origin = self.resolve_location(origin_cep)
        destination = self.resolve_location(destination_cep)

        distance = distance_km((origin.lng, origin.lat), (destination.lng, destination.lat))
        cost = shipping_cost(distance)
        logger.info(
            "Freight quoted",
            extra={"origin": origin_cep, "destination": destination_cep, "distance_km": distance, "cost": cost},
        )
        return Quote(origin=origin, destination=destination, distance=distance, cost=cost)
