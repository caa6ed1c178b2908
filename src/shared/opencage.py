"""OpenCage geocoding client: free-text address -> latitude/longitude, scoped to Brazil."""

import urllib.parse
from typing import Any

from shared.errors import UpstreamServiceError
from shared.http_client import DEFAULT_TIMEOUT_SEC, get_json

DEFAULT_API_BASE = "https://api.opencagedata.com"
GEOCODE_PATH = "/geocode/v1/json"
SERVICE_NAME = "OpenCage"
COUNTRY_CODE = "br"


def build_geocode_url(address: str, api_key: str, base_url: str = DEFAULT_API_BASE) -> str:
    query = urllib.parse.urlencode(
        {"q": address, "key": api_key, "countrycode": COUNTRY_CODE},
        quote_via=urllib.parse.quote,
    )
    return f"{base_url.rstrip('/')}{GEOCODE_PATH}?{query}"


def geocode(
    address: str,
    api_key: str,
    base_url: str = DEFAULT_API_BASE,
    timeout: float = DEFAULT_TIMEOUT_SEC,
) -> tuple[float, float] | None:
    """
    Geocode an address and return the first candidate as (lat, lng).

    Returns:
        None when OpenCage has no result for the address.

    Raises:
        UpstreamServiceError: On connection/timeout, HTTP error or unexpected body.
    """
    body = get_json(build_geocode_url(address, api_key, base_url), SERVICE_NAME, timeout)
    if not isinstance(body, dict):
        raise UpstreamServiceError(SERVICE_NAME, "returned an invalid response")

    results = body.get("results")
    if not results:
        return None
    return _first_coordinates(results)


def _first_coordinates(results: Any) -> tuple[float, float]:
    try:
        geometry = results[0]["geometry"]
        return float(geometry["lat"]), float(geometry["lng"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise UpstreamServiceError(SERVICE_NAME, "returned an invalid response") from e
