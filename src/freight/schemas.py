"""DTOs and CEP normalization for the freight (distance-based quote) microservice."""

import re
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

_CEP_PATTERN = re.compile(r"^\d{5}-?\d{3}$")


def normalize_cep(raw: str | None) -> str:
    """
    Strip non-digits and re-insert the hyphen after the 5th digit.

    Up to 5 digits are returned as-is; digits past the 8th are dropped.
    """
    digits = "".join(c for c in str(raw or "") if c in "0123456789")
    if len(digits) <= 5:
        return digits
    return f"{digits[:5]}-{digits[5:8]}"


def is_valid_cep(cep: str) -> bool:
    return bool(_CEP_PATTERN.fullmatch(cep))


def round_money(value: float) -> float:
    """Round half up to 2 decimal places, on the shortest repr of the float (2.675 -> 2.68)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class FreightQuoteQuery(BaseModel):
    """Query string of GET /calcular-frete, already normalized (validity is checked by the handler)."""

    model_config = ConfigDict(populate_by_name=True)

    origin_cep: str = Field(default="", alias="originCep")
    destination_cep: str = Field(default="", alias="destinationCep")

    @field_validator("origin_cep", "destination_cep", mode="before")
    @classmethod
    def normalize(cls, v) -> str:
        return normalize_cep(v)


class Location(BaseModel):
    """A CEP resolved to coordinates."""

    model_config = ConfigDict(frozen=True)

    cep: str
    lat: float
    lng: float
    display_name: str


class Quote(BaseModel):
    """Freight quote; distance (km) and cost keep full precision until serialized."""

    model_config = ConfigDict(frozen=True)

    origin: Location
    destination: Location
    distance: float = Field(..., ge=0)
    cost: float = Field(..., ge=0)

    @field_serializer("distance", "cost")
    def serialize_rounded(self, v: float) -> float:
        return round_money(v)
