"""Errors raised while resolving a CEP into coordinates."""


class FreightLookupError(Exception):
    """Base for every failure after the CEPs passed validation."""

    pass


class CepNotFoundError(FreightLookupError):
    """ViaCEP answered, but reported that the postal code does not exist."""

    def __init__(self, cep: str):
        self.cep = cep
        super().__init__(f"postal code not found: {cep}")


class CoordinatesNotFoundError(FreightLookupError):
    """The geocoder returned no candidate for the resolved address."""

    def __init__(self, cep: str, address: str):
        self.cep = cep
        self.address = address
        super().__init__(f"could not find coordinates for postal code {cep}")


class UpstreamServiceError(FreightLookupError):
    """Network failure, timeout, non-2xx or malformed body from an upstream API."""

    def __init__(self, service: str, message: str, status: int | None = None):
        self.service = service
        self.status = status
        super().__init__(f"{service}: {message}")


class ConfigurationError(FreightLookupError):
    """A required environment variable is missing."""

    pass
