"""
ViaCEP client: postal code -> street, neighborhood, city and state.

Optional env: VIACEP_API_URL (defaults to the public service).
"""

from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from shared.errors import CepNotFoundError, UpstreamServiceError
from shared.http_client import DEFAULT_TIMEOUT_SEC, get_json

DEFAULT_API_BASE = "https://viacep.com.br"
SERVICE_NAME = "ViaCEP"


class ViaCepAddress(BaseModel):
    """Address fields as returned by ViaCEP. City-wide CEPs come with blank street fields."""

    cep: str = ""
    logradouro: str = ""
    bairro: str = ""
    localidade: str = ""
    uf: str = ""

    @field_validator("cep", "logradouro", "bairro", "localidade", "uf", mode="before")
    @classmethod
    def none_as_blank(cls, v: Any) -> Any:
        return "" if v is None else v


def _is_error_payload(body: dict[str, Any]) -> bool:
    # ViaCEP sends {"erro": true}; older deployments send {"erro": "true"}.
    erro = body.get("erro")
    if isinstance(erro, str):
        return erro.strip().lower() == "true"
    return bool(erro)


def lookup_cep(
    cep: str,
    base_url: str = DEFAULT_API_BASE,
    timeout: float = DEFAULT_TIMEOUT_SEC,
) -> ViaCepAddress:
    """
    Fetch the address registered for a CEP.

    Args:
        cep: Canonical CEP ("01310-100" or "01310100"); the hyphen is removed.

    Raises:
        CepNotFoundError: ViaCEP reports the code does not exist.
        UpstreamServiceError: On connection/timeout, HTTP error or unexpected body.
    """
    digits = cep.replace("-", "")
    url = f"{base_url.rstrip('/')}/ws/{digits}/json/"
    body = get_json(url, SERVICE_NAME, timeout)

    if not isinstance(body, dict):
        raise UpstreamServiceError(SERVICE_NAME, "returned an invalid response")
    if _is_error_payload(body):
        raise CepNotFoundError(cep)

    try:
        return ViaCepAddress.model_validate(body)
    except ValidationError as e:
        raise UpstreamServiceError(SERVICE_NAME, "returned an invalid response") from e
