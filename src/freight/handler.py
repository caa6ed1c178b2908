"""
Handler for freight (distance-based quote) microservice.

Routes:
- GET /health  Always 200 "OK"; no upstream call, no configuration needed.
- GET /calcular-frete?originCep=01310-100&destinationCep=20040-020
  Response: { "origin": {cep, lat, lng, display_name}, "destination": {...}, "distance": 358.3, "cost": 666.6 }
"""

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.parser import parse
from aws_lambda_powertools.utilities.typing import LambdaContext

from shared.errors import ConfigurationError, FreightLookupError
from shared.responses import http_response, options_response, text_response
from schemas import FreightQuoteQuery, is_valid_cep
from service import FreightQuoteService, FreightSettings

logger = Logger(service="freight")

HEALTH_PATH = "/health"
QUOTE_PATH = "/calcular-frete"

_service: FreightQuoteService | None = None


def get_service() -> FreightQuoteService:
    """Build the service on first use and keep it for the life of the execution environment."""
    global _service
    if _service is None:
        _service = FreightQuoteService(FreightSettings.from_env())
    return _service


@logger.inject_lambda_context
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    method = event.get("requestContext", {}).get("http", {}).get("method")
    path = _route_path(event)

    if method == "OPTIONS":
        return options_response()

    route = _match_route(path)
    if route is None:
        return http_response(404, {"error": "route not found"})

    if method != "GET":
        return http_response(405, {"error": "method not allowed, use GET"})

    if route == HEALTH_PATH:
        return text_response(200, "OK")

    return _quote(event.get("queryStringParameters") or {})


def _quote(query_params: dict) -> dict:
    query = parse(event=query_params, model=FreightQuoteQuery)

    if not is_valid_cep(query.origin_cep):
        logger.warning("Invalid origin CEP: %r", query_params.get("originCep"))
        return http_response(400, {"error": "invalid origin postal code"})
    if not is_valid_cep(query.destination_cep):
        logger.warning("Invalid destination CEP: %r", query_params.get("destinationCep"))
        return http_response(400, {"error": "invalid destination postal code"})

    try:
        quote = get_service().quote(query.origin_cep, query.destination_cep)
        return http_response(200, quote.model_dump())
    except ConfigurationError as e:
        logger.error("Configuração: %s", e)
        return http_response(500, {"error": str(e)})
    except FreightLookupError as e:
        logger.warning("Consulta de CEP: %s", e, extra={"error_type": type(e).__name__})
        return http_response(500, {"error": str(e)})
    except Exception:
        logger.exception("Erro no cálculo de frete")
        return http_response(500, {"error": "internal error while calculating freight"})


def _route_path(event: dict) -> str:
    path = event.get("rawPath") or event.get("requestContext", {}).get("http", {}).get("path") or ""
    return path.rstrip("/") or "/"


def _match_route(path: str) -> str | None:
    # Named stages prefix rawPath ("/prod/health").
    for route in (HEALTH_PATH, QUOTE_PATH):
        if path.endswith(route):
            return route
    return None
