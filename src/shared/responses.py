import json


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Expose-Headers": "*",
}

def http_response(status_code: int, body: dict) -> dict:
    headers = {"Content-Type": "application/json", **CORS_HEADERS}
    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json.dumps(body, ensure_ascii=False)
    }


def text_response(status_code: int, text: str) -> dict:
    """Plain-text body, used by the health check."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "text/plain; charset=utf-8", **CORS_HEADERS},
        "body": text,
    }


def options_response() -> dict:
    """
    Resposta para preflight CORS. 204 + Allow-Headers * evita bloqueio
    quando o front envia headers não listados (Accept, etc.).
    """
    return {
        "statusCode": 204,
        "headers": {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, OPTIONS",
            "Access-Control-Allow-Headers": "*",
            "Access-Control-Max-Age": "86400",
        },
        "body": ""
    }
