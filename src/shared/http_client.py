"""
Minimal JSON-over-HTTP GET used by the upstream lookup clients.

Every transport problem is raised as UpstreamServiceError so callers only
have to tell domain errors apart from infrastructure ones.
"""

import json
import ssl
import urllib.error
import urllib.request
from typing import Any

from aws_lambda_powertools import Logger

from shared.errors import UpstreamServiceError

logger = Logger(service="freight")

DEFAULT_TIMEOUT_SEC = 10


def get_json(url: str, service: str, timeout: float = DEFAULT_TIMEOUT_SEC) -> Any:
    """
    GET a URL and decode the JSON body.

    Args:
        url: Fully built URL, query string included.
        service: Upstream name used in error messages and logs ("ViaCEP", "OpenCage").
        timeout: Seconds before the request is abandoned.

    Raises:
        UpstreamServiceError: On connection/timeout, non-2xx status or invalid JSON.
    """
    req = urllib.request.Request(url, method="GET", headers={"Accept": "application/json"})

    try:
        with urllib.request.urlopen(
            req, timeout=timeout, context=ssl.create_default_context()
        ) as resp:
            payload = resp.read()
            if not 200 <= resp.status < 300:
                logger.warning("%s status %s: %s", service, resp.status, payload[:500].decode("utf-8", errors="replace"))
                raise UpstreamServiceError(service, f"returned status {resp.status}", resp.status)
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
        logger.warning("%s HTTP error %s: %s", service, e.code, raw[:500])
        raise UpstreamServiceError(service, f"returned HTTP error {e.code}", e.code) from e
    except urllib.error.URLError as e:
        reason = getattr(e, "reason", None)
        if isinstance(reason, TimeoutError) or (reason and "timed out" in str(reason).lower()):
            raise UpstreamServiceError(service, "timed out") from e
        raise UpstreamServiceError(service, "connection failed") from e
    except TimeoutError as e:
        raise UpstreamServiceError(service, "timed out") from e
    except OSError as e:
        raise UpstreamServiceError(service, "connection failed") from e

    try:
        return json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("%s response is not valid JSON: %r", service, payload[:300])
        raise UpstreamServiceError(service, "returned an invalid response") from e
