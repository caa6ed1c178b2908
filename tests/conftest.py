import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Garante que src esteja no path (imports "shared.*" como no pacote da Lambda)
_root = Path(__file__).resolve().parents[1]
src_path = str(_root / "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)


@pytest.fixture
def lambda_context():
    """Contexto mínimo aceito por Logger.inject_lambda_context."""
    context = MagicMock()
    context.function_name = "freight"
    context.function_version = "$LATEST"
    context.memory_limit_in_mb = 128
    context.invoked_function_arn = "arn:aws:lambda:sa-east-1:123456789012:function:freight"
    context.aws_request_id = "52fdfc07-2182-154f-163f-5f0f9a621d72"
    return context


@pytest.fixture
def urlopen_response():
    """Fábrica de respostas fake para urllib.request.urlopen (usadas como context manager)."""

    def _make(body: bytes, status: int = 200) -> MagicMock:
        resp = MagicMock()
        resp.status = status
        resp.read.return_value = body
        resp.__enter__ = MagicMock(return_value=resp)
        resp.__exit__ = MagicMock(return_value=False)
        return resp

    return _make
