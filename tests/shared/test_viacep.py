import json
import pytest
from unittest.mock import patch

from shared.errors import CepNotFoundError, UpstreamServiceError
from shared.viacep import ViaCepAddress, lookup_cep


class TestLookupCep:
    """Consulta ao ViaCEP (get_json mockado)."""

    def test_strips_hyphen_and_parses_address(self) -> None:
        body = {
            "cep": "01310-100",
            "logradouro": "Avenida Paulista",
            "bairro": "Bela Vista",
            "localidade": "São Paulo",
            "uf": "SP",
            "ibge": "3550308",
        }
        with patch("shared.viacep.get_json", return_value=body) as mock_get:
            address = lookup_cep("01310-100", timeout=4)

        mock_get.assert_called_once_with("https://viacep.com.br/ws/01310100/json/", "ViaCEP", 4)
        assert address == ViaCepAddress(
            cep="01310-100", logradouro="Avenida Paulista", bairro="Bela Vista", localidade="São Paulo", uf="SP"
        )

    def test_custom_base_url(self) -> None:
        with patch("shared.viacep.get_json", return_value={"cep": "20040-020"}) as mock_get:
            lookup_cep("20040020", base_url="http://viacep.local/")
        assert mock_get.call_args[0][0] == "http://viacep.local/ws/20040020/json/"

    def test_blank_fields_for_city_wide_cep(self) -> None:
        body = {"cep": "17120-000", "logradouro": "", "bairro": None, "localidade": "Agudos", "uf": "SP"}
        with patch("shared.viacep.get_json", return_value=body):
            address = lookup_cep("17120-000")
        assert address.logradouro == ""
        assert address.bairro == ""

    @pytest.mark.parametrize("erro", [True, "true"])
    def test_erro_flag_raises_not_found(self, erro) -> None:
        with patch("shared.viacep.get_json", return_value={"erro": erro}):
            with pytest.raises(CepNotFoundError) as exc_info:
                lookup_cep("00000-000")
        assert exc_info.value.cep == "00000-000"
        assert str(exc_info.value) == "postal code not found: 00000-000"

    def test_non_object_body_is_upstream_error(self) -> None:
        with patch("shared.viacep.get_json", return_value=[]):
            with pytest.raises(UpstreamServiceError):
                lookup_cep("01310-100")

    def test_through_urlopen(self, urlopen_response) -> None:
        with patch("shared.http_client.urllib.request.urlopen") as mock_open:
            mock_open.return_value = urlopen_response(json.dumps({"erro": True}).encode("utf-8"))
            with pytest.raises(CepNotFoundError):
                lookup_cep("00000-000")
        assert mock_open.call_args[0][0].full_url == "https://viacep.com.br/ws/00000000/json/"
