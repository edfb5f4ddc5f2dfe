from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.external.service_probe import is_reachable
from app.external.spheron_client import SpheronClient, SpheronClientError

GATEWAY = "http://gateway.test/"


def _response(status_code=200, body=b"{}", reason="OK"):
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.reason = reason
    return response


@pytest.fixture
def spheron():
    client = SpheronClient(network="testnet", private_key="0xkey", base_url=GATEWAY, timeout=3)
    yield client
    client.close()


def test_requires_private_key():
    with pytest.raises(ValueError):
        SpheronClient(network="testnet", private_key="", base_url=GATEWAY)


def test_session_headers(spheron):
    headers = spheron._transport.session.headers
    assert headers["Authorization"] == "Bearer 0xkey"
    assert headers["X-Spheron-Network"] == "testnet"


def test_get_user_balance_keeps_precision(spheron):
    body = b'{"lockedBalance": 123456789012345678901234567890, "unlockedBalance": 1.10, "token": "CST"}'
    with patch.object(spheron._transport.session, "request", return_value=_response(body=body)) as request:
        balance = spheron.escrow.get_user_balance("CST")

    request.assert_called_once_with(
        "GET", "http://gateway.test/escrow/balance", params={"token": "CST"}, json=None, timeout=3
    )
    assert balance["lockedBalance"] == 123456789012345678901234567890
    assert balance["unlockedBalance"] == Decimal("1.10")


def test_create_deployment_posts_sdl(spheron):
    body = b'{"leaseId": "77", "transaction": {"hash": "0x1"}}'
    with patch.object(spheron._transport.session, "request", return_value=_response(body=body)) as request:
        transaction = spheron.deployment.create_deployment("version: 1.0", "https://proxy")

    request.assert_called_once_with(
        "POST", "http://gateway.test/deployments", params=None,
        json={"sdl": "version: 1.0", "providerProxyUrl": "https://proxy"}, timeout=3
    )
    assert transaction["leaseId"] == "77"


def test_secondary_endpoints(spheron):
    with patch.object(spheron._transport.session, "request", return_value=_response(body=b"[]")) as request:
        spheron.deployment.get_deployment("77", "https://proxy")
        spheron.deployment.get_deployment_logs("77", "https://proxy", tail=50, startup=False)
        spheron.leases.get_lease_details("77")
        spheron.leases.get_lease_status_by_lease_id("77")

    calls = [(c.args, c.kwargs["params"]) for c in request.call_args_list]
    assert calls == [
        (("GET", "http://gateway.test/deployments/77"), {"providerProxyUrl": "https://proxy"}),
        (("GET", "http://gateway.test/deployments/77/logs"),
         {"providerProxyUrl": "https://proxy", "tail": 50, "startup": "false"}),
        (("GET", "http://gateway.test/leases/77"), None),
        (("GET", "http://gateway.test/leases/77/status"), None),
    ]


def test_http_error_raises_client_error(spheron):
    error = _response(status_code=422, body=b'{"message": "invalid sdl"}', reason="Unprocessable Entity")
    with patch.object(spheron._transport.session, "request", return_value=error):
        with pytest.raises(SpheronClientError) as excinfo:
            spheron.deployment.create_deployment("bad", "https://proxy")

    assert str(excinfo.value) == "invalid sdl"
    assert excinfo.value.status_code == 422
    assert excinfo.value.body == {"message": "invalid sdl"}


def test_http_error_without_json_uses_reason(spheron):
    error = _response(status_code=502, body=b"upstream down", reason="Bad Gateway")
    with patch.object(spheron._transport.session, "request", return_value=error):
        with pytest.raises(SpheronClientError) as excinfo:
            spheron.leases.get_lease_details("77")

    assert str(excinfo.value) == "Bad Gateway"
    assert excinfo.value.body == "upstream down"


def test_network_error_raises_client_error(spheron):
    with patch.object(spheron._transport.session, "request", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(SpheronClientError) as excinfo:
            spheron.escrow.get_user_balance("CST")

    assert excinfo.value.status_code is None


def test_empty_body_returns_none(spheron):
    with patch.object(spheron._transport.session, "request", return_value=_response(body=b"")):
        assert spheron.leases.get_lease_status_by_lease_id("77") is None


class TestServiceProbe:
    def test_reachable_on_http_response(self):
        with patch("app.external.service_probe.requests.get", return_value=MagicMock(status_code=200)) as get:
            assert is_reachable("http://h:1", timeout=2) is True
        get.assert_called_once_with("http://h:1", timeout=2, allow_redirects=True)

    def test_proxy_error_is_not_reachable(self):
        with patch("app.external.service_probe.requests.get", return_value=MagicMock(status_code=502)):
            assert is_reachable("http://h:1") is False

    def test_connection_error_is_not_reachable(self):
        with patch("app.external.service_probe.requests.get", side_effect=requests.ConnectionError("refused")):
            assert is_reachable("http://h:1") is False
