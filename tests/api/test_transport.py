import datetime

import pytest
import requests
from requests.auth import HTTPBasicAuth

from athena.api import resources, transport
from athena.api.errors import (
    AthenaDecodeError,
    AthenaHTTPError,
    AthenaTransportError,
    RequestConstructionError,
)
from athena.api.models import Workspace
from athena.config.models import AthenaConfig

from conftest import BASE, FakeResponse, ok


def test_collection_and_item_urls(config):
    assert transport.collection_url(config, "ipamReservations") == f"{BASE}/ipamReservations/"
    assert transport.item_url(config, "jobStatus", 12) == f"{BASE}/jobStatus/12/"


def test_collection_url_uses_scheme_and_port():
    cfg = AthenaConfig(scheme="http", address="10.0.0.5", port=8000, user="u", password="p")
    assert transport.collection_url(cfg, "workspaces") == "http://10.0.0.5:8000/api/v3/onefuse/workspaces/"


def test_url_from_href(config):
    href = "/api/v3/onefuse/ipamReservations/5/"
    assert transport.url_from_href(config, href) == f"{BASE}/ipamReservations/5/"
    absolute = "https://other:8443/api/v3/onefuse/ipamReservations/5/"
    assert transport.url_from_href(config, absolute) == absolute


def test_every_request_carries_standard_headers_and_basic_auth(server, config):
    server.add("GET", f"{BASE}/workspaces/1/", ok({"id": 1, "name": "Default"}))

    ws = resources.get_by_id(config, "workspaces", 1, Workspace)

    assert ws.name == "Default"
    call = server.calls[0]
    assert call.headers == {
        "Content-Type": "application/json",
        "Accept": "*/*",
        "Cache-Control": "no-cache",
        "accept-encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Host": "onefuse.test:443",
        "SOURCE": "Terraform",
    }
    assert isinstance(call.auth, HTTPBasicAuth)
    assert (call.auth.username, call.auth.password) == ("admin", "secret")
    assert call.verify is True
    assert call.timeout == 30.0


def test_verify_ssl_false_skips_certificate_validation(server):
    cfg = AthenaConfig(address="onefuse.test", port="443", user="admin", password="secret", verify_ssl=False)
    server.add("GET", f"{BASE}/workspaces/1/", ok({"id": 1}))

    resources.get_by_id(cfg, "workspaces", 1, Workspace)

    assert server.calls[0].verify is False


@pytest.mark.parametrize("status", [400, 404, 500, 503])
def test_status_400_and_up_is_a_failure_with_raw_body(server, config, status):
    server.add("GET", f"{BASE}/workspaces/1/", FakeResponse(status, text='{"detail": "nope"}'))

    with pytest.raises(AthenaHTTPError) as ei:
        resources.get_by_id(config, "workspaces", 1, Workspace)

    assert ei.value.status_code == status
    assert str(ei.value) == '{"detail": "nope"}'


def test_connection_failure_is_a_transport_error(server, config):
    server.add("GET", f"{BASE}/workspaces/1/", requests.ConnectionError("name resolution failed"))

    with pytest.raises(AthenaTransportError) as ei:
        resources.get_by_id(config, "workspaces", 1, Workspace)

    assert "name resolution failed" in str(ei.value)
    assert f"GET {BASE}/workspaces/1/" in str(ei.value)


def test_malformed_json_is_a_decode_error_with_snippet(server, config):
    server.add("GET", f"{BASE}/workspaces/1/", FakeResponse(200, text="<html>gateway</html>"))

    with pytest.raises(AthenaDecodeError) as ei:
        resources.get_by_id(config, "workspaces", 1, Workspace)

    assert "<html>gateway</html>" in str(ei.value)


def test_unencodable_body_fails_before_any_request(server, config):
    url = f"{BASE}/templateTester/"
    server.add("POST", url, ok({"value": "x"}))

    with transport.new_session(config) as session:
        with pytest.raises(RequestConstructionError) as ei:
            transport.send(session, config, "POST", url, {"when": datetime.date(2024, 1, 1)})

    assert f"POST {url}" in str(ei.value)
    assert server.calls == []
