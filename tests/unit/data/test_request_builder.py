# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import uuid

import pytest

from servicemanagement.core.config import ManagementConfig
from servicemanagement.core.errors import MalformedURLError
from servicemanagement.core.telemetry import TelemetryConfig
from servicemanagement.data._management import RequestDescriptor, _ManagementClient

SUB = "00000000-1111-2222-3333-444444444444"


@pytest.fixture
def client():
    return _ManagementClient(ManagementConfig(subscription_id=SUB, certificate_path="unused.pem"))


def test_composes_url_verbatim(client):
    descriptor = client._build_request("services/storageservices", "GET")
    assert isinstance(descriptor, RequestDescriptor)
    assert descriptor.url == f"https://management.core.windows.net/{SUB}/services/storageservices"
    assert descriptor.path == "services/storageservices"
    assert descriptor.method == "GET"
    assert descriptor.body is None


def test_query_string_is_kept(client):
    descriptor = client._build_request("services/hostedservices/web?embed-detail=true", "GET")
    assert descriptor.url.endswith("/services/hostedservices/web?embed-detail=true")


def test_headers(client):
    descriptor = client._build_request("operations/abc", "get")
    assert descriptor.method == "GET"
    assert descriptor.headers["x-ms-version"] == "2014-05-01"
    assert descriptor.headers["Content-Type"] == "application/xml"
    uuid.UUID(descriptor.headers["x-ms-client-request-id"])


def test_each_request_gets_its_own_client_request_id(client):
    first = client._build_request("a", "GET")
    second = client._build_request("a", "GET")
    assert first.headers["x-ms-client-request-id"] != second.headers["x-ms-client-request-id"]


def test_string_body_is_encoded(client):
    descriptor = client._build_request("services/storageservices", "POST", "<Input>é</Input>")
    assert descriptor.body == "<Input>é</Input>".encode("utf-8")


def test_custom_host_and_version():
    config = ManagementConfig(
        subscription_id=SUB,
        certificate_path="unused.pem",
        management_host="management.core.usgovcloudapi.net",
        api_version="2015-04-01",
    )
    descriptor = _ManagementClient(config)._build_request("services/storageservices", "GET")
    assert descriptor.url.startswith(f"https://management.core.usgovcloudapi.net/{SUB}/")
    assert descriptor.headers["x-ms-version"] == "2015-04-01"


def test_hook_headers_do_not_override_protocol_headers():
    class Hook:
        def get_additional_headers(self):
            return {"x-ms-version": "1999-01-01", "x-trace": "t"}

    config = ManagementConfig(
        subscription_id=SUB,
        certificate_path="unused.pem",
        telemetry=TelemetryConfig(hooks=[Hook()]),
    )
    descriptor = _ManagementClient(config)._build_request("x", "GET")
    assert descriptor.headers["x-ms-version"] == "2014-05-01"
    assert descriptor.headers["x-trace"] == "t"


@pytest.mark.parametrize(
    "path",
    ["services/storage services", "services/\nstorageservices", "x\x00y"],
)
def test_rejects_whitespace_and_control_characters(client, path):
    with pytest.raises(MalformedURLError) as ei:
        client._build_request(path, "GET")
    assert ei.value.details["url"].endswith(path)


def test_rejects_bad_port():
    config = ManagementConfig(subscription_id=SUB, certificate_path="unused.pem", management_host="host:99999")
    with pytest.raises(MalformedURLError):
        _ManagementClient(config)._build_request("x", "GET")


def test_rejects_empty_host():
    config = ManagementConfig(subscription_id=SUB, certificate_path="unused.pem", management_host="")
    with pytest.raises(MalformedURLError):
        _ManagementClient(config)._build_request("x", "GET")


def test_building_does_not_touch_the_transport(client):
    client._build_request("services/storageservices", "GET")
    assert client._http is None


def test_padded_subscription_id_is_normalized():
    config = ManagementConfig(subscription_id=f" {SUB}\t", certificate_path="unused.pem")
    descriptor = _ManagementClient(config)._build_request("services/storageservices", "GET")
    assert descriptor.url == f"https://management.core.windows.net/{SUB}/services/storageservices"
