# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Service Management SDK tests.

This module provides certificate material, XML payload builders, a fake
HTTP transport and configuration that can be used across all test modules.
"""

import datetime
from typing import List, Optional, Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from servicemanagement.core.config import ManagementConfig
from servicemanagement.data._management import _ManagementClient

SUBSCRIPTION_ID = "00000000-1111-2222-3333-444444444444"
AZURE_XMLNS = "http://schemas.microsoft.com/windowsazure"


# ------------------------------------------------------------------ certificates


def _self_signed(key, common_name="servicemanagement-test", days=30):
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=days))
        .sign(key, hashes.SHA256())
    )


def _key_pem(key, password: Optional[bytes] = None) -> bytes:
    encryption = (
        serialization.BestAvailableEncryption(password) if password else serialization.NoEncryption()
    )
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption,
    )


@pytest.fixture
def make_pem(tmp_path):
    """Factory writing a PEM file; returns ``(path, certificate)``.

    ``mismatched=True`` pairs the certificate with an unrelated key,
    ``password`` encrypts the key, ``include_key=False`` writes only the certificate.
    """

    def factory(name="mgmt.pem", *, mismatched=False, password=None, include_key=True, days=30):
        key = ec.generate_private_key(ec.SECP256R1())
        cert = _self_signed(key, days=days)
        pem_key = ec.generate_private_key(ec.SECP256R1()) if mismatched else key
        data = cert.public_bytes(serialization.Encoding.PEM)
        if include_key:
            data += _key_pem(pem_key, password)
        path = tmp_path / name
        path.write_bytes(data)
        return str(path), cert

    return factory


@pytest.fixture
def certificate_path(make_pem):
    path, _ = make_pem()
    return path


@pytest.fixture
def test_config(certificate_path):
    """Test configuration with safe defaults."""
    return ManagementConfig(
        subscription_id=SUBSCRIPTION_ID,
        certificate_path=certificate_path,
        poll_interval=0,
        http_timeout=5,
    )


# ----------------------------------------------------------------- XML payloads


def _operation_xml(status, request_id="req-1", *, code=None, message=None, http_status="200"):
    error = ""
    if code is not None or message is not None:
        error = f"<Error><Code>{code or ''}</Code><Message>{message or ''}</Message></Error>"
    return (
        f'<Operation xmlns="{AZURE_XMLNS}">'
        f"<ID>{request_id}</ID><Status>{status}</Status>"
        f"<HttpStatusCode>{http_status}</HttpStatusCode>{error}</Operation>"
    ).encode("utf-8")


def _error_xml(code, message):
    return f'<Error xmlns="{AZURE_XMLNS}"><Code>{code}</Code><Message>{message}</Message></Error>'.encode("utf-8")


def _storage_service_xml(name="mystorage", location="West US", endpoints=None, root=True):
    if endpoints is None:
        endpoints = [
            f"https://{name}.blob.core.windows.net/",
            f"https://{name}.queue.core.windows.net/",
            f"https://{name}.table.core.windows.net/",
        ]
    endpoint_xml = "".join(f"<Endpoint>{e}</Endpoint>" for e in endpoints)
    ns = f' xmlns="{AZURE_XMLNS}"' if root else ""
    return (
        f"<StorageService{ns}>"
        f"<Url>https://management.core.windows.net/{SUBSCRIPTION_ID}/services/storageservices/{name}</Url>"
        f"<ServiceName>{name}</ServiceName>"
        "<StorageServiceProperties>"
        "<Description>Test account</Description>"
        f"<Location>{location}</Location>"
        "<Label>bXlzdG9yYWdl</Label>"
        "<Status>Created</Status>"
        f"<Endpoints>{endpoint_xml}</Endpoints>"
        "<GeoReplicationEnabled>true</GeoReplicationEnabled>"
        "<GeoPrimaryRegion>West US</GeoPrimaryRegion>"
        "<StatusOfPrimary>Available</StatusOfPrimary>"
        "<GeoSecondaryRegion>East US</GeoSecondaryRegion>"
        "<StatusOfSecondary>Available</StatusOfSecondary>"
        "<CreationTime>2014-06-01T10:00:00Z</CreationTime>"
        "<AccountType>Standard_GRS</AccountType>"
        "</StorageServiceProperties>"
        "<ExtendedProperties><ExtendedProperty><Name>owner</Name><Value>ops</Value></ExtendedProperty></ExtendedProperties>"
        "</StorageService>"
    )


def _storage_services_xml(services: List[Tuple[str, str]]):
    inner = "".join(_storage_service_xml(name, location, root=False) for name, location in services)
    return f'<StorageServices xmlns="{AZURE_XMLNS}">{inner}</StorageServices>'.encode("utf-8")


@pytest.fixture
def operation_xml():
    return _operation_xml


@pytest.fixture
def error_xml():
    return _error_xml


@pytest.fixture
def storage_service_xml():
    return lambda *a, **kw: _storage_service_xml(*a, **kw).encode("utf-8")


@pytest.fixture
def storage_services_xml():
    return _storage_services_xml


# --------------------------------------------------------------- fake transport


class DummyResponse:
    def __init__(self, status_code, headers=None, content=b""):
        self.status_code = status_code
        self.headers = headers or {}
        self.content = content


class DummyHTTP:
    """Transport double returning queued ``(status, headers, body)`` tuples and recording calls."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if not self._responses:
            raise AssertionError("No more responses")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status, headers, body = item
        if isinstance(body, str):
            body = body.encode("utf-8")
        return DummyResponse(status, headers, body or b"")


@pytest.fixture
def management_factory(test_config):
    """Factory for an internal client whose transport replays ``responses``."""

    def factory(responses, config=None):
        client = _ManagementClient(config or test_config)
        client._http = DummyHTTP(responses)
        return client

    return factory
