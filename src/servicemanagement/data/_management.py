# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Low-level Service Management client: request construction, sending, and
response/error classification.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Union
from urllib.parse import urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from ..common.constants import (
    CONTENT_TYPE_XML,
    HEADER_API_VERSION,
    HEADER_CLIENT_REQUEST_ID,
    HEADER_CONTENT_TYPE,
    HEADER_REQUEST_ID,
    OPERATION_STATUS_PATH,
)
from ..core._error_codes import TRANSIENT_STATUS_CODES, VALIDATION_PARAMETER_MISSING
from ..core._http import _HttpClient, build_transport
from ..core._xml import body_excerpt, child_text, parse_document
from ..core.config import ManagementConfig
from ..core.errors import (
    AzureServiceError,
    MalformedErrorBodyError,
    MalformedURLError,
    MissingRequestIdError,
    TruncatedResponseError,
    ValidationError,
    XMLDecodeError,
)
from ..core.telemetry import create_telemetry_manager
from ..models.operation import Operation


@dataclass(frozen=True)
class RequestDescriptor:
    """A fully resolved management request. Built per call and never shared."""

    method: str
    path: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


@dataclass(frozen=True)
class ManagementResponse:
    """Status, headers and fully read body of one management response."""

    status_code: int
    headers: CaseInsensitiveDict
    body: bytes = b""

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def request_id(self) -> Optional[str]:
        return self.headers.get(HEADER_REQUEST_ID) or None


class _ManagementClient:
    """Service Management REST client: request building, the response pipeline and operation status."""

    def __init__(
        self,
        config: ManagementConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.base_url = f"https://{config.management_host}/{config.subscription_id}/"
        self._session = session
        self._http: Optional[_HttpClient] = None
        self._http_lock = threading.Lock()
        self._telemetry = create_telemetry_manager(config.telemetry)

    # ----------------------------- transport ------------------------------
    def _get_transport(self) -> _HttpClient:
        """Build the certificate-bearing transport on first use."""
        if self._http is None:
            with self._http_lock:
                if self._http is None:
                    self._http = build_transport(
                        self.config.subscription_id,
                        self.config.certificate_path,
                        timeout=self.config.http_timeout,
                        session=self._session,
                    )
        return self._http

    def close(self) -> None:
        # The session belongs to the caller; only drop the reference.
        self._http = None
        self._session = None

    # ------------------------------ requests ------------------------------
    def _build_request(
        self,
        relative_path: str,
        method: str,
        body: Union[bytes, str, None] = None,
    ) -> RequestDescriptor:
        """Compose ``https://<host>/<subscription>/<relative_path>`` with the management headers.

        The relative path is appended verbatim. Raises :class:`MalformedURLError` when the
        composed URL does not parse as an absolute https URL.
        """
        url = self.base_url + relative_path
        _validate_url(url)

        headers: Dict[str, str] = {}
        headers.update(self._telemetry.get_additional_headers())
        headers[HEADER_API_VERSION] = self.config.api_version
        headers[HEADER_CONTENT_TYPE] = CONTENT_TYPE_XML
        headers[HEADER_CLIENT_REQUEST_ID] = str(uuid.uuid4())

        if isinstance(body, str):
            body = body.encode("utf-8")
        return RequestDescriptor(method=method.upper(), path=relative_path, url=url, headers=headers, body=body)

    def _execute(
        self,
        descriptor: RequestDescriptor,
        *,
        operation: str = "request",
        resource_name: Optional[str] = None,
    ) -> ManagementResponse:
        """Send a request and classify the response.

        Returns the response for status codes up to 299. Larger status codes raise
        :class:`AzureServiceError` decoded from the ``<Error>`` envelope, or
        :class:`MalformedErrorBodyError` when the body is not such an envelope.
        """
        transport = self._get_transport()
        client_request_id = descriptor.headers.get(HEADER_CLIENT_REQUEST_ID) or str(uuid.uuid4())

        with self._telemetry.trace_request(
            operation,
            descriptor.method,
            descriptor.url,
            client_request_id,
            resource_name=resource_name,
        ) as ctx:
            kwargs = {"headers": dict(descriptor.headers)}
            if descriptor.body is not None:
                kwargs["data"] = descriptor.body
            r = transport._request(descriptor.method, descriptor.url, **kwargs)

            response = ManagementResponse(
                status_code=r.status_code,
                headers=CaseInsensitiveDict(r.headers or {}),
                body=r.content or b"",
            )
            self._telemetry.record_response(
                ctx,
                response.status_code,
                service_request_id=response.request_id,
                response_size=response.content_length,
            )
            _check_complete(response)
            self._raise_for_status(response)
            return response

    def _raise_for_status(self, response: ManagementResponse) -> None:
        status = response.status_code
        if status <= 299:
            return
        try:
            envelope = parse_document(response.body, "Error")
        except XMLDecodeError as exc:
            raise MalformedErrorBodyError(
                f"HTTP {status} response body is not an Azure error envelope",
                status_code=status,
                body_excerpt=body_excerpt(response.body),
            ) from exc
        code = child_text(envelope, "Code")
        if code is None:
            raise MalformedErrorBodyError(
                f"HTTP {status} error envelope has no <Code> element",
                status_code=status,
                body_excerpt=body_excerpt(response.body),
            )
        raise AzureServiceError(
            child_text(envelope, "Message", ""),
            status,
            service_error_code=code,
            request_id=response.request_id,
            is_transient=status in TRANSIENT_STATUS_CODES,
        )

    # -------------------------- convenience calls --------------------------
    def _send_get(self, path: str, *, operation: str = "get", resource_name: Optional[str] = None) -> bytes:
        """GET ``path`` and return the response body."""
        descriptor = self._build_request(path, "GET")
        return self._execute(descriptor, operation=operation, resource_name=resource_name).body

    def _send_async(
        self,
        method: str,
        path: str,
        body: Union[bytes, str, None] = None,
        *,
        operation: str = "request",
        resource_name: Optional[str] = None,
    ) -> str:
        """Send a mutating request and return the ``x-ms-request-id`` identifying its operation."""
        descriptor = self._build_request(path, method, body)
        response = self._execute(descriptor, operation=operation, resource_name=resource_name)
        request_id = response.request_id
        if not request_id:
            raise MissingRequestIdError(
                f"{descriptor.method} {path} succeeded without an {HEADER_REQUEST_ID} header",
                status_code=response.status_code,
            )
        return request_id

    def _send_post(self, path: str, body: Union[bytes, str, None], **kwargs) -> str:
        return self._send_async("POST", path, body, **kwargs)

    def _send_put(self, path: str, body: Union[bytes, str, None], **kwargs) -> str:
        return self._send_async("PUT", path, body, **kwargs)

    def _send_delete(self, path: str, **kwargs) -> str:
        return self._send_async("DELETE", path, **kwargs)

    # -------------------------- operation status ---------------------------
    def _get_operation_status(self, request_id: str) -> Operation:
        """Fetch and decode ``operations/<request_id>``."""
        if not request_id:
            raise ValidationError("Parameter request_id is not specified.", subcode=VALIDATION_PARAMETER_MISSING)
        body = self._send_get(
            OPERATION_STATUS_PATH.format(request_id=request_id),
            operation="operations.get",
            resource_name=request_id,
        )
        return Operation.from_xml(body)

    def _record_operation_status(self, operation: Operation, attempt: int) -> None:
        self._telemetry.record_operation_status(operation.id, operation.status, attempt)


def _validate_url(url: str) -> None:
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise MalformedURLError(f"Request URL contains whitespace or control characters: {url!r}", url=url)
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError as exc:
        raise MalformedURLError(f"Cannot parse request URL {url!r}: {exc}", url=url) from exc
    if parts.scheme != "https" or not parts.hostname:
        raise MalformedURLError(f"Request URL must be an absolute https URL: {url!r}", url=url)


def _check_complete(response: ManagementResponse) -> None:
    """Raise when fewer body bytes arrived than ``Content-Length`` declared."""
    declared = response.headers.get("Content-Length")
    if not declared or response.headers.get("Content-Encoding"):
        return
    try:
        expected = int(declared)
    except ValueError:
        return
    if response.content_length < expected:
        raise TruncatedResponseError(
            f"Response body has {response.content_length} of {expected} declared bytes",
            status_code=response.status_code,
            expected_length=expected,
            received_length=response.content_length,
        )


__all__ = ["RequestDescriptor", "ManagementResponse"]
