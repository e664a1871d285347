# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured error hierarchy for the Service Management SDK.

Every failure raised by the SDK derives from :class:`ManagementError`, so
callers can catch the base class or pattern-match on a specific subclass
without inspecting message strings.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

from . import _error_codes as ec


class ManagementError(Exception):
    """Base structured error for the Service Management SDK."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(ManagementError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class CredentialLoadError(ManagementError):
    """The management certificate could not be loaded or does not match its key."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, path: Optional[str] = None):
        details = {"path": path} if path is not None else None
        super().__init__(message, code="credential_error", subcode=subcode, details=details, source="client")


class MalformedURLError(ManagementError):
    def __init__(self, message: str, *, url: str):
        super().__init__(message, code="url_error", details={"url": url}, source="client")


class TransportError(ManagementError):
    """Network-level failure (DNS, refused connection, TLS handshake, timeout)."""

    def __init__(self, message: str, *, url: Optional[str] = None):
        details = {"url": url} if url is not None else None
        super().__init__(message, code="transport_error", details=details, source="client", is_transient=True)


class TruncatedResponseError(ManagementError):
    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        expected_length: Optional[int] = None,
        received_length: Optional[int] = None,
    ):
        d: Dict[str, Any] = {}
        if expected_length is not None:
            d["expected_length"] = expected_length
        if received_length is not None:
            d["received_length"] = received_length
        super().__init__(
            message,
            code="response_error",
            subcode=ec.RESPONSE_TRUNCATED,
            status_code=status_code,
            details=d,
            source="server",
            is_transient=True,
        )


class MalformedErrorBodyError(ManagementError):
    """A failure response whose body is not a well-formed ``<Error>`` envelope."""

    def __init__(self, message: str, *, status_code: int, body_excerpt: Optional[str] = None):
        d = {"body_excerpt": body_excerpt} if body_excerpt is not None else None
        super().__init__(
            message,
            code="response_error",
            subcode=ec.MALFORMED_ERROR_BODY,
            status_code=status_code,
            details=d,
            source="server",
        )


class AzureServiceError(ManagementError):
    """Error decoded from an ``<Error><Code/><Message/></Error>`` response."""

    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        service_error_code: str,
        request_id: Optional[str] = None,
        is_transient: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        d["service_error_code"] = service_error_code
        if request_id is not None:
            d["request_id"] = request_id
        super().__init__(
            message,
            code="http_error",
            subcode=ec.http_subcode(status_code),
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient,
        )
        self.service_error_code = service_error_code
        self.request_id = request_id


class MissingRequestIdError(ManagementError):
    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(
            message,
            code="response_error",
            subcode=ec.MISSING_REQUEST_ID,
            status_code=status_code,
            source="server",
        )


class OperationFailedError(ManagementError):
    """An asynchronous operation reached the ``Failed`` state."""

    def __init__(
        self,
        message: str,
        *,
        operation_id: str,
        service_error_code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        d: Dict[str, Any] = {"operation_id": operation_id}
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        super().__init__(
            message,
            code="operation_error",
            subcode=ec.OPERATION_FAILED,
            status_code=status_code,
            details=d,
            source="server",
        )
        self.operation_id = operation_id
        self.service_error_code = service_error_code


class OperationCancelledError(ManagementError):
    """Polling was abandoned at the caller's request; the remote operation may still run."""

    def __init__(self, message: str, *, operation_id: str):
        super().__init__(
            message,
            code="operation_error",
            subcode=ec.OPERATION_CANCELLED,
            details={"operation_id": operation_id},
            source="client",
        )
        self.operation_id = operation_id


class UnknownOperationStatusError(ManagementError):
    def __init__(self, message: str, *, operation_id: str, status: str):
        super().__init__(
            message,
            code="operation_error",
            subcode=ec.OPERATION_UNKNOWN_STATUS,
            details={"operation_id": operation_id, "status": status},
            source="server",
        )
        self.operation_id = operation_id
        self.status = status


class XMLDecodeError(ManagementError):
    def __init__(self, message: str, *, element: Optional[str] = None, body_excerpt: Optional[str] = None):
        d: Dict[str, Any] = {}
        if element is not None:
            d["element"] = element
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        super().__init__(message, code="decode_error", details=d, source="server")


class EndpointNotFoundError(ManagementError):
    def __init__(self, message: str, *, service_name: Optional[str] = None):
        d = {"service_name": service_name} if service_name is not None else None
        super().__init__(
            message,
            code="resource_error",
            subcode=ec.BLOB_ENDPOINT_NOT_FOUND,
            details=d,
            source="client",
        )


__all__ = [
    "ManagementError",
    "ValidationError",
    "CredentialLoadError",
    "MalformedURLError",
    "TransportError",
    "TruncatedResponseError",
    "MalformedErrorBodyError",
    "AzureServiceError",
    "MissingRequestIdError",
    "OperationFailedError",
    "OperationCancelledError",
    "UnknownOperationStatusError",
    "XMLDecodeError",
    "EndpointNotFoundError",
]
