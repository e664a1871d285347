# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Service Management SDK.

This module contains the foundational components including certificate
loading, configuration, the HTTP transport, telemetry, and error handling.
"""

from .config import ManagementConfig
from .errors import (
    ManagementError,
    ValidationError,
    CredentialLoadError,
    MalformedURLError,
    TransportError,
    TruncatedResponseError,
    MalformedErrorBodyError,
    AzureServiceError,
    MissingRequestIdError,
    OperationFailedError,
    OperationCancelledError,
    UnknownOperationStatusError,
    XMLDecodeError,
    EndpointNotFoundError,
)
from .telemetry import TelemetryConfig

__all__ = [
    "ManagementConfig",
    "TelemetryConfig",
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
