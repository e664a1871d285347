# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Azure Service Management API.

These constants define the endpoint, protocol headers, XML namespace and
environment variable names shared across the SDK.
"""

# Management endpoint
DEFAULT_MANAGEMENT_HOST = "management.core.windows.net"
DEFAULT_API_VERSION = "2014-05-01"

DEFAULT_POLL_INTERVAL = 2.0
"""Fixed delay in seconds between two asynchronous operation status fetches."""

# Protocol headers
HEADER_API_VERSION = "x-ms-version"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_REQUEST_ID = "x-ms-request-id"
HEADER_CLIENT_REQUEST_ID = "x-ms-client-request-id"

CONTENT_TYPE_XML = "application/xml"

# Default namespace of every Service Management payload
AZURE_XMLNS = "http://schemas.microsoft.com/windowsazure"

# Resource paths, relative to https://<host>/<subscription-id>/
OPERATION_STATUS_PATH = "operations/{request_id}"
STORAGE_SERVICES_PATH = "services/storageservices"
STORAGE_SERVICE_PATH = "services/storageservices/{name}"
STORAGE_NAME_AVAILABILITY_PATH = "services/storageservices/operations/isavailable/{name}"

# Environment variables read by ManagementConfig.from_env
ENV_SUBSCRIPTION_ID = "AZURE_SUBSCRIPTION_ID"
ENV_CERTIFICATE_PATH = "AZURE_MANAGEMENT_CERTIFICATE"
ENV_MANAGEMENT_HOST = "AZURE_MANAGEMENT_HOST"
ENV_API_VERSION = "AZURE_MANAGEMENT_API_VERSION"
ENV_POLL_INTERVAL = "AZURE_MANAGEMENT_POLL_INTERVAL"
ENV_HTTP_TIMEOUT = "AZURE_MANAGEMENT_TIMEOUT"

# OpenTelemetry semantic convention attribute names
OTEL_ATTR_HTTP_METHOD = "http.request.method"
OTEL_ATTR_HTTP_URL = "url.full"
OTEL_ATTR_HTTP_STATUS_CODE = "http.response.status_code"
OTEL_ATTR_OPERATION = "azure.management.operation"
OTEL_ATTR_RESOURCE = "azure.management.resource"
OTEL_ATTR_CLIENT_REQUEST_ID = "azure.management.client_request_id"
OTEL_ATTR_SERVICE_REQUEST_ID = "azure.management.service_request_id"
