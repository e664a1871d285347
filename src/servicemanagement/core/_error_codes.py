# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}

# Validation subcodes
VALIDATION_PARAMETER_MISSING = "validation_parameter_missing"
VALIDATION_CONFIG_MISSING = "validation_config_missing"
VALIDATION_CONFIG_INVALID = "validation_config_invalid"

# Credential subcodes
CREDENTIAL_SUBSCRIPTION_MISSING = "credential_subscription_missing"
CREDENTIAL_FILE_MISSING = "credential_file_missing"
CREDENTIAL_MALFORMED = "credential_malformed"
CREDENTIAL_KEY_MISMATCH = "credential_key_mismatch"

# Response subcodes
RESPONSE_TRUNCATED = "response_truncated"
MALFORMED_ERROR_BODY = "malformed_error_body"
MISSING_REQUEST_ID = "missing_request_id"

# Operation subcodes
OPERATION_FAILED = "operation_failed"
OPERATION_CANCELLED = "operation_cancelled"
OPERATION_UNKNOWN_STATUS = "operation_unknown_status"

# Resource subcodes
BLOB_ENDPOINT_NOT_FOUND = "blob_endpoint_not_found"


def http_subcode(status_code: int) -> str:
    """Return the ``http_<status>`` subcode for a status code."""
    return f"http_{status_code}"
