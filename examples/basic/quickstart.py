# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Service Management SDK quickstart.

Lists the classic storage accounts of a subscription, optionally creates one
and prints its blob endpoint.

Prerequisites:
- A management certificate uploaded to the subscription
- A PEM file holding that certificate and its unencrypted private key

Usage:
    AZURE_SUBSCRIPTION_ID=<id> AZURE_MANAGEMENT_CERTIFICATE=mgmt.pem python examples/basic/quickstart.py
"""

import dataclasses
import logging
import sys

from servicemanagement import ManagementClient, ManagementConfig, TelemetryConfig
from servicemanagement.core.errors import AzureServiceError, ManagementError, OperationFailedError


def log_call(call: str) -> None:
    print({"call": call})


def main() -> int:
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    try:
        config = ManagementConfig.from_env()
    except ManagementError as e:
        print(f"Configuration error: {e}")
        return 2

    # Surface each request and its status in the console
    config = dataclasses.replace(config, telemetry=TelemetryConfig(enable_logging=True, log_level="DEBUG"))

    with ManagementClient(config) as client:
        log_call("client.storage_services.list()")
        services = client.storage_services.list()
        for service in services:
            print({"name": service.service_name, "location": service.properties.location})

        name = input("Storage account to create (empty to skip): ").strip()
        if not name:
            return 0
        location = input("Location (e.g. West US): ").strip() or "West US"

        log_call(f"client.storage_services.check_name_availability({name!r})")
        availability = client.storage_services.check_name_availability(name)
        if not availability.result:
            print({"available": False, "reason": availability.reason})
            return 1

        try:
            log_call(f"client.storage_services.create({name!r}, {location!r})")
            service = client.storage_services.create(name, location, account_type="Standard_LRS")
        except OperationFailedError as e:
            print({"operation": e.operation_id, "code": e.service_error_code, "message": e.message})
            return 1
        except AzureServiceError as e:
            print({"status": e.status_code, "code": e.service_error_code, "message": e.message})
            return 1

        print({"created": service.service_name, "blob_endpoint": client.storage_services.get_blob_endpoint(service)})
    return 0


if __name__ == "__main__":
    sys.exit(main())
