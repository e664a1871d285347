# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Command-line entry point for the Service Management SDK.

Reads the subscription and certificate from the environment (see
:meth:`~servicemanagement.core.config.ManagementConfig.from_env`), runs one
command and prints its result as JSON. Failures print ``Error: <message>``
to stderr and exit with a code identifying the error kind.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import os
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .client import ManagementClient
from .common.constants import ENV_CERTIFICATE_PATH, ENV_SUBSCRIPTION_ID
from .core.config import ManagementConfig
from .core.errors import (
    AzureServiceError,
    CredentialLoadError,
    EndpointNotFoundError,
    MalformedErrorBodyError,
    MalformedURLError,
    ManagementError,
    MissingRequestIdError,
    OperationCancelledError,
    OperationFailedError,
    TransportError,
    TruncatedResponseError,
    UnknownOperationStatusError,
    ValidationError,
    XMLDecodeError,
)

EXIT_INTERRUPTED = 130

# Most specific classes first; every ManagementError subclass has its own code.
EXIT_CODES: List[Tuple[Type[ManagementError], int]] = [
    (ValidationError, 2),
    (CredentialLoadError, 3),
    (MalformedURLError, 4),
    (TransportError, 5),
    (TruncatedResponseError, 6),
    (MalformedErrorBodyError, 7),
    (AzureServiceError, 8),
    (MissingRequestIdError, 9),
    (OperationFailedError, 10),
    (OperationCancelledError, 11),
    (UnknownOperationStatusError, 12),
    (XMLDecodeError, 13),
    (EndpointNotFoundError, 14),
    (ManagementError, 1),
]


def exit_code_for(error: ManagementError) -> int:
    for error_type, code in EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return 1


def _print_json(value: Any) -> None:
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    print(json.dumps(value, indent=2, default=str))


def _storage_list(client: ManagementClient, args: argparse.Namespace) -> Any:
    return client.storage_services.list()


def _storage_show(client: ManagementClient, args: argparse.Namespace) -> Any:
    return client.storage_services.get(args.name)


def _storage_create(client: ManagementClient, args: argparse.Namespace) -> Any:
    return client.storage_services.create(
        args.name,
        args.location,
        description=args.description,
        account_type=args.account_type,
    )


def _storage_check_name(client: ManagementClient, args: argparse.Namespace) -> Any:
    return client.storage_services.check_name_availability(args.name)


def _storage_blob_endpoint(client: ManagementClient, args: argparse.Namespace) -> Any:
    service = client.storage_services.get(args.name)
    return {"service_name": service.service_name, "blob_endpoint": client.storage_services.get_blob_endpoint(service)}


def _operation_status(client: ManagementClient, args: argparse.Namespace) -> Any:
    return client.operations.get(args.request_id)


def _operation_wait(client: ManagementClient, args: argparse.Namespace) -> Any:
    return client.operations.wait(args.request_id, interval=args.interval)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="servicemanagement",
        description="Manage Azure classic resources through the Service Management API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  AZURE_SUBSCRIPTION_ID          Subscription identifier
  AZURE_MANAGEMENT_CERTIFICATE   PEM file with the management certificate and key

Examples:
  servicemanagement storage list
  servicemanagement storage create mystorage "West US"
  servicemanagement operation wait 2b8e2c3a6f1d4e5f8a9b0c1d2e3f4a5b
        """,
    )
    parser.add_argument("--subscription-id", help="Override AZURE_SUBSCRIPTION_ID")
    parser.add_argument("--certificate", help="Override AZURE_MANAGEMENT_CERTIFICATE")
    parser.add_argument("--host", help="Management endpoint host name")

    groups = parser.add_subparsers(dest="group", required=True)

    storage = groups.add_parser("storage", help="Classic storage accounts")
    storage_cmds = storage.add_subparsers(dest="command", required=True)
    storage_cmds.add_parser("list", help="List storage services").set_defaults(handler=_storage_list)

    show = storage_cmds.add_parser("show", help="Show one storage service")
    show.add_argument("name")
    show.set_defaults(handler=_storage_show)

    create = storage_cmds.add_parser("create", help="Create a storage service and wait for completion")
    create.add_argument("name")
    create.add_argument("location")
    create.add_argument("--description")
    create.add_argument("--account-type", help="e.g. Standard_LRS, Standard_GRS")
    create.set_defaults(handler=_storage_create)

    check = storage_cmds.add_parser("check-name", help="Check storage account name availability")
    check.add_argument("name")
    check.set_defaults(handler=_storage_check_name)

    blob = storage_cmds.add_parser("blob-endpoint", help="Print the blob endpoint of a storage service")
    blob.add_argument("name")
    blob.set_defaults(handler=_storage_blob_endpoint)

    operation = groups.add_parser("operation", help="Asynchronous operations")
    operation_cmds = operation.add_subparsers(dest="command", required=True)

    status = operation_cmds.add_parser("status", help="Show the current status of an operation")
    status.add_argument("request_id")
    status.set_defaults(handler=_operation_status)

    wait = operation_cmds.add_parser("wait", help="Wait until an operation completes")
    wait.add_argument("request_id")
    wait.add_argument("--interval", type=float, default=None, help="Seconds between status checks")
    wait.set_defaults(handler=_operation_wait)

    return parser


def _load_config(args: argparse.Namespace, environ: Optional[Dict[str, str]] = None) -> ManagementConfig:
    env = dict(os.environ if environ is None else environ)
    if args.subscription_id:
        env[ENV_SUBSCRIPTION_ID] = args.subscription_id
    if args.certificate:
        env[ENV_CERTIFICATE_PATH] = args.certificate
    config = ManagementConfig.from_env(env)
    if args.host:
        config = dataclasses.replace(config, management_host=args.host)
    return config


def main(
    argv: Optional[List[str]] = None,
    *,
    environ: Optional[Dict[str, str]] = None,
    client_factory: Callable[[ManagementConfig], ManagementClient] = ManagementClient,
) -> int:
    """Run one command and return the process exit code."""
    args = build_parser().parse_args(argv)
    try:
        config = _load_config(args, environ)
        with client_factory(config) as client:
            result = args.handler(client, args)
    except ManagementError as exc:
        print(f"Error: {exc.message or exc}", file=sys.stderr)
        if isinstance(exc, AzureServiceError):
            print(f"Code: {exc.service_error_code}", file=sys.stderr)
        return exit_code_for(exc)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED

    _print_json(result)
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
