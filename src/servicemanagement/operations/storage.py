# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Classic storage account operations namespace."""

from __future__ import annotations

import threading
from typing import Optional, TYPE_CHECKING

from ..common.constants import (
    STORAGE_NAME_AVAILABILITY_PATH,
    STORAGE_SERVICE_PATH,
    STORAGE_SERVICES_PATH,
)
from ..core._error_codes import VALIDATION_PARAMETER_MISSING
from ..core.errors import EndpointNotFoundError, ValidationError
from ..models.storage_service import (
    AvailabilityResponse,
    CreateStorageServiceInput,
    StorageService,
    StorageServiceList,
)

if TYPE_CHECKING:
    from ..client import ManagementClient


_BLOB_ENDPOINT_MARKER = ".blob.core"


def _require(value: Optional[str], name: str) -> None:
    if not value:
        raise ValidationError(f"Parameter {name} is not specified.", subcode=VALIDATION_PARAMETER_MISSING)


class StorageServiceOperations:
    """
    Classic storage account operations.

    Accessed via ``client.storage_services``.

    Example::

        with ManagementClient(ManagementConfig.from_env()) as client:
            if client.storage_services.check_name_availability("mystorage").result:
                service = client.storage_services.create("mystorage", "West US")
                print(client.storage_services.get_blob_endpoint(service))
    """

    def __init__(self, client: "ManagementClient") -> None:
        self._client = client

    def list(self) -> StorageServiceList:
        """
        List the storage services of the subscription.

        :rtype: ~servicemanagement.models.storage_service.StorageServiceList
        :raises ~servicemanagement.core.errors.XMLDecodeError: If the response is not a StorageServices document.
        """
        body = self._client._get_management()._send_get(STORAGE_SERVICES_PATH, operation="storage_services.list")
        return StorageServiceList.from_xml(body)

    def get(self, name: str) -> StorageService:
        """
        Get a storage service by name.

        :param name: Storage service name.
        :type name: str
        :rtype: ~servicemanagement.models.storage_service.StorageService
        :raises ~servicemanagement.core.errors.ValidationError: If ``name`` is empty.
        :raises ~servicemanagement.core.errors.AzureServiceError: If the service does not exist (``ResourceNotFound``).
        """
        _require(name, "name")
        body = self._client._get_management()._send_get(
            STORAGE_SERVICE_PATH.format(name=name),
            operation="storage_services.get",
            resource_name=name,
        )
        return StorageService.from_xml(body)

    def find_by_location(self, location: str) -> Optional[StorageService]:
        """
        Return the first storage service in ``location``, or None.

        :param location: Region display name, e.g. ``"West US"``.
        :type location: str
        """
        _require(location, "location")
        for service in self.list():
            if service.properties.location == location:
                return service
        return None

    def create(
        self,
        name: str,
        location: str,
        *,
        description: Optional[str] = None,
        account_type: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> StorageService:
        """
        Create a storage service and wait for the creation to complete.

        Blocks for the whole asynchronous operation (typically tens of seconds).

        :param name: Storage service name (3-24 lowercase letters and digits).
        :type name: str
        :param location: Region display name.
        :type location: str
        :param description: Optional description.
        :type description: str or None
        :param account_type: Optional replication type, e.g. ``"Standard_LRS"``.
        :type account_type: str or None
        :param cancel_event: Set from another thread to stop waiting.
        :type cancel_event: threading.Event or None
        :return: The created storage service.
        :rtype: ~servicemanagement.models.storage_service.StorageService
        :raises ~servicemanagement.core.errors.OperationFailedError: If creation failed.
        :raises ~servicemanagement.core.errors.OperationCancelledError: If ``cancel_event`` was set.
        """
        _require(name, "name")
        _require(location, "location")
        payload = CreateStorageServiceInput(
            service_name=name,
            location=location,
            description=description,
            account_type=account_type,
        )
        request_id = self._client._get_management()._send_post(
            STORAGE_SERVICES_PATH,
            payload.to_xml(),
            operation="storage_services.create",
            resource_name=name,
        )
        self._client.operations.wait(request_id, cancel_event=cancel_event)
        return self.get(payload.service_name)

    def get_blob_endpoint(self, service: StorageService) -> str:
        """
        Return the blob endpoint URL of a storage service.

        :raises ~servicemanagement.core.errors.EndpointNotFoundError: If no endpoint contains ``.blob.core``.
        """
        for endpoint in service.properties.endpoints:
            if _BLOB_ENDPOINT_MARKER in endpoint:
                return endpoint
        raise EndpointNotFoundError(
            f"Blob endpoint was not found in storage service {service.service_name}",
            service_name=service.service_name,
        )

    def check_name_availability(self, name: str) -> AvailabilityResponse:
        """
        Check whether a storage account name is available.

        :param name: Candidate storage service name.
        :type name: str
        :return: ``result`` is True when the name can be used; ``reason`` explains why not.
        :rtype: ~servicemanagement.models.storage_service.AvailabilityResponse
        """
        _require(name, "name")
        body = self._client._get_management()._send_get(
            STORAGE_NAME_AVAILABILITY_PATH.format(name=name),
            operation="storage_services.check_name_availability",
            resource_name=name,
        )
        return AvailabilityResponse.from_xml(body)
