# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Storage service (classic storage account) models.

Provides typed representations of the ``StorageService`` payloads returned by
``services/storageservices`` and the ``CreateStorageServiceInput`` request body.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union
from xml.etree.ElementTree import Element

from ..common.constants import AZURE_XMLNS
from ..core._xml import (
    build_document,
    child_bool,
    child_text,
    child_texts,
    find_child,
    find_children,
    parse_document,
)


def _decode_label(label: Optional[str]) -> Optional[str]:
    if not label:
        return label
    try:
        return base64.b64decode(label, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return label


@dataclass
class StorageServiceProperties:
    """
    Properties of a storage service.

    :param location: Region the account lives in (e.g. ``"West US"``); empty when an affinity group is used.
    :type location: str | None
    :param label: Base64-encoded label as returned by the service.
    :type label: str | None
    :param status: Provisioning status (``Creating``, ``Created``, ``Deleting``, ...).
    :type status: str | None
    :param endpoints: Blob, queue, table and file endpoint URLs.
    :type endpoints: list[str]
    """

    description: Optional[str] = None
    affinity_group: Optional[str] = None
    location: Optional[str] = None
    label: Optional[str] = None
    status: Optional[str] = None
    endpoints: List[str] = field(default_factory=list)
    geo_replication_enabled: Optional[bool] = None
    geo_primary_region: Optional[str] = None
    status_of_primary: Optional[str] = None
    geo_secondary_region: Optional[str] = None
    status_of_secondary: Optional[str] = None
    creation_time: Optional[str] = None
    account_type: Optional[str] = None

    @property
    def decoded_label(self) -> Optional[str]:
        """The label decoded from base64, or the raw label if it is not valid base64."""
        return _decode_label(self.label)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "affinity_group": self.affinity_group,
            "location": self.location,
            "label": self.decoded_label,
            "status": self.status,
            "endpoints": list(self.endpoints),
            "geo_replication_enabled": self.geo_replication_enabled,
            "geo_primary_region": self.geo_primary_region,
            "status_of_primary": self.status_of_primary,
            "geo_secondary_region": self.geo_secondary_region,
            "status_of_secondary": self.status_of_secondary,
            "creation_time": self.creation_time,
            "account_type": self.account_type,
        }

    @classmethod
    def from_element(cls, element: Optional[Element]) -> "StorageServiceProperties":
        if element is None:
            return cls()
        return cls(
            description=child_text(element, "Description"),
            affinity_group=child_text(element, "AffinityGroup"),
            location=child_text(element, "Location"),
            label=child_text(element, "Label"),
            status=child_text(element, "Status"),
            endpoints=child_texts(element, "Endpoints", "Endpoint"),
            geo_replication_enabled=child_bool(element, "GeoReplicationEnabled"),
            geo_primary_region=child_text(element, "GeoPrimaryRegion"),
            status_of_primary=child_text(element, "StatusOfPrimary"),
            geo_secondary_region=child_text(element, "GeoSecondaryRegion"),
            status_of_secondary=child_text(element, "StatusOfSecondary"),
            creation_time=child_text(element, "CreationTime"),
            account_type=child_text(element, "AccountType"),
        )


@dataclass
class StorageService:
    """
    A classic storage account.

    Example:
        Inspect an account::

            service = client.storage_services.get("mystorage")
            print(service.service_name, service.properties.location)
            for endpoint in service.properties.endpoints:
                print(endpoint)
    """

    service_name: str
    url: Optional[str] = None
    properties: StorageServiceProperties = field(default_factory=StorageServiceProperties)
    extended_properties: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_name": self.service_name,
            "url": self.url,
            "properties": self.properties.to_dict(),
            "extended_properties": dict(self.extended_properties),
        }

    @classmethod
    def from_element(cls, element: Element) -> "StorageService":
        extended: Dict[str, str] = {}
        container = find_child(element, "ExtendedProperties")
        if container is not None:
            for prop in find_children(container, "ExtendedProperty"):
                name = child_text(prop, "Name")
                if name:
                    extended[name] = child_text(prop, "Value", "")
        return cls(
            service_name=child_text(element, "ServiceName", ""),
            url=child_text(element, "Url"),
            properties=StorageServiceProperties.from_element(find_child(element, "StorageServiceProperties")),
            extended_properties=extended,
        )

    @classmethod
    def from_xml(cls, payload: Union[bytes, str]) -> "StorageService":
        """
        Decode a ``<StorageService>`` document.

        :raises ~servicemanagement.core.errors.XMLDecodeError: If the payload is not a StorageService document.
        """
        return cls.from_element(parse_document(payload, "StorageService"))


@dataclass
class StorageServiceList:
    """
    The storage services of a subscription.

    Iterable and sized, so it can be used like a list of :class:`StorageService`.
    """

    storage_services: List[StorageService] = field(default_factory=list)

    def __iter__(self) -> Iterator[StorageService]:
        return iter(self.storage_services)

    def __len__(self) -> int:
        return len(self.storage_services)

    def __getitem__(self, index: int) -> StorageService:
        return self.storage_services[index]

    def to_dict(self) -> Dict[str, Any]:
        return {"storage_services": [s.to_dict() for s in self.storage_services]}

    @classmethod
    def from_xml(cls, payload: Union[bytes, str]) -> "StorageServiceList":
        root = parse_document(payload, "StorageServices")
        return cls([StorageService.from_element(e) for e in find_children(root, "StorageService")])


@dataclass(frozen=True)
class AvailabilityResponse:
    """Result of a storage account name availability check."""

    result: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"result": self.result, "reason": self.reason}

    @classmethod
    def from_xml(cls, payload: Union[bytes, str]) -> "AvailabilityResponse":
        root = parse_document(payload, "AvailabilityResponse")
        return cls(result=bool(child_bool(root, "Result")), reason=child_text(root, "Reason") or None)


@dataclass(frozen=True)
class CreateStorageServiceInput:
    """
    Request body of the Create Storage Account operation.

    The label is the base64 encoding of the service name.
    """

    service_name: str
    location: str
    description: Optional[str] = None
    account_type: Optional[str] = None

    @property
    def label(self) -> str:
        return base64.b64encode(self.service_name.encode("utf-8")).decode("ascii")

    def to_xml(self) -> bytes:
        return build_document(
            "CreateStorageServiceInput",
            [
                ("ServiceName", self.service_name),
                ("Label", self.label),
                ("Description", self.description),
                ("Location", self.location),
                ("AccountType", self.account_type),
            ],
            namespace=AZURE_XMLNS,
        )


__all__ = [
    "StorageServiceProperties",
    "StorageService",
    "StorageServiceList",
    "AvailabilityResponse",
    "CreateStorageServiceInput",
]
