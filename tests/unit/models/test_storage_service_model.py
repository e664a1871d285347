# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest

from defusedxml import ElementTree

from servicemanagement.core.errors import XMLDecodeError
from servicemanagement.models.storage_service import (
    AvailabilityResponse,
    CreateStorageServiceInput,
    StorageService,
    StorageServiceList,
    StorageServiceProperties,
)

NS = "{http://schemas.microsoft.com/windowsazure}"


def test_storage_service_from_xml(storage_service_xml):
    service = StorageService.from_xml(storage_service_xml("mystorage", "West US"))

    assert service.service_name == "mystorage"
    assert service.url.endswith("/services/storageservices/mystorage")
    props = service.properties
    assert props.location == "West US"
    assert props.label == "bXlzdG9yYWdl"
    assert props.decoded_label == "mystorage"
    assert props.status == "Created"
    assert props.endpoints[0] == "https://mystorage.blob.core.windows.net/"
    assert len(props.endpoints) == 3
    assert props.geo_replication_enabled is True
    assert props.geo_secondary_region == "East US"
    assert props.account_type == "Standard_GRS"
    assert props.affinity_group is None
    assert service.extended_properties == {"owner": "ops"}


def test_storage_service_list(storage_services_xml):
    services = StorageServiceList.from_xml(storage_services_xml([("a1", "West US"), ("b2", "North Europe")]))
    assert len(services) == 2
    assert [s.service_name for s in services] == ["a1", "b2"]
    assert services[1].properties.location == "North Europe"


def test_empty_storage_service_list():
    assert len(StorageServiceList.from_xml(b'<StorageServices xmlns="http://schemas.microsoft.com/windowsazure"/>')) == 0


def test_list_rejects_single_service_document(storage_service_xml):
    try:
        StorageServiceList.from_xml(storage_service_xml())
    except XMLDecodeError as exc:
        assert exc.details["element"] == "StorageServices"
    else:
        raise AssertionError("expected XMLDecodeError")


class TestStorageServiceProperties(unittest.TestCase):
    def test_label_that_is_not_base64(self):
        self.assertEqual(StorageServiceProperties(label="plain label!").decoded_label, "plain label!")

    def test_missing_properties_element(self):
        service = StorageService.from_xml(b"<StorageService><ServiceName>x</ServiceName></StorageService>")
        self.assertEqual(service.properties.endpoints, [])
        self.assertIsNone(service.properties.location)

    def test_to_dict_uses_decoded_label(self):
        d = StorageServiceProperties(label="bXlzdG9yYWdl", endpoints=["e"]).to_dict()
        self.assertEqual(d["label"], "mystorage")
        self.assertEqual(d["endpoints"], ["e"])


class TestCreateStorageServiceInput(unittest.TestCase):
    def test_label_is_base64_of_name(self):
        self.assertEqual(CreateStorageServiceInput("mystorage", "West US").label, "bXlzdG9yYWdl")

    def test_to_xml(self):
        payload = CreateStorageServiceInput(
            "mystorage", "West US", description="logs", account_type="Standard_LRS"
        ).to_xml()
        root = ElementTree.fromstring(payload)

        self.assertEqual(root.tag, f"{NS}CreateStorageServiceInput")
        self.assertEqual(
            [(child.tag.replace(NS, ""), child.text) for child in root],
            [
                ("ServiceName", "mystorage"),
                ("Label", "bXlzdG9yYWdl"),
                ("Description", "logs"),
                ("Location", "West US"),
                ("AccountType", "Standard_LRS"),
            ],
        )

    def test_optional_fields_are_omitted(self):
        root = ElementTree.fromstring(CreateStorageServiceInput("mystorage", "West US").to_xml())
        self.assertEqual([child.tag.replace(NS, "") for child in root], ["ServiceName", "Label", "Location"])


class TestAvailabilityResponse(unittest.TestCase):
    def test_available(self):
        response = AvailabilityResponse.from_xml(
            b'<AvailabilityResponse xmlns="http://schemas.microsoft.com/windowsazure"><Result>true</Result></AvailabilityResponse>'
        )
        self.assertTrue(response.result)
        self.assertIsNone(response.reason)

    def test_unavailable(self):
        response = AvailabilityResponse.from_xml(
            b"<AvailabilityResponse><Result>false</Result><Reason>AccountNameInvalid</Reason></AvailabilityResponse>"
        )
        self.assertFalse(response.result)
        self.assertEqual(response.reason, "AccountNameInvalid")
