# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from servicemanagement.core.errors import XMLDecodeError
from servicemanagement.models.operation import ErrorDetail, Operation, OperationStatus


class TestOperationFromXml:
    def test_in_progress(self, operation_xml):
        operation = Operation.from_xml(operation_xml("InProgress", "abc"))
        assert operation.id == "abc"
        assert operation.status == "InProgress"
        assert operation.known_status is OperationStatus.IN_PROGRESS
        assert operation.is_in_progress
        assert operation.http_status_code == 200
        assert operation.error is None

    def test_failed_with_error(self, operation_xml):
        operation = Operation.from_xml(
            operation_xml("Failed", code="StorageAccountAlreadyExists", message="already exists", http_status="409")
        )
        assert operation.known_status is OperationStatus.FAILED
        assert operation.http_status_code == 409
        assert operation.error == ErrorDetail(code="StorageAccountAlreadyExists", message="already exists")

    def test_empty_error_element_is_ignored(self, operation_xml):
        operation = Operation.from_xml(operation_xml("Succeeded", code="", message=""))
        assert operation.error is None

    def test_unknown_status_is_kept(self, operation_xml):
        operation = Operation.from_xml(operation_xml("Paused"))
        assert operation.status == "Paused"
        assert operation.known_status is None
        assert not operation.is_in_progress

    def test_non_numeric_http_status(self, operation_xml):
        assert Operation.from_xml(operation_xml("InProgress", http_status="")).http_status_code is None
        assert Operation.from_xml(operation_xml("InProgress", http_status="OK")).http_status_code is None

    def test_wrong_root(self):
        with pytest.raises(XMLDecodeError):
            Operation.from_xml(b"<Error><Code>X</Code></Error>")

    def test_to_dict(self, operation_xml):
        d = Operation.from_xml(operation_xml("Failed", "op", code="X", message="Y", http_status="400")).to_dict()
        assert d == {
            "id": "op",
            "status": "Failed",
            "http_status_code": 400,
            "error": {"code": "X", "message": "Y"},
        }


def test_status_enum_is_string_valued():
    assert OperationStatus("Succeeded") is OperationStatus.SUCCEEDED
    assert OperationStatus.SUCCEEDED == "Succeeded"
