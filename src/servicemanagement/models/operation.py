# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Asynchronous operation status models.

Mutating Service Management calls return ``202 Accepted`` with an
``x-ms-request-id`` header; ``GET operations/<request-id>`` then reports::

    <Operation xmlns="http://schemas.microsoft.com/windowsazure">
      <ID>request-id</ID>
      <Status>InProgress|Succeeded|Failed</Status>
      <HttpStatusCode>200</HttpStatusCode>
      <Error><Code>...</Code><Message>...</Message></Error>
    </Operation>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..core._xml import child_text, find_child, parse_document


class OperationStatus(str, Enum):
    """Status values reported for an asynchronous operation."""

    IN_PROGRESS = "InProgress"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


@dataclass(frozen=True)
class ErrorDetail:
    """``<Error>`` element embedded in a failed operation."""

    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class Operation:
    """
    Snapshot of an asynchronous operation.

    ``status`` keeps the raw string reported by the service so that values outside
    :class:`OperationStatus` can be detected; use :attr:`known_status` for the enum.

    :param id: Operation (request) identifier.
    :type id: str
    :param status: Raw status string.
    :type status: str
    :param http_status_code: HTTP status of the underlying operation, when reported.
    :type http_status_code: int | None
    :param error: Error detail, populated when the operation failed.
    :type error: ErrorDetail | None
    """

    id: str
    status: str
    http_status_code: Optional[int] = None
    error: Optional[ErrorDetail] = None

    @property
    def known_status(self) -> Optional[OperationStatus]:
        try:
            return OperationStatus(self.status)
        except ValueError:
            return None

    @property
    def is_in_progress(self) -> bool:
        return self.status == OperationStatus.IN_PROGRESS.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "http_status_code": self.http_status_code,
            "error": self.error.to_dict() if self.error else None,
        }

    @classmethod
    def from_xml(cls, payload: Union[bytes, str]) -> "Operation":
        """
        Decode an ``<Operation>`` document.

        :raises ~servicemanagement.core.errors.XMLDecodeError: If the payload is not an Operation document.
        """
        root = parse_document(payload, "Operation")

        http_status_code: Optional[int] = None
        raw_code = child_text(root, "HttpStatusCode")
        if raw_code and raw_code.isdigit():
            http_status_code = int(raw_code)

        error: Optional[ErrorDetail] = None
        error_element = find_child(root, "Error")
        if error_element is not None:
            code = child_text(error_element, "Code", "")
            message = child_text(error_element, "Message", "")
            if code or message:
                error = ErrorDetail(code=code, message=message)

        return cls(
            id=child_text(root, "ID", ""),
            status=child_text(root, "Status", ""),
            http_status_code=http_status_code,
            error=error,
        )


__all__ = ["OperationStatus", "ErrorDetail", "Operation"]
