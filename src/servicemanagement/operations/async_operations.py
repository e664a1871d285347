# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Asynchronous operation status namespace."""

from __future__ import annotations

import asyncio
import threading
from typing import Optional, TYPE_CHECKING

from ..data._poller import OperationPoller
from ..models.operation import Operation

if TYPE_CHECKING:
    from ..client import ManagementClient


class AsyncOperations:
    """
    Status and completion tracking of asynchronous operations.

    Accessed via ``client.operations``. Mutating calls return the
    ``x-ms-request-id`` of the operation they started; pass it here.

    Example::

        request_id = client.send_post("services/storageservices", body)
        operation = client.operations.wait(request_id)
        print(operation.status)  # "Succeeded"
    """

    def __init__(self, client: "ManagementClient") -> None:
        self._client = client

    def get(self, request_id: str) -> Operation:
        """
        Fetch the current status of an operation.

        :param request_id: Operation identifier.
        :type request_id: str
        :return: Current operation snapshot; never raises for a ``Failed`` status.
        :rtype: ~servicemanagement.models.operation.Operation
        """
        return self._client._get_management()._get_operation_status(request_id)

    def poller(self, request_id: str, *, interval: Optional[float] = None) -> OperationPoller:
        """
        Create a poller for an operation without fetching anything yet.

        :param request_id: Operation identifier.
        :type request_id: str
        :param interval: Delay between fetches; defaults to ``config.poll_interval``.
        :type interval: float or None
        :rtype: ~servicemanagement.data._poller.OperationPoller
        """
        management = self._client._get_management()
        return OperationPoller(
            management._get_operation_status,
            request_id,
            interval=self._client._config.poll_interval if interval is None else interval,
            on_status=management._record_operation_status,
        )

    def wait(
        self,
        request_id: str,
        *,
        interval: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Operation:
        """
        Block until the operation succeeds.

        :raises ~servicemanagement.core.errors.OperationFailedError: If the operation failed.
        :raises ~servicemanagement.core.errors.OperationCancelledError: If ``cancel_event`` was set.
        :raises ~servicemanagement.core.errors.UnknownOperationStatusError: On an unrecognised status.
        """
        return self.poller(request_id, interval=interval).wait(cancel_event=cancel_event)

    async def wait_async(
        self,
        request_id: str,
        *,
        interval: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Operation:
        """Awaitable form of :meth:`wait`."""
        return await self.poller(request_id, interval=interval).wait_async(cancel_event=cancel_event)
