# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Polling of asynchronous Service Management operations.

:class:`OperationPoller` is an explicit state machine::

    POLLING --Succeeded--> SUCCEEDED
    POLLING --Failed-----> FAILED
    POLLING --cancel-----> CANCELLED

Each :meth:`OperationPoller.poll` performs one status fetch. :meth:`~OperationPoller.wait`
and :meth:`~OperationPoller.wait_async` drive the machine at a fixed interval
until a terminal state is reached or the caller cancels.
"""

from __future__ import annotations

import asyncio
import threading
import time
from enum import Enum
from typing import Callable, Optional

from ..common.constants import DEFAULT_POLL_INTERVAL
from ..core.errors import (
    ManagementError,
    OperationCancelledError,
    OperationFailedError,
    UnknownOperationStatusError,
)
from ..models.operation import Operation, OperationStatus


class PollState(str, Enum):
    """State of an :class:`OperationPoller`."""

    POLLING = "Polling"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


class OperationPoller:
    """
    Drive one asynchronous operation to a terminal state.

    Fetch errors propagate unchanged and leave the poller in ``POLLING``, so a
    caller may call :meth:`poll` or :meth:`wait` again; the poller itself never retries.

    :param fetch: Callable returning the current :class:`Operation` for a request id.
    :type fetch: Callable[[str], Operation]
    :param request_id: The ``x-ms-request-id`` returned by the mutating call.
    :type request_id: str
    :param interval: Fixed delay in seconds between two fetches.
    :type interval: float
    :param on_status: Optional callback invoked with each fetched operation and its 1-based attempt number.
    :type on_status: Callable[[Operation, int], None] | None

    Example:
        Blocking wait with a cancellation token::

            cancel = threading.Event()
            poller = client.operations.poller(request_id)
            operation = poller.wait(cancel_event=cancel)

        Awaiting from a coroutine::

            operation = await client.operations.poller(request_id).wait_async()
    """

    def __init__(
        self,
        fetch: Callable[[str], Operation],
        request_id: str,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_status: Optional[Callable[[Operation, int], None]] = None,
    ) -> None:
        self._fetch = fetch
        self.request_id = request_id
        self.interval = interval
        self._on_status = on_status
        self._state = PollState.POLLING
        self._operation: Optional[Operation] = None
        self._error: Optional[ManagementError] = None
        self.fetch_count = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def operation(self) -> Optional[Operation]:
        """The most recently fetched operation, if any."""
        return self._operation

    def done(self) -> bool:
        return self._state is not PollState.POLLING

    def poll(self) -> Operation:
        """
        Fetch the operation status once and apply the transition rule.

        Does nothing but return the last operation once the poller is terminal.

        :raises ~servicemanagement.core.errors.UnknownOperationStatusError: If the service
            reports a status other than ``InProgress``, ``Succeeded`` or ``Failed``.
        """
        if self.done():
            if self._operation is None:
                raise self._error
            return self._operation

        operation = self._fetch(self.request_id)

        with self._lock:
            # Cancelled while the fetch was in flight: the terminal state stays.
            if self.done():
                return self._operation or operation
            self.fetch_count += 1
            attempt = self.fetch_count
            self._operation = operation
            status = operation.known_status
            if status is OperationStatus.SUCCEEDED:
                self._state = PollState.SUCCEEDED
            elif status is OperationStatus.FAILED:
                self._state = PollState.FAILED
                self._error = _failure(self.request_id, operation)
            elif status is None:
                self._state = PollState.FAILED
                self._error = UnknownOperationStatusError(
                    f"Operation {self.request_id} reported unknown status {operation.status!r}",
                    operation_id=self.request_id,
                    status=operation.status,
                )

        if self._on_status is not None:
            self._on_status(operation, attempt)
        if status is None:
            raise self._error
        return operation

    def result(self) -> Operation:
        """
        Return the succeeded operation, or raise the terminal error.

        :raises ~servicemanagement.core.errors.OperationFailedError: If the operation failed.
        :raises ~servicemanagement.core.errors.OperationCancelledError: If polling was cancelled.
        :raises RuntimeError: If the poller has not reached a terminal state.
        """
        if self._state is PollState.SUCCEEDED:
            return self._operation
        if self._error is not None:
            raise self._error
        raise RuntimeError(f"Operation {self.request_id} is still in progress")

    def cancel(self) -> None:
        """Stop tracking the operation. The remote operation itself is not cancelled."""
        with self._lock:
            if self.done():
                return
            self._state = PollState.CANCELLED
            self._error = OperationCancelledError(
                f"Polling of operation {self.request_id} was cancelled",
                operation_id=self.request_id,
            )

    def wait(self, cancel_event: Optional[threading.Event] = None) -> Operation:
        """
        Block until the operation is terminal.

        Fetches immediately, then sleeps :attr:`interval` between fetches while the
        status is ``InProgress``.

        :param cancel_event: Set from another thread to abandon the wait.
        :type cancel_event: threading.Event | None
        :return: The succeeded operation.
        :rtype: ~servicemanagement.models.operation.Operation
        :raises ~servicemanagement.core.errors.OperationFailedError: If the operation failed.
        :raises ~servicemanagement.core.errors.OperationCancelledError: If ``cancel_event`` was set.
        """
        while True:
            if cancel_event is not None and cancel_event.is_set():
                self.cancel()
            if self.done():
                return self.result()
            self.poll()
            if self.done():
                return self.result()
            if cancel_event is not None:
                cancel_event.wait(self.interval)
            else:
                time.sleep(self.interval)

    async def wait_async(self, cancel_event: Optional[asyncio.Event] = None) -> Operation:
        """
        Await the operation reaching a terminal state.

        Status fetches run in a worker thread so the event loop is not blocked.
        Cancelling the awaiting task marks the poller ``CANCELLED`` and re-raises
        :class:`asyncio.CancelledError`.

        :param cancel_event: Set to abandon the wait with :class:`OperationCancelledError`.
        :type cancel_event: asyncio.Event | None
        """
        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    self.cancel()
                if self.done():
                    return self.result()
                await asyncio.to_thread(self.poll)
                if self.done():
                    return self.result()
                if cancel_event is None:
                    await asyncio.sleep(self.interval)
                    continue
                try:
                    await asyncio.wait_for(cancel_event.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
        except asyncio.CancelledError:
            self.cancel()
            raise


def _failure(request_id: str, operation: Operation) -> OperationFailedError:
    if operation.error is not None:
        message = operation.error.message or f"Operation {request_id} failed"
        code = operation.error.code or None
    else:
        message = f"Operation {request_id} failed"
        code = None
    return OperationFailedError(
        message,
        operation_id=request_id,
        service_error_code=code,
        status_code=operation.http_status_code,
    )


__all__ = ["PollState", "OperationPoller"]
