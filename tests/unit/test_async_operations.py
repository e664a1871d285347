# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import asyncio
import unittest
from unittest.mock import MagicMock, patch

from servicemanagement import ManagementClient, ManagementConfig
from servicemanagement.core.errors import OperationFailedError
from servicemanagement.data._poller import OperationPoller, PollState
from servicemanagement.models.operation import ErrorDetail, Operation


def _op(status, error=None):
    return Operation(id="op-1", status=status, http_status_code=200, error=error)


class TestAsyncOperations(unittest.TestCase):
    def setUp(self):
        self.client = ManagementClient(
            ManagementConfig(subscription_id="sub", certificate_path="unused.pem", poll_interval=5)
        )
        self.management = MagicMock()
        self.client._management = self.management

    def test_get(self):
        self.management._get_operation_status.return_value = _op("InProgress")
        self.assertEqual(self.client.operations.get("op-1").status, "InProgress")
        self.management._get_operation_status.assert_called_once_with("op-1")

    def test_poller_uses_configured_interval(self):
        poller = self.client.operations.poller("op-1")
        self.assertIsInstance(poller, OperationPoller)
        self.assertEqual(poller.interval, 5)
        self.assertEqual(poller.state, PollState.POLLING)
        self.management._get_operation_status.assert_not_called()

    def test_poller_interval_override(self):
        self.assertEqual(self.client.operations.poller("op-1", interval=0.5).interval, 0.5)

    @patch("time.sleep")
    def test_wait_records_each_status(self, mock_sleep):
        self.management._get_operation_status.side_effect = [_op("InProgress"), _op("Succeeded")]

        operation = self.client.operations.wait("op-1")

        self.assertEqual(operation.status, "Succeeded")
        mock_sleep.assert_called_once_with(5)
        self.assertEqual(
            [c.args[1] for c in self.management._record_operation_status.call_args_list],
            [1, 2],
        )

    def test_await_completion_failure(self):
        self.management._get_operation_status.side_effect = [_op("Failed", ErrorDetail("X", "Y"))]
        with self.assertRaises(OperationFailedError) as ctx:
            self.client.await_completion("op-1")
        self.assertEqual(ctx.exception.message, "Y")

    def test_await_completion_async(self):
        self.management._get_operation_status.side_effect = [_op("Succeeded")]
        operation = asyncio.run(self.client.await_completion_async("op-1"))
        self.assertEqual(operation.status, "Succeeded")
        self.assertEqual(self.management._get_operation_status.call_count, 1)

    def test_wait_async_interval_override(self):
        self.management._get_operation_status.side_effect = [_op("InProgress"), _op("Succeeded")]
        operation = asyncio.run(self.client.operations.wait_async("op-1", interval=0))
        self.assertEqual(operation.status, "Succeeded")
