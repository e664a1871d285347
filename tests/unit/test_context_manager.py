# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Unit tests for ManagementClient context manager support."""

import unittest
from unittest.mock import MagicMock

import pytest
import requests

from servicemanagement import ManagementClient, ManagementConfig


class TestContextManager(unittest.TestCase):
    """Test context manager support on ManagementClient."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = ManagementConfig(subscription_id="sub-1", certificate_path="unused.pem")

    def test_enter_creates_session(self):
        """Test that __enter__ creates a session."""
        client = ManagementClient(self.config)
        self.assertIsNone(client._session)

        result = client.__enter__()

        self.assertIsInstance(client._session, requests.Session)
        self.assertTrue(client._owns_session)
        self.assertIs(result, client)

    def test_exit_closes_session(self):
        """Test that __exit__ closes the session."""
        client = ManagementClient(self.config)
        client.__enter__()

        mock_session = MagicMock(spec=requests.Session)
        client._session = mock_session
        client._owns_session = True

        client.__exit__(None, None, None)

        mock_session.close.assert_called_once()
        self.assertIsNone(client._session)
        self.assertFalse(client._owns_session)

    def test_context_manager_protocol(self):
        """Test full context manager protocol."""
        with ManagementClient(self.config) as client:
            self.assertIsInstance(client, ManagementClient)
            self.assertIsInstance(client._session, requests.Session)

        self.assertIsNone(client._session)

    def test_session_is_passed_to_management_client(self):
        """The pooled session reaches the internal client built inside the context."""
        with ManagementClient(self.config) as client:
            management = client._get_management()
            self.assertIs(management._session, client._session)
        self.assertIsNone(client._management)

    def test_close_is_idempotent(self):
        """close() can be called repeatedly."""
        client = ManagementClient(self.config)
        client.__enter__()
        client.close()
        client.close()
        self.assertIsNone(client._session)

    def test_exception_inside_context_still_closes(self):
        """The session is released even when the body raises."""
        client = ManagementClient(self.config)
        with self.assertRaises(RuntimeError):
            with client:
                session = client._session
                raise RuntimeError("boom")
        self.assertIsNone(client._session)
        self.assertIsNotNone(session)

    def test_client_usable_after_close(self):
        """A closed client lazily builds a fresh internal client."""
        client = ManagementClient(self.config)
        first = client._get_management()
        client.close()
        self.assertIsNot(client._get_management(), first)


def test_session_presents_certificate(test_config, storage_services_xml):
    """Requests inside the context go through the pooled session with the certificate."""
    response = MagicMock(status_code=200, headers={}, content=storage_services_xml([]))
    with ManagementClient(test_config) as client:
        client._session = MagicMock(spec=requests.Session)
        client._session.request.return_value = response
        assert len(client.storage_services.list()) == 0
        kwargs = client._session.request.call_args.kwargs
        assert kwargs["cert"].endswith("mgmt.pem")
        assert kwargs["headers"]["x-ms-version"] == "2014-05-01"


def test_missing_certificate_surfaces_on_first_request(tmp_path):
    from servicemanagement.core.errors import CredentialLoadError

    config = ManagementConfig(subscription_id="sub-1", certificate_path=str(tmp_path / "missing.pem"))
    with ManagementClient(config) as client:
        with pytest.raises(CredentialLoadError):
            client.storage_services.list()
