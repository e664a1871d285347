# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import asyncio
import threading
from typing import Optional, Union

import requests

from .core.config import ManagementConfig
from .data._management import _ManagementClient
from .models.operation import Operation
from .operations.async_operations import AsyncOperations
from .operations.storage import StorageServiceOperations


class ManagementClient:
    """
    High-level client for the Azure classic Service Management API.

    The client authenticates with a management certificate (mutual TLS) and
    delegates HTTP work to an internal
    :class:`~servicemanagement.data._management._ManagementClient`, created
    lazily on first use. Configuration is immutable and supplied explicitly.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager enables connection pooling and
        releases the HTTP session on exit::

            with ManagementClient(config) as client:
                for service in client.storage_services.list():
                    print(service.service_name)

    **Without Context Manager**::

            client = ManagementClient(config)
            try:
                client.storage_services.list()
            finally:
                client.close()

    Operations are organized under namespaces:

    - ``client.storage_services``: classic storage accounts
    - ``client.operations``: asynchronous operation status and polling

    Resource-specific code outside these namespaces can use the generic
    primitives :meth:`send_get`, :meth:`send_post` and :meth:`await_completion`.

    :param config: Subscription, certificate and transport settings.
    :type config: ~servicemanagement.core.config.ManagementConfig

    :raises ValueError: If ``config`` is None.

    .. note::
        The certificate is loaded on the first request, not at construction.
        A missing or mismatched certificate therefore surfaces as
        :class:`~servicemanagement.core.errors.CredentialLoadError` from that request.

    Example::

        from servicemanagement import ManagementClient, ManagementConfig

        config = ManagementConfig(subscription_id="<subscription-id>", certificate_path="mgmt.pem")
        with ManagementClient(config) as client:
            service = client.storage_services.create("mystorage", "West US")
            print(client.storage_services.get_blob_endpoint(service))
    """

    def __init__(self, config: ManagementConfig) -> None:
        if config is None:
            raise ValueError("config is required.")
        self._config = config
        self._management: Optional[_ManagementClient] = None
        self._management_lock = threading.Lock()
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

        self.storage_services = StorageServiceOperations(self)
        self.operations = AsyncOperations(self)

    @property
    def config(self) -> ManagementConfig:
        return self._config

    def __enter__(self) -> "ManagementClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling. All operations within
        the context reuse this session.
        """
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the client and release resources.

        Safe to call multiple times. A later call lazily builds a fresh internal client.
        """
        if self._management is not None:
            self._management.close()
            self._management = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_management(self) -> _ManagementClient:
        """Get or create the internal management client instance."""
        if self._management is None:
            with self._management_lock:
                if self._management is None:
                    self._management = _ManagementClient(self._config, session=self._session)
        return self._management

    # ----------------------- generic request primitives -----------------------
    def send_get(self, path: str) -> bytes:
        """
        GET a path relative to ``https://<host>/<subscription-id>/``.

        :param path: Relative resource path, e.g. ``"services/hostedservices"``.
        :type path: str
        :return: Response body bytes.
        :rtype: bytes
        :raises ~servicemanagement.core.errors.AzureServiceError: For status codes above 299.
        """
        return self._get_management()._send_get(path)

    def send_post(self, path: str, body: Union[bytes, str, None]) -> str:
        """
        POST an XML body and return the ``x-ms-request-id`` of the started operation.

        :raises ~servicemanagement.core.errors.MissingRequestIdError: If the success response has no request id.
        """
        return self._get_management()._send_post(path, body)

    def await_completion(
        self,
        request_id: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Operation:
        """Block until the operation identified by ``request_id`` succeeds. See :meth:`AsyncOperations.wait`."""
        return self.operations.wait(request_id, cancel_event=cancel_event)

    async def await_completion_async(
        self,
        request_id: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Operation:
        """Awaitable form of :meth:`await_completion`."""
        return await self.operations.wait_async(request_id, cancel_event=cancel_event)


__all__ = ["ManagementClient"]
