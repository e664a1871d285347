# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
HTTP transport with client-certificate authentication and timeout handling.

This module provides :class:`~servicemanagement.core._http._HttpClient`, a wrapper
around the requests library that presents the management certificate on every
connection, applies per-method default timeouts, and optionally reuses a
session for connection pooling. Requests are never retried at this layer.
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from ._credentials import ManagementCertificate, load_management_certificate
from .errors import MalformedURLError, TransportError, TruncatedResponseError


class _HttpClient:
    """
    HTTP client presenting a management certificate for mutual TLS.

    The client holds no mutable state besides the optional session, so one
    instance can serve concurrent callers.

    :param certificate: Verified management certificate; its PEM path is passed as ``cert``.
    :type certificate: ~servicemanagement.core._credentials.ManagementCertificate
    :param timeout: Default request timeout in seconds. If None, uses per-method defaults.
    :type timeout: :class:`float` | None
    :param session: Optional requests.Session for connection pooling.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        certificate: ManagementCertificate,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.certificate = certificate
        self.default_timeout: Optional[float] = timeout
        self._session = session

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Execute a single HTTP request.

        Applies default timeouts based on HTTP method (120s for POST/PUT/DELETE, 10s for others).
        Redirects are never followed. When a session is configured, uses the session for connection pooling; otherwise uses
        standalone requests.

        :param method: HTTP method (GET, POST, PUT, DELETE).
        :type method: :class:`str`
        :param url: Absolute request URL.
        :type url: :class:`str`
        :param kwargs: Additional arguments passed to ``requests.request()`` or
            ``session.request()``, including headers and data.
        :return: HTTP response object with its body fully read.
        :rtype: :class:`requests.Response`
        :raises ~servicemanagement.core.errors.MalformedURLError: If requests rejects the URL.
        :raises ~servicemanagement.core.errors.TruncatedResponseError: If the connection closed mid-body.
        :raises ~servicemanagement.core.errors.TransportError: On DNS, connection, TLS or timeout failures.
        """
        # If no timeout is provided, use the user-specified default timeout if set;
        # otherwise, apply per-method defaults (120s for mutations, 10s for others).
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                m = (method or "").lower()
                kwargs["timeout"] = 120 if m in ("post", "put", "delete") else 10
        kwargs.setdefault("cert", self.certificate.path)
        # 3xx responses are returned as-is; the certificate only goes to the requested host.
        kwargs.setdefault("allow_redirects", False)

        try:
            if self._session is not None:
                return self._session.request(method, url, **kwargs)
            return requests.request(method, url, **kwargs)
        except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema, requests.exceptions.InvalidSchema) as exc:
            raise MalformedURLError(f"Invalid request URL: {exc}", url=url) from exc
        except requests.exceptions.ChunkedEncodingError as exc:
            raise TruncatedResponseError(f"Response body ended early: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"{method.upper()} {url} failed: {exc}", url=url) from exc

    def close(self) -> None:
        """
        Close the HTTP client and release resources.

        If a session was provided, this method closes it. Safe to call multiple times.
        """
        if self._session is not None:
            self._session.close()
            self._session = None


def build_transport(
    subscription_id: str,
    certificate_path: str,
    *,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> _HttpClient:
    """
    Load the management certificate and build the HTTPS transport presenting it.

    :raises ~servicemanagement.core.errors.CredentialLoadError: If the certificate cannot be loaded.
    """
    certificate = load_management_certificate(subscription_id, certificate_path)
    return _HttpClient(certificate, timeout=timeout, session=session)
