# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Management certificate loading.

The Service Management API authenticates callers with a client certificate
uploaded to the subscription. The certificate and its private key are read
from a single PEM file and checked against each other before any request is
made, so a mismatched pair fails locally instead of at the TLS handshake.
"""

from __future__ import annotations

import datetime as _dt
import os
from dataclasses import dataclass

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization

from ._error_codes import (
    CREDENTIAL_FILE_MISSING,
    CREDENTIAL_KEY_MISMATCH,
    CREDENTIAL_MALFORMED,
    CREDENTIAL_SUBSCRIPTION_MISSING,
)
from .errors import CredentialLoadError


@dataclass(frozen=True)
class ManagementCertificate:
    """
    A loaded and verified management certificate.

    Only the file path is kept for the transport; no key material is retained
    beyond the verification in :func:`load_management_certificate`.

    :param subscription_id: Subscription the certificate is registered with.
    :type subscription_id: str
    :param path: Absolute path of the PEM file holding certificate and key.
    :type path: str
    :param thumbprint: SHA-1 thumbprint, upper-case hex, as shown in the Azure portal.
    :type thumbprint: str
    :param subject: RFC 4514 subject string.
    :type subject: str
    :param not_valid_after: Expiry instant (UTC).
    :type not_valid_after: datetime.datetime
    """

    subscription_id: str
    path: str
    thumbprint: str
    subject: str
    not_valid_after: _dt.datetime

    @property
    def is_expired(self) -> bool:
        return self.not_valid_after <= _dt.datetime.now(_dt.timezone.utc)


def load_management_certificate(subscription_id: str, certificate_path: str) -> ManagementCertificate:
    """
    Load the certificate/key pair used for mutual TLS.

    :param subscription_id: Subscription identifier; must be non-empty.
    :type subscription_id: str
    :param certificate_path: PEM file containing the certificate and an unencrypted private key.
    :type certificate_path: str
    :return: The verified certificate description.
    :rtype: ManagementCertificate
    :raises ~servicemanagement.core.errors.CredentialLoadError: If the subscription id is empty,
        the file is missing or unreadable, the certificate or key cannot be parsed, or the key
        does not belong to the certificate.
    """
    if not (subscription_id or "").strip():
        raise CredentialLoadError("subscription_id is required.", subcode=CREDENTIAL_SUBSCRIPTION_MISSING)
    if not certificate_path:
        raise CredentialLoadError("certificate_path is required.", subcode=CREDENTIAL_FILE_MISSING)

    path = os.path.abspath(os.path.expanduser(certificate_path))
    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise CredentialLoadError(
            f"Cannot read management certificate '{path}': {exc.strerror or exc}",
            subcode=CREDENTIAL_FILE_MISSING,
            path=path,
        ) from exc

    try:
        certificate = x509.load_pem_x509_certificate(data)
    except ValueError as exc:
        raise CredentialLoadError(
            f"'{path}' does not contain a PEM certificate: {exc}",
            subcode=CREDENTIAL_MALFORMED,
            path=path,
        ) from exc

    try:
        private_key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        # TypeError: the key is encrypted; transports cannot prompt for a passphrase.
        raise CredentialLoadError(
            f"'{path}' does not contain an unencrypted PEM private key: {exc}",
            subcode=CREDENTIAL_MALFORMED,
            path=path,
        ) from exc

    if _public_key_der(certificate.public_key()) != _public_key_der(private_key.public_key()):
        raise CredentialLoadError(
            f"The private key in '{path}' does not match its certificate.",
            subcode=CREDENTIAL_KEY_MISMATCH,
            path=path,
        )

    return ManagementCertificate(
        subscription_id=subscription_id.strip(),
        path=path,
        thumbprint=certificate.fingerprint(hashes.SHA1()).hex().upper(),
        subject=certificate.subject.rfc4514_string(),
        not_valid_after=certificate.not_valid_after_utc,
    )


def _public_key_der(public_key) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


__all__ = ["ManagementCertificate", "load_management_certificate"]
