# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_MANAGEMENT_HOST,
    DEFAULT_POLL_INTERVAL,
    ENV_API_VERSION,
    ENV_CERTIFICATE_PATH,
    ENV_HTTP_TIMEOUT,
    ENV_MANAGEMENT_HOST,
    ENV_POLL_INTERVAL,
    ENV_SUBSCRIPTION_ID,
)
from ._error_codes import VALIDATION_CONFIG_INVALID, VALIDATION_CONFIG_MISSING
from .errors import ValidationError
from .telemetry import TelemetryConfig


@dataclass(frozen=True)
class ManagementConfig:
    """
    Configuration settings for Service Management client operations.

    The configuration is immutable; build a new instance to target another
    subscription or certificate.

    :param subscription_id: Azure subscription identifier, used as the first path segment of every request.
    :type subscription_id: str
    :param certificate_path: Path to a PEM file holding both the management certificate and its private key.
    :type certificate_path: str
    :param management_host: Management endpoint host name (default: ``management.core.windows.net``).
    :type management_host: str
    :param api_version: Value sent in the ``x-ms-version`` header (default: ``2014-05-01``).
    :type api_version: str
    :param poll_interval: Fixed delay in seconds between operation status fetches (default: 2.0).
    :type poll_interval: float
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param telemetry: Optional telemetry settings; telemetry is disabled when None.
    :type telemetry: ~servicemanagement.core.telemetry.TelemetryConfig or None
    """

    subscription_id: str
    certificate_path: str
    management_host: str = DEFAULT_MANAGEMENT_HOST
    api_version: str = DEFAULT_API_VERSION
    poll_interval: float = DEFAULT_POLL_INTERVAL
    http_timeout: Optional[float] = None
    telemetry: Optional[TelemetryConfig] = None

    def __post_init__(self) -> None:
        # Request URLs and the loaded certificate share this one normalized value.
        object.__setattr__(self, "subscription_id", (self.subscription_id or "").strip())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ManagementConfig":
        """
        Create a configuration instance from environment variables.

        ``AZURE_SUBSCRIPTION_ID`` and ``AZURE_MANAGEMENT_CERTIFICATE`` are required;
        ``AZURE_MANAGEMENT_HOST``, ``AZURE_MANAGEMENT_API_VERSION``,
        ``AZURE_MANAGEMENT_POLL_INTERVAL`` and ``AZURE_MANAGEMENT_TIMEOUT`` are optional.

        :param environ: Mapping to read instead of :data:`os.environ`.
        :type environ: Mapping[str, str] or None
        :return: Configuration instance.
        :rtype: ~servicemanagement.core.config.ManagementConfig
        :raises ~servicemanagement.core.errors.ValidationError: If a required variable is
            missing or a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        missing = [name for name in (ENV_SUBSCRIPTION_ID, ENV_CERTIFICATE_PATH) if not (env.get(name) or "").strip()]
        if missing:
            raise ValidationError(
                f"Missing required environment variable(s): {', '.join(missing)}",
                subcode=VALIDATION_CONFIG_MISSING,
                details={"variables": missing},
            )

        return cls(
            subscription_id=env[ENV_SUBSCRIPTION_ID].strip(),
            certificate_path=env[ENV_CERTIFICATE_PATH].strip(),
            management_host=(env.get(ENV_MANAGEMENT_HOST) or DEFAULT_MANAGEMENT_HOST).strip(),
            api_version=(env.get(ENV_API_VERSION) or DEFAULT_API_VERSION).strip(),
            poll_interval=_float_from_env(env, ENV_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
            http_timeout=_float_from_env(env, ENV_HTTP_TIMEOUT, None),
        )


def _float_from_env(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(
            f"Environment variable {name} must be a number, got {raw!r}",
            subcode=VALIDATION_CONFIG_INVALID,
            details={"variable": name},
        ) from None
    if value < 0:
        raise ValidationError(
            f"Environment variable {name} must not be negative, got {raw!r}",
            subcode=VALIDATION_CONFIG_INVALID,
            details={"variable": name},
        )
    return value
