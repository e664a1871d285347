# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Python client for the Azure classic Service Management API.

Authenticates with a management certificate, sends XML requests, decodes
error envelopes into typed exceptions and polls asynchronous operations.
"""

from .__version__ import __version__
from .client import ManagementClient
from .core.config import ManagementConfig
from .core.telemetry import TelemetryConfig

__all__ = ["__version__", "ManagementClient", "ManagementConfig", "TelemetryConfig"]
