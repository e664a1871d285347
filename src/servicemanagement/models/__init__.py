# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models and type definitions for the Service Management SDK.

This module provides strongly-typed dataclasses for management payloads:

- :class:`~servicemanagement.models.operation.Operation`: Asynchronous operation status.
- :class:`~servicemanagement.models.storage_service.StorageService`: Classic storage account.
- :class:`~servicemanagement.models.storage_service.AvailabilityResponse`: Name availability result.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from the
    specific module files to avoid duplicate entries in generated documentation.
"""

__all__ = []
