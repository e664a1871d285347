# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the Service Management SDK.

This module contains the operation namespace classes that organize
related operations under intuitive namespaces:
- StorageServiceOperations: classic storage account management
- AsyncOperations: asynchronous operation status and polling
"""

__all__ = []
