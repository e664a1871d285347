# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Internal request pipeline for the Service Management SDK.

- ``_management``: request construction, sending and response classification.
- ``_poller``: asynchronous operation polling state machine.
"""

__all__ = []
