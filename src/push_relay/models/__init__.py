"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains all data models used by the Push Relay:
- PushMessage: Trigger document holding a notification payload
- Notification: Visible notification content
- CreateMessageRequest: API request model for trigger document creation
- MessageResponse: API response model for message operations
"""

from .message import Notification, PushMessage
from .request import CreateMessageRequest
from .response import MessageResponse

__all__ = [
    "Notification",
    "PushMessage",
    "CreateMessageRequest",
    "MessageResponse",
]
