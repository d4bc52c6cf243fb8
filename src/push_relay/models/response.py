"""
Module: response.py
Description: API response models for the Push Relay.

Key Components:
- MessageResponse: Model for message creation and lookup responses

Dependencies: pydantic, datetime, typing
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """
    Response model for message operations.

    A trigger document only exists until the relay has attempted
    delivery, so every response describes a queued message.

    Attributes:
        message_id: Trigger document identifier
        status: Always 'queued' while the document exists
        created_at: When the document was created
        expires_at: TTL expiry as epoch seconds
        message: Human-readable status message
    """

    message_id: str = Field(..., description="Trigger document identifier")
    status: str = Field(default="queued", description="Message status")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    expires_at: Optional[int] = Field(default=None, description="TTL expiry (epoch seconds)")
    message: str = Field(..., description="Human-readable status message")
