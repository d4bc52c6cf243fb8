"""
Module: message.py
Description: Trigger document models for the Push Relay.

Defines the PushMessage model stored in the trigger-document table and
relayed to Firebase Cloud Messaging when the document is created.

Key Components:
- Notification: Visible notification content (title, body, image)
- PushMessage: Trigger document with delivery token and payload
- Validation: Pydantic v2 with custom field validators

Dependencies: pydantic, datetime, typing
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _stringify_value(val: Any) -> str:
    if isinstance(val, str):
        return val
    if isinstance(val, (dict, list, bool)):
        return json.dumps(val, default=str)
    return str(val)


def stringify_data(v: Any) -> Optional[Dict[str, str]]:
    """
    FCM only accepts string data values, so stringify everything else.

    Null values are dropped. Maps, lists and booleans are JSON encoded
    (a nested map becomes '{"x": 1}', True becomes 'true').
    """
    if v is None:
        return v
    if not isinstance(v, dict):
        raise ValueError("data must be a dictionary")

    return {
        str(k): _stringify_value(val)
        for k, val in v.items()
        if val is not None
    }


class Notification(BaseModel):
    """
    Visible notification content shown by the device.

    Attributes:
        title: Notification title
        body: Notification body text
        image: Optional HTTP(S) URL of an image to display
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, max_length=1024, description="Notification title")
    body: Optional[str] = Field(default=None, max_length=4096, description="Notification body")
    image: Optional[str] = Field(default=None, description="Notification image URL")

    @field_validator('image')
    @classmethod
    def validate_image(cls, v: Optional[str]) -> Optional[str]:
        """Validate image is an HTTP(S) URL if provided."""
        if v is None:
            return v
        if not v.startswith(('http://', 'https://')):
            raise ValueError("image must be a valid HTTP/HTTPS URL")
        return v

    @model_validator(mode='after')
    def require_content(self) -> 'Notification':
        """A notification needs a title or a body."""
        if not self.title and not self.body:
            raise ValueError("notification must have a title or a body")
        return self


class PushMessage(BaseModel):
    """
    Trigger document holding one notification for one device.

    Documents are created by the messages API or written directly by
    clients. Creating a document invokes the relay, which sends it once
    and deletes it.

    Attributes:
        message_id: Document key
        token: Opaque device delivery token issued by FCM
        notification: Optional visible notification
        data: Optional key/value payload delivered to the app
        created_at: When the document was created (nullable for direct writes)
        expires_at: Epoch seconds after which DynamoDB TTL removes the document
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )

    message_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Trigger document identifier"
    )
    token: str = Field(
        ...,
        min_length=1,
        max_length=4096,
        description="Device delivery token"
    )
    notification: Optional[Notification] = Field(
        default=None,
        description="Visible notification content"
    )
    data: Optional[Dict[str, str]] = Field(
        default=None,
        description="Data payload (string values only)"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="Document creation timestamp"
    )
    expires_at: Optional[int] = Field(
        default=None,
        ge=0,
        description="TTL expiry as epoch seconds"
    )

    @field_validator('data', mode='before')
    @classmethod
    def coerce_data(cls, v: Any) -> Optional[Dict[str, str]]:
        """Stringify data values."""
        return stringify_data(v)
