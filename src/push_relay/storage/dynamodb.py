"""
Module: dynamodb.py
Description: DynamoDB store for trigger documents.

Provides async operations for storing, retrieving, and deleting trigger
documents, plus decoding of DynamoDB Stream images into PushMessage models.

Key Components:
- MessageStore: Main client class for trigger document operations
- Storage: put_message() with datetime serialization and TTL
- Retrieval: get_message() with datetime deserialization
- Stream decoding: message_from_image() for NewImage payloads
- Error handling: ClientError logged and re-raised

Dependencies: boto3, botocore, datetime, typing
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer
from botocore.exceptions import ClientError

from push_relay.config.settings import settings
from push_relay.models.message import PushMessage
from push_relay.utils.logger import get_logger

logger = get_logger(__name__)

_deserializer = TypeDeserializer()


def _item_to_message(item: Dict[str, Any]) -> PushMessage:
    """
    Convert a plain DynamoDB item into a PushMessage.

    Clients writing documents directly may store notification and data
    either as maps or as JSON strings; both are accepted.
    """
    item = dict(item)

    for field in ('notification', 'data'):
        if isinstance(item.get(field), str):
            item[field] = json.loads(item[field])

    if isinstance(item.get('created_at'), str):
        item['created_at'] = datetime.fromisoformat(item['created_at'].replace('Z', '+00:00'))

    # Numbers come back from DynamoDB as Decimal
    if item.get('expires_at') is not None:
        item['expires_at'] = int(item['expires_at'])

    return PushMessage(**item)


def message_from_image(image: Dict[str, Any]) -> PushMessage:
    """
    Decode a DynamoDB Stream image into a PushMessage.

    Args:
        image: Typed attribute-value map (e.g. record['dynamodb']['NewImage'])

    Returns:
        PushMessage built from the image

    Raises:
        ValueError: If the image is empty or not a valid trigger document
    """
    if not image or not isinstance(image, dict):
        raise ValueError("image must be a non-empty dictionary")

    item = {key: _deserializer.deserialize(value) for key, value in image.items()}
    return _item_to_message(item)


class MessageStore:
    """
    DynamoDB client for trigger documents.

    Attributes:
        table_name: Name of the DynamoDB messages table
        dynamodb: boto3 DynamoDB resource
        table: boto3 DynamoDB table resource

    Example:
        >>> store = MessageStore(table_name="fcm_messages")
        >>> await store.put_message(message)
        >>> await store.delete_message("msg_abc123xyz456")
    """

    def __init__(self, table_name: str):
        """
        Initialize DynamoDB client.

        Args:
            table_name: Name of the DynamoDB messages table

        Raises:
            ValueError: If table_name is empty or invalid
        """
        if not table_name or not isinstance(table_name, str):
            raise ValueError("table_name must be a non-empty string")

        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=settings.aws_region)
        self.table = self.dynamodb.Table(table_name)

        logger.info(
            "DynamoDB message store initialized",
            table_name=table_name
        )

    async def put_message(self, message: PushMessage) -> PushMessage:
        """
        Store a trigger document.

        Serializes datetimes to ISO 8601 strings and fills in the TTL
        attribute when the message does not carry one.

        Args:
            message: PushMessage to store

        Returns:
            The stored message, with expires_at populated

        Raises:
            ClientError: If DynamoDB operation fails
            ValueError: If message is invalid
        """
        if not isinstance(message, PushMessage):
            raise ValueError("message must be a PushMessage instance")

        if message.expires_at is None:
            message.expires_at = int(datetime.now(timezone.utc).timestamp()) + settings.message_ttl_seconds

        try:
            item = message.model_dump(exclude_none=True)

            if 'created_at' in item:
                item['created_at'] = item['created_at'].isoformat().replace('+00:00', 'Z')

            self.table.put_item(Item=item)

            logger.info(
                "Message stored in DynamoDB",
                message_id=message.message_id,
                has_notification=message.notification is not None,
                data_keys=len(message.data or {}),
                table_name=self.table_name
            )

            return message

        except ClientError as e:
            logger.error(
                "Failed to store message in DynamoDB",
                message_id=message.message_id,
                table_name=self.table_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise

    async def get_message(self, message_id: str) -> Optional[PushMessage]:
        """
        Retrieve a trigger document by ID.

        Args:
            message_id: Trigger document identifier

        Returns:
            PushMessage if the document still exists, None otherwise

        Raises:
            ClientError: If DynamoDB operation fails
            ValueError: If message_id is invalid
        """
        if not message_id or not isinstance(message_id, str):
            raise ValueError("message_id must be a non-empty string")

        try:
            response = self.table.get_item(Key={'message_id': message_id})
        except ClientError as e:
            logger.error(
                "Failed to retrieve message from DynamoDB",
                message_id=message_id,
                table_name=self.table_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise

        if 'Item' not in response:
            logger.info(
                "Message not found in DynamoDB",
                message_id=message_id,
                table_name=self.table_name
            )
            return None

        return _item_to_message(response['Item'])

    async def delete_message(self, message_id: str) -> None:
        """
        Delete a trigger document.

        Deleting a document that no longer exists is not an error.

        Args:
            message_id: Trigger document identifier

        Raises:
            ClientError: If DynamoDB operation fails
            ValueError: If message_id is invalid
        """
        if not message_id or not isinstance(message_id, str):
            raise ValueError("message_id must be a non-empty string")

        try:
            self.table.delete_item(Key={'message_id': message_id})

            logger.info(
                "Message deleted from DynamoDB",
                message_id=message_id,
                table_name=self.table_name
            )

        except ClientError as e:
            logger.error(
                "Failed to delete message from DynamoDB",
                message_id=message_id,
                table_name=self.table_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise
