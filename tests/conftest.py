"""
Module: conftest.py
Description: Shared pytest fixtures for Push Relay tests.

Provides reusable fixtures for the trigger document table, sample
messages, DynamoDB Stream records, and a mocked FCM client. Uses moto
for AWS service mocking to enable fast, isolated unit tests.
"""

import os

# Settings and boto3 read these at import time
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ["MESSAGES_TABLE_NAME"] = "test-fcm-messages"
os.environ["METRICS_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"

from datetime import datetime, timezone
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import boto3
import pytest
from boto3.dynamodb.types import TypeSerializer
from moto import mock_aws

from push_relay.config.settings import Settings
from push_relay.delivery.fcm import FCMClient
from push_relay.models.message import Notification, PushMessage
from push_relay.storage.dynamodb import MessageStore
from push_relay.utils.metrics import MetricsClient

_serializer = TypeSerializer()


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables .env loading so tests only see the variables set above.
    """
    return Settings(_env_file=None)


@pytest.fixture
def sample_message_data() -> Dict[str, Any]:
    """Provide a typical trigger document payload."""
    return {
        "token": "fcm-device-token-abc123",
        "notification": {
            "title": "New order",
            "body": "Order #12345 has shipped"
        },
        "data": {
            "order_id": "12345",
            "screen": "orders"
        }
    }


@pytest.fixture
def sample_message(sample_message_data) -> PushMessage:
    """Provide a fully populated PushMessage."""
    return PushMessage(
        message_id="msg_test123abc45",
        token=sample_message_data["token"],
        notification=Notification(**sample_message_data["notification"]),
        data=sample_message_data["data"],
        created_at=datetime(2024, 1, 15, 10, 30, 1, tzinfo=timezone.utc)
    )


@pytest.fixture
def aws():
    """Keep moto's AWS mock active for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def messages_table(aws, test_settings):
    """
    Create mock DynamoDB table for trigger documents.

    Mirrors the production table: message_id hash key with a
    NEW_IMAGE stream feeding the relay.
    """
    dynamodb = boto3.resource('dynamodb', region_name='us-east-1')

    table = dynamodb.create_table(
        TableName=test_settings.messages_table_name,
        KeySchema=[
            {'AttributeName': 'message_id', 'KeyType': 'HASH'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'message_id', 'AttributeType': 'S'}
        ],
        StreamSpecification={
            'StreamEnabled': True,
            'StreamViewType': 'NEW_IMAGE'
        },
        BillingMode='PAY_PER_REQUEST'
    )

    yield table


@pytest.fixture
def store(test_settings, messages_table) -> MessageStore:
    """Provide a MessageStore bound to the mocked table."""
    return MessageStore(table_name=test_settings.messages_table_name)


@pytest.fixture
def fcm_client():
    """Provide a mocked FCM client whose sends succeed."""
    client = MagicMock(spec=FCMClient)
    client.send = AsyncMock(return_value="projects/test-project/messages/0:1234")
    return client


@pytest.fixture
def metrics_client():
    """Provide a mocked metrics client."""
    return MagicMock(spec=MetricsClient)


def make_image(item: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize a plain item into a DynamoDB Stream image."""
    return {key: _serializer.serialize(value) for key, value in item.items()}


def make_stream_record(
    message_id: str,
    item: Dict[str, Any] = None,
    event_name: str = "INSERT"
) -> Dict[str, Any]:
    """Build a DynamoDB Stream record as delivered to Lambda."""
    record = {
        "eventID": f"evt-{message_id}",
        "eventName": event_name,
        "eventSource": "aws:dynamodb",
        "awsRegion": "us-east-1",
        "dynamodb": {
            "Keys": {"message_id": {"S": message_id}},
            "StreamViewType": "NEW_IMAGE",
        },
    }
    if item is not None:
        record["dynamodb"]["NewImage"] = make_image(item)
    return record


@pytest.fixture
def stream_record_factory():
    """Expose make_stream_record to tests."""
    return make_stream_record


@pytest.fixture
def sample_item(sample_message_data) -> Dict[str, Any]:
    """Provide a trigger document as a plain DynamoDB item."""
    return {
        "message_id": "msg_test123abc45",
        **sample_message_data,
        "created_at": "2024-01-15T10:30:01Z",
    }
