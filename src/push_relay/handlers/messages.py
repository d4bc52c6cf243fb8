"""
Module: messages.py
Description: Trigger document creation and lookup handlers.

Implements the HTTP side of the Push Relay:
- POST /messages: Store a new trigger document (which invokes the relay)
- GET /messages/{message_id}: Look up a document that has not been relayed yet

Key Components:
- create_message(): Trigger document creation endpoint
- get_message(): Pending document lookup endpoint
- get_store() / get_metrics_client(): Dependency injection

Dependencies: FastAPI, datetime, uuid
"""

from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as status_codes

from push_relay.config.settings import settings
from push_relay.models.message import PushMessage
from push_relay.models.request import CreateMessageRequest
from push_relay.models.response import MessageResponse
from push_relay.storage.dynamodb import MessageStore
from push_relay.utils.logger import get_logger
from push_relay.utils.metrics import MetricsClient

router = APIRouter(prefix="/messages", tags=["messages"])
logger = get_logger(__name__)


def get_store() -> MessageStore:
    """Dependency to get the trigger document store."""
    return MessageStore(table_name=settings.messages_table_name)


def get_metrics_client() -> MetricsClient:
    """Dependency to get CloudWatch metrics client."""
    return MetricsClient()


@router.post("", status_code=status_codes.HTTP_201_CREATED, response_model=MessageResponse)
async def create_message(
    request: CreateMessageRequest,
    store: MessageStore = Depends(get_store),
    metrics_client: MetricsClient = Depends(get_metrics_client)
) -> MessageResponse:
    """
    Queue a push notification by creating a trigger document.

    The relay picks the document up from the table's stream, sends it
    to FCM, and deletes it.

    Args:
        request: CreateMessageRequest with token, notification and data
        store: Trigger document store (injected via dependency)
        metrics_client: Metrics client (injected via dependency)

    Returns:
        MessageResponse for the queued document

    Raises:
        HTTPException: 400 if validation fails
        HTTPException: 500 if storage fails

    Example:
        POST /messages
        {
            "token": "fcm-device-token",
            "notification": {"title": "Hello", "body": "World"},
            "data": {"screen": "inbox"}
        }

        Response (201 Created):
        {
            "message_id": "msg_abc123xyz456",
            "status": "queued",
            "created_at": "2024-01-15T10:30:01Z",
            "expires_at": 1705401001,
            "message": "Message queued for delivery"
        }
    """
    message_id = f"msg_{uuid4().hex[:12]}"

    try:
        message = PushMessage(
            message_id=message_id,
            token=request.token,
            notification=request.notification,
            data=request.data,
            created_at=datetime.now(timezone.utc)
        )

        message = await store.put_message(message)

    except ValueError as e:
        logger.warning("Message validation failed", error=str(e))
        raise HTTPException(
            status_code=status_codes.HTTP_400_BAD_REQUEST,
            detail=f"Invalid message data: {str(e)}"
        )

    except Exception as e:
        logger.error(
            "Failed to create message",
            message_id=message_id,
            error=str(e),
            error_type=type(e).__name__
        )
        raise HTTPException(
            status_code=status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create message"
        )

    logger.info("Message queued", message_id=message_id)

    metrics_client.put_metric(metric_name="MessageCreated", value=1.0)

    return MessageResponse(
        message_id=message.message_id,
        status="queued",
        created_at=message.created_at,
        expires_at=message.expires_at,
        message="Message queued for delivery"
    )


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: str,
    store: MessageStore = Depends(get_store)
) -> MessageResponse:
    """
    Look up a trigger document that has not been relayed yet.

    Relayed documents are deleted, so a 404 means the relay has already
    attempted delivery (or the document never existed).

    Raises:
        HTTPException: 404 if the document does not exist
        HTTPException: 500 if database error
    """
    try:
        message = await store.get_message(message_id)
    except ValueError as e:
        # Document exists but its client-written content does not parse
        logger.warning("Pending message has invalid content", message_id=message_id, error=str(e))
        return MessageResponse(
            message_id=message_id,
            status="queued",
            message="Message awaiting delivery (content is invalid and will not be sent)"
        )
    except Exception as e:
        logger.error("Database error retrieving message", message_id=message_id, error=str(e))
        raise HTTPException(
            status_code=status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve message"
        )

    if not message:
        raise HTTPException(
            status_code=status_codes.HTTP_404_NOT_FOUND,
            detail=f"Message {message_id} not found"
        )

    return MessageResponse(
        message_id=message.message_id,
        status="queued",
        created_at=message.created_at,
        expires_at=message.expires_at,
        message="Message awaiting delivery"
    )
