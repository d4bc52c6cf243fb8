"""
Module: handlers/relay.py
Description: DynamoDB Stream Lambda that relays trigger documents to FCM.

Each newly inserted trigger document is sent once to Firebase Cloud
Messaging and then deleted, whether the send succeeded or not. Send
errors are logged and discarded: there is no retry and no redelivery.

Key Components:
- relay_message(): Send one trigger document and delete it
- handler(): Lambda entry point for DynamoDB Stream batches
- get_store() / get_fcm_client() / get_metrics_client(): Lazily created,
  reused across warm invocations

Dependencies: asyncio, storage, delivery, config, utils
"""

import asyncio
from typing import Any, Dict, List, Optional

from push_relay.config.settings import settings
from push_relay.delivery.fcm import FCMClient
from push_relay.storage.dynamodb import MessageStore, message_from_image
from push_relay.utils.logger import get_logger
from push_relay.utils.metrics import MetricsClient

logger = get_logger(__name__)

_store: Optional[MessageStore] = None
_fcm_client: Optional[FCMClient] = None
_metrics_client: Optional[MetricsClient] = None


def get_store() -> MessageStore:
    """Get the trigger document store, creating it on first use."""
    global _store
    if _store is None:
        _store = MessageStore(table_name=settings.messages_table_name)
    return _store


def get_fcm_client() -> FCMClient:
    """Get the FCM client, creating it on first use."""
    global _fcm_client
    if _fcm_client is None:
        _fcm_client = FCMClient(
            credentials_path=settings.firebase_credentials_path,
            project_id=settings.firebase_project_id,
            timeout_seconds=settings.fcm_timeout,
            dry_run=settings.fcm_dry_run
        )
    return _fcm_client


def get_metrics_client() -> MetricsClient:
    """Get the CloudWatch metrics client, creating it on first use."""
    global _metrics_client
    if _metrics_client is None:
        _metrics_client = MetricsClient()
    return _metrics_client


async def relay_message(
    message_id: str,
    image: Optional[Dict[str, Any]],
    store: Optional[MessageStore],
    fcm: Optional[FCMClient],
    metrics: Optional[MetricsClient] = None
) -> bool:
    """
    Relay one trigger document to FCM and delete it.

    The document is deleted after the send attempt regardless of its
    outcome. Errors from decoding, sending, and deleting are logged and
    swallowed.

    Args:
        message_id: Key of the trigger document
        image: DynamoDB Stream NewImage of the document
        store: Store used to delete the document (None when it could not be initialized)
        fcm: FCM client (None when it could not be initialized)
        metrics: Optional metrics client

    Returns:
        True if FCM accepted the message, False otherwise
    """
    sent = False

    try:
        if fcm is None:
            raise RuntimeError("FCM client is not available")

        message = message_from_image(image)
        fcm_message_id = await fcm.send(message)
        sent = True

        logger.info(
            "Message relayed",
            message_id=message_id,
            fcm_message_id=fcm_message_id
        )

    except Exception as e:
        logger.error(
            "Error sending message",
            message_id=message_id,
            error=str(e),
            error_type=type(e).__name__
        )

    try:
        if store is None:
            raise RuntimeError("Message store is not available")

        await store.delete_message(message_id)
    except Exception as e:
        logger.error(
            "Failed to delete trigger document",
            message_id=message_id,
            error=str(e),
            error_type=type(e).__name__
        )

    if metrics is not None:
        metrics.put_metric(
            metric_name="MessageRelayed" if sent else "MessageRelayFailed",
            value=1.0
        )

    return sent


def _init_client(factory, name: str):
    """Create a client, logging and returning None on failure."""
    try:
        return factory()
    except Exception as e:
        logger.error(
            "Failed to initialize client",
            client=name,
            error=str(e),
            error_type=type(e).__name__
        )
        return None


def _message_id_from_record(record: Dict[str, Any]) -> Optional[str]:
    keys = record.get('dynamodb', {}).get('Keys', {})
    return keys.get('message_id', {}).get('S')


async def _process_records(records: List[Dict[str, Any]]) -> Dict[str, int]:
    summary = {'processed': 0, 'sent': 0, 'failed': 0, 'skipped': 0}
    store = _init_client(get_store, "message store")
    metrics = _init_client(get_metrics_client, "metrics client")
    fcm = _init_client(get_fcm_client, "FCM client")

    for record in records:
        # Only document creation triggers a relay; our own deletes arrive as REMOVE
        if record.get('eventName') != 'INSERT':
            summary['skipped'] += 1
            continue

        message_id = _message_id_from_record(record)
        if not message_id:
            logger.warning(
                "Stream record has no message_id key, skipping",
                event_id=record.get('eventID')
            )
            summary['skipped'] += 1
            continue

        summary['processed'] += 1
        image = record['dynamodb'].get('NewImage')

        if await relay_message(message_id, image, store, fcm, metrics):
            summary['sent'] += 1
        else:
            summary['failed'] += 1

    return summary


def handler(event: Dict[str, Any], context: Any) -> Dict[str, int]:
    """
    Lambda handler for DynamoDB Stream batches.

    Args:
        event: DynamoDB Stream event with a batch of records
        context: Lambda context

    Returns:
        Summary counts of processed, sent, failed, and skipped records.
        Failures are never reported back, so the stream does not redeliver.
    """
    records = event.get('Records', [])

    logger.info("Processing stream batch", record_count=len(records))

    summary = asyncio.run(_process_records(records))

    logger.info("Stream batch processed", **summary)

    return summary
