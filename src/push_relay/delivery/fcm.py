"""
Module: fcm.py
Description: Push delivery to Firebase Cloud Messaging.

Wraps the firebase-admin messaging API to send one trigger document
to one device token.
"""

import asyncio
from typing import Optional

import firebase_admin
from firebase_admin import credentials, messaging

from push_relay.models.message import PushMessage
from push_relay.utils.logger import get_logger

logger = get_logger(__name__)

FCM_APP_NAME = "push-relay"


class FCMClient:
    """
    Firebase Cloud Messaging client.

    Sends messages through a named firebase_admin App so that warm
    Lambda invocations reuse the already-initialized app.
    """

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        project_id: Optional[str] = None,
        timeout_seconds: int = 10,
        dry_run: bool = False,
        app_name: str = FCM_APP_NAME
    ):
        """
        Initialize FCM client.

        Args:
            credentials_path: Service account JSON path (application default credentials when None)
            project_id: Optional Firebase project ID override
            timeout_seconds: HTTP timeout for FCM requests
            dry_run: Validate messages without delivering them
            app_name: Name of the firebase_admin App to create or reuse
        """
        self.dry_run = dry_run
        self.app = self._get_or_create_app(credentials_path, project_id, timeout_seconds, app_name)

        logger.info(
            "FCM client initialized",
            app_name=app_name,
            project_id=project_id,
            timeout_seconds=timeout_seconds,
            dry_run=dry_run
        )

    @staticmethod
    def _get_or_create_app(
        credentials_path: Optional[str],
        project_id: Optional[str],
        timeout_seconds: int,
        app_name: str
    ) -> firebase_admin.App:
        try:
            return firebase_admin.get_app(app_name)
        except ValueError:
            pass

        if credentials_path:
            credential = credentials.Certificate(credentials_path)
        else:
            credential = credentials.ApplicationDefault()

        options = {'httpTimeout': timeout_seconds}
        if project_id:
            options['projectId'] = project_id

        return firebase_admin.initialize_app(credential, options=options, name=app_name)

    def build_message(self, message: PushMessage) -> messaging.Message:
        """
        Convert a trigger document into an FCM message.

        Args:
            message: Trigger document to convert

        Returns:
            firebase_admin messaging.Message addressed to message.token
        """
        notification = None
        if message.notification is not None:
            notification = messaging.Notification(
                title=message.notification.title,
                body=message.notification.body,
                image=message.notification.image
            )

        return messaging.Message(
            token=message.token,
            notification=notification,
            data=message.data or None
        )

    async def send(self, message: PushMessage) -> str:
        """
        Send a trigger document to its device.

        Args:
            message: Trigger document to send

        Returns:
            FCM message ID (projects/<project>/messages/<id>)

        Raises:
            firebase_admin.exceptions.FirebaseError: If FCM rejects the message
            ValueError: If the message is not a valid FCM payload
        """
        if not isinstance(message, PushMessage):
            raise ValueError("message must be a PushMessage instance")

        fcm_message = self.build_message(message)

        logger.debug(
            "Sending message to FCM",
            message_id=message.message_id,
            dry_run=self.dry_run
        )

        # messaging.send is blocking
        fcm_message_id = await asyncio.to_thread(
            messaging.send, fcm_message, dry_run=self.dry_run, app=self.app
        )

        logger.info(
            "Message sent to FCM",
            message_id=message.message_id,
            fcm_message_id=fcm_message_id
        )

        return fcm_message_id
