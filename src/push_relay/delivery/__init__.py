"""
Package: delivery
Description: Push delivery to Firebase Cloud Messaging.
"""

from .fcm import FCMClient

__all__ = ["FCMClient"]
