"""
Package: storage
Description: DynamoDB storage for trigger documents.
"""

from .dynamodb import MessageStore, message_from_image

__all__ = ["MessageStore", "message_from_image"]
