"""
Package: push_relay
Description: Push notification relay for trigger documents.

Relays notification payloads stored in a DynamoDB table to Firebase
Cloud Messaging and deletes each stored payload after the attempt.
"""

__version__ = "0.1.0"
