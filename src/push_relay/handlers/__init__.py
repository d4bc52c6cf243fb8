"""
Package: handlers
Description: Lambda and HTTP handlers for the Push Relay.

- relay: DynamoDB Stream callback that forwards new trigger documents
- messages: HTTP endpoints that create trigger documents
"""
