"""
Module: test_relay_flow.py
Description: End-to-end tests for the trigger document lifecycle.

Creates documents through the API, feeds the stored items to the
relay handler as DynamoDB Stream INSERT records, and checks that each
document is sent once and removed from the table.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from firebase_admin import exceptions as firebase_exceptions

from conftest import make_stream_record
from push_relay.handlers import relay
from push_relay.handlers.messages import get_metrics_client, get_store
from push_relay.main import app

pytestmark = pytest.mark.integration


@pytest.fixture
def api(store, metrics_client):
    """Provide a TestClient writing to the mocked table."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_metrics_client] = lambda: metrics_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides = {}


@pytest.fixture
def relay_clients(store, fcm_client, metrics_client):
    """Run the relay handler against the same mocked table."""
    with patch.object(relay, "get_store", return_value=store), \
            patch.object(relay, "get_fcm_client", return_value=fcm_client), \
            patch.object(relay, "get_metrics_client", return_value=metrics_client):
        yield fcm_client


def _insert_record_for(messages_table, message_id):
    item = messages_table.get_item(Key={"message_id": message_id})["Item"]
    return make_stream_record(message_id, item)


class TestRelayFlow:
    """Test cases for create -> relay -> delete."""

    def test_created_message_is_relayed_and_deleted(
        self, api, relay_clients, messages_table, sample_message_data
    ):
        message_id = api.post("/messages", json=sample_message_data).json()["message_id"]
        assert api.get(f"/messages/{message_id}").status_code == 200

        summary = relay.handler({"Records": [_insert_record_for(messages_table, message_id)]}, None)

        assert summary["sent"] == 1
        sent = relay_clients.send.await_args[0][0]
        assert sent.message_id == message_id
        assert sent.token == sample_message_data["token"]
        assert sent.notification.title == sample_message_data["notification"]["title"]
        assert sent.data == sample_message_data["data"]

        assert "Item" not in messages_table.get_item(Key={"message_id": message_id})
        assert api.get(f"/messages/{message_id}").status_code == 404

    def test_failed_send_still_removes_document(
        self, api, relay_clients, messages_table, sample_message_data
    ):
        relay_clients.send.side_effect = firebase_exceptions.NotFoundError("token not registered")
        message_id = api.post("/messages", json=sample_message_data).json()["message_id"]

        summary = relay.handler({"Records": [_insert_record_for(messages_table, message_id)]}, None)

        assert summary == {"processed": 1, "sent": 0, "failed": 1, "skipped": 0}
        assert "Item" not in messages_table.get_item(Key={"message_id": message_id})

    def test_own_delete_does_not_trigger_resend(
        self, api, relay_clients, messages_table, sample_message_data
    ):
        message_id = api.post("/messages", json=sample_message_data).json()["message_id"]
        insert = _insert_record_for(messages_table, message_id)

        relay.handler({"Records": [insert]}, None)
        relay.handler({"Records": [make_stream_record(message_id, event_name="REMOVE")]}, None)

        relay_clients.send.assert_awaited_once()

    def test_client_written_document_is_relayed(self, relay_clients, messages_table):
        """Apps may write trigger documents directly with their own ids."""
        messages_table.put_item(Item={
            "message_id": "Xk29fQ0aLmN3",
            "token": "device-token",
            "notification": {"title": "Ping"},
        })

        summary = relay.handler({"Records": [_insert_record_for(messages_table, "Xk29fQ0aLmN3")]}, None)

        assert summary["sent"] == 1
        assert "Item" not in messages_table.get_item(Key={"message_id": "Xk29fQ0aLmN3"})
