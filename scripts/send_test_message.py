#!/usr/bin/env python3
"""
Script: send_test_message.py
Description: Write a trigger document straight to the messages table.

Creating the document invokes the relay Lambda through the table's
DynamoDB Stream, which sends the notification to the given device
token and deletes the document afterward.

Usage:
    python scripts/send_test_message.py --token <device-token> --title "Hello" --body "World"
    python scripts/send_test_message.py --token <device-token> --data screen=inbox --data badge=3

Note:
    This script requires AWS credentials and access to DynamoDB.
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from typing import Dict, List
from uuid import uuid4

from push_relay.config.settings import settings
from push_relay.models.message import Notification, PushMessage
from push_relay.storage.dynamodb import MessageStore
from push_relay.utils.logger import get_logger

logger = get_logger(__name__)


def parse_data_pairs(pairs: List[str]) -> Dict[str, str]:
    """
    Parse repeated KEY=VALUE arguments into a data map.

    Raises:
        ValueError: If a pair has no '=' or an empty key
    """
    data = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"data must be given as KEY=VALUE, got {pair!r}")
        data[key] = value
    return data


def build_message(args: argparse.Namespace) -> PushMessage:
    """Build the trigger document from command-line arguments."""
    notification = None
    if args.title or args.body:
        notification = Notification(title=args.title, body=args.body, image=args.image)

    data = parse_data_pairs(args.data) or None
    if notification is None and data is None:
        raise ValueError("give at least --title/--body or one --data pair")

    return PushMessage(
        message_id=f"msg_{uuid4().hex[:12]}",
        token=args.token,
        notification=notification,
        data=data,
        created_at=datetime.now(timezone.utc)
    )


def main():
    """Main script execution."""
    parser = argparse.ArgumentParser(
        description="Write a trigger document for the Push Relay",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/send_test_message.py --token abc123 --title "Hello"
  python scripts/send_test_message.py --token abc123 --data screen=inbox
  python scripts/send_test_message.py --token abc123 --body "Hi" --table fcm_messages_dev
        """
    )

    parser.add_argument('--token', type=str, required=True, help='Device delivery token')
    parser.add_argument('--title', type=str, default=None, help='Notification title')
    parser.add_argument('--body', type=str, default=None, help='Notification body')
    parser.add_argument('--image', type=str, default=None, help='Notification image URL')
    parser.add_argument(
        '--data',
        action='append',
        default=[],
        metavar='KEY=VALUE',
        help='Data payload entry (repeatable)'
    )
    parser.add_argument(
        '--table',
        type=str,
        default=settings.messages_table_name,
        help=f'Messages table name (default: {settings.messages_table_name})'
    )

    args = parser.parse_args()

    try:
        message = build_message(args)
        store = MessageStore(table_name=args.table)
        message = asyncio.run(store.put_message(message))

        print("Trigger document written")
        print(f"   Message ID: {message.message_id}")
        print(f"   Table: {args.table}")
        print(f"   Expires at: {message.expires_at}")

    except KeyboardInterrupt:
        print("\nCancelled by user.")
        sys.exit(1)

    except Exception as e:
        print(f"Error: {str(e)}")
        logger.error("Writing trigger document failed", error=str(e))
        sys.exit(1)


if __name__ == '__main__':
    main()
