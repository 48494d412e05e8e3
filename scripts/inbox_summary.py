"""Utility script to print an inbox summary.

Prints the unread count and the sender/subject of the latest messages.
With ``--mark-read`` it also removes the UNREAD label from every unread
message, which makes later unread counts meaningful.

Requires a cached token (run ``inboxer-setup credentials.json`` first) and
INBOXER_CREDENTIALS_PATH pointing at the client secrets file.

Usage:
    python scripts/inbox_summary.py [--count 10] [--mark-read]
"""

import argparse
import logging

from inboxer.body import BodyNotFoundError, get_body
from inboxer.config import get_settings
from inboxer.metadata import get_partial_metadata
from inboxer.service import GmailService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_latest(service: GmailService, count: int) -> None:
    """Print metadata for the latest messages.

    Args:
        service: Gmail service handle
        count: Number of messages to show
    """
    messages = service.get_messages(count)
    if not messages:
        logger.info("  No messages found")
        return

    for message in messages:
        info = get_partial_metadata(message)
        try:
            preview = get_body(message, "text/plain").strip().splitlines()[0][:60]
        except (BodyNotFoundError, IndexError):
            preview = message.snippet[:60]
        print(f"  {info.from_address or info.sender}: {info.subject}")
        print(f"      {preview}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--count", type=int, default=10, help="Messages to list")
    parser.add_argument("--mark-read", action="store_true", help="Mark all unread mail as read")
    args = parser.parse_args()

    service = GmailService.from_settings(get_settings())

    unread = service.check_for_unread()
    logger.info(f"Unread messages + threads: {unread}")

    logger.info(f"Latest {args.count} messages:")
    print_latest(service, args.count)

    if args.mark_read:
        marked = service.mark_all_as_read()
        logger.info(f"Marked {marked} messages as read")


if __name__ == "__main__":
    main()
