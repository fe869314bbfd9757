from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from readsync.app import (
    add_pending_edit,
    purge_subscription_items,
    remove_pending_edit,
    subscribe_feed,
    sync_feed_subscription,
)
from readsync.config import configure_logging
from readsync.domain.model import UpdateFlags

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from readsync.domain.model import ReaderSource

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise TheOldReader read state")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subscribe = subparsers.add_parser("subscribe", help="Add a TheOldReader feed subscription")
    subscribe.add_argument("source_url", type=str, help="URL of the subscribed feed")
    subscribe.add_argument(
        "--feed-id",
        type=str,
        required=True,
        help="TheOldReader feed id (e.g. feed/0123456789abcdef)",
    )
    subscribe.add_argument("--title", type=str, help="Optional subscription title")

    sync = subparsers.add_parser("sync", help="Fetch a subscription and apply remote read state")
    sync.add_argument("node_id", type=str, help="Subscription node id")
    sync.add_argument(
        "--reset-title",
        action="store_true",
        help="Replace the stored title with the feed's title",
    )

    purge = subparsers.add_parser(
        "purge-items",
        help="Delete items whose remote id does not carry the expected prefix",
    )
    purge.add_argument("node_id", type=str, help="Subscription node id")
    purge.add_argument(
        "--prefix",
        type=str,
        help="Remote id prefix to keep (defaults to config)",
    )

    pending = subparsers.add_parser("pending", help="Pending read-state edit commands")
    pending_sub = pending.add_subparsers(dest="pending_command", required=True)
    pending_add = pending_sub.add_parser("add", help="Record an unconfirmed edit")
    pending_add.add_argument("remote_id", type=str, help="Remote entry id")
    state = pending_add.add_mutually_exclusive_group(required=True)
    state.add_argument("--read", dest="read", action="store_true", help="Entry marked read")
    state.add_argument("--unread", dest="read", action="store_false", help="Entry marked unread")
    pending_remove = pending_sub.add_parser("remove", help="Drop a confirmed edit")
    pending_remove.add_argument("remote_id", type=str, help="Remote entry id")

    return parser.parse_args(list(argv))


def _parse_log_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {value}")
    return level


def _report_login_required(source: ReaderSource) -> None:
    log.warning("Source %s is not logged in; update the whole source first", source.id)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        level = _parse_log_level(parsed_args.log_level)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)
    configure_logging(level=level)

    try:
        if parsed_args.command == "subscribe":
            subscription = subscribe_feed(
                source_url=parsed_args.source_url,
                feed_id=parsed_args.feed_id,
                title=parsed_args.title,
            )
            log.info("Created subscription %s", subscription.id)
        elif parsed_args.command == "sync":
            flags = UpdateFlags.RESET_TITLE if parsed_args.reset_title else UpdateFlags.NONE
            result = sync_feed_subscription(
                parsed_args.node_id,
                flags=flags,
                on_login_required=_report_login_required,
            )
            if result is not None and result.parse_failed:
                log.warning("Remote document for %s could not be parsed", parsed_args.node_id)
        elif parsed_args.command == "purge-items":
            purge_subscription_items(parsed_args.node_id, prefix=parsed_args.prefix)
        elif parsed_args.command == "pending" and parsed_args.pending_command == "add":
            add_pending_edit(parsed_args.remote_id, read=parsed_args.read)
        elif parsed_args.command == "pending" and parsed_args.pending_command == "remove":
            remove_pending_edit(parsed_args.remote_id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
