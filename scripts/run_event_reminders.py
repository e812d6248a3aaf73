"""Run one event reminder cycle against the configured store."""

from __future__ import annotations

import argparse
from datetime import datetime
from functools import partial

import anyio

from eventpush.application.use_cases.notifications import send_event_reminders
from eventpush.config import get_settings
from eventpush.container import build_container
from eventpush.main import configure_logging


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the reminder run."""

    parser = argparse.ArgumentParser(
        description="Create 'starting soon' notifications for upcoming events.",
    )
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="ISO-8601 timestamp to use as the run time (default: current time)",
    )
    return parser.parse_args()


def main() -> None:
    """Run the reminder cycle and report its outcome."""

    args = parse_args()
    settings = get_settings()
    configure_logging(settings)

    services = build_container(settings)
    try:
        result = anyio.run(partial(send_event_reminders, services, now=args.now))
    finally:
        services.close()

    print(f"Reminder run {result.outcome.value}: {result.detail}")
    for key, value in result.values.items():
        print(f"  {key}: {value}")
    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
