"""Utility script to register the push token of a user in the store."""

from __future__ import annotations

import argparse

from eventpush.config import get_settings
from eventpush.container import build_container
from eventpush.domain.errors import StoreError
from eventpush.infrastructure.repositories import DeviceTokenRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the token registration."""

    parser = argparse.ArgumentParser(
        description="Store the current push token of a user.",
    )
    parser.add_argument("user_id", help="Identifier of the user owning the device")
    parser.add_argument("token", help="Push token reported by the device")
    return parser.parse_args()


def main() -> None:
    """Save the token using the provided command line arguments."""

    args = parse_args()
    token = args.token.strip()
    if not token:
        raise SystemExit("An empty token cannot be registered.")

    settings = get_settings()
    services = build_container(settings)
    try:
        DeviceTokenRepository(services.store, settings.device_tokens_collection).save(
            args.user_id, token
        )
    except StoreError as exc:
        raise SystemExit(f"Could not store the token: {exc}") from exc
    finally:
        services.close()

    print(f"Token registered for user {args.user_id}")


if __name__ == "__main__":
    main()
