"""Protean Engine runner for the notifications domain.

Starts the Engine that processes events asynchronously when the domain runs
with ``event_processing = "async"`` (the production overlay):
- OutboxProcessor: publishes stored events to the broker
- StreamSubscriptions: invokes projectors and the inbound booking, payment
  and identity handlers

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import argparse
import asyncio

from notifications.utils.logging import configure_logging
from protean.server.engine import Engine


def _get_domain():
    """Import and initialize the notifications domain."""
    from notifications.domain import notifications

    notifications.init()
    return notifications


async def run(test_mode=False):
    engine = Engine(_get_domain(), test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Notifications Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
