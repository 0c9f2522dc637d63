"""Channel adapter registry — pluggable realtime transport and email queue.

Provides singleton access to channel adapters. Uses fake adapters by
default; real adapters are selected through environment variables.
"""

import os

_channel_instances: dict[str, object] = {}

REALTIME = "realtime"
EMAIL_QUEUE = "email_queue"


def get_realtime_notifier():
    """Return the configured realtime notifier (singleton).

    Configure via the REALTIME_ADAPTER environment variable.
    """
    if REALTIME not in _channel_instances:
        adapter = os.environ.get("REALTIME_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_realtime import FakeRealtimeNotifier

            _channel_instances[REALTIME] = FakeRealtimeNotifier()
        else:
            raise ValueError(f"Unknown realtime adapter: {adapter}")
    return _channel_instances[REALTIME]


def get_email_queue():
    """Return the configured email job queue (singleton).

    Configure via the EMAIL_QUEUE_ADAPTER environment variable.
    """
    if EMAIL_QUEUE not in _channel_instances:
        adapter = os.environ.get("EMAIL_QUEUE_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_email_queue import FakeEmailQueue

            _channel_instances[EMAIL_QUEUE] = FakeEmailQueue()
        else:
            raise ValueError(f"Unknown email queue adapter: {adapter}")
    return _channel_instances[EMAIL_QUEUE]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
