"""Notifications bounded context — multi-channel notification dispatch.

Turns booking, payment, program and moderation events into typed
notifications, persists them with a read/trash lifecycle, and fans them
out to the in-app realtime channel and the asynchronous email queue.
Manages each user's email preferences.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
