"""Directory adapter abstraction — read access to users, bookings, payments and programs."""

import os

_directory_instance = None


def get_directory():
    """Return the configured directory adapter (singleton).

    Uses the in-memory directory by default. Configure via the
    DIRECTORY_ADAPTER environment variable.
    """
    global _directory_instance
    if _directory_instance is None:
        adapter = os.environ.get("DIRECTORY_ADAPTER", "memory")
        if adapter == "memory":
            from notifications.directory.fake_adapter import InMemoryDirectory

            _directory_instance = InMemoryDirectory()
        else:
            raise ValueError(f"Unknown directory adapter: {adapter}")
    return _directory_instance


def reset_directory():
    """Reset the directory singleton (useful for testing)."""
    global _directory_instance
    _directory_instance = None
