"""
Timestamps for stored records.

Every ``created_at``/``updated_at`` value is an aware UTC datetime.
"""

import datetime


def utc_now() -> datetime.datetime:
    """Return the current time in UTC, with tzinfo set."""
    return datetime.datetime.now(datetime.timezone.utc)
