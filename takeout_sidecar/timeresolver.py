import os
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INTEGER = re.compile(r'[+-]?[0-9]+')


@lru_cache(maxsize=None)
def resolve_local_timezone() -> Optional[tzinfo]:
    """Return the process's local zone, resolved once.

    ``TZ`` is honoured when it names an IANA zone. Otherwise None is
    returned, meaning the system's own local time rules apply.
    """
    name = os.environ.get('TZ', '').lstrip(':')
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone TZ={name!r}, using the system local time")
    return None


class TimeResolver:
    """Turns epoch-seconds strings into local instants."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz if tz is not None else resolve_local_timezone()

    @staticmethod
    def parse_epoch(timestamp: str) -> Optional[int]:
        if not timestamp or not _INTEGER.fullmatch(timestamp):
            return None
        return int(timestamp)

    def resolve(self, timestamp: str) -> Optional[datetime]:
        """Return the local instant for ``timestamp``, or None when unknown.

        Empty, non-integer and zero timestamps are unknown.
        """
        seconds = self.parse_epoch(timestamp)
        if not seconds:
            if timestamp:
                logger.debug(f"Ignoring timestamp {timestamp!r}")
            return None
        try:
            # without a zone, astimezone() applies the system rules for that instant
            return (EPOCH + timedelta(seconds=seconds)).astimezone(self.tz)
        except (OverflowError, ValueError, OSError):
            logger.debug(f"Timestamp {timestamp!r} is out of range")
            return None
