import logging
import time
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser

logger = logging.getLogger(__name__)

# Fixed English abbreviations so the output never depends on the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_pub_date(raw: Optional[str], parsed: Optional[time.struct_time] = None) -> Optional[datetime]:
    """
    Turns an item's publish date into an aware UTC datetime.

    Args:
        raw: The date string exactly as it appeared in the feed.
        parsed: feedparser's `published_parsed` (a UTC struct_time), used when
                the raw string cannot be read.

    Returns:
        An aware datetime in UTC, or None when neither input is usable.
    """
    if raw:
        try:
            value = parser.parse(raw)
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        except (ValueError, OverflowError) as e:
            logger.debug(f"dateutil could not parse publish date '{raw}': {e}")
    if parsed:
        try:
            return datetime(*parsed[:6], tzinfo=timezone.utc)
        except (TypeError, ValueError) as e:
            logger.debug(f"Ignoring invalid parsed publish date {parsed}: {e}")
    return None


def format_episode_date(value: Optional[datetime]) -> Optional[str]:
    """Formats a publish date as 'Jan 5, 2024' (UTC). Returns None for a missing date."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"
