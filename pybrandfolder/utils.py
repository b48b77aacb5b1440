"""Utility functions for the Brandfolder client."""

import re
from datetime import datetime, timezone
from typing import Any, Optional, Union

# =============================================================================
# Constants
# =============================================================================

DEFAULT_API_URL: str = "https://brandfolder.com/api/v4"

# Items requested per page when aggregating list endpoints ("per" query param)
DEFAULT_PER_PAGE: int = 100

# Maximum number of requests made while following next_page links
DEFAULT_REQUEST_LIMIT: int = 100

DEFAULT_TIMEOUT: float = 30.0

REDACTED_API_KEY: str = "[[API-KEY-REDACTED]]"

API_DATETIME_FORMAT: str = "%Y-%m-%dT%H:%M:%S"


# =============================================================================
# Sorting
# =============================================================================

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(value: Any) -> list[Any]:
    """Build a key that orders embedded numbers numerically.

    Args:
        value: Any value; it is compared through its string form

    Returns:
        List of alternating text and integer chunks

    Examples:
        >>> sorted(["10_b", "2_a", "1_c"], key=natural_sort_key)
        ['1_c', '2_a', '10_b']
    """
    chunks = _DIGITS.split(str(value))
    return [(0, int(c), "") if c.isdigit() else (1, 0, c.lower()) for c in chunks]


# =============================================================================
# Date formatting
# =============================================================================


def format_datetime(value: Union[str, int, float, datetime]) -> Optional[str]:
    """Format a date/time for the Brandfolder API.

    Accepts a datetime, a unix timestamp or an ISO 8601 string. Naive
    datetimes are taken to be UTC.

    Args:
        value: Date/time to format

    Returns:
        String like "2024-05-01T10:30:00.000Z", or None if the value
        cannot be interpreted

    Examples:
        >>> format_datetime(datetime(2024, 5, 1, 10, 30))
        '2024-05-01T10:30:00.000Z'
    """
    dt: Optional[datetime]
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    millis = dt.microsecond // 1000
    return f"{dt.strftime(API_DATETIME_FORMAT)}.{millis:03d}Z"


# =============================================================================
# Log helpers
# =============================================================================


def redact(text: str, secret: Optional[str]) -> str:
    """Replace every occurrence of a secret in text.

    Args:
        text: Text that may contain the secret
        secret: Value to scrub (ignored if empty)

    Returns:
        Text with the secret replaced by a placeholder
    """
    if not secret:
        return text
    return text.replace(secret, REDACTED_API_KEY)
