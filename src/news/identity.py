"""
Article identity and date helpers shared by the provider mappers.
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional

# Tried in order after ISO-8601 parsing fails
DATE_FORMATS = (
    "%Y%m%dT%H%M%S",  # Alpha Vantage time_published
    "%Y%m%dT%H%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)


def generate_external_id(url: str) -> str:
    """Deterministic id for providers without a stable one: SHA-256 of the stripped URL."""
    return hashlib.sha256(url.strip().encode("utf-8")).hexdigest()


def parse_published_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a provider date string into a naive UTC datetime.

    Missing or unparsable values return None so the article is still stored.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def truncate(value: Optional[str], max_length: int) -> Optional[str]:
    if value is None:
        return None
    return value[:max_length]
