"""
Blog Field Transformer

Normalizes the free-form date and tag input of the blog editor.
"""
from datetime import date, datetime
from typing import Any, List, Optional

from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

DISPLAY_DATE_FORMAT = "%d-%m-%Y"

# Tried in order after ISO-8601
ACCEPTED_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def parse_blog_date(value: Any) -> Optional[date]:
    """
    Parse an editor-supplied date.

    Accepts date/datetime objects, ISO-8601 strings (with or without time and
    offset), unpadded year-first dates such as "2024-3-5", day-first dates
    and month names.

    Returns:
        Calendar date, or None if the value cannot be understood
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso_text).date()
    except ValueError:
        pass

    for fmt in ACCEPTED_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug("blog_date_unparseable", value=text)
    return None


def format_blog_date(value: Any) -> Optional[str]:
    """Render any accepted date input as DD-MM-YYYY (None when unparseable)."""
    parsed = parse_blog_date(value)
    if parsed is None:
        return None
    return parsed.strftime(DISPLAY_DATE_FORMAT)


def normalize_tags(value: Any) -> List[str]:
    """
    Tags from a list or a comma-separated string.

    Every tag is trimmed; empty tags are dropped.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        candidates = [str(tag) for tag in value if tag is not None]
    elif isinstance(value, str):
        candidates = value.split(",")
    else:
        candidates = [str(value)]
    return [tag.strip() for tag in candidates if tag.strip()]
