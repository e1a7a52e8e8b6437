# storefront/utils/date_utils.py
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from openpyxl.utils.datetime import from_excel

# Text layouts accepted for release dates besides ISO 8601.
RELEASE_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


class ServerDateTime:
    @staticmethod
    def now() -> datetime:
        """
        Return current UTC time as a naive datetime, matching the DateTime columns.
        """
        return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def parse_release_date(value: Any) -> Optional[datetime]:
    """
    Best-effort conversion of a spreadsheet cell to a datetime.

    Accepts native date/datetime cells, Excel serial numbers and the text
    layouts above. Returns None when the value cannot be read as a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            converted = from_excel(value)
        except (ValueError, OverflowError, TypeError):
            return None
        if isinstance(converted, datetime):
            return converted
        if isinstance(converted, date):
            return datetime.combine(converted, time.min)
        return None

    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        return parsed.astimezone(timezone.utc).replace(tzinfo=None) if parsed.tzinfo else parsed
    for fmt in RELEASE_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
