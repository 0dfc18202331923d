import re
from datetime import datetime
from datetime import timezone

from loguru import logger

DATE_FORMAT = "%Y-%m-%d"
_DATE_REGEX = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

# Posts with an unparsable date sort after everything else
ZERO_DATE = datetime(1, 1, 1, tzinfo=timezone.utc)


def parse_date(value: str) -> datetime:
    # strptime alone also accepts non-padded values like 2020-9-1
    if isinstance(value, str) and _DATE_REGEX.fullmatch(value):
        try:
            return datetime.strptime(value, DATE_FORMAT).replace(
                tzinfo=timezone.utc
            )
        except ValueError:
            pass

    logger.warning(f"Invalid date {value!r}, falling back to {ZERO_DATE}")
    return ZERO_DATE


def now() -> datetime:
    return datetime.now(timezone.utc)
