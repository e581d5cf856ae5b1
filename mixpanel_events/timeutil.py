import math
import time
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[datetime, date]


def get_unixtime(when: Optional[Union[int, float, str, DateLike]] = None) -> int:
    """Return ``when`` as Unix epoch seconds.

    Numbers are assumed to be epoch seconds already and pass through untouched.
    ``None`` means now. Strings are read as ISO 8601. Naive datetimes and dates
    are read as local time. Anything else raises TypeError.
    """
    if isinstance(when, (int, float)) and not isinstance(when, bool):
        return when
    if when is None:
        return int(time.time())
    if isinstance(when, str):
        when = datetime.fromisoformat(when)
    if not isinstance(when, date):
        raise TypeError(f"cannot convert {type(when).__name__} to a unix timestamp")
    if not isinstance(when, datetime):
        when = datetime(when.year, when.month, when.day)
    millis = math.floor(when.timestamp() * 1000)
    return millis // 1000
