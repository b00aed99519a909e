import re
from datetime import datetime
from enum import Enum, auto
from typing import Callable, Optional

# RFC 3339, section 5.6
DATE_TIME_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt]([0-9]{2}):([0-9]{2}):([0-9]{2})(\.[0-9]+)?"
    r"([Zz]|[+-]([0-9]{2}):([0-9]{2}))"
)

DIGEST_ALGORITHM_RE = re.compile(r"[a-z0-9]+(?:[+._-][a-z0-9]+)*")
DIGEST_ENCODED_RE = re.compile(r"[a-zA-Z0-9=_-]+")

# encoded form of the registered digest algorithms
DIGEST_ALGORITHMS = {
    "sha256": re.compile(r"[a-f0-9]{64}"),
    "sha512": re.compile(r"[a-f0-9]{128}"),
}


class FormatMode(Enum):
    # format failures are violations
    Strict = auto()
    # format failures are logged and otherwise ignored
    Advisory = auto()


def check_date_time(value: str) -> Optional[str]:
    match = DATE_TIME_RE.fullmatch(value)
    if match is None:
        return "is not an RFC 3339 date-time"
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    try:
        # second 60 is a leap second
        datetime(year, month, day, hour, minute, min(second, 59))
    except ValueError as e:
        return f"is not a valid date-time: {e}"
    if second > 60:
        return "is not a valid date-time: second must be in 0..60"
    if match.group(9) is not None:
        if int(match.group(9)) > 23 or int(match.group(10)) > 59:
            return "has an invalid UTC offset"
    return None


def check_digest(value: str) -> Optional[str]:
    algorithm, sep, encoded = value.partition(":")
    if not sep:
        return "is not a digest of the form <algorithm>:<encoded>"
    if not DIGEST_ALGORITHM_RE.fullmatch(algorithm):
        return f"has an invalid digest algorithm {algorithm!r}"
    expected = DIGEST_ALGORITHMS.get(algorithm)
    if expected is not None:
        if not expected.fullmatch(encoded):
            return f"is not a valid {algorithm} digest"
    elif not DIGEST_ENCODED_RE.fullmatch(encoded):
        return "has an invalid encoded digest part"
    return None


FORMAT_CHECKERS: dict = {
    "date-time": check_date_time,
    "digest": check_digest,
}


def checker_for(name: str) -> Optional[Callable[[str], Optional[str]]]:
    """Unknown format names have no checker and always pass."""
    return FORMAT_CHECKERS.get(name)
