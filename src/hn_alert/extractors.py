import re
from datetime import timedelta

from .errors import ExtractionError, UnrecognizedUnitError
from .models import ItemAge

# Matches something like ">3 hours ago<". The angle brackets keep prose and
# unrelated numbers in the page from producing false positives.
AGE_RE = re.compile(r">(?P<num>[1-9]\d*) (?P<unit>\w+) ago<", re.ASCII)

# Listing markup wraps the age in a link to the item, e.g. <a href="item?id=42">.
_ITEM_ID_RE = re.compile(r"item\?id=(?P<item_id>\d+)\"\s*$", re.ASCII)
_ITEM_ID_LOOKBEHIND = 64

# month/year are approximations, not calendar-aware.
UNIT_SECONDS: dict[str, int] = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
    "month": 30 * 86400,
    "months": 30 * 86400,
    "year": 365 * 86400,
    "years": 365 * 86400,
}


def parse_age(num: int, unit: str) -> timedelta:
    factor = UNIT_SECONDS.get(unit)
    if factor is None:
        raise UnrecognizedUnitError(num, unit)
    return timedelta(seconds=num * factor)


def _item_id_before(content: str, position: int) -> str | None:
    window = content[max(0, position - _ITEM_ID_LOOKBEHIND) : position]
    match = _ITEM_ID_RE.search(window)
    return match.group("item_id") if match else None


def extract_item_ages(content: str) -> list[ItemAge]:
    """Return the age of every listed item in document order.

    Items are identified purely by their relative-age phrase. An unknown unit
    aborts the whole extraction so that a dropped phrase cannot hide an alert.
    """
    ages: list[ItemAge] = []
    for match in AGE_RE.finditer(content):
        num_raw = match.group("num")
        unit = match.group("unit")
        try:
            num = int(num_raw)
        except ValueError as exc:
            raise ExtractionError(f"error while parsing number {num_raw!r}: {exc}") from exc

        ages.append(
            ItemAge(
                age=parse_age(num, unit),
                raw=f"{num_raw} {unit} ago",
                item_id=_item_id_before(content, match.start()),
            )
        )
    return ages
