from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterator


@dataclass(frozen=True)
class TempDiffRecord:
    issue_time: str
    index: int
    warning: str


@dataclass(frozen=True)
class PeakTempDiff:
    index: int = 0
    warning: str = ""
    found: bool = False


def iter_records(payload: dict) -> Iterator[TempDiffRecord]:
    """Yield usable records in town-then-time order.

    Records whose advisory index is missing or not an integer are dropped here,
    so neither search pass ever sees them.
    """
    for town in payload.get("towns") or []:
        for raw in town.get("records") or []:
            index = parse_int(raw.get("index"))
            if index is None:
                continue
            yield TempDiffRecord(
                issue_time=str(raw.get("issue_time") or ""),
                index=index,
                warning=str(raw.get("warning") or ""),
            )


def reduce_peak(records: list[TempDiffRecord], predicate: Callable[[TempDiffRecord], bool]) -> PeakTempDiff:
    peak = PeakTempDiff()
    for record in records:
        if not predicate(record):
            continue
        # strict ">" keeps the earliest record on ties
        if not peak.found or record.index > peak.index:
            peak = PeakTempDiff(index=record.index, warning=record.warning, found=True)
    return peak


def matches_day(day: date) -> Callable[[TempDiffRecord], bool]:
    prefix = day.isoformat()
    return lambda record: record.issue_time[:10] == prefix


def any_day(record: TempDiffRecord) -> bool:
    return True


def extract_peak(payload: dict, today: date) -> PeakTempDiff:
    records = list(iter_records(payload))
    peak = reduce_peak(records, matches_day(today))
    if peak.found:
        return peak
    return reduce_peak(records, any_day)


def parse_int(value: object) -> int | None:
    """Integer reading from a CWA value, or None.

    Accepts ints, integral floats and their string forms (" 28 ", "28.0").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None
