"""
Display metrics derived from the raw Vitalz records.

Only the first record of each fetched sequence is used; the API returns at
most one authoritative sleep/score row per user per call.
"""
import math
import re
from datetime import datetime
from typing import Any, Sequence

from app.models.vitalz import ScoreRecord, SleepRecord, StatisticsSample

NOT_AVAILABLE = "N/A"

# (stage name, SleepRecord attribute, chart colour)
SLEEP_STAGES = [
    ("Deep", "deep", "#00D4FF"),
    ("Light", "light", "#A100F2"),
    ("Awake", "awake", "#FF6666"),
]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

DEFAULT_SLEEP = SleepRecord(
    TotalTimeAsleep="0",
    Deep="0",
    Light="0",
    Awake="0",
    SleepOnset="",
    WakeUpTime="",
)
DEFAULT_SCORE = ScoreRecord(VitalzScore=0, ScoreType="", Date="")


def first_sleep(records: Sequence[SleepRecord]) -> SleepRecord:
    return records[0] if records else DEFAULT_SLEEP


def first_score(records: Sequence[ScoreRecord]) -> ScoreRecord:
    return records[0] if records else DEFAULT_SCORE


def parse_int(value: Any) -> int | None:
    """
    Parse the leading integer of a value the way the API's numeric text is
    meant to be read: "450" -> 450, "12.9" -> 12, " 7 min" -> 7, "abc" -> None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def _percentage(value: int, total: int) -> str:
    if total <= 0:
        return "0.00"
    return f"{value / total * 100:.2f}"


def _parsed_stages(record: SleepRecord) -> list[tuple[str, int | None, str]]:
    return [(name, parse_int(getattr(record, attr)), color) for name, attr, color in SLEEP_STAGES]


def stage_percentages(record: SleepRecord) -> dict[str, str]:
    """
    Percentage of the parseable total for every stage. Stages that do not
    parse count as "0.00" and are left out of the total.
    """
    stages = _parsed_stages(record)
    total = sum(value for _, value, _ in stages if value is not None)
    return {
        name: _percentage(value, total) if value is not None else "0.00"
        for name, value, _ in stages
    }


def sleep_breakdown(record: SleepRecord) -> list[dict[str, Any]]:
    """Pie chart slices for the parseable sleep stages."""
    slices = [(name, value, color) for name, value, color in _parsed_stages(record) if value is not None]
    total = sum(value for _, value, _ in slices)

    breakdown = []
    for name, value, color in slices:
        percentage = _percentage(value, total)
        breakdown.append(
            {
                "name": name,
                "value": value,
                "color": color,
                "percentage": percentage,
                "title": f"{name}: {percentage}%",
            }
        )
    return breakdown


def total_sleep_hours(seconds: Any) -> int:
    """
    Whole hours of sleep, rounded to the nearest hour with halves going up
    (27000 s -> 7.5 h -> 8). Missing or unparseable input gives 0.
    """
    parsed = parse_int(seconds)
    if parsed is None:
        return 0
    return math.floor(parsed / 3600 + 0.5)


def _parse_iso8601(dt_str: str | None) -> datetime | None:
    if not dt_str or not isinstance(dt_str, str):
        return None
    try:
        if dt_str.endswith("Z"):
            dt_str = dt_str.replace("Z", "+00:00")
        return datetime.fromisoformat(dt_str)
    except ValueError:
        return None


def format_time_of_day(timestamp: str | None) -> str:
    """Localized time of day for an ISO timestamp, or "N/A"."""
    dt = _parse_iso8601(timestamp)
    if dt is None:
        return NOT_AVAILABLE
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%X")


def score_display(record: ScoreRecord) -> dict[str, Any]:
    score = record.vitalz_score
    return {
        "score": score,
        # progress bars are drawn on a 0-100 scale
        "progress": min(max(float(score), 0.0), 100.0),
        "score_type": record.score_type or NOT_AVAILABLE,
        "date": record.date,
    }


def heart_rate_series(samples: Sequence[StatisticsSample]) -> list[dict[str, Any]]:
    return [
        {
            "time": s.time,
            "hr": s.hr,
            "hrv": s.hrv,
            "oxygen_saturation": s.oxygen_saturation,
        }
        for s in samples
    ]
