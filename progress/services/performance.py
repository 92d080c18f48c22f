# progress/services/performance.py

"""
PERFORMANCE ANALYZER

Personal-record extraction from workout logs, grouped per exercise
(library entry).
"""

from calendar import monthrange
from collections import Counter
from dataclasses import dataclass, field, asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.utils import timezone

UNKNOWN_EXERCISE = "Unknown Exercise"

# Percent change that counts as a real trend
TREND_THRESHOLD = 5


@dataclass
class PRRecord:
    date: datetime
    weight: float
    reps: float
    volume: float
    log_id: str


@dataclass
class ExerciseProgress:
    exercise_id: str
    exercise_name: str
    category: Optional[str]
    current_pr: float
    history: List[PRRecord] = field(default_factory=list)
    growth_rate: float = 0.0
    total_workouts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["chart"] = extract_chart_data(self.history)
        data["trend"] = get_recent_growth_trend(self.history)
        return data


def _number(value) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(Decimal(str(value)))
    except (ArithmeticError, ValueError):
        return 0.0


def calculate_growth_rate(history: List[PRRecord]) -> float:
    """Percent change from the first to the last record; 0 when first weight is 0."""
    if not history:
        return 0.0
    first = history[0].weight
    last = history[-1].weight
    if first <= 0:
        return 0.0
    return (last - first) / first * 100


def _exercise_name(first_log) -> str:
    content = first_log.content if isinstance(first_log.content, dict) else {}
    name = content.get("exerciseName")
    if name:
        return name
    library = getattr(first_log, "library", None)
    return getattr(library, "title", None) or UNKNOWN_EXERCISE


def extract_pr_from_logs(logs: Iterable, exercise_id=None) -> Dict[str, ExerciseProgress]:
    grouped: Dict[str, list] = {}
    for log in logs:
        if not log.library_id:
            continue
        key = str(log.library_id)
        if exercise_id is not None and key != str(exercise_id):
            continue
        grouped.setdefault(key, []).append(log)

    progress = {}
    for library_id, exercise_logs in grouped.items():
        by_date = sorted(exercise_logs, key=lambda log: log.log_date)

        history = []
        for log in by_date:
            content = log.content if isinstance(log.content, dict) else {}
            history.append(PRRecord(
                date=log.log_date,
                weight=_number(log.max_weight),
                reps=_number(content.get("reps")),
                volume=_number(log.total_volume),
                log_id=str(log.id),
            ))

        library = getattr(by_date[0], "library", None)
        progress[library_id] = ExerciseProgress(
            exercise_id=library_id,
            exercise_name=_exercise_name(by_date[0]),
            category=getattr(library, "category", None),
            current_pr=max(record.weight for record in history),
            history=history,
            growth_rate=calculate_growth_rate(history),
            total_workouts=len(exercise_logs),
        )

    return progress


def extract_chart_data(history: List[PRRecord]) -> List[Dict[str, Any]]:
    return [
        {
            "date": record.date.strftime("%Y-%m-%d"),
            "weight": record.weight,
            "reps": record.reps,
        }
        for record in history
    ]


def calculate_growth_rate_in_period(history: List[PRRecord], start: datetime, end: datetime) -> float:
    return calculate_growth_rate([r for r in history if start <= r.date <= end])


def _months_before(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def get_recent_growth_trend(history: List[PRRecord], months: int = 3,
                            now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    UP / DOWN when the weight moved more than TREND_THRESHOLD percent
    over the last `months`, STABLE otherwise (or with fewer than two records).
    """
    cutoff = _months_before(now or timezone.now(), months)
    recent = [r for r in history if r.date >= cutoff]

    if len(recent) < 2:
        return {
            "trend": "STABLE",
            "change_percent": 0.0,
            "current_weight": history[-1].weight if history else 0.0,
            "previous_weight": history[0].weight if history else 0.0,
        }

    previous = recent[0].weight
    current = recent[-1].weight
    change = (current - previous) / previous * 100 if previous > 0 else 0.0

    trend = "STABLE"
    if change > TREND_THRESHOLD:
        trend = "UP"
    elif change < -TREND_THRESHOLD:
        trend = "DOWN"

    return {
        "trend": trend,
        "change_percent": change,
        "current_weight": current,
        "previous_weight": previous,
    }


def get_intensity_stats(logs: Iterable) -> Dict[str, int]:
    logs = list(logs)
    stats = {"low": 0, "medium": 0, "high": 0, "total": len(logs)}
    for log in logs:
        key = (log.intensity or "").lower()
        if key in stats and key != "total":
            stats[key] += 1
    return stats


def get_monthly_frequency(logs: Iterable, months: int = 6) -> List[Dict[str, Any]]:
    """Workout counts per YYYY-MM, newest month first."""
    counts = Counter(log.log_date.strftime("%Y-%m") for log in logs)
    return [
        {"month": month, "count": counts[month]}
        for month in sorted(counts, reverse=True)[:months]
    ]
