# progress/tests/test_performance.py

import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from progress.services.performance import (
    UNKNOWN_EXERCISE,
    PRRecord,
    calculate_growth_rate,
    calculate_growth_rate_in_period,
    extract_chart_data,
    extract_pr_from_logs,
    get_intensity_stats,
    get_monthly_frequency,
    get_recent_growth_trend,
)

START = datetime(2026, 1, 1, 9, 0, tzinfo=dt_timezone.utc)


def _log(library, day, weight, reps=None, volume=None, content=None):
    data = dict(content or {})
    if reps is not None:
        data["reps"] = reps
    return SimpleNamespace(
        id=uuid.uuid4(),
        library_id=library.id if library else None,
        library=library,
        log_date=START + timedelta(days=day),
        max_weight=weight,
        total_volume=volume,
        content=data,
    )


def _library(title="Bench Press", category="Chest"):
    return SimpleNamespace(id=uuid.uuid4(), title=title, category=category)


class PerformanceAnalyzerTests(SimpleTestCase):

    def test_groups_by_exercise_and_sorts_history(self):
        bench, squat = _library(), _library("Back Squat", "Legs")
        logs = [
            _log(bench, 2, Decimal("80.00"), reps=5),
            _log(squat, 1, Decimal("120.00")),
            _log(bench, 0, Decimal("70.00"), reps=8),
        ]

        progress = extract_pr_from_logs(logs)

        self.assertEqual(set(progress), {str(bench.id), str(squat.id)})
        bench_progress = progress[str(bench.id)]
        self.assertEqual([r.weight for r in bench_progress.history], [70.0, 80.0])
        self.assertEqual(bench_progress.current_pr, 80.0)
        self.assertEqual(bench_progress.total_workouts, 2)
        self.assertEqual(bench_progress.history[0].reps, 8.0)
        self.assertEqual(bench_progress.category, "Chest")

    def test_current_pr_is_max_not_latest(self):
        bench = _library()
        logs = [_log(bench, 0, 100), _log(bench, 1, 90)]

        self.assertEqual(extract_pr_from_logs(logs)[str(bench.id)].current_pr, 100.0)

    def test_filter_by_exercise(self):
        bench, squat = _library(), _library("Back Squat")
        logs = [_log(bench, 0, 60), _log(squat, 0, 100)]

        progress = extract_pr_from_logs(logs, exercise_id=squat.id)

        self.assertEqual(list(progress), [str(squat.id)])

    def test_logs_without_library_are_skipped(self):
        self.assertEqual(extract_pr_from_logs([_log(None, 0, 50)]), {})

    def test_missing_numbers_count_as_zero(self):
        bench = _library()
        progress = extract_pr_from_logs([_log(bench, 0, None, content={"reps": "abc"})])

        record = progress[str(bench.id)].history[0]
        self.assertEqual((record.weight, record.reps, record.volume), (0.0, 0.0, 0.0))

    def test_exercise_name_prefers_logged_name(self):
        bench = _library(title="")
        progress = extract_pr_from_logs([_log(bench, 0, 50, content={"exerciseName": "Paused Bench"})])
        self.assertEqual(progress[str(bench.id)].exercise_name, "Paused Bench")

        progress = extract_pr_from_logs([_log(bench, 0, 50)])
        self.assertEqual(progress[str(bench.id)].exercise_name, UNKNOWN_EXERCISE)

    def test_growth_rate(self):
        history = [
            PRRecord(date=START, weight=100, reps=5, volume=0, log_id="a"),
            PRRecord(date=START, weight=125, reps=5, volume=0, log_id="b"),
        ]
        self.assertEqual(calculate_growth_rate(history), 25.0)
        self.assertEqual(calculate_growth_rate([]), 0.0)

        history[0].weight = 0
        self.assertEqual(calculate_growth_rate(history), 0.0)

    def test_chart_data(self):
        history = [PRRecord(date=START, weight=100, reps=5, volume=500, log_id="a")]

        self.assertEqual(extract_chart_data(history), [{"date": "2026-01-01", "weight": 100, "reps": 5}])

    def test_to_dict_includes_chart(self):
        bench = _library()
        data = extract_pr_from_logs([_log(bench, 0, 60, reps=10)])[str(bench.id)].to_dict()

        self.assertEqual(data["exercise_id"], str(bench.id))
        self.assertEqual(len(data["chart"]), 1)
        self.assertEqual(data["history"][0]["weight"], 60.0)
        self.assertEqual(data["trend"]["trend"], "STABLE")


def _record(day, weight):
    return PRRecord(date=START + timedelta(days=day), weight=weight, reps=0, volume=0, log_id=str(day))


class TrendAndFrequencyTests(SimpleTestCase):

    def test_growth_rate_in_period(self):
        history = [_record(0, 50), _record(10, 100), _record(20, 110), _record(40, 200)]

        rate = calculate_growth_rate_in_period(history, START + timedelta(days=5), START + timedelta(days=25))

        self.assertEqual(rate, 10.0)

    def test_recent_trend_up_and_down(self):
        now = START + timedelta(days=60)

        up = get_recent_growth_trend([_record(0, 100), _record(30, 110)], now=now)
        self.assertEqual(up["trend"], "UP")
        self.assertAlmostEqual(up["change_percent"], 10.0)
        self.assertEqual((up["previous_weight"], up["current_weight"]), (100, 110))

        down = get_recent_growth_trend([_record(0, 100), _record(30, 90)], now=now)
        self.assertEqual(down["trend"], "DOWN")

        flat = get_recent_growth_trend([_record(0, 100), _record(30, 103)], now=now)
        self.assertEqual(flat["trend"], "STABLE")

    def test_recent_trend_ignores_old_records(self):
        # Only the last record falls inside the 3-month window
        history = [_record(0, 60), _record(200, 100)]

        trend = get_recent_growth_trend(history, months=3, now=START + timedelta(days=210))

        self.assertEqual(trend["trend"], "STABLE")
        self.assertEqual(trend["change_percent"], 0.0)
        self.assertEqual((trend["previous_weight"], trend["current_weight"]), (60, 100))

    def test_intensity_stats(self):
        logs = [SimpleNamespace(intensity=value) for value in ("LOW", "HIGH", "HIGH", None)]

        self.assertEqual(get_intensity_stats(logs), {"low": 1, "medium": 0, "high": 2, "total": 4})

    def test_monthly_frequency_newest_first(self):
        logs = [
            SimpleNamespace(log_date=START + timedelta(days=day))
            for day in (0, 3, 35, 70, 71, 72)
        ]

        frequency = get_monthly_frequency(logs, months=2)

        self.assertEqual(frequency, [
            {"month": "2026-03", "count": 3},
            {"month": "2026-02", "count": 1},
        ])
