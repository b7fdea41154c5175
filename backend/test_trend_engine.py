import logging
import time
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from services.trend_engine import Analytics, TrendEngine, recompute

DAY0 = date(2025, 4, 1)


def day(n: int) -> date:
    return DAY0 + timedelta(days=n)


def habit(name, created=0, habit_id=None):
    # Created mid-morning; only the calendar day matters
    return SimpleNamespace(
        id=habit_id if habit_id is not None else name,
        name=name,
        creation_date=datetime.combine(day(created), datetime.min.time()).replace(hour=9, minute=30),
    )


def log(n, habits=None, mood="🔥", date_key=None):
    return SimpleNamespace(
        date=date_key if date_key is not None else day(n).isoformat(),
        habits=habits or {},
        mood=mood,
        note="",
        reflection="",
    )


def test_habit_created_today_without_log():
    result = recompute([habit("Read", created=6)], [], day(6))
    trend = result.trend_for("Read")
    assert trend.weekly_completion_percentage == 0
    assert trend.current_streak == 0
    assert trend.longest_streak == 0


def test_habit_without_logs_has_zero_stats():
    logs = [log(5, {"Other": True}), log(6, {"Other": True})]
    trend = recompute([habit("Read")], logs, day(6)).trend_for("Read")
    assert trend.longest_streak == 0
    assert trend.weekly_completion_percentage == 0


def test_no_habits_gives_zero_overall_stats():
    result = recompute([], [log(6, {"Read": True})], day(6))
    assert result.trends == ()
    assert result.overall.consistency_score == 0
    assert result.overall.longest_streak_across_habits == 0


def test_recompute_is_idempotent():
    habits = [habit("Read"), habit("Run", created=3)]
    logs = [log(n, {"Read": n % 2 == 0, "Run": True}, mood="⚡️") for n in range(7)]
    first = recompute(habits, logs, day(6))
    second = recompute(habits, logs, day(6))
    assert first == second


def test_inputs_are_not_mutated():
    logs = [log(6, {"Read": True}), log(5, {"Read": True})]
    order = [l.date for l in logs]
    recompute([habit("Read")], logs, day(6))
    assert [l.date for l in logs] == order
    assert logs[0].habits == {"Read": True}


def test_current_streak_counts_consecutive_days():
    logs = [log(n, {"Read": True}) for n in (3, 4, 5, 6)]
    assert recompute([habit("Read")], logs, day(6)).trend_for("Read").current_streak == 4


def test_current_streak_stops_at_incomplete_day():
    logs = [log(3, {"Read": True}), log(4, {"Read": False}), log(5, {"Read": True}), log(6, {"Read": True})]
    assert recompute([habit("Read")], logs, day(6)).trend_for("Read").current_streak == 2


def test_current_streak_stops_at_missing_log():
    logs = [log(3, {"Read": True}), log(5, {"Read": True}), log(6, {"Read": True})]
    assert recompute([habit("Read")], logs, day(6)).trend_for("Read").current_streak == 2


def test_current_streak_zero_when_reference_day_incomplete():
    logs = [log(5, {"Read": True}), log(6, {"Read": False})]
    assert recompute([habit("Read")], logs, day(6)).trend_for("Read").current_streak == 0


def test_current_streak_does_not_count_days_before_creation():
    # Logs predate the habit, e.g. a name reused after deleting the old habit
    logs = [log(n, {"Read": True}) for n in range(7)]
    trend = recompute([habit("Read", created=4)], logs, day(6)).trend_for("Read")
    assert trend.current_streak == 3
    assert trend.longest_streak == 3


def test_longest_streak_breaks_on_calendar_gap():
    logs = [log(n, {"Read": True}) for n in (1, 2, 3, 5, 6)]
    assert recompute([habit("Read")], logs, day(6)).trend_for("Read").longest_streak == 3


def test_longest_streak_breaks_on_incomplete_day():
    logs = [log(n, {"Read": n != 2}) for n in range(7)]
    assert recompute([habit("Read")], logs, day(6)).trend_for("Read").longest_streak == 4


def test_exercise_scenario():
    logs = [log(n, {"Exercise": True}) for n in (0, 1, 3, 4, 5, 6)]
    trend = recompute([habit("Exercise", created=0)], logs, day(6), window_days=7).trend_for("Exercise")
    assert trend.weekly_completion_percentage == pytest.approx(100 * 6 / 7)
    assert trend.current_streak == 4
    assert trend.longest_streak == 4


def test_weekly_completion_only_counts_days_since_creation():
    logs = [log(5, {"Run": True}), log(6, {"Run": True})]
    trend = recompute([habit("Run", created=5)], logs, day(6)).trend_for("Run")
    assert trend.weekly_completion_percentage == 100


def test_weekly_completion_ignores_days_outside_window():
    logs = [log(n, {"Read": True}) for n in range(0, 3)]
    trend = recompute([habit("Read")], logs, day(10)).trend_for("Read")
    # Window is day 4..10, nothing logged there
    assert trend.weekly_completion_percentage == 0
    assert trend.longest_streak == 3


def test_habit_created_after_reference_date():
    trend = recompute([habit("Later", created=10)], [log(6, {"Later": True})], day(6)).trend_for("Later")
    assert trend.weekly_completion_percentage == 0
    assert trend.current_streak == 0


def test_consistency_score_is_unweighted_mean():
    habits = [habit("Read"), habit("Run")]
    logs = [log(n, {"Read": True, "Run": n >= 6}) for n in range(7)]
    result = recompute(habits, logs, day(6))
    assert result.overall.consistency_score == pytest.approx((100 + 100 / 7) / 2)
    assert result.overall.longest_streak_across_habits == 7


def test_orphaned_habit_names_are_ignored():
    logs = [log(6, {"Old name": True, "Read": False})]
    result = recompute([habit("Read")], logs, day(6))
    assert result.warnings == ()
    assert result.trend_for("Read").weekly_completion_percentage == 0
    assert result.daily_completion[-1].completion_percentage == 0


def test_mood_histogram_sorted_by_symbol():
    moods = ["A", "A", "B", "A", "C", "B", "A"]
    logs = [log(n, mood=m) for n, m in enumerate(moods)]
    result = recompute([], logs, day(6))
    assert [(m.mood, m.count) for m in result.mood_frequencies] == [("A", 4), ("B", 2), ("C", 1)]


def test_mood_histogram_only_counts_window():
    logs = [log(0, mood="B"), log(9, mood="A"), log(10, mood="A")]
    result = recompute([], logs, day(10))
    assert [(m.mood, m.count) for m in result.mood_frequencies] == [("A", 2)]


def test_daily_completion_series():
    habits = [habit("Read"), habit("Run")]
    logs = [log(6, {"Read": True, "Run": False})]
    series = recompute(habits, logs, day(6)).daily_completion
    assert len(series) == 7
    assert series[0].date == day(0)
    assert series[-1].date == day(6)
    assert series[-1].completion_percentage == 50.0
    assert series[-2].completion_percentage == 0.0


def test_daily_completion_only_counts_active_habits():
    habits = [habit("Read", created=0), habit("Run", created=5)]
    logs = [log(n, {"Read": True}) for n in range(7)]
    series = recompute(habits, logs, day(6)).daily_completion
    assert series[4].completion_percentage == 100.0
    assert series[5].completion_percentage == 50.0


def test_daily_completion_is_zero_without_active_habits():
    series = recompute([habit("Read", created=5)], [log(0, {"Read": True})], day(6)).daily_completion
    assert [p.completion_percentage for p in series[:5]] == [0.0] * 5


def test_unparsable_dates_are_skipped_with_warning(caplog):
    logs = [
        log(0, {"Read": True}, date_key="not-a-date"),
        log(0, {"Read": True}, date_key="2025-4-6"),
        log(0, {"Read": True}, date_key="2025-02-30"),
        log(6, {"Read": True}),
    ]
    with caplog.at_level(logging.WARNING, logger="services.trend_engine"):
        result = recompute([habit("Read")], logs, day(6))
    assert len(result.warnings) == 3
    assert "unparsable" in caplog.text
    assert result.trend_for("Read").current_streak == 1


def test_duplicate_day_keeps_first_log():
    logs = [log(6, {"Read": True}, mood="A"), log(6, {"Read": False}, mood="B")]
    result = recompute([habit("Read")], logs, day(6))
    assert len(result.warnings) == 1
    assert result.trend_for("Read").current_streak == 1
    assert [m.mood for m in result.mood_frequencies] == ["A"]


def test_malformed_records_never_raise():
    logs = [
        SimpleNamespace(date=None, habits=None, mood=None),
        SimpleNamespace(date=day(6).isoformat(), habits=None, mood=None),
        SimpleNamespace(date=day(5).isoformat(), habits=["Read"], mood=3),
    ]
    habits = [SimpleNamespace(id=1, name=None, creation_date="garbage"), habit("Read")]
    result = recompute(habits, logs, day(6))
    assert result.mood_frequencies == ()
    assert all(t.current_streak == 0 for t in result.trends)
    assert len(result.warnings) == 2


def test_nameless_habit_is_left_out_of_results():
    habits = [habit("Read", habit_id=1), SimpleNamespace(id=2, name=None, creation_date=None)]
    logs = [log(n, {"Read": True}) for n in range(7)]
    result = recompute(habits, logs, day(6))
    assert [t.habit_id for t in result.trends] == [1]
    assert result.overall.consistency_score == 100.0
    assert result.daily_completion[-1].completion_percentage == 100.0
    assert len(result.warnings) == 1


def test_habit_with_unusable_creation_date_is_kept():
    habits = [SimpleNamespace(id=1, name="Read", creation_date="garbage")]
    result = recompute(habits, [log(n, {"Read": True}) for n in range(7)], day(6))
    assert result.trend_for(1).current_streak == 7
    assert len(result.warnings) == 1


@pytest.fixture
def tokyo_time(monkeypatch):
    # UTC+9 with no DST; a POSIX TZ string needs no tz database
    monkeypatch.setenv("TZ", "JST-9")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
def test_aware_timestamps_use_local_day(tokyo_time):
    # 20:00 UTC on Apr 3 is already Apr 4 (day 3) in Tokyo
    created = SimpleNamespace(id=1, name="Read", creation_date=datetime(2025, 4, 3, 20, 0, tzinfo=timezone.utc))
    logs = [log(n, {"Read": True}) for n in (3, 4, 5, 6)]
    # 16:00 UTC on Apr 6 is Apr 7 (day 6) in Tokyo
    result = recompute([created], logs, datetime(2025, 4, 6, 16, 0, tzinfo=timezone.utc))
    assert result.reference_date == day(6)
    trend = result.trend_for(1)
    # Possible days are day 3..6 only; the UTC creation day would add day 2
    assert trend.weekly_completion_percentage == 100.0
    assert trend.current_streak == 4
    assert result.daily_completion[2].completion_percentage == 0.0


def test_degenerate_window():
    result = recompute([habit("Read")], [log(6, {"Read": True})], day(6), window_days=0)
    assert result.trend_for("Read").weekly_completion_percentage == 0
    assert result.trend_for("Read").current_streak == 1
    assert result.mood_frequencies == ()
    assert result.daily_completion == ()


def test_custom_window_length():
    logs = [log(n, {"Read": True}) for n in range(20, 30)]
    result = recompute([habit("Read")], logs, day(29), window_days=30)
    assert len(result.daily_completion) == 30
    assert result.trend_for("Read").weekly_completion_percentage == pytest.approx(100 * 10 / 30)


def test_reference_date_accepts_datetime_and_day_key():
    logs = [log(6, {"Read": True})]
    from_key = recompute([habit("Read")], logs, day(6).isoformat())
    from_datetime = recompute([habit("Read")], logs, datetime(2025, 4, 7, 23, 59))
    assert from_key == from_datetime
    assert from_key.reference_date == day(6)


def test_invalid_reference_date_is_a_caller_error():
    with pytest.raises(TypeError):
        recompute([], [], "yesterday")


def test_analytics_serializes_to_json():
    result = TrendEngine.recompute([habit("Read", habit_id=1)], [log(6, {"Read": True}, mood="⚡️")], day(6))
    payload = result.model_dump(mode="json")
    assert payload["reference_date"] == "2025-04-07"
    assert payload["trends"][0]["habit_id"] == 1
    assert payload["mood_frequencies"] == [{"mood": "⚡️", "count": 1}]
    assert isinstance(result, Analytics)
