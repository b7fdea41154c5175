"""
trend_engine.py — Habit Trends & Streaks
Pure analytics over a snapshot of habits and daily logs: rolling completion
percentage, current/longest streaks, consistency score, mood histogram and the
daily completion series used for charting. No I/O, inputs are never mutated.
"""

import datetime as dt
import logging
from collections import Counter
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from config import TREND_WINDOW_DAYS
from daykeys import parse_day_key, to_local_day

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = TREND_WINDOW_DAYS


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class HabitTrend(_Frozen):
    habit_id: int | str | None = None
    name: str | None = None
    weekly_completion_percentage: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0


class OverallStats(_Frozen):
    # Unweighted mean of the habits' weekly percentages
    consistency_score: float = 0.0
    longest_streak_across_habits: int = 0


class MoodFrequency(_Frozen):
    mood: str
    count: int


class DailyCompletionPoint(_Frozen):
    date: dt.date
    completion_percentage: float


class Analytics(_Frozen):
    reference_date: dt.date
    window_days: int
    trends: tuple[HabitTrend, ...] = ()
    overall: OverallStats = OverallStats()
    mood_frequencies: tuple[MoodFrequency, ...] = ()
    daily_completion: tuple[DailyCompletionPoint, ...] = ()
    warnings: tuple[str, ...] = ()

    def trend_for(self, habit_id) -> HabitTrend | None:
        for trend in self.trends:
            if trend.habit_id == habit_id:
                return trend
        return None


class TrendEngine:

    @staticmethod
    def recompute(habits, logs, reference_date, window_days: int = DEFAULT_WINDOW_DAYS) -> Analytics:
        """
        Full recomputation over the given snapshot. `habits` need `id`, `name`
        and `creation_date`; `logs` need `date` (YYYY-MM-DD), `habits`
        (name -> bool) and `mood`. Malformed records are skipped and reported
        in `Analytics.warnings`; nothing here raises for bad data.
        """
        reference = TrendEngine._reference_day(reference_date)
        window_days = int(window_days)
        warnings: list[str] = []

        by_day = TrendEngine._index_logs(logs, warnings)
        window = TrendEngine._window(reference, window_days)
        rows = TrendEngine._habit_rows(habits, warnings)

        trends = []
        for habit_id, name, created in rows:
            weekly = TrendEngine.weekly_completion(name, created, by_day, window)
            current = TrendEngine.current_streak(name, created, by_day, reference)
            longest = TrendEngine.longest_streak(name, created, by_day)
            logger.debug(f"Habit '{name}': weekly={weekly:.1f}% current={current} longest={longest}")
            trends.append(HabitTrend(
                habit_id=habit_id,
                name=name,
                weekly_completion_percentage=weekly,
                current_streak=current,
                longest_streak=longest,
            ))

        overall = OverallStats(
            consistency_score=(
                sum(t.weekly_completion_percentage for t in trends) / len(trends) if trends else 0.0
            ),
            longest_streak_across_habits=max((t.longest_streak for t in trends), default=0),
        )

        return Analytics(
            reference_date=reference,
            window_days=window_days,
            trends=tuple(trends),
            overall=overall,
            mood_frequencies=TrendEngine.mood_frequencies(by_day, window),
            daily_completion=TrendEngine.daily_completion(rows, by_day, window),
            warnings=tuple(warnings),
        )

    # ------------------------------------------------------------------
    @staticmethod
    def weekly_completion(name, created: dt.date, by_day: dict, window: list[dt.date]) -> float:
        """Completed / possible days in the window, ignoring days before creation."""
        possible = [day for day in window if day >= created]
        if not possible:
            return 0.0
        completed = sum(1 for day in possible if _completed(by_day.get(day), name))
        return 100.0 * completed / len(possible)

    @staticmethod
    def current_streak(name, created: dt.date, by_day: dict, reference: dt.date) -> int:
        """Consecutive completed days walking back from the reference day."""
        if not by_day:
            return 0
        # Nothing can be completed before the first logged day either
        floor = max(created, next(iter(by_day)))
        streak = 0
        for offset in range((reference - floor).days + 1):
            day = reference - dt.timedelta(days=offset)
            if not _completed(by_day.get(day), name):
                break
            streak += 1
        return streak

    @staticmethod
    def longest_streak(name, created: dt.date, by_day: dict) -> int:
        """Longest run of consecutive logged-and-completed days since creation."""
        longest = running = 0
        previous = None
        for day, log in by_day.items():
            if day < created:
                continue
            if previous is not None and (day - previous).days > 1:
                running = 0
            if _completed(log, name):
                running += 1
                longest = max(longest, running)
            else:
                running = 0
            previous = day
        return longest

    @staticmethod
    def mood_frequencies(by_day: dict, window: list[dt.date]) -> tuple[MoodFrequency, ...]:
        counts = Counter()
        for day in window:
            log = by_day.get(day)
            if log is None:
                continue
            mood = getattr(log, "mood", None)
            if isinstance(mood, str) and mood:
                counts[mood] += 1
        return tuple(MoodFrequency(mood=mood, count=count) for mood, count in sorted(counts.items()))

    @staticmethod
    def daily_completion(rows, by_day: dict, window: list[dt.date]) -> tuple[DailyCompletionPoint, ...]:
        points = []
        for day in window:
            active = [name for _, name, created in rows if created <= day]
            if not active:
                points.append(DailyCompletionPoint(date=day, completion_percentage=0.0))
                continue
            log = by_day.get(day)
            done = sum(1 for name in active if _completed(log, name))
            points.append(DailyCompletionPoint(date=day, completion_percentage=100.0 * done / len(active)))
        return tuple(points)

    # ------------------------------------------------------------------
    @staticmethod
    def _reference_day(value) -> dt.date:
        if isinstance(value, dt.date):
            return to_local_day(value)
        parsed = parse_day_key(value)
        if parsed is None:
            raise TypeError(f"reference_date must be a date, datetime or YYYY-MM-DD string, got {value!r}")
        return parsed

    @staticmethod
    def _window(reference: dt.date, window_days: int) -> list[dt.date]:
        """The `window_days` days ending at `reference`, oldest first."""
        if window_days <= 0:
            return []
        span = min(window_days - 1, (reference - dt.date.min).days)
        return [reference - dt.timedelta(days=offset) for offset in range(span, -1, -1)]

    @staticmethod
    def _index_logs(logs, warnings: list[str]) -> dict:
        """Day -> log in ascending day order. First log wins on duplicate days."""
        by_day = {}
        for log in logs or ():
            raw = getattr(log, "date", None)
            day = parse_day_key(raw)
            if day is None:
                _warn(warnings, f"Skipping log with unparsable date {raw!r}")
                continue
            if day in by_day:
                _warn(warnings, f"Skipping duplicate log for {raw}")
                continue
            by_day[day] = log
        return dict(sorted(by_day.items()))

    @staticmethod
    def _habit_rows(habits, warnings: list[str]) -> list[tuple]:
        """(id, name, creation day) per habit. Nameless habits are skipped; an unusable creation date means no lower bound."""
        rows = []
        for habit in habits or ():
            name = getattr(habit, "name", None)
            if not isinstance(name, str):
                _warn(warnings, f"Habit {getattr(habit, 'id', None)!r} has no usable name")
                continue
            created = _creation_day(getattr(habit, "creation_date", None))
            if created is None:
                _warn(warnings, f"Habit {name!r} has an unusable creation date")
                created = dt.date.min
            rows.append((getattr(habit, "id", None), name, created))
        return rows


recompute = TrendEngine.recompute


def _completed(log, name) -> bool:
    if log is None or name is None:
        return False
    mapping = getattr(log, "habits", None)
    if not isinstance(mapping, Mapping):
        return False
    return mapping.get(name) is True


def _creation_day(value) -> dt.date | None:
    if isinstance(value, dt.date):
        return to_local_day(value)
    if isinstance(value, str):
        try:
            return to_local_day(dt.datetime.fromisoformat(value))
        except ValueError:
            return None
    return None


def _warn(warnings: list[str], message: str):
    logger.warning(message)
    warnings.append(message)
