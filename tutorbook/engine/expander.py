"""Expansion of weekly availability rules into concrete one-hour slots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, Iterator, Protocol

from tutorbook.utils.utc import iso_instant, local_timezone


SLOT_DURATION = timedelta(hours=1)
HORIZON_DAYS = 42


class WeeklyRule(Protocol):
    day_of_week: int
    start_time: time
    end_time: time


@dataclass(frozen=True)
class SlotInstance:
    tutor_id: str
    start: datetime
    end: datetime
    is_booked: bool | None = None

    @property
    def key(self) -> str:
        return iso_instant(self.start)


def day_of_week(day: date) -> int:
    """Weekday of a date counted from 0 = Sunday."""

    return (day.weekday() + 1) % 7


def find_rule(rules: Iterable[WeeklyRule], day: date) -> WeeklyRule | None:
    weekday = day_of_week(day)
    return next((rule for rule in rules if rule.day_of_week == weekday), None)


def partition_day(tutor_id: str, day: date, rule: WeeklyRule, tz: tzinfo) -> Iterator[SlotInstance]:
    """Split the rule's window on the given day into one-hour slots, dropping a shorter remainder."""

    start = datetime.combine(day, rule.start_time, tz).astimezone(timezone.utc)
    end = datetime.combine(day, rule.end_time, tz).astimezone(timezone.utc)
    while start + SLOT_DURATION <= end:
        yield SlotInstance(tutor_id=tutor_id, start=start, end=start + SLOT_DURATION)
        start += SLOT_DURATION


def expand_availability(
    tutor_id: str,
    rules: Iterable[WeeklyRule],
    now: datetime,
    horizon_days: int = HORIZON_DAYS,
    tz: tzinfo | None = None,
) -> Iterator[SlotInstance]:
    """
    Yield the bookable slots of a tutor for the next `horizon_days` days, today included.

    Only the first rule matching a weekday is used. Slots starting before `now` are skipped.
    """

    tz = tz or local_timezone()
    rules = list(rules)
    today = now.astimezone(tz).date()
    for offset in range(horizon_days):
        day = today + timedelta(days=offset)
        if (rule := find_rule(rules, day)) is None:
            continue

        for slot in partition_day(tutor_id, day, rule, tz):
            if slot.start >= now:
                yield slot
