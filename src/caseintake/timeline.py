from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Iterator

from caseintake.clock import Clock, as_utc
from caseintake.config import settings
from caseintake.display import EVENT_TYPES, event_style
from caseintake.types import EventType, TimelineEvent

_ONE_DAY = timedelta(days=1)


class CaseTimeline:
    """Events for one case, keyed by id in insertion order."""

    def __init__(self, timeline_id: str, case_id: str, events: Iterable[TimelineEvent] = ()) -> None:
        self.id = timeline_id
        self.case_id = case_id
        self._events: dict[str, TimelineEvent] = {}
        for event in events:
            self.add_event(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[TimelineEvent]:
        return iter(self._events.values())

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    def get(self, event_id: str) -> TimelineEvent | None:
        return self._events.get(event_id)

    def add_event(self, event: TimelineEvent) -> None:
        if event.id in self._events:
            raise ValueError(f"Timeline {self.id} already has an event with id {event.id}")
        self._events[event.id] = event

    def replace_event(self, event: TimelineEvent) -> None:
        """Corrective edit; the event keeps its original insertion position."""

        if event.id not in self._events:
            raise KeyError(event.id)
        self._events[event.id] = event

    def sorted_events(self) -> list[TimelineEvent]:
        return sort_events(self._events.values())


@dataclass(slots=True)
class TimelineEntry:
    event: TimelineEvent
    is_upcoming: bool
    label: str
    style: str
    icon: str | None
    needs_action: bool


def sort_events(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    # sorted() is stable, so equal dates keep their input order.
    return sorted(events, key=lambda event: as_utc(event.date))


def is_upcoming(event: TimelineEvent, now: datetime) -> bool:
    return as_utc(event.date) > as_utc(now)


def format_short_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def format_event_date(
    date: datetime,
    now: datetime,
    *,
    upcoming_window_days: int | None = None,
    recent_window_days: int | None = None,
) -> str:
    """Relative label for recent/near events, absolute date otherwise."""

    upcoming_window = settings.upcoming_window_days if upcoming_window_days is None else upcoming_window_days
    recent_window = settings.recent_window_days if recent_window_days is None else recent_window_days

    date = as_utc(date)
    now = as_utc(now)
    diff_days = math.ceil(abs(date - now) / _ONE_DAY)
    plural = "" if diff_days == 1 else "s"

    if date > now:
        if diff_days <= upcoming_window:
            return f"In {diff_days} day{plural}"
        return f"{format_short_date(date)} (Upcoming)"
    if diff_days <= recent_window:
        return f"{diff_days} day{plural} ago"
    return format_short_date(date)


def build_timeline_view(timeline: CaseTimeline | Iterable[TimelineEvent], clock: Clock) -> list[TimelineEntry]:
    now = clock.now()
    entries: list[TimelineEntry] = []
    for event in sort_events(timeline):
        upcoming = is_upcoming(event, now)
        entries.append(
            TimelineEntry(
                event=event,
                is_upcoming=upcoming,
                label=format_event_date(event.date, now),
                style=event_style(event.type, event.importance),
                icon="clock" if upcoming else EVENT_TYPES[event.type].icon,
                needs_action=upcoming and event.type is EventType.DEADLINE,
            )
        )
    return entries


def upcoming_deadlines(timeline: CaseTimeline | Iterable[TimelineEvent], clock: Clock) -> list[TimelineEvent]:
    now = clock.now()
    return [
        event
        for event in sort_events(timeline)
        if event.type is EventType.DEADLINE and is_upcoming(event, now)
    ]
