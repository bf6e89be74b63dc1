"""
Visit calendar: recurring-visit expansion and event materialization.

Recurring visits arrive from the backend as a single row carrying
`recurrence_type`, `recurrence_interval`, `recurrence_days_of_week` and
`recurrence_end_date`. The calendar expands each one into concrete
instances inside the visible window before turning visits into events.
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, List, Iterable, Iterator

from pydantic import BaseModel

from .schemas import Visit, User, UserRole, RecurrenceType

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(17, 0)


class CalendarEvent(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    status: str
    resource_id: Optional[str] = None
    is_recurring: bool = False
    visit: Visit


# ==================== Date helpers ====================

def parse_date(value: Optional[str]) -> Optional[date]:
    """Date part of an ISO date/datetime string, or None"""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_time(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    try:
        return time.fromisoformat(str(value)[:8])
    except ValueError:
        return None


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of shorter months"""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def js_weekday(day: date) -> int:
    """Weekday numbered 0 = Sunday ... 6 = Saturday"""
    return (day.weekday() + 1) % 7


def week_start(day: date) -> date:
    """Sunday starting the week containing `day`"""
    return day - timedelta(days=js_weekday(day))


def month_range(day: date):
    """First and last day of the month containing `day`"""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def shift_month(day: date, months: int) -> date:
    return add_months(day.replace(day=1), months)


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"visits-calendar-{today.isoformat()}.ics"


# ==================== Recurrence ====================

def _recurrence(visit: Visit) -> str:
    rtype = visit.recurrence_type
    return getattr(rtype, "value", rtype) or RecurrenceType.NONE.value


def _interval(visit: Visit) -> int:
    interval = visit.recurrence_interval or 1
    return interval if interval > 0 else 1


def next_occurrence(current: date, visit: Visit) -> date:
    """Next date in the visit's series after `current`"""
    rtype = _recurrence(visit)
    interval = _interval(visit)

    if rtype == RecurrenceType.DAILY.value:
        return current + timedelta(days=interval)
    if rtype == RecurrenceType.WEEKLY.value:
        return current + timedelta(weeks=interval)
    if rtype == RecurrenceType.MONTHLY.value:
        return add_months(current, interval)
    return current + timedelta(days=1)


def _series_dates(original: date, last: date, visit: Visit) -> Iterator[date]:
    rtype = _recurrence(visit)
    interval = _interval(visit)
    days_of_week = visit.recurrence_days_of_week

    if rtype == RecurrenceType.WEEKLY.value and days_of_week:
        wanted = set(days_of_week)
        first_week = week_start(original)
        current = original + timedelta(days=1)
        while current <= last:
            weeks_in = (week_start(current) - first_week).days // 7
            if js_weekday(current) in wanted and weeks_in % interval == 0:
                yield current
            current += timedelta(days=1)
        return

    if rtype == RecurrenceType.MONTHLY.value:
        # count from the original so a 31st does not drift after February
        step = 1
        current = add_months(original, interval)
        while current <= last:
            yield current
            step += 1
            current = add_months(original, interval * step)
        return

    current = next_occurrence(original, visit)
    while current <= last:
        yield current
        current = next_occurrence(current, visit)


def _instance(visit: Visit, day: date) -> Visit:
    stamp = day.isoformat()
    return visit.model_copy(update={
        "id": f"{visit.id}-{stamp}",
        "scheduled_date": stamp,
        "is_recurring_instance": True,
        "original_visit_id": visit.id,
    })


def expand_recurring_visits(visits: Iterable[Visit], start: date, end: date) -> List[Visit]:
    """
    Original visits plus one generated instance per recurrence date in
    [start, end]. The original occurrence itself is never duplicated.
    """
    expanded = []

    for visit in visits:
        expanded.append(visit)

        if _recurrence(visit) == RecurrenceType.NONE.value or not visit.recurrence_end_date:
            continue

        original = parse_date(visit.scheduled_date)
        recurrence_end = parse_date(visit.recurrence_end_date)
        if original is None or recurrence_end is None:
            logger.warning(f"Visit {visit.id} has unparseable recurrence dates, not expanding")
            continue
        if recurrence_end <= start:
            continue

        last = min(recurrence_end, end)
        instances = [
            _instance(visit, day)
            for day in _series_dates(original, last, visit)
            if day >= start
        ]
        expanded.extend(instances)

    return expanded


# ==================== Events ====================

def filter_visits(
    visits: Iterable[Visit],
    status: Optional[str] = None,
    facility_id: Optional[str] = None,
    host_id: Optional[str] = None
) -> List[Visit]:
    result = []
    for visit in visits:
        if status and getattr(visit.status, "value", visit.status) != status:
            continue
        if facility_id and visit.facility_id != facility_id:
            continue
        if host_id and visit.host_id != host_id:
            continue
        result.append(visit)
    return result


def visible_visits_for(user: Optional[User], visits: Iterable[Visit]) -> List[Visit]:
    """Hosts only see visits they are hosting"""
    if user is not None and user.role == UserRole.HOST.value:
        return [v for v in visits if v.host_profile_id == user.id]
    return list(visits)


def to_calendar_event(visit: Visit, today: Optional[date] = None) -> CalendarEvent:
    day = parse_date(visit.scheduled_date)
    start_time = parse_time(visit.scheduled_start_time)
    end_time = parse_time(visit.scheduled_end_time)

    if day is None or (visit.scheduled_start_time and start_time is None) \
            or (visit.scheduled_end_time and end_time is None):
        logger.warning(f"Visit {visit.id} has an invalid schedule, showing it today")
        day = today or date.today()
        start = datetime.combine(day, DEFAULT_START_TIME)
        end = datetime.combine(day, DEFAULT_END_TIME)
    else:
        start = datetime.combine(day, start_time or DEFAULT_START_TIME)
        end = datetime.combine(day, end_time or DEFAULT_END_TIME)

    return CalendarEvent(
        id=visit.id,
        title=visit.visitor_name,
        start=start,
        end=end,
        all_day=not visit.scheduled_start_time,
        status=getattr(visit.status, "value", visit.status),
        resource_id=visit.facility_id,
        is_recurring=_recurrence(visit) != RecurrenceType.NONE.value,
        visit=visit,
    )


def to_calendar_events(visits: Iterable[Visit], today: Optional[date] = None) -> List[CalendarEvent]:
    return [to_calendar_event(v, today) for v in visits]
