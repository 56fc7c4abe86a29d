"""Relative time labels for feed publication dates."""

import calendar
from datetime import UTC, date, datetime, timedelta, tzinfo

from dateutil import parser as date_parser
from dateutil import tz as date_tz

from .models import RelativeTime

FUTURE_LABEL = "in the future"
JUST_NOW_LABEL = "Just now"

# North American zone abbreviations found in RFC 822 feed dates
ZONE_ABBREVIATIONS = {
    name: date_tz.tzoffset(name, hours * 3600)
    for name, hours in {
        "EST": -5,
        "EDT": -4,
        "CST": -6,
        "CDT": -5,
        "MST": -7,
        "MDT": -6,
        "PST": -8,
        "PDT": -7,
    }.items()
}


def _pluralize(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def parse_timestamp(timestamp: str | None) -> datetime | None:
    """Parse a feed timestamp into an aware datetime.

    Naive results are taken as UTC. Returns None when the text is not a
    valid calendar instant.
    """
    if not timestamp:
        return None
    try:
        parsed = date_parser.parse(timestamp, tzinfos=ZONE_ABBREVIATIONS)
    except (ValueError, OverflowError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_absolute(moment: datetime, tz: tzinfo = UTC) -> str:
    """Render a moment as e.g. 'January 31, 2023 at 09:05 AM'."""
    local = moment.astimezone(tz)
    return f"{local:%B} {local.day}, {local.year} at {local:%I:%M %p}"


def elapsed_months(then: datetime, now: datetime) -> int:
    """Whole months elapsed, counted by day-of-month anniversaries.

    A day that does not exist in the current month rolls into the next
    month (January 31 lands on March 3 in a non-leap February).
    """
    months = (now.year - then.year) * 12 + (now.month - then.month)
    anniversary = date(now.year, now.month, 1) + timedelta(days=then.day - 1)
    if now.date() < anniversary:
        months -= 1
    return max(months, 0)


def elapsed_years(then: datetime, now: datetime) -> int:
    """Whole years elapsed; February 29 clamps to the 28th in other years."""
    years = now.year - then.year
    last_day = calendar.monthrange(now.year, then.month)[1]
    anniversary = date(now.year, then.month, min(then.day, last_day))
    if now.date() < anniversary:
        years -= 1
    return max(years, 0)


def format_relative_time(
    timestamp: str | None, now: datetime | None = None, tz: tzinfo = UTC
) -> RelativeTime:
    """Format a timestamp relative to now.

    Args:
        timestamp: Feed-provided publication date text
        now: Observation instant, defaults to the current time; naive values are UTC
        tz: Timezone used for calendar arithmetic and the absolute rendering

    Returns:
        RelativeTime with the bucket label and the long-form date. Unparsable
        input is returned unchanged in both fields.
    """
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        original = timestamp or ""
        return RelativeTime(relative=original, absolute=original)

    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    absolute = format_absolute(parsed, tz)
    if parsed > now:
        return RelativeTime(relative=FUTURE_LABEL, absolute=absolute)

    seconds = int((now - parsed).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    weeks = days // 7

    local_then = parsed.astimezone(tz)
    local_now = now.astimezone(tz)
    months = elapsed_months(local_then, local_now)
    years = elapsed_years(local_then, local_now)

    if seconds < 60:
        relative = JUST_NOW_LABEL
    elif minutes < 60:
        relative = _pluralize(minutes, "minute")
    elif hours < 24:
        relative = _pluralize(hours, "hour")
    elif days < 7:
        relative = _pluralize(days, "day")
    elif weeks < 4:
        relative = _pluralize(weeks, "week")
    elif months < 12:
        relative = _pluralize(months, "month")
    else:
        relative = _pluralize(years, "year")

    return RelativeTime(relative=relative, absolute=absolute)
