"""
Begin/end time choices for a reservation form, derived from generated slots.

A slot is selectable when it is free or belongs to the reservation being
edited. End choices run from the chosen begin time up to the first slot held
by another reservation.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence

from pendulum import DateTime

from .date_arithmetic import DEFAULT_TIME_FORMAT, resolve_timezone
from .exceptions import SlotGridError
from .models import Slot
from .timeparse import parse_instant, parse_time, to_utc_iso


class TimeOption(NamedTuple):
    label: str
    value: str


def _is_selectable(slot: Slot) -> bool:
    return not slot.reserved or slot.editing


def _local_label(instant: str, time_format: str, timezone) -> str:
    return parse_instant(instant).in_timezone(timezone).format(time_format)


def begin_time_options(
    slots: Sequence[Slot],
    time_format: str = DEFAULT_TIME_FORMAT,
    timezone: Optional[str] = None,
) -> List[TimeOption]:
    """One option per selectable slot, labelled with the slot's start time."""
    tz = resolve_timezone(timezone)
    options = []
    for slot in slots:
        if _is_selectable(slot):
            label = _local_label(slot.start, time_format, tz)
            options.append(TimeOption(label=label, value=label))
    return options


def end_time_options(
    slots: Sequence[Slot],
    begin: DateTime | str,
    time_format: str = DEFAULT_TIME_FORMAT,
    timezone: Optional[str] = None,
) -> List[TimeOption]:
    """
    End times reachable from ``begin`` without crossing another reservation.

    Scanning starts at the first slot ending after ``begin`` and stops at the
    first slot that is reserved and not being edited. Empty when no slot
    ends after ``begin``.
    """
    tz = resolve_timezone(timezone)
    begin_at = parse_instant(begin)
    options = []

    first_index = next(
        (index for index, slot in enumerate(slots) if parse_instant(slot.end) > begin_at),
        None,
    )
    if first_index is None:
        return options

    for slot in slots[first_index:]:
        if not _is_selectable(slot):
            break
        label = _local_label(slot.end, time_format, tz)
        options.append(TimeOption(label=label, value=label))

    return options


def update_with_time(
    value: DateTime | str,
    time_string: str,
    time_format: str = DEFAULT_TIME_FORMAT,
    timezone: Optional[str] = None,
) -> str:
    """
    Replace the hour and minute of ``value`` with those of ``time_string``.

    The replacement happens in the display timezone; the result is an
    ISO-8601 string in UTC.
    """
    tz = resolve_timezone(timezone)
    clock_time = parse_time(time_string, time_format)
    local = parse_instant(value).in_timezone(tz)
    updated = local.set(hour=clock_time.hour, minute=clock_time.minute)
    return to_utc_iso(updated)


def ensure_end_option(
    slots: Sequence[Slot],
    begin: DateTime | str,
    current_end: DateTime | str,
    time_format: str = DEFAULT_TIME_FORMAT,
    timezone: Optional[str] = None,
) -> str:
    """
    Keep ``current_end`` if it is still reachable from ``begin``.

    Otherwise move it to the first reachable end time.

    Raises:
        SlotGridError: If no end time is reachable from ``begin``
    """
    tz = resolve_timezone(timezone)
    options = end_time_options(slots, begin, time_format, timezone)
    current_label = parse_instant(current_end).in_timezone(tz).format(time_format)

    if any(option.value == current_label for option in options):
        return to_utc_iso(parse_instant(current_end))

    if not options:
        raise SlotGridError(f"No free end time after {begin}")

    return update_with_time(current_end, options[0].value, time_format, timezone)
