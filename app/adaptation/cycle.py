"""
Cycle state — maps a cycle profile and a calendar day to a discrete phase.

Model
-----
The day in cycle is the number of days since the last period start, wrapped
to the average cycle length and made 1-based:

    day = (days_since(last_period_start, date) mod L) + 1,   L = max(1, avg)

A date before the last period start is day 1.

Phases are assigned by fixed day boundaries:

    menstrual   1 .. period_length
    follicular  period_length+1 .. 13
    ovulation   14 .. 16
    luteal      17 .. L

The follicular/ovulation/luteal boundaries (13, 16) do **not** scale with the
average cycle length.  For cycles far from 28 days this shifts the phases
relative to physiology; the behaviour is kept as-is until product intent
says otherwise.  A consequence is that ``phase_progress`` is not guaranteed
to stay inside ``[0, 1]`` for such profiles.

A ``period_length`` beyond 13 swallows the follicular phase (and beyond 16
the ovulation phase); the remaining phases still partition ``[1, L]``.
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from app.schemas.cycle import CyclePhase, CycleProfile, CycleState

logger = logging.getLogger(__name__)

# Last day of each phase after menstruation.
FOLLICULAR_LAST_DAY = 13
OVULATION_LAST_DAY = 16


def _effective_cycle_length(profile: CycleProfile) -> int:
    """Cycle length guarded against zero/negative input."""
    if profile.average_cycle_length < 1:
        logger.warning(
            "Non-positive average_cycle_length %s clamped to 1",
            profile.average_cycle_length,
        )
        return 1
    return profile.average_cycle_length


def current_day_in_cycle(profile: CycleProfile, on_date: datetime.date) -> int:
    """Return the 1-based day in cycle for *on_date*.

    Always within ``[1, max(1, average_cycle_length)]``.  Dates before
    ``last_period_start_date`` are not projected backwards; they count as
    day 1.
    """
    length = _effective_cycle_length(profile)
    days_since = (on_date - profile.last_period_start_date).days
    if days_since < 0:
        return 1
    day = (days_since % length) + 1
    return max(1, min(day, length))


def _phase_for_day(day: int, period_length: int) -> CyclePhase:
    if day <= period_length:
        return CyclePhase.MENSTRUAL
    if day <= FOLLICULAR_LAST_DAY:
        return CyclePhase.FOLLICULAR
    if day <= OVULATION_LAST_DAY:
        return CyclePhase.OVULATION
    return CyclePhase.LUTEAL


def current_phase(profile: CycleProfile, on_date: datetime.date) -> CyclePhase:
    """Return the cycle phase for *on_date*."""
    return _phase_for_day(current_day_in_cycle(profile, on_date), profile.period_length)


def _fraction(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def phase_progress(profile: CycleProfile, on_date: datetime.date) -> float:
    """Return the linear progress through the current phase.

    Nominally in ``[0, 1]``; see the module docstring for profiles where it
    is not.
    """
    day = current_day_in_cycle(profile, on_date)
    period = profile.period_length
    phase = _phase_for_day(day, period)

    if phase is CyclePhase.MENSTRUAL:
        return _fraction(day - 1, period)
    if phase is CyclePhase.FOLLICULAR:
        return _fraction(day - period, FOLLICULAR_LAST_DAY - period)
    if phase is CyclePhase.OVULATION:
        return _fraction(day - (FOLLICULAR_LAST_DAY + 1), 3.0)
    return _fraction(
        day - (OVULATION_LAST_DAY + 1),
        _effective_cycle_length(profile) - (OVULATION_LAST_DAY + 1),
    )


def phase_day_ranges(profile: CycleProfile) -> dict[CyclePhase, Optional[tuple[int, int]]]:
    """Inclusive ``(first_day, last_day)`` of each phase, ``None`` if empty.

    Derived from :func:`current_phase` day by day, so it is the partition the
    deriver actually uses.
    """
    length = _effective_cycle_length(profile)
    ranges: dict[CyclePhase, Optional[tuple[int, int]]] = {p: None for p in CyclePhase}
    for day in range(1, length + 1):
        phase = _phase_for_day(day, profile.period_length)
        current = ranges[phase]
        ranges[phase] = (day, day) if current is None else (current[0], day)
    return ranges


def derive_cycle_state(profile: CycleProfile, on_date: datetime.date) -> CycleState:
    """Bundle day, phase, progress and context token for *on_date*."""
    day = current_day_in_cycle(profile, on_date)
    phase = _phase_for_day(day, profile.period_length)
    return CycleState(
        date=on_date,
        day_in_cycle=day,
        phase=phase,
        phase_progress=round(phase_progress(profile, on_date), 4),
        context_token=phase.value,
    )


def cycle_context_token(profile: CycleProfile, on_date: datetime.date) -> str:
    """The single active cycle token for *on_date*."""
    return current_phase(profile, on_date).value
