"""
Snapshot assembly — turns resolved adaptations into a per-day routine view.

For each base step::

    display_order = adaptation.order_override ?? step.order
    should_show   = adaptation.emphasis != skip

Steps are partitioned morning → evening → weekly and sorted inside each
block by ``(display_order, step.order, step.id)``, which makes the output
fully deterministic.

Briefing selection
------------------
1. cycle active → the briefing of the cycle-phase token;
2. otherwise weather active with tokens → the briefing of the
   lexicographically first weather token;
3. otherwise any other active type with tokens → the lexicographically
   first token of the first such type;
4. otherwise the ``baseline`` token.

A token without a briefing gets a placeholder (title = token, empty
summary) rather than an error.
"""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, Mapping, Optional

from app.adaptation.rules import AdaptationRuleEngine
from app.schemas.adaptation import (
    AdaptationType,
    Emphasis,
    PhaseBriefing,
    RoutineAdaptationAttachment,
    RuleSet,
)
from app.schemas.routine import BaseRoutine, TimeOfDay
from app.schemas.snapshot import AdaptedStep, RoutineSnapshot

logger = logging.getLogger(__name__)

BASELINE_TOKEN = "baseline"

_TIME_OF_DAY_RANK: dict[TimeOfDay, int] = {tod: i for i, tod in enumerate(TimeOfDay)}


# ======================================================================
# Briefing selection
# ======================================================================


def _briefing_token(
    active_tokens: Mapping[AdaptationType, frozenset[str]],
) -> tuple[Optional[AdaptationType], str]:
    """Choose ``(type, token)`` whose briefing represents the snapshot."""
    cycle_tokens = active_tokens.get(AdaptationType.CYCLE)
    if cycle_tokens:
        return AdaptationType.CYCLE, min(cycle_tokens)

    weather_tokens = active_tokens.get(AdaptationType.WEATHER)
    if weather_tokens:
        return AdaptationType.WEATHER, min(weather_tokens)

    for adaptation_type in AdaptationType:
        tokens = active_tokens.get(adaptation_type)
        if tokens:
            return adaptation_type, min(tokens)

    return None, BASELINE_TOKEN


def select_briefing(
    active_tokens: Mapping[AdaptationType, Iterable[str]],
    briefings: Mapping[AdaptationType, Iterable[PhaseBriefing]],
) -> PhaseBriefing:
    """Pick the briefing for the active context (see module docstring)."""
    frozen = {t: frozenset(tokens) for t, tokens in active_tokens.items()}
    adaptation_type, token = _briefing_token(frozen)

    if adaptation_type is not None:
        for briefing in briefings.get(adaptation_type, []):
            if briefing.context_token == token:
                return briefing

    logger.info("No briefing for token '%s'; using placeholder", token)
    return PhaseBriefing.placeholder(token)


# ======================================================================
# Main entry point
# ======================================================================


def assemble(
    routine: BaseRoutine,
    active_tokens: Mapping[AdaptationType, Iterable[str]],
    rule_sets: Mapping[AdaptationType, RuleSet],
    on_date: datetime.date,
    briefings: Optional[Mapping[AdaptationType, Iterable[PhaseBriefing]]] = None,
    attachments: Optional[Iterable[RoutineAdaptationAttachment]] = None,
) -> RoutineSnapshot:
    """Build the :class:`RoutineSnapshot` of *routine* for *on_date*.

    Args:
        routine: Base routine (not modified).
        active_tokens: Active context tokens per active adaptation type.
        rule_sets: Default rule set per adaptation type.
        on_date: Calendar day the snapshot is for.
        briefings: Briefings per type.  Defaults to each rule set's own
            briefings.
        attachments: Per-routine override rules.

    Returns:
        :class:`RoutineSnapshot` with one adapted step per base step.
    """
    engine = AdaptationRuleEngine(rule_sets, active_tokens, attachments)

    adapted: list[AdaptedStep] = []
    for step in routine.steps:
        adaptation = engine.resolve(step)
        display_order = (
            adaptation.order_override
            if adaptation.order_override is not None
            else step.order
        )
        adapted.append(AdaptedStep(
            step_id=step.id,
            product_category=step.product_category,
            time_of_day=step.time_of_day,
            base_order=step.order,
            display_order=display_order,
            should_show=adaptation.emphasis != Emphasis.SKIP,
            emphasis=adaptation.emphasis,
            guidance_text=adaptation.guidance,
            warnings=adaptation.warnings,
            context_tokens=adaptation.context_tokens,
            origin=adaptation.origin,
        ))

    adapted.sort(key=lambda s: (
        _TIME_OF_DAY_RANK[s.time_of_day], s.display_order, s.base_order, s.step_id,
    ))

    if briefings is None:
        briefings = {t: rs.briefings for t, rs in rule_sets.items()}

    briefing = select_briefing(engine.active_tokens, briefings)

    skipped = sum(1 for s in adapted if not s.should_show)
    logger.debug(
        "Assembled routine %s for %s: %d steps, %d skipped, tokens=%s",
        routine.id, on_date, len(adapted), skipped, sorted(engine.all_active_tokens),
    )

    return RoutineSnapshot(
        routine_id=routine.id,
        date=on_date,
        active_tokens=sorted(engine.all_active_tokens),
        adapted_steps=adapted,
        briefing=briefing,
    )
