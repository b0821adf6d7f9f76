"""
Adaptation engine endpoints — stateless snapshots and rule set management.
"""

import logging
from typing import Mapping

from fastapi import APIRouter, Depends, HTTPException, status

from app.adaptation.cache import snapshot_cache
from app.adaptation.loader import validate_rule_set
from app.adaptation.registry import RuleSetRegistry
from app.adaptation.snapshot import assemble
from app.api.dependencies import get_rule_sets
from app.core.config import settings
from app.schemas.adaptation import AdaptationType, RuleSet, RuleSetSummary
from app.schemas.snapshot import RoutineSnapshot, SnapshotRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/snapshot",
    summary="Assemble a snapshot from caller-supplied routine, tokens and rules.",
    response_model=RoutineSnapshot,
)
def assemble_snapshot(
    request: SnapshotRequest,
    rule_sets: Mapping[AdaptationType, RuleSet] = Depends(get_rule_sets),
):
    """Nothing is read from or written to storage.

    ``request.rule_sets`` replaces the loaded rule set of each type it
    contains; other types use the loaded ones.
    """
    foreign = sorted({a.routine_id for a in request.attachments if a.routine_id != request.routine.id})
    if foreign:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail=f"Attachments belong to other routines: {', '.join(map(str, foreign))}", )
    effective = dict(rule_sets)
    for rule_set in request.rule_sets or []:
        effective[rule_set.type] = rule_set
    return assemble(
        request.routine,
        request.active_tokens,
        effective,
        request.date,
        attachments=request.attachments,
    )


@router.get(
    "/rule-sets",
    summary="List loaded rule sets with validation problems.",
    response_model=list[RuleSetSummary],
)
def list_rule_sets(rule_sets: Mapping[AdaptationType, RuleSet] = Depends(get_rule_sets)):
    return [_summarize(rs) for rs in rule_sets.values()]


@router.get(
    "/rule-sets/{adaptation_type}",
    summary="Get the loaded rule set of one adaptation type.",
    response_model=RuleSet,
)
def get_rule_set(
    adaptation_type: AdaptationType,
    rule_sets: Mapping[AdaptationType, RuleSet] = Depends(get_rule_sets),
):
    rule_set = rule_sets.get(adaptation_type)
    if rule_set is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"No rule set loaded for '{adaptation_type.value}'", )
    return rule_set


@router.post(
    "/rule-sets/reload",
    summary="Reload the bundled rule sets and drop cached snapshots.",
    response_model=list[RuleSetSummary],
)
def reload_rule_sets():
    rule_sets = RuleSetRegistry.load_defaults(settings.RULES_DIR)
    snapshot_cache.clear()
    logger.info("Rule sets reloaded; snapshot cache cleared")
    return [_summarize(rs) for rs in rule_sets.values()]


def _summarize(rule_set: RuleSet) -> RuleSetSummary:
    return RuleSetSummary(type=rule_set.type, version=rule_set.version, rule_count=len(rule_set.rules),
                          briefing_count=len(rule_set.briefings), problems=validate_rule_set(rule_set), )
