"""
Adaptation rule engine — resolves one adaptation per routine step.

Inputs
------
- the rule set of every active :class:`AdaptationType`,
- the active context tokens of each type (cycle: exactly one; weather: any
  subset),
- optional per-routine attachments carrying override rules.

Resolution (per step)
---------------------
1. **Collect** every rule whose product category matches the step, whose
   context token is active for the rule's type, whose ``when`` tokens are
   all active, and whose ``applies_to`` scope covers the step's time of
   day (``am`` morning only, ``pm`` evening only, ``both`` any block).
   Override rules are scanned first, then default rules; types in
   declaration order.
2. **No match** → implicit default: ``normal``, the step's own description,
   no warnings, origin ``default``.
3. **Pick a winner**:

   a. origin tier — ``user_custom`` beats ``ai_recommended`` / ``default``;
   b. within the tier, the most severe emphasis
      (``skip > reduce > emphasize > normal``);
   c. remaining ties go to the rule collected first.

   The winner supplies emphasis, guidance and order override.
4. **Warnings** are the union over *all* matching rules, de-duplicated in
   first-seen order.

The engine is a total, deterministic function of its inputs.  It never
mutates rule sets or attachments, and unknown categories or tokens only
degrade to the default result (with a log line).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from app.adaptation.categories import categories_match, is_known_category
from app.schemas.adaptation import (
    EMPHASIS_SEVERITY,
    ORIGIN_TIER,
    AdaptationOrigin,
    AdaptationRule,
    AdaptationType,
    RoutineAdaptationAttachment,
    RuleScope,
    RuleSet,
    StepAdaptation,
)
from app.schemas.routine import RoutineStep, TimeOfDay

logger = logging.getLogger(__name__)

# Blocks a scoped rule reaches; ``both`` reaches every block.
SCOPE_BLOCKS: dict[RuleScope, frozenset[TimeOfDay]] = {
    RuleScope.AM: frozenset({TimeOfDay.MORNING}),
    RuleScope.PM: frozenset({TimeOfDay.EVENING}),
    RuleScope.BOTH: frozenset(TimeOfDay),
}


@dataclass(frozen=True)
class RuleCandidate:
    """A rule in scan order, tagged with its type and effective origin."""

    rule: AdaptationRule
    type: AdaptationType
    origin: AdaptationOrigin
    position: int

    @property
    def sort_key(self) -> tuple[int, int, int]:
        """Smaller is better: higher tier, then higher severity, then earlier."""
        return (
            -ORIGIN_TIER[self.origin],
            -EMPHASIS_SEVERITY[self.rule.action.emphasis],
            self.position,
        )


def _dedupe(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


class AdaptationRuleEngine:
    """Resolves :class:`StepAdaptation` objects for the active context."""

    def __init__(
        self,
        rule_sets: Mapping[AdaptationType, RuleSet],
        active_tokens: Mapping[AdaptationType, Iterable[str]],
        attachments: Optional[Iterable[RoutineAdaptationAttachment]] = None,
    ):
        """
        Args:
            rule_sets: Default rule set per adaptation type.
            active_tokens: Active context tokens per *active* adaptation
                type.  Types absent from this mapping contribute no rules.
            attachments: Per-routine override rules.  Only attachments of
                an active type are used.
        """
        self.active_tokens: dict[AdaptationType, frozenset[str]] = {
            t: frozenset(tokens) for t, tokens in active_tokens.items()
        }
        self.candidates: tuple[RuleCandidate, ...] = self._collect(
            rule_sets, list(attachments or []),
        )

    # ------------------------------------------------------------------
    # Rule collection
    # ------------------------------------------------------------------

    def _collect(
        self,
        rule_sets: Mapping[AdaptationType, RuleSet],
        attachments: list[RoutineAdaptationAttachment],
    ) -> tuple[RuleCandidate, ...]:
        ordered: list[tuple[AdaptationRule, AdaptationType, AdaptationOrigin]] = []

        for adaptation_type in AdaptationType:
            if adaptation_type not in self.active_tokens:
                continue
            for attachment in attachments:
                if attachment.type != adaptation_type:
                    continue
                for rule in attachment.custom_rules or []:
                    ordered.append(
                        (rule, adaptation_type, rule.origin or AdaptationOrigin.USER_CUSTOM)
                    )

        for adaptation_type in AdaptationType:
            if adaptation_type not in self.active_tokens:
                continue
            rule_set = rule_sets.get(adaptation_type)
            if rule_set is None:
                logger.info("No rule set loaded for active type '%s'", adaptation_type.value)
                continue
            for rule in rule_set.rules:
                ordered.append(
                    (rule, adaptation_type, rule.origin or AdaptationOrigin.DEFAULT)
                )

        candidates: list[RuleCandidate] = []
        for rule, adaptation_type, origin in ordered:
            if not is_known_category(rule.product_category):
                logger.warning(
                    "Skipping rule '%s': unknown product category '%s'",
                    rule.id, rule.product_category,
                )
                continue
            candidates.append(RuleCandidate(
                rule=rule, type=adaptation_type, origin=origin,
                position=len(candidates),
            ))
        return tuple(candidates)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @property
    def all_active_tokens(self) -> frozenset[str]:
        """Union of active tokens across types."""
        tokens: set[str] = set()
        for type_tokens in self.active_tokens.values():
            tokens |= type_tokens
        return frozenset(tokens)

    def matching_rules(self, step: RoutineStep) -> list[RuleCandidate]:
        """Rules applying to *step* under the active tokens, in scan order."""
        all_tokens = self.all_active_tokens
        return [
            c for c in self.candidates
            if c.rule.context_token in self.active_tokens[c.type]
            and all(token in all_tokens for token in c.rule.when)
            and step.time_of_day in SCOPE_BLOCKS[c.rule.applies_to]
            and categories_match(c.rule.product_category, step.product_category)
        ]

    def resolve(self, step: RoutineStep) -> StepAdaptation:
        """Resolve the single adaptation for *step*."""
        matches = self.matching_rules(step)

        if not matches:
            if not is_known_category(step.product_category):
                logger.debug(
                    "Step '%s' has unknown product category '%s'",
                    step.id, step.product_category,
                )
            return StepAdaptation(step_id=step.id, guidance=step.description)

        winner = min(matches, key=lambda c: c.sort_key)
        action = winner.rule.action

        if len(matches) > 1:
            logger.debug(
                "Step '%s': %d rules matched, '%s' wins (%s, %s)",
                step.id, len(matches), winner.rule.id,
                winner.origin.value, action.emphasis.value,
            )

        return StepAdaptation(
            step_id=step.id,
            context_tokens=sorted({t for c in matches for t in c.rule.required_tokens}),
            emphasis=action.emphasis,
            guidance=action.guidance_template or step.description,
            order_override=action.order_priority,
            warnings=_dedupe(w for c in matches for w in c.rule.action.warnings),
            origin=winner.origin,
            matched_rule_ids=[winner.rule.id] + [
                c.rule.id for c in matches if c is not winner
            ],
        )

    def resolve_all(self, steps: Iterable[RoutineStep]) -> dict[str, StepAdaptation]:
        """Resolve every step, keyed by step id."""
        return {step.id: self.resolve(step) for step in steps}


# ======================================================================
# Rule editing helpers
# ======================================================================


def merge_rules(
    base: Iterable[AdaptationRule],
    custom: Iterable[AdaptationRule],
) -> list[AdaptationRule]:
    """Layer *custom* rules over *base* without mutating either.

    A custom rule replaces the base rule with the same id; failing that, the
    base rule for the same category and situation (context token, time of
    day scope and ``when`` tokens); otherwise it is appended.
    """
    merged = list(base)
    for rule in custom:
        index = next((i for i, r in enumerate(merged) if r.id == rule.id), None)
        if index is None:
            index = next(
                (
                    i for i, r in enumerate(merged)
                    if categories_match(r.product_category, rule.product_category)
                    and r.scope_key == rule.scope_key
                ),
                None,
            )
        if index is None:
            merged.append(rule)
        else:
            merged[index] = rule
    return merged
