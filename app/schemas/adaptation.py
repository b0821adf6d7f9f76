"""
Adaptation rule schemas.

A :class:`RuleSet` is a versioned collection of rules plus briefings for one
:class:`AdaptationType`.  Rules map ``(product_category, context_token)`` to a
:class:`RuleAction`.  Rule sets are immutable once loaded — every model here
is frozen, and a reload replaces the whole object (see
:mod:`app.adaptation.registry`).

The enums carry no presentation data (icons, colours).  Mapping emphasis or
phases to styling is a concern of the client.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.clock import utc_now


class AdaptationType(str, Enum):
    """Context source a rule set belongs to.

    Declaration order is the order in which rule sets are scanned by the
    engine.
    """

    CYCLE = "cycle"
    WEATHER = "weather"
    SKIN_STATE = "skin_state"


class Emphasis(str, Enum):
    """Instruction severity for a routine step."""

    SKIP = "skip"
    REDUCE = "reduce"
    NORMAL = "normal"
    EMPHASIZE = "emphasize"


# Merge order: a more severe emphasis wins a conflict.
EMPHASIS_SEVERITY: dict[Emphasis, int] = {
    Emphasis.SKIP: 3,
    Emphasis.REDUCE: 2,
    Emphasis.EMPHASIZE: 1,
    Emphasis.NORMAL: 0,
}


class AdaptationOrigin(str, Enum):
    """Who authored the rule that produced an adaptation."""

    DEFAULT = "default"
    AI_RECOMMENDED = "ai_recommended"
    USER_CUSTOM = "user_custom"


# Origin precedence tiers.  Default and AI-recommended rules share a tier.
ORIGIN_TIER: dict[AdaptationOrigin, int] = {
    AdaptationOrigin.USER_CUSTOM: 1,
    AdaptationOrigin.AI_RECOMMENDED: 0,
    AdaptationOrigin.DEFAULT: 0,
}


class RuleScope(str, Enum):
    """Part of the day a rule is limited to."""

    AM = "am"
    PM = "pm"
    BOTH = "both"


class RuleAction(BaseModel):
    """What a matching rule does to a step."""

    model_config = ConfigDict(frozen=True)

    emphasis: Emphasis
    guidance_template: Optional[str] = Field(
        None,
        description="Guidance shown instead of the step's own description",
    )
    order_priority: Optional[int] = Field(
        None,
        description="Display order override within the time-of-day block",
    )
    warnings: list[str] = Field(default_factory=list)


class AdaptationRule(BaseModel):
    """Maps a product category under one context token to an action.

    ``when`` lists further tokens that must all be active (in any type) for
    the rule to match; ``applies_to`` limits it to morning or evening steps.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    product_category: str
    context_token: str
    action: RuleAction
    applies_to: RuleScope = RuleScope.BOTH
    when: list[str] = Field(default_factory=list)
    origin: Optional[AdaptationOrigin] = Field(
        None,
        description="Author of the rule; inferred from where it is loaded if unset",
    )

    @property
    def required_tokens(self) -> frozenset[str]:
        return frozenset([self.context_token, *self.when])

    @property
    def scope_key(self) -> tuple[str, RuleScope, frozenset[str]]:
        """Identity of the situation the rule covers, category aside."""
        return self.context_token, self.applies_to, frozenset(self.when)


class PhaseBriefing(BaseModel):
    """Summary card describing one active context."""

    model_config = ConfigDict(frozen=True)

    context_token: str
    title: str
    summary: str = ""
    tips: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def placeholder(cls, context_token: str) -> PhaseBriefing:
        """Minimal briefing used when a rule set has none for *context_token*."""
        return cls(context_token=context_token, title=context_token)


class RuleSet(BaseModel):
    """Versioned rules and briefings for one adaptation type."""

    model_config = ConfigDict(frozen=True)

    type: AdaptationType
    version: str
    rules: list[AdaptationRule] = Field(default_factory=list)
    briefings: list[PhaseBriefing] = Field(default_factory=list)

    def briefing_for(self, context_token: str) -> Optional[PhaseBriefing]:
        """Return the briefing for *context_token*, or ``None``."""
        for briefing in self.briefings:
            if briefing.context_token == context_token:
                return briefing
        return None


class RoutineAdaptationAttachment(BaseModel):
    """Per-routine override rules layered on top of a default rule set."""

    model_config = ConfigDict(frozen=True)

    routine_id: int
    type: AdaptationType
    custom_rules: Optional[list[AdaptationRule]] = None
    last_updated: datetime.datetime = Field(default_factory=utc_now)


class StepAdaptation(BaseModel):
    """Resolved outcome for one base step under the active context."""

    step_id: str
    context_tokens: list[str] = Field(
        default_factory=list,
        description="Tokens of every rule that matched the step (sorted)",
    )
    emphasis: Emphasis = Emphasis.NORMAL
    guidance: str = ""
    order_override: Optional[int] = None
    warnings: list[str] = Field(default_factory=list)
    origin: AdaptationOrigin = AdaptationOrigin.DEFAULT
    matched_rule_ids: list[str] = Field(
        default_factory=list,
        description="Ids of every matching rule, winner first",
    )


class RuleSetSummary(BaseModel):
    """Rule set metadata plus validation problems, for the API."""

    type: AdaptationType
    version: str
    rule_count: int
    briefing_count: int
    problems: list[str]
