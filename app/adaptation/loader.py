"""
Rule set loading and validation.

Default rule sets ship as JSON documents in ``app/adaptation/data``.  A
missing or malformed document is logged and treated as "no rules" for that
adaptation type — routines then simply stay unadapted for it.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from app.adaptation.categories import is_known_category, normalize_category
from app.schemas.adaptation import AdaptationRule, AdaptationType, RuleScope, RuleSet

logger = logging.getLogger(__name__)

DEFAULT_RULES_DIR = Path(__file__).parent / "data"

RULE_SET_FILENAMES: dict[AdaptationType, str] = {
    AdaptationType.CYCLE: "cycle-default-rules.json",
    AdaptationType.WEATHER: "weather-adaptation-rules.json",
    AdaptationType.SKIN_STATE: "skin-state-default-rules.json",
}


def load_rule_set(path: Path) -> RuleSet:
    """Parse one rule set document.

    Raises:
        OSError: If the file cannot be read.
        pydantic.ValidationError: If the document is not a valid rule set.
    """
    return RuleSet.model_validate_json(path.read_text(encoding="utf-8"))


def load_default_rule_set(
    adaptation_type: AdaptationType,
    rules_dir: Optional[Path] = None,
) -> Optional[RuleSet]:
    """Load the bundled rule set for *adaptation_type*, or ``None``."""
    path = (rules_dir or DEFAULT_RULES_DIR) / RULE_SET_FILENAMES[adaptation_type]
    if not path.exists():
        logger.warning("Rule set file %s not found", path)
        return None

    try:
        rule_set = load_rule_set(path)
    except (OSError, ValidationError) as exc:
        logger.error("Failed to load rule set %s: %s", path, exc)
        return None

    if rule_set.type != adaptation_type:
        logger.error(
            "Rule set %s declares type '%s', expected '%s'",
            path, rule_set.type.value, adaptation_type.value,
        )
        return None

    for problem in validate_rule_set(rule_set):
        logger.warning("Rule set %s v%s: %s", adaptation_type.value, rule_set.version, problem)

    logger.info(
        "Loaded %d rules and %d briefings for '%s' (v%s)",
        len(rule_set.rules), len(rule_set.briefings),
        adaptation_type.value, rule_set.version,
    )
    return rule_set


def load_default_rule_sets(rules_dir: Optional[Path] = None) -> dict[AdaptationType, RuleSet]:
    """Load every bundled rule set that is present and valid."""
    loaded: dict[AdaptationType, RuleSet] = {}
    for adaptation_type in AdaptationType:
        rule_set = load_default_rule_set(adaptation_type, rules_dir)
        if rule_set is not None:
            loaded[adaptation_type] = rule_set
    return loaded


def validate_rule_set(rule_set: RuleSet) -> list[str]:
    """Return human-readable problems found in *rule_set* (empty if none).

    Problems are reported, not fixed: duplicate rule ids, several rules for
    the same category and situation, rules on unknown categories, and tokens
    without a briefing.
    """
    problems: list[str] = []

    id_counts = Counter(rule.id for rule in rule_set.rules)
    for rule_id, count in sorted(id_counts.items()):
        if count > 1:
            problems.append(f"Duplicate rule id '{rule_id}': {count} rules")

    pair_counts = Counter(
        (normalize_category(rule.product_category), _situation_label(rule))
        for rule in rule_set.rules
    )
    for (category, situation), count in sorted(pair_counts.items()):
        if count > 1:
            problems.append(f"Duplicate rules for {category}/{situation}: {count} rules")

    unknown = sorted({
        rule.product_category for rule in rule_set.rules
        if not is_known_category(rule.product_category)
    })
    if unknown:
        problems.append(f"Unknown product categories: {', '.join(unknown)}")

    rule_tokens = {rule.context_token for rule in rule_set.rules}
    briefing_tokens = {briefing.context_token for briefing in rule_set.briefings}
    missing = sorted(rule_tokens - briefing_tokens)
    if missing:
        problems.append(f"Missing briefings for contexts: {', '.join(missing)}")

    return problems


def _situation_label(rule: AdaptationRule) -> str:
    """``token``, plus ``@am``/``@pm`` and ``+when`` tokens when the rule is narrowed."""
    label = rule.context_token
    if rule.applies_to != RuleScope.BOTH:
        label += f"@{rule.applies_to.value}"
    for token in sorted(rule.when):
        label += f"+{token}"
    return label
