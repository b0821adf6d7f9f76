"""
Rule set registry.

Central holder of the rule sets currently in force.  Readers take the whole
mapping with :meth:`RuleSetRegistry.all` and use it for the duration of one
snapshot; a reload builds a new read-only mapping and swaps the reference in
one assignment, so a reader never sees a half-updated set of rules.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from app.adaptation.loader import load_default_rule_sets
from app.schemas.adaptation import AdaptationType, RuleSet

logger = logging.getLogger(__name__)


class RuleSetRegistry:
    """Singleton registry of loaded rule sets."""

    _rule_sets: Mapping[AdaptationType, RuleSet] = MappingProxyType({})
    _loaded: bool = False
    _write_lock = threading.Lock()

    @classmethod
    def replace(cls, rule_sets: Mapping[AdaptationType, RuleSet]) -> None:
        """Atomically swap in a new set of rule sets."""
        fresh = MappingProxyType(dict(rule_sets))
        with cls._write_lock:
            cls._rule_sets = fresh
            cls._loaded = True
        logger.info(
            "Rule sets swapped: %s",
            ", ".join(f"{t.value}@{rs.version}" for t, rs in fresh.items()) or "none",
        )

    @classmethod
    def load_defaults(cls, rules_dir: Optional[Path] = None) -> Mapping[AdaptationType, RuleSet]:
        """(Re)load the bundled rule sets and swap them in."""
        cls.replace(load_default_rule_sets(rules_dir))
        return cls._rule_sets

    @classmethod
    def ensure_loaded(cls, rules_dir: Optional[Path] = None) -> None:
        """Load the bundled rule sets on first use."""
        if not cls._loaded:
            cls.load_defaults(rules_dir)

    @classmethod
    def get(cls, adaptation_type: AdaptationType) -> Optional[RuleSet]:
        """Get the rule set for *adaptation_type*.  ``None`` if not loaded."""
        return cls._rule_sets.get(adaptation_type)

    @classmethod
    def all(cls) -> Mapping[AdaptationType, RuleSet]:
        """Return the current read-only ``{type: rule_set}`` mapping."""
        return cls._rule_sets

    @classmethod
    def clear(cls) -> None:
        """Drop all rule sets.  Useful for testing."""
        with cls._write_lock:
            cls._rule_sets = MappingProxyType({})
            cls._loaded = False
