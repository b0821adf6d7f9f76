"""Routine adaptation core: cycle phase, weather context, rule resolution, snapshots."""

from app.adaptation.cycle import current_day_in_cycle, current_phase, derive_cycle_state, phase_progress
from app.adaptation.rules import AdaptationRuleEngine, merge_rules
from app.adaptation.snapshot import assemble, select_briefing
from app.adaptation.weather import DEFAULT_WEATHER_CONFIG, WeatherConfig, derive_context_tokens

__all__ = [
    "AdaptationRuleEngine",
    "DEFAULT_WEATHER_CONFIG",
    "WeatherConfig",
    "assemble",
    "current_day_in_cycle",
    "current_phase",
    "derive_context_tokens",
    "derive_cycle_state",
    "merge_rules",
    "phase_progress",
    "select_briefing",
]
