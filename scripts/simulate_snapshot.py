"""What would the routine look like on a given day?

Builds a sample routine, cycle profile and weather reading in memory and
prints the adapted snapshot for one date, without touching the database.

Usage:
    python scripts/simulate_snapshot.py [YYYY-MM-DD]
"""

import datetime
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.adaptation.context import build_active_context
from app.adaptation.cycle import derive_cycle_state
from app.adaptation.loader import load_default_rule_sets
from app.adaptation.snapshot import assemble
from app.adaptation.weather import derive_weather_context
from app.schemas.adaptation import AdaptationType
from app.schemas.cycle import CycleProfile
from app.schemas.routine import BaseRoutine, RoutineStep, TimeOfDay
from app.schemas.weather import WeatherReading

PROFILE = CycleProfile(
    last_period_start_date=datetime.date(2026, 10, 1),
    average_cycle_length=28,
    period_length=5,
)

# (category, time of day, order, title)
STEPS = [
    ("cleanser", TimeOfDay.MORNING, 0, "Gentle gel cleanser"),
    ("vitamin_c", TimeOfDay.MORNING, 1, "Vitamin C serum"),
    ("moisturizer", TimeOfDay.MORNING, 2, "Daily moisturizer"),
    ("sunscreen", TimeOfDay.MORNING, 3, "SPF 50"),
    ("oil_cleanser", TimeOfDay.EVENING, 0, "Cleansing oil"),
    ("cleanser", TimeOfDay.EVENING, 1, "Gentle gel cleanser"),
    ("retinol", TimeOfDay.EVENING, 2, "Retinol 0.3%"),
    ("moisturizer", TimeOfDay.EVENING, 3, "Night cream"),
    ("exfoliator", TimeOfDay.WEEKLY, 0, "AHA/BHA exfoliant"),
    ("clay_mask", TimeOfDay.WEEKLY, 1, "Clay mask"),
]

ROUTINE = BaseRoutine(
    id=1,
    title="Sample routine",
    steps=[
        RoutineStep(id=f"step-{i}", product_category=cat, time_of_day=tod, order=order, title=title,
                    description=f"Use your {title.lower()}.")
        for i, (cat, tod, order, title) in enumerate(STEPS)
    ],
)

EMPHASIS_MARK = {
    "skip": "x",
    "reduce": "-",
    "normal": " ",
    "emphasize": "+",
}


def main():
    on_date = datetime.date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else datetime.date.today()
    now = datetime.datetime.combine(on_date, datetime.time(8, 0), tzinfo=datetime.timezone.utc)
    reading = WeatherReading(uv_index=9, humidity=30, wind_speed_kmh=12, temperature_c=22, timestamp=now,
                             condition="clear")

    rule_sets = load_default_rule_sets()
    context = build_active_context([AdaptationType.CYCLE, AdaptationType.WEATHER], on_date, now, PROFILE, reading)
    snapshot = assemble(ROUTINE, context.tokens, rule_sets, on_date)

    state = derive_cycle_state(PROFILE, on_date)
    weather = derive_weather_context(reading, now)

    # ── PRINT SNAPSHOT ──────────────────────────────────────────────
    print()
    print("=" * 65)
    print(f"  Adapted routine - {on_date.strftime('%A %d %B %Y')}")
    print("=" * 65)
    print()
    print(f"  Cycle:    day {state.day_in_cycle}, {state.phase.value} ({state.phase_progress:.0%} through)")
    print(f"  Weather:  UV {weather.uv_level.value}, tokens: {', '.join(weather.context_tokens)}")
    print(f"  SPF:      {weather.recommendation.spf_level}")
    if weather.recommendation.texture_adjustment:
        print(f"  Texture:  {weather.recommendation.texture_adjustment}")
    print()
    print(f"  {snapshot.briefing.title}")
    if snapshot.briefing.summary:
        print(f"  {snapshot.briefing.summary}")
    print()

    for label, steps in (("Morning", snapshot.morning_steps), ("Evening", snapshot.evening_steps),
                         ("Weekly", snapshot.weekly_steps)):
        print(f"  {label}:")
        print("  " + "-" * 63)
        for step in steps:
            print(f"  [{EMPHASIS_MARK[step.emphasis.value]}] {step.display_order:>2}  {step.product_category:<14}"
                  f" {step.guidance_text}")
            for warning in step.warnings:
                print(f"          ! {warning}")
        print()

    print("  Legend: [+] emphasize  [-] reduce  [x] skip")
    print("=" * 65)


if __name__ == "__main__":
    main()
