"""
Product category vocabulary.

Routine steps and rules refer to products by category slug.  Matching is
tolerant of case, spaces, hyphens and underscores (``"Face Mask"``,
``"face-mask"`` and ``"face_mask"`` are the same category).  Mapping free
product names onto these slugs happens upstream of the engine.
"""

from __future__ import annotations

PRODUCT_CATEGORIES: frozenset[str] = frozenset({
    "cleanser",
    "oil_cleanser",
    "makeup_remover",
    "toner",
    "essence",
    "serum",
    "vitamin_c",
    "niacinamide",
    "hyaluronic_acid",
    "retinol",
    "exfoliator",
    "chemical_peel",
    "spot_treatment",
    "face_mask",
    "clay_mask",
    "sheet_mask",
    "eye_cream",
    "moisturizer",
    "face_oil",
    "barrier_cream",
    "sunscreen",
    "lip_balm",
    "facial_mist",
})


def normalize_category(category: str) -> str:
    """Canonical comparison key for a category slug."""
    return "".join(ch for ch in category.lower() if ch not in " _-")


_NORMALIZED = {normalize_category(c): c for c in PRODUCT_CATEGORIES}


def canonical_category(category: str) -> str | None:
    """Return the known slug for *category*, or ``None`` if unknown."""
    return _NORMALIZED.get(normalize_category(category))


def is_known_category(category: str) -> bool:
    return canonical_category(category) is not None


def categories_match(left: str, right: str) -> bool:
    """True when two category strings name the same category."""
    return normalize_category(left) == normalize_category(right)
