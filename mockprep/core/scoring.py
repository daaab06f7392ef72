"""
Score arithmetic shared by feedback generation, storage upgrades and analytics.
"""

import math
from typing import Any

GRADE_THRESHOLDS: list[tuple[int, str]] = [
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
]
LOWEST_GRADE = "D"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (72.5 -> 73)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round and clamp a score into [0, 100]."""
    return max(0, min(100, round_half_up(value)))


def coerce_score(value: Any) -> int | None:
    """Read a model-provided score; ``None`` when missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return clamp_score(number)


def calculate_grade(score: float) -> str:
    """Letter grade for an overall score. There is no F tier."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return LOWEST_GRADE


def mean_rounded(values: list[float]) -> int:
    """Rounded arithmetic mean, 0 for an empty list."""
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def percentage(part: int, whole: int) -> int:
    """Rounded ``part / whole`` as a percentage, 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)
