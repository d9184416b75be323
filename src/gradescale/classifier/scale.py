"""Appreciation scale for grades on the 1.0 - 7.0 range."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum


class AppreciationLabel(StrEnum):
    """Qualitative label derived from a grade."""

    DEFICIENTE = "Deficiente"
    CON_MEJORA = "Con mejora"
    BUEN_TRABAJO = "Buen trabajo"
    DESTACADO = "Destacado"
    FUERA_DE_RANGO = "Fuera de rango"


@dataclass(frozen=True)
class ScaleBand:
    """An inclusive grade range and the label it maps to."""

    low: float
    high: float
    label: AppreciationLabel

    def contains(self, grade: float) -> bool:
        return self.low <= grade <= self.high


# Evaluated in order, first match wins
SCALE_BANDS: tuple[ScaleBand, ...] = (
    ScaleBand(1.0, 3.9, AppreciationLabel.DEFICIENTE),
    ScaleBand(4.0, 5.5, AppreciationLabel.CON_MEJORA),
    ScaleBand(5.6, 6.4, AppreciationLabel.BUEN_TRABAJO),
    ScaleBand(6.5, 7.0, AppreciationLabel.DESTACADO),
)


def _as_number(value: object) -> float | None:
    """Best-effort numeric view of value, or None when it has none."""
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal | str):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    if math.isnan(number):
        return None
    return number


def classify(grade: object) -> AppreciationLabel:
    """Return the appreciation label for a grade.

    Never raises: NaN, values outside 1.0 - 7.0, values falling between two
    bands and anything that is not a number map to FUERA_DE_RANGO.

    Args:
        grade: The grade to classify. Numeric strings are accepted.

    Returns:
        The matching AppreciationLabel.
    """
    number = _as_number(grade)
    if number is None:
        return AppreciationLabel.FUERA_DE_RANGO

    for band in SCALE_BANDS:
        if band.contains(number):
            return band.label
    return AppreciationLabel.FUERA_DE_RANGO
