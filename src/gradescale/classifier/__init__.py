"""Classifier - Maps a numeric grade to its appreciation label."""

from gradescale.classifier.scale import (
    SCALE_BANDS,
    AppreciationLabel,
    ScaleBand,
    classify,
)

__all__ = [
    "SCALE_BANDS",
    "AppreciationLabel",
    "ScaleBand",
    "classify",
]
