"""Scoring term weights."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TermWeights:
    """Weights of the five empirical scoring terms."""

    gauss1: float = -0.035579
    gauss2: float = -0.005156
    repulsion: float = 0.840245
    hydrophobic: float = -0.035069
    hbond: float = -0.587439


DEFAULT_TERM_WEIGHTS = TermWeights()
