from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from rapidfuzz.distance import Levenshtein

from .components import Candidate, Query
from .normalize import normalize_field


@dataclass(frozen=True)
class ScoreBreakdown:
    score: float
    contributions: Dict[str, float]
    denominator: int


def _similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b))


def score_breakdown(query: Query, candidate: Candidate) -> ScoreBreakdown:
    """Compare *query* against *candidate* field by field.

    Every non-empty query field counts toward the denominator, including
    ``number``. The house number is never compared as text because
    candidates only carry it after interpolation; it earns credit through
    the parity bonus instead.
    """
    fields = query.fields()
    contributions: Dict[str, float] = {}

    for key, value in fields.items():
        other = candidate.value_for(key)
        if other is None:
            continue
        contributions[key] = _similarity(normalize_field(value), normalize_field(other))

    if query.number is not None and candidate.fromhn % 2 == query.number % 2:
        contributions["parity"] = 1.0

    denominator = len(fields)
    total = sum(contributions.values())
    score = total / denominator if denominator else 0.0
    return ScoreBreakdown(score=score, contributions=contributions, denominator=denominator)


def score_candidate(query: Query, candidate: Candidate) -> float:
    return score_breakdown(query, candidate).score


def select_best(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Keep every candidate tied at the top score, highest first."""
    if not candidates:
        return []
    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    top = ranked[0].score
    return [candidate for candidate in ranked if candidate.score == top]
