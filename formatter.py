"""Candidate collapsing and confidence normalisation."""

from __future__ import annotations

from typing import Optional

from latex_format import derive_secondary, derive_third
from models import CandidateSet, CandidateSlot, ConfidenceBand, RecognitionResult

CANDIDATE_COUNT = 3
MIN_VISIBLE_CONFIDENCE = 0.03
LOW_BAND_LIMIT = 0.2
MEDIUM_BAND_LIMIT = 0.6


def build_candidates(text: str) -> CandidateSet:
    return CandidateSet(primary=text, secondary=derive_secondary(text), tertiary=derive_third(text))


def collapse_candidates(candidates: CandidateSet) -> list[CandidateSlot]:
    """Drop alternate readings that repeat the previous one.

    A dropped slot is disabled, not just left empty, so no copy action is
    offered for it.
    """
    primary = CandidateSlot(candidates.primary)
    if candidates.secondary == candidates.primary:
        return [primary, CandidateSlot("", enabled=False), CandidateSlot("", enabled=False)]
    if candidates.tertiary == candidates.secondary:
        return [primary, CandidateSlot(candidates.secondary), CandidateSlot("", enabled=False)]
    return [primary, CandidateSlot(candidates.secondary), CandidateSlot(candidates.tertiary)]


def extra_actions(result: RecognitionResult) -> tuple[Optional[str], Optional[str]]:
    """MathML and TSV payloads, each None when the service returned nothing."""
    return (result.mathml or None, result.tsv or None)


def normalize_confidence(raw: float) -> float:
    # keep "nonzero but tiny" visible on the bar
    if 0 < raw < MIN_VISIBLE_CONFIDENCE:
        return MIN_VISIBLE_CONFIDENCE
    return raw


def confidence_band(value: float) -> ConfidenceBand:
    if value < LOW_BAND_LIMIT:
        return ConfidenceBand.LOW
    if value < MEDIUM_BAND_LIMIT:
        return ConfidenceBand.MEDIUM
    return ConfidenceBand.HIGH
