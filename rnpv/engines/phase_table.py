"""
rNPV Valuator — Phase Table Module

Static lookup of clinical phase → (base probability of success,
development cost in currency millions).

Unknown phase labels resolve to (0, 0) instead of failing; callers that
need strictness should check membership with is_known_phase() or run the
validation pass.
"""

import re
from typing import NamedTuple, Optional

# Canonical phase order (fixed)
PHASE_ORDER = ["Preclinical", "Phase I", "Phase II", "Phase III", "NDA", "Approved"]


class PhaseEntry(NamedTuple):
    probability: float
    dev_cost: float


PHASE_TABLE = {
    "Preclinical": PhaseEntry(probability=0.12, dev_cost=200.0),
    "Phase I": PhaseEntry(probability=0.32, dev_cost=50.0),
    "Phase II": PhaseEntry(probability=0.14, dev_cost=100.0),
    "Phase III": PhaseEntry(probability=0.40, dev_cost=200.0),
    "NDA": PhaseEntry(probability=0.85, dev_cost=20.0),
    "Approved": PhaseEntry(probability=1.0, dev_cost=0.0),
}

_UNKNOWN_PHASE = PhaseEntry(probability=0.0, dev_cost=0.0)

_ROMAN = {"i": 1, "ii": 2, "iii": 3, "iv": 4}
_PHASE_NUMBER_RE = re.compile(r"phase\s*(iv|iii|ii|i|[1-4])[ab]?(?![a-z0-9])")
_TRAILING_NUMBER_RE = re.compile(r"/\s*(iv|iii|ii|i|[1-4])[ab]?(?![a-z0-9])")


def is_known_phase(phase: str) -> bool:
    return phase in PHASE_TABLE


def lookup_phase(phase: str) -> PhaseEntry:
    """Returns the table entry for a phase, or (0, 0) for unknown labels."""
    return PHASE_TABLE.get(phase, _UNKNOWN_PHASE)


def base_probability(phase: str) -> float:
    return lookup_phase(phase).probability


def dev_cost(phase: str) -> float:
    return lookup_phase(phase).dev_cost


def normalize_phase(label: Optional[str]) -> Optional[str]:
    """
    Maps a free-text trial-registry phase label onto a PHASE_TABLE key.

    Handles labels such as "Phase 2", "PHASE1/PHASE2", "Phase 2/3",
    "Early Phase 1", "NDA", "BLA", "Approved" and "Phase 4".
    Combined phases map to the later phase. Returns None when the label
    cannot be mapped.
    """
    if not label:
        return None
    if label in PHASE_TABLE:
        return label

    text = label.lower().replace("_", " ")

    if re.search(r"\b(nda|bla)\b", text):
        return "NDA"
    if "approved" in text:
        return "Approved"
    if "preclinical" in text or "pre-clinical" in text or "nonclinical" in text:
        return "Preclinical"

    numbers = []
    for token in _PHASE_NUMBER_RE.findall(text):
        numbers.append(int(token) if token.isdigit() else _ROMAN[token])
    # "Phase 1/2" and "Phase 2/3" carry the second number without a prefix
    for token in _TRAILING_NUMBER_RE.findall(text):
        numbers.append(int(token) if token.isdigit() else _ROMAN[token])

    if not numbers:
        return None

    latest = max(numbers)
    if latest >= 4:
        return "Approved"
    return PHASE_ORDER[latest]
