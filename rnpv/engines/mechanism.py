"""
rNPV Valuator — Mechanism Scoring Module

Maps eight mechanistic / preclinical properties to a bounded multiplier
("mechanism bonus") applied to the phase-based probability of success.

Each property contributes at most one fixed delta when it crosses a
threshold; deltas are additive and the total is clamped to [0.5, 2.0].

    property              low branch            high branch
    potency (nM)          < 10    → +0.10       > 100  → -0.10
    selectivity (fold)    < 5     → -0.10       > 30   → +0.10
    half-life (hr)        < 2     → -0.05       > 24   → -0.05
    molecular weight (Da) < 200   → +0.05       > 500  → -0.05
    logP                  outside [1,3] → -0.05 inside [1,3] → +0.10
    bioavailability       < 0.2   → -0.10       > 0.5  → +0.10
    target validation     < 0.3   → -0.10       > 0.7  → +0.20
    target novelty        < 0.3   → +0.10       > 0.7  → -0.10
"""

BONUS_FLOOR = 0.5
BONUS_CEILING = 2.0

MECHANISTIC_FIELDS = (
    "potency_nm",
    "selectivity_fold",
    "half_life_hr",
    "molecular_weight_da",
    "log_p",
    "bioavailability",
    "target_validation",
    "target_novelty",
)


def clamp_bonus(value: float) -> float:
    """Clamp a raw bonus to [BONUS_FLOOR, BONUS_CEILING]."""
    return min(BONUS_CEILING, max(BONUS_FLOOR, value))


def score_mechanism(props) -> float:
    """
    Computes the mechanism bonus for a set of mechanistic properties.

    Args:
        props: ValuationInputs, ORM object or dict carrying the eight
               MECHANISTIC_FIELDS. Any numeric value is accepted.

    Returns:
        Multiplier in [0.5, 2.0]; 1.0 for neutral properties.
    """
    def _get(field):
        if isinstance(props, dict):
            return props[field]
        return getattr(props, field)

    potency = _get("potency_nm")
    selectivity = _get("selectivity_fold")
    half_life = _get("half_life_hr")
    molecular_weight = _get("molecular_weight_da")
    log_p = _get("log_p")
    bioavailability = _get("bioavailability")
    target_validation = _get("target_validation")
    target_novelty = _get("target_novelty")

    bonus = 1.0

    if potency < 10:
        bonus += 0.10
    elif potency > 100:
        bonus -= 0.10

    if selectivity > 30:
        bonus += 0.10
    elif selectivity < 5:
        bonus -= 0.10

    # Both extremes of half-life are penalised
    if half_life > 24 or half_life < 2:
        bonus -= 0.05

    if molecular_weight > 500:
        bonus -= 0.05
    elif molecular_weight < 200:
        bonus += 0.05

    if 1 <= log_p <= 3:
        bonus += 0.10
    else:
        bonus -= 0.05

    if bioavailability > 0.5:
        bonus += 0.10
    elif bioavailability < 0.2:
        bonus -= 0.10

    if target_validation > 0.7:
        bonus += 0.20
    elif target_validation < 0.3:
        bonus -= 0.10

    if target_novelty > 0.7:
        bonus -= 0.10
    elif target_novelty < 0.3:
        bonus += 0.10

    return clamp_bonus(bonus)
