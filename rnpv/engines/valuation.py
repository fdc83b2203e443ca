"""
rNPV Valuator — Valuation Composer

Main entry point for the risk-adjusted NPV of one asset.

Process:
    1. Baseline probability and development cost from the phase table
       (unknown phase → 0 / 0)
    2. Mechanism bonus from the eight mechanistic properties
    3. PTRS = baseline probability × mechanism bonus
    4. After-tax development cost = dev cost × (1 - tax)
    5. Owner and licensor PVs (both always computed)
    6. rNPV = PV(selected role) × PTRS - dev cost PV
    7. ROI % = round(rNPV / dev cost PV × 100), 0 when dev cost PV is 0
    8. Average royalty over the exclusivity window

No step raises for numeric input; degenerate cases collapse to zero.
"""

import math

from ..schemas import Role, ValuationOutputs
from .cashflow import has_royalty_terms, present_value
from .mechanism import score_mechanism
from .phase_table import lookup_phase
from .royalty import DEFAULT_RAMP_YEARS, average_royalty


def compute_roi(rnpv: float, dev_cost_pv: float) -> int:
    """
    Return on development spend as a whole percentage, rounded half-up.

    Guarded: 0 when dev_cost_pv is 0 or the ratio is not finite.
    """
    if dev_cost_pv == 0:
        return 0
    ratio = rnpv / dev_cost_pv * 100
    if not math.isfinite(ratio):
        return 0
    return math.floor(ratio + 0.5)


def compose_valuation(inputs, current_year: int) -> ValuationOutputs:
    """
    Computes all valuation outputs for a set of inputs.

    Args:
        inputs: ValuationInputs.
        current_year: Reference year for discounting; the only
                      time-dependent value, supplied by the caller.

    Returns:
        ValuationOutputs. Identical arguments give identical outputs.
    """
    phase_entry = lookup_phase(inputs.phase)
    baseline_probability = phase_entry.probability

    mechanism_bonus = score_mechanism(inputs)
    ptrs = baseline_probability * mechanism_bonus

    dev_cost_pv = phase_entry.dev_cost * (1 - inputs.tax_rate)

    owner_pv = present_value(Role.OWNER, inputs, current_year)
    licensor_pv = present_value(Role.LICENSOR, inputs, current_year)
    selected_pv = owner_pv if Role(inputs.role) is Role.OWNER else licensor_pv

    rnpv = selected_pv * ptrs - dev_cost_pv
    roi = compute_roi(rnpv, dev_cost_pv)

    if has_royalty_terms(inputs):
        ramp = inputs.royalty_ramp_years
        average_royalty_pct = average_royalty(
            inputs.launch_year,
            inputs.loe_year,
            inputs.royalty_min_pct,
            inputs.royalty_max_pct,
            DEFAULT_RAMP_YEARS if ramp is None else ramp,
        )
    else:
        average_royalty_pct = 0.0

    return ValuationOutputs(
        mechanism_bonus=mechanism_bonus,
        baseline_probability=baseline_probability,
        ptrs=ptrs,
        dev_cost_pv=dev_cost_pv,
        owner_pv=owner_pv,
        licensor_pv=licensor_pv,
        selected_pv=selected_pv,
        rnpv=rnpv,
        roi=roi,
        average_royalty_pct=average_royalty_pct,
        current_year=current_year,
    )
