"""
rNPV Valuator — Input Validation Pass

Optional, stricter companion to the permissive engine. Inspects a set of
inputs and returns warnings for configurations the engine silently
absorbs (empty horizon, unknown phase, negative margin, ...). It never
raises and never changes what compose_valuation computes.
"""

from ..schemas import Role, ValidationWarning
from .cashflow import has_royalty_terms
from .phase_table import PHASE_ORDER, is_known_phase

_FRACTION_FIELDS = (
    "tax_rate",
    "cogs_fraction",
    "commercial_spend_fraction",
    "working_capital_fraction",
    "bioavailability",
    "target_validation",
    "target_novelty",
)


def validate_inputs(inputs) -> list[ValidationWarning]:
    """Returns a (possibly empty) list of warnings for a set of inputs."""
    warnings = []

    def warn(code, field, message):
        warnings.append(ValidationWarning(code=code, field=field, message=message))

    if inputs.loe_year <= inputs.launch_year:
        warn(
            "empty_horizon", "loe_year",
            f"LOE year {inputs.loe_year} is not after launch year {inputs.launch_year}; "
            "commercial PV will be 0",
        )

    if not is_known_phase(inputs.phase):
        warn(
            "unknown_phase", "phase",
            f"Unknown phase '{inputs.phase}'; probability and cost resolve to 0. "
            f"Valid phases: {PHASE_ORDER}",
        )

    for field in _FRACTION_FIELDS:
        value = getattr(inputs, field)
        if not 0 <= value <= 1:
            warn("fraction_out_of_range", field, f"{field}={value} is outside [0, 1]")

    cost_total = (
        inputs.cogs_fraction
        + inputs.commercial_spend_fraction
        + inputs.working_capital_fraction
    )
    if cost_total > 1:
        warn(
            "negative_margin", None,
            f"COGS, commercial spend and working capital sum to {cost_total:.4f}; "
            "owner net margin is negative",
        )

    if inputs.discount_rate <= -1:
        warn(
            "degenerate_discount_rate", "discount_rate",
            f"discount_rate={inputs.discount_rate} makes (1 + rate) non-positive",
        )
    elif inputs.discount_rate < 0:
        warn("negative_discount_rate", "discount_rate", f"discount_rate={inputs.discount_rate} is negative")

    if inputs.peak_sales < 0:
        warn("negative_peak_sales", "peak_sales", f"peak_sales={inputs.peak_sales} is negative")

    for field in ("royalty_min_pct", "royalty_max_pct"):
        value = getattr(inputs, field)
        if value is not None and not 0 <= value <= 100:
            warn("royalty_out_of_range", field, f"{field}={value} is outside [0, 100]")

    if has_royalty_terms(inputs) and inputs.royalty_max_pct < inputs.royalty_min_pct:
        warn(
            "royalty_inverted", "royalty_max_pct",
            f"Maximum royalty {inputs.royalty_max_pct}% is below minimum {inputs.royalty_min_pct}%",
        )

    if inputs.royalty_ramp_years is not None and inputs.royalty_ramp_years < 0:
        warn("negative_ramp", "royalty_ramp_years", f"royalty_ramp_years={inputs.royalty_ramp_years} is negative")

    if Role(inputs.role) is Role.LICENSOR and not has_royalty_terms(inputs):
        warn(
            "missing_royalty_terms", "royalty_min_pct",
            "Licensor valuation without royalty bounds; licensor PV will be 0",
        )

    return warnings
