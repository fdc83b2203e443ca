"""
rNPV Valuator — Royalty Curve Module

Royalty percentage schedule for the licensor posture: a linear ramp from
the minimum to the maximum royalty over `ramp_years` years starting at
launch, then held at the maximum until loss of exclusivity.

Percentages are expressed on a 0–100 scale.
"""

DEFAULT_RAMP_YEARS = 3


def royalty_at_year(
    year: int,
    launch_year: int,
    loe_year: int,
    min_pct: float,
    max_pct: float,
    ramp_years: int = DEFAULT_RAMP_YEARS,
) -> float:
    """
    Returns the royalty percentage applicable in a calendar year.

    Zero outside [launch_year, loe_year). Reaches and holds max_pct once
    year - launch_year >= ramp_years, so a ramp of 0 starts at max_pct.
    """
    if year < launch_year or year >= loe_year:
        return 0.0
    offset = year - launch_year
    if offset >= ramp_years:
        return float(max_pct)
    return min_pct + (max_pct - min_pct) * offset / ramp_years


def average_royalty(
    launch_year: int,
    loe_year: int,
    min_pct: float,
    max_pct: float,
    ramp_years: int = DEFAULT_RAMP_YEARS,
) -> float:
    """
    Arithmetic mean of royalty_at_year over every year in
    [launch_year, loe_year). Returns 0 for an empty range.
    """
    years = range(launch_year, loe_year)
    if not years:
        return 0.0
    total = sum(
        royalty_at_year(y, launch_year, loe_year, min_pct, max_pct, ramp_years)
        for y in years
    )
    return total / len(years)


def royalty_schedule(launch_year, loe_year, min_pct, max_pct, ramp_years=DEFAULT_RAMP_YEARS):
    """Returns a year → royalty % callable bound to one set of terms."""
    def _royalty_pct_at(year: int) -> float:
        return royalty_at_year(year, launch_year, loe_year, min_pct, max_pct, ramp_years)
    return _royalty_pct_at
