"""
rNPV Valuator — Revenue Curve Module

Linear uptake: sales ramp from 0 at launch to peak over a fixed
SALES_RAMP_YEARS, then hold at peak until loss of exclusivity, after
which commercial sales are modelled as zero.
"""

SALES_RAMP_YEARS = 4


def linear_uptake(t: int, ramp_years: int = SALES_RAMP_YEARS) -> float:
    """
    Uptake fraction (0–1) at t whole years after launch.

    uptake(0) = 0, uptake(ramp_years) = 1.
    """
    if t < 0:
        return 0.0
    if t <= ramp_years:
        return t / ramp_years
    return 1.0


def sales_at_year(year: int, launch_year: int, loe_year: int, peak_sales: float) -> float:
    """Annual sales for a calendar year; zero outside [launch_year, loe_year)."""
    if year < launch_year or year >= loe_year:
        return 0.0
    return peak_sales * linear_uptake(year - launch_year)
