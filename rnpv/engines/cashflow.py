"""
rNPV Valuator — Cashflow Integrator

Discounted present value of success-scenario commercial cashflows for the
two commercial postures:

    OWNER     CF = sales × (1 - cogs - commercial spend - working capital) × (1 - tax)
    LICENSOR  CF = sales × royalty% / 100 × (1 - tax)

Licensor flows are computed on top-line sales and ignore the owner's cost
fractions. Every year in [launch_year, loe_year) is discounted to the
externally supplied current year and accumulated. An empty horizon gives
a PV of 0, as does a licensor valuation with no royalty terms.
"""

from typing import Callable, Optional

from ..schemas import Role
from .discounting import discount_cashflow, discount_factor
from .revenue_curves import sales_at_year
from .royalty import DEFAULT_RAMP_YEARS, royalty_schedule


def owner_net_margin(cogs_fraction, commercial_spend_fraction, working_capital_fraction) -> float:
    """Pre-tax operating margin retained by the owner (may be negative)."""
    return 1 - cogs_fraction - commercial_spend_fraction - working_capital_fraction


def pv_owner(
    current_year: int,
    launch_year: int,
    loe_year: int,
    discount_rate: float,
    tax_rate: float,
    peak_sales: float,
    cogs_fraction: float,
    commercial_spend_fraction: float,
    working_capital_fraction: float,
) -> float:
    """Present value of the owner's after-tax operating cashflows."""
    net = owner_net_margin(cogs_fraction, commercial_spend_fraction, working_capital_fraction)
    pv = 0.0
    for year in range(launch_year, loe_year):
        cf = sales_at_year(year, launch_year, loe_year, peak_sales) * net * (1 - tax_rate)
        pv += discount_cashflow(cf, year, current_year, discount_rate)
    return pv


def pv_licensor(
    current_year: int,
    launch_year: int,
    loe_year: int,
    discount_rate: float,
    tax_rate: float,
    peak_sales: float,
    royalty_pct_at: Optional[Callable[[int], float]] = None,
) -> float:
    """
    Present value of the licensor's after-tax royalty stream.

    Returns 0 when no royalty function is supplied.
    """
    if royalty_pct_at is None:
        return 0.0
    pv = 0.0
    for year in range(launch_year, loe_year):
        sales = sales_at_year(year, launch_year, loe_year, peak_sales)
        cf = sales * (royalty_pct_at(year) / 100) * (1 - tax_rate)
        pv += discount_cashflow(cf, year, current_year, discount_rate)
    return pv


def has_royalty_terms(inputs) -> bool:
    return inputs.royalty_min_pct is not None and inputs.royalty_max_pct is not None


def royalty_function(inputs) -> Optional[Callable[[int], float]]:
    """Binds the input's royalty terms to a year → % callable (None if absent)."""
    if not has_royalty_terms(inputs):
        return None
    ramp = inputs.royalty_ramp_years
    return royalty_schedule(
        inputs.launch_year,
        inputs.loe_year,
        inputs.royalty_min_pct,
        inputs.royalty_max_pct,
        DEFAULT_RAMP_YEARS if ramp is None else ramp,
    )


def present_value(role, inputs, current_year: int) -> float:
    """
    Present value of the cashflow stream accruing to `role`.

    Args:
        role: Role.OWNER or Role.LICENSOR (or their string values).
        inputs: ValuationInputs.
        current_year: Reference year for discounting exponents.
    """
    if Role(role) is Role.OWNER:
        return pv_owner(
            current_year=current_year,
            launch_year=inputs.launch_year,
            loe_year=inputs.loe_year,
            discount_rate=inputs.discount_rate,
            tax_rate=inputs.tax_rate,
            peak_sales=inputs.peak_sales,
            cogs_fraction=inputs.cogs_fraction,
            commercial_spend_fraction=inputs.commercial_spend_fraction,
            working_capital_fraction=inputs.working_capital_fraction,
        )
    return pv_licensor(
        current_year=current_year,
        launch_year=inputs.launch_year,
        loe_year=inputs.loe_year,
        discount_rate=inputs.discount_rate,
        tax_rate=inputs.tax_rate,
        peak_sales=inputs.peak_sales,
        royalty_pct_at=royalty_function(inputs),
    )


def build_cashflow_schedule(inputs, current_year: int) -> list:
    """
    Year-by-year breakdown of both cashflow streams over the horizon.

    Summing owner_pv / licensor_pv over the rows reproduces
    present_value() for the corresponding role.
    """
    net = owner_net_margin(
        inputs.cogs_fraction, inputs.commercial_spend_fraction, inputs.working_capital_fraction
    )
    royalty_pct_at = royalty_function(inputs)

    rows = []
    for year in range(inputs.launch_year, inputs.loe_year):
        sales = sales_at_year(year, inputs.launch_year, inputs.loe_year, inputs.peak_sales)
        royalty_pct = royalty_pct_at(year) if royalty_pct_at else 0.0
        owner_cf = sales * net * (1 - inputs.tax_rate)
        licensor_cf = sales * (royalty_pct / 100) * (1 - inputs.tax_rate)
        rows.append({
            "year": year,
            "sales": sales,
            "royalty_pct": royalty_pct,
            "owner_cf": owner_cf,
            "licensor_cf": licensor_cf,
            "discount_factor": discount_factor(year, current_year, inputs.discount_rate),
            "owner_pv": discount_cashflow(owner_cf, year, current_year, inputs.discount_rate),
            "licensor_pv": discount_cashflow(licensor_cf, year, current_year, inputs.discount_rate),
        })
    return rows
