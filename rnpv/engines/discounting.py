"""
rNPV Valuator — Discounting Module

End-of-year discounting relative to an externally supplied current year:

    PV = CF / (1 + r)^(year - current_year)

No bounds are placed on the rate. Degenerate cases never raise:
    - a zero cashflow always discounts to 0
    - a zero base (r = -1) gives an infinite factor for future years, 0 for past ones
    - float overflow or underflow of the power collapses the factor to 0 or infinity
"""

import math


def discount_factor(year: int, current_year: int, rate: float) -> float:
    """
    Returns the multiplicative discount factor for a year.

    PV = CF × discount_factor
    """
    base = 1 + rate
    exponent = year - current_year
    if base == 0 and exponent != 0:
        return math.inf if exponent > 0 else 0.0
    try:
        return 1.0 / (base ** exponent)
    except ZeroDivisionError:
        # base ** exponent underflowed to 0
        return math.inf
    except OverflowError:
        return 0.0


def discount_cashflow(cashflow: float, year: int, current_year: int, rate: float) -> float:
    """
    Discounts a single cashflow to the current year.

    Args:
        cashflow: The undiscounted cashflow amount (currency millions).
        year: The calendar year of the cashflow.
        current_year: The base year for discounting.
        rate: Discount rate (e.g. 0.10 for 10%).

    Returns:
        Present value of the cashflow.
    """
    if cashflow == 0:
        return 0.0
    factor = discount_factor(year, current_year, rate)
    if factor == 0:
        return 0.0
    return cashflow * factor
