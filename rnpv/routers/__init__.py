"""
rNPV Valuator API Routers

Each module defines a FastAPI APIRouter for one concern (valuations,
external lookups, exports). Routers are included in main.py.
"""

from datetime import date
from typing import Optional


def resolve_current_year(current_year: Optional[int]) -> int:
    """The discounting reference year: explicit when given, else today's year."""
    return current_year if current_year is not None else date.today().year
