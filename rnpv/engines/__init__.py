"""
Valuation engine: pure, side-effect-free functions.

Nothing in this package performs I/O, logs, or raises for numeric input.
"""

from .valuation import compose_valuation
from .validation import validate_inputs

__all__ = ["compose_valuation", "validate_inputs"]
