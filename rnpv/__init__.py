"""rNPV Valuator — risk-adjusted NPV for a single pharmaceutical asset."""

__version__ = "1.0.0"
