"""Goal funding and cash-value projection calculators for insurance advisors."""

__version__ = "0.1.0"
