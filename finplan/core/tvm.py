"""Time-value-of-money primitives used by the goal calculators."""

from __future__ import annotations

import math
from typing import Any

# below this magnitude a discount rate is treated as zero
RATE_EPSILON = 1e-6


def safe_number(value: Any) -> float:
    """
    Coerce a calculator input to a finite float.

    None, NaN, infinities and anything that is not a number become 0.0, so a
    missing form field never turns a whole result into NaN.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def round_currency(value: float) -> float:
    """Round half up to the nearest whole currency unit; non-finite amounts become 0."""
    if not math.isfinite(value):
        return 0.0
    return float(math.floor(value + 0.5))


def _compound(rate: float, periods: float) -> float:
    """(1 + rate) ** periods, saturating at infinity instead of raising."""
    try:
        return (1 + rate) ** periods
    except OverflowError:
        return math.inf


def future_value(present_value: float, rate: float, periods: float) -> float:
    if math.isnan(present_value) or math.isnan(rate) or math.isnan(periods):
        return 0.0
    if rate <= -1:
        return 0.0
    return safe_number(present_value * _compound(rate, periods))


def pv_annuity_due(payment: float, rate: float, periods: float) -> float:
    """
    Present value of `periods` equal payments made at the START of each period.

        PV = PMT * [(1 - (1 + r)^-n) / r] * (1 + r)

    With a (near) zero rate there is nothing to discount and the value is just
    PMT * n. A result too large for a float collapses to 0, the same as a
    non-finite input.
    """
    if math.isnan(payment) or math.isnan(rate) or math.isnan(periods):
        return 0.0
    if abs(rate) < RATE_EPSILON:
        return safe_number(payment * periods)
    if rate <= -1:
        return 0.0
    return safe_number(payment * ((1 - _compound(rate, -periods)) / rate) * (1 + rate))


def annuity_due_payment(future_amount: float, rate: float, periods: float) -> float:
    """
    Level payment at the start of each period whose future value after
    `periods` periods equals `future_amount`.

        FV = PMT * [((1 + r)^n - 1) / r] * (1 + r)   =>   PMT = FV / factor
    """
    if periods <= 0:
        return 0.0
    if rate == 0:
        return safe_number(future_amount / periods)
    if rate <= -1:
        return 0.0
    factor = ((_compound(rate, periods) - 1) / rate) * (1 + rate)
    return safe_number(future_amount / factor)


def real_rate(nominal_rate: float, inflation_rate: float) -> float:
    if inflation_rate <= -1:
        return 0.0
    return (1 + nominal_rate) / (1 + inflation_rate) - 1


__all__ = [
    "RATE_EPSILON",
    "safe_number",
    "round_currency",
    "future_value",
    "pv_annuity_due",
    "annuity_due_payment",
    "real_rate",
]
