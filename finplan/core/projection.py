from __future__ import annotations

import logging
from typing import Dict, List, Optional

from finplan.core.tvm import round_currency, safe_number
from finplan.schemas.projection import (
    DEFAULT_PROJECTION_CONFIG,
    BonusRule,
    BonusType,
    CoiBand,
    ProjectionConfig,
    ScenarioComparison,
    YearProjection,
)

logger = logging.getLogger(__name__)

MAX_PROJECTION_YEARS = 50
MAX_AGE = 99
# policy years with no surrender value
SURRENDER_WINDOW_YEARS = 2


def projection_horizon(current_age: int) -> int:
    """Number of policy years to simulate: 50, or fewer if age 99 comes first."""
    return max(0, min(MAX_PROJECTION_YEARS, MAX_AGE - current_age))


def coi_rate_for_age(age: int, bands: List[CoiBand]) -> float:
    rate = 0.0
    for band in sorted(bands, key=lambda b: b.fromAge):
        if age > band.fromAge:
            rate = band.rate
    return rate


def _bonus_for_year(
    year: int,
    bonuses: List[BonusRule],
    annual_premium: float,
    prior_value: float,
) -> float:
    rule = next((b for b in bonuses if b.year == year), None)
    if rule is None:
        return 0.0
    if rule.type == BonusType.PREMIUM_BASED:
        return annual_premium * safe_number(rule.rate)
    return prior_value * safe_number(rule.rate)


def calculate_projection(
    current_age: int,
    annual_premium: float,
    sum_assured: float,
    payment_term: int,
    interest_rate: float,
    config: Optional[ProjectionConfig] = None,
) -> List[YearProjection]:
    """
    Year-by-year account value of an investment-linked policy.

    Order of operations (per policy year):
      1) Take the premium while inside the payment term.
      2) Deduct the front-load charge for that policy year; the rest is allocated.
      3) Credit interest on prior value + allocation at the flat rate.
      4) Deduct cost of insurance on the amount at risk (sum assured not yet
         covered by the account) and the yearly admin fee.
      5) Add the bonus scheduled for that year, if any.
      6) Floor at zero. A zero account after year 1 (or in year 1 when no
         further premium is due) means the policy lapsed and the schedule
         stops there.

    Illustration only: the charges, bonuses and COI ladder come from `config`
    and are not certified pricing.
    """
    active: ProjectionConfig = config or DEFAULT_PROJECTION_CONFIG

    age0 = int(safe_number(current_age))
    premium = safe_number(annual_premium)
    assured = safe_number(sum_assured)
    term = safe_number(payment_term)
    rate = safe_number(interest_rate)
    charges: Dict[int, float] = active.initialCharges
    admin_fee = safe_number(active.monthlyAdminFee) * 12

    rows: List[YearProjection] = []
    account_value = 0.0
    total_premium = 0.0

    for year in range(1, projection_horizon(age0) + 1):
        age = age0 + year
        premium_in = premium if year <= term else 0.0
        total_premium += premium_in

        charge_rate = safe_number(charges.get(year, 0.0))
        allocated = premium_in * (1 - charge_rate)

        interest = (account_value + allocated) * rate

        risk_amount = max(assured - (account_value + allocated + interest), 0.0)
        coi = (risk_amount / 1000) * coi_rate_for_age(age, active.coiBands)

        bonus = _bonus_for_year(year, active.bonuses, premium, account_value)

        ending = account_value + allocated + interest + bonus - coi - admin_fee
        account_value = max(ending, 0.0)

        surrender_value = 0.0 if year <= SURRENDER_WINDOW_YEARS else account_value

        rows.append(
            YearProjection(
                year=year,
                age=age,
                premiumPaid=premium_in,
                accumulatedPremium=total_premium,
                accountValue=round_currency(account_value),
                surrenderValue=round_currency(surrender_value),
                deathBenefit=round_currency(max(assured, account_value)),
            )
        )

        # year 1 is exempt while further premiums are due
        if account_value <= 0 and (year > 1 or year >= term):
            logger.debug("policy lapsed in year %s at age %s", year, age)
            break

    return rows


def has_lapsed(rows: List[YearProjection]) -> bool:
    """True when the schedule ended because the account ran dry."""
    return bool(rows) and rows[-1].accountValue == 0


def compare_interest_scenarios(
    current_age: int,
    annual_premium: float,
    sum_assured: float,
    payment_term: int,
    config: Optional[ProjectionConfig] = None,
) -> ScenarioComparison:
    """Project the same policy at the config's standard and high rate presets."""
    active = config or DEFAULT_PROJECTION_CONFIG
    standard_rate = safe_number(active.defaultInterestRate)
    high_rate = safe_number(active.highInterestRate)

    return ScenarioComparison(
        standardRate=standard_rate,
        highRate=high_rate,
        standard=calculate_projection(
            current_age, annual_premium, sum_assured, payment_term, standard_rate, active
        ),
        high=calculate_projection(
            current_age, annual_premium, sum_assured, payment_term, high_rate, active
        ),
    )


__all__ = [
    "MAX_PROJECTION_YEARS",
    "MAX_AGE",
    "projection_horizon",
    "coi_rate_for_age",
    "calculate_projection",
    "has_lapsed",
    "compare_interest_scenarios",
]
