from __future__ import annotations

import logging
from typing import Dict, Optional

from finplan.config import Settings
from finplan.core.tvm import (
    annuity_due_payment,
    future_value,
    pv_annuity_due,
    real_rate,
    round_currency,
    safe_number,
)
from finplan.schemas.goals import (
    EducationRequest,
    GoalRequest,
    GoalType,
    PlanResult,
    ProtectionRequest,
    RetirementRequest,
    SocialInsurance,
)

logger = logging.getLogger(__name__)

# share of the (inflated) contribution salary paid out as state pension
PENSION_REPLACEMENT_RATIO = 0.60


def _finite(details: Dict[str, float]) -> Dict[str, float]:
    return {key: safe_number(value) for key, value in details.items()}


def _monthly_saving(shortfall: float, investment_rate: float, years: float) -> float:
    """Start-of-month saving that grows into `shortfall` over `years` years."""
    if shortfall <= 0 or years <= 0:
        return 0.0
    return annuity_due_payment(shortfall, investment_rate / 12, years * 12)


def calculate_retirement(
    current_age: float,
    retire_age: float,
    life_expectancy: float,
    current_monthly_expense: float,
    inflation_rate: float,
    investment_rate: float,
    current_savings: float,
    social_insurance: Optional[SocialInsurance] = None,
) -> PlanResult:
    """
    Fund needed at retirement to cover the living expense until life expectancy.

    Steps:
      1) Inflate today's monthly expense to the retirement date.
      2) Net off the estimated state pension, if the client contributes.
      3) Value the net yearly need as an annuity-due over the retirement years,
         discounted at the real (after-inflation) rate.
      4) Compare with current savings grown at the nominal investment rate and
         solve the start-of-month saving that closes the gap.
    """
    inflation = safe_number(inflation_rate)
    investment = safe_number(investment_rate)
    years_to_retire = max(0.0, safe_number(retire_age) - safe_number(current_age))
    years_in_retirement = max(0.0, safe_number(life_expectancy) - safe_number(retire_age))

    future_monthly_expense = future_value(
        safe_number(current_monthly_expense), inflation, years_to_retire
    )

    estimated_pension = 0.0
    if social_insurance is not None and social_insurance.hasSI:
        salary = safe_number(social_insurance.salaryForSI)
        if salary > 0:
            future_salary = future_value(salary, inflation, years_to_retire)
            estimated_pension = future_salary * PENSION_REPLACEMENT_RATIO

    net_monthly_needed = max(0.0, future_monthly_expense - estimated_pension)
    net_annual_need = net_monthly_needed * 12

    rate = real_rate(investment, inflation)
    required = pv_annuity_due(net_annual_need, rate, years_in_retirement)
    projected_savings = future_value(safe_number(current_savings), investment, years_to_retire)
    shortfall = max(0.0, required - projected_savings)
    monthly = _monthly_saving(shortfall, investment, years_to_retire)

    logger.debug(
        "retirement years_to_retire=%s required=%.0f projected=%.0f",
        years_to_retire,
        required,
        projected_savings,
    )

    return PlanResult(
        goalType=GoalType.RETIREMENT,
        requiredAmount=round_currency(required),
        currentAmount=round_currency(projected_savings),
        shortfall=round_currency(shortfall),
        monthlySavingNeeded=round_currency(monthly),
        details=_finite({
            "yearsToRetire": years_to_retire,
            "yearsInRetirement": years_in_retirement,
            "inflationRate": inflation,
            "futureMonthlyExpense": future_monthly_expense,
            "estimatedPension": estimated_pension,
            "netMonthlyNeeded": net_monthly_needed,
            "futureAnnualExpense": net_annual_need,
            "realRate": rate * 100,
        }),
    )


def calculate_protection(
    annual_income: float,
    support_years: float,
    existing_cover: float,
    loans: float,
    emergency_fund: float,
) -> PlanResult:
    """
    Income replacement cover: the family's income for the support period plus
    debts and an emergency buffer, less the cover already in force.

    Nothing is discounted and the gap is closed with insurance, not savings, so
    monthlySavingNeeded is always 0.
    """
    income = safe_number(annual_income)
    years = max(0.0, safe_number(support_years))
    outstanding_loans = safe_number(loans)
    emergency = safe_number(emergency_fund)
    cover = safe_number(existing_cover)

    income_protection_needed = income * years
    required = income_protection_needed + outstanding_loans + emergency
    shortfall = max(0.0, required - cover)

    return PlanResult(
        goalType=GoalType.PROTECTION,
        requiredAmount=round_currency(required),
        currentAmount=round_currency(cover),
        shortfall=round_currency(shortfall),
        monthlySavingNeeded=0.0,
        details=_finite({
            "incomeProtectionNeeded": income_protection_needed,
            "loans": outstanding_loans,
            "emergencyFund": emergency,
            "supportYears": years,
        }),
    )


def calculate_education(
    child_age: float,
    university_start_age: float,
    university_duration_years: float,
    current_annual_tuition: float,
    inflation_rate: float,
    investment_rate: float,
    current_savings: float,
) -> PlanResult:
    """
    Education fund: first-year tuition inflated to the start of university,
    valued as an annuity-due over the study years at the real rate.

    When university starts now and there is a gap, the whole gap is due at once.
    """
    inflation = safe_number(inflation_rate)
    investment = safe_number(investment_rate)
    years_to_university = max(0.0, safe_number(university_start_age) - safe_number(child_age))
    duration = max(0.0, safe_number(university_duration_years))

    first_year_tuition = future_value(
        safe_number(current_annual_tuition), inflation, years_to_university
    )
    rate = real_rate(investment, inflation)
    required = pv_annuity_due(first_year_tuition, rate, duration)
    projected_savings = future_value(safe_number(current_savings), investment, years_to_university)
    shortfall = max(0.0, required - projected_savings)

    if shortfall > 0 and years_to_university == 0:
        monthly = shortfall
    else:
        monthly = _monthly_saving(shortfall, investment, years_to_university)

    logger.debug(
        "education years_to_university=%s required=%.0f projected=%.0f",
        years_to_university,
        required,
        projected_savings,
    )

    return PlanResult(
        goalType=GoalType.EDUCATION,
        requiredAmount=round_currency(required),
        currentAmount=round_currency(projected_savings),
        shortfall=round_currency(shortfall),
        monthlySavingNeeded=round_currency(monthly),
        details=_finite({
            "yearsToUniversity": years_to_university,
            "futureTuitionFirstYear": first_year_tuition,
            "universityDurationYears": duration,
            "realRate": rate * 100,
        }),
    )


def calculate_goal(request: GoalRequest, settings: Optional[Settings] = None) -> PlanResult:
    """Run the calculator matching the request type, filling in the inflation preset."""
    settings = settings or Settings()

    if isinstance(request, RetirementRequest):
        inflation = (
            request.inflationRate
            if request.inflationRate is not None
            else settings.retirement_inflation
        )
        return calculate_retirement(
            current_age=request.currentAge,
            retire_age=request.retireAge,
            life_expectancy=request.lifeExpectancy,
            current_monthly_expense=request.currentMonthlyExpense,
            inflation_rate=inflation,
            investment_rate=request.investmentRate,
            current_savings=request.currentSavings,
            social_insurance=request.socialInsurance,
        )

    if isinstance(request, EducationRequest):
        inflation = (
            request.inflationRate
            if request.inflationRate is not None
            else settings.education_inflation
        )
        return calculate_education(
            child_age=request.childAge,
            university_start_age=request.universityStartAge,
            university_duration_years=request.universityDurationYears,
            current_annual_tuition=request.currentAnnualTuition,
            inflation_rate=inflation,
            investment_rate=request.investmentRate,
            current_savings=request.currentSavings,
        )

    if isinstance(request, ProtectionRequest):
        return calculate_protection(
            annual_income=request.annualIncome,
            support_years=request.supportYears,
            existing_cover=request.existingCover,
            loans=request.loans,
            emergency_fund=request.emergencyFund,
        )

    raise TypeError(f"unsupported goal request: {type(request).__name__}")


__all__ = [
    "PENSION_REPLACEMENT_RATIO",
    "calculate_retirement",
    "calculate_protection",
    "calculate_education",
    "calculate_goal",
]
