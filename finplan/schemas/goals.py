"""Data contracts for the goal funding calculators."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# request bounds keep the compounding inside float range
MAX_AGE = 120
MAX_AMOUNT = 1e15


class GoalType(str, Enum):
    RETIREMENT = "retirement"
    EDUCATION = "education"
    PROTECTION = "protection"


class SocialInsurance(BaseModel):
    """State pension participation; the salary is the contribution basis today."""

    model_config = ConfigDict(extra="forbid")

    hasSI: bool = False
    salaryForSI: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)


class RetirementRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    currentAge: Optional[float] = Field(None, ge=0, le=MAX_AGE)
    retireAge: Optional[float] = Field(None, ge=0, le=MAX_AGE)
    lifeExpectancy: Optional[float] = Field(None, ge=0, le=MAX_AGE)
    currentMonthlyExpense: Optional[float] = Field(
        None, ge=0, le=MAX_AMOUNT, description="Monthly living expense in today's money."
    )
    inflationRate: Optional[float] = Field(
        None,
        ge=-0.5,
        le=1,
        description="Decimal rate (0.04 = 4%). Left empty, the retirement preset applies.",
    )
    investmentRate: Optional[float] = Field(None, ge=-0.5, le=1)
    currentSavings: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)
    socialInsurance: Optional[SocialInsurance] = None


class ProtectionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    annualIncome: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)
    supportYears: Optional[float] = Field(None, ge=0, le=MAX_AGE)
    existingCover: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)
    loans: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)
    emergencyFund: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)


class EducationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    childAge: Optional[float] = Field(None, ge=0, le=MAX_AGE)
    universityStartAge: Optional[float] = Field(None, ge=0, le=MAX_AGE)
    universityDurationYears: Optional[float] = Field(None, ge=0, le=MAX_AGE)
    currentAnnualTuition: Optional[float] = Field(
        None, ge=0, le=MAX_AMOUNT, description="One year of tuition in today's money."
    )
    inflationRate: Optional[float] = Field(
        None,
        ge=-0.5,
        le=1,
        description="Decimal rate (0.08 = 8%). Left empty, the education preset applies.",
    )
    investmentRate: Optional[float] = Field(None, ge=-0.5, le=1)
    currentSavings: Optional[float] = Field(None, ge=0, le=MAX_AMOUNT)


GoalRequest = Union[RetirementRequest, EducationRequest, ProtectionRequest]


class PlanResult(BaseModel):
    """Outcome of one goal calculation; money fields are whole currency units."""

    model_config = ConfigDict(extra="forbid")

    goalType: GoalType
    requiredAmount: float
    currentAmount: float
    shortfall: float = Field(..., ge=0)
    monthlySavingNeeded: float = Field(0.0, ge=0)
    details: Dict[str, float] = Field(default_factory=dict)
