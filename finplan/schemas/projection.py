"""Data contracts for the investment-linked cash-value projection."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BonusType(str, Enum):
    PREMIUM_BASED = "PREMIUM_BASED"
    ACCOUNT_BASED = "ACCOUNT_BASED"


class BonusRule(BaseModel):
    """Loyalty bonus credited once in policy year `year`."""

    model_config = ConfigDict(extra="forbid")

    year: int
    rate: float
    type: BonusType = BonusType.PREMIUM_BASED


class CoiBand(BaseModel):
    """Cost-of-insurance rate that applies once the insured is older than fromAge."""

    model_config = ConfigDict(extra="forbid")

    fromAge: int
    rate: float


def _default_initial_charges() -> Dict[int, float]:
    # front-load charge per policy year; unlisted years carry no charge
    return {1: 0.85, 2: 0.50, 3: 0.20, 4: 0.05}


def _default_bonuses() -> List[BonusRule]:
    return [
        BonusRule(year=5, rate=0.10, type=BonusType.PREMIUM_BASED),
        BonusRule(year=10, rate=0.50, type=BonusType.PREMIUM_BASED),
        BonusRule(year=20, rate=1.00, type=BonusType.PREMIUM_BASED),
    ]


def _default_coi_bands() -> List[CoiBand]:
    # placeholder ladder, not an insurer's table
    return [
        CoiBand(fromAge=0, rate=0.001),
        CoiBand(fromAge=40, rate=0.003),
        CoiBand(fromAge=50, rate=0.008),
        CoiBand(fromAge=60, rate=0.015),
        CoiBand(fromAge=70, rate=0.030),
    ]


class ProjectionConfig(BaseModel):
    """
    Product assumptions for the projection.

    defaultInterestRate / highInterestRate are the two illustration presets; the
    roll-forward itself only uses the interest rate it is called with.
    coiBands apply per thousand of amount at risk, the highest band whose
    fromAge is below the insured's age wins.
    """

    model_config = ConfigDict(extra="forbid")

    defaultInterestRate: float = 0.05
    highInterestRate: float = 0.065
    initialCharges: Dict[int, float] = Field(default_factory=_default_initial_charges)
    bonuses: List[BonusRule] = Field(default_factory=_default_bonuses)
    coiBands: List[CoiBand] = Field(default_factory=_default_coi_bands)
    monthlyAdminFee: float = 40_000.0


DEFAULT_PROJECTION_CONFIG = ProjectionConfig()


class ProjectionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    currentAge: Optional[int] = Field(None, ge=0, le=120)
    annualPremium: Optional[float] = Field(
        None, ge=0, le=1e15, description="Base-plan premium per year, riders excluded."
    )
    sumAssured: Optional[float] = Field(None, ge=0, le=1e15)
    paymentTerm: Optional[int] = Field(
        None, ge=0, le=120, description="Years of premium payment."
    )
    interestRate: Optional[float] = Field(
        None,
        ge=-0.5,
        le=1,
        description="Flat credited rate. Left empty, config.defaultInterestRate applies.",
    )
    config: Optional[ProjectionConfig] = None


class YearProjection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int
    age: int
    premiumPaid: float
    accumulatedPremium: float
    accountValue: float = Field(..., ge=0)
    surrenderValue: float = Field(..., ge=0)
    deathBenefit: float


class ProjectionResponse(BaseModel):
    rows: List[YearProjection]
    # true when the account value ran out before the projection horizon
    lapsed: bool


class ScenarioComparison(BaseModel):
    standardRate: float
    highRate: float
    standard: List[YearProjection]
    high: List[YearProjection]
