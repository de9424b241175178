"""Data contracts for the retirement calculation endpoint."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from retirement_calculator.domain.models import CalculationRequest, CalculationResult, LifestyleProfile


class RetirementCalculatorRequest(BaseModel):
    """Inputs required to project retirement savings."""

    model_config = ConfigDict(extra="ignore")

    currentAge: int = Field(..., ge=18, le=100, description="Current age in years.")
    retirementAge: int = Field(..., ge=18, le=100, description="Expected retirement age in years.")
    lifestyleType: str = Field(
        ...,
        min_length=1,
        description="Lifestyle used to look up the monthly deposit and base rate (e.g. simple, fancy).",
    )
    customInterestRate: Optional[float] = Field(
        None,
        ge=0,
        le=20,
        validation_alias=AliasChoices("customInterestRate", "interestRate"),
        description="Annual interest rate as a percentage; overrides the lifestyle's base rate.",
    )

    @field_validator("lifestyleType")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Lifestyle type is required")
        return value.strip()

    def to_domain(self) -> CalculationRequest:
        return CalculationRequest(
            current_age=self.currentAge,
            retirement_age=self.retirementAge,
            lifestyle_type=self.lifestyleType,
            custom_interest_rate=(
                Decimal(str(self.customInterestRate)) if self.customInterestRate is not None else None
            ),
        )


class RetirementCalculatorResponse(BaseModel):
    """Projected savings at retirement and how long they last."""

    currentAge: int
    retirementAge: int
    interestRate: float
    lifestyleType: str
    totalRetirementSavings: float
    monthlyDeposit: float
    annualExpenses: float
    yearsOfRetirement: int
    percentageOfGoalAchieved: float

    @classmethod
    def from_result(cls, result: CalculationResult) -> "RetirementCalculatorResponse":
        return cls(
            currentAge=result.current_age,
            retirementAge=result.retirement_age,
            interestRate=float(result.interest_rate),
            lifestyleType=result.lifestyle_type,
            totalRetirementSavings=float(result.total_retirement_savings),
            monthlyDeposit=float(result.monthly_deposit),
            annualExpenses=float(result.annual_expenses),
            yearsOfRetirement=result.years_of_retirement,
            percentageOfGoalAchieved=result.percentage_of_goal_achieved,
        )


class LifestyleResponse(BaseModel):
    lifestyleType: str
    monthlyDeposit: float
    annualExpenses: float
    description: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: LifestyleProfile) -> "LifestyleResponse":
        return cls(
            lifestyleType=profile.lifestyle_type,
            monthlyDeposit=float(profile.monthly_deposit),
            annualExpenses=float(profile.annual_expenses),
            description=profile.description,
        )


class FieldErrorDetail(BaseModel):
    field: str
    rejectedValue: Any = None
    message: str


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    fieldErrors: Optional[List[FieldErrorDetail]] = None
