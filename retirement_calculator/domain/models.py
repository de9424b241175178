from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class LifestyleProfile:
    """A row of the lifestyle table: how much is deposited monthly for a lifestyle."""

    lifestyle_type: str
    monthly_deposit: Decimal
    annual_expenses: Decimal = Decimal("0")
    description: Optional[str] = None

    @property
    def key(self) -> str:
        return self.lifestyle_type.lower()


@dataclass(frozen=True)
class RateEntry:
    """Base annual interest rate, in percent, for a lifestyle."""

    lifestyle_type: str
    interest_rate: Decimal

    @property
    def key(self) -> str:
        return self.lifestyle_type.lower()


@dataclass(frozen=True)
class CalculationRequest:
    current_age: int
    retirement_age: int
    lifestyle_type: str
    custom_interest_rate: Optional[Decimal] = None

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.current_age


@dataclass(frozen=True)
class CalculationResult:
    current_age: int
    retirement_age: int
    interest_rate: Decimal
    lifestyle_type: str
    total_retirement_savings: Decimal
    monthly_deposit: Decimal
    annual_expenses: Decimal
    years_of_retirement: int
    percentage_of_goal_achieved: float
