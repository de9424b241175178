"""Request orchestration: validate, resolve lifestyle data, compute, assemble."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Protocol

from retirement_calculator.core.calculator import (
    MAX_RETIREMENT_YEARS,
    convert_annual_rate_to_monthly,
    future_value,
    months_until_retirement,
    round_currency,
    to_decimal,
    years_of_retirement_sustainable,
)
from retirement_calculator.core.errors import (
    RetirementCalculatorError,
    calculation_error,
    invalid_parameter,
    lifestyle_not_found,
    rate_not_found,
)
from retirement_calculator.domain.models import (
    CalculationRequest,
    CalculationResult,
    LifestyleProfile,
    RateEntry,
)

logger = logging.getLogger(__name__)

PERCENTAGE_OF_GOAL_ACHIEVED = 100.0


class DepositLookup(Protocol):
    def get_deposit(self, lifestyle_type: str) -> Optional[LifestyleProfile]: ...

    def get_all_deposits(self) -> List[LifestyleProfile]: ...

    def refresh_cache(self) -> int: ...

    def is_healthy(self) -> bool: ...


class RateLookup(Protocol):
    def get_rate(self, lifestyle_type: str) -> Optional[RateEntry]: ...

    def refresh_cache(self) -> int: ...

    def is_healthy(self) -> bool: ...


def validate_request(request: CalculationRequest) -> None:
    """Domain checks that hold regardless of what the transport layer already enforced."""
    if request.retirement_age <= request.current_age:
        _reject("Retirement age must be greater than current age")
    if request.custom_interest_rate is not None and to_decimal(request.custom_interest_rate) < 0:
        _reject("Interest rate cannot be negative")
    if request.years_to_retirement > MAX_RETIREMENT_YEARS:
        _reject("Years to retirement cannot exceed 100")
    if not request.lifestyle_type or not request.lifestyle_type.strip():
        _reject("Lifestyle type is required")


def _reject(message: str) -> None:
    logger.error("Validation error: %s", message)
    raise invalid_parameter(message)


class RetirementCalculatorService:
    def __init__(self, lifestyle_cache: DepositLookup, rate_cache: RateLookup) -> None:
        self._lifestyles = lifestyle_cache
        self._rates = rate_cache

    def calculate(self, request: CalculationRequest) -> CalculationResult:
        logger.info(
            "Calculating retirement savings: age=%s, retirementAge=%s, customRate=%s, lifestyle=%s",
            request.current_age,
            request.retirement_age,
            request.custom_interest_rate,
            request.lifestyle_type,
        )
        validate_request(request)

        profile = self._lifestyles.get_deposit(request.lifestyle_type)
        if profile is None:
            raise lifestyle_not_found(request.lifestyle_type)
        interest_rate = self._resolve_rate(request)
        logger.debug(
            "Resolved monthlyDeposit=%s, annualExpenses=%s, interestRate=%s",
            profile.monthly_deposit,
            profile.annual_expenses,
            interest_rate,
        )

        try:
            months = months_until_retirement(request.current_age, request.retirement_age)
            monthly_rate = convert_annual_rate_to_monthly(interest_rate)
            total = future_value(profile.monthly_deposit, monthly_rate, months)
            years_of_retirement = years_of_retirement_sustainable(
                total, profile.annual_expenses, interest_rate
            )
        except RetirementCalculatorError:
            raise
        except (ArithmeticError, ValueError, TypeError) as exc:
            logger.error("Calculation error: %s", exc, exc_info=True)
            raise calculation_error(f"Error during retirement calculation: {exc}", exc) from exc

        logger.info("Calculation completed successfully. Total retirement savings: %s", total)
        return CalculationResult(
            current_age=request.current_age,
            retirement_age=request.retirement_age,
            interest_rate=interest_rate,
            lifestyle_type=request.lifestyle_type,
            total_retirement_savings=round_currency(total),
            monthly_deposit=profile.monthly_deposit,
            annual_expenses=profile.annual_expenses,
            years_of_retirement=years_of_retirement,
            percentage_of_goal_achieved=PERCENTAGE_OF_GOAL_ACHIEVED,
        )

    def _resolve_rate(self, request: CalculationRequest) -> Decimal:
        if request.custom_interest_rate is not None:
            return to_decimal(request.custom_interest_rate)
        entry = self._rates.get_rate(request.lifestyle_type)
        if entry is None:
            raise rate_not_found(request.lifestyle_type)
        return entry.interest_rate

    def list_lifestyles(self) -> List[LifestyleProfile]:
        return self._lifestyles.get_all_deposits()

    def refresh_caches(self) -> Dict[str, int]:
        return {
            "lifestyles": self._lifestyles.refresh_cache(),
            "interestRates": self._rates.refresh_cache(),
        }

    def cache_health(self) -> Dict[str, bool]:
        return {
            "lifestyles": self._lifestyles.is_healthy(),
            "interestRates": self._rates.is_healthy(),
        }

    def is_healthy(self) -> bool:
        return all(self.cache_health().values())
