"""Future-value and drawdown arithmetic for the retirement calculator.

Everything here is pure: no cache, store or request objects are touched.
Amounts are ``decimal.Decimal``; floats and ints are accepted and converted
through ``str`` so binary artefacts never leak into currency values.
"""

from __future__ import annotations

import logging
from decimal import (
    ROUND_FLOOR,
    ROUND_HALF_UP,
    Context,
    Decimal,
    InvalidOperation,
)
from typing import Optional, Union

from retirement_calculator.core.errors import calculation_error

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

MONTHS_IN_YEAR = 12
MAX_RETIREMENT_YEARS = 100
CALCULATION_PRECISION = 10
CALCULATION_CONTEXT = Context(prec=CALCULATION_PRECISION, rounding=ROUND_HALF_UP)
# keeps (1 + r)^n - 1 significant for monthly rates just above ZERO_RATE_THRESHOLD
COMPOUNDING_PRECISION = 34
COMPOUNDING_CONTEXT = Context(prec=COMPOUNDING_PRECISION, rounding=ROUND_HALF_UP)
CURRENCY_QUANTUM = Decimal("0.01")
ZERO_RATE_THRESHOLD = Decimal("1e-10")

_HUNDRED = Decimal(100)
_ONE = Decimal(1)


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise calculation_error(f"Not a number: {value!r}", exc) from exc


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def months_until_retirement(current_age: int, retirement_age: int) -> int:
    return (retirement_age - current_age) * MONTHS_IN_YEAR


def convert_annual_rate_to_monthly(annual_rate_percent: Number) -> Decimal:
    """5 (%) -> 0.05 -> 0.004166666667.

    Simple division by twelve, not the geometric ``(1 + r) ** (1/12) - 1``.
    """
    ctx = CALCULATION_CONTEXT
    annual_rate = ctx.divide(to_decimal(annual_rate_percent), _HUNDRED)
    monthly_rate = ctx.divide(annual_rate, MONTHS_IN_YEAR)
    logger.debug("Converted annual rate %s%% to monthly rate %s", annual_rate_percent, monthly_rate)
    return monthly_rate


def future_value(monthly_deposit: Number, monthly_rate: Number, months: int) -> Decimal:
    """Future value of ``months`` end-of-month deposits.

    FV = PMT * ((1 + r)^n - 1) / r, evaluated with 34 significant digits and
    half-up rounding, then rounded to cents. A rate whose magnitude is below
    1e-10 is treated as zero and the deposits are simply summed.
    """
    if months < 0:
        raise calculation_error(f"Number of months cannot be negative: {months}")

    deposit = to_decimal(monthly_deposit)
    rate = to_decimal(monthly_rate)
    logger.debug("Calculating future value for deposit=%s, rate=%s, months=%s", deposit, rate, months)

    try:
        if abs(rate) < ZERO_RATE_THRESHOLD:
            result = round_currency(deposit * months)
            logger.debug("Zero interest rate calculation, result: %s", result)
            return result

        ctx = COMPOUNDING_CONTEXT
        # sums and products are exact; only the power and the division are rounded
        growth = ctx.power(_ONE + rate, months)
        compounding_factor = growth - _ONE
        result = round_currency(ctx.divide(deposit * compounding_factor, rate))
    except ArithmeticError as exc:
        logger.error("Arithmetic error during future value calculation: %s", exc, exc_info=True)
        raise calculation_error(f"Error calculating future value: {exc}", exc) from exc

    logger.debug("Future value calculation result: %s", result)
    return result


def years_of_retirement_sustainable(
    initial_balance: Number,
    annual_expenses: Optional[Number],
    annual_rate_percent: Number,
) -> int:
    """
    How many whole years ``initial_balance`` covers ``annual_expenses``
    while the remainder keeps earning ``annual_rate_percent``.

    Capped at 100:
      - no expenses: 100
      - zero rate: floor(balance / expenses)
      - interest alone covers the expenses: 100
      - otherwise: year-by-year drawdown until the balance is exhausted
    """
    balance = to_decimal(initial_balance)
    expenses = to_decimal(annual_expenses)
    rate = to_decimal(annual_rate_percent) / _HUNDRED

    try:
        if expenses <= 0:
            return MAX_RETIREMENT_YEARS

        if rate == 0:
            years = int((balance / expenses).to_integral_value(rounding=ROUND_FLOOR))
            return max(0, min(years, MAX_RETIREMENT_YEARS))

        if balance * rate >= expenses:
            return MAX_RETIREMENT_YEARS

        years = 0
        while balance > 0 and years < MAX_RETIREMENT_YEARS:
            interest_earned = balance * rate
            balance = balance - expenses + interest_earned
            years += 1
    except ArithmeticError as exc:
        logger.error("Arithmetic error during years of retirement calculation: %s", exc, exc_info=True)
        raise calculation_error(f"Error calculating years of retirement: {exc}", exc) from exc

    logger.debug("Retirement savings will last %s years", years)
    return years
