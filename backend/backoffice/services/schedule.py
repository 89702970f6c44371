"""
Payment Schedule Generator
==========================
Turns a contract's commercial terms into the dated list of monthly
royalty + marketing obligations that covers the whole contract term.

Rules:
- one obligation per month, ``duration_years * 12`` in total
- the first ``grace_period_months`` obligations are tagged ``grace``
- amounts compound by ``annual_increase`` percent at every contract
  anniversary month, never touching months already emitted

Pure computation: nothing here touches the database.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta

from backoffice.core.errors import InvalidConfiguration
from backoffice.models.royalty import PaymentStatus

Number = Union[Decimal, int, float, str]

MONTHS_PER_YEAR = 12

# Money columns are Numeric(12, 2), the increase column Numeric(6, 2)
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")
MAX_ANNUAL_INCREASE = Decimal("9999.99")

# The term must end early enough that its renewal start is still a valid date
LAST_END_YEAR = date.max.year - 1
MAX_DURATION_YEARS = LAST_END_YEAR - date.min.year


@dataclass(frozen=True)
class PaymentObligation:
    """One generated monthly obligation."""

    contract_id: Optional[int]
    month_index: int
    due_date: date
    royalty_amount: Decimal
    marketing_amount: Decimal
    amount: Decimal
    status: PaymentStatus


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from turning into binary noise
    return Decimal(str(value))


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _check_number(name: str, value: Number, upper: Decimal, problems: List[str]) -> Optional[Decimal]:
    """Append what is wrong with a money/percent input; return it when usable."""
    try:
        number = _to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        problems.append(f"{name} must be a number")
        return None
    if not number.is_finite():
        problems.append(f"{name} must be a finite number")
        return None
    if number < 0:
        problems.append(f"{name} cannot be negative")
        return None
    if number > upper:
        problems.append(f"{name} cannot exceed {upper}")
        return None
    return number


def validate_terms(
    start_date: date,
    duration_years: int,
    royalty_amount: Number,
    marketing_amount: Number,
    annual_increase: Number,
    grace_period_months: int,
) -> None:
    """Raise InvalidConfiguration listing every problem with the terms."""
    problems: List[str] = []
    duration_ok = False
    if duration_years < 1:
        problems.append("duration_years must be at least 1")
    elif start_date.year + duration_years > LAST_END_YEAR:
        problems.append(f"contract term must end before year {LAST_END_YEAR + 1}")
    else:
        duration_ok = True

    royalty = _check_number("royalty_amount", royalty_amount, MAX_AMOUNT, problems)
    marketing = _check_number("marketing_amount", marketing_amount, MAX_AMOUNT, problems)
    increase = _check_number("annual_increase", annual_increase, MAX_ANNUAL_INCREASE, problems)

    if grace_period_months < 0:
        problems.append("grace_period_months cannot be negative")

    if duration_ok and None not in (royalty, marketing, increase):
        # Largest monthly amount is reached in the last contract year
        growth = (1 + increase / 100) ** (duration_years - 1)
        peak_royalty, peak_marketing = royalty * growth, marketing * growth
        if (peak_royalty + peak_marketing > MAX_AMOUNT
                or _quantize(peak_royalty) + _quantize(peak_marketing) > MAX_AMOUNT):
            problems.append(f"escalated monthly amount cannot exceed {MAX_AMOUNT}")

    if problems:
        raise InvalidConfiguration(problems)


def generate_schedule(
    contract_id: Optional[int],
    start_date: date,
    duration_years: int,
    royalty_amount: Number,
    marketing_amount: Number,
    annual_increase: Number = 0,
    grace_period_months: int = 0,
) -> List[PaymentObligation]:
    """Generate the monthly obligations of a contract.

    Due dates are always derived from ``start_date`` so a start on the 31st
    lands on the last day of shorter months without drifting afterwards.
    A grace period longer than the contract simply tags every month as grace.

    Raises:
        InvalidConfiguration: before anything is generated, when the terms
            are out of range.
    """
    validate_terms(start_date, duration_years, royalty_amount, marketing_amount,
                   annual_increase, grace_period_months)

    factor = 1 + _to_decimal(annual_increase) / 100
    current_royalty = _to_decimal(royalty_amount)
    current_marketing = _to_decimal(marketing_amount)

    obligations: List[PaymentObligation] = []
    for month_index in range(duration_years * MONTHS_PER_YEAR):
        if month_index and month_index % MONTHS_PER_YEAR == 0:
            current_royalty *= factor
            current_marketing *= factor

        royalty = _quantize(current_royalty)
        marketing = _quantize(current_marketing)
        status = PaymentStatus.GRACE if month_index < grace_period_months else PaymentStatus.UPCOMING

        obligations.append(PaymentObligation(
            contract_id=contract_id,
            month_index=month_index,
            due_date=start_date + relativedelta(months=month_index),
            royalty_amount=royalty,
            marketing_amount=marketing,
            amount=royalty + marketing,
            status=status,
        ))

    return obligations


def contract_end_date(start_date: date, duration_years: int) -> date:
    """Nominal end of a contract (first day after its term)."""
    return start_date + relativedelta(years=duration_years)


def suggest_renewal_start(
    start_date: date,
    duration_years: int,
    terminated: bool = False,
    termination_date: Optional[date] = None,
) -> date:
    """Default start date offered when renewing a contract.

    The day after the nominal end of the previous term, or the day after
    the termination date when the previous contract was ended early.
    """
    if terminated and termination_date is not None:
        return termination_date + timedelta(days=1)
    return contract_end_date(start_date, duration_years) + timedelta(days=1)


def summarize_schedule(obligations: List[PaymentObligation]) -> Dict[str, Any]:
    """Totals shown next to a schedule preview."""
    if not obligations:
        return {"count": 0, "grace_months": 0, "total_amount": "0", "first_due": None, "last_due": None}
    total = sum((o.amount for o in obligations), Decimal(0))
    return {
        "count": len(obligations),
        "grace_months": sum(1 for o in obligations if o.status == PaymentStatus.GRACE),
        "total_amount": str(total),
        "first_due": obligations[0].due_date.isoformat(),
        "last_due": obligations[-1].due_date.isoformat(),
    }
