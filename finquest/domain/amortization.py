"""EMI and amortization schedule calculation for simulated loans"""

import math
from typing import List
from finquest.domain.models import AmortizationResult, LoanQuery, ScheduleEntry
from finquest.domain.exceptions import InvalidArgumentError
from finquest.utils.rounding import round_half_up

SCHEDULE_PREVIEW_PERIODS = 12


def validate_query(query: LoanQuery) -> None:
    """Reject loan parameters the EMI formula cannot handle"""
    for name, value in (
        ("principal", query.principal),
        ("annual_rate_percent", query.annual_rate_percent),
    ):
        if not math.isfinite(value):
            raise InvalidArgumentError(f"{name} must be a finite number, got {value!r}")
        if value < 0:
            raise InvalidArgumentError(f"{name} must not be negative, got {value!r}")

    if isinstance(query.term_months, bool) or not isinstance(query.term_months, int):
        raise InvalidArgumentError(f"term_months must be a whole number, got {query.term_months!r}")
    if query.term_months <= 0:
        raise InvalidArgumentError(f"term_months must be positive, got {query.term_months!r}")


def periodic_installment(principal: float, periodic_rate: float, term_months: int) -> float:
    """
    Fixed installment that repays `principal` over `term_months` periods.

    EMI = P * r / (1 - (1+r)^-n), straight-line P / n when r == 0. The
    discount factor 1 - (1+r)^-n is evaluated through expm1/log1p, so it
    tends to 1 for long terms or steep rates instead of overflowing, and
    stays non-zero for rates too small to register in 1 + r.
    """
    if periodic_rate == 0:
        return principal / term_months

    discount = -math.expm1(-term_months * math.log1p(periodic_rate))
    return principal * periodic_rate / discount


def build_schedule(
    principal: float,
    periodic_rate: float,
    installment: float,
    periods: int,
) -> List[ScheduleEntry]:
    """
    Period-by-period principal/interest split.

    Every reported amount is rounded to whole units. The balance carried into
    the next period's interest is the rounded, zero-clamped balance reported for
    the previous period, so each row can be reproduced from the row above it.
    """
    schedule = []
    balance: float = principal

    for period in range(1, periods + 1):
        interest = balance * periodic_rate
        principal_portion = installment - interest
        remaining = round_half_up(max(0.0, balance - principal_portion))

        schedule.append(
            ScheduleEntry(
                period_index=period,
                installment=round_half_up(installment),
                principal_portion=round_half_up(principal_portion),
                interest_portion=round_half_up(interest),
                remaining_balance=remaining,
            )
        )
        balance = remaining

    return schedule


def compute_amortization(query: LoanQuery) -> AmortizationResult:
    """
    Main entry point: EMI, totals and the first-year schedule for a loan.

    Raises:
        InvalidArgumentError: non-positive term, negative principal or rate,
            or figures too large to represent
    """
    validate_query(query)

    periodic_rate = query.annual_rate_percent / 1200
    installment = periodic_installment(query.principal, periodic_rate, query.term_months)

    total_paid = installment * query.term_months
    if not (math.isfinite(installment) and math.isfinite(total_paid)):
        raise InvalidArgumentError(
            f"loan of {query.principal!r} at {query.annual_rate_percent!r}% is too large to price"
        )
    total_interest = total_paid - query.principal

    schedule = build_schedule(
        query.principal,
        periodic_rate,
        installment,
        min(SCHEDULE_PREVIEW_PERIODS, query.term_months),
    )

    return AmortizationResult(
        installment_amount=installment,
        total_paid=total_paid,
        total_interest=total_interest,
        monthly_rate_percent=periodic_rate * 100,
        schedule=schedule,
    )


def calculate_loan(principal: float, annual_rate_percent: float, term_months: int) -> AmortizationResult:
    """Convenience wrapper taking the loan parameters positionally"""
    return compute_amortization(LoanQuery(principal, annual_rate_percent, term_months))
