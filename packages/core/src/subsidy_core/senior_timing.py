"""Start-date advice for the senior continued-employment subsidy.

The subsidy pays per eligible senior per quarter for 12 quarters, counted
at each quarter's start. Employees who turn 60 shortly after the claim
starts only count from the quarter after the new year in which they turn
60, so delaying the start can raise the total.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .clock import Clock
from .korean import add_months, format_korean_date, months_between
from .models import (
    SENIOR_MIN_AGE,
    CanonicalEmployee,
    EmployeeTurning60,
    MonthlyEligibility,
    RegionType,
    SeniorTimingRecommendation,
)
from .standards import (
    MONTHS_PER_QUARTER,
    SENIOR_CONTINUED_MIN_WAGE,
    SENIOR_CONTINUED_QUARTERS,
    get_senior_continued_quarterly_rate,
)

logger = structlog.get_logger()

MAX_WAIT_MONTHS = 24
TURNING_60_HORIZON_MONTHS = 36
TIMELINE_MONTHS = 12


def _months_until(today: date, target: date) -> int:
    """Whole months from today to target, rounded up."""
    months = months_between(today, target)
    if add_months(today, months) < target:
        months += 1
    return months


def _manwon(amount: Decimal) -> str:
    return f"{int(amount / 10000):,}만원"


def _senior_from(employee: CanonicalEmployee, today: date) -> Optional[date]:
    birth_year = employee.birth_year
    if employee.age is not None:
        birth_year = today.year - employee.age
    if birth_year is None:
        return None
    return date(birth_year + SENIOR_MIN_AGE, 1, 1)


class _SeniorAges:
    """Employees the continued-employment subsidy counts, by the date they start counting.

    Age is calendar-year age (year minus birth year), so an employee counts
    as a senior from 1 January of the year they turn 60. Only current
    employees paid at least the wage floor are counted, as in the program
    calculation.
    """

    def __init__(self, employees: Sequence[CanonicalEmployee], today: date):
        self._entries = [
            (e, _senior_from(e, today))
            for e in employees
            if e.is_current_employee
            and e.monthly_salary is not None
            and e.monthly_salary >= SENIOR_CONTINUED_MIN_WAGE
        ]

    def eligible_at(self, when: date) -> int:
        return sum(1 for _, start in self._entries if start is not None and start <= when)

    def window_total(self, start: date, quarterly_rate: Decimal) -> Decimal:
        return sum(
            (
                self.eligible_at(add_months(start, q * MONTHS_PER_QUARTER)) * quarterly_rate
                for q in range(SENIOR_CONTINUED_QUARTERS)
            ),
            Decimal("0"),
        )

    def turning_60_soon(self, today: date) -> list[EmployeeTurning60]:
        horizon = add_months(today, TURNING_60_HORIZON_MONTHS)
        soon = [
            EmployeeTurning60(
                name=employee.name,
                current_age=employee.age,
                turns_60_date=start,
                months_until_60=_months_until(today, start),
            )
            for employee, start in self._entries
            if start is not None and today < start <= horizon
        ]
        return sorted(soon, key=lambda item: item.months_until_60)


def analyze_optimal_senior_timing(
    employees: Sequence[CanonicalEmployee],
    region: RegionType,
    clock: Clock,
) -> Optional[SeniorTimingRecommendation]:
    """Find the claim start within the next 24 months that pays the most.

    Candidate starts are today and the first day of each of the following
    24 months. Ties keep the earliest start.

    Returns:
        The recommendation, or None when there are no employees.
    """
    if not employees:
        return None

    today = clock.today()
    quarterly_rate = get_senior_continued_quarterly_rate(region)
    ages = _SeniorAges(employees, today)

    current_count = ages.eligible_at(today)
    current_total = ages.window_total(today, quarterly_rate)
    optimal_start, optimal_count, optimal_total = today, current_count, current_total

    timeline = []
    first_of_month = today.replace(day=1)
    for offset in range(MAX_WAIT_MONTHS + 1):
        start = today if offset == 0 else add_months(first_of_month, offset)
        count = ages.eligible_at(start)
        total = ages.window_total(start, quarterly_rate)
        timeline.append(MonthlyEligibility(
            month=f"{start.year}-{start.month:02d}",
            eligible_count=count,
            quarterly_amount=count * quarterly_rate,
            cumulative_amount=total,
        ))
        if total > optimal_total:
            optimal_start, optimal_count, optimal_total = start, count, total

    soon = ages.turning_60_soon(today)
    additional = optimal_total - current_total

    if additional <= 0:
        recommendation = (
            f"지금 신청하는 것이 최적입니다. 현재 60세 이상 {current_count}명 대상, "
            f"3년간 총 {_manwon(current_total)} 수령 가능합니다."
        )
    else:
        wait_months = _months_until(today, optimal_start)
        recommendation = (
            f"{wait_months}개월 후({format_korean_date(optimal_start)}) 신청을 권장합니다. "
            f"{len(soon)}명이 추가로 60세에 도달하여 총 {optimal_count}명 대상이 됩니다. "
            f"지금 신청 대비 {_manwon(additional)} 추가 수령 가능합니다."
        )

    logger.info(
        "senior_timing_analyzed",
        current_eligible=current_count,
        optimal_eligible=optimal_count,
        additional_amount=str(additional),
    )

    return SeniorTimingRecommendation(
        optimal_start_date=optimal_start,
        optimal_end_date=add_months(optimal_start, SENIOR_CONTINUED_QUARTERS * MONTHS_PER_QUARTER),
        current_eligible_count=current_count,
        optimal_eligible_count=optimal_count,
        current_total_amount=current_total,
        optimal_total_amount=optimal_total,
        additional_amount_if_wait=additional,
        employees_turning_60_soon=soon,
        recommendation=recommendation,
        monthly_timeline=timeline[:TIMELINE_MONTHS],
    )


__all__ = ["analyze_optimal_senior_timing"]
