"""Subsidy eligibility rules and amount calculations.

This module provides:
1. SubsidyCalculator - per-program company-level calculations and the
   per-employee analysis
2. BreakdownBuilder - the step-by-step audit trail behind every amount

Every evaluation starts from scratch; nothing is carried between runs.
Statuses follow one rule across programs:

- NOT_ELIGIBLE when a condition the documents can prove is failed, or
  nobody qualifies and no employee is left unresolved.
- NEEDS_REVIEW when the only open conditions are ones the documents cannot
  prove (vulnerable-class status, a retirement-policy change, ...), or when
  nobody qualifies but some ages or wages are unknown. Conditions checked
  only on the known employees are not proof while others are unknown.
- ELIGIBLE otherwise.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import structlog

from .clock import Clock
from .exclusion import resolve_employee_exclusions
from .korean import add_months, format_korean_date
from .models import (
    CalculationBreakdown,
    CalculationOptions,
    CalculationStep,
    CanonicalEmployee,
    DocumentBundle,
    EligibilityStatus,
    EligibleProgramInfo,
    EmployeeSummary,
    IneligibleProgramInfo,
    ParentalLeaveType,
    PaymentScheduleItem,
    PerEmployeeCalculation,
    Program,
    ProgramSummary,
    RegionType,
    SeniorProgramType,
    SubsidyCalculation,
    SubsidyRequirement,
    WorkType,
    YouthType,
)
from .standards import (
    CONVERSION_MAX_INSURED,
    CONVERSION_MIN_INSURED,
    CONVERSION_MIN_SERVICE_MONTHS,
    CONVERSION_MIN_WAGE,
    CONVERSION_MONTHLY_RATE,
    CONVERSION_SUPPORT_MONTHS,
    MATERNITY_MONTHLY_RATE,
    MATERNITY_MONTHS,
    MONTHS_PER_QUARTER,
    NON_CAPITAL_AREA_LABELS,
    PARENTAL_ADDITIONAL_SUPPORT,
    PARENTAL_BASE_MONTHLY_RATE,
    PARENTAL_LEAVE_MONTHS,
    PARENTAL_SPECIAL_CHILD_AGE_MONTHS,
    PARENTAL_SPECIAL_MIN_CONSECUTIVE_MONTHS,
    PARENTAL_SPECIAL_MONTHLY_RATE,
    PARENTAL_SPECIAL_MONTHS,
    PROMOTION_MONTHLY_RATE,
    PROMOTION_SUPPORT_MONTHS,
    REDUCED_HOURS_MONTHLY_RATE,
    REDUCED_HOURS_MONTHS,
    RETENTION_MILESTONE_MONTHS,
    SENIOR_CONTINUED_MIN_WAGE,
    SENIOR_CONTINUED_QUARTERS,
    SENIOR_SUPPORT_QUARTERLY_RATE,
    SENIOR_SUPPORT_QUARTERS,
    YOUTH_INCENTIVE_MILESTONES,
    YOUTH_MONTHLY_RATE,
    YOUTH_SUPPORT_MONTHS,
    get_conversion_support_limit,
    get_program_name,
    get_promotion_wage_threshold,
    get_senior_continued_quarterly_rate,
    get_standards_version,
    get_youth_incentive,
)

logger = structlog.get_logger()

ZERO = Decimal("0")
TERMINATED_REASON = "퇴사자는 지원 대상이 아닙니다"

# Programs evaluated for each employee; the others are company-level only
PER_EMPLOYEE_PROGRAMS = (
    Program.YOUTH_JOB_LEAP,
    Program.EMPLOYMENT_PROMOTION,
    Program.REGULAR_CONVERSION,
    Program.SENIOR_CONTINUED_EMPLOYMENT,
    Program.SENIOR_EMPLOYMENT_SUPPORT,
)

SENIOR_PROGRAM_LABELS = {
    SeniorProgramType.RETIREMENT_EXTENSION: "정년연장",
    SeniorProgramType.RETIREMENT_ABOLITION: "정년폐지",
    SeniorProgramType.REEMPLOYMENT: "재고용",
}


def _won(amount: Decimal) -> str:
    return f"{int(amount):,}원"


# =============================================================================
# CONTEXT
# =============================================================================

@dataclass(frozen=True)
class EvaluationContext:
    """Company-level facts that every program evaluation needs."""
    region: RegionType = RegionType.CAPITAL
    options: CalculationOptions = field(default_factory=CalculationOptions)
    has_business_registration: bool = False
    has_wage_ledger: bool = False
    has_insurance_roster: bool = False
    contract_count: int = 0

    @classmethod
    def from_bundle(
        cls,
        bundle: DocumentBundle,
        region: RegionType,
        options: Optional[CalculationOptions] = None,
    ) -> "EvaluationContext":
        return cls(
            region=region,
            options=options or CalculationOptions(),
            has_business_registration=bundle.business_registration is not None,
            has_wage_ledger=bundle.wage_ledger is not None,
            has_insurance_roster=bundle.has_insurance_data,
            contract_count=len(bundle.employment_contracts),
        )


# =============================================================================
# BREAKDOWN
# =============================================================================

class BreakdownBuilder:
    """Collects calculation steps and closes them with the final total."""

    def __init__(self, program: Program):
        self.program = program
        self._steps: list[CalculationStep] = []

    def add_step(
        self,
        description: str,
        result: Decimal,
        formula: Optional[str] = None,
        **inputs,
    ) -> Decimal:
        """Append a step and return its result for chaining."""
        step = CalculationStep(
            step=len(self._steps) + 1,
            description=description,
            formula=formula,
            inputs=inputs,
            result=result,
        )
        self._steps.append(step)
        self._log_step(step)
        return result

    def _log_step(self, step: CalculationStep) -> None:
        logger.info(
            "calculation_step",
            program=self.program.value,
            step=step.step,
            description=step.description,
            output=str(step.result),
        )

    def build(
        self,
        base_amount: Decimal,
        incentive_amount: Decimal = ZERO,
        payment_schedule: Optional[list[PaymentScheduleItem]] = None,
    ) -> CalculationBreakdown:
        total = base_amount + incentive_amount
        self.add_step(
            "최종 지원금액",
            total,
            formula="기본 지원금 + 인센티브",
            base_amount=base_amount,
            incentive_amount=incentive_amount,
        )
        return CalculationBreakdown(
            program=self.program,
            steps=self._steps,
            base_amount=base_amount,
            incentive_amount=incentive_amount,
            total_amount=total,
            payment_schedule=payment_schedule or [],
        )


def _milestone(
    label: str,
    months: int,
    amount: Decimal,
    start: Optional[date],
    description: Optional[str] = None,
) -> PaymentScheduleItem:
    return PaymentScheduleItem(
        milestone=label,
        months_after_start=months,
        amount=amount,
        description=description,
        expected_date=add_months(start, months) if start else None,
    )


def _monthly_breakdown(
    program: Program,
    monthly_rate: Decimal,
    months: int,
    count: int,
    incentive_per_head: Decimal = ZERO,
    schedule: Optional[list[PaymentScheduleItem]] = None,
) -> CalculationBreakdown:
    """Rate lookup, duration lookup, base multiplication, incentive, total."""
    builder = BreakdownBuilder(program)
    builder.add_step("월 지원단가 확인", monthly_rate, monthly_rate=monthly_rate)
    builder.add_step("지원기간 확인", Decimal(months), months=months)
    base = builder.add_step(
        "기본 지원금 계산",
        monthly_rate * months * count,
        formula=f"{_won(monthly_rate)} × {months}개월 × {count}명",
        monthly_rate=monthly_rate,
        months=months,
        employees=count,
    )
    incentive = incentive_per_head * count
    if incentive:
        builder.add_step(
            "인센티브 가산",
            incentive,
            formula=f"{_won(incentive_per_head)} × {count}명",
            incentive_per_head=incentive_per_head,
            employees=count,
        )
    return builder.build(base, incentive, schedule)


def _quarterly_breakdown(
    program: Program,
    quarterly_rate: Decimal,
    quarters: int,
    count: int,
    start: Optional[date] = None,
) -> CalculationBreakdown:
    builder = BreakdownBuilder(program)
    builder.add_step("분기 지원단가 확인", quarterly_rate, quarterly_rate=quarterly_rate)
    builder.add_step("지원분기 확인", Decimal(quarters), quarters=quarters)
    base = builder.add_step(
        "기본 지원금 계산",
        quarterly_rate * quarters * count,
        formula=f"{_won(quarterly_rate)} × {quarters}분기 × {count}명",
        quarterly_rate=quarterly_rate,
        quarters=quarters,
        employees=count,
    )
    schedule = [
        _milestone(f"{q}분기", q * MONTHS_PER_QUARTER, quarterly_rate * count, start)
        for q in range(1, quarters + 1)
    ]
    return builder.build(base, ZERO, schedule)


def _youth_schedule(count: int, incentive_per_head: Decimal, start: Optional[date]) -> list[PaymentScheduleItem]:
    half = YOUTH_MONTHLY_RATE * (YOUTH_SUPPORT_MONTHS // 2) * count
    schedule = [
        _milestone("6개월 고용유지 후", 6, half, start, "기업 지원금 1차"),
        _milestone("12개월 고용유지 후", 12, half, start, "기업 지원금 2차"),
    ]
    if incentive_per_head:
        installment = incentive_per_head / len(YOUTH_INCENTIVE_MILESTONES) * count
        schedule.extend(
            _milestone(f"{m}개월 근속 시", m, installment, start, "청년 본인 인센티브")
            for m in YOUTH_INCENTIVE_MILESTONES
        )
    return schedule


def _six_month_schedule(monthly_rate: Decimal, count: int, start: Optional[date]) -> list[PaymentScheduleItem]:
    half = monthly_rate * 6 * count
    return [
        _milestone("6개월 고용유지 후", 6, half, start, "1차 신청"),
        _milestone("12개월 고용유지 후", 12, half, start, "2차 신청"),
    ]


def _conversion_schedule(count: int, start: Optional[date]) -> list[PaymentScheduleItem]:
    per_quarter = CONVERSION_MONTHLY_RATE * MONTHS_PER_QUARTER * count
    return [
        _milestone(f"전환 후 {m}개월", m, per_quarter, start, "3개월 단위 신청")
        for m in range(MONTHS_PER_QUARTER, CONVERSION_SUPPORT_MONTHS + 1, MONTHS_PER_QUARTER)
    ]


def _parental_schedule(monthly_rates: Sequence[Decimal]) -> list[PaymentScheduleItem]:
    """Half of each 3-month block as it ends, the rest 6 months after leave."""
    schedule = []
    paid = ZERO
    for block_end in range(MONTHS_PER_QUARTER, len(monthly_rates) + 1, MONTHS_PER_QUARTER):
        block = sum(monthly_rates[block_end - MONTHS_PER_QUARTER:block_end], ZERO)
        amount = block / 2
        paid += amount
        schedule.append(_milestone(f"{block_end}개월 경과", block_end, amount, None, "지원금 50% 선지급"))
    remainder = sum(monthly_rates, ZERO) - paid
    final_month = len(monthly_rates) + 6
    schedule.append(_milestone("종료 후 6개월 계속고용", final_month, remainder, None, "잔여 50% 지급"))
    return schedule


# =============================================================================
# REQUIREMENTS
# =============================================================================

class _Requirements:
    def __init__(self) -> None:
        self.met: list[SubsidyRequirement] = []
        self.not_met: list[SubsidyRequirement] = []

    def check(
        self,
        requirement_id: str,
        description: str,
        is_met: bool,
        details: Optional[str] = None,
        review_only: bool = False,
    ) -> bool:
        requirement = SubsidyRequirement(
            id=requirement_id,
            description=description,
            is_met=is_met,
            details=details,
            review_only=review_only and not is_met,
        )
        (self.met if is_met else self.not_met).append(requirement)
        return is_met

    def business_registration(self, ctx: EvaluationContext) -> None:
        self.check(
            "business_registration",
            "사업자등록증 제출",
            ctx.has_business_registration,
            None if ctx.has_business_registration else "사업자등록증이 제출되지 않았습니다",
            review_only=True,
        )

    def status(self, qualifying: int, unresolved: int = 0) -> EligibilityStatus:
        """unresolved counts employees whose age or wage the documents leave open."""
        if any(not r.review_only for r in self.not_met):
            return EligibilityStatus.NOT_ELIGIBLE
        if qualifying == 0 and unresolved == 0:
            return EligibilityStatus.NOT_ELIGIBLE
        if self.not_met or qualifying == 0:
            return EligibilityStatus.NEEDS_REVIEW
        return EligibilityStatus.ELIGIBLE


def _current(employees: Iterable[CanonicalEmployee]) -> list[CanonicalEmployee]:
    return [e for e in employees if e.is_current_employee]


def _unknown_age_note(count: int) -> str:
    return (
        f"나이를 확인할 수 없는 근로자 {count}명을 대상 인원으로 가정한 최대 추정치입니다 "
        "(주민등록번호 확인 필요)"
    )


def _application_date_notes(employees: Iterable[CanonicalEmployee]) -> list[str]:
    notes = []
    for employee in employees:
        if employee.hire_date and employee.employment_duration_months < RETENTION_MILESTONE_MONTHS:
            eligible_on = add_months(employee.hire_date, RETENTION_MILESTONE_MONTHS)
            notes.append(
                f"{employee.name}: 신청 가능 시점 {format_korean_date(eligible_on)} "
                f"(현재 {employee.employment_duration_months}개월 근속)"
            )
    return notes


# =============================================================================
# CALCULATOR
# =============================================================================

class SubsidyCalculator:
    """
    Evaluate subsidy programs against canonical employees.

    Company-level methods (calculate_*) aggregate over current employees and
    return one SubsidyCalculation per program. analyze_employee evaluates one
    person across the per-employee programs.
    """

    def __init__(self, clock: Clock, standards_version: Optional[str] = None):
        self.clock = clock
        self.standards_version = standards_version or get_standards_version()

    def _finish(
        self,
        program: Program,
        reqs: _Requirements,
        status: EligibilityStatus,
        count: int,
        ctx: EvaluationContext,
        notes: list[str],
        monthly_amount: Decimal = ZERO,
        total_months: int = 0,
        breakdown: Optional[CalculationBreakdown] = None,
        incentive_amount: Optional[Decimal] = None,
        quarterly_amount: Optional[Decimal] = None,
    ) -> SubsidyCalculation:
        if status == EligibilityStatus.NOT_ELIGIBLE:
            result = SubsidyCalculation(
                program=program,
                total_months=total_months,
                requirements_met=reqs.met,
                requirements_not_met=reqs.not_met,
                eligibility=status,
                notes=notes,
                region_type=ctx.region,
            )
        else:
            result = SubsidyCalculation(
                program=program,
                monthly_amount=monthly_amount,
                total_months=total_months,
                total_amount=breakdown.total_amount,
                requirements_met=reqs.met,
                requirements_not_met=reqs.not_met,
                eligibility=status,
                notes=notes,
                region_type=ctx.region,
                incentive_amount=incentive_amount,
                quarterly_amount=quarterly_amount,
                qualifying_count=count,
                breakdown=breakdown,
            )
        logger.info(
            "subsidy_calculated",
            program=program.value,
            eligibility=status.value,
            qualifying=result.qualifying_count,
            total=str(result.total_amount),
            standards=self.standards_version,
        )
        return result

    # -------------------------------------------------------------------------
    # Youth Job Leap
    # -------------------------------------------------------------------------

    def calculate_youth_job_leap(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        """청년일자리도약장려금: 600,000/month for 12 months per young hire.

        Outside the capital area the young employee also receives an
        incentive. In the capital area only employment-difficulty youth
        qualify, which the documents cannot show.
        """
        program = Program.YOUTH_JOB_LEAP
        youth_type = ctx.options.youth_type
        current = _current(employees)
        youth = [e for e in current if e.is_youth]
        insured = [e for e in youth if e.has_employment_insurance]
        qualifying = [e for e in insured if e.work_type != WorkType.PART_TIME]
        unknown_age = sum(1 for e in current if not e.age_known)
        notes: list[str] = []

        reqs = _Requirements()
        reqs.business_registration(ctx)
        reqs.check(
            "youth_age",
            "만 15세~34세 청년 근로자",
            bool(youth),
            f"청년 근로자 {len(youth)}명",
            review_only=unknown_age > 0,
        )
        if youth:
            reqs.check(
                "insurance",
                "청년 근로자 고용보험 가입",
                bool(insured),
                f"가입 {len(insured)}명 / 청년 {len(youth)}명",
                review_only=unknown_age > 0,
            )
        if insured:
            reqs.check(
                "work_type",
                "정규직 채용 (단시간 근로자 제외)",
                bool(qualifying),
                f"대상 {len(qualifying)}명",
                review_only=unknown_age > 0,
            )
        if ctx.region == RegionType.CAPITAL:
            reqs.check(
                "youth_type",
                "수도권: 취업애로청년 해당",
                youth_type == YouthType.EMPLOYMENT_DIFFICULTY,
                "수도권 사업장은 취업애로청년 유형 증빙이 필요합니다",
                review_only=True,
            )
            notes.append("수도권 사업장: 청년 인센티브 미지급")
        else:
            reqs.check("youth_type", "비수도권: 모든 청년 지원 가능", True)

        status = reqs.status(len(qualifying), unknown_age)
        count = len(qualifying) or unknown_age
        if not qualifying and unknown_age and status != EligibilityStatus.NOT_ELIGIBLE:
            notes.append(_unknown_age_note(unknown_age))
        notes.extend(_application_date_notes(qualifying))

        area = ctx.options.non_capital_area
        incentive_per_head = get_youth_incentive(ctx.region, youth_type, area)
        breakdown = None
        if status != EligibilityStatus.NOT_ELIGIBLE:
            if incentive_per_head:
                notes.append(
                    f"비수도권 청년 인센티브 1인당 {_won(incentive_per_head)} "
                    f"({NON_CAPITAL_AREA_LABELS[area]}, 청년 본인 지급)"
                )
            breakdown = _monthly_breakdown(
                program,
                YOUTH_MONTHLY_RATE,
                YOUTH_SUPPORT_MONTHS,
                count,
                incentive_per_head,
                _youth_schedule(count, incentive_per_head, None),
            )

        return self._finish(
            program, reqs, status, count, ctx, notes,
            monthly_amount=YOUTH_MONTHLY_RATE * count,
            total_months=YOUTH_SUPPORT_MONTHS,
            breakdown=breakdown,
            incentive_amount=incentive_per_head * count if incentive_per_head else None,
        )

    # -------------------------------------------------------------------------
    # Employment Promotion
    # -------------------------------------------------------------------------

    def calculate_employment_promotion(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        """고용촉진장려금: 600,000/month for 12 months per vulnerable-class hire."""
        program = Program.EMPLOYMENT_PROMOTION
        current = _current(employees)
        insured = [e for e in current if e.has_employment_insurance]
        with_wage = [e for e in insured if e.monthly_salary is not None]
        qualifying = [
            e for e in with_wage
            if e.monthly_salary >= get_promotion_wage_threshold(e.hire_date)
        ]
        below = len(with_wage) - len(qualifying)
        missing_wage = len(insured) - len(with_wage)
        notes: list[str] = []

        reqs = _Requirements()
        reqs.business_registration(ctx)
        reqs.check("insurance", "고용보험 가입 근로자", bool(insured), f"가입 {len(insured)}명")
        if below:
            reqs.check(
                "minimum_wage_check",
                "월평균 보수 121만원 이상 (2026년 이후 채용 124만원)",
                False,
                f"기준 미달 {below}명은 제외됩니다",
                review_only=True,
            )
        if with_wage:
            reqs.check(
                "wage_eligible",
                "보수 기준 충족 근로자",
                bool(qualifying),
                f"충족 {len(qualifying)}명",
                review_only=missing_wage > 0,
            )
        elif insured:
            reqs.check(
                "wage_eligible",
                "보수 기준 충족 근로자",
                False,
                "임금 정보가 없어 보수 기준을 확인할 수 없습니다",
                review_only=True,
            )
        reqs.check(
            "vulnerable_class",
            "취업취약계층 해당 여부",
            False,
            "장애인, 장기실업자, 경력단절여성 등 해당 여부는 서류로 확인할 수 없습니다",
            review_only=True,
        )

        if missing_wage:
            notes.append(f"임금 정보가 없는 근로자 {missing_wage}명은 산정에서 제외되었습니다")
        notes.extend(_application_date_notes(qualifying))

        status = reqs.status(len(qualifying), missing_wage)
        count = len(qualifying)
        breakdown = None
        if status != EligibilityStatus.NOT_ELIGIBLE:
            breakdown = _monthly_breakdown(
                program,
                PROMOTION_MONTHLY_RATE,
                PROMOTION_SUPPORT_MONTHS,
                count,
                schedule=_six_month_schedule(PROMOTION_MONTHLY_RATE, count, None),
            )

        return self._finish(
            program, reqs, status, count, ctx, notes,
            monthly_amount=PROMOTION_MONTHLY_RATE * count,
            total_months=PROMOTION_SUPPORT_MONTHS,
            breakdown=breakdown,
        )

    # -------------------------------------------------------------------------
    # Regular Conversion
    # -------------------------------------------------------------------------

    def calculate_regular_conversion(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        """정규직전환지원금: 400,000/month for 12 months per converted worker.

        The claimable number of conversions depends on the insured headcount.
        """
        program = Program.REGULAR_CONVERSION
        current = _current(employees)
        insured = [e for e in current if e.has_employment_insurance]
        headcount = len(insured)
        with_wage = [e for e in insured if e.monthly_salary is not None]
        wage_eligible = [e for e in with_wage if e.monthly_salary >= CONVERSION_MIN_WAGE]
        candidates = [
            e for e in insured
            if e.work_type == WorkType.CONTRACT
            and e.employment_duration_months >= CONVERSION_MIN_SERVICE_MONTHS
        ]
        notes: list[str] = []

        reqs = _Requirements()
        reqs.business_registration(ctx)
        reqs.check(
            "company_size",
            f"피보험자 수 {CONVERSION_MIN_INSURED}인 이상 {CONVERSION_MAX_INSURED + 1}인 미만",
            CONVERSION_MIN_INSURED <= headcount <= CONVERSION_MAX_INSURED,
            f"현재 피보험자 {headcount}명",
        )
        if with_wage:
            reqs.check(
                "wage_eligible",
                "전환 후 월 124만원 이상 지급",
                bool(wage_eligible),
                f"충족 {len(wage_eligible)}명",
            )
        reqs.check(
            "conversion_target",
            "6개월 이상 근무한 기간제·파견 근로자의 정규직 전환",
            False,
            f"기간제 6개월 이상 근속자 {len(candidates)}명, 전환 계획 확인 필요",
            review_only=True,
        )

        limit = get_conversion_support_limit(headcount)
        count = min(limit, len(wage_eligible)) if with_wage else limit
        notes.append(f"지원 한도 {limit}명 (피보험자 {headcount}명 기준)")

        status = reqs.status(count)
        breakdown = None
        if status != EligibilityStatus.NOT_ELIGIBLE:
            breakdown = _monthly_breakdown(
                program,
                CONVERSION_MONTHLY_RATE,
                CONVERSION_SUPPORT_MONTHS,
                count,
                schedule=_conversion_schedule(count, None),
            )

        return self._finish(
            program, reqs, status, count, ctx, notes,
            monthly_amount=CONVERSION_MONTHLY_RATE * count,
            total_months=CONVERSION_SUPPORT_MONTHS,
            breakdown=breakdown,
        )

    # -------------------------------------------------------------------------
    # Senior programs
    # -------------------------------------------------------------------------

    def calculate_senior_continued_employment(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        """고령자계속고용장려금: a quarterly amount per senior for 12 quarters."""
        program = Program.SENIOR_CONTINUED_EMPLOYMENT
        current = _current(employees)
        seniors = [e for e in current if e.is_senior]
        qualifying = [
            e for e in seniors
            if e.monthly_salary is not None and e.monthly_salary >= SENIOR_CONTINUED_MIN_WAGE
        ]
        missing_wage = sum(1 for e in seniors if e.monthly_salary is None)
        unknown_age = sum(1 for e in current if not e.age_known)
        policy = ctx.options.senior_program_type
        notes: list[str] = []

        reqs = _Requirements()
        reqs.business_registration(ctx)
        reqs.check(
            "senior_age",
            "만 60세 이상 근로자",
            bool(seniors),
            f"60세 이상 {len(seniors)}명",
            review_only=unknown_age > 0,
        )
        if seniors:
            reqs.check(
                "wage_eligible",
                "월평균 보수 124만원 이상",
                bool(qualifying),
                f"충족 {len(qualifying)}명 / 60세 이상 {len(seniors)}명",
                review_only=unknown_age > 0 or missing_wage > 0,
            )
        reqs.check(
            "retirement_policy",
            "정년 연장·폐지 또는 재고용 제도 도입",
            False,
            (
                f"선택한 제도: {SENIOR_PROGRAM_LABELS[policy]}, 취업규칙 변경 증빙 필요"
                if policy else "취업규칙 또는 단체협약 변경 증빙 필요"
            ),
            review_only=True,
        )

        status = reqs.status(len(qualifying), unknown_age + missing_wage)
        count = len(qualifying) or unknown_age
        if not qualifying and unknown_age and status != EligibilityStatus.NOT_ELIGIBLE:
            notes.append(_unknown_age_note(unknown_age))
        if missing_wage:
            notes.append(f"임금 정보가 없는 60세 이상 근로자 {missing_wage}명은 산정에서 제외되었습니다")

        rate = get_senior_continued_quarterly_rate(ctx.region)
        breakdown = None
        if status != EligibilityStatus.NOT_ELIGIBLE:
            region_label = "비수도권" if ctx.region == RegionType.NON_CAPITAL else "수도권"
            notes.append(f"{region_label} 분기 지원단가 {_won(rate)}")
            breakdown = _quarterly_breakdown(program, rate, SENIOR_CONTINUED_QUARTERS, count)

        return self._finish(
            program, reqs, status, count, ctx, notes,
            monthly_amount=rate / MONTHS_PER_QUARTER * count,
            total_months=SENIOR_CONTINUED_QUARTERS * MONTHS_PER_QUARTER,
            breakdown=breakdown,
            quarterly_amount=rate * count,
        )

    def calculate_senior_employment_support(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        """고령자고용지원금: 300,000 per quarter for 8 quarters per insured senior."""
        program = Program.SENIOR_EMPLOYMENT_SUPPORT
        current = _current(employees)
        seniors = [e for e in current if e.is_senior]
        qualifying = [e for e in seniors if e.has_employment_insurance]
        unknown_age = sum(1 for e in current if not e.age_known)
        notes: list[str] = []

        reqs = _Requirements()
        reqs.business_registration(ctx)
        reqs.check(
            "senior_age",
            "만 60세 이상 근로자",
            bool(seniors),
            f"60세 이상 {len(seniors)}명",
            review_only=unknown_age > 0,
        )
        if seniors:
            reqs.check(
                "insurance",
                "고용보험 가입",
                bool(qualifying),
                f"가입 {len(qualifying)}명 / 60세 이상 {len(seniors)}명",
                review_only=unknown_age > 0,
            )

        status = reqs.status(len(qualifying), unknown_age)
        count = len(qualifying) or unknown_age
        if not qualifying and unknown_age and status != EligibilityStatus.NOT_ELIGIBLE:
            notes.append(_unknown_age_note(unknown_age))

        breakdown = None
        if status != EligibilityStatus.NOT_ELIGIBLE:
            breakdown = _quarterly_breakdown(
                program, SENIOR_SUPPORT_QUARTERLY_RATE, SENIOR_SUPPORT_QUARTERS, count
            )

        return self._finish(
            program, reqs, status, count, ctx, notes,
            monthly_amount=SENIOR_SUPPORT_QUARTERLY_RATE / MONTHS_PER_QUARTER * count,
            total_months=SENIOR_SUPPORT_QUARTERS * MONTHS_PER_QUARTER,
            breakdown=breakdown,
            quarterly_amount=SENIOR_SUPPORT_QUARTERLY_RATE * count,
        )

    # -------------------------------------------------------------------------
    # Parental Employment Stability
    # -------------------------------------------------------------------------

    def calculate_parental_employment_stability(
        self,
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        """출산육아기 고용안정장려금 for one leave case described by the options.

        Parental leave for a child of 12 months or younger (or during
        pregnancy) taken for at least 3 consecutive months pays the first
        3 months at the special rate.
        """
        program = Program.PARENTAL_EMPLOYMENT_STABILITY
        options = ctx.options
        leave_type = options.parental_leave_type
        notes: list[str] = []

        reqs = _Requirements()
        reqs.business_registration(ctx)
        reqs.check(
            "contract",
            "근로계약서 확인",
            ctx.contract_count > 0,
            f"근로계약서 {ctx.contract_count}건",
        )
        reqs.check(
            "parental_leave_proof",
            "출산육아기 휴직/단축 증빙",
            False,
            "육아휴직 신청서, 근로시간 단축 계약서 등",
            review_only=True,
        )

        builder = BreakdownBuilder(program)
        if leave_type == ParentalLeaveType.PARENTAL_LEAVE:
            notes.append("제도 유형: 육아휴직")
            monthly_rates = self._parental_leave_rates(options, builder, notes)
        elif leave_type == ParentalLeaveType.MATERNITY_LEAVE:
            notes.append("제도 유형: 출산전후휴가")
            notes.append(f"기본 지원: 월 {_won(MATERNITY_MONTHLY_RATE)} × {MATERNITY_MONTHS}개월")
            monthly_rates = self._flat_rates(builder, MATERNITY_MONTHLY_RATE, MATERNITY_MONTHS)
        else:
            notes.append("제도 유형: 육아기 근로시간 단축")
            notes.append(f"기본 지원: 월 {_won(REDUCED_HOURS_MONTHLY_RATE)} × {REDUCED_HOURS_MONTHS}개월")
            monthly_rates = self._flat_rates(builder, REDUCED_HOURS_MONTHLY_RATE, REDUCED_HOURS_MONTHS)
        notes.extend(f"추가 지원 - {line}" for line in PARENTAL_ADDITIONAL_SUPPORT)

        status = reqs.status(1 if ctx.contract_count > 0 else 0)
        breakdown = None
        if status != EligibilityStatus.NOT_ELIGIBLE:
            base = sum(monthly_rates, ZERO)
            breakdown = builder.build(base, ZERO, _parental_schedule(monthly_rates))

        return self._finish(
            program, reqs, status, 1, ctx, notes,
            monthly_amount=monthly_rates[-1],
            total_months=len(monthly_rates),
            breakdown=breakdown,
        )

    @staticmethod
    def _flat_rates(builder: BreakdownBuilder, rate: Decimal, months: int) -> list[Decimal]:
        builder.add_step("월 지원단가 확인", rate, monthly_rate=rate)
        builder.add_step("지원기간 확인", Decimal(months), months=months)
        builder.add_step(
            "기본 지원금 계산",
            rate * months,
            formula=f"{_won(rate)} × {months}개월",
            monthly_rate=rate,
            months=months,
        )
        return [rate] * months

    @staticmethod
    def _parental_leave_rates(
        options: CalculationOptions,
        builder: BreakdownBuilder,
        notes: list[str],
    ) -> list[Decimal]:
        child_age = options.child_age_months
        consecutive = options.consecutive_leave_months or 0
        young_child = options.is_pregnant or (
            child_age is not None and child_age <= PARENTAL_SPECIAL_CHILD_AGE_MONTHS
        )
        special = young_child and consecutive >= PARENTAL_SPECIAL_MIN_CONSECUTIVE_MONTHS

        if not special:
            base = PARENTAL_BASE_MONTHLY_RATE * PARENTAL_LEAVE_MONTHS
            notes.append(
                f"기본 지원: 월 {_won(PARENTAL_BASE_MONTHLY_RATE)} × {PARENTAL_LEAVE_MONTHS}개월 = {_won(base)}"
            )
            if child_age is None and not options.is_pregnant:
                notes.append(
                    "자녀 연령 정보가 없어 특례를 판단하지 못했습니다. 만12개월 이내(임신중 포함) "
                    "자녀 대상 3개월 이상 연속 휴직 시 첫 3개월 월 100만원 특례가 적용됩니다"
                )
            elif not young_child:
                notes.append("자녀 연령이 만12개월 초과하여 특례 미적용")
            else:
                notes.append("연속 휴직 기간이 3개월 미만으로 특례 미적용")
            SubsidyCalculator._flat_rates(builder, PARENTAL_BASE_MONTHLY_RATE, PARENTAL_LEAVE_MONTHS)
            return [PARENTAL_BASE_MONTHLY_RATE] * PARENTAL_LEAVE_MONTHS

        remaining = PARENTAL_LEAVE_MONTHS - PARENTAL_SPECIAL_MONTHS
        first = PARENTAL_SPECIAL_MONTHLY_RATE * PARENTAL_SPECIAL_MONTHS
        rest = PARENTAL_BASE_MONTHLY_RATE * remaining
        notes.append("특례 적용: 만12개월 이내(임신중 포함) 자녀, 3개월 이상 연속 휴직")
        notes.append(f"첫 3개월: 월 {_won(PARENTAL_SPECIAL_MONTHLY_RATE)} (소계 {_won(first)})")
        notes.append(f"이후 {remaining}개월: 월 {_won(PARENTAL_BASE_MONTHLY_RATE)} (소계 {_won(rest)})")

        builder.add_step("특례 월 지원단가 확인", PARENTAL_SPECIAL_MONTHLY_RATE,
                         monthly_rate=PARENTAL_SPECIAL_MONTHLY_RATE)
        builder.add_step("지원기간 확인", Decimal(PARENTAL_LEAVE_MONTHS),
                         months=PARENTAL_LEAVE_MONTHS, special_months=PARENTAL_SPECIAL_MONTHS)
        builder.add_step(
            "첫 3개월 특례 지원금",
            first,
            formula=f"{_won(PARENTAL_SPECIAL_MONTHLY_RATE)} × {PARENTAL_SPECIAL_MONTHS}개월",
            monthly_rate=PARENTAL_SPECIAL_MONTHLY_RATE,
            months=PARENTAL_SPECIAL_MONTHS,
        )
        builder.add_step(
            "잔여기간 기본 지원금",
            rest,
            formula=f"{_won(PARENTAL_BASE_MONTHLY_RATE)} × {remaining}개월",
            monthly_rate=PARENTAL_BASE_MONTHLY_RATE,
            months=remaining,
        )
        builder.add_step("기본 지원금 합계", first + rest, formula="특례 지원금 + 잔여기간 지원금")
        return (
            [PARENTAL_SPECIAL_MONTHLY_RATE] * PARENTAL_SPECIAL_MONTHS
            + [PARENTAL_BASE_MONTHLY_RATE] * remaining
        )

    # -------------------------------------------------------------------------
    # Employment Retention
    # -------------------------------------------------------------------------

    def calculate_employment_retention(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        """고용유지지원금: depends on leave allowances actually paid, so no estimate."""
        program = Program.EMPLOYMENT_RETENTION
        insured = [e for e in _current(employees) if e.has_employment_insurance]

        reqs = _Requirements()
        reqs.business_registration(ctx)
        reqs.check("insurance", "고용보험 가입 근로자", bool(insured), f"가입 {len(insured)}명")
        reqs.check(
            "business_hardship",
            "매출 감소 등 고용조정 불가피 사유",
            False,
            "경영상 어려움은 제출 서류로 확인할 수 없습니다",
            review_only=True,
        )
        notes = ["휴업·휴직 수당 실지급액에 따라 산정되므로 예상 금액을 계산하지 않습니다"]

        status = reqs.status(len(insured))
        breakdown = None
        if status != EligibilityStatus.NOT_ELIGIBLE:
            builder = BreakdownBuilder(program)
            builder.add_step("휴업·휴직 수당 지급액", ZERO, formula="실지급액 확인 후 산정")
            breakdown = builder.build(ZERO)

        return self._finish(
            program, reqs, status, len(insured), ctx, notes, breakdown=breakdown
        )

    # -------------------------------------------------------------------------
    # All programs
    # -------------------------------------------------------------------------

    def calculate_program(
        self,
        program: Program,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> SubsidyCalculation:
        if program == Program.YOUTH_JOB_LEAP:
            return self.calculate_youth_job_leap(employees, ctx)
        if program == Program.EMPLOYMENT_PROMOTION:
            return self.calculate_employment_promotion(employees, ctx)
        if program == Program.REGULAR_CONVERSION:
            return self.calculate_regular_conversion(employees, ctx)
        if program == Program.SENIOR_CONTINUED_EMPLOYMENT:
            return self.calculate_senior_continued_employment(employees, ctx)
        if program == Program.SENIOR_EMPLOYMENT_SUPPORT:
            return self.calculate_senior_employment_support(employees, ctx)
        if program == Program.PARENTAL_EMPLOYMENT_STABILITY:
            return self.calculate_parental_employment_stability(ctx)
        return self.calculate_employment_retention(employees, ctx)

    def calculate_all(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
        programs: Optional[Iterable[Program]] = None,
    ) -> list[SubsidyCalculation]:
        """Evaluate the requested programs (all by default) in catalogue order."""
        requested = set(programs) if programs is not None else set(Program)
        return [
            self.calculate_program(program, employees, ctx)
            for program in Program
            if program in requested
        ]

    # -------------------------------------------------------------------------
    # Per-employee analysis
    # -------------------------------------------------------------------------

    def _eligible(
        self,
        program: Program,
        status: EligibilityStatus,
        breakdown: CalculationBreakdown,
        notes: Optional[list[str]] = None,
    ) -> EligibleProgramInfo:
        return EligibleProgramInfo(
            program=program,
            program_name=get_program_name(program),
            eligibility=status,
            base_amount=breakdown.base_amount,
            incentive_amount=breakdown.incentive_amount,
            total_amount=breakdown.total_amount,
            breakdown=breakdown,
            notes=notes or [],
        )

    @staticmethod
    def _ineligible(program: Program, reasons: list[str], missing: Optional[list[str]] = None) -> IneligibleProgramInfo:
        return IneligibleProgramInfo(
            program=program,
            program_name=get_program_name(program),
            reasons=reasons,
            missing_requirements=missing or [],
        )

    def _employee_youth(self, e: CanonicalEmployee, ctx: EvaluationContext):
        program = Program.YOUTH_JOB_LEAP
        if not e.age_known:
            return self._ineligible(program, ["나이를 확인할 수 없습니다"], ["주민등록번호"])
        reasons = []
        if not e.is_youth:
            reasons.append(f"만 15~34세 청년이 아닙니다 (만 {e.age}세)")
        if not e.has_employment_insurance:
            reasons.append("고용보험 미가입")
        if e.work_type == WorkType.PART_TIME:
            reasons.append("단시간 근로자는 지원 대상이 아닙니다")
        if reasons:
            return self._ineligible(program, reasons)

        notes = []
        status = EligibilityStatus.ELIGIBLE if ctx.has_business_registration else EligibilityStatus.NEEDS_REVIEW
        if ctx.region == RegionType.CAPITAL and ctx.options.youth_type != YouthType.EMPLOYMENT_DIFFICULTY:
            status = EligibilityStatus.NEEDS_REVIEW
            notes.append("수도권: 취업애로청년 해당 여부 확인 필요")
        incentive = get_youth_incentive(ctx.region, ctx.options.youth_type, ctx.options.non_capital_area)
        notes.extend(_application_date_notes([e]))
        breakdown = _monthly_breakdown(
            program, YOUTH_MONTHLY_RATE, YOUTH_SUPPORT_MONTHS, 1, incentive,
            _youth_schedule(1, incentive, e.hire_date),
        )
        return self._eligible(program, status, breakdown, notes)

    def _employee_promotion(self, e: CanonicalEmployee, ctx: EvaluationContext):
        program = Program.EMPLOYMENT_PROMOTION
        if not e.has_employment_insurance:
            return self._ineligible(program, ["고용보험 미가입"])
        if e.monthly_salary is None:
            return self._ineligible(program, ["임금 정보가 없습니다"], ["월 급여"])
        threshold = get_promotion_wage_threshold(e.hire_date)
        if e.monthly_salary < threshold:
            return self._ineligible(
                program, [f"월 급여가 기준({_won(threshold)}) 미만입니다 ({_won(e.monthly_salary)})"]
            )
        breakdown = _monthly_breakdown(
            program, PROMOTION_MONTHLY_RATE, PROMOTION_SUPPORT_MONTHS, 1,
            schedule=_six_month_schedule(PROMOTION_MONTHLY_RATE, 1, e.hire_date),
        )
        return self._eligible(
            program, EligibilityStatus.NEEDS_REVIEW, breakdown, ["취업취약계층 해당 여부 확인 필요"]
        )

    def _employee_conversion(
        self,
        e: CanonicalEmployee,
        ctx: EvaluationContext,
        insured_headcount: Optional[int],
    ):
        program = Program.REGULAR_CONVERSION
        reasons = []
        if e.work_type != WorkType.CONTRACT:
            reasons.append("기간제 근로자가 아닙니다")
        if not e.has_employment_insurance:
            reasons.append("고용보험 미가입")
        if e.employment_duration_months < CONVERSION_MIN_SERVICE_MONTHS:
            reasons.append(f"근속기간 6개월 미만 ({e.employment_duration_months}개월)")
        if e.monthly_salary is not None and e.monthly_salary < CONVERSION_MIN_WAGE:
            reasons.append(f"월 급여가 기준({_won(CONVERSION_MIN_WAGE)}) 미만입니다")
        if insured_headcount is not None and not (
            CONVERSION_MIN_INSURED <= insured_headcount <= CONVERSION_MAX_INSURED
        ):
            reasons.append(f"피보험자 수 {insured_headcount}명으로 기업 규모 요건 미충족")
        if reasons:
            return self._ineligible(program, reasons)
        if e.monthly_salary is None:
            return self._ineligible(program, ["임금 정보가 없습니다"], ["월 급여"])
        breakdown = _monthly_breakdown(
            program, CONVERSION_MONTHLY_RATE, CONVERSION_SUPPORT_MONTHS, 1,
            schedule=_conversion_schedule(1, None),
        )
        return self._eligible(
            program, EligibilityStatus.NEEDS_REVIEW, breakdown, ["정규직 전환 계획 확인 필요"]
        )

    def _employee_senior_continued(self, e: CanonicalEmployee, ctx: EvaluationContext):
        program = Program.SENIOR_CONTINUED_EMPLOYMENT
        if not e.age_known:
            return self._ineligible(program, ["나이를 확인할 수 없습니다"], ["주민등록번호"])
        if not e.is_senior:
            return self._ineligible(program, [f"만 60세 미만입니다 (만 {e.age}세)"])
        if e.monthly_salary is None:
            return self._ineligible(program, ["임금 정보가 없습니다"], ["월 급여"])
        if e.monthly_salary < SENIOR_CONTINUED_MIN_WAGE:
            return self._ineligible(program, [f"월 급여가 기준({_won(SENIOR_CONTINUED_MIN_WAGE)}) 미만입니다"])
        rate = get_senior_continued_quarterly_rate(ctx.region)
        breakdown = _quarterly_breakdown(program, rate, SENIOR_CONTINUED_QUARTERS, 1)
        return self._eligible(
            program, EligibilityStatus.NEEDS_REVIEW, breakdown, ["정년제도 변경 증빙 필요"]
        )

    def _employee_senior_support(self, e: CanonicalEmployee, ctx: EvaluationContext):
        program = Program.SENIOR_EMPLOYMENT_SUPPORT
        if not e.age_known:
            return self._ineligible(program, ["나이를 확인할 수 없습니다"], ["주민등록번호"])
        reasons = []
        if not e.is_senior:
            reasons.append(f"만 60세 미만입니다 (만 {e.age}세)")
        if not e.has_employment_insurance:
            reasons.append("고용보험 미가입")
        if reasons:
            return self._ineligible(program, reasons)
        status = EligibilityStatus.ELIGIBLE if ctx.has_business_registration else EligibilityStatus.NEEDS_REVIEW
        breakdown = _quarterly_breakdown(
            program, SENIOR_SUPPORT_QUARTERLY_RATE, SENIOR_SUPPORT_QUARTERS, 1
        )
        return self._eligible(program, status, breakdown)

    def analyze_employee(
        self,
        employee: CanonicalEmployee,
        ctx: EvaluationContext,
        insured_headcount: Optional[int] = None,
    ) -> PerEmployeeCalculation:
        """Evaluate one person against every per-employee program."""
        eligible: list[EligibleProgramInfo] = []
        ineligible: list[IneligibleProgramInfo] = []

        if not employee.is_current_employee:
            ineligible = [self._ineligible(p, [TERMINATED_REASON]) for p in PER_EMPLOYEE_PROGRAMS]
        else:
            outcomes = (
                self._employee_youth(employee, ctx),
                self._employee_promotion(employee, ctx),
                self._employee_conversion(employee, ctx, insured_headcount),
                self._employee_senior_continued(employee, ctx),
                self._employee_senior_support(employee, ctx),
            )
            for outcome in outcomes:
                if isinstance(outcome, EligibleProgramInfo):
                    eligible.append(outcome)
                else:
                    ineligible.append(outcome)
            eligible, ineligible = resolve_employee_exclusions(eligible, ineligible)

        return PerEmployeeCalculation(
            employee_name=employee.name,
            resident_id=employee.resident_id,
            age=employee.age,
            is_youth=employee.is_youth,
            is_senior=employee.is_senior,
            hire_date=employee.hire_date,
            employment_duration_months=employee.employment_duration_months,
            weekly_hours=employee.weekly_hours,
            monthly_salary=employee.monthly_salary,
            is_current_employee=employee.is_current_employee,
            eligible_programs=eligible,
            ineligible_programs=ineligible,
        )

    def analyze_all_employees(
        self,
        employees: Sequence[CanonicalEmployee],
        ctx: EvaluationContext,
    ) -> list[PerEmployeeCalculation]:
        headcount = sum(1 for e in _current(employees) if e.has_employment_insurance)
        results = [self.analyze_employee(e, ctx, headcount) for e in employees]
        logger.info(
            "employees_analyzed",
            count=len(results),
            eligible_for_any=sum(1 for r in results if r.eligible_programs),
        )
        return results


def summarize_employees(calculations: Sequence[PerEmployeeCalculation]) -> EmployeeSummary:
    """Headcounts and per-program totals across per-employee results."""
    by_program: dict[Program, ProgramSummary] = {}
    for calc in calculations:
        for info in calc.eligible_programs:
            summary = by_program.setdefault(
                info.program,
                ProgramSummary(program=info.program, program_name=info.program_name),
            )
            summary.employee_count += 1
            summary.total_amount += info.total_amount

    return EmployeeSummary(
        total_employees=len(calculations),
        youth_count=sum(1 for c in calculations if c.is_youth),
        senior_count=sum(1 for c in calculations if c.is_senior),
        eligible_for_any_count=sum(1 for c in calculations if c.eligible_programs),
        total_estimated_subsidy=sum((c.total_estimated_subsidy for c in calculations), ZERO),
        by_program=[by_program[p] for p in Program if p in by_program],
    )


__all__ = [
    "EvaluationContext",
    "BreakdownBuilder",
    "SubsidyCalculator",
    "summarize_employees",
    "PER_EMPLOYEE_PROGRAMS",
]
