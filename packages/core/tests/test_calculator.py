"""Tests for subsidy eligibility and amount calculation."""

from datetime import date
from decimal import Decimal

import pytest

from subsidy_core.calculator import EvaluationContext, SubsidyCalculator, summarize_employees
from subsidy_core.models import (
    CalculationOptions,
    EligibilityStatus,
    NonCapitalAreaType,
    ParentalLeaveType,
    Program,
    RegionType,
    SubsidyCalculation,
    WorkType,
    YouthType,
)


@pytest.fixture
def calculator(clock) -> SubsidyCalculator:
    return SubsidyCalculator(clock)


def _ctx(region=RegionType.NON_CAPITAL, contract_count=1, **options) -> EvaluationContext:
    return EvaluationContext(
        region=region,
        options=CalculationOptions(**options),
        has_business_registration=True,
        has_wage_ledger=True,
        has_insurance_roster=True,
        contract_count=contract_count,
    )


def _assert_consistent(calc: SubsidyCalculation):
    """Breakdown, schedule and headline amount agree."""
    assert calc.breakdown is not None
    assert calc.breakdown.total_amount == calc.total_amount
    assert calc.breakdown.steps[-1].result == calc.total_amount
    assert [s.step for s in calc.breakdown.steps] == list(range(1, len(calc.breakdown.steps) + 1))
    if calc.breakdown.payment_schedule:
        assert calc.breakdown.scheduled_total == calc.total_amount


class TestYouthJobLeap:
    """Tests for 청년일자리도약장려금."""

    def test_non_capital_general_youth(self, calculator, make_employee):
        """One youth outside the capital area: 600,000 x 12 plus a 4,800,000 incentive."""
        result = calculator.calculate_youth_job_leap([make_employee(age=28)], _ctx())

        assert result.eligibility == EligibilityStatus.ELIGIBLE
        assert result.monthly_amount == Decimal("600000")
        assert result.total_amount == Decimal("12000000")
        assert result.incentive_amount == Decimal("4800000")
        assert result.qualifying_count == 1
        _assert_consistent(result)

    def test_non_capital_employment_difficulty_incentive(self, calculator, make_employee):
        ctx = _ctx(youth_type=YouthType.EMPLOYMENT_DIFFICULTY)
        result = calculator.calculate_youth_job_leap([make_employee()], ctx)
        assert result.total_amount == Decimal("7200000") + Decimal("7200000")

    def test_preferred_area_incentive(self, calculator, make_employee):
        ctx = _ctx(non_capital_area=NonCapitalAreaType.PREFERRED)
        result = calculator.calculate_youth_job_leap([make_employee()], ctx)

        assert result.incentive_amount == Decimal("6000000")
        assert result.total_amount == Decimal("7200000") + Decimal("6000000")
        assert any("우대지역" in note for note in result.notes)
        _assert_consistent(result)

    def test_capital_requires_employment_difficulty(self, calculator, make_employee):
        """Capital-area general youth goes to review without an incentive."""
        result = calculator.calculate_youth_job_leap(
            [make_employee()], _ctx(region=RegionType.CAPITAL)
        )

        assert "youth_type" in result.unmet_ids()
        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.total_amount == Decimal("7200000")
        assert result.incentive_amount is None
        _assert_consistent(result)

    def test_capital_employment_difficulty_is_eligible(self, calculator, make_employee):
        ctx = _ctx(region=RegionType.CAPITAL, youth_type=YouthType.EMPLOYMENT_DIFFICULTY)
        result = calculator.calculate_youth_job_leap([make_employee()], ctx)

        assert result.eligibility == EligibilityStatus.ELIGIBLE
        assert result.total_amount == Decimal("7200000")

    def test_part_time_and_uninsured_youth_do_not_qualify(self, calculator, make_employee):
        employees = [
            make_employee(name="김철수", work_type=WorkType.PART_TIME),
            make_employee(name="이민지", has_employment_insurance=False),
        ]
        result = calculator.calculate_youth_job_leap(employees, _ctx())

        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
        assert result.total_amount == Decimal("0")
        assert result.breakdown is None

    def test_terminated_youth_excluded(self, calculator, make_employee):
        result = calculator.calculate_youth_job_leap(
            [make_employee(is_current_employee=False)], _ctx()
        )
        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE

    def test_unknown_age_is_upper_bound_review(self, calculator, make_employee):
        """Nobody confirmed young, but two ages unknown: review for two."""
        employees = [
            make_employee(name="김철수", age=None),
            make_employee(name="이민지", age=None),
            make_employee(name="박정호", age=45),
        ]
        result = calculator.calculate_youth_job_leap(employees, _ctx())

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.qualifying_count == 2
        assert result.total_amount == Decimal("24000000")
        assert any("최대 추정치" in note for note in result.notes)

    def test_part_time_youth_does_not_hide_unknown_ages(self, calculator, make_employee):
        """A confirmed youth failing the work-type check leaves the unknown ages to review."""
        employees = [
            make_employee(name="김철수", age=25, work_type=WorkType.PART_TIME),
            make_employee(name="이민지", age=None),
            make_employee(name="박정호", age=None),
        ]
        result = calculator.calculate_youth_job_leap(employees, _ctx())

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.qualifying_count == 2
        assert result.total_amount == Decimal("24000000")
        assert "work_type" in result.unmet_ids()
        assert all(r.review_only for r in result.requirements_not_met)
        assert any("최대 추정치" in note for note in result.notes)
        _assert_consistent(result)

    def test_no_youth_and_no_unknown_age(self, calculator, make_employee):
        result = calculator.calculate_youth_job_leap([make_employee(age=45)], _ctx())
        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
        assert "youth_age" in result.unmet_ids()

    def test_application_date_note_for_recent_hire(self, calculator, make_employee):
        employee = make_employee(hire_date=date(2026, 1, 10), employment_duration_months=2)
        result = calculator.calculate_youth_job_leap([employee], _ctx())
        assert any("2026년 7월 10일" in note for note in result.notes)

    def test_missing_business_registration_needs_review(self, calculator, make_employee):
        ctx = EvaluationContext(region=RegionType.NON_CAPITAL)
        result = calculator.calculate_youth_job_leap([make_employee()], ctx)

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert "business_registration" in result.unmet_ids()

    def test_payment_schedule(self, calculator, make_employee):
        result = calculator.calculate_youth_job_leap([make_employee()], _ctx())
        schedule = result.breakdown.payment_schedule

        assert [item.months_after_start for item in schedule] == [6, 12, 6, 12, 18, 24]
        assert schedule[0].amount == Decimal("3600000")
        assert schedule[2].amount == Decimal("1200000")


class TestEmploymentPromotion:
    """Tests for 고용촉진장려금."""

    def test_threshold_depends_on_hire_date(self, calculator, make_employee):
        """1,230,000 passes the 2025 threshold but not the 2026 one."""
        employees = [
            make_employee(name="김철수", hire_date=date(2025, 6, 1), monthly_salary=Decimal("1230000")),
            make_employee(name="이민지", hire_date=date(2026, 2, 1), monthly_salary=Decimal("1230000")),
        ]
        result = calculator.calculate_employment_promotion(employees, _ctx())

        assert result.qualifying_count == 1
        assert result.total_amount == Decimal("7200000")
        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert {"vulnerable_class", "minimum_wage_check"} <= set(result.unmet_ids())
        _assert_consistent(result)

    def test_missing_wage_excluded(self, calculator, make_employee):
        """Employees without a wage add nothing, but do not fail the program."""
        employees = [
            make_employee(name="김철수", monthly_salary=None),
            make_employee(name="이민지", monthly_salary=Decimal("1000000")),
        ]
        result = calculator.calculate_employment_promotion(employees, _ctx())

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.qualifying_count == 0
        assert result.total_amount == Decimal("0")
        assert any("임금 정보" in note for note in result.notes)
        _assert_consistent(result)

    def test_all_wages_unknown_needs_review(self, calculator, make_employee):
        """Insured employees with no wage at all leave the wage check open."""
        employees = [
            make_employee(name="김철수", monthly_salary=None),
            make_employee(name="이민지", monthly_salary=None),
        ]
        result = calculator.calculate_employment_promotion(employees, _ctx())

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.total_amount == Decimal("0")
        wage = next(r for r in result.requirements_not_met if r.id == "wage_eligible")
        assert wage.review_only
        assert "확인할 수 없습니다" in wage.details

    def test_known_wages_below_threshold_not_eligible(self, calculator, make_employee):
        result = calculator.calculate_employment_promotion(
            [make_employee(monthly_salary=Decimal("1000000"))], _ctx()
        )
        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
        assert "wage_eligible" in result.unmet_ids()

    def test_never_fully_eligible(self, calculator, make_employee):
        result = calculator.calculate_employment_promotion([make_employee()], _ctx())
        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW


class TestRegularConversion:
    """Tests for 정규직전환지원금."""

    def test_small_company_limit(self, calculator, make_employee):
        employees = [make_employee(name=f"직원{i}") for i in "가나다라마바"]
        result = calculator.calculate_regular_conversion(employees, _ctx())

        assert result.qualifying_count == 3
        assert result.total_amount == Decimal("400000") * 12 * 3
        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert "conversion_target" in result.unmet_ids()
        _assert_consistent(result)

    def test_limit_capped_by_wage_eligible_count(self, calculator, make_employee):
        employees = [make_employee(name=f"직원{i}", monthly_salary=Decimal("1000000")) for i in "가나다라"]
        employees.append(make_employee(name="직원마"))
        result = calculator.calculate_regular_conversion(employees, _ctx())
        assert result.qualifying_count == 1

    def test_larger_company_limit_is_thirty_percent(self, calculator, make_employee):
        employees = [make_employee(name=f"직원{i}") for i in range(20)]
        result = calculator.calculate_regular_conversion(employees, _ctx())
        assert result.qualifying_count == 6

    def test_company_size_gate(self, calculator, make_employee):
        result = calculator.calculate_regular_conversion([make_employee()], _ctx())

        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
        assert "company_size" in result.unmet_ids()


class TestSeniorPrograms:
    """Tests for the two senior programs."""

    def test_continued_employment_capital(self, calculator, make_employee):
        result = calculator.calculate_senior_continued_employment(
            [make_employee(age=61)], _ctx(region=RegionType.CAPITAL)
        )

        assert result.quarterly_amount == Decimal("900000")
        assert result.total_amount == Decimal("10800000")
        assert result.total_months == 36
        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert "retirement_policy" in result.unmet_ids()
        _assert_consistent(result)

    def test_continued_employment_non_capital(self, calculator, make_employee):
        result = calculator.calculate_senior_continued_employment([make_employee(age=61)], _ctx())

        assert result.quarterly_amount == Decimal("1200000")
        assert result.total_amount == Decimal("14400000")
        assert len(result.breakdown.payment_schedule) == 12

    def test_continued_employment_excludes_low_and_missing_wage(self, calculator, make_employee):
        employees = [
            make_employee(name="김노인", age=62, monthly_salary=None),
            make_employee(name="이노인", age=63, monthly_salary=Decimal("1200000")),
        ]
        result = calculator.calculate_senior_continued_employment(employees, _ctx())
        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.qualifying_count == 0
        assert result.total_amount == Decimal("0")
        assert any("임금 정보" in note for note in result.notes)

    def test_continued_employment_low_wage_not_eligible(self, calculator, make_employee):
        result = calculator.calculate_senior_continued_employment(
            [make_employee(age=63, monthly_salary=Decimal("1200000"))], _ctx()
        )
        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
        assert "wage_eligible" in result.unmet_ids()

    def test_continued_employment_low_wage_senior_with_unknown_ages(self, calculator, make_employee):
        """A known senior below the wage floor does not hide the unknown ages."""
        employees = [
            make_employee(name="이노인", age=63, monthly_salary=Decimal("1200000")),
            make_employee(name="김미상", age=None),
        ]
        result = calculator.calculate_senior_continued_employment(employees, _ctx())

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.qualifying_count == 1
        assert result.total_amount == Decimal("14400000")
        assert any("최대 추정치" in note for note in result.notes)
        _assert_consistent(result)

    def test_employment_support(self, calculator, make_employee):
        employees = [make_employee(name="김노인", age=60), make_employee(name="박청년", age=25)]
        result = calculator.calculate_senior_employment_support(employees, _ctx())

        assert result.eligibility == EligibilityStatus.ELIGIBLE
        assert result.qualifying_count == 1
        assert result.total_amount == Decimal("300000") * 8
        _assert_consistent(result)

    def test_employment_support_requires_insurance(self, calculator, make_employee):
        result = calculator.calculate_senior_employment_support(
            [make_employee(age=65, has_employment_insurance=False)], _ctx()
        )
        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
        assert "insurance" in result.unmet_ids()

    def test_employment_support_uninsured_senior_with_unknown_ages(self, calculator, make_employee):
        employees = [
            make_employee(name="김노인", age=65, has_employment_insurance=False),
            make_employee(name="김미상", age=None),
            make_employee(name="박미상", age=None),
        ]
        result = calculator.calculate_senior_employment_support(employees, _ctx())

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.qualifying_count == 2
        assert result.total_amount == Decimal("300000") * 8 * 2
        assert all(r.review_only for r in result.requirements_not_met)
        assert any("최대 추정치" in note for note in result.notes)


class TestParentalEmploymentStability:
    """Tests for 출산육아기 고용안정장려금."""

    def test_special_rate(self, calculator):
        """Young child and 3+ consecutive months: first three months at 1,000,000."""
        result = calculator.calculate_parental_employment_stability(
            _ctx(child_age_months=6, consecutive_leave_months=6)
        )

        assert result.total_amount == Decimal("1000000") * 3 + Decimal("300000") * 9
        assert result.total_amount == Decimal("5700000")
        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert any("특례 적용" in note for note in result.notes)
        _assert_consistent(result)

    def test_pregnancy_qualifies_for_special_rate(self, calculator):
        result = calculator.calculate_parental_employment_stability(
            _ctx(is_pregnant=True, consecutive_leave_months=3)
        )
        assert result.total_amount == Decimal("5700000")

    def test_child_over_twelve_months(self, calculator):
        result = calculator.calculate_parental_employment_stability(
            _ctx(child_age_months=15, consecutive_leave_months=6)
        )

        assert result.total_amount == Decimal("3600000")
        assert any("만12개월 초과" in note for note in result.notes)

    def test_short_leave(self, calculator):
        result = calculator.calculate_parental_employment_stability(
            _ctx(child_age_months=6, consecutive_leave_months=2)
        )

        assert result.total_amount == Decimal("3600000")
        assert any("3개월 미만" in note for note in result.notes)

    def test_child_age_unknown(self, calculator):
        result = calculator.calculate_parental_employment_stability(_ctx())

        assert result.total_amount == Decimal("3600000")
        assert any("자녀 연령 정보가 없어" in note for note in result.notes)

    def test_maternity_and_reduced_hours(self, calculator):
        maternity = calculator.calculate_parental_employment_stability(
            _ctx(parental_leave_type=ParentalLeaveType.MATERNITY_LEAVE)
        )
        reduced = calculator.calculate_parental_employment_stability(
            _ctx(parental_leave_type=ParentalLeaveType.REDUCED_HOURS)
        )

        assert maternity.total_amount == Decimal("2400000")
        assert reduced.total_amount == Decimal("7200000")
        _assert_consistent(maternity)
        _assert_consistent(reduced)

    def test_additional_support_listed(self, calculator):
        result = calculator.calculate_parental_employment_stability(_ctx())
        notes = " ".join(result.notes)
        for scheme in ("대체인력지원금", "업무분담지원금", "남성육아휴직인센티브"):
            assert scheme in notes

    def test_requires_contract(self, calculator):
        result = calculator.calculate_parental_employment_stability(_ctx(contract_count=0))

        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
        assert result.total_amount == Decimal("0")
        assert "contract" in result.unmet_ids()


class TestEmploymentRetention:
    """Tests for 고용유지지원금."""

    def test_review_with_zero_amount(self, calculator, make_employee):
        result = calculator.calculate_employment_retention([make_employee()], _ctx())

        assert result.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert result.total_amount == Decimal("0")
        assert "business_hardship" in result.unmet_ids()

    def test_no_employees(self, calculator):
        result = calculator.calculate_employment_retention([], _ctx())
        assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE


class TestCalculateAll:
    """Tests for evaluating several programs at once."""

    def test_all_programs_in_catalogue_order(self, calculator, make_employee):
        results = calculator.calculate_all([make_employee()], _ctx())
        assert [r.program for r in results] == list(Program)

    def test_requested_subset(self, calculator, make_employee):
        results = calculator.calculate_all(
            [make_employee()],
            _ctx(),
            [Program.SENIOR_EMPLOYMENT_SUPPORT, Program.YOUTH_JOB_LEAP],
        )
        assert [r.program for r in results] == [
            Program.YOUTH_JOB_LEAP,
            Program.SENIOR_EMPLOYMENT_SUPPORT,
        ]

    def test_not_eligible_results_carry_no_amount(self, calculator):
        for result in calculator.calculate_all([], _ctx(contract_count=0)):
            assert result.eligibility == EligibilityStatus.NOT_ELIGIBLE
            assert result.total_amount == Decimal("0")
            assert result.breakdown is None


class TestPerEmployeeAnalysis:
    """Tests for per-employee program evaluation."""

    def test_youth_excludes_promotion(self, calculator, make_employee):
        """A youth eligible for both keeps Youth Job Leap only."""
        result = calculator.analyze_employee(make_employee(), _ctx())

        assert result.eligible_program_ids == [Program.YOUTH_JOB_LEAP]
        moved = [p for p in result.ineligible_programs if p.program == Program.EMPLOYMENT_PROMOTION]
        assert len(moved) == 1
        assert result.total_estimated_subsidy == Decimal("12000000")

    def test_senior_keeps_continued_employment(self, calculator, make_employee):
        result = calculator.analyze_employee(
            make_employee(age=62, has_employment_insurance=False), _ctx()
        )
        assert result.eligible_program_ids == [Program.SENIOR_CONTINUED_EMPLOYMENT]

    def test_senior_both_programs_resolved(self, calculator, make_employee):
        result = calculator.analyze_employee(make_employee(age=62), _ctx())
        programs = set(result.eligible_program_ids)

        assert Program.SENIOR_CONTINUED_EMPLOYMENT in programs
        assert Program.SENIOR_EMPLOYMENT_SUPPORT not in programs

    def test_terminated_employee(self, calculator, make_employee):
        result = calculator.analyze_employee(make_employee(is_current_employee=False), _ctx())

        assert result.eligible_programs == []
        assert len(result.ineligible_programs) == 5
        assert all(p.reasons == ["퇴사자는 지원 대상이 아닙니다"] for p in result.ineligible_programs)

    def test_unknown_age_is_explicit(self, calculator, make_employee):
        result = calculator.analyze_employee(make_employee(age=None), _ctx())
        youth = next(p for p in result.ineligible_programs if p.program == Program.YOUTH_JOB_LEAP)
        assert youth.missing_requirements == ["주민등록번호"]

    def test_conversion_candidate(self, calculator, make_employee):
        employee = make_employee(age=45, work_type=WorkType.CONTRACT, employment_duration_months=8)
        result = calculator.analyze_employee(employee, _ctx(), insured_headcount=6)
        assert Program.REGULAR_CONVERSION in result.eligible_program_ids

    def test_summary(self, calculator, make_employee):
        employees = [
            make_employee(name="김청년"),
            make_employee(name="이노인", age=63),
            make_employee(name="박퇴사", is_current_employee=False),
        ]
        per_employee = calculator.analyze_all_employees(employees, _ctx())
        summary = summarize_employees(per_employee)

        assert summary.total_employees == 3
        assert summary.youth_count == 2
        assert summary.senior_count == 1
        assert summary.eligible_for_any_count == 2
        assert summary.total_estimated_subsidy == sum(
            (c.total_estimated_subsidy for c in per_employee), Decimal("0")
        )
        youth = next(p for p in summary.by_program if p.program == Program.YOUTH_JOB_LEAP)
        assert youth.employee_count == 1
