"""End-to-end tests for SubsidyAnalyzer."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from subsidy_core import SubsidyAnalyzer, SubsidySettings
from subsidy_core.exceptions import ValidationError
from subsidy_core.models import (
    ChecklistStatus,
    DocumentBundle,
    EligibilityStatus,
    Program,
    RegionType,
    WageLedger,
    WageLedgerEmployee,
    WorkType,
)


@pytest.fixture
def settings() -> SubsidySettings:
    return SubsidySettings(_env_file=None)


@pytest.fixture
def analyzer(clock, settings) -> SubsidyAnalyzer:
    return SubsidyAnalyzer(clock=clock, settings=settings)


class TestSubsidyAnalyzer:
    """Test suite for SubsidyAnalyzer.analyze."""

    def test_full_bundle(self, analyzer, full_bundle):
        """A complete, consistent bundle from a Busan company."""
        report = analyzer.analyze(full_bundle)

        assert report.region_type == RegionType.NON_CAPITAL
        assert report.generated_at == datetime(2026, 3, 15, tzinfo=timezone.utc)
        assert len(report.employees) == 3
        assert report.match_result.matched_count == 2
        assert report.data_confidence == 100
        assert [c.program for c in report.calculations] == list(Program)

        youth = report.calculation_for(Program.YOUTH_JOB_LEAP)
        assert youth.eligibility == EligibilityStatus.ELIGIBLE
        assert youth.total_amount == Decimal("12000000")

        conversion = report.calculation_for(Program.REGULAR_CONVERSION)
        assert conversion.eligibility == EligibilityStatus.NOT_ELIGIBLE

    def test_exclusion_and_total(self, analyzer, full_bundle):
        report = analyzer.analyze(full_bundle)

        excluded = {e.program: e.excluded_by for e in report.excluded_subsidies}
        assert excluded == {
            Program.EMPLOYMENT_PROMOTION: Program.YOUTH_JOB_LEAP,
            Program.SENIOR_EMPLOYMENT_SUPPORT: Program.SENIOR_CONTINUED_EMPLOYMENT,
        }
        assert [c.program for c in report.eligible_calculations] == [
            Program.YOUTH_JOB_LEAP,
            Program.SENIOR_CONTINUED_EMPLOYMENT,
            Program.PARENTAL_EMPLOYMENT_STABILITY,
            Program.EMPLOYMENT_RETENTION,
        ]
        assert report.total_eligible_amount == sum(
            (c.total_amount for c in report.eligible_calculations), Decimal("0")
        )
        assert report.total_eligible_amount == Decimal("30000000")
        assert [i.program for i in report.application_checklist] == [
            c.program for c in report.eligible_calculations
        ]

    def test_per_employee_and_summary(self, analyzer, full_bundle):
        report = analyzer.analyze(full_bundle)
        summary = report.employee_summary

        assert len(report.per_employee_calculations) == 3
        assert summary.total_employees == 3
        assert summary.youth_count == 1
        assert summary.senior_count == 1
        assert summary.total_estimated_subsidy == sum(
            (c.total_estimated_subsidy for c in report.per_employee_calculations), Decimal("0")
        )

    def test_document_checklist(self, analyzer, full_bundle, wage_ledger):
        complete = analyzer.analyze(full_bundle)
        assert all(i.status == ChecklistStatus.COMPLETED for i in complete.document_checklist)
        assert complete.required_documents == []

        partial = analyzer.analyze(DocumentBundle(wage_ledger=wage_ledger))
        assert partial.required_documents == ["사업자등록증", "근로계약서", "4대보험 가입자명부"]

    def test_senior_timing_included(self, analyzer, full_bundle):
        report = analyzer.analyze(full_bundle)
        assert report.senior_timing is not None
        assert report.senior_timing.current_eligible_count == 1

    def test_senior_timing_agrees_with_calculation(self, analyzer, business_registration):
        """An employee turning 60 in December is counted by both the program and the timing advice."""
        bundle = DocumentBundle(
            business_registration=business_registration,
            wage_ledger=WageLedger(employees=[
                WageLedgerEmployee(
                    name="최동훈",
                    resident_id="661201-1******",
                    hire_date="2015-04-01",
                    monthly_wage=Decimal("3000000"),
                    weekly_hours=40,
                    work_type=WorkType.FULL_TIME,
                ),
            ]),
        )
        report = analyzer.analyze(bundle)
        senior = report.calculation_for(Program.SENIOR_CONTINUED_EMPLOYMENT)

        assert senior.qualifying_count == 1
        assert report.senior_timing.current_eligible_count == senior.qualifying_count
        assert report.senior_timing.optimal_start_date == date(2026, 3, 15)
        assert report.senior_timing.recommendation.startswith("지금 신청하는 것이 최적입니다")

    def test_empty_bundle(self, analyzer):
        """No documents at all still yields a complete report."""
        report = analyzer.analyze(DocumentBundle())

        assert report.region_type == RegionType.CAPITAL
        assert len(report.calculations) == len(Program)
        assert all(c.eligibility == EligibilityStatus.NOT_ELIGIBLE for c in report.calculations)
        assert report.eligible_calculations == []
        assert report.total_eligible_amount == Decimal("0")
        assert report.senior_timing is None
        assert len(report.required_documents) == 4

    def test_program_identifiers(self, analyzer, full_bundle):
        report = analyzer.analyze(full_bundle, programs=["youth_job_leap", Program.EMPLOYMENT_PROMOTION])

        assert [c.program for c in report.calculations] == [
            Program.YOUTH_JOB_LEAP,
            Program.EMPLOYMENT_PROMOTION,
        ]

    def test_unknown_program_rejected(self, analyzer, full_bundle):
        with pytest.raises(ValidationError) as exc_info:
            analyzer.analyze(full_bundle, programs=["YOUTH_BONUS"])

        assert exc_info.value.field == "program"
        assert exc_info.value.recoverable

    def test_region_override(self, analyzer, full_bundle):
        report = analyzer.analyze(full_bundle, region_override=RegionType.CAPITAL)
        youth = report.calculation_for(Program.YOUTH_JOB_LEAP)

        assert report.region_type == RegionType.CAPITAL
        assert youth.eligibility == EligibilityStatus.NEEDS_REVIEW
        assert "youth_type" in youth.unmet_ids()
        assert youth.total_amount == Decimal("7200000")

    def test_configured_default_region(self, clock):
        settings = SubsidySettings(_env_file=None, default_region="NON_CAPITAL")
        report = SubsidyAnalyzer(clock=clock, settings=settings).analyze(DocumentBundle())
        assert report.region_type == RegionType.NON_CAPITAL

    def test_repeatable(self, analyzer, full_bundle):
        """The same bundle and clock give the same calculations."""
        first = analyzer.analyze(full_bundle)
        second = analyzer.analyze(full_bundle)

        assert first.id != second.id
        assert [c.model_dump() for c in first.calculations] == [
            c.model_dump() for c in second.calculations
        ]
