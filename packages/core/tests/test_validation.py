"""Tests for cross-document validation."""

from decimal import Decimal

import pytest

from subsidy_core.matching import match_contracts_to_wage_ledger
from subsidy_core.models import (
    DataQualityWarning,
    DocumentBundle,
    DocumentType,
    EmploymentContract,
    InsuranceEmployee,
    InsuranceRoster,
    Severity,
    WageLedger,
    WageLedgerEmployee,
)
from subsidy_core.validation import (
    CrossValidator,
    calculate_confidence,
    date_difference_severity,
    salary_difference_severity,
)


def _warning(severity: Severity) -> DataQualityWarning:
    return DataQualityWarning(
        field="x", document_type=DocumentType.WAGE_LEDGER, severity=severity, message="m"
    )


class TestSeverityHelpers:
    """Tests for threshold helpers."""

    def test_salary_exactly_ten_percent_is_tolerated(self):
        assert salary_difference_severity(Decimal("1800000"), Decimal("2000000")) is None

    def test_salary_just_over_ten_percent(self):
        assert salary_difference_severity(Decimal("1799000"), Decimal("2000000")) == Severity.MEDIUM

    def test_salary_over_thirty_percent(self):
        assert salary_difference_severity(Decimal("1000000"), Decimal("2000000")) == Severity.HIGH

    def test_zero_salaries(self):
        assert salary_difference_severity(Decimal("0"), Decimal("0")) is None

    def test_date_thresholds(self):
        assert date_difference_severity(30) is None
        assert date_difference_severity(-31) == Severity.MEDIUM
        assert date_difference_severity(90) == Severity.MEDIUM
        assert date_difference_severity(91) == Severity.HIGH

    def test_confidence(self):
        assert calculate_confidence([]) == 100
        warnings = [_warning(Severity.HIGH), _warning(Severity.MEDIUM), _warning(Severity.LOW)]
        assert calculate_confidence(warnings) == 100 - 15 - 8 - 3
        assert calculate_confidence([_warning(Severity.HIGH)] * 10) == 0


class TestCrossValidator:
    """Tests for the individual checks and the full run."""

    @pytest.fixture
    def validator(self, clock) -> CrossValidator:
        return CrossValidator(clock)

    def test_consistent_bundle_has_full_confidence(self, validator, full_bundle):
        result = validator.validate(full_bundle)

        assert result.inconsistencies == []
        # 박민수 has no contract but is on the roster, which is not a warning
        assert result.warnings == []
        assert result.overall_confidence == 100

    def test_wage_mismatch(self, validator, clock):
        ledger = [
            WageLedgerEmployee(name="김철수", monthly_wage=Decimal("1799000"), weekly_hours=40),
            WageLedgerEmployee(name="이영희", monthly_wage=Decimal("1800000"), weekly_hours=40),
        ]
        contracts = [
            EmploymentContract(employee_name="김철수", monthly_salary=Decimal("2000000"), weekly_hours=30),
            EmploymentContract(employee_name="이영희", monthly_salary=Decimal("2000000"), weekly_hours=45),
        ]
        match = match_contracts_to_wage_ledger(ledger, contracts, clock)
        found = validator.validate_wage_consistency(match)

        assert [(i.employee_name, i.field, i.severity) for i in found] == [
            ("김철수", "monthly_wage", Severity.MEDIUM),
            ("김철수", "weekly_hours", Severity.MEDIUM),
        ]

    def test_date_mismatch(self, validator, clock):
        ledger = [WageLedgerEmployee(name="김철수", hire_date="2025-01-01")]
        contracts = [EmploymentContract(employee_name="김철수", contract_start_date="2025-02-15")]
        roster = InsuranceRoster(employees=[
            InsuranceEmployee(name="김철수", enrollment_date="2025-06-01"),
        ])
        match = match_contracts_to_wage_ledger(ledger, contracts, clock)
        found = validator.validate_date_consistency(roster, match)

        assert {(i.field, i.severity) for i in found} == {
            ("insurance_enrollment_date", Severity.HIGH),
            ("contract_start_date", Severity.MEDIUM),
        }

    def test_unreadable_dates_are_low_warnings(self, validator):
        bundle = DocumentBundle(
            wage_ledger=WageLedger(employees=[WageLedgerEmployee(name="김철수", hire_date="작년 봄")]),
            employment_contracts=[EmploymentContract(employee_name="김철수", contract_start_date="미정")],
        )
        warnings = validator.validate_date_formats(bundle)

        assert len(warnings) == 2
        assert all(w.severity == Severity.LOW for w in warnings)

    def test_minimum_wage_aggregated_per_class(self, validator):
        ledger = WageLedger(employees=[
            WageLedgerEmployee(name="김철수", monthly_wage=Decimal("2000000"), weekly_hours=40),
            WageLedgerEmployee(name="이영희", monthly_wage=Decimal("2100000")),
            WageLedgerEmployee(name="박민수", monthly_wage=Decimal("500000"), weekly_hours=20),
            WageLedgerEmployee(name="최지훈", monthly_wage=Decimal("900000"), weekly_hours=20),
            WageLedgerEmployee(name="정하늘", monthly_wage=Decimal("300000"), weekly_hours=10),
        ])
        warnings = validator.validate_minimum_wage_compliance(ledger)

        assert len(warnings) == 2
        assert all(w.severity == Severity.HIGH for w in warnings)
        assert "김철수" in warnings[0].message and "이영희" in warnings[0].message
        assert "박민수" in warnings[1].message
        assert "최지훈" not in warnings[1].message

    def test_roster_list_consistency(self, validator):
        ledger = WageLedger(employees=[
            WageLedgerEmployee(name="김민수"),
            WageLedgerEmployee(name="김민수"),
            WageLedgerEmployee(name="이영희"),
        ])
        roster = InsuranceRoster(employees=[
            InsuranceEmployee(name="김민수"),
            InsuranceEmployee(name="이영희"),
            InsuranceEmployee(name="박민수"),
        ])
        warnings = validator.validate_employee_list_consistency(ledger, roster)

        assert [w.severity for w in warnings] == [Severity.MEDIUM, Severity.LOW]
        assert "1명" in warnings[0].message and "김민수" in warnings[0].message
        assert "박민수" in warnings[1].message

    def test_roster_without_ledger(self, validator):
        roster = InsuranceRoster(employees=[InsuranceEmployee(name="김민수")])
        (warning,) = validator.validate_employee_list_consistency(None, roster)
        assert warning.severity == Severity.HIGH

    def test_reduction_prevention(self, validator):
        roster = InsuranceRoster(employees=[
            InsuranceEmployee(name="김민수", loss_date="2025-11-30", loss_reason_code="26"),
            InsuranceEmployee(name="이영희", loss_date="2025-10-31", loss_reason_code="11"),
            InsuranceEmployee(name="박민수", loss_date="2025-12-31", loss_reason_code="23"),
        ])
        ledger = WageLedger(employees=[WageLedgerEmployee(name="최지훈", is_current_employee=False)])
        warnings = validator.validate_reduction_prevention(ledger, roster)

        assert [w.severity for w in warnings] == [Severity.HIGH, Severity.HIGH, Severity.MEDIUM]
        assert "해고" in warnings[0].message
        assert "권고사직" in warnings[1].message
        assert "최지훈" in warnings[2].message

    def test_name_spelling_hint(self, validator, clock):
        ledger = [WageLedgerEmployee(name="김철수")]
        contracts = [EmploymentContract(employee_name="김찰수")]
        match = match_contracts_to_wage_ledger(ledger, contracts, clock)
        (warning,) = validator.validate_name_spelling(match)

        assert warning.severity == Severity.LOW
        assert "김찰수" in warning.message

    def test_inconsistencies_mirrored_as_warnings(self, validator):
        bundle = DocumentBundle(
            wage_ledger=WageLedger(employees=[
                WageLedgerEmployee(name="김철수", monthly_wage=Decimal("3000000"), weekly_hours=40),
            ]),
            employment_contracts=[
                EmploymentContract(employee_name="김철수", monthly_salary=Decimal("2000000")),
            ],
        )
        result = validator.validate(bundle)

        assert len(result.inconsistencies) == 1
        mirrored = [w for w in result.warnings if w.document_type == DocumentType.CROSS_VALIDATION]
        assert len(mirrored) == 1
        assert mirrored[0].severity == Severity.HIGH
        assert result.overall_confidence == 85

    def test_empty_bundle(self, validator):
        result = validator.validate(DocumentBundle())
        assert result.warnings == []
        assert result.overall_confidence == 100
