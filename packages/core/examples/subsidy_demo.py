#!/usr/bin/env python3
"""
Employment Subsidy Analysis Demonstration

This script demonstrates the complete subsidy analysis workflow:
1. Build a document bundle as the extraction layer would hand it over
2. Run matching, cross-validation and program calculations
3. Print the eligible programs, exclusions and per-employee estimates

Run: python packages/core/examples/subsidy_demo.py
"""

from datetime import date
from decimal import Decimal

from subsidy_core import FixedClock, SubsidyAnalyzer, SubsidySettings, configure_logging
from subsidy_core.models import (
    BusinessRegistration,
    CalculationOptions,
    DocumentBundle,
    EmploymentContract,
    InsuranceEmployee,
    InsuranceRoster,
    WageLedger,
    WageLedgerEmployee,
    WorkType,
)


def create_sample_bundle() -> DocumentBundle:
    """A small manufacturer in Changwon with four employees."""
    return DocumentBundle(
        business_registration=BusinessRegistration(
            business_number="609-81-12345",
            business_name="창원정밀(주)",
            representative_name="한대표",
            business_address="경상남도 창원시 성산구 공단로 100",
            business_type="제조업",
            business_item="자동차부품",
        ),
        wage_ledger=WageLedger(
            period="2026-02",
            employees=[
                WageLedgerEmployee(
                    name="김도윤", resident_id="980412-1******", hire_date="2025-10-01",
                    monthly_wage=Decimal("2600000"), weekly_hours=40, work_type=WorkType.FULL_TIME,
                ),
                WageLedgerEmployee(
                    name="이서연", resident_id="010923-4******", hire_date="2026.01.05",
                    monthly_wage=Decimal("2300000"), weekly_hours=40, work_type=WorkType.FULL_TIME,
                ),
                WageLedgerEmployee(
                    name="박영수", resident_id="650304-1******", hire_date="2012-04-02",
                    monthly_wage=Decimal("3200000"), weekly_hours=40, work_type=WorkType.FULL_TIME,
                ),
                WageLedgerEmployee(
                    name="최정숙", resident_id="660710-2******", hire_date="2019-07-01",
                    monthly_wage=Decimal("2400000"), weekly_hours=40, work_type=WorkType.FULL_TIME,
                ),
            ],
        ),
        insurance_roster=InsuranceRoster(
            employees=[
                InsuranceEmployee(name="김도윤", enrollment_date="2025-10-01", employment_insurance=True),
                InsuranceEmployee(name="이서연", enrollment_date="2026-01-05", employment_insurance=True),
                InsuranceEmployee(name="박영수", enrollment_date="2012-04-02", employment_insurance=True),
                InsuranceEmployee(name="최정숙", enrollment_date="2019-07-01", employment_insurance=True),
            ]
        ),
        employment_contracts=[
            EmploymentContract(
                employee_name="김도윤", contract_start_date="2025-10-01",
                monthly_salary=Decimal("2600000"), weekly_hours=40, work_type=WorkType.FULL_TIME,
            ),
            EmploymentContract(
                employee_name="이서연", contract_start_date="2026-01-05",
                monthly_salary=Decimal("2300000"), weekly_hours=40, work_type=WorkType.FULL_TIME,
            ),
        ],
    )


def main():
    print("=" * 70)
    print("SUBSIDY CORE - Employment Subsidy Analysis Demo")
    print("=" * 70)
    print()

    settings = SubsidySettings(log_level="WARNING")
    configure_logging(settings)
    analyzer = SubsidyAnalyzer(clock=FixedClock(date(2026, 3, 15)), settings=settings)

    # Step 1: Documents
    print("Step 1: Building sample document bundle...")
    bundle = create_sample_bundle()
    print(f"  - Company: {bundle.business_registration.business_name}")
    print(f"  - Employees on wage ledger: {len(bundle.wage_ledger.employees)}")
    print(f"  - Contracts: {len(bundle.employment_contracts)}")
    print()

    # Step 2: Analysis
    print("Step 2: Running subsidy analysis...")
    report = analyzer.analyze(
        bundle,
        options=CalculationOptions(child_age_months=8, consecutive_leave_months=6),
    )
    print(f"  - Region: {report.region_type.value}")
    print(f"  - Match rate: {report.match_result.match_rate}%")
    print(f"  - Data confidence: {report.data_confidence}")
    print()

    # Step 3: Results
    print("Step 3: Claimable programs")
    for calc in report.eligible_calculations:
        print(f"  - {calc.program.value:<32} {calc.eligibility.value:<13} {calc.total_amount:>14,}원")
    for excluded in report.excluded_subsidies:
        print(f"  - excluded {excluded.program_name}: {excluded.reason}")
    print(f"  Total: {report.total_eligible_amount:,}원")
    print()

    print("Per-employee estimates")
    for calc in report.per_employee_calculations:
        programs = ", ".join(p.program_name for p in calc.eligible_programs) or "-"
        print(f"  - {calc.employee_name}: {calc.total_estimated_subsidy:,}원 ({programs})")
    print()

    if report.senior_timing:
        print("Senior subsidy timing")
        print(f"  {report.senior_timing.recommendation}")
        print()

    for warning in report.data_quality_warnings:
        print(f"[{warning.severity.value}] {warning.message}")

    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
