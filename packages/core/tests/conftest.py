"""Shared fixtures for subsidy core tests."""

from datetime import date
from decimal import Decimal

import pytest

from subsidy_core.clock import FixedClock
from subsidy_core.models import (
    BusinessRegistration,
    CanonicalEmployee,
    DocumentBundle,
    EmploymentContract,
    InsuranceEmployee,
    InsuranceRoster,
    WageLedger,
    WageLedgerEmployee,
    WorkType,
)

REFERENCE_DATE = date(2026, 3, 15)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2026-03-15."""
    return FixedClock(REFERENCE_DATE)


@pytest.fixture
def make_employee():
    """Factory for canonical employees with sensible defaults."""

    def _make(**overrides) -> CanonicalEmployee:
        values = {
            "name": "김철수",
            "age": 30,
            "hire_date": date(2025, 6, 2),
            "employment_duration_months": 9,
            "weekly_hours": 40.0,
            "monthly_salary": Decimal("2500000"),
            "has_employment_insurance": True,
            "work_type": WorkType.FULL_TIME,
            "is_current_employee": True,
        }
        values.update(overrides)
        return CanonicalEmployee(**values)

    return _make


@pytest.fixture
def business_registration() -> BusinessRegistration:
    """A company registered in Busan (non-capital area)."""
    return BusinessRegistration(
        business_number="123-45-67890",
        business_name="해운대정밀",
        representative_name="정대표",
        business_address="부산광역시 해운대구 센텀중앙로 79",
        business_type="제조업",
        business_item="기계부품",
    )


@pytest.fixture
def wage_ledger() -> WageLedger:
    """Three employees: one youth, one senior, one fixed-term worker."""
    return WageLedger(
        period="2026-02",
        employees=[
            WageLedgerEmployee(
                name="김철수",
                resident_id="950315-1******",
                hire_date="2025-09-01",
                monthly_wage=Decimal("2500000"),
                weekly_hours=40,
                work_type=WorkType.FULL_TIME,
            ),
            WageLedgerEmployee(
                name="이영희",
                resident_id="650820-2******",
                hire_date="2018-03-02",
                monthly_wage=Decimal("2800000"),
                weekly_hours=40,
                work_type=WorkType.FULL_TIME,
            ),
            WageLedgerEmployee(
                name="박민수",
                resident_id="800101-1******",
                hire_date="2025.01.02",
                monthly_wage=Decimal("2300000"),
                weekly_hours=40,
                work_type=WorkType.CONTRACT,
            ),
        ],
    )


@pytest.fixture
def insurance_roster() -> InsuranceRoster:
    return InsuranceRoster(
        employees=[
            InsuranceEmployee(name="김철수", enrollment_date="2025-09-01", employment_insurance=True),
            InsuranceEmployee(name="이영희", enrollment_date="2018-03-02", employment_insurance=True),
            InsuranceEmployee(name="박민수", enrollment_date="2025-01-02", employment_insurance=True),
        ]
    )


@pytest.fixture
def contracts() -> list[EmploymentContract]:
    return [
        EmploymentContract(
            employee_name="김철수",
            contract_start_date="2025-09-01",
            work_type=WorkType.FULL_TIME,
            monthly_salary=Decimal("2500000"),
            weekly_hours=40,
        ),
        EmploymentContract(
            employee_name="이영희",
            contract_start_date="2018-03-02",
            work_type=WorkType.FULL_TIME,
            monthly_salary=Decimal("2800000"),
            weekly_hours=40,
        ),
    ]


@pytest.fixture
def full_bundle(business_registration, wage_ledger, insurance_roster, contracts) -> DocumentBundle:
    """Every document supplied and consistent."""
    return DocumentBundle(
        business_registration=business_registration,
        wage_ledger=wage_ledger,
        insurance_roster=insurance_roster,
        employment_contracts=contracts,
    )
