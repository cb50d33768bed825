"""Merge per-document employee rows into one canonical record per person.

Every source contributes what it knows; for each field the first source in
FIELD_PRIORITY that has a usable value wins. People are keyed by normalized
name, exactly; two real people with the same name collapse into one record,
while similar names such as 이수 and 이수진 stay apart.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

import structlog

from .clock import Clock
from .korean import calculate_age, months_between, parse_date, parse_resident_id
from .matching import normalize_name
from .models import (
    CanonicalEmployee,
    DocumentType,
    EmploymentContract,
    InsuranceEmployee,
    InsuranceRoster,
    WageLedger,
    WageLedgerEmployee,
    WorkType,
)

logger = structlog.get_logger()

WAGE = DocumentType.WAGE_LEDGER
INSURANCE = DocumentType.INSURANCE_LIST
CONTRACT = DocumentType.EMPLOYMENT_CONTRACT

# Source preference per canonical field, most trusted first
FIELD_PRIORITY: dict[str, tuple[DocumentType, ...]] = {
    "age": (WAGE, CONTRACT),
    "birth_year": (WAGE, CONTRACT),
    "resident_id": (WAGE, CONTRACT),
    "hire_date": (WAGE, INSURANCE, CONTRACT),
    "weekly_hours": (WAGE, CONTRACT),
    "monthly_salary": (WAGE, CONTRACT),
    "work_type": (WAGE, CONTRACT),
    "termination_date": (INSURANCE, WAGE),
    "termination_reason_code": (INSURANCE, WAGE),
}

# Work types that are assumed insured when no roster was supplied
ASSUMED_INSURED_WORK_TYPES = (WorkType.FULL_TIME, WorkType.CONTRACT, None)


@dataclass
class _EmployeeDraft:
    """Everything observed about one person, by source, before resolution."""
    name: str
    values: dict[str, dict[DocumentType, Any]] = field(default_factory=dict)
    sources: list[DocumentType] = field(default_factory=list)
    roster_insured: Optional[bool] = None
    contract_insured: Optional[bool] = None
    ledger_enrolled: bool = False
    current: bool = True

    def record(self, source: DocumentType, name: str, value: Any) -> None:
        """Keep the first non-empty value a source reports for a field."""
        if value is None:
            return
        self.values.setdefault(name, {}).setdefault(source, value)

    def touch(self, source: DocumentType) -> None:
        if source not in self.sources:
            self.sources.append(source)

    def mark_terminated(self, flag: Optional[bool]) -> None:
        if flag is False:
            self.current = False

    def resolve(self, name: str) -> Any:
        by_source = self.values.get(name, {})
        for source in FIELD_PRIORITY[name]:
            if source in by_source:
                return by_source[source]
        return None


def _age_and_birth_year(
    explicit_age: Optional[int],
    resident_id: Optional[str],
    today: date,
) -> tuple[Optional[int], Optional[int]]:
    birth = parse_resident_id(resident_id)
    if explicit_age is not None:
        birth_year = birth.year if birth else today.year - explicit_age
        return explicit_age, birth_year
    age = calculate_age(resident_id, today)
    if age is None:
        return None, None
    return age, birth.year


def _ended_on_or_before(raw: Optional[str], today: date) -> bool:
    ended = parse_date(raw)
    return ended is not None and ended <= today


class EmployeeMerger:
    """Builds canonical employees from the documents of one bundle.

    One instance handles one merge; create a new one per bundle.
    """

    def __init__(self, clock: Clock):
        self.clock = clock
        self._today = clock.today()
        self._drafts: dict[str, _EmployeeDraft] = {}

    def _draft_for(self, raw_name: str) -> Optional[_EmployeeDraft]:
        key = normalize_name(raw_name)
        if not key:
            logger.warning("employee_without_usable_name")
            return None
        if key in self._drafts:
            return self._drafts[key]
        draft = _EmployeeDraft(name=raw_name.strip())
        self._drafts[key] = draft
        return draft

    def add_wage_ledger(self, employees: Sequence[WageLedgerEmployee]) -> None:
        for row in employees:
            draft = self._draft_for(row.name)
            if draft is None:
                continue
            draft.touch(WAGE)
            age, birth_year = _age_and_birth_year(row.calculated_age, row.resident_id, self._today)
            draft.record(WAGE, "age", age)
            draft.record(WAGE, "birth_year", birth_year)
            draft.record(WAGE, "resident_id", row.resident_id)
            draft.record(WAGE, "hire_date", parse_date(row.hire_date))
            draft.record(WAGE, "weekly_hours", row.weekly_hours)
            draft.record(WAGE, "monthly_salary", row.monthly_wage)
            draft.record(WAGE, "work_type", row.work_type)
            draft.record(WAGE, "termination_date", row.termination_date)
            draft.record(WAGE, "termination_reason_code", row.termination_reason_code)
            if row.insurance_enrollment_date:
                draft.ledger_enrolled = True
            draft.mark_terminated(row.is_current_employee)
            if _ended_on_or_before(row.termination_date, self._today):
                draft.mark_terminated(False)

    def add_insurance_roster(self, employees: Sequence[InsuranceEmployee]) -> None:
        for row in employees:
            draft = self._draft_for(row.name)
            if draft is None:
                continue
            draft.touch(INSURANCE)
            draft.record(INSURANCE, "hire_date", parse_date(row.enrollment_date))
            draft.record(INSURANCE, "termination_date", row.loss_date)
            draft.record(INSURANCE, "termination_reason_code", row.loss_reason_code)
            if draft.roster_insured is None or row.employment_insurance:
                draft.roster_insured = bool(row.employment_insurance)
            draft.mark_terminated(row.is_current_employee)
            if _ended_on_or_before(row.loss_date, self._today):
                draft.mark_terminated(False)

    def add_contracts(self, contracts: Sequence[EmploymentContract]) -> None:
        for contract in contracts:
            draft = self._draft_for(contract.employee_name)
            if draft is None:
                continue
            draft.touch(CONTRACT)
            age, birth_year = _age_and_birth_year(
                contract.calculated_age, contract.resident_id, self._today
            )
            draft.record(CONTRACT, "age", age)
            draft.record(CONTRACT, "birth_year", birth_year)
            draft.record(CONTRACT, "resident_id", contract.resident_id)
            draft.record(CONTRACT, "hire_date", parse_date(contract.contract_start_date))
            draft.record(CONTRACT, "weekly_hours", contract.weekly_hours)
            draft.record(CONTRACT, "monthly_salary", contract.monthly_salary)
            draft.record(CONTRACT, "work_type", contract.work_type)
            flags = contract.social_insurance
            if flags is not None and flags.employment_insurance is not None:
                if draft.contract_insured is None:
                    draft.contract_insured = flags.employment_insurance

    def _insurance_flag(self, draft: _EmployeeDraft, roster_supplied: bool) -> bool:
        if roster_supplied:
            return bool(draft.roster_insured)
        if draft.contract_insured is not None:
            return draft.contract_insured
        if draft.ledger_enrolled:
            return True
        return draft.resolve("work_type") in ASSUMED_INSURED_WORK_TYPES

    def build(self, roster_supplied: bool) -> list[CanonicalEmployee]:
        employees = []
        for draft in self._drafts.values():
            hire_date: Optional[date] = draft.resolve("hire_date")
            duration = months_between(hire_date, self._today) if hire_date else 0
            salary: Optional[Decimal] = draft.resolve("monthly_salary")
            employees.append(CanonicalEmployee(
                name=draft.name,
                resident_id=draft.resolve("resident_id"),
                age=draft.resolve("age"),
                birth_year=draft.resolve("birth_year"),
                hire_date=hire_date,
                employment_duration_months=duration,
                weekly_hours=draft.resolve("weekly_hours"),
                monthly_salary=salary,
                has_employment_insurance=self._insurance_flag(draft, roster_supplied),
                work_type=draft.resolve("work_type"),
                is_current_employee=draft.current,
                termination_date=draft.resolve("termination_date"),
                termination_reason_code=draft.resolve("termination_reason_code"),
                sources=tuple(draft.sources),
            ))
        return employees


def merge_employee_data(
    wage_ledger: Optional[WageLedger],
    insurance_roster: Optional[InsuranceRoster],
    contracts: Optional[Sequence[EmploymentContract]],
    clock: Clock,
) -> list[CanonicalEmployee]:
    """Reconcile the three employee-bearing documents into canonical records.

    Sources are applied wage ledger first, then insurance roster, then
    contracts. Any document may be missing; an employee only exists if at
    least one document names them.

    Args:
        wage_ledger: Payroll ledger, if supplied.
        insurance_roster: Social insurance roster, if supplied.
        contracts: Employment contracts, if supplied.
        clock: Reference clock for age and employment duration.

    Returns:
        Canonical employees in first-seen order.
    """
    merger = EmployeeMerger(clock)
    if wage_ledger is not None:
        merger.add_wage_ledger(wage_ledger.employees)
    roster_supplied = insurance_roster is not None and len(insurance_roster.employees) > 0
    if insurance_roster is not None:
        merger.add_insurance_roster(insurance_roster.employees)
    if contracts:
        merger.add_contracts(contracts)

    employees = merger.build(roster_supplied)

    logger.info(
        "employees_merged",
        count=len(employees),
        with_age=sum(1 for e in employees if e.age_known),
        insured=sum(1 for e in employees if e.has_employment_insurance),
        current=sum(1 for e in employees if e.is_current_employee),
        roster_supplied=roster_supplied,
    )
    return employees


__all__ = [
    "FIELD_PRIORITY",
    "EmployeeMerger",
    "merge_employee_data",
]
