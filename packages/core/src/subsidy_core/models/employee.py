"""Canonical employee records and cross-document match results."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .documents import DocumentType, EmploymentContract, WageLedgerEmployee, WorkType


# =============================================================================
# AGE BANDS
# =============================================================================

YOUTH_MIN_AGE = 15
YOUTH_MAX_AGE = 34
SENIOR_MIN_AGE = 60


def is_youth_age(age: Optional[int]) -> bool:
    return age is not None and YOUTH_MIN_AGE <= age <= YOUTH_MAX_AGE


def is_senior_age(age: Optional[int]) -> bool:
    return age is not None and age >= SENIOR_MIN_AGE


# =============================================================================
# CANONICAL EMPLOYEE
# =============================================================================

class CanonicalEmployee(BaseModel):
    """One reconciled person, merged from every supplied document.

    Age is fixed when the record is built; youth and senior status are read
    from it and are not stored separately.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    resident_id: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0, le=130)
    birth_year: Optional[int] = None
    hire_date: Optional[date] = None
    employment_duration_months: int = Field(default=0, ge=0)
    weekly_hours: Optional[float] = None
    monthly_salary: Optional[Decimal] = None
    has_employment_insurance: bool = False
    work_type: Optional[WorkType] = None
    is_current_employee: bool = True
    termination_date: Optional[str] = None
    termination_reason_code: Optional[str] = None
    sources: tuple[DocumentType, ...] = ()

    @computed_field
    @property
    def is_youth(self) -> bool:
        return is_youth_age(self.age)

    @computed_field
    @property
    def is_senior(self) -> bool:
        return is_senior_age(self.age)

    @property
    def age_known(self) -> bool:
        return self.age is not None


# =============================================================================
# MATCHING
# =============================================================================

class MatchMethod(str, Enum):
    """How a wage-ledger employee was tied to a contract."""
    EXACT = "EXACT"
    FUZZY = "FUZZY"
    RESIDENT_ID = "RESIDENT_ID"
    DATE_PROXIMITY = "DATE_PROXIMITY"
    INPUT_ORDER = "INPUT_ORDER"
    NONE = "NONE"


class EmployeeMatch(BaseModel):
    """Outcome of matching one wage-ledger employee against the contracts."""
    employee: WageLedgerEmployee
    contract: Optional[EmploymentContract] = None
    contract_index: Optional[int] = None
    method: MatchMethod = MatchMethod.NONE
    candidate_count: int = 0
    age: Optional[int] = None

    @property
    def matched(self) -> bool:
        return self.contract is not None

    @property
    def is_youth(self) -> bool:
        return is_youth_age(self.age)

    @property
    def is_senior(self) -> bool:
        return is_senior_age(self.age)


class DocumentMatchResult(BaseModel):
    """Wage ledger vs. contract matching, with derived statistics."""
    matched: list[EmployeeMatch] = Field(default_factory=list)
    unmatched: list[EmployeeMatch] = Field(default_factory=list)
    contract_only: list[EmploymentContract] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.matched) + len(self.unmatched)

    @property
    def matched_count(self) -> int:
        return len(self.matched)

    @property
    def unmatched_count(self) -> int:
        return len(self.unmatched)

    @property
    def match_rate(self) -> int:
        """Percentage of wage-ledger employees with a contract, 0-100."""
        if self.total == 0:
            return 0
        return round(self.matched_count / self.total * 100)

    @property
    def youth_count(self) -> int:
        return sum(1 for m in self.matched if m.is_youth)

    @property
    def senior_count(self) -> int:
        return sum(1 for m in self.matched if m.is_senior)
