"""Structured records handed to the core by the document extraction layer.

One record type per source document. Values are as extracted: dates are the
raw strings the extractor produced (they may be malformed) and every field
except the person's name is optional. Records are frozen once received.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentType(str, Enum):
    """Source of a record or of a data quality warning."""
    WAGE_LEDGER = "WAGE_LEDGER"
    INSURANCE_LIST = "INSURANCE_LIST"
    EMPLOYMENT_CONTRACT = "EMPLOYMENT_CONTRACT"
    BUSINESS_REGISTRATION = "BUSINESS_REGISTRATION"
    CROSS_VALIDATION = "CROSS_VALIDATION"


class WorkType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"


class _RawRecord(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# WAGE LEDGER (임금대장)
# =============================================================================

class WageLedgerEmployee(_RawRecord):
    """One employee row of a wage ledger."""
    name: str
    resident_id: Optional[str] = Field(
        default=None, description="Resident registration number, possibly masked"
    )
    hire_date: Optional[str] = None
    monthly_wage: Optional[Decimal] = Field(default=None, ge=0)
    weekly_hours: Optional[float] = Field(default=None, ge=0, le=168)
    work_type: Optional[WorkType] = None
    insurance_enrollment_date: Optional[str] = None
    calculated_age: Optional[int] = Field(
        default=None, ge=0, le=130, description="Age computed by the extractor, if any"
    )
    is_current_employee: Optional[bool] = None
    termination_date: Optional[str] = None
    termination_reason_code: Optional[str] = None


class WageLedger(_RawRecord):
    period: Optional[str] = None
    employees: list[WageLedgerEmployee] = Field(default_factory=list)
    total_wage: Optional[Decimal] = Field(default=None, ge=0)


# =============================================================================
# INSURANCE ROSTER (4대보험 가입자 명부)
# =============================================================================

class InsuranceEmployee(_RawRecord):
    """One insured person on the social insurance roster."""
    name: str
    insurance_number: Optional[str] = None
    enrollment_date: Optional[str] = None
    employment_insurance: Optional[bool] = None
    national_pension: Optional[bool] = None
    health_insurance: Optional[bool] = None
    industrial_accident: Optional[bool] = None
    is_current_employee: Optional[bool] = None
    loss_date: Optional[str] = Field(default=None, description="자격상실일")
    loss_reason_code: Optional[str] = Field(default=None, description="상실사유 코드")


class InsuranceRoster(_RawRecord):
    employees: list[InsuranceEmployee] = Field(default_factory=list)


# =============================================================================
# EMPLOYMENT CONTRACT (근로계약서)
# =============================================================================

class InsuranceFlags(_RawRecord):
    """Insurance sub-flags written into a contract."""
    employment_insurance: Optional[bool] = None
    national_pension: Optional[bool] = None
    health_insurance: Optional[bool] = None
    industrial_accident: Optional[bool] = None


class EmploymentContract(_RawRecord):
    employee_name: str
    employer_name: Optional[str] = None
    contract_start_date: Optional[str] = None
    contract_end_date: Optional[str] = None
    work_type: Optional[WorkType] = None
    monthly_salary: Optional[Decimal] = Field(default=None, ge=0)
    weekly_hours: Optional[float] = Field(default=None, ge=0, le=168)
    resident_id: Optional[str] = None
    calculated_age: Optional[int] = Field(default=None, ge=0, le=130)
    social_insurance: Optional[InsuranceFlags] = None


# =============================================================================
# BUSINESS REGISTRATION (사업자등록증)
# =============================================================================

class BusinessRegistration(_RawRecord):
    business_number: Optional[str] = None
    business_name: Optional[str] = None
    representative_name: Optional[str] = None
    business_address: Optional[str] = None
    business_type: Optional[str] = None
    business_item: Optional[str] = None


class DocumentBundle(_RawRecord):
    """Everything extracted for one company in one analysis request."""
    business_registration: Optional[BusinessRegistration] = None
    wage_ledger: Optional[WageLedger] = None
    insurance_roster: Optional[InsuranceRoster] = None
    employment_contracts: list[EmploymentContract] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no document at all was supplied."""
        return (
            self.business_registration is None
            and self.wage_ledger is None
            and self.insurance_roster is None
            and not self.employment_contracts
        )

    @property
    def has_insurance_data(self) -> bool:
        return self.insurance_roster is not None and len(self.insurance_roster.employees) > 0
