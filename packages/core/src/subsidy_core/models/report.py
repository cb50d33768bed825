"""Data quality warnings and the assembled subsidy report."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from .documents import BusinessRegistration, DocumentType
from .employee import CanonicalEmployee, DocumentMatchResult
from .subsidy import (
    ApplicationChecklistItem,
    ExcludedSubsidy,
    PerEmployeeCalculation,
    Program,
    RegionType,
    SubsidyCalculation,
)


# =============================================================================
# CROSS-VALIDATION
# =============================================================================

class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class DataQualityWarning(BaseModel):
    """An advisory note about the supplied documents. Never changes eligibility."""
    field: str
    document_type: DocumentType
    severity: Severity
    message: str
    suggested_action: Optional[str] = None


class DataInconsistency(BaseModel):
    """The same fact disagreeing between two documents."""
    employee_name: str
    field: str
    source1: DocumentType
    value1: str
    source2: DocumentType
    value2: str
    severity: Severity
    message: str


class CrossValidationResult(BaseModel):
    warnings: list[DataQualityWarning] = Field(default_factory=list)
    inconsistencies: list[DataInconsistency] = Field(default_factory=list)
    overall_confidence: int = Field(default=100, ge=0, le=100)


# =============================================================================
# CHECKLISTS AND SUMMARIES
# =============================================================================

class ChecklistStatus(str, Enum):
    COMPLETED = "COMPLETED"
    MISSING = "MISSING"


class DocumentChecklistItem(BaseModel):
    id: str
    item: str
    status: ChecklistStatus
    document_type: DocumentType


class ProgramSummary(BaseModel):
    program: Program
    program_name: str
    employee_count: int = 0
    total_amount: Decimal = Decimal("0")


class EmployeeSummary(BaseModel):
    total_employees: int = 0
    youth_count: int = 0
    senior_count: int = 0
    eligible_for_any_count: int = 0
    total_estimated_subsidy: Decimal = Decimal("0")
    by_program: list[ProgramSummary] = Field(default_factory=list)


# =============================================================================
# SENIOR TIMING
# =============================================================================

class MonthlyEligibility(BaseModel):
    month: str
    eligible_count: int
    quarterly_amount: Decimal
    cumulative_amount: Decimal


class EmployeeTurning60(BaseModel):
    name: str
    current_age: Optional[int] = None
    turns_60_date: date
    months_until_60: int


class SeniorTimingRecommendation(BaseModel):
    """When to start a 12-quarter senior continued-employment claim."""
    optimal_start_date: date
    optimal_end_date: date
    current_eligible_count: int
    optimal_eligible_count: int
    current_total_amount: Decimal
    optimal_total_amount: Decimal
    additional_amount_if_wait: Decimal
    employees_turning_60_soon: list[EmployeeTurning60] = Field(default_factory=list)
    recommendation: str
    monthly_timeline: list[MonthlyEligibility] = Field(default_factory=list)


# =============================================================================
# REPORT
# =============================================================================

class SubsidyReport(BaseModel):
    """Everything the core concluded about one document bundle."""
    id: str
    generated_at: datetime
    business_info: Optional[BusinessRegistration] = None
    region_type: RegionType
    employees: list[CanonicalEmployee] = Field(default_factory=list)
    match_result: Optional[DocumentMatchResult] = None
    calculations: list[SubsidyCalculation] = Field(default_factory=list)
    eligible_calculations: list[SubsidyCalculation] = Field(default_factory=list)
    excluded_subsidies: list[ExcludedSubsidy] = Field(default_factory=list)
    application_checklist: list[ApplicationChecklistItem] = Field(default_factory=list)
    per_employee_calculations: list[PerEmployeeCalculation] = Field(default_factory=list)
    employee_summary: EmployeeSummary = Field(default_factory=EmployeeSummary)
    document_checklist: list[DocumentChecklistItem] = Field(default_factory=list)
    required_documents: list[str] = Field(default_factory=list)
    data_quality_warnings: list[DataQualityWarning] = Field(default_factory=list)
    data_confidence: int = Field(default=100, ge=0, le=100)
    senior_timing: Optional[SeniorTimingRecommendation] = None

    @computed_field
    @property
    def total_eligible_amount(self) -> Decimal:
        return sum((c.total_amount for c in self.eligible_calculations), Decimal("0"))

    def calculation_for(self, program: Program) -> Optional[SubsidyCalculation]:
        for calc in self.calculations:
            if calc.program == program:
                return calc
        return None
