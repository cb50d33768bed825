"""Subsidy programs, calculation results and their audit breakdowns."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from ..exceptions import ValidationError


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Program(str, Enum):
    """Government employment subsidy programs evaluated by the core."""
    YOUTH_JOB_LEAP = "YOUTH_JOB_LEAP"
    EMPLOYMENT_PROMOTION = "EMPLOYMENT_PROMOTION"
    REGULAR_CONVERSION = "REGULAR_CONVERSION"
    SENIOR_CONTINUED_EMPLOYMENT = "SENIOR_CONTINUED_EMPLOYMENT"
    SENIOR_EMPLOYMENT_SUPPORT = "SENIOR_EMPLOYMENT_SUPPORT"
    PARENTAL_EMPLOYMENT_STABILITY = "PARENTAL_EMPLOYMENT_STABILITY"
    EMPLOYMENT_RETENTION = "EMPLOYMENT_RETENTION"

    @classmethod
    def from_value(cls, value: Union[str, "Program"]) -> "Program":
        """Resolve a program from its identifier, case-insensitively."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(
                f"Unknown subsidy program: {value}",
                field="program",
                value=value,
                constraint="Must be one of: " + ", ".join(p.value for p in cls),
            ) from None


class EligibilityStatus(str, Enum):
    ELIGIBLE = "ELIGIBLE"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"


class RegionType(str, Enum):
    """Capital area (서울/인천/경기) or the rest of the country."""
    CAPITAL = "CAPITAL"
    NON_CAPITAL = "NON_CAPITAL"


class YouthType(str, Enum):
    GENERAL = "GENERAL"
    EMPLOYMENT_DIFFICULTY = "EMPLOYMENT_DIFFICULTY"  # 취업애로청년


class NonCapitalAreaType(str, Enum):
    """Population-decline tiers that raise the non-capital youth incentive."""
    GENERAL = "GENERAL"
    PREFERRED = "PREFERRED"  # 우대지역
    SPECIAL = "SPECIAL"  # 특별지역


class SeniorProgramType(str, Enum):
    RETIREMENT_EXTENSION = "RETIREMENT_EXTENSION"  # 정년연장
    RETIREMENT_ABOLITION = "RETIREMENT_ABOLITION"  # 정년폐지
    REEMPLOYMENT = "REEMPLOYMENT"  # 재고용


class ParentalLeaveType(str, Enum):
    MATERNITY_LEAVE = "MATERNITY_LEAVE"
    PARENTAL_LEAVE = "PARENTAL_LEAVE"
    REDUCED_HOURS = "REDUCED_HOURS"


# =============================================================================
# OPTIONS
# =============================================================================

class CalculationOptions(BaseModel):
    """Facts the caller knows that no document carries."""
    model_config = ConfigDict(frozen=True)

    youth_type: YouthType = YouthType.GENERAL
    non_capital_area: NonCapitalAreaType = NonCapitalAreaType.GENERAL
    senior_program_type: Optional[SeniorProgramType] = None
    parental_leave_type: ParentalLeaveType = ParentalLeaveType.PARENTAL_LEAVE
    child_age_months: Optional[int] = Field(default=None, ge=0)
    consecutive_leave_months: Optional[int] = Field(default=None, ge=0)
    is_pregnant: bool = False


# =============================================================================
# BREAKDOWN
# =============================================================================

StepInput = Union[Decimal, int, str]


class CalculationStep(BaseModel):
    step: int = Field(ge=1)
    description: str
    formula: Optional[str] = None
    inputs: dict[str, StepInput] = Field(default_factory=dict)
    result: Decimal


class PaymentScheduleItem(BaseModel):
    milestone: str
    months_after_start: int = Field(ge=0)
    amount: Decimal = Field(ge=0)
    description: Optional[str] = None
    expected_date: Optional[date] = None


class CalculationBreakdown(BaseModel):
    """Ordered calculation trail from rates to a program total.

    The last step always states the total, and the total is always the
    base amount plus the incentive.
    """
    program: Program
    steps: list[CalculationStep] = Field(min_length=1)
    base_amount: Decimal = Field(ge=0)
    incentive_amount: Decimal = Field(default=Decimal("0"), ge=0)
    total_amount: Decimal = Field(ge=0)
    payment_schedule: list[PaymentScheduleItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_totals(self) -> "CalculationBreakdown":
        if self.total_amount != self.base_amount + self.incentive_amount:
            raise ValueError(
                f"total_amount {self.total_amount} != base {self.base_amount} "
                f"+ incentive {self.incentive_amount}"
            )
        if self.steps[-1].result != self.total_amount:
            raise ValueError(
                f"final step result {self.steps[-1].result} != total_amount {self.total_amount}"
            )
        return self

    @property
    def scheduled_total(self) -> Decimal:
        return sum((item.amount for item in self.payment_schedule), Decimal("0"))


# =============================================================================
# AGGREGATE CALCULATION
# =============================================================================

class SubsidyRequirement(BaseModel):
    """A single eligibility condition and whether the documents satisfy it.

    review_only marks a condition the documents cannot prove either way;
    leaving it unmet sends the program to manual review instead of rejecting it.
    """
    id: str
    description: str
    is_met: bool
    details: Optional[str] = None
    review_only: bool = False


class SubsidyCalculation(BaseModel):
    """Company-level result for one program."""
    program: Program
    monthly_amount: Decimal = Field(default=Decimal("0"), ge=0)
    total_months: int = Field(default=0, ge=0)
    total_amount: Decimal = Field(default=Decimal("0"), ge=0)
    requirements_met: list[SubsidyRequirement] = Field(default_factory=list)
    requirements_not_met: list[SubsidyRequirement] = Field(default_factory=list)
    eligibility: EligibilityStatus = EligibilityStatus.NOT_ELIGIBLE
    notes: list[str] = Field(default_factory=list)
    region_type: Optional[RegionType] = None
    incentive_amount: Optional[Decimal] = None
    quarterly_amount: Optional[Decimal] = None
    qualifying_count: int = Field(default=0, ge=0)
    breakdown: Optional[CalculationBreakdown] = None

    @property
    def is_claimable(self) -> bool:
        return self.eligibility != EligibilityStatus.NOT_ELIGIBLE

    def unmet_ids(self) -> list[str]:
        return [r.id for r in self.requirements_not_met]


# =============================================================================
# PER-EMPLOYEE CALCULATION
# =============================================================================

class EligibleProgramInfo(BaseModel):
    program: Program
    program_name: str
    eligibility: EligibilityStatus
    base_amount: Decimal = Field(ge=0)
    incentive_amount: Decimal = Field(default=Decimal("0"), ge=0)
    total_amount: Decimal = Field(ge=0)
    breakdown: CalculationBreakdown
    notes: list[str] = Field(default_factory=list)


class IneligibleProgramInfo(BaseModel):
    program: Program
    program_name: str
    reasons: list[str] = Field(default_factory=list)
    missing_requirements: list[str] = Field(default_factory=list)


class PerEmployeeCalculation(BaseModel):
    """Every evaluated program for one canonical employee."""
    employee_name: str
    resident_id: Optional[str] = None
    age: Optional[int] = None
    is_youth: bool = False
    is_senior: bool = False
    hire_date: Optional[date] = None
    employment_duration_months: int = 0
    weekly_hours: Optional[float] = None
    monthly_salary: Optional[Decimal] = None
    is_current_employee: bool = True
    eligible_programs: list[EligibleProgramInfo] = Field(default_factory=list)
    ineligible_programs: list[IneligibleProgramInfo] = Field(default_factory=list)

    @computed_field
    @property
    def total_estimated_subsidy(self) -> Decimal:
        return sum((p.total_amount for p in self.eligible_programs), Decimal("0"))

    @property
    def eligible_program_ids(self) -> list[Program]:
        return [p.program for p in self.eligible_programs]


# =============================================================================
# EXCLUSION AND CHECKLIST
# =============================================================================

class ExclusionRule(BaseModel):
    """Two programs that cannot both be claimed for the same employee."""
    model_config = ConfigDict(frozen=True)

    winner: Program
    loser: Program
    reason: str


class ExcludedSubsidy(BaseModel):
    program: Program
    program_name: str
    reason: str
    excluded_by: Program


class ApplicationChecklistItem(BaseModel):
    program: Program
    program_name: str
    required_documents: list[str] = Field(default_factory=list)
    application_site: str
    application_period: str
    contact_info: str
    notes: list[str] = Field(default_factory=list)
