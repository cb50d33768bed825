"""Data models for subsidy-core.

This package provides:
- Raw per-document records from the extraction layer (documents.py)
- Canonical employees and match results (employee.py)
- Programs, calculations and breakdowns (subsidy.py)
- Cross-validation warnings and the assembled report (report.py)
"""

from subsidy_core.models.documents import (
    DocumentType,
    WorkType,
    WageLedgerEmployee,
    WageLedger,
    InsuranceEmployee,
    InsuranceRoster,
    InsuranceFlags,
    EmploymentContract,
    BusinessRegistration,
    DocumentBundle,
)

from subsidy_core.models.subsidy import (
    # Enumerations
    Program,
    EligibilityStatus,
    RegionType,
    YouthType,
    NonCapitalAreaType,
    SeniorProgramType,
    ParentalLeaveType,
    # Options
    CalculationOptions,
    # Breakdown
    CalculationStep,
    PaymentScheduleItem,
    CalculationBreakdown,
    # Results
    SubsidyRequirement,
    SubsidyCalculation,
    EligibleProgramInfo,
    IneligibleProgramInfo,
    PerEmployeeCalculation,
    # Exclusion
    ExclusionRule,
    ExcludedSubsidy,
    ApplicationChecklistItem,
)

from subsidy_core.models.employee import (
    YOUTH_MIN_AGE,
    YOUTH_MAX_AGE,
    SENIOR_MIN_AGE,
    is_youth_age,
    is_senior_age,
    CanonicalEmployee,
    MatchMethod,
    EmployeeMatch,
    DocumentMatchResult,
)

from subsidy_core.models.report import (
    Severity,
    DataQualityWarning,
    DataInconsistency,
    CrossValidationResult,
    ChecklistStatus,
    DocumentChecklistItem,
    ProgramSummary,
    EmployeeSummary,
    MonthlyEligibility,
    EmployeeTurning60,
    SeniorTimingRecommendation,
    SubsidyReport,
)

__all__ = [
    # Documents
    "DocumentType",
    "WorkType",
    "WageLedgerEmployee",
    "WageLedger",
    "InsuranceEmployee",
    "InsuranceRoster",
    "InsuranceFlags",
    "EmploymentContract",
    "BusinessRegistration",
    "DocumentBundle",
    # Subsidy
    "Program",
    "EligibilityStatus",
    "RegionType",
    "YouthType",
    "NonCapitalAreaType",
    "SeniorProgramType",
    "ParentalLeaveType",
    "CalculationOptions",
    "CalculationStep",
    "PaymentScheduleItem",
    "CalculationBreakdown",
    "SubsidyRequirement",
    "SubsidyCalculation",
    "EligibleProgramInfo",
    "IneligibleProgramInfo",
    "PerEmployeeCalculation",
    "ExclusionRule",
    "ExcludedSubsidy",
    "ApplicationChecklistItem",
    # Employee
    "YOUTH_MIN_AGE",
    "YOUTH_MAX_AGE",
    "SENIOR_MIN_AGE",
    "is_youth_age",
    "is_senior_age",
    "CanonicalEmployee",
    "MatchMethod",
    "EmployeeMatch",
    "DocumentMatchResult",
    # Report
    "Severity",
    "DataQualityWarning",
    "DataInconsistency",
    "CrossValidationResult",
    "ChecklistStatus",
    "DocumentChecklistItem",
    "ProgramSummary",
    "EmployeeSummary",
    "MonthlyEligibility",
    "EmployeeTurning60",
    "SeniorTimingRecommendation",
    "SubsidyReport",
]
