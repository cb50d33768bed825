"""Cross-document consistency checks and data-quality confidence.

The checks are advisory. They compare what the wage ledger, insurance
roster and contracts say about the same people and report disagreements as
warnings; they never change an eligibility result and never raise.
"""

from collections import Counter
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .clock import Clock
from .korean import parse_date
from .matching import closest_contract_name, match_contracts_to_wage_ledger, names_match, normalize_name
from .models import (
    CrossValidationResult,
    DataInconsistency,
    DataQualityWarning,
    DocumentBundle,
    DocumentMatchResult,
    DocumentType,
    InsuranceRoster,
    Severity,
    WageLedger,
)
from .standards import (
    DATE_DIFF_HIGH_DAYS,
    DATE_DIFF_MEDIUM_DAYS,
    DEFAULT_WEEKLY_HOURS,
    FULL_TIME_WEEKLY_HOURS,
    MINIMUM_MONTHLY_WAGE,
    PART_TIME_MIN_WEEKLY_HOURS,
    PART_TIME_WAGE_TOLERANCE,
    SALARY_DIFF_HIGH_RATIO,
    SALARY_DIFF_MEDIUM_RATIO,
    SEVERITY_PENALTIES,
    WEEKLY_HOURS_DIFF_LIMIT,
    get_prorated_minimum_wage,
    get_termination_reason,
)

logger = structlog.get_logger()

# Similarity above which an unmatched name is reported as a likely typo
NAME_HINT_THRESHOLD = 0.6


def salary_difference_severity(amount1: Decimal, amount2: Decimal) -> Optional[Severity]:
    """Severity of the relative gap between two monthly salaries.

    The gap is measured against the larger amount. Exactly 10% is tolerated.
    """
    larger = max(amount1, amount2)
    if larger <= 0:
        return None
    ratio = abs(amount1 - amount2) / larger
    if ratio > SALARY_DIFF_HIGH_RATIO:
        return Severity.HIGH
    if ratio > SALARY_DIFF_MEDIUM_RATIO:
        return Severity.MEDIUM
    return None


def date_difference_severity(days: int) -> Optional[Severity]:
    days = abs(days)
    if days > DATE_DIFF_HIGH_DAYS:
        return Severity.HIGH
    if days > DATE_DIFF_MEDIUM_DAYS:
        return Severity.MEDIUM
    return None


def calculate_confidence(warnings: Sequence[DataQualityWarning]) -> int:
    """100 minus the severity penalties of all warnings, floored at 0."""
    penalty = sum(SEVERITY_PENALTIES[w.severity] for w in warnings)
    return max(0, 100 - penalty)


def _won(amount: Decimal) -> str:
    return f"{int(amount):,}원"


class CrossValidator:
    """Runs every consistency check over one document bundle."""

    def __init__(self, clock: Clock):
        self.clock = clock

    # -------------------------------------------------------------------------
    # Individual checks
    # -------------------------------------------------------------------------

    def validate_wage_consistency(self, match_result: DocumentMatchResult) -> list[DataInconsistency]:
        """Compare salary and weekly hours of each matched ledger/contract pair."""
        found: list[DataInconsistency] = []
        for match in match_result.matched:
            employee = match.employee
            contract = match.contract

            if employee.monthly_wage is not None and contract.monthly_salary is not None:
                severity = salary_difference_severity(employee.monthly_wage, contract.monthly_salary)
                if severity is not None:
                    found.append(DataInconsistency(
                        employee_name=employee.name,
                        field="monthly_wage",
                        source1=DocumentType.WAGE_LEDGER,
                        value1=_won(employee.monthly_wage),
                        source2=DocumentType.EMPLOYMENT_CONTRACT,
                        value2=_won(contract.monthly_salary),
                        severity=severity,
                        message=f"{employee.name}: 임금대장과 근로계약서의 월 급여가 다릅니다",
                    ))

            if employee.weekly_hours is not None and contract.weekly_hours is not None:
                if abs(employee.weekly_hours - contract.weekly_hours) > WEEKLY_HOURS_DIFF_LIMIT:
                    found.append(DataInconsistency(
                        employee_name=employee.name,
                        field="weekly_hours",
                        source1=DocumentType.WAGE_LEDGER,
                        value1=f"{employee.weekly_hours:g}시간",
                        source2=DocumentType.EMPLOYMENT_CONTRACT,
                        value2=f"{contract.weekly_hours:g}시간",
                        severity=Severity.MEDIUM,
                        message=f"{employee.name}: 임금대장과 근로계약서의 주 근로시간이 다릅니다",
                    ))
        return found

    def validate_date_consistency(
        self,
        insurance_roster: Optional[InsuranceRoster],
        match_result: DocumentMatchResult,
    ) -> list[DataInconsistency]:
        """Compare the ledger hire date with insurance enrollment and contract start."""
        found: list[DataInconsistency] = []

        enrollments: dict[str, str] = {}
        if insurance_roster is not None:
            for insured in insurance_roster.employees:
                key = normalize_name(insured.name)
                if key and insured.enrollment_date and key not in enrollments:
                    enrollments[key] = insured.enrollment_date

        for match in [*match_result.matched, *match_result.unmatched]:
            employee = match.employee
            contract_start = match.contract.contract_start_date if match.contract else None
            hire_date = parse_date(employee.hire_date)
            if hire_date is None:
                continue

            comparisons = (
                (DocumentType.INSURANCE_LIST, "insurance_enrollment_date",
                 enrollments.get(normalize_name(employee.name)), "4대보험 취득일"),
                (DocumentType.EMPLOYMENT_CONTRACT, "contract_start_date",
                 contract_start, "근로계약 시작일"),
            )
            for source, field_name, raw_other, label in comparisons:
                other = parse_date(raw_other)
                if other is None:
                    continue
                days = (other - hire_date).days
                severity = date_difference_severity(days)
                if severity is None:
                    continue
                found.append(DataInconsistency(
                    employee_name=employee.name,
                    field=field_name,
                    source1=DocumentType.WAGE_LEDGER,
                    value1=hire_date.isoformat(),
                    source2=source,
                    value2=other.isoformat(),
                    severity=severity,
                    message=f"{employee.name}: 입사일과 {label}이 {abs(days)}일 차이납니다",
                ))
        return found

    def validate_date_formats(self, bundle: DocumentBundle) -> list[DataQualityWarning]:
        """Flag dates that are present but cannot be read."""
        unreadable: list[tuple[DocumentType, str, str]] = []
        if bundle.wage_ledger is not None:
            for employee in bundle.wage_ledger.employees:
                if employee.hire_date and parse_date(employee.hire_date) is None:
                    unreadable.append((DocumentType.WAGE_LEDGER, "hire_date", employee.name))
        if bundle.insurance_roster is not None:
            for insured in bundle.insurance_roster.employees:
                if insured.enrollment_date and parse_date(insured.enrollment_date) is None:
                    unreadable.append((DocumentType.INSURANCE_LIST, "enrollment_date", insured.name))
        for contract in bundle.employment_contracts:
            if contract.contract_start_date and parse_date(contract.contract_start_date) is None:
                unreadable.append(
                    (DocumentType.EMPLOYMENT_CONTRACT, "contract_start_date", contract.employee_name)
                )

        return [
            DataQualityWarning(
                field=field_name,
                document_type=source,
                severity=Severity.LOW,
                message=f"{name}: 날짜 형식을 인식할 수 없어 근속기간을 0개월로 처리했습니다",
                suggested_action="원본 문서의 날짜를 YYYY-MM-DD 형식으로 확인하세요",
            )
            for source, field_name, name in unreadable
        ]

    def validate_minimum_wage_compliance(self, wage_ledger: Optional[WageLedger]) -> list[DataQualityWarning]:
        """Check ledger wages against the statutory minimum for the schedule."""
        if wage_ledger is None:
            return []

        full_time_below: list[str] = []
        part_time_below: list[str] = []
        for employee in wage_ledger.employees:
            if employee.monthly_wage is None:
                continue
            hours = employee.weekly_hours if employee.weekly_hours is not None else DEFAULT_WEEKLY_HOURS
            if hours >= FULL_TIME_WEEKLY_HOURS:
                if employee.monthly_wage < MINIMUM_MONTHLY_WAGE:
                    full_time_below.append(employee.name)
            elif hours >= PART_TIME_MIN_WEEKLY_HOURS:
                floor = get_prorated_minimum_wage(hours) * PART_TIME_WAGE_TOLERANCE
                if employee.monthly_wage < floor:
                    part_time_below.append(employee.name)

        warnings: list[DataQualityWarning] = []
        if full_time_below:
            warnings.append(DataQualityWarning(
                field="monthly_wage",
                document_type=DocumentType.WAGE_LEDGER,
                severity=Severity.HIGH,
                message=(
                    f"최저임금({_won(MINIMUM_MONTHLY_WAGE)}) 미달 가능성이 있는 전일제 근로자 "
                    f"{len(full_time_below)}명: {', '.join(full_time_below)}"
                ),
                suggested_action="수습기간 감액 여부와 실제 지급액을 확인하세요",
            ))
        if part_time_below:
            warnings.append(DataQualityWarning(
                field="monthly_wage",
                document_type=DocumentType.WAGE_LEDGER,
                severity=Severity.HIGH,
                message=(
                    f"근로시간 비례 최저임금 미달 가능성이 있는 단시간 근로자 "
                    f"{len(part_time_below)}명: {', '.join(part_time_below)}"
                ),
                suggested_action="주 소정근로시간과 시급을 확인하세요",
            ))
        return warnings

    def validate_employee_list_consistency(
        self,
        wage_ledger: Optional[WageLedger],
        insurance_roster: Optional[InsuranceRoster],
    ) -> list[DataQualityWarning]:
        """Compare who appears on the wage ledger and on the insurance roster.

        Names are counted, not deduplicated, so two people called 김민수 on
        the ledger against one on the roster leaves one unexplained.
        """
        if insurance_roster is None:
            return []
        if wage_ledger is None:
            return [DataQualityWarning(
                field="employees",
                document_type=DocumentType.WAGE_LEDGER,
                severity=Severity.HIGH,
                message="임금대장이 없어 4대보험 명부와 대조할 수 없습니다",
                suggested_action="임금대장을 업로드하세요",
            )]

        ledger_names = Counter(normalize_name(e.name) for e in wage_ledger.employees)
        roster_names = Counter(normalize_name(e.name) for e in insurance_roster.employees)
        ledger_names.pop("", None)
        roster_names.pop("", None)

        ledger_only = ledger_names - roster_names
        roster_only = roster_names - ledger_names

        warnings: list[DataQualityWarning] = []
        if ledger_only:
            warnings.append(DataQualityWarning(
                field="employees",
                document_type=DocumentType.INSURANCE_LIST,
                severity=Severity.MEDIUM,
                message=(
                    f"임금대장에만 있는 근로자 {sum(ledger_only.values())}명 (4대보험 미가입 가능성): "
                    f"{', '.join(sorted(ledger_only.elements()))}"
                ),
                suggested_action="해당 근로자의 고용보험 가입 여부를 확인하세요",
            ))
        if roster_only:
            warnings.append(DataQualityWarning(
                field="employees",
                document_type=DocumentType.WAGE_LEDGER,
                severity=Severity.LOW,
                message=(
                    f"4대보험 명부에만 있는 근로자 {sum(roster_only.values())}명 (다른 기간 또는 퇴사자 가능성): "
                    f"{', '.join(sorted(roster_only.elements()))}"
                ),
                suggested_action="임금대장 기간과 퇴사 여부를 확인하세요",
            ))
        return warnings

    def validate_reduction_prevention(
        self,
        wage_ledger: Optional[WageLedger],
        insurance_roster: Optional[InsuranceRoster],
    ) -> list[DataQualityWarning]:
        """Flag employer-initiated separations and terminated ledger rows.

        Most hiring subsidies are withdrawn when the employer dismissed
        someone around the hiring date (감원방지 요건).
        """
        warnings: list[DataQualityWarning] = []
        if insurance_roster is not None:
            for insured in insurance_roster.employees:
                reason = get_termination_reason(insured.loss_reason_code)
                if reason is None:
                    continue
                warnings.append(DataQualityWarning(
                    field="loss_reason_code",
                    document_type=DocumentType.INSURANCE_LIST,
                    severity=Severity.HIGH,
                    message=(
                        f"{insured.name}: {insured.loss_date or '날짜 미상'} {reason}"
                        f"(코드 {insured.loss_reason_code}) 이력이 있습니다"
                    ),
                    suggested_action="고용조정 이력은 지원금 제한 사유가 될 수 있으니 시점을 확인하세요",
                ))

        if wage_ledger is not None:
            terminated = [e.name for e in wage_ledger.employees if e.is_current_employee is False]
            if terminated:
                warnings.append(DataQualityWarning(
                    field="is_current_employee",
                    document_type=DocumentType.WAGE_LEDGER,
                    severity=Severity.MEDIUM,
                    message=(
                        f"퇴사자 {len(terminated)}명은 지원금 산정에서 제외되었습니다: "
                        f"{', '.join(terminated)}"
                    ),
                    suggested_action="퇴사 사유와 퇴사일을 확인하세요",
                ))
        return warnings

    def validate_name_spelling(self, match_result: DocumentMatchResult) -> list[DataQualityWarning]:
        """Suggest likely spelling variants for employees without a contract."""
        warnings: list[DataQualityWarning] = []
        for match in match_result.unmatched:
            closest = closest_contract_name(match.employee, match_result.contract_only)
            if closest is None:
                continue
            name, score = closest
            if score >= NAME_HINT_THRESHOLD and not names_match(name, match.employee.name):
                warnings.append(DataQualityWarning(
                    field="name",
                    document_type=DocumentType.EMPLOYMENT_CONTRACT,
                    severity=Severity.LOW,
                    message=f"{match.employee.name}: 근로계약서의 '{name}'과(와) 동일인일 수 있습니다",
                    suggested_action="이름 표기가 문서마다 같은지 확인하세요",
                ))
        return warnings

    # -------------------------------------------------------------------------
    # Full run
    # -------------------------------------------------------------------------

    @staticmethod
    def inconsistency_to_warning(inconsistency: DataInconsistency) -> DataQualityWarning:
        return DataQualityWarning(
            field=inconsistency.field,
            document_type=DocumentType.CROSS_VALIDATION,
            severity=inconsistency.severity,
            message=f"{inconsistency.message} ({inconsistency.value1} vs {inconsistency.value2})",
            suggested_action="원본 문서를 대조하여 올바른 값을 확인하세요",
        )

    def validate(
        self,
        bundle: DocumentBundle,
        match_result: Optional[DocumentMatchResult] = None,
    ) -> CrossValidationResult:
        """Run every check and compute the overall confidence.

        Args:
            bundle: Documents to check.
            match_result: Ledger/contract matching, computed when omitted.
        """
        ledger_employees = bundle.wage_ledger.employees if bundle.wage_ledger else []
        if match_result is None:
            match_result = match_contracts_to_wage_ledger(
                ledger_employees, bundle.employment_contracts, self.clock
            )

        inconsistencies = [
            *self.validate_wage_consistency(match_result),
            *self.validate_date_consistency(bundle.insurance_roster, match_result),
        ]
        warnings = [
            *self.validate_minimum_wage_compliance(bundle.wage_ledger),
            *self.validate_employee_list_consistency(bundle.wage_ledger, bundle.insurance_roster),
            *self.validate_reduction_prevention(bundle.wage_ledger, bundle.insurance_roster),
            *self.validate_date_formats(bundle),
            *self.validate_name_spelling(match_result),
            *(self.inconsistency_to_warning(i) for i in inconsistencies),
        ]
        confidence = calculate_confidence(warnings)

        logger.info(
            "cross_validation_completed",
            warnings=len(warnings),
            inconsistencies=len(inconsistencies),
            high=sum(1 for w in warnings if w.severity == Severity.HIGH),
            confidence=confidence,
        )
        return CrossValidationResult(
            warnings=warnings,
            inconsistencies=inconsistencies,
            overall_confidence=confidence,
        )


__all__ = [
    "CrossValidator",
    "salary_difference_severity",
    "date_difference_severity",
    "calculate_confidence",
]
