"""End-to-end subsidy analysis of one document bundle.

Usage:
    from subsidy_core import SubsidyAnalyzer

    analyzer = SubsidyAnalyzer()
    report = analyzer.analyze(bundle, programs=["YOUTH_JOB_LEAP"])
    print(report.total_eligible_amount)
"""

import uuid
from typing import Iterable, Optional, Union

import structlog

from .calculator import EvaluationContext, SubsidyCalculator, summarize_employees
from .clock import Clock
from .config import SubsidySettings
from .exclusion import apply_duplicate_exclusion, generate_application_checklist
from .korean import detect_region_type
from .matching import match_contracts_to_wage_ledger
from .merger import merge_employee_data
from .models import (
    CalculationOptions,
    ChecklistStatus,
    DocumentBundle,
    DocumentChecklistItem,
    DocumentType,
    Program,
    RegionType,
    SubsidyReport,
)
from .senior_timing import analyze_optimal_senior_timing
from .standards import BASE_DOCUMENTS
from .validation import CrossValidator

logger = structlog.get_logger()


def build_document_checklist(bundle: DocumentBundle) -> list[DocumentChecklistItem]:
    """COMPLETED/MISSING status of the four base documents."""
    present = {
        DocumentType.BUSINESS_REGISTRATION: bundle.business_registration is not None,
        DocumentType.WAGE_LEDGER: bundle.wage_ledger is not None,
        DocumentType.EMPLOYMENT_CONTRACT: bool(bundle.employment_contracts),
        DocumentType.INSURANCE_LIST: bundle.insurance_roster is not None,
    }
    return [
        DocumentChecklistItem(
            id=item_id,
            item=label,
            status=ChecklistStatus.COMPLETED if present[doc_type] else ChecklistStatus.MISSING,
            document_type=doc_type,
        )
        for item_id, label, doc_type in BASE_DOCUMENTS
    ]


class SubsidyAnalyzer:
    """
    Runs matching, merging, cross-validation, calculation and exclusion
    over a document bundle and assembles a SubsidyReport.

    The analyzer holds no state between calls; the same bundle analyzed
    with the same clock gives the same report apart from its id.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        settings: Optional[SubsidySettings] = None,
    ):
        self.settings = settings or SubsidySettings()
        self.clock = clock or self.settings.build_clock()
        self.calculator = SubsidyCalculator(self.clock)
        self.validator = CrossValidator(self.clock)

    def resolve_region(
        self,
        bundle: DocumentBundle,
        region_override: Optional[RegionType] = None,
    ) -> RegionType:
        if region_override is not None:
            return RegionType(region_override)
        address = bundle.business_registration.business_address if bundle.business_registration else None
        return detect_region_type(address, default=self.settings.default_region_type)

    def analyze(
        self,
        bundle: DocumentBundle,
        programs: Optional[Iterable[Union[str, Program]]] = None,
        region_override: Optional[RegionType] = None,
        options: Optional[CalculationOptions] = None,
    ) -> SubsidyReport:
        """
        Produce the full report for a bundle.

        Args:
            bundle: Extracted documents; any part may be missing.
            programs: Programs to evaluate (identifiers or Program); all when None.
            region_override: Region to use instead of detecting it from the address.
            options: Caller-known facts; defaults use the configured youth type.

        Returns:
            SubsidyReport

        Raises:
            ValidationError: If a program identifier is unknown.
        """
        requested = [Program.from_value(p) for p in programs] if programs is not None else None
        if options is None:
            options = CalculationOptions(youth_type=self.settings.default_youth_type)
        region = self.resolve_region(bundle, region_override)

        ledger_employees = bundle.wage_ledger.employees if bundle.wage_ledger else []
        match_result = match_contracts_to_wage_ledger(
            ledger_employees, bundle.employment_contracts, self.clock
        )
        employees = merge_employee_data(
            bundle.wage_ledger,
            bundle.insurance_roster,
            bundle.employment_contracts,
            self.clock,
        )
        validation = self.validator.validate(bundle, match_result)

        ctx = EvaluationContext.from_bundle(bundle, region, options)
        calculations = self.calculator.calculate_all(employees, ctx, requested)
        eligible, excluded = apply_duplicate_exclusion(calculations)
        checklist = generate_application_checklist(eligible)

        per_employee = self.calculator.analyze_all_employees(employees, ctx)
        document_checklist = build_document_checklist(bundle)

        report = SubsidyReport(
            id=str(uuid.uuid4()),
            generated_at=self.clock.now(),
            business_info=bundle.business_registration,
            region_type=region,
            employees=employees,
            match_result=match_result,
            calculations=calculations,
            eligible_calculations=eligible,
            excluded_subsidies=excluded,
            application_checklist=checklist,
            per_employee_calculations=per_employee,
            employee_summary=summarize_employees(per_employee),
            document_checklist=document_checklist,
            required_documents=[
                item.item for item in document_checklist
                if item.status == ChecklistStatus.MISSING
            ],
            data_quality_warnings=validation.warnings,
            data_confidence=validation.overall_confidence,
            senior_timing=analyze_optimal_senior_timing(employees, region, self.clock),
        )

        logger.info(
            "subsidy_report_generated",
            report_id=report.id,
            region=region.value,
            employees=len(employees),
            eligible_programs=[c.program.value for c in eligible],
            excluded=[e.program.value for e in excluded],
            total_eligible_amount=str(report.total_eligible_amount),
            confidence=report.data_confidence,
        )
        return report


__all__ = ["SubsidyAnalyzer", "build_document_checklist"]
