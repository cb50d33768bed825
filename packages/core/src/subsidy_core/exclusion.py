"""Duplicate-claim exclusion and the application checklist.

Some programs cannot be claimed together for the same person. The table in
standards.EXCLUSION_RULES names, for each such pair, the program that is kept.
"""

from typing import Sequence

import structlog

from .models import (
    ApplicationChecklistItem,
    EligibilityStatus,
    EligibleProgramInfo,
    ExcludedSubsidy,
    ExclusionRule,
    IneligibleProgramInfo,
    SubsidyCalculation,
)
from .standards import EXCLUSION_RULES, get_application_info, get_program_name

logger = structlog.get_logger()


def apply_duplicate_exclusion(
    calculations: Sequence[SubsidyCalculation],
    rules: Sequence[ExclusionRule] = EXCLUSION_RULES,
) -> tuple[list[SubsidyCalculation], list[ExcludedSubsidy]]:
    """Drop the losing program of every exclusive pair that is present.

    Only ELIGIBLE and NEEDS_REVIEW calculations take part. Each rule is
    checked against the same working set, so dropping one loser never
    changes whether another rule applies.

    Returns:
        (surviving calculations in input order, excluded subsidies)
    """
    working = [c for c in calculations if c.is_claimable]
    present = {c.program for c in working}

    losers = {}
    for rule in rules:
        if rule.winner in present and rule.loser in present and rule.loser not in losers:
            losers[rule.loser] = rule

    excluded = [
        ExcludedSubsidy(
            program=loser,
            program_name=get_program_name(loser),
            reason=rule.reason,
            excluded_by=rule.winner,
        )
        for loser, rule in losers.items()
    ]
    eligible = [c for c in working if c.program not in losers]

    if excluded:
        logger.info(
            "duplicate_subsidies_excluded",
            excluded=[e.program.value for e in excluded],
            remaining=len(eligible),
        )
    return eligible, excluded


def resolve_employee_exclusions(
    eligible: Sequence[EligibleProgramInfo],
    ineligible: Sequence[IneligibleProgramInfo],
    rules: Sequence[ExclusionRule] = EXCLUSION_RULES,
) -> tuple[list[EligibleProgramInfo], list[IneligibleProgramInfo]]:
    """Apply the exclusion table to one employee's program results.

    Losing programs move to the ineligible list with the rule's reason.
    """
    present = {info.program for info in eligible}
    reasons = {}
    for rule in rules:
        if rule.winner in present and rule.loser in present:
            reasons.setdefault(rule.loser, rule.reason)

    kept = [info for info in eligible if info.program not in reasons]
    moved = [
        IneligibleProgramInfo(
            program=info.program,
            program_name=info.program_name,
            reasons=[reasons[info.program]],
        )
        for info in eligible
        if info.program in reasons
    ]
    return kept, list(ineligible) + moved


def generate_application_checklist(
    calculations: Sequence[SubsidyCalculation],
) -> list[ApplicationChecklistItem]:
    """Application guidance for every program still worth applying for."""
    items = []
    for calc in calculations:
        if calc.eligibility == EligibilityStatus.NOT_ELIGIBLE:
            continue
        info = get_application_info(calc.program)
        items.append(ApplicationChecklistItem(
            program=calc.program,
            program_name=get_program_name(calc.program),
            required_documents=list(info.required_documents),
            application_site=info.application_site,
            application_period=info.application_period,
            contact_info=info.contact_info,
            notes=list(info.notes),
        ))
    return items


__all__ = [
    "apply_duplicate_exclusion",
    "resolve_employee_exclusions",
    "generate_application_checklist",
]
