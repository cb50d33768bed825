"""Cross-document employee identity resolution.

Names come out of OCR with stray spaces, punctuation and the occasional
trailing artifact character, so people are joined on a normalized name.
When several records share one normalized name, the resident ID, then the
hire/contract start dates, then input order decide which contract belongs
to which wage-ledger row.
"""

import re
import unicodedata
from datetime import date
from difflib import SequenceMatcher
from typing import Iterable, Optional, Sequence

import structlog

from .clock import Clock
from .korean import calculate_age, parse_date, resident_id_digits
from .models import (
    DocumentMatchResult,
    EmployeeMatch,
    EmploymentContract,
    MatchMethod,
    WageLedgerEmployee,
)

logger = structlog.get_logger()

# Hangul syllables, Hangul jamo, Hangul compatibility jamo, ASCII letters
_NAME_DISALLOWED = re.compile(r"[^\uAC00-\uD7AF\u1100-\u11FF\u3130-\u318Fa-zA-Z]")

RESIDENT_ID_MIN_DIGITS = 7


def normalize_name(name: Optional[str]) -> str:
    """Reduce a name to its Hangul and Latin letters.

    Every other character, whitespace included, is removed. Applying it
    twice gives the same result as applying it once.
    """
    if not name:
        return ""
    return _NAME_DISALLOWED.sub("", unicodedata.normalize("NFC", name))


def names_match(name1: Optional[str], name2: Optional[str]) -> bool:
    """Check whether two extracted names refer to the same person.

    Equal normalized names match. So do names where one contains the other
    and they differ by at most one character ("김철수" vs "김철수ㅣ" when OCR
    reads a table border as a letter).
    """
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)
    if not n1 or not n2:
        return False
    if n1 == n2:
        return True
    if abs(len(n1) - len(n2)) > 1:
        return False
    return n1 in n2 or n2 in n1


def name_similarity(name1: Optional[str], name2: Optional[str]) -> float:
    """Similarity of two normalized names between 0.0 and 1.0."""
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)
    if not n1 or not n2:
        return 0.0
    if n1 == n2:
        return 1.0
    return SequenceMatcher(None, n1, n2).ratio()


def normalize_resident_id(resident_id: Optional[str]) -> str:
    return resident_id_digits(resident_id)


def resident_ids_match(id1: Optional[str], id2: Optional[str]) -> bool:
    """Compare two possibly-masked resident IDs on their common prefix.

    Both sides need at least the birth date and the century digit.
    """
    d1 = normalize_resident_id(id1)
    d2 = normalize_resident_id(id2)
    if len(d1) < RESIDENT_ID_MIN_DIGITS or len(d2) < RESIDENT_ID_MIN_DIGITS:
        return False
    length = min(len(d1), len(d2))
    return d1[:length] == d2[:length]


def _disambiguate(
    employee: WageLedgerEmployee,
    candidates: Sequence[tuple[int, EmploymentContract]],
) -> tuple[tuple[int, EmploymentContract], MatchMethod]:
    """Pick one contract among several sharing the employee's name."""
    if employee.resident_id or any(c.resident_id for _, c in candidates):
        by_id = [
            (i, c) for i, c in candidates
            if resident_ids_match(employee.resident_id, c.resident_id)
        ]
        if by_id:
            return by_id[0], MatchMethod.RESIDENT_ID

    hire_date = parse_date(employee.hire_date)
    if hire_date is not None:
        dated: list[tuple[int, int, tuple[int, EmploymentContract]]] = []
        for order, (i, contract) in enumerate(candidates):
            start = parse_date(contract.contract_start_date)
            if start is not None:
                dated.append((abs((start - hire_date).days), order, (i, contract)))
        if dated:
            return min(dated, key=lambda item: (item[0], item[1]))[2], MatchMethod.DATE_PROXIMITY

    return candidates[0], MatchMethod.INPUT_ORDER


def _employee_age(
    employee: WageLedgerEmployee,
    contract: Optional[EmploymentContract],
    today: date,
) -> Optional[int]:
    if employee.calculated_age is not None:
        return employee.calculated_age
    age = calculate_age(employee.resident_id, today)
    if age is not None or contract is None:
        return age
    if contract.calculated_age is not None:
        return contract.calculated_age
    return calculate_age(contract.resident_id, today)


def match_employee_across_documents(
    employee: WageLedgerEmployee,
    contracts: Sequence[EmploymentContract],
    today: date,
    used: Optional[Iterable[int]] = None,
) -> EmployeeMatch:
    """Find the employment contract belonging to one wage-ledger employee.

    Args:
        employee: Wage ledger row to match.
        contracts: All contracts in the bundle, in input order.
        today: Reference date for age derivation.
        used: Indexes of contracts already assigned to another employee.

    Returns:
        EmployeeMatch with the chosen contract (if any) and how it was chosen.
    """
    used_indexes = set(used or ())
    available = [(i, c) for i, c in enumerate(contracts) if i not in used_indexes]
    key = normalize_name(employee.name)

    candidates = [(i, c) for i, c in available if key and normalize_name(c.employee_name) == key]
    method = MatchMethod.EXACT
    if not candidates:
        candidates = [(i, c) for i, c in available if names_match(employee.name, c.employee_name)]
        method = MatchMethod.FUZZY

    if not candidates:
        return EmployeeMatch(
            employee=employee,
            method=MatchMethod.NONE,
            age=_employee_age(employee, None, today),
        )

    if len(candidates) > 1:
        (index, contract), method = _disambiguate(employee, candidates)
    else:
        index, contract = candidates[0]

    return EmployeeMatch(
        employee=employee,
        contract=contract,
        contract_index=index,
        method=method,
        candidate_count=len(candidates),
        age=_employee_age(employee, contract, today),
    )


def match_contracts_to_wage_ledger(
    employees: Sequence[WageLedgerEmployee],
    contracts: Sequence[EmploymentContract],
    clock: Clock,
) -> DocumentMatchResult:
    """Match every wage-ledger employee to at most one contract.

    A contract is consumed by the first employee it is matched to, so
    two people with the same name never share one contract.
    """
    today = clock.today()
    used: set[int] = set()
    result = DocumentMatchResult()

    for employee in employees:
        match = match_employee_across_documents(employee, contracts, today, used)
        if match.matched:
            used.add(match.contract_index)
            result.matched.append(match)
        else:
            result.unmatched.append(match)

    result.contract_only = [c for i, c in enumerate(contracts) if i not in used]

    logger.info(
        "document_matching_completed",
        total=result.total,
        matched=result.matched_count,
        unmatched=result.unmatched_count,
        contract_only=len(result.contract_only),
        match_rate=result.match_rate,
    )
    return result


def closest_contract_name(
    employee: WageLedgerEmployee,
    contracts: Sequence[EmploymentContract],
) -> Optional[tuple[str, float]]:
    """Best-scoring contract name for an unmatched employee, for review hints."""
    best: Optional[tuple[str, float]] = None
    for contract in contracts:
        score = name_similarity(employee.name, contract.employee_name)
        if best is None or score > best[1]:
            best = (contract.employee_name, score)
    return best


__all__ = [
    "normalize_name",
    "names_match",
    "name_similarity",
    "normalize_resident_id",
    "resident_ids_match",
    "match_employee_across_documents",
    "match_contracts_to_wage_ledger",
    "closest_contract_name",
]
