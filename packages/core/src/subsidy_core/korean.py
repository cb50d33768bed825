"""Korean resident ID, region and date helpers.

Resident registration numbers (주민등록번호) have the form YYMMDD-GNNNNNN.
The first digit after the hyphen (G) encodes the century and sex. Extracted
numbers are often masked ("940215-1******"); only the first seven digits
are needed here.
"""

import calendar
import re
import unicodedata
from datetime import date
from typing import NamedTuple, Optional

from .models import RegionType


# =============================================================================
# RESIDENT ID
# =============================================================================

_CENTURY_BY_DIGIT = {
    "1": 1900, "2": 1900, "5": 1900, "6": 1900,
    "3": 2000, "4": 2000, "7": 2000, "8": 2000,
    "9": 1800, "0": 1800,
}


class BirthInfo(NamedTuple):
    year: int
    month: int
    day: int

    def as_date(self) -> date:
        return date(self.year, self.month, self.day)


def resident_id_digits(resident_id: Optional[str]) -> str:
    """Digits of a resident ID with separators and mask characters dropped."""
    if not resident_id:
        return ""
    return re.sub(r"\D", "", resident_id)


def parse_resident_id(resident_id: Optional[str]) -> Optional[BirthInfo]:
    """Extract the birth date from a full or masked resident ID.

    Returns None when fewer than seven digits are readable, the century
    digit is unknown, or the date part is not a real calendar date.
    """
    digits = resident_id_digits(resident_id)
    if len(digits) < 7:
        return None

    century = _CENTURY_BY_DIGIT.get(digits[6])
    if century is None:
        return None

    year = century + int(digits[0:2])
    month = int(digits[2:4])
    day = int(digits[4:6])
    try:
        date(year, month, day)
    except ValueError:
        return None
    return BirthInfo(year, month, day)


def calculate_age(resident_id: Optional[str], today: date) -> Optional[int]:
    """Age in calendar years (current year minus birth year)."""
    birth = parse_resident_id(resident_id)
    if birth is None:
        return None
    return today.year - birth.year


def turns_60_date(resident_id: Optional[str]) -> Optional[date]:
    """Date of the 60th birthday, Feb 29 births falling on Feb 28."""
    birth = parse_resident_id(resident_id)
    if birth is None:
        return None
    year = birth.year + 60
    day = min(birth.day, calendar.monthrange(year, birth.month)[1])
    return date(year, birth.month, day)


def mask_resident_id(resident_id: Optional[str]) -> Optional[str]:
    """Keep the birth date and century digit, mask the rest."""
    digits = resident_id_digits(resident_id)
    if len(digits) < 7:
        return None
    return f"{digits[:6]}-{digits[6]}******"


# =============================================================================
# REGION
# =============================================================================

CAPITAL_REGION_KEYWORDS = ("서울", "인천", "경기")

# Counties inside Incheon/Gyeonggi that are treated as non-capital
CAPITAL_EXCEPTION_AREAS = ("강화군", "옹진군", "가평군", "연천군")


def detect_region_type(
    address: Optional[str],
    default: RegionType = RegionType.CAPITAL,
) -> RegionType:
    """Classify a business address as capital or non-capital area.

    Whitespace is ignored so "서 울 특별시" still matches. An empty or
    missing address returns the default.
    """
    if not address:
        return default
    compact = re.sub(r"\s+", "", unicodedata.normalize("NFC", address))
    if not compact:
        return default
    if any(area in compact for area in CAPITAL_EXCEPTION_AREAS):
        return RegionType.NON_CAPITAL
    if any(keyword in compact for keyword in CAPITAL_REGION_KEYWORDS):
        return RegionType.CAPITAL
    return RegionType.NON_CAPITAL


# =============================================================================
# DATES
# =============================================================================

_DATE_PATTERNS = (
    re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})"),
    re.compile(r"^(\d{4})\.\s*(\d{1,2})\.\s*(\d{1,2})\.?$"),
    re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$"),
    re.compile(r"^(\d{4})년\s*(\d{1,2})월\s*(\d{1,2})일$"),
    re.compile(r"^(\d{4})(\d{2})(\d{2})$"),
)


def parse_date(text: Optional[str]) -> Optional[date]:
    """Parse the date notations found in Korean payroll paperwork.

    Accepts 2024-03-15 (with an optional time suffix), 2024.3.15,
    2024/03/15, 2024년 3월 15일 and 20240315. Returns None otherwise.
    """
    if not text:
        return None
    value = text.strip()
    for pattern in _DATE_PATTERNS:
        match = pattern.match(value)
        if match:
            year, month, day = (int(part) for part in match.groups())
            try:
                return date(year, month, day)
            except ValueError:
                return None
    return None


def months_between(start: date, end: date) -> int:
    """Whole months elapsed from start to end, never negative."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month."""
    index = value.month - 1 + months
    year = value.year + index // 12
    month = index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def format_korean_date(value: date) -> str:
    return f"{value.year}년 {value.month}월 {value.day}일"


__all__ = [
    "BirthInfo",
    "resident_id_digits",
    "parse_resident_id",
    "calculate_age",
    "turns_60_date",
    "mask_resident_id",
    "CAPITAL_REGION_KEYWORDS",
    "CAPITAL_EXCEPTION_AREAS",
    "detect_region_type",
    "parse_date",
    "months_between",
    "add_months",
    "format_korean_date",
]
