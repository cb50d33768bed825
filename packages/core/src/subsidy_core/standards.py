"""Korean employment subsidy rates, thresholds and program metadata.

Figures follow the Ministry of Employment and Labor (고용노동부) 2026
guidelines for each program.

Sources:
- 청년일자리도약장려금 / 고용촉진장려금 / 정규직전환지원금 사업 시행지침
- 고령자 계속고용장려금 / 고령자 고용지원금 운영규정
- 출산육아기 고용안정장려금 / 고용유지지원금 업무처리요령
- 최저임금위원회 2026년 최저임금 고시

Every table is read-only and shared by all analyses in the process.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_FLOOR, Decimal
from types import MappingProxyType
from typing import Mapping

from .models import (
    DocumentType,
    ExclusionRule,
    NonCapitalAreaType,
    Program,
    RegionType,
    Severity,
    YouthType,
)


# =============================================================================
# VERSION TRACKING
# =============================================================================

SUBSIDY_STANDARDS_VERSION = "2026"
EFFECTIVE_DATE = "2026-01-01"


def get_standards_version() -> str:
    """Return the policy year the rates below apply to."""
    return SUBSIDY_STANDARDS_VERSION


# =============================================================================
# PROGRAM NAMES
# =============================================================================

PROGRAM_NAMES: Mapping[Program, str] = MappingProxyType({
    Program.YOUTH_JOB_LEAP: "청년일자리도약장려금",
    Program.EMPLOYMENT_PROMOTION: "고용촉진장려금",
    Program.REGULAR_CONVERSION: "정규직전환지원금",
    Program.SENIOR_CONTINUED_EMPLOYMENT: "고령자계속고용장려금",
    Program.SENIOR_EMPLOYMENT_SUPPORT: "고령자고용지원금",
    Program.PARENTAL_EMPLOYMENT_STABILITY: "출산육아기 고용안정장려금",
    Program.EMPLOYMENT_RETENTION: "고용유지지원금",
})

# Programs whose amount or gates depend on capital vs non-capital location
REGION_SENSITIVE_PROGRAMS = frozenset({
    Program.YOUTH_JOB_LEAP,
    Program.SENIOR_CONTINUED_EMPLOYMENT,
})


def get_program_name(program: Program) -> str:
    return PROGRAM_NAMES[program]


def is_region_sensitive(program: Program) -> bool:
    return program in REGION_SENSITIVE_PROGRAMS


# =============================================================================
# YOUTH JOB LEAP (청년일자리도약장려금)
# =============================================================================

YOUTH_MONTHLY_RATE = Decimal("600000")
YOUTH_SUPPORT_MONTHS = 12

# Paid to the young employee directly, non-capital region only
YOUTH_INCENTIVES: Mapping[YouthType, Decimal] = MappingProxyType({
    YouthType.GENERAL: Decimal("4800000"),
    YouthType.EMPLOYMENT_DIFFICULTY: Decimal("7200000"),
})

# Population-decline areas: 44 preferred, 40 special
NON_CAPITAL_AREA_INCENTIVES: Mapping[NonCapitalAreaType, Decimal] = MappingProxyType({
    NonCapitalAreaType.GENERAL: Decimal("4800000"),
    NonCapitalAreaType.PREFERRED: Decimal("6000000"),
    NonCapitalAreaType.SPECIAL: Decimal("7200000"),
})
NON_CAPITAL_AREA_LABELS: Mapping[NonCapitalAreaType, str] = MappingProxyType({
    NonCapitalAreaType.GENERAL: "일반 비수도권",
    NonCapitalAreaType.PREFERRED: "우대지역 (인구감소지역)",
    NonCapitalAreaType.SPECIAL: "특별지역 (인구감소지역)",
})
YOUTH_INCENTIVE_MILESTONES = (6, 12, 18, 24)
RETENTION_MILESTONE_MONTHS = 6


def get_youth_incentive(
    region: RegionType,
    youth_type: YouthType,
    area: NonCapitalAreaType = NonCapitalAreaType.GENERAL,
) -> Decimal:
    """Per-employee incentive for the region; zero in the capital area.

    The higher of the youth-type amount and the area-tier amount applies.
    """
    if region != RegionType.NON_CAPITAL:
        return Decimal("0")
    return max(YOUTH_INCENTIVES[youth_type], NON_CAPITAL_AREA_INCENTIVES[area])


# =============================================================================
# EMPLOYMENT PROMOTION (고용촉진장려금)
# =============================================================================

PROMOTION_MONTHLY_RATE = Decimal("600000")
PROMOTION_SUPPORT_MONTHS = 12
PROMOTION_WAGE_THRESHOLD = Decimal("1210000")
PROMOTION_WAGE_THRESHOLD_2026 = Decimal("1240000")
PROMOTION_THRESHOLD_CHANGE_DATE = date(2026, 1, 1)


def get_promotion_wage_threshold(hire_date: date | None) -> Decimal:
    """Minimum monthly wage; hires from 2026 use the raised threshold."""
    if hire_date is not None and hire_date >= PROMOTION_THRESHOLD_CHANGE_DATE:
        return PROMOTION_WAGE_THRESHOLD_2026
    return PROMOTION_WAGE_THRESHOLD


# =============================================================================
# REGULAR CONVERSION (정규직전환지원금)
# =============================================================================

CONVERSION_MONTHLY_RATE = Decimal("400000")
CONVERSION_SUPPORT_MONTHS = 12
CONVERSION_MIN_INSURED = 5
CONVERSION_MAX_INSURED = 29
CONVERSION_SMALL_COMPANY_MAX = 9
CONVERSION_SMALL_COMPANY_LIMIT = 3
CONVERSION_LIMIT_RATIO = Decimal("0.3")
CONVERSION_MIN_WAGE = Decimal("1240000")
CONVERSION_MIN_SERVICE_MONTHS = 6


def get_conversion_support_limit(insured_count: int) -> int:
    """Number of conversions the company may claim for."""
    if CONVERSION_MIN_INSURED <= insured_count <= CONVERSION_SMALL_COMPANY_MAX:
        return CONVERSION_SMALL_COMPANY_LIMIT
    return int(insured_count * CONVERSION_LIMIT_RATIO)


# =============================================================================
# SENIOR PROGRAMS (고령자계속고용장려금 / 고령자고용지원금)
# =============================================================================

SENIOR_CONTINUED_QUARTERLY_RATES: Mapping[RegionType, Decimal] = MappingProxyType({
    RegionType.CAPITAL: Decimal("900000"),
    RegionType.NON_CAPITAL: Decimal("1200000"),
})
SENIOR_CONTINUED_QUARTERS = 12
SENIOR_CONTINUED_MIN_WAGE = Decimal("1240000")

SENIOR_SUPPORT_QUARTERLY_RATE = Decimal("300000")
SENIOR_SUPPORT_QUARTERS = 8

MONTHS_PER_QUARTER = 3


def get_senior_continued_quarterly_rate(region: RegionType) -> Decimal:
    return SENIOR_CONTINUED_QUARTERLY_RATES[region]


# =============================================================================
# PARENTAL EMPLOYMENT STABILITY (출산육아기 고용안정장려금)
# =============================================================================

PARENTAL_SPECIAL_MONTHLY_RATE = Decimal("1000000")
PARENTAL_SPECIAL_MONTHS = 3
PARENTAL_BASE_MONTHLY_RATE = Decimal("300000")
PARENTAL_LEAVE_MONTHS = 12
PARENTAL_SPECIAL_CHILD_AGE_MONTHS = 12
PARENTAL_SPECIAL_MIN_CONSECUTIVE_MONTHS = 3

MATERNITY_MONTHLY_RATE = Decimal("800000")
MATERNITY_MONTHS = 3
REDUCED_HOURS_MONTHLY_RATE = Decimal("300000")
REDUCED_HOURS_MONTHS = 24

PARENTAL_ADDITIONAL_SUPPORT = (
    "대체인력지원금: 30인 미만 월 최대 140만원, 30인 이상 월 최대 130만원",
    "업무분담지원금: 30인 미만 월 최대 60만원, 30인 이상 월 최대 40만원",
    "남성육아휴직인센티브: 월 10만원 추가 (사업장별 3번째 이후 남성 육아휴직자)",
)


# =============================================================================
# MINIMUM WAGE (최저임금)
# =============================================================================

MINIMUM_HOURLY_WAGE = Decimal("10320")
MINIMUM_MONTHLY_WAGE = Decimal("2156880")  # 209 hours
WEEKS_PER_MONTH = Decimal("4.345")
FULL_TIME_WEEKLY_HOURS = 35
PART_TIME_MIN_WEEKLY_HOURS = 15
DEFAULT_WEEKLY_HOURS = 40
PART_TIME_WAGE_TOLERANCE = Decimal("0.9")


def get_prorated_minimum_wage(weekly_hours: float) -> Decimal:
    """Monthly minimum for a part-time schedule, rounded down to the won."""
    amount = MINIMUM_HOURLY_WAGE * Decimal(str(weekly_hours)) * WEEKS_PER_MONTH
    return amount.to_integral_value(rounding=ROUND_FLOOR)


# =============================================================================
# CROSS-VALIDATION THRESHOLDS
# =============================================================================

SALARY_DIFF_HIGH_RATIO = Decimal("0.3")
SALARY_DIFF_MEDIUM_RATIO = Decimal("0.1")
WEEKLY_HOURS_DIFF_LIMIT = 5
DATE_DIFF_HIGH_DAYS = 90
DATE_DIFF_MEDIUM_DAYS = 30

SEVERITY_PENALTIES: Mapping[Severity, int] = MappingProxyType({
    Severity.HIGH: 15,
    Severity.MEDIUM: 8,
    Severity.LOW: 3,
})

# 고용보험 상실사유 codes that count as employer-initiated separation
INVOLUNTARY_TERMINATION_CODES: Mapping[str, str] = MappingProxyType({
    "23": "권고사직",
    "26": "해고",
    "31": "정리해고",
})


def get_termination_reason(code: str | None) -> str | None:
    """Label for an involuntary separation code, None for any other code."""
    if code is None:
        return None
    return INVOLUNTARY_TERMINATION_CODES.get(code.strip())


# =============================================================================
# DUPLICATE EXCLUSION
# =============================================================================

EXCLUSION_RULES: tuple[ExclusionRule, ...] = (
    ExclusionRule(
        winner=Program.YOUTH_JOB_LEAP,
        loser=Program.EMPLOYMENT_PROMOTION,
        reason="동일 근로자에 대해 청년일자리도약장려금과 고용촉진장려금은 중복 지원되지 않습니다",
    ),
    ExclusionRule(
        winner=Program.SENIOR_CONTINUED_EMPLOYMENT,
        loser=Program.SENIOR_EMPLOYMENT_SUPPORT,
        reason="동일 근로자에 대해 고령자계속고용장려금과 고령자고용지원금은 중복 지원되지 않습니다",
    ),
)


# =============================================================================
# APPLICATION METADATA
# =============================================================================

@dataclass(frozen=True)
class ProgramApplicationInfo:
    """Where, when and with what paperwork a program is applied for."""
    required_documents: tuple[str, ...]
    application_site: str
    application_period: str
    contact_info: str
    notes: tuple[str, ...] = ()


WORK24_ONLINE = "고용24 (www.work24.go.kr) 온라인 신청"
WORK24_OR_CENTER = "고용24 (www.work24.go.kr) 또는 사업장 관할 고용센터"

APPLICATION_INFO: Mapping[Program, ProgramApplicationInfo] = MappingProxyType({
    Program.YOUTH_JOB_LEAP: ProgramApplicationInfo(
        required_documents=(
            "사업 참여 신청서",
            "사업주 확인서",
            "매출액 증빙자료 (업력 1년 이상 시)",
            "5인 미만 특례 입증서류 (해당 시)",
            "개인정보 수집·이용 동의서 (청년용)",
            "근로계약서 사본",
            "최종학력 자기확인서 (수도권 취업애로청년)",
        ),
        application_site=WORK24_ONLINE,
        application_period="채용 후 6개월 고용유지 후 신청, 지급 요건 충족 후 2개월 이내",
        contact_info="고용노동부 고객상담센터 1350, 운영기관 문의",
        notes=(
            "기업 지원금: 청년 1인당 최대 720만원 (월 60만원 × 12개월)",
            "청년 인센티브: 비수도권 한정, 청년 본인에게 6/12/18/24개월 시점 분할 지급",
            "수도권은 취업애로청년 유형 중 하나를 충족해야 합니다",
            "채용일 3개월 전부터 채용 후 1년까지 고용조정(권고사직, 해고 등) 시 환수 대상입니다",
        ),
    ),
    Program.EMPLOYMENT_PROMOTION: ProgramApplicationInfo(
        required_documents=(
            "고용창출장려금(고용촉진장려금) 지급신청서",
            "사업주확인서",
            "취업취약계층 근로계약서 사본",
            "월별 임금대장 사본",
            "임금 지급 증명 서류 (계좌이체 내역 등)",
            "취업지원프로그램 이수증명서",
        ),
        application_site=WORK24_OR_CENTER,
        application_period="6개월 단위 신청 (1차: 채용 후 6개월, 2차: 추가 6개월 고용유지 시)",
        contact_info="고용노동부 고객상담센터 1350, 관할 고용센터 기업지원과",
        notes=(
            "취업취약계층: 장애인, 고령자, 경력단절여성, 장기실업자, 저소득층 등",
            "월평균 보수 121만원 미만 근로자 제외 (2026년 이후 채용자는 124만원)",
            "기간제 근로자, 일용직, 초단시간 근로자 제외",
        ),
    ),
    Program.REGULAR_CONVERSION: ProgramApplicationInfo(
        required_documents=(
            "정규직 전환 지원 사업 참여 신청서",
            "사업주확인서",
            "전환 대상 근로자 명부",
            "전환 전 근로계약서 사본 (기간제/파견/사내하도급)",
            "전환 후 정규직 근로계약서 사본",
            "월별 임금대장 사본",
            "고용보험 피보험자격 확인서",
        ),
        application_site=WORK24_OR_CENTER,
        application_period="사업 참여 승인 후 6개월 이내 전환 이행, 이행한 달의 다음달부터 12개월 이내 신청 (3개월 단위)",
        contact_info="고용노동부 고객상담센터 1350, 고용차별개선과 044-202-7578",
        notes=(
            "피보험자 수 30인 미만 기업",
            "6개월 이상 근무한 기간제·파견·사내하도급 근로자 대상",
            "지원한도: 피보험자 수의 30% (5인~10인 미만 사업장은 최대 3명)",
        ),
    ),
    Program.SENIOR_CONTINUED_EMPLOYMENT: ProgramApplicationInfo(
        required_documents=(
            "고령자 계속고용장려금 지급신청서",
            "취업규칙 또는 단체협약 (정년제도 변경 전·후 비교)",
            "재고용 시 근로계약서 사본 (1년 이상 계약)",
            "고용보험 피보험자격 확인서",
            "60세 이상 근로자 명부",
            "정년제도 변경 증빙 (이사회 의사록, 노사협의서 등)",
        ),
        application_site="고용24 (www.work24.go.kr) 또는 관할 지방고용노동청",
        application_period="분기 단위 신청, 계속고용일이 속한 분기 마지막날 다음날부터 1년 이내",
        contact_info="고용노동부 고객상담센터 1350, 고령사회인력정책과 044-202-7463",
        notes=(
            "정년 연장·폐지 또는 재고용 제도를 취업규칙에 도입해야 합니다",
            "최대 3년(12분기) 지원",
        ),
    ),
    Program.SENIOR_EMPLOYMENT_SUPPORT: ProgramApplicationInfo(
        required_documents=(
            "고령자 고용지원금 신청서",
            "60세 이상 근로자 명부 (피보험기간 1년 초과)",
            "월별 임금대장",
            "근로계약서 사본",
            "고용보험 피보험자격 확인서",
        ),
        application_site=WORK24_OR_CENTER,
        application_period="분기 단위 신청 (분기별 공고 확인, 공고일부터 1년 이내)",
        contact_info="고용노동부 고객상담센터 1350, 고령사회인력정책과 044-202-7463",
        notes=(
            "60세 이상 근로자 수가 직전 기간 대비 증가해야 합니다",
            "최대 2년(8분기) 지원",
        ),
    ),
    Program.PARENTAL_EMPLOYMENT_STABILITY: ProgramApplicationInfo(
        required_documents=(
            "출산육아기 고용안정장려금 지급신청서",
            "육아휴직/근로시간 단축 실시 증빙 (인사발령문)",
            "근로계약서 사본",
            "임금대장",
            "가족관계증명서 또는 주민등록등본 (자녀 확인용)",
            "대체인력 근로계약서 (대체인력지원금 신청 시)",
        ),
        application_site=WORK24_OR_CENTER,
        application_period="시작 후 3개월 단위로 50% 신청, 종료 후 6개월 계속고용 시 잔여 50% 신청",
        contact_info="고용노동부 고객상담센터 1350",
        notes=PARENTAL_ADDITIONAL_SUPPORT,
    ),
    Program.EMPLOYMENT_RETENTION: ProgramApplicationInfo(
        required_documents=(
            "고용유지조치계획서 (조치 시행 1일 전까지 신고)",
            "고용유지지원금 지급신청서",
            "휴업·휴직 수당 지급 증빙",
            "매출액·생산량 감소 등 고용조정 불가피성 증빙",
        ),
        application_site=WORK24_OR_CENTER,
        application_period="고용유지조치 실시 후 매월 단위 신청",
        contact_info="고용노동부 고객상담센터 1350, 관할 고용센터 기업지원과",
        notes=(
            "휴업·휴직 수당의 일정 비율을 지원하며 금액은 실제 수당 지급액에 따라 산정됩니다",
        ),
    ),
})


def get_application_info(program: Program) -> ProgramApplicationInfo:
    return APPLICATION_INFO[program]


# =============================================================================
# BASE DOCUMENT CHECKLIST
# =============================================================================

BASE_DOCUMENTS: tuple[tuple[str, str, DocumentType], ...] = (
    ("business_registration", "사업자등록증", DocumentType.BUSINESS_REGISTRATION),
    ("wage_ledger", "임금대장", DocumentType.WAGE_LEDGER),
    ("employment_contract", "근로계약서", DocumentType.EMPLOYMENT_CONTRACT),
    ("insurance_list", "4대보험 가입자명부", DocumentType.INSURANCE_LIST),
)
