"""Field grammars, keyword tables and the address gazetteer."""

import re

# 6 birth digits, a short non-digit separator, then the sex/century digit and
# the back digits with OCR-inserted spaces or hyphens. The tail admits 5-8
# digits so near-misses surface for logging and the misread-separator case
# (8 digits) can be corrected.
NATIONAL_ID_PATTERN = re.compile(
    r"(?<!\d)(?P<birth>\d{6})(?P<sep>[^\d\n]{1,3})(?P<tail>[1-8](?:[\s-]*\d){4,7})(?!\d)"
)
SEX_CENTURY_DIGITS = frozenset("12345678")
NATIONAL_ID_TAIL_DIGITS = 7

# 2-6-2 digit groups; shorter groups are matched so short reads can be logged
DRIVER_LICENSE_PATTERN = re.compile(r"(?<!\d)\d{1,2}[^\d\n]+\d{4,6}[^\d\n]+\d{1,2}(?!\d)")

PASSPORT_LENGTH = 9
PASSPORT_PATTERN = re.compile(r"[A-Z][0-9A-Z]{8}")

IDENTIFIER_CODE_LENGTH = 6
IDENTIFIER_CODE_PATTERN = re.compile(r"[A-Z0-9]{6}")

DATE_PATTERN = re.compile(r"\d{4}\s*[.\-]\s*\d{2}\s*[.\-]\s*\d{2}")
PERIOD_RANGE_PATTERN = re.compile(DATE_PATTERN.pattern + r"\s*~\s*" + DATE_PATTERN.pattern)
PERIOD_TAIL_PATTERN = re.compile(r"~\s*\d{4}[.\-]\d{2}[.\-]\d{2}")
PERIOD_KEYWORD_PATTERN = re.compile(r"적성|검사|기간")

AUTHORITY_PATTERN = re.compile(r"[가-힣]+(?:지방)?경찰청장")

TOKEN_PATTERN = re.compile(r"\S+")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Abbreviated and full province names; OCR often drops the suffix
REGION_GAZETTEER = (
    "서울",
    "부산",
    "대구",
    "인천",
    "광주",
    "대전",
    "울산",
    "세종",
    "경기",
    "강원",
    "충청",
    "충북",
    "충남",
    "전라",
    "전북",
    "전남",
    "경상",
    "경북",
    "경남",
    "제주",
    "경기도",
    "강원도",
    "충청북도",
    "충청남도",
    "전라북도",
    "전라남도",
    "경상북도",
    "경상남도",
    "제주도",
)

DRIVER_LICENSE_KEYWORDS = ("운전", "driver")
RESIDENT_CARD_KEYWORDS = ("주민", "등록증")
PASSPORT_KEYWORDS = ("여권", "passport")


def digit_count(text: str) -> int:
    return sum(ch.isdecimal() for ch in text)


def mentions_region(text: str) -> bool:
    """Gazetteer hit in the raw or whitespace-stripped text."""
    stripped = WHITESPACE_PATTERN.sub("", text)
    return any(region in text or region in stripped for region in REGION_GAZETTEER)


def is_period_line(text: str) -> bool:
    return bool(
        PERIOD_RANGE_PATTERN.search(text)
        or PERIOD_TAIL_PATTERN.search(text)
        or PERIOD_KEYWORD_PATTERN.search(text)
    )
