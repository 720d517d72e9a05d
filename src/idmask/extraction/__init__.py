"""Field extraction: grammars, matchers, classification and region synthesis."""

from .classifier import classify
from .locator import VisibleSpan, interpolate
from .matchers import (
    DOCUMENT_INDEPENDENT_MATCHERS,
    DRIVER_LICENSE_MATCHERS,
    MatchContext,
    match_address,
    match_identifier_code,
    match_issue_date,
    match_license_number,
    match_national_id,
    match_passport_number,
    match_validity_period,
)
from .synthesizer import synthesize

__all__ = [
    "DOCUMENT_INDEPENDENT_MATCHERS",
    "DRIVER_LICENSE_MATCHERS",
    "MatchContext",
    "VisibleSpan",
    "classify",
    "interpolate",
    "match_address",
    "match_identifier_code",
    "match_issue_date",
    "match_license_number",
    "match_national_id",
    "match_passport_number",
    "match_validity_period",
    "synthesize",
]
