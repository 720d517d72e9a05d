"""
Field Matchers
==============

Each matcher scans a ``RecognizedDocument`` for one field grammar and
returns ``Candidate`` fields carrying their own line provenance. Matchers
read the candidates accepted before them through ``MatchContext`` and never
modify anything; the pipeline pools their output.
"""

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace

from ..core.config import MaskingConfig
from ..core.models import BoundingBox, Candidate, DocumentType, FieldKind, Line, RecognizedDocument
from ..diagnostics import DiagnosticsLog
from .locator import VisibleSpan
from .patterns import (
    AUTHORITY_PATTERN,
    DATE_PATTERN,
    DRIVER_LICENSE_PATTERN,
    IDENTIFIER_CODE_LENGTH,
    IDENTIFIER_CODE_PATTERN,
    NATIONAL_ID_PATTERN,
    NATIONAL_ID_TAIL_DIGITS,
    PASSPORT_LENGTH,
    PASSPORT_PATTERN,
    SEX_CENTURY_DIGITS,
    TOKEN_PATTERN,
    digit_count,
    is_period_line,
    mentions_region,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchContext:
    """What a matcher may know about the run so far."""

    config: MaskingConfig
    diagnostics: DiagnosticsLog = field(default_factory=DiagnosticsLog)
    accepted: tuple[Candidate, ...] = ()
    document_type: DocumentType = DocumentType.UNKNOWN

    def with_candidates(self, candidates: list[Candidate]) -> "MatchContext":
        return replace(self, accepted=self.accepted + tuple(candidates))

    def with_document_type(self, document_type: DocumentType) -> "MatchContext":
        return replace(self, document_type=document_type)

    def of_kind(self, kind: FieldKind) -> list[Candidate]:
        return [candidate for candidate in self.accepted if candidate.label == kind]


Matcher = Callable[[RecognizedDocument, MatchContext], list[Candidate]]


# ---------- National ID number ----------


@dataclass(frozen=True)
class NationalIdParse:
    """One grammar match with its digit bookkeeping."""

    match: re.Match
    tail_digit_positions: tuple[int, ...]
    skipped: str | None = None
    rejection: str | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @property
    def _skip(self) -> int:
        return 0 if self.skipped is None else 1

    @property
    def gender_position(self) -> int:
        return self.tail_digit_positions[self._skip]

    @property
    def back_positions(self) -> tuple[int, ...]:
        start = self._skip + 1
        return self.tail_digit_positions[start : start + NATIONAL_ID_TAIL_DIGITS - 1]


def parse_national_ids(text: str, min_digits: int = 13) -> Iterator[NationalIdParse]:
    """
    Yield every ID-number-shaped match in ``text``, accepted or not.

    A tail of exactly 8 digits is read as a separator misrecognized as a
    digit followed by the real 7-digit tail; the first tail digit is skipped.
    This is a heuristic tuned to observed OCR output, not part of the number
    format.
    """
    for match in NATIONAL_ID_PATTERN.finditer(text):
        tail_start = match.start("tail")
        positions = tuple(
            tail_start + offset
            for offset, ch in enumerate(match.group("tail"))
            if ch.isdecimal()
        )
        total = len(match.group("birth")) + len(positions)
        if total < min_digits:
            yield NationalIdParse(match, positions, rejection=f"only {total} digits")
            continue

        skipped = text[positions[0]] if len(positions) == NATIONAL_ID_TAIL_DIGITS + 1 else None
        parse = NationalIdParse(match, positions, skipped=skipped)
        gender = text[parse.gender_position]
        if gender not in SEX_CENTURY_DIGITS:
            yield replace(parse, rejection=f"sex/century digit '{gender}' out of range")
            continue
        yield parse


def find_national_id(text: str, min_digits: int = 13) -> NationalIdParse | None:
    return next((p for p in parse_national_ids(text, min_digits) if p.accepted), None)


def match_national_id(document: RecognizedDocument, context: MatchContext) -> list[Candidate]:
    """ID number plus its birth-date, sex/century digit and back-digit sub-fields."""
    config = context.config
    diagnostics = context.diagnostics
    candidates: list[Candidate] = []

    for index, line in enumerate(document.lines):
        for parse in parse_national_ids(line.text, config.national_id_min_digits):
            value = parse.match.group(0)
            if not parse.accepted:
                diagnostics.add(
                    f"Potential national ID on line {index} rejected ({parse.rejection}): {value}"
                )
                continue

            if parse.skipped is not None:
                diagnostics.add(
                    f"National ID tail on line {index} has 8 digits; "
                    f"assuming leading '{parse.skipped}' is a misread separator"
                )

            span = VisibleSpan.for_line(line, config.vertical_padding_ratio)
            text = line.text
            back = parse.back_positions
            candidates.extend(
                [
                    Candidate(
                        label=FieldKind.NATIONAL_ID_NUMBER,
                        value=value,
                        bbox=line.bbox,
                        source_line_index=index,
                    ),
                    Candidate(
                        label=FieldKind.BIRTH_DATE,
                        value=parse.match.group("birth"),
                        bbox=span.locate_group(parse.match, "birth"),
                        source_line_index=index,
                    ),
                    Candidate(
                        label=FieldKind.GENDER,
                        value=text[parse.gender_position],
                        bbox=span.locate(parse.gender_position, 1),
                        source_line_index=index,
                    ),
                    Candidate(
                        label=FieldKind.NATIONAL_ID_BACK_DIGITS,
                        value="".join(text[p] for p in back),
                        bbox=span.locate_indices(back),
                        source_line_index=index,
                    ),
                ]
            )
            diagnostics.add(f"Found national ID on line {index}: {value}")
            break

    return candidates


# ---------- Driver license number ----------


def parse_license_numbers(text: str, min_digits: int = 10) -> Iterator[tuple[re.Match, int]]:
    """Yield every license-shaped match with its digit count.

    A match too short to accept may hold the leading group of a real number,
    so scanning resumes one character after its start rather than at its end.
    """
    pos = 0
    while (match := DRIVER_LICENSE_PATTERN.search(text, pos)) is not None:
        digits = digit_count(match.group(0))
        yield match, digits
        pos = match.end() if digits >= min_digits else match.start() + 1


def find_license_number(text: str, min_digits: int = 10) -> re.Match | None:
    return next(
        (m for m, digits in parse_license_numbers(text, min_digits) if digits >= min_digits), None
    )


def match_license_number(document: RecognizedDocument, context: MatchContext) -> list[Candidate]:
    min_digits = context.config.license_min_digits
    diagnostics = context.diagnostics
    candidates = []

    for index, line in enumerate(document.lines):
        for match, digits in parse_license_numbers(line.text, min_digits):
            if digits < min_digits:
                diagnostics.add(f"Potential license number on line {index} too short: {digits}")
                continue
            candidates.append(
                Candidate(
                    label=FieldKind.DRIVER_LICENSE_NUMBER,
                    value=match.group(0),
                    bbox=line.bbox,
                    source_line_index=index,
                )
            )
            diagnostics.add(f"Found license number on line {index}: {match.group(0)}")
            break

    return candidates


# ---------- Word-level tokens ----------


def _line_tokens(line: Line, vertical_padding: float) -> Iterator[tuple[str, BoundingBox]]:
    """Words with their own boxes, or whitespace tokens located within the line."""
    if line.words:
        for word in line.words:
            yield word.text.strip(), word.bbox
        return

    span = VisibleSpan.for_line(line, vertical_padding)
    for match in TOKEN_PATTERN.finditer(line.text):
        yield match.group(0), span.locate_group(match)


def match_passport_number(document: RecognizedDocument, context: MatchContext) -> list[Candidate]:
    candidates = []
    for index, line in enumerate(document.lines):
        for token, bbox in _line_tokens(line, context.config.vertical_padding_ratio):
            if len(token) == PASSPORT_LENGTH and PASSPORT_PATTERN.fullmatch(token):
                candidates.append(
                    Candidate(
                        label=FieldKind.PASSPORT_NUMBER,
                        value=token,
                        bbox=bbox,
                        source_line_index=index,
                    )
                )
                context.diagnostics.add(f"Found passport number on line {index}: {token}")
    return candidates


def match_identifier_code(document: RecognizedDocument, context: MatchContext) -> list[Candidate]:
    """Six-character codes mixing capital letters and digits."""
    candidates = []
    for index, line in enumerate(document.lines):
        for token, bbox in _line_tokens(line, context.config.vertical_padding_ratio):
            if len(token) != IDENTIFIER_CODE_LENGTH or not IDENTIFIER_CODE_PATTERN.fullmatch(token):
                continue
            if any(ch.isalpha() for ch in token) and any(ch.isdigit() for ch in token):
                candidates.append(
                    Candidate(
                        label=FieldKind.IDENTIFIER_CODE,
                        value=token,
                        bbox=bbox,
                        source_line_index=index,
                    )
                )
                context.diagnostics.add(f"Found identifier code on line {index}: {token}")
    return candidates


# ---------- Address ----------


def _is_identifier_line(text: str, config: MaskingConfig) -> bool:
    return (
        find_national_id(text, config.national_id_min_digits) is not None
        or find_license_number(text, config.license_min_digits) is not None
    )


def _shares_row(bbox: BoundingBox, candidates: list[Candidate], tolerance: int) -> bool:
    return any(abs(candidate.bbox.y0 - bbox.y0) < tolerance for candidate in candidates)


def match_address(document: RecognizedDocument, context: MatchContext) -> list[Candidate]:
    """
    First gazetteer-anchored address block in the document.

    Following lines are absorbed while they sit close below the previous
    absorbed line and are neither ID/license numbers nor dates. At most one
    address is reported per document.
    """
    config = context.config
    diagnostics = context.diagnostics
    licenses = context.of_kind(FieldKind.DRIVER_LICENSE_NUMBER)
    lines = document.lines

    for index, anchor in enumerate(lines):
        if not mentions_region(anchor.text):
            continue

        block = [anchor]
        for follower in lines[index + 1 : index + 1 + config.address_max_follow_lines]:
            previous = block[-1]
            gap = follower.bbox.y0 - previous.bbox.y1
            if gap > config.address_gap_factor * previous.bbox.height:
                break
            if DATE_PATTERN.search(follower.text) or _is_identifier_line(follower.text, config):
                break
            block.append(follower)

        if _shares_row(anchor.bbox, licenses, config.colocation_tolerance_px):
            diagnostics.add(
                f"Skipped potential address at line {index}: same row as a license number"
            )
            continue

        diagnostics.add(f"Found address starting at line {index} ({len(block)} lines)")
        return [
            Candidate(
                label=FieldKind.ADDRESS,
                value=" ".join(line.text.strip() for line in block),
                bbox=BoundingBox.union(line.bbox for line in block),
                source_line_index=index,
            )
        ]

    return []


# ---------- Driver-license-only fields ----------


def match_validity_period(document: RecognizedDocument, context: MatchContext) -> list[Candidate]:
    candidates = []
    for index, line in enumerate(document.lines):
        if is_period_line(line.text) and DATE_PATTERN.search(line.text):
            candidates.append(
                Candidate(
                    label=FieldKind.VALIDITY_PERIOD,
                    value=line.text.strip(),
                    bbox=line.bbox,
                    source_line_index=index,
                )
            )
            context.diagnostics.add(f"Found validity period at line {index}")
    return candidates


def match_issue_date(document: RecognizedDocument, context: MatchContext) -> list[Candidate]:
    """
    Lowest unclaimed date line, split from the issuing authority if they share it.
    """
    config = context.config
    diagnostics = context.diagnostics
    period_lines = {c.source_line_index for c in context.of_kind(FieldKind.VALIDITY_PERIOD)}
    id_numbers = context.of_kind(FieldKind.NATIONAL_ID_NUMBER)

    for index in range(len(document.lines) - 1, -1, -1):
        line = document.lines[index]
        date = DATE_PATTERN.search(line.text)
        if date is None:
            continue
        if index in period_lines or is_period_line(line.text):
            continue
        if _shares_row(line.bbox, id_numbers, config.colocation_tolerance_px):
            continue

        authority = AUTHORITY_PATTERN.search(line.text)
        if authority is None:
            diagnostics.add(f"Found issue date at line {index}")
            return [
                Candidate(
                    label=FieldKind.ISSUE_DATE,
                    value=date.group(0),
                    bbox=line.bbox,
                    source_line_index=index,
                )
            ]

        span = VisibleSpan.for_line(line, config.vertical_padding_ratio)
        diagnostics.add(f"Found issue date and authority at line {index} (split)")
        return [
            Candidate(
                label=FieldKind.ISSUE_DATE,
                value=date.group(0),
                bbox=span.locate_group(date),
                source_line_index=index,
            ),
            Candidate(
                label=FieldKind.ISSUING_AUTHORITY,
                value=authority.group(0),
                bbox=span.locate_group(authority),
                source_line_index=index,
            ),
        ]

    diagnostics.add("No issue date found")
    return []


DOCUMENT_INDEPENDENT_MATCHERS: tuple[Matcher, ...] = (
    match_national_id,
    match_license_number,
    match_passport_number,
    match_address,
)

DRIVER_LICENSE_MATCHERS: tuple[Matcher, ...] = (
    match_validity_period,
    match_issue_date,
    match_identifier_code,
)
