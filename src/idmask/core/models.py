"""Pydantic models for type-safe data structures."""

import math
from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import (
    ConfidenceOutOfRangeError,
    InvertedBoundingBoxError,
    WordsMismatchError,
)


class BoundingBox(BaseModel):
    """Axis-aligned box in the pixel space of the image the OCR engine processed."""

    model_config = ConfigDict(frozen=True)

    x0: int = Field(..., description="Left coordinate")
    y0: int = Field(..., description="Top coordinate")
    x1: int = Field(..., description="Right coordinate")
    y1: int = Field(..., description="Bottom coordinate")

    @model_validator(mode="after")
    def check_orientation(self) -> "BoundingBox":
        if self.x1 < self.x0 or self.y1 < self.y0:
            raise InvertedBoundingBoxError()
        return self

    @classmethod
    def union(cls, boxes: Iterable["BoundingBox"]) -> "BoundingBox":
        """Smallest box containing every box in ``boxes``."""
        boxes = list(boxes)
        if not boxes:
            raise ValueError("cannot take the union of zero boxes")
        return cls(
            x0=min(b.x0 for b in boxes),
            y0=min(b.y0 for b in boxes),
            x1=max(b.x1 for b in boxes),
            y1=max(b.y1 for b in boxes),
        )

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center_y(self) -> float:
        return (self.y0 + self.y1) / 2

    def intersection_area(self, other: "BoundingBox") -> int:
        """Area shared by this box and ``other`` (0 when disjoint)."""
        width = min(self.x1, other.x1) - max(self.x0, other.x0)
        height = min(self.y1, other.y1) - max(self.y0, other.y0)
        if width <= 0 or height <= 0:
            return 0
        return width * height

    def overlap_ratio(self, other: "BoundingBox") -> float:
        """Fraction of this box's own area covered by ``other``."""
        if self.area == 0:
            return 0.0
        return self.intersection_area(other) / self.area

    def scale(self, scale_x: float, scale_y: float | None = None) -> "BoundingBox":
        """Scale per axis, rounding outward so scaled boxes never lose coverage."""
        if scale_y is None:
            scale_y = scale_x
        return BoundingBox(
            x0=math.floor(self.x0 * scale_x),
            y0=math.floor(self.y0 * scale_y),
            x1=math.ceil(self.x1 * scale_x),
            y1=math.ceil(self.y1 * scale_y),
        )


class Word(BaseModel):
    """Single recognized word with its box and engine confidence (0-100)."""

    model_config = ConfigDict(frozen=True)

    text: str
    bbox: BoundingBox
    confidence: float = 0.0

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not (0.0 <= v <= 100.0):
            raise ConfidenceOutOfRangeError(v)
        return v


class Line(BaseModel):
    """Recognized text line; ``text`` may differ from the space-join of ``words``."""

    model_config = ConfigDict(frozen=True)

    text: str
    bbox: BoundingBox
    words: tuple[Word, ...] = ()


def flatten_words(lines: Iterable[Line]) -> tuple[Word, ...]:
    return tuple(word for line in lines for word in line.words)


class RecognizedDocument(BaseModel):
    """Canonical line/word hierarchy recovered from raw OCR output."""

    model_config = ConfigDict(frozen=True)

    full_text: str = ""
    lines: tuple[Line, ...] = ()
    words: tuple[Word, ...] = ()
    source: str = Field("empty", description="Recovery strategy that produced the lines")
    synthetic: bool = Field(False, description="Geometry is fabricated from plain text")
    image_size: tuple[int, int] | None = Field(None, description="Engine image (width, height)")

    @model_validator(mode="after")
    def words_are_flattened_lines(self) -> "RecognizedDocument":
        if self.words != flatten_words(self.lines):
            raise WordsMismatchError()
        return self

    @classmethod
    def from_lines(
        cls, lines: Iterable[Line], full_text: str | None = None, **kwargs: Any
    ) -> "RecognizedDocument":
        """Build a document whose ``words`` are derived from ``lines``."""
        lines = tuple(lines)
        if full_text is None:
            full_text = "\n".join(line.text for line in lines)
        return cls(full_text=full_text, lines=lines, words=flatten_words(lines), **kwargs)

    @property
    def is_empty(self) -> bool:
        return not self.lines


class FieldKind(str, Enum):
    """Kinds of field a masking region can carry."""

    NATIONAL_ID_NUMBER = "national_id_number"
    BIRTH_DATE = "birth_date"
    GENDER = "gender"
    NATIONAL_ID_BACK_DIGITS = "national_id_back_digits"
    DRIVER_LICENSE_NUMBER = "driver_license_number"
    PASSPORT_NUMBER = "passport_number"
    ADDRESS = "address"
    VALIDITY_PERIOD = "validity_period"
    ISSUE_DATE = "issue_date"
    ISSUING_AUTHORITY = "issuing_authority"
    IDENTIFIER_CODE = "identifier_code"
    OTHER_TEXT = "other_text"
    MANUAL_SELECTION = "manual_selection"

    @property
    def label(self) -> str:
        """Display label shown to the user."""
        return _FIELD_LABELS[self]


_FIELD_LABELS = {
    FieldKind.NATIONAL_ID_NUMBER: "주민등록번호",
    FieldKind.BIRTH_DATE: "생년월일",
    FieldKind.GENDER: "성별",
    FieldKind.NATIONAL_ID_BACK_DIGITS: "주민번호 뒷자리",
    FieldKind.DRIVER_LICENSE_NUMBER: "운전면허번호",
    FieldKind.PASSPORT_NUMBER: "여권번호",
    FieldKind.ADDRESS: "주소",
    FieldKind.VALIDITY_PERIOD: "갱신기간",
    FieldKind.ISSUE_DATE: "발급일",
    FieldKind.ISSUING_AUTHORITY: "발급기관",
    FieldKind.IDENTIFIER_CODE: "식별번호",
    FieldKind.OTHER_TEXT: "텍스트",
    FieldKind.MANUAL_SELECTION: "수동 선택",
}

# Only whole-number fields are masked without user action
SENSITIVE_KINDS = frozenset(
    {
        FieldKind.NATIONAL_ID_NUMBER,
        FieldKind.DRIVER_LICENSE_NUMBER,
        FieldKind.PASSPORT_NUMBER,
    }
)


class DocumentType(str, Enum):
    """Identity document types the classifier can resolve."""

    DRIVER_LICENSE = "driver_license"
    RESIDENT_CARD = "resident_card"
    RESIDENT_CARD_INFERRED = "resident_card_inferred"
    PASSPORT = "passport"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return _DOCUMENT_LABELS[self]


_DOCUMENT_LABELS = {
    DocumentType.DRIVER_LICENSE: "운전면허증",
    DocumentType.RESIDENT_CARD: "주민등록증",
    DocumentType.RESIDENT_CARD_INFERRED: "주민등록증(추정)",
    DocumentType.PASSPORT: "여권",
    DocumentType.UNKNOWN: "Unknown",
}


class Candidate(BaseModel):
    """Provisional field detection produced by a matcher."""

    model_config = ConfigDict(frozen=True)

    label: FieldKind
    value: str
    bbox: BoundingBox
    source_line_index: int | None = None


class MaskingRegion(BaseModel):
    """Renderer-facing redaction rectangle."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    kind: FieldKind
    bbox: BoundingBox
    text: str = ""
    selected_by_default: bool = False


class MaskingResult(BaseModel):
    """Outbound envelope handed to the rendering collaborator."""

    model_config = ConfigDict(frozen=True)

    document_type: DocumentType
    regions: tuple[MaskingRegion, ...] = ()
    diagnostics: tuple[str, ...] = ()
    image_size: tuple[int, int] | None = None
    synthetic_geometry: bool = False

    def default_selection(self) -> set[str]:
        """Ids of the regions masked before any user action."""
        return {region.id for region in self.regions if region.selected_by_default}

    def get_region(self, region_id: str) -> MaskingRegion | None:
        for region in self.regions:
            if region.id == region_id:
                return region
        return None

    def regions_of_kind(self, kind: FieldKind) -> list[MaskingRegion]:
        return [region for region in self.regions if region.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = self.model_dump(mode="json")
        data["document_label"] = self.document_type.label
        for region, dumped in zip(self.regions, data["regions"], strict=True):
            dumped["label"] = region.kind.label
        return data
