"""Document type classification from keywords, then from detected fields."""

import logging
from collections.abc import Sequence

from ..core.models import Candidate, DocumentType, FieldKind, RecognizedDocument
from ..diagnostics import DiagnosticsLog
from .patterns import DRIVER_LICENSE_KEYWORDS, PASSPORT_KEYWORDS, RESIDENT_CARD_KEYWORDS

logger = logging.getLogger(__name__)

# Checked in order; the first rule with a keyword in the full text wins
KEYWORD_RULES: tuple[tuple[DocumentType, tuple[str, ...]], ...] = (
    (DocumentType.DRIVER_LICENSE, DRIVER_LICENSE_KEYWORDS),
    (DocumentType.RESIDENT_CARD, RESIDENT_CARD_KEYWORDS),
    (DocumentType.PASSPORT, PASSPORT_KEYWORDS),
)

FIELD_RULES: tuple[tuple[FieldKind, DocumentType], ...] = (
    (FieldKind.DRIVER_LICENSE_NUMBER, DocumentType.DRIVER_LICENSE),
    (FieldKind.PASSPORT_NUMBER, DocumentType.PASSPORT),
    (FieldKind.NATIONAL_ID_NUMBER, DocumentType.RESIDENT_CARD_INFERRED),
)


def classify(
    document: RecognizedDocument,
    candidates: Sequence[Candidate],
    diagnostics: DiagnosticsLog | None = None,
) -> DocumentType:
    if diagnostics is None:
        diagnostics = DiagnosticsLog(logger)
    text = document.full_text.casefold()

    for document_type, keywords in KEYWORD_RULES:
        hit = next((kw for kw in keywords if kw.casefold() in text), None)
        if hit is not None:
            diagnostics.add(
                f"Detected document type: {document_type.label} (keyword '{hit}')", logging.INFO
            )
            return document_type

    kinds = {candidate.label for candidate in candidates}
    for kind, document_type in FIELD_RULES:
        if kind in kinds:
            diagnostics.add(
                f"Detected document type: {document_type.label} (from {kind.label})", logging.INFO
            )
            return document_type

    diagnostics.add("Document type unknown: no keyword or typed field found", logging.INFO)
    return DocumentType.UNKNOWN
