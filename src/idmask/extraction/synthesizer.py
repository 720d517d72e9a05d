"""Turns candidates and unclaimed lines into renderer-facing masking regions."""

import logging
from collections.abc import Sequence

from ..core.config import MaskingConfig
from ..core.models import (
    SENSITIVE_KINDS,
    Candidate,
    DocumentType,
    FieldKind,
    MaskingRegion,
    RecognizedDocument,
)

logger = logging.getLogger(__name__)


def synthesize(
    document: RecognizedDocument,
    candidates: Sequence[Candidate],
    document_type: DocumentType,
    config: MaskingConfig | None = None,
) -> list[MaskingRegion]:
    """
    Build the region list for one document.

    Every candidate becomes a region; whole-number kinds are selected by
    default. Each remaining non-blank line not substantially covered by a
    candidate box becomes an unselected OtherText region so the user can
    still mask it.

    Args:
        document: The recovered document
        candidates: Candidates in pipeline order
        document_type: Resolved type, reported with the regions
        config: Overlap threshold source

    Returns:
        Candidate regions followed by OtherText regions in line order
    """
    config = config or MaskingConfig()
    regions = [
        MaskingRegion(
            id=f"{candidate.label.value}-{n}",
            kind=candidate.label,
            bbox=candidate.bbox,
            text=candidate.value,
            selected_by_default=candidate.label in SENSITIVE_KINDS,
        )
        for n, candidate in enumerate(candidates)
    ]

    suppressed = 0
    for index, line in enumerate(document.lines):
        if not line.text.strip():
            continue
        if any(
            line.bbox.overlap_ratio(candidate.bbox) >= config.overlap_suppression_ratio
            for candidate in candidates
        ):
            suppressed += 1
            continue
        regions.append(
            MaskingRegion(
                id=f"other-text-{index}",
                kind=FieldKind.OTHER_TEXT,
                bbox=line.bbox,
                text=line.text.strip(),
            )
        )

    logger.debug(
        f"Synthesized {len(regions)} regions for {document_type.value} "
        f"({len(candidates)} candidates, {suppressed} lines claimed)"
    )
    return regions
