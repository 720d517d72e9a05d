"""
Masking Pipeline
================

Runs one document through structure recovery, the field matchers, the
document classifier and region synthesis, collecting a per-run diagnostics
log along the way.
"""

import logging

from .core.config import MaskingConfig
from .core.models import DocumentType, MaskingResult, RecognizedDocument
from .diagnostics import DiagnosticsLog
from .extraction.classifier import classify
from .extraction.matchers import (
    DOCUMENT_INDEPENDENT_MATCHERS,
    DRIVER_LICENSE_MATCHERS,
    MatchContext,
    Matcher,
)
from .extraction.synthesizer import synthesize
from .ocr.models import RawOcrOutput
from .ocr.recovery import normalize

logger = logging.getLogger(__name__)

# Matchers that only make sense once the document type is known
CONDITIONAL_MATCHERS: dict[DocumentType, tuple[Matcher, ...]] = {
    DocumentType.DRIVER_LICENSE: DRIVER_LICENSE_MATCHERS,
}


class MaskingPipeline:
    """
    Stateless extraction pipeline from raw OCR output to masking regions.

    A pipeline instance holds only its configuration, so one instance can
    serve any number of documents, including from several threads.
    """

    def __init__(self, config: MaskingConfig | None = None):
        self.config = config or MaskingConfig()

    def process(self, raw: RawOcrOutput) -> MaskingResult:
        """
        Extract masking regions from raw OCR output.

        Args:
            raw: Engine output in any supported shape

        Returns:
            MaskingResult with the document type, regions and diagnostics
        """
        document = normalize(raw, self.config)
        return self.process_recognized(document)

    def process_recognized(
        self, document: RecognizedDocument, diagnostics: DiagnosticsLog | None = None
    ) -> MaskingResult:
        if diagnostics is None:
            diagnostics = DiagnosticsLog(logger)
        diagnostics.add(
            f"Text len: {len(document.full_text)}, Lines: {len(document.lines)}, "
            f"Words: {len(document.words)}",
            logging.INFO,
        )
        if document.synthetic:
            diagnostics.warning("Line geometry is synthetic; boxes are approximate")

        context = MatchContext(config=self.config, diagnostics=diagnostics)
        context = self._run_matchers(document, context, DOCUMENT_INDEPENDENT_MATCHERS)

        document_type = classify(document, context.accepted, diagnostics)
        context = context.with_document_type(document_type)
        context = self._run_matchers(
            document, context, CONDITIONAL_MATCHERS.get(document_type, ())
        )

        regions = synthesize(document, context.accepted, document_type, self.config)
        diagnostics.add(
            f"Generated {len(regions)} masking regions "
            f"({len(context.accepted)} fields, document type {document_type.value})",
            logging.INFO,
        )

        return MaskingResult(
            document_type=document_type,
            regions=tuple(regions),
            diagnostics=diagnostics.lines,
            image_size=document.image_size,
            synthetic_geometry=document.synthetic,
        )

    @staticmethod
    def _run_matchers(
        document: RecognizedDocument, context: MatchContext, matchers: tuple[Matcher, ...]
    ) -> MatchContext:
        for matcher in matchers:
            context = context.with_candidates(matcher(document, context))
        return context


def process_document(raw: RawOcrOutput, config: MaskingConfig | None = None) -> MaskingResult:
    """Run ``raw`` through a pipeline built from ``config``."""
    return MaskingPipeline(config).process(raw)
