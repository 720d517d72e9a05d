"""
Pipeline Integration Tests
==========================

End-to-end extraction from raw OCR output to masking regions for each
supported document shape.
"""

import threading

import pytest

from idmask import process_document
from idmask.core.config import MaskingConfig
from idmask.core.models import DocumentType, FieldKind
from idmask.diagnostics import DiagnosticsLog
from idmask.pipeline import MaskingPipeline

pytestmark = pytest.mark.integration


@pytest.fixture
def pipeline(masking_config):
    return MaskingPipeline(masking_config)


class TestDriverLicense:
    """Driver license from a block-tree raw output."""

    def test_document_type(self, pipeline, driver_license_raw):
        result = pipeline.process(driver_license_raw)

        assert result.document_type == DocumentType.DRIVER_LICENSE
        assert result.image_size == (400, 400)

    def test_regions(self, pipeline, driver_license_raw):
        """Test every field is found, in pipeline order."""
        result = pipeline.process(driver_license_raw)

        assert [r.id for r in result.regions] == [
            "national_id_number-0",
            "birth_date-1",
            "gender-2",
            "national_id_back_digits-3",
            "driver_license_number-4",
            "address-5",
            "validity_period-6",
            "issue_date-7",
            "issuing_authority-8",
            "identifier_code-9",
            "other-text-0",
            "other-text-2",
        ]

    def test_field_values(self, pipeline, driver_license_raw):
        result = pipeline.process(driver_license_raw)

        def value(kind):
            (region,) = result.regions_of_kind(kind)
            return region.text

        assert value(FieldKind.DRIVER_LICENSE_NUMBER) == "19-123456-78"
        assert value(FieldKind.ADDRESS) == "서울특별시 강남구 테헤란로 123 가나아파트 101동 1001호"
        assert value(FieldKind.VALIDITY_PERIOD) == "2025.01.01~2034.12.31"
        assert value(FieldKind.ISSUE_DATE) == "2024.05.20"
        assert value(FieldKind.ISSUING_AUTHORITY) == "서울경찰청장"
        assert value(FieldKind.IDENTIFIER_CODE) == "AB12CD"

    def test_default_selection(self, pipeline, driver_license_raw):
        result = pipeline.process(driver_license_raw)

        assert result.default_selection() == {"national_id_number-0", "driver_license_number-4"}


class TestResidentCard:
    """Resident card from a flat-lines raw output."""

    def test_regions(self, pipeline, resident_card_raw):
        result = pipeline.process(resident_card_raw)

        assert result.document_type == DocumentType.RESIDENT_CARD
        assert [r.id for r in result.regions] == [
            "national_id_number-0",
            "birth_date-1",
            "gender-2",
            "national_id_back_digits-3",
            "address-4",
            "other-text-0",
            "other-text-1",
            "other-text-5",
            "other-text-6",
        ]

    def test_driver_license_fields_not_searched(self, pipeline, resident_card_raw):
        """Test date lines on a resident card stay plain text."""
        result = pipeline.process(resident_card_raw)

        assert result.regions_of_kind(FieldKind.ISSUE_DATE) == []
        assert result.get_region("other-text-5").text == "2020.01.15"

    def test_inferred_without_keyword(self, pipeline):
        raw = {"lines": [{"text": "810627-1234567", "bbox": [0, 0, 140, 20]}]}

        assert pipeline.process(raw).document_type == DocumentType.RESIDENT_CARD_INFERRED


class TestOtherShapes:
    """Plain text, hOCR and empty inputs."""

    def test_plain_text_synthetic(self, pipeline):
        result = pipeline.process("주민등록증\n홍길동\n810627-1234567")

        assert result.synthetic_geometry
        assert result.document_type == DocumentType.RESIDENT_CARD
        assert result.get_region("national_id_number-0").text == "810627-1234567"
        assert any("synthetic" in line for line in result.diagnostics)

    def test_hocr(self, pipeline, sample_hocr):
        result = pipeline.process(sample_hocr)

        assert result.document_type == DocumentType.RESIDENT_CARD
        assert result.default_selection() == {"national_id_number-0"}

    def test_passport(self, pipeline):
        raw = {
            "text": "PASSPORT\nM12345678",
            "lines": [
                {"text": "PASSPORT", "bbox": [0, 0, 100, 20]},
                {
                    "text": "M12345678",
                    "bbox": [0, 30, 90, 50],
                    "words": [{"text": "M12345678", "bbox": [0, 30, 90, 50], "confidence": 95}],
                },
            ],
        }

        result = pipeline.process(raw)

        assert result.document_type == DocumentType.PASSPORT
        assert result.default_selection() == {"passport_number-0"}

    @pytest.mark.parametrize("raw", [None, {}, "", {"lines": []}, 3.5])
    def test_empty_input(self, pipeline, raw):
        """Test absent structure gives an empty, unknown result."""
        result = pipeline.process(raw)

        assert result.regions == ()
        assert result.document_type == DocumentType.UNKNOWN
        assert result.diagnostics[0] == "Text len: 0, Lines: 0, Words: 0"


class TestPipelineProperties:
    """Cross-cutting pipeline properties."""

    def test_idempotent(self, pipeline, driver_license_raw):
        first = pipeline.process(driver_license_raw)
        second = pipeline.process(driver_license_raw)

        assert first.regions == second.regions
        assert first.diagnostics == second.diagnostics

    def test_diagnostics_header(self, pipeline, resident_card_raw):
        result = pipeline.process(resident_card_raw)

        assert result.diagnostics[0].startswith("Text len: ")
        assert "Lines: 7" in result.diagnostics[0]

    def test_config_changes_behaviour(self, resident_card_raw):
        config = MaskingConfig(_env_file=None, address_max_follow_lines=0)

        result = MaskingPipeline(config).process(resident_card_raw)

        assert result.get_region("address-4").text == "서울특별시 강남구 테헤란로 123"
        assert result.get_region("other-text-4") is not None

    def test_caller_log_filled(self, pipeline, make_line, make_document):
        """Test an empty log passed in by the caller receives the run's lines."""
        log = DiagnosticsLog()
        doc = make_document(make_line("810627-1234567", 0, 0, 140, 20))

        result = pipeline.process_recognized(doc, log)

        assert len(log) > 0
        assert log.lines == result.diagnostics
        assert log.lines[0] == "Text len: 14, Lines: 1, Words: 0"

    def test_process_document(self, resident_card_raw):
        assert process_document(resident_card_raw).document_type == DocumentType.RESIDENT_CARD

    def test_concurrent_documents(self, pipeline, resident_card_raw, driver_license_raw):
        """Test one pipeline serves documents from several threads."""
        expected = {
            "resident": pipeline.process(resident_card_raw).regions,
            "license": pipeline.process(driver_license_raw).regions,
        }
        results = {}

        def run(name, raw):
            results[name] = pipeline.process(raw).regions

        threads = [
            threading.Thread(target=run, args=("resident", resident_card_raw)),
            threading.Thread(target=run, args=("license", driver_license_raw)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == expected
