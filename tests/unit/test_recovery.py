"""Structure Recovery Unit Tests
============================

Tests normalization of every supported raw OCR shape, including partial
and malformed engine output.
"""

from types import SimpleNamespace

import pytest

from idmask.core.models import BoundingBox, flatten_words
from idmask.ocr.models import coerce_bbox, coerce_confidence, image_size_of
from idmask.ocr.recovery import RECOVERY_STRATEGIES, normalize


def _word(text, x0, y0, x1, y1, confidence=90):
    return {"text": text, "bbox": {"x0": x0, "y0": y0, "x1": x1, "y1": y1}, "confidence": confidence}


class TestCoercion:
    """Test the loose field coercion helpers."""

    @pytest.mark.parametrize(
        "value",
        [
            {"x0": 1, "y0": 2, "x1": 11, "y1": 22},
            {"left": 1, "top": 2, "right": 11, "bottom": 22},
            {"left": 1, "top": 2, "width": 10, "height": 20},
            [1, 2, 11, 22],
            (1.2, 2.4, 10.6, 21.5),
            SimpleNamespace(x0=1, y0=2, x1=11, y1=22),
        ],
    )
    def test_bbox_shapes(self, value):
        """Test every box shape engines emit."""
        assert coerce_bbox(value) == BoundingBox(x0=1, y0=2, x1=11, y1=22)

    def test_bbox_reordered(self):
        """Swapped corners are put back in order."""
        assert coerce_bbox({"x0": 50, "y0": 40, "x1": 10, "y1": 0}) == BoundingBox(
            x0=10, y0=0, x1=50, y1=40
        )

    @pytest.mark.parametrize(
        "value",
        [None, "garbage", [1, 2, 3], {"x0": "a", "y0": 0, "x1": 1, "y1": 1}, [0, 0, float("nan"), 5], {}],
    )
    def test_bbox_unparseable(self, value):
        assert coerce_bbox(value) is None

    def test_confidence_clamped(self):
        assert coerce_confidence(-1) == 0.0
        assert coerce_confidence("95.5") == 95.5
        assert coerce_confidence(250) == 100.0
        assert coerce_confidence(None) == 0.0

    def test_image_size(self):
        assert image_size_of({"image_size": [640, 480]}) == (640, 480)
        assert image_size_of({"imageDimensions": {"width": 800, "height": 600}}) == (800, 600)
        assert image_size_of({"image_size": [0, 480]}) is None
        assert image_size_of("plain text") is None


class TestNormalize:
    """Test normalize across raw output shapes."""

    def test_strategy_order(self):
        """Hierarchy first, synthetic text last."""
        names = [strategy.name for strategy in RECOVERY_STRATEGIES]

        assert names == ["block_tree", "flat_lines", "markup", "flat_words", "plain_text"]
        assert [s.synthetic for s in RECOVERY_STRATEGIES] == [False, False, False, False, True]

    def test_block_tree(self):
        """Test lines nested in blocks and paragraphs keep their order."""
        raw = {
            "blocks": [
                {
                    "paragraphs": [
                        {"lines": [{"text": "first", "bbox": [0, 0, 50, 10], "words": [_word("first", 0, 0, 50, 10)]}]},
                        {"lines": [{"text": "second", "bbox": [0, 20, 60, 30]}]},
                    ]
                },
                {"paragraphs": [{"lines": [{"text": "third", "bbox": [0, 40, 50, 50]}]}]},
            ]
        }

        doc = normalize(raw)

        assert doc.source == "block_tree"
        assert [line.text for line in doc.lines] == ["first", "second", "third"]
        assert [w.text for w in doc.words] == ["first"]
        assert doc.full_text == "first\nsecond\nthird"

    def test_block_tree_preferred_over_flat_lines(self):
        raw = {
            "blocks": [{"paragraphs": [{"lines": [{"text": "nested", "bbox": [0, 0, 10, 10]}]}]}],
            "lines": [{"text": "flat", "bbox": [0, 0, 10, 10]}],
        }

        doc = normalize(raw)

        assert doc.source == "block_tree"
        assert [line.text for line in doc.lines] == ["nested"]

    def test_flat_lines(self, resident_card_raw):
        doc = normalize(resident_card_raw)

        assert doc.source == "flat_lines"
        assert len(doc.lines) == 7
        assert doc.image_size == (400, 300)
        assert not doc.synthetic

    def test_line_text_from_words(self):
        """Test a line without text takes the join of its words."""
        raw = {"lines": [{"words": [_word("서울", 0, 0, 40, 20), _word("강남구", 50, 0, 110, 20)]}]}

        doc = normalize(raw)

        assert doc.lines[0].text == "서울 강남구"
        assert doc.lines[0].bbox == BoundingBox(x0=0, y0=0, x1=110, y1=20)

    def test_line_text_keeps_engine_spacing(self):
        """Engine line text is kept even when it differs from the words."""
        raw = {"lines": [{"text": "810627 - 1234567\n", "bbox": [0, 0, 100, 20], "words": [_word("810627-1234567", 0, 0, 100, 20)]}]}

        doc = normalize(raw)

        assert doc.lines[0].text == "810627 - 1234567"
        assert doc.lines[0].words[0].text == "810627-1234567"

    def test_flat_words_clustered(self):
        """Test words without lines are grouped into reading-order lines."""
        raw = {
            "text": "홍길동 님\n주소",
            "words": [
                _word("주소", 0, 40, 50, 60),
                _word("님", 60, 2, 100, 22),
                _word("홍길동", 0, 0, 50, 20),
            ],
        }

        doc = normalize(raw)

        assert doc.source == "flat_words"
        assert [line.text for line in doc.lines] == ["홍길동 님", "주소"]
        assert doc.full_text == "홍길동 님\n주소"

    def test_hocr_string(self, sample_hocr):
        doc = normalize(sample_hocr)

        assert doc.source == "markup"
        assert [line.text for line in doc.lines] == ["주민등록증", "810627-1234567"]
        assert doc.full_text == "주민등록증\n810627-1234567"

    def test_hocr_in_mapping(self, sample_hocr):
        doc = normalize({"hocr": sample_hocr, "image_size": (400, 200)})

        assert doc.source == "markup"
        assert doc.image_size == (400, 200)
        assert doc.words[1].confidence == 88.0

    def test_plain_text_synthetic_geometry(self):
        """Test text-only input gets fabricated, flagged geometry."""
        doc = normalize({"text": "주민등록증\n\n홍길동 810627-1234567\n"})

        assert doc.source == "plain_text"
        assert doc.synthetic
        assert [line.text for line in doc.lines] == ["주민등록증", "홍길동 810627-1234567"]
        assert doc.lines[1].bbox.y0 == 30
        assert doc.lines[1].words[1].bbox == BoundingBox(x0=90, y0=30, x1=170, y1=60)

    def test_plain_string(self):
        doc = normalize("여권\nM12345678")

        assert doc.synthetic
        assert len(doc.lines) == 2

    @pytest.mark.parametrize(
        "raw",
        [None, {}, "", "   \n  ", 42, [], {"lines": "not a list"}, {"blocks": [None, 3, "x"]}],
    )
    def test_structural_absence_is_empty(self, raw):
        """Test absent structure yields an empty document, not an error."""
        doc = normalize(raw)

        assert doc.is_empty
        assert doc.words == ()

    def test_malformed_nodes_skipped(self):
        raw = {
            "lines": [
                {"text": "bad box", "bbox": "garbage"},
                {"text": "   ", "bbox": [0, 0, 10, 10]},
                {"text": "good", "bbox": [0, 20, 40, 30], "words": [{"text": "good"}, _word("good", 0, 20, 40, 30)]},
            ]
        }

        doc = normalize(raw)

        assert [line.text for line in doc.lines] == ["good"]
        assert len(doc.words) == 1

    def test_attribute_objects(self):
        """Test objects exposing attributes instead of keys."""
        line = SimpleNamespace(text="운전면허증", bbox=SimpleNamespace(x0=0, y0=0, x1=80, y1=20), words=[])
        raw = SimpleNamespace(blocks=None, lines=[line], text="운전면허증")

        doc = normalize(raw)

        assert [line.text for line in doc.lines] == ["운전면허증"]

    def test_failing_accessor_does_not_raise(self):
        """Test a raw object whose properties raise falls through to later strategies."""

        class Exploding:
            text = "홍길동"

            @property
            def blocks(self):
                raise RuntimeError("boom")

        doc = normalize(Exploding())

        assert doc.source == "plain_text"
        assert doc.lines[0].text == "홍길동"

    def test_words_invariant(self, resident_card_raw, sample_hocr):
        for raw in (resident_card_raw, sample_hocr, {"text": "a b\nc"}, None):
            doc = normalize(raw)
            assert doc.words == flatten_words(doc.lines)
