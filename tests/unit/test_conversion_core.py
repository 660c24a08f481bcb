"""
Unit tests for the ConversionEngine dispatcher.
"""

import json

import pytest

from quickconvert.config import OUTPUT_MIME_TYPES, PipelineId
from quickconvert.models import ConversionRequest, ErrorKind, Failure, Success
from quickconvert.utils.conversion_core import suggested_filename
from quickconvert.utils.error_handling import ErrorCode
from tests.conftest import ExplodingBytes, FakeImageRecoder, FakeTextExtractor


def make_request(content, name, output, mime="", infer_types=None):
    return ConversionRequest.create(content, name, mime, output, infer_types=infer_types)


class TestScenarios:

    def test_csv_to_json(self, engine):
        result = engine.convert(make_request(b"name,meta.age\nA,30\n", "report.csv", "json", "text/csv"))

        assert isinstance(result, Success)
        assert result.content_kind.startswith("application/json")
        assert json.loads(result.payload)["data"][0] == {"name": "A", "meta": {"age": 30}}
        assert result.pipeline_id is PipelineId.CSV_TO_JSON
        assert result.ok

    def test_json_to_csv(self, engine):
        result = engine.convert(make_request(b'[{"x":{"y":1}}]', "data.json", "csv"))

        assert isinstance(result, Success)
        assert result.payload.splitlines() == ["x.y", "1"]
        assert result.content_kind == OUTPUT_MIME_TYPES["csv"]

    def test_text_to_markdown(self, engine):
        result = engine.convert(make_request(b"TITLE\n\nSome sentence here.", "notes.txt", "md"))

        assert isinstance(result, Success)
        lines = result.payload.split("\n")
        assert "## TITLE" in lines
        assert "Some sentence here." in lines
        assert lines[0] == "# notes"

    def test_empty_pdf_is_success_with_report(self, make_engine):
        engine = make_engine(pdf=FakeTextExtractor(text="", page_count=3))
        result = engine.convert(make_request(b"%PDF-1.4 stub", "scan.pdf", "txt", "application/pdf"))

        assert isinstance(result, Success)
        assert result.diagnostic_report is True
        assert "- Total pages: 3" in result.payload
        assert "Possible reasons:" in result.payload
        assert "scanned document" in result.payload

    def test_image_to_pdf_is_unsupported(self, engine):
        result = engine.convert(make_request(b"BM...", "image.bmp", "pdf", "image/bmp"))

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.UNSUPPORTED
        assert not result.ok
        assert result.code is ErrorCode.CONVERSION_NOT_SUPPORTED
        assert "BMP to PDF" in result.message


class TestWhitelistGate:

    def test_unknown_output_never_reads_payload(self, engine):
        result = engine.convert(make_request(ExplodingBytes(), "report.csv", "exe"))

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.UNSUPPORTED
        assert result.code is ErrorCode.INVALID_FORMAT
        assert "md" in result.diagnostics["supported_output_formats"]

    def test_unresolved_pair_never_reads_payload(self, engine):
        result = engine.convert(make_request(ExplodingBytes(), "notes.txt", "json"))
        assert result.code is ErrorCode.CONVERSION_NOT_SUPPORTED

    @pytest.mark.parametrize("output", ["pdf", "docx"])
    def test_placeholder_outputs_are_unsupported(self, engine, output):
        result = engine.convert(make_request(b"a,b\n1,2\n", "report.csv", output))
        assert result.kind is ErrorKind.UNSUPPORTED
        assert result.code is ErrorCode.CONVERSION_NOT_SUPPORTED

    def test_missing_output_kind(self, engine):
        result = engine.preflight("report.csv", "", None)
        assert isinstance(result, Failure)
        assert "(none)" in result.message

    def test_unknown_and_unresolved_have_distinct_codes(self, engine):
        unknown = engine.preflight("report.csv", "", "exe")
        unresolved = engine.preflight("report.csv", "", "md")
        assert unknown.code is not unresolved.code

    def test_preflight_detects_source_kinds(self, engine):
        result = engine.preflight("scan.txt", "image/png", "json")
        assert result.diagnostics["detected_source_kinds"] == ["image", "txt"]

    def test_preflight_trims_output_kind(self, engine):
        entry = engine.preflight("report.csv", "text/csv", " Json ")
        assert not isinstance(entry, Failure)
        assert entry.output_kind == "json"

    def test_vector_image_is_rejected_with_known_gap(self, engine):
        result = engine.convert(make_request(ExplodingBytes(), "logo.svg", "png", "image/svg+xml"))

        assert result.code is ErrorCode.CONVERSION_NOT_SUPPORTED
        assert "SVG to PNG" in result.message
        assert "rasterized" in result.diagnostics["known_gap"]


class TestSuccessShape:

    def test_suggested_filename(self):
        assert suggested_filename("report.csv", "json", 1700000000000) == "report-converted-1700000000000.json"
        assert suggested_filename("my.report.csv", "json", 1) == "my-converted-1.json"

    def test_engine_uses_clock_for_filename(self, engine):
        result = engine.convert(make_request(b"a\n1\n", "report.csv", "json"))
        assert result.suggested_filename == "report-converted-1700000000000.json"

    def test_output_kind_case_is_normalized(self, engine):
        result = engine.convert(make_request(b"a\n1\n", "REPORT.CSV", "JSON"))
        assert isinstance(result, Success)
        assert result.suggested_filename.endswith(".json")

    def test_conversion_is_deterministic(self, engine):
        request = make_request(b"name,meta.age\nA,30\nB,31\n", "report.csv", "json")
        assert engine.convert(request) == engine.convert(request)

    def test_empty_text_still_has_payload(self, engine):
        result = engine.convert(make_request(b"", "empty.txt", "md"))
        assert isinstance(result, Success)
        assert result.payload

    def test_docx_to_markdown(self, engine):
        result = engine.convert(make_request(b"PK...", "Letter.docx", "md"))

        assert isinstance(result, Success)
        assert result.payload == "# Letter\n\nConverted from Word document\n\nHello from Word"
        assert result.diagnostic_report is False

    def test_pdf_to_text(self, engine):
        result = engine.convert(make_request(b"%PDF", "scan.pdf", "txt"))
        assert result.payload == "PDF Text Content:\n\nHello from PDF"

    def test_image_recode_uses_encoder_settings(self, make_engine):
        recoder = FakeImageRecoder()
        engine = make_engine(image_recoder=recoder)
        result = engine.convert(make_request(b"raw", "photo.png", "jpg", "image/png"))

        assert result.payload == b"JPEG:raw"
        assert result.content_kind == "image/jpeg"
        assert recoder.calls == [{"format": "JPEG", "options": {"quality": 95, "progressive": True}}]


class TestFailures:

    def test_extraction_failure(self, make_engine):
        engine = make_engine(pdf=FakeTextExtractor(error=ValueError("bad xref table")))
        result = engine.convert(make_request(b"%PDF", "scan.pdf", "txt"))

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.EXTRACTION_FAILED
        assert result.code is ErrorCode.EXTRACTION_FAILED
        assert "bad xref table" in result.message
        assert result.diagnostics["document"] == "PDF"

    def test_docx_extraction_failure(self, make_engine):
        engine = make_engine(docx=FakeTextExtractor(error=ValueError("not a zip"), label="Word document"))
        result = engine.convert(make_request(b"junk", "letter.docx", "md"))
        assert result.kind is ErrorKind.EXTRACTION_FAILED

    def test_empty_docx_is_reported(self, make_engine):
        engine = make_engine(docx=FakeTextExtractor(text="", page_count=None, label="Word document"))
        result = engine.convert(make_request(b"PK", "letter.docx", "md"))

        assert isinstance(result, Success)
        assert result.diagnostic_report is True
        assert result.payload.startswith("# letter\n")

    def test_malformed_json(self, engine):
        result = engine.convert(make_request(b"{not json", "data.json", "csv"))

        assert result.kind is ErrorKind.MALFORMED_INPUT
        assert result.code is ErrorCode.INVALID_FILE
        assert "position" in result.diagnostics

    def test_malformed_csv(self, engine):
        result = engine.convert(make_request(b"a,b\n1,2,3\n", "report.csv", "json"))
        assert result.kind is ErrorKind.MALFORMED_INPUT

    def test_unexpected_error_is_internal_fault(self, make_engine):
        engine = make_engine(image_recoder=FakeImageRecoder(error=RuntimeError("encoder crashed")))
        result = engine.convert(make_request(b"raw", "photo.png", "png"))

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.INTERNAL_FAULT
        assert result.message == "Server error: encoder crashed"
        assert result.diagnostics["suggestions"] == [
            "A smaller file",
            "A different file format",
            "Refreshing and trying again",
        ]

    def test_missing_extractor_is_internal_fault(self, make_engine):
        engine = make_engine()
        engine.factory.text_extractors.clear()
        result = engine.convert(make_request(b"%PDF", "scan.pdf", "txt"))
        assert result.kind is ErrorKind.INTERNAL_FAULT


class TestTypeInference:

    def test_engine_default_can_disable_inference(self, make_engine):
        engine = make_engine(infer_types=False)
        result = engine.convert(make_request(b"code\n007\n", "codes.csv", "json"))
        assert json.loads(result.payload)["data"] == [{"code": "007"}]

    def test_request_overrides_engine_default(self, make_engine):
        engine = make_engine(infer_types=True)
        result = engine.convert(make_request(b"code\n007\n", "codes.csv", "json", infer_types=False))
        assert json.loads(result.payload)["data"] == [{"code": "007"}]
