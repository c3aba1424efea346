from app.errors import ExtractionFailure
from app.models import AnalysisInput, AnalysisResult, ErrorResult, ExtractionResult, FileType
from app.services.analyzer import DocumentAnalyzer
from app.services.prescription_parser import ANTIBIOTIC_INSTRUCTION, PPI_INSTRUCTION
from app.utils.text_extractor import DICOM_PLACEHOLDER


class StubExtractor:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error

    def extract(self, data, original_file_name, declared_mime_type):
        if self.error:
            raise self.error
        return ExtractionResult(file_type=FileType.IMAGE, extracted_text=self.text)


def upload(name="rx.png", mime="image/png", data=b"bytes"):
    return AnalysisInput(data=data, original_file_name=name, declared_mime_type=mime)


def test_end_to_end_prescription(prescription_text):
    result = DocumentAnalyzer(extractor=StubExtractor(prescription_text)).analyze(upload())

    assert isinstance(result, AnalysisResult)
    assert result.success is True
    assert result.summary.key_vitals["bloodPressure"] == "150/95"
    assert "Hypertension" in result.summary.possible_conditions

    amoxicillin, omeprazole = result.prescription.medications
    assert amoxicillin.name == "Amoxicillin"
    assert "Complete the full course; do not skip doses" in amoxicillin.notes
    assert omeprazole.name == "Omeprazole"
    assert "Take 30 minutes before breakfast" in omeprazole.notes

    assert ANTIBIOTIC_INSTRUCTION in result.prescription.instructions
    assert PPI_INSTRUCTION in result.prescription.instructions
    assert "Complete the full antibiotic course; do not skip doses" in result.lifestyle_plan.reminders.meds


def test_same_upload_gives_identical_json(png_bytes, fake_ocr):
    analyzer = DocumentAnalyzer()

    first = analyzer.analyze(upload(data=png_bytes))
    second = analyzer.analyze(upload(data=png_bytes))

    assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)


def test_dicom_upload_skips_ocr(fake_ocr):
    result = DocumentAnalyzer().analyze(upload("scan.dcm", "application/octet-stream", b"DICM"))

    assert result.file_type == FileType.DICOM
    assert result.extracted_text == DICOM_PLACEHOLDER
    assert result.prescription.medications == []
    assert fake_ocr == []


def test_unsupported_type_is_a_client_error():
    result = DocumentAnalyzer().analyze(upload("notes.txt", "text/plain"))

    assert isinstance(result, ErrorResult)
    assert result.success is False
    assert result.status_code == 400
    assert result.message.startswith("Unsupported file type")
    assert "DICOM" in result.message


def test_extraction_failure_embeds_cause():
    analyzer = DocumentAnalyzer(extractor=StubExtractor(error=ExtractionFailure("OCR failed: corrupt image")))

    result = analyzer.analyze(upload())

    assert result.status_code == 500
    assert result.message == "Analysis failed. OCR failed: corrupt image"


def test_downstream_exception_fails_closed(prescription_text):
    class BrokenSummarizer:
        def summarize(self, text):
            raise RuntimeError("boom")

    analyzer = DocumentAnalyzer(extractor=StubExtractor(prescription_text), summarizer=BrokenSummarizer())

    result = analyzer.analyze(upload())

    assert isinstance(result, ErrorResult)
    assert result.status_code == 500
    assert "boom" in result.message


def test_error_result_hides_status_code():
    result = DocumentAnalyzer().analyze(upload("notes.txt", "text/plain"))

    assert result.model_dump(by_alias=True) == {"success": False, "message": result.message}
