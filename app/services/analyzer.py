import logging
from typing import Optional, Union

from ..errors import AnalysisError
from ..models import AnalysisInput, AnalysisResult, ErrorResult
from ..utils.text_extractor import TextExtractor
from .lifestyle_plan import LifestylePlanBuilder
from .prescription_parser import PrescriptionParser
from .summarizer import ClinicalSummarizer

logger = logging.getLogger(__name__)


class DocumentAnalyzer:
    """
    Runs one uploaded document through extraction, summary, prescription
    parsing and lifestyle planning.

    Single attempt, synchronous. Failures come back as an ErrorResult whose
    ``status_code`` tells the HTTP layer how to answer.
    """

    def __init__(
        self,
        extractor: Optional[TextExtractor] = None,
        summarizer: Optional[ClinicalSummarizer] = None,
        parser: Optional[PrescriptionParser] = None,
        planner: Optional[LifestylePlanBuilder] = None
    ):
        self.extractor = extractor or TextExtractor()
        self.summarizer = summarizer or ClinicalSummarizer()
        self.parser = parser or PrescriptionParser()
        self.planner = planner or LifestylePlanBuilder()

    def analyze(self, upload: AnalysisInput) -> Union[AnalysisResult, ErrorResult]:
        try:
            extraction = self.extractor.extract(
                upload.data,
                upload.original_file_name,
                upload.declared_mime_type
            )
            summary = self.summarizer.summarize(extraction.extracted_text)
            prescription = self.parser.parse(extraction.extracted_text)
            lifestyle_plan = self.planner.build_plan(summary, prescription)
        except AnalysisError as e:
            logger.warning(f"Analysis of {upload.original_file_name} failed: {e}")
            return error_result(e)
        except Exception as e:
            logger.exception(f"Unexpected error analyzing {upload.original_file_name}")
            return error_result(e)

        return AnalysisResult(
            file_type=extraction.file_type,
            extracted_text=extraction.extracted_text,
            summary=summary,
            prescription=prescription,
            lifestyle_plan=lifestyle_plan
        )


def error_result(error: Exception) -> ErrorResult:
    status_code = getattr(error, "status_code", 500)
    if status_code == 400:
        message = str(error)
    else:
        message = f"Analysis failed. {error}"
    return ErrorResult(message=message, status_code=status_code)
