class AnalysisError(Exception):
    """Base error for the document analysis pipeline"""

    status_code = 500


class UnsupportedFileType(AnalysisError):
    status_code = 400

    def __init__(self, allowed):
        self.allowed = list(allowed)
        super().__init__(f"Unsupported file type. Allowed: {', '.join(self.allowed)}")


class ExtractionFailure(AnalysisError):
    status_code = 500


class AnalysisTimeout(AnalysisError):
    status_code = 504
