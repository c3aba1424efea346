from fastapi import FastAPI, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Optional, Union
import asyncio
import logging

from .config import settings
from .errors import AnalysisTimeout
from .models import AnalysisInput, AnalysisResult, ChatAnalysisResponse, ErrorResult
from .services.analyzer import DocumentAnalyzer, error_result
from .utils.formatters import DISCLAIMER, format_chat_reply
from .utils.text_extractor import TextExtractor

logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Health Record Document Analysis",
    description="Text extraction, clinical summary, prescription parsing and lifestyle plans for uploaded medical documents",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
analyzer = DocumentAnalyzer(
    extractor=TextExtractor(
        ocr_language=settings.ocr_language,
        target_width=settings.ocr_target_width,
        tesseract_cmd=settings.tesseract_cmd
    )
)


async def run_analysis(file: Optional[UploadFile]) -> Union[AnalysisResult, ErrorResult]:
    """Upload checks, then the analyzer on a worker thread under a timeout"""
    content = await file.read() if file is not None else b""
    if file is None or not file.filename or not content:
        return ErrorResult(message="No file uploaded", status_code=400)

    if len(content) > settings.max_upload_bytes:
        return ErrorResult(
            message=f"File too large. Maximum size is {settings.max_upload_mb}MB.",
            status_code=413
        )

    upload = AnalysisInput(
        data=content,
        original_file_name=file.filename,
        declared_mime_type=file.content_type or "application/octet-stream"
    )

    try:
        return await asyncio.wait_for(
            asyncio.get_running_loop().run_in_executor(None, analyzer.analyze, upload),
            timeout=settings.analysis_timeout
        )
    except asyncio.TimeoutError:
        logger.error(f"Analysis of {file.filename} timed out after {settings.analysis_timeout}s")
        return error_result(AnalysisTimeout(f"Analysis did not finish within {settings.analysis_timeout:g} seconds"))


def error_response(error: ErrorResult) -> JSONResponse:
    return JSONResponse(error.model_dump(by_alias=True), status_code=error.status_code)


def success_response(payload) -> JSONResponse:
    return JSONResponse(
        payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers={"X-Disclaimer": DISCLAIMER}
    )


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "Health Record Document Analysis",
        "version": "1.0.0"
    }


@app.post("/api/ai/analyze")
async def analyze_document(file: Optional[UploadFile] = File(None)):
    """Analyze an uploaded PDF, image or DICOM file"""
    result = await run_analysis(file)
    if isinstance(result, ErrorResult):
        return error_response(result)
    return success_response(result)


@app.post("/api/chatbot/analyze")
async def chatbot_analyze(file: Optional[UploadFile] = File(None)):
    """Same analysis, answered as a chat message"""
    result = await run_analysis(file)
    if isinstance(result, ErrorResult):
        return error_response(result)

    reply = format_chat_reply(result, file.filename)
    return success_response(ChatAnalysisResponse(reply=reply, analysis=result))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
