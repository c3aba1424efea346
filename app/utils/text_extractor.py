import io
import logging
import os
from typing import Callable, Dict, Optional

import pdfplumber
import pytesseract
import PyPDF2
from PIL import Image, ImageFilter, ImageOps

from ..errors import ExtractionFailure, UnsupportedFileType
from ..models import ExtractionResult, FileType

logger = logging.getLogger(__name__)

ALLOWED_TYPES = ("PDF", "JPG", "JPEG", "PNG", "DICOM (.dcm)")
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})
IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})

DICOM_PLACEHOLDER = "DICOM file detected. Use a dedicated DICOM viewer to inspect the images."

# block of text, keep column spacing
OCR_CONFIG = "--psm 6 -c preserve_interword_spaces=1"


def detect_file_type(file_name: str, mime_type: str) -> FileType:
    ext = os.path.splitext(file_name or "")[1].lower()
    mime = (mime_type or "").lower()

    # .dcm wins over whatever MIME the browser guessed
    if ext == ".dcm":
        return FileType.DICOM
    if mime == "application/pdf" or ext == ".pdf":
        return FileType.PDF
    if mime in IMAGE_MIME_TYPES or ext in IMAGE_EXTENSIONS:
        return FileType.IMAGE
    return FileType.UNKNOWN


def preprocess_for_ocr(data: bytes, target_width: int = 2000) -> Optional[Image.Image]:
    """
    Grayscale -> contrast normalization -> resize to target width -> median denoise.

    Returns None when the image could not be preprocessed; the caller then
    runs OCR on the original bytes.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            gray = ImageOps.grayscale(image)
        gray = ImageOps.autocontrast(gray)
        height = max(1, round(gray.height * target_width / gray.width))
        resized = gray.resize((target_width, height), Image.LANCZOS)
        return resized.filter(ImageFilter.MedianFilter(size=3))
    except Exception as e:
        logger.warning(f"Image preprocessing failed, using original: {e}")
        return None


class TextExtractor:

    def __init__(
        self,
        ocr_language: str = "eng",
        target_width: int = 2000,
        tesseract_cmd: Optional[str] = None
    ):
        self.ocr_language = ocr_language
        self.target_width = target_width
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def extract(self, data: bytes, original_file_name: str, declared_mime_type: str) -> ExtractionResult:
        file_type = detect_file_type(original_file_name, declared_mime_type)

        extractors: Dict[FileType, Callable[[bytes], str]] = {
            FileType.PDF: self.extract_pdf,
            FileType.IMAGE: self.extract_image,
            FileType.DICOM: self.extract_dicom,
        }
        extractor = extractors.get(file_type)
        if extractor is None:
            raise UnsupportedFileType(ALLOWED_TYPES)

        logger.info(f"Extracting text from {original_file_name} as {file_type.value}")
        text = extractor(data)
        return ExtractionResult(file_type=file_type, extracted_text=text)

    @staticmethod
    def extract_pdf(data: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                text = "\n".join(page.extract_text() or "" for page in pdf.pages)

            if text.strip():
                return text
            logger.info("pdfplumber found no text, retrying with PyPDF2")
        except Exception as e:
            logger.warning(f"pdfplumber failed: {e}")

        try:
            reader = PyPDF2.PdfReader(io.BytesIO(data))
            return "\n".join(page.extract_text() or "" for page in reader.pages)
        except Exception as e:
            raise ExtractionFailure(f"Failed to parse PDF: {e}") from e

    def extract_image(self, data: bytes) -> str:
        target = preprocess_for_ocr(data, self.target_width)

        try:
            if target is None:
                target = Image.open(io.BytesIO(data))
            return pytesseract.image_to_string(target, lang=self.ocr_language, config=OCR_CONFIG) or ""
        except Exception as e:
            raise ExtractionFailure(f"OCR failed: {e}") from e

    @staticmethod
    def extract_dicom(data: bytes) -> str:
        # pixel and header data are left to a DICOM viewer
        return DICOM_PLACEHOLDER
