import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class Settings:
    log_level: str
    max_upload_mb: int
    analysis_timeout: float
    ocr_language: str
    tesseract_cmd: Optional[str]
    ocr_target_width: int
    cors_origins: List[str]
    api_url: str

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def load_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", 20)),
        analysis_timeout=float(os.getenv("ANALYSIS_TIMEOUT", 120)),
        ocr_language=os.getenv("OCR_LANGUAGE", "eng"),
        tesseract_cmd=os.getenv("TESSERACT_CMD") or None,
        ocr_target_width=int(os.getenv("OCR_TARGET_WIDTH", 2000)),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        api_url=os.getenv("API_URL", "http://localhost:8000"),
    )


settings = load_settings()
