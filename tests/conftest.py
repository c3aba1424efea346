import io

import pytest
from PIL import Image

PRESCRIPTION_TEXT = "BP: 150/95\nTab. Amoxicillin 500mg od for 7 days\nTab. Omeprazole 20mg od"


@pytest.fixture
def prescription_text():
    return PRESCRIPTION_TEXT


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (100, 50), color=(250, 250, 250)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def fake_ocr(monkeypatch):
    """Replace tesseract with a recorder returning PRESCRIPTION_TEXT."""
    from app.utils import text_extractor

    calls = []

    def image_to_string(image, lang=None, config=None):
        calls.append({"image": image, "lang": lang, "config": config})
        return PRESCRIPTION_TEXT

    monkeypatch.setattr(text_extractor.pytesseract, "image_to_string", image_to_string)
    return calls
