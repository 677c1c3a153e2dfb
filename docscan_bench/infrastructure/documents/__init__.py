"""Document rendering and text extraction adapters."""

from .pdf_renderer import PDF2ImageRenderer
from .ocr_engine import TesseractOCREngine, MINIMUM_TEXT_LENGTH

__all__ = ["PDF2ImageRenderer", "TesseractOCREngine", "MINIMUM_TEXT_LENGTH"]
