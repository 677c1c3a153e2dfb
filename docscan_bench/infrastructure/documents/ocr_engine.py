"""
Infrastructure: document text extraction.

Searchable PDFs are read directly with PyMuPDF. Scanned documents, whose
embedded text is shorter than MINIMUM_TEXT_LENGTH, are rendered and run
through Tesseract instead.
"""

import os
from typing import Optional

import fitz  # PyMuPDF
import pytesseract
from PIL import Image

from docscan_bench.domain.errors import DocumentFileNotFound
from docscan_bench.domain.interfaces import IOCREngine, IPDFRenderer
from docscan_bench.infrastructure.documents.pdf_renderer import PDF2ImageRenderer

MINIMUM_TEXT_LENGTH = 50
TESSERACT_CONFIG = r'--oem 3 --psm 6'


class TesseractOCREngine(IOCREngine):
    """
    Args:
        renderer: Renders scanned pages for Tesseract
        dpi: Render resolution for scanned pages
        languages: Tesseract language codes, e.g. "deu+eng"
    """

    def __init__(self, renderer: Optional[IPDFRenderer] = None, dpi: int = 150, languages: str = "deu+eng"):
        self.renderer = renderer or PDF2ImageRenderer()
        self.dpi = dpi
        self.languages = languages

    def extract_text(self, pdf_path: str) -> str:
        if not os.path.isfile(pdf_path):
            raise DocumentFileNotFound(pdf_path)

        direct_text = self.extract_direct_text(pdf_path)
        if len(direct_text) >= MINIMUM_TEXT_LENGTH:
            return direct_text

        image = self.renderer.render_first_page(pdf_path, self.dpi)
        return self.recognize(image)

    @staticmethod
    def extract_direct_text(pdf_path: str) -> str:
        """Embedded text of the first page, empty for scans."""
        with fitz.open(pdf_path) as doc:
            if len(doc) == 0:
                return ""
            return doc[0].get_text("text").strip()

    def recognize(self, image: Image.Image) -> str:
        if image.mode != 'L':
            image = image.convert('L')
        return pytesseract.image_to_string(image, lang=self.languages, config=TESSERACT_CONFIG).strip()
