"""
Document Access Interfaces

Rendering and OCR are external collaborators; the benchmark only needs a
page image for visual models and plain text for text models.
"""

from abc import ABC, abstractmethod
from typing import Any


class IPDFRenderer(ABC):

    @abstractmethod
    def render_first_page(self, pdf_path: str, dpi: int) -> Any:
        """
        Render the first page of a PDF.

        Raises:
            PDFConversionFailed: If the document cannot be rendered
        """
        pass


class IOCREngine(ABC):

    @abstractmethod
    def extract_text(self, pdf_path: str) -> str:
        """Return the recognized text of the document, empty if none."""
        pass
