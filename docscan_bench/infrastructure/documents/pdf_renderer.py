"""
Infrastructure: PDF rendering with pdf2image (poppler).
"""

import os

from pdf2image import convert_from_path
from PIL import Image

from docscan_bench.domain.errors import DocumentFileNotFound, PDFConversionFailed
from docscan_bench.domain.interfaces import IPDFRenderer


class PDF2ImageRenderer(IPDFRenderer):

    def render_first_page(self, pdf_path: str, dpi: int) -> Image.Image:
        """
        Render page one of pdf_path as an RGB image.

        Raises:
            DocumentFileNotFound: If pdf_path does not exist
            PDFConversionFailed: If poppler cannot render the document
        """
        if not os.path.isfile(pdf_path):
            raise DocumentFileNotFound(pdf_path)
        try:
            images = convert_from_path(pdf_path, dpi=dpi, first_page=1, last_page=1)
        except Exception as e:
            raise PDFConversionFailed(f"{os.path.basename(pdf_path)}: {e}") from e
        if not images:
            raise PDFConversionFailed(f"{os.path.basename(pdf_path)}: no pages")
        return images[0].convert("RGB")
