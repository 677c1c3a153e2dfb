"""
Document Corpus

Locates the benchmark documents, their ground truth sidecars and their OCR
text. Errors here are corpus-level and propagate to the caller.
"""

import asyncio
import os
from typing import Dict, Iterable, List, Optional

from docscan_bench.domain.errors import BenchmarkError
from docscan_bench.domain.interfaces import IGroundTruthStore, IOCREngine
from docscan_bench.domain.value_objects import GroundTruth
from docscan_bench.logging_utils import ComponentType, StructuredLogger


class DocumentCorpus:

    def __init__(self, store: IGroundTruthStore, logger: Optional[StructuredLogger] = None):
        self._store = store
        self._logger = logger or StructuredLogger(ComponentType.GROUND_TRUTH)

    @staticmethod
    def enumerate_pdfs(directory: str) -> List[str]:
        """
        List the PDFs directly inside directory, sorted by name.

        Raises:
            BenchmarkError: If the directory does not exist
        """
        if not os.path.isdir(directory):
            raise BenchmarkError(f"Document directory not found: {directory}")
        names = sorted(
            name for name in os.listdir(directory)
            if name.lower().endswith(".pdf") and os.path.isfile(os.path.join(directory, name))
        )
        root = os.path.abspath(directory)
        return [os.path.join(root, name) for name in names]

    def check_existing_sidecars(self, positive_dir: str, negative_dir: Optional[str] = None) -> Dict[str, bool]:
        """Map every PDF in the given directories to whether its sidecar exists."""
        existing = {}
        for directory in (positive_dir, negative_dir):
            if directory is None:
                continue
            for pdf_path in self.enumerate_pdfs(directory):
                existing[pdf_path] = self._store.exists(pdf_path)
        return existing

    def load_ground_truths(self, pdf_paths: Iterable[str]) -> Dict[str, GroundTruth]:
        """
        Load the sidecar of every document.

        Raises:
            BenchmarkError: If any document has no sidecar
            DecodingFailed: If a sidecar is malformed
        """
        ground_truths = {}
        for pdf_path in pdf_paths:
            if not self._store.exists(pdf_path):
                raise BenchmarkError(
                    f"Missing ground truth sidecar for: {os.path.basename(pdf_path)}"
                )
            ground_truths[pdf_path] = self._store.load(pdf_path)
        return ground_truths

    async def pre_extract_ocr_texts(self, pdf_paths: Iterable[str], ocr_engine: IOCREngine) -> Dict[str, str]:
        """
        OCR every document once; the texts are shared by all text models.

        Documents whose OCR fails are left out of the result, which the text
        phase scores as fully wrong.
        """
        ocr_texts = {}
        for pdf_path in pdf_paths:
            try:
                text = await asyncio.to_thread(ocr_engine.extract_text, pdf_path)
            except Exception as e:
                self._logger.warning("ocr_failed", file=os.path.basename(pdf_path), error=str(e))
                continue
            ocr_texts[pdf_path] = text
        return ocr_texts
