"""
Infrastructure: Document Detector

Categorizes a document with the visual model while its text is extracted
in parallel, then extracts fields from that text with the text model.
"""

import asyncio
import os
from typing import Optional

from docscan_bench.config import Configuration, get_benchmark_setting
from docscan_bench.domain.document_type import CATEGORIZATION_SYSTEM_PROMPT, DocumentType
from docscan_bench.domain.errors import InferenceError, ModelLoadFailed
from docscan_bench.domain.interfaces import (
    ExtractionResult,
    IDocumentDetector,
    IDocumentDetectorFactory,
    IOCREngine,
    IPDFRenderer,
    ITextModelFactory,
    ITextProvider,
    IVisualModelFactory,
    IVisualProvider,
)
from docscan_bench.domain.services import parse_yes_no_response
from docscan_bench.logging_utils import ComponentType, StructuredLogger


class DocumentDetector(IDocumentDetector):
    """
    Two-step detector bound to one loaded model pair.

    categorize() trusts the visual model's verdict. Only when the visual
    model fails does it fall back to asking the text model about the
    extracted text. The text is kept for extract_data().
    """

    def __init__(
        self,
        config: Configuration,
        document_type: DocumentType,
        visual_provider: IVisualProvider,
        text_provider: ITextProvider,
        renderer: IPDFRenderer,
        ocr_engine: IOCREngine,
        logger: Optional[StructuredLogger] = None,
    ):
        self.config = config
        self.document_type = document_type
        self._visual_provider = visual_provider
        self._text_provider = text_provider
        self._renderer = renderer
        self._ocr_engine = ocr_engine
        self._logger = logger or StructuredLogger(ComponentType.ENGINE)
        self._pdf_path: Optional[str] = None
        self._text = ""

    async def categorize(self, pdf_path: str) -> bool:
        visual_verdict, text = await asyncio.gather(
            self._categorize_visually(pdf_path),
            self._extract_text(pdf_path),
        )
        self._pdf_path = pdf_path
        self._text = text

        if visual_verdict is not None:
            return visual_verdict
        if not text:
            raise InferenceError(f"{os.path.basename(pdf_path)}: no visual verdict and no text")

        response = await self._text_provider.generate(
            system_prompt=CATEGORIZATION_SYSTEM_PROMPT,
            user_prompt=self.document_type.text_categorization_prompt(text),
            max_tokens=get_benchmark_setting("categorization_max_tokens"),
        )
        return parse_yes_no_response(response)

    async def extract_data(self) -> ExtractionResult:
        if self._pdf_path is None:
            raise InferenceError("extract_data called before categorize")
        if not self._text:
            return ExtractionResult()
        return await self._text_provider.extract_data(self.document_type, self._text)

    async def _categorize_visually(self, pdf_path: str) -> Optional[bool]:
        """Visual verdict, None when rendering or inference fails."""
        try:
            image = await asyncio.to_thread(self._renderer.render_first_page, pdf_path, self.config.processing.pdf_dpi)
            response = await self._visual_provider.generate_from_image(image, self.document_type.visual_prompt)
        except Exception as e:
            self._logger.log_event("visual_categorization_failed", file=os.path.basename(pdf_path), error=str(e))
            return None
        return parse_yes_no_response(response)

    async def _extract_text(self, pdf_path: str) -> str:
        try:
            return await asyncio.to_thread(self._ocr_engine.extract_text, pdf_path)
        except Exception as e:
            self._logger.log_event("text_extraction_failed", file=os.path.basename(pdf_path), error=str(e))
            return ""


class DocumentDetectorFactory(IDocumentDetectorFactory):
    """Loads a visual + text pair through the per-type factories."""

    def __init__(
        self,
        visual_factory: IVisualModelFactory,
        text_factory: ITextModelFactory,
        renderer: IPDFRenderer,
        ocr_engine: IOCREngine,
    ):
        self.visual_factory = visual_factory
        self.text_factory = text_factory
        self.renderer = renderer
        self.ocr_engine = ocr_engine

    async def preload_models(self, config: Configuration) -> None:
        await self.visual_factory.preload(config.visual_model_name, config)
        await self.text_factory.preload(config.text_model_name, config)

    async def make_detector(self, config: Configuration, document_type: DocumentType) -> IDocumentDetector:
        visual_provider = self.visual_factory.make_provider()
        text_provider = self.text_factory.make_provider()
        if visual_provider is None or text_provider is None:
            raise ModelLoadFailed("models are not preloaded")
        return DocumentDetector(
            config=config,
            document_type=document_type,
            visual_provider=visual_provider,
            text_provider=text_provider,
            renderer=self.renderer,
            ocr_engine=self.ocr_engine,
        )

    async def release_models(self) -> None:
        try:
            await self.visual_factory.release()
        finally:
            await self.text_factory.release()
