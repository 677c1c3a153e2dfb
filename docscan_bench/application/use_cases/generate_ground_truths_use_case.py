"""
Generate Ground Truths Use Case

Bootstraps sidecars for undecided documents with the configured oracle
models. Positive documents get their fields from the oracle text model;
negative documents are labeled without invoking any model.

Skip semantics are path based: with skip_existing every existing sidecar is
kept as is, verified or not. Without it, unverified sidecars are regenerated
while verified ones are still never overwritten.
"""

import asyncio
import os
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence

from docscan_bench.config import Configuration
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.errors import DecodingFailed, ModelLoadFailed
from docscan_bench.domain.interfaces import IGroundTruthStore, ITextModelFactory, ITextProvider
from docscan_bench.domain.services import format_date
from docscan_bench.domain.value_objects import GroundTruth, GroundTruthMetadata
from docscan_bench.logging_utils import ComponentType, StructuredLogger


class GenerateGroundTruthsUseCase:
    """
    Creates missing ground truth sidecars.

    The oracle text model is loaded lazily, only once a positive document
    actually needs extraction, and released when generation finishes.
    """

    def __init__(
        self,
        configuration: Configuration,
        document_type: DocumentType,
        store: IGroundTruthStore,
        text_factory: ITextModelFactory,
        extraction_timeout_seconds: Optional[float] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self._configuration = configuration
        self._document_type = document_type
        self._store = store
        self._text_factory = text_factory
        self._extraction_timeout = extraction_timeout_seconds
        self._logger = logger or StructuredLogger(ComponentType.GROUND_TRUTH)

    async def execute(
        self,
        positive_pdfs: Sequence[str],
        negative_pdfs: Sequence[str],
        ocr_texts: Optional[Dict[str, str]] = None,
        skip_existing: bool = True,
    ) -> Dict[str, GroundTruth]:
        """
        Ensure every document has a ground truth.

        Args:
            positive_pdfs: Documents of the benchmarked type
            negative_pdfs: Documents of any other type
            ocr_texts: Pre-extracted text keyed by path, used for positives
            skip_existing: Keep every existing sidecar unchanged

        Returns:
            Ground truth keyed by document path

        Raises:
            ModelLoadFailed: If the oracle text model cannot be loaded
        """
        ocr_texts = ocr_texts or {}
        ground_truths: Dict[str, GroundTruth] = {}
        provider: Optional[ITextProvider] = None

        try:
            for pdf_path in positive_pdfs:
                kept = self._existing(pdf_path, skip_existing)
                if kept is not None:
                    ground_truths[pdf_path] = kept
                    continue
                if provider is None:
                    provider = await self._load_oracle()
                ground_truths[pdf_path] = await self._generate_positive(
                    pdf_path, ocr_texts.get(pdf_path), provider
                )
        finally:
            if provider is not None:
                await self._text_factory.release()

        for pdf_path in negative_pdfs:
            kept = self._existing(pdf_path, skip_existing)
            if kept is not None:
                ground_truths[pdf_path] = kept
                continue
            ground_truths[pdf_path] = self._save(
                GroundTruth(
                    is_match=False,
                    document_type=self._document_type,
                    metadata=self._metadata(),
                ),
                pdf_path,
            )

        return ground_truths

    def _existing(self, pdf_path: str, skip_existing: bool) -> Optional[GroundTruth]:
        """The sidecar to keep for pdf_path, or None when one must be generated."""
        if not self._store.exists(pdf_path):
            return None
        try:
            existing = self._store.load(pdf_path)
        except DecodingFailed as e:
            self._logger.warning("sidecar_unreadable", file=os.path.basename(pdf_path), error=str(e))
            return None
        if skip_existing or existing.is_verified:
            self._logger.log_event(
                "sidecar_kept", file=os.path.basename(pdf_path), verified=existing.is_verified
            )
            return existing
        return None

    async def _load_oracle(self) -> ITextProvider:
        await self._text_factory.preload(self._configuration.text_model_name, self._configuration)
        provider = self._text_factory.make_provider()
        if provider is None:
            raise ModelLoadFailed(f"{self._configuration.text_model_name} did not produce a provider")
        return provider

    async def _generate_positive(
        self, pdf_path: str, ocr_text: Optional[str], provider: ITextProvider
    ) -> GroundTruth:
        date = secondary_field = patient_name = None
        if ocr_text:
            try:
                extraction = await asyncio.wait_for(
                    provider.extract_data(self._document_type, ocr_text),
                    timeout=self._extraction_timeout,
                )
                if extraction.date is not None:
                    date = format_date(extraction.date)
                secondary_field = extraction.secondary_field
                patient_name = extraction.patient_name
            except Exception as e:
                # Keep the label, leave the fields for manual verification
                self._logger.warning("oracle_extraction_failed", file=os.path.basename(pdf_path), error=str(e))

        return self._save(
            GroundTruth(
                is_match=True,
                document_type=self._document_type,
                date=date,
                secondary_field=secondary_field,
                patient_name=patient_name,
                metadata=self._metadata(),
            ),
            pdf_path,
        )

    def _save(self, ground_truth: GroundTruth, pdf_path: str) -> GroundTruth:
        self._store.save(ground_truth, pdf_path)
        return ground_truth

    def _metadata(self) -> GroundTruthMetadata:
        return GroundTruthMetadata(
            vlm_model=self._configuration.visual_model_name,
            text_model=self._configuration.text_model_name,
            generated_at=datetime.now(timezone.utc),
            verified=False,
        )
