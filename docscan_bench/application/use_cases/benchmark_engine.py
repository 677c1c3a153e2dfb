"""
Benchmark Engine

Orchestrates model benchmarks against a labeled document corpus.

Two operating modes:
1. Single-model-type phases (benchmark_visual / benchmark_text), run inside
   an isolated worker process for one candidate model
2. Full pair benchmark (benchmark_model_pair), categorization and extraction
   with a loaded visual + text pair

Per-document errors never escape: they are absorbed into a zero score.
Load failures, memory shortfalls and (for pairs) per-document timeouts
disqualify the candidate instead. Models are released on every exit path.
"""

import asyncio
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from docscan_bench.config import Configuration, get_benchmark_setting
from docscan_bench.domain.document_type import CATEGORIZATION_SYSTEM_PROMPT, DocumentType
from docscan_bench.domain.errors import BenchmarkTimeout, DocScanError, PDFConversionFailed
from docscan_bench.domain.interfaces import (
    IDocumentDetectorFactory,
    IModelCache,
    IPDFRenderer,
    ITextModelFactory,
    ITextProvider,
    IVisualModelFactory,
)
from docscan_bench.domain.services import (
    FuzzyMatcher,
    MemoryEstimator,
    format_date,
    parse_yes_no_response,
)
from docscan_bench.domain.value_objects import (
    BenchmarkMetrics,
    DocumentResult,
    GroundTruth,
    ModelPair,
    ModelPairResult,
    TextBenchmarkResult,
    TextDocumentResult,
    VisualBenchmarkResult,
    VisualDocumentResult,
)
from docscan_bench.logging_utils import ComponentType, StructuredLogger


def describe_error(error: BaseException) -> str:
    """Message of an error without its class prefix."""
    if isinstance(error, DocScanError):
        return error.message or error.prefix
    return str(error) or type(error).__name__


@dataclass
class TextBenchmarkContext:
    """
    Shared inputs of a text-phase run.

    Attributes:
        ocr_texts: Pre-extracted OCR text keyed by document path
        ground_truths: Expected values keyed by document path
        timeout_seconds: Limit for each individual model call
        text_factory: Factory that loads the model under test
    """
    text_factory: ITextModelFactory
    timeout_seconds: float
    ocr_texts: Dict[str, str] = field(default_factory=dict)
    ground_truths: Dict[str, GroundTruth] = field(default_factory=dict)

    def __post_init__(self):
        """Validate invariants."""
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


class BenchmarkEngine:
    """
    Runs benchmarks for one document type under one configuration.

    Collaborators are injected so the engine depends only on interfaces:
    model factories are passed per call, the renderer, detector factory,
    memory estimator and model cache through the constructor.
    """

    def __init__(
        self,
        configuration: Configuration,
        document_type: DocumentType,
        verbose: bool = False,
        detector_factory: Optional[IDocumentDetectorFactory] = None,
        pdf_renderer: Optional[IPDFRenderer] = None,
        memory_estimator: Optional[MemoryEstimator] = None,
        model_cache: Optional[IModelCache] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.configuration = configuration
        self.document_type = document_type
        self.verbose = verbose
        self._detector_factory = detector_factory
        self._pdf_renderer = pdf_renderer
        self._memory_estimator = memory_estimator or MemoryEstimator.from_system(
            headroom_factor=get_benchmark_setting("memory_headroom_factor")
        )
        self._model_cache = model_cache
        self._logger = logger or StructuredLogger(ComponentType.ENGINE)

    @property
    def memory_estimator(self) -> MemoryEstimator:
        return self._memory_estimator

    # ------------------------------------------------------------------
    # Visual phase
    # ------------------------------------------------------------------

    async def benchmark_visual(
        self,
        model_name: str,
        positive_pdfs: Sequence[str],
        negative_pdfs: Sequence[str],
        timeout_seconds: float,
        visual_factory: IVisualModelFactory,
    ) -> VisualBenchmarkResult:
        """
        Benchmark one visual model's categorization.

        Args:
            model_name: Visual model under test
            positive_pdfs: Documents that match the document type
            negative_pdfs: Documents that do not
            timeout_seconds: Limit for each model call
            visual_factory: Loads and releases the model

        Returns:
            Phase result, disqualified when the model does not fit in memory
            or fails to load
        """
        await visual_factory.release()

        reason = self._memory_estimator.insufficient_memory_reason(visual_model_name=model_name)
        if reason:
            self._logger.warning("model_disqualified", model=model_name, reason=reason)
            return VisualBenchmarkResult.disqualified(model_name, reason)

        try:
            try:
                await visual_factory.preload(model_name, self.configuration)
            except Exception as e:
                reason = f"Failed to load model: {describe_error(e)}"
                self._logger.warning("model_disqualified", model=model_name, reason=reason)
                return VisualBenchmarkResult.disqualified(model_name, reason)

            start = time.monotonic()
            document_results = []
            for is_positive, paths in ((True, positive_pdfs), (False, negative_pdfs)):
                self._progress("    ✓ " if is_positive else "  ✗ ")
                for pdf_path in paths:
                    result = await self._benchmark_visual_document(
                        pdf_path, is_positive, timeout_seconds, visual_factory
                    )
                    self._progress("." if result.correct else "f")
                    document_results.append(result)
            self._progress("\n")
            elapsed = time.monotonic() - start
        finally:
            await visual_factory.release()

        result = VisualBenchmarkResult.from_results(model_name, document_results, elapsed)
        self._logger.log_event(
            "visual_benchmarked",
            model=model_name,
            total_score=result.total_score,
            max_score=result.max_score,
            elapsed_seconds=round(elapsed, 3),
        )
        return result

    async def _benchmark_visual_document(
        self,
        pdf_path: str,
        is_positive: bool,
        timeout_seconds: float,
        visual_factory: IVisualModelFactory,
    ) -> VisualDocumentResult:
        filename = os.path.basename(pdf_path)
        provider = visual_factory.make_provider()
        if provider is None:
            return VisualDocumentResult(
                filename=filename, is_positive_sample=is_positive, predicted_is_match=False
            )
        try:
            image = await self._render(pdf_path)
            response = await asyncio.wait_for(
                provider.generate_from_image(image, self.document_type.visual_prompt),
                timeout=timeout_seconds,
            )
            predicted = parse_yes_no_response(response)
        except Exception as e:
            # Errors and timeouts score zero: force the wrong answer
            self._logger.log_event("document_failed", file=filename, error=describe_error(e))
            predicted = not is_positive

        return VisualDocumentResult(
            filename=filename, is_positive_sample=is_positive, predicted_is_match=predicted
        )

    async def _render(self, pdf_path: str) -> Any:
        if self._pdf_renderer is None:
            raise PDFConversionFailed("no PDF renderer configured")
        return await asyncio.to_thread(
            self._pdf_renderer.render_first_page, pdf_path, self.configuration.processing.pdf_dpi
        )

    # ------------------------------------------------------------------
    # Text phase
    # ------------------------------------------------------------------

    async def benchmark_text(
        self,
        model_name: str,
        positive_pdfs: Sequence[str],
        negative_pdfs: Sequence[str],
        context: TextBenchmarkContext,
    ) -> TextBenchmarkResult:
        """
        Benchmark one text model's categorization and extraction on OCR text.

        Returns:
            Phase result, disqualified when the model does not fit in memory
            or fails to load
        """
        factory = context.text_factory
        await factory.release()

        reason = self._memory_estimator.insufficient_memory_reason(text_model_name=model_name)
        if reason:
            self._logger.warning("model_disqualified", model=model_name, reason=reason)
            return TextBenchmarkResult.disqualified(model_name, reason)

        try:
            try:
                await factory.preload(model_name, self.configuration)
            except Exception as e:
                reason = f"Failed to load model: {describe_error(e)}"
                self._logger.warning("model_disqualified", model=model_name, reason=reason)
                return TextBenchmarkResult.disqualified(model_name, reason)

            start = time.monotonic()
            document_results = []
            for is_positive, paths in ((True, positive_pdfs), (False, negative_pdfs)):
                self._progress("    ✓ " if is_positive else "  ✗ ")
                for pdf_path in paths:
                    result = await self._benchmark_text_document(pdf_path, is_positive, context)
                    self._progress(str(result.score))
                    document_results.append(result)
            self._progress("\n")
            elapsed = time.monotonic() - start
        finally:
            await factory.release()

        result = TextBenchmarkResult.from_results(model_name, document_results, elapsed)
        self._logger.log_event(
            "text_benchmarked",
            model=model_name,
            total_score=result.total_score,
            max_score=result.max_score,
            elapsed_seconds=round(elapsed, 3),
        )
        return result

    async def _benchmark_text_document(
        self, pdf_path: str, is_positive: bool, context: TextBenchmarkContext
    ) -> TextDocumentResult:
        filename = os.path.basename(pdf_path)

        def result(categorization_correct: bool, extraction_correct: bool) -> TextDocumentResult:
            return TextDocumentResult(
                filename=filename,
                is_positive_sample=is_positive,
                categorization_correct=categorization_correct,
                extraction_correct=extraction_correct,
            )

        ocr_text = context.ocr_texts.get(pdf_path)
        if not ocr_text:
            return result(False, False)

        provider = context.text_factory.make_provider()
        if provider is None:
            return result(False, False)

        predicted = await self._categorize_text(ocr_text, provider, context.timeout_seconds)
        if predicted is None:
            return result(False, False)

        categorization_correct = predicted == is_positive
        if not is_positive:
            # Nothing to extract from a negative sample
            return result(categorization_correct, categorization_correct)
        if not categorization_correct:
            return result(False, False)

        extraction_correct = await self._score_extraction(pdf_path, ocr_text, provider, context)
        return result(True, extraction_correct)

    async def _categorize_text(
        self, ocr_text: str, provider: ITextProvider, timeout_seconds: float
    ) -> Optional[bool]:
        """Returns None on error or timeout."""
        try:
            response = await asyncio.wait_for(
                provider.generate(
                    system_prompt=CATEGORIZATION_SYSTEM_PROMPT,
                    user_prompt=self.document_type.text_categorization_prompt(ocr_text),
                    max_tokens=get_benchmark_setting("categorization_max_tokens"),
                ),
                timeout=timeout_seconds,
            )
        except Exception as e:
            self._logger.log_event("categorization_failed", error=describe_error(e))
            return None
        return parse_yes_no_response(response)

    async def _score_extraction(
        self, pdf_path: str, ocr_text: str, provider: ITextProvider, context: TextBenchmarkContext
    ) -> bool:
        ground_truth = context.ground_truths.get(pdf_path)
        if ground_truth is None:
            return False

        try:
            extraction = await asyncio.wait_for(
                provider.extract_data(self.document_type, ocr_text),
                timeout=context.timeout_seconds,
            )
        except Exception as e:
            self._logger.log_event("extraction_failed", file=os.path.basename(pdf_path), error=describe_error(e))
            return False

        scoring = FuzzyMatcher.score_document(
            expected=ground_truth,
            actual_is_match=True,
            actual_date=format_date(extraction.date) if extraction.date else None,
            actual_secondary_field=extraction.secondary_field,
            actual_patient_name=extraction.patient_name,
        )
        return scoring.extraction_correct

    # ------------------------------------------------------------------
    # Full pair
    # ------------------------------------------------------------------

    async def benchmark_model_pair(
        self,
        pair: ModelPair,
        pdf_paths: Sequence[str],
        ground_truths: Dict[str, GroundTruth],
        timeout_seconds: float = 30.0,
    ) -> ModelPairResult:
        """
        Benchmark a visual + text pair against verified ground truths.

        Documents without a ground truth entry are skipped. A timeout on any
        single document disqualifies the whole pair and discards the partial
        results; any other per-document error scores that document 0.

        Args:
            pair: Models under test
            pdf_paths: Documents in submission order
            ground_truths: Expected values keyed by document path
            timeout_seconds: Limit for processing one document

        Returns:
            ModelPairResult, possibly disqualified
        """
        if self._detector_factory is None:
            raise ValueError("benchmark_model_pair requires a detector_factory")
        factory = self._detector_factory

        self._logger.log_event("pair_started", pair=str(pair), documents=len(pdf_paths))
        try:
            reason = self._memory_estimator.insufficient_memory_reason(
                pair.visual_model_name, pair.text_model_name
            )
            if reason:
                return self._disqualify(pair, reason)

            pair_config = self.configuration.with_models(pair.visual_model_name, pair.text_model_name)
            try:
                await factory.preload_models(pair_config)
            except Exception as e:
                return self._disqualify(pair, f"Failed to load models: {describe_error(e)}")

            return await self._benchmark_documents(
                pair, pdf_paths, ground_truths, pair_config, timeout_seconds
            )
        finally:
            await factory.release_models()

    async def _benchmark_documents(
        self,
        pair: ModelPair,
        pdf_paths: Sequence[str],
        ground_truths: Dict[str, GroundTruth],
        config: Configuration,
        timeout_seconds: float,
    ) -> ModelPairResult:
        document_results: List[DocumentResult] = []
        total = len(pdf_paths)
        start = time.monotonic()

        for index, pdf_path in enumerate(pdf_paths, start=1):
            filename = os.path.basename(pdf_path)
            truth = ground_truths.get(pdf_path)
            if truth is None:
                self._progress(f"    [{index}/{total}] {filename} - Skipped (no ground truth)\n")
                continue

            try:
                result = await asyncio.wait_for(
                    self._process_single_document(pdf_path, config, truth),
                    timeout=timeout_seconds,
                )
            except (asyncio.TimeoutError, BenchmarkTimeout):
                return self._disqualify(pair, f"Exceeded {int(timeout_seconds)}s timeout on {filename}")
            except Exception as e:
                self._logger.log_event("document_failed", file=filename, error=describe_error(e))
                result = DocumentResult(
                    filename=filename,
                    is_positive_sample=truth.is_match,
                    predicted_is_match=not truth.is_match,
                    document_score=0,
                )

            self._progress(f"    [{index}/{total}] {filename} [{result.document_score}/2]\n")
            document_results.append(result)

        return ModelPairResult(
            pair=pair,
            metrics=BenchmarkMetrics.compute(document_results),
            document_results=document_results,
            elapsed_seconds=time.monotonic() - start,
        )

    async def _process_single_document(
        self, pdf_path: str, config: Configuration, ground_truth: GroundTruth
    ) -> DocumentResult:
        detector = await self._detector_factory.make_detector(config, self.document_type)
        is_match = await detector.categorize(pdf_path)

        actual_date = actual_secondary = actual_patient = None
        if is_match:
            extraction = await detector.extract_data()
            if extraction.date is not None:
                actual_date = format_date(extraction.date)
            actual_secondary = extraction.secondary_field
            actual_patient = extraction.patient_name

        scoring = FuzzyMatcher.score_document(
            expected=ground_truth,
            actual_is_match=is_match,
            actual_date=actual_date,
            actual_secondary_field=actual_secondary,
            actual_patient_name=actual_patient,
        )
        return DocumentResult(
            filename=os.path.basename(pdf_path),
            is_positive_sample=ground_truth.is_match,
            predicted_is_match=is_match,
            document_score=scoring.score,
        )

    def _disqualify(self, pair: ModelPair, reason: str) -> ModelPairResult:
        self._logger.warning("pair_disqualified", pair=str(pair), reason=reason)
        return ModelPairResult.disqualified(pair, reason)

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def cleanup_benchmarked_models(
        self,
        pairs: Iterable[ModelPair],
        keep_visual: Optional[str] = None,
        keep_text: Optional[str] = None,
        extra_model_names: Iterable[str] = (),
    ) -> List[str]:
        """
        Delete cached model files of every benchmarked model except the winners.

        extra_model_names adds models benchmarked outside a pair, such as
        single-phase candidates.

        Returns:
            Names of the models whose cache was deleted
        """
        if self._model_cache is None:
            raise ValueError("cleanup_benchmarked_models requires a model_cache")
        names = set()
        for pair in pairs:
            names.add(pair.visual_model_name)
            names.add(pair.text_model_name)
        names.update(extra_model_names)
        keep = {name for name in (keep_visual, keep_text) if name}
        return self._model_cache.cleanup(sorted(names), keep=keep)

    def _progress(self, text: str) -> None:
        if self.verbose:
            print(text, end="", flush=True)
