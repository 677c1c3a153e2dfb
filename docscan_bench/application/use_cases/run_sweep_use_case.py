"""
RunSweepUseCase

Top-level benchmark sweep over every candidate model:
1. Enumerate the positive and negative corpus
2. Extract document text once
3. Ensure ground truth exists for every document
4. Visual phase: each visual candidate in its own worker process
5. Text phase: each text candidate in its own worker process
6. Optional in-process benchmark of explicit visual + text pairs
7. Rank, recommend the winners, optionally clean up the model cache

Candidates run strictly one after another. A candidate that crashes, hangs
or fails to load is disqualified; only corpus-level errors abort the sweep.
"""

from typing import Iterable, List, Optional, TypeVar

from docscan_bench.application.dtos import (
    BenchmarkPhase,
    BenchmarkWorkerInput,
    RunSweepRequest,
    RunSweepResponse,
    TextPhaseData,
    outcome_to_output,
)
from docscan_bench.application.interfaces import IWorkerRunner
from docscan_bench.application.use_cases.benchmark_engine import BenchmarkEngine
from docscan_bench.application.use_cases.document_corpus import DocumentCorpus
from docscan_bench.application.use_cases.generate_ground_truths_use_case import GenerateGroundTruthsUseCase
from docscan_bench.config import Configuration
from docscan_bench.domain.errors import BenchmarkError
from docscan_bench.domain.interfaces import IOCREngine
from docscan_bench.domain.services import best_model_name, ranked_by_score
from docscan_bench.domain.value_objects import TextBenchmarkResult, VisualBenchmarkResult
from docscan_bench.logging_utils import ComponentType, StructuredLogger

T = TypeVar("T")


def leaderboard(results: Iterable[T]) -> List[T]:
    """Ranked results first, disqualified ones after them in submission order."""
    results = list(results)
    return ranked_by_score(results) + [r for r in results if r.is_disqualified]


class RunSweepUseCase:
    """
    Use case for benchmarking all candidate models against one corpus.

    Design Principles:
    - Dependency injection for every collaborator
    - Worker isolation through IWorkerRunner for single-model phases
    - The same BenchmarkEngine code path for in-process pair runs
    """

    def __init__(
        self,
        configuration: Configuration,
        corpus: DocumentCorpus,
        ground_truths: GenerateGroundTruthsUseCase,
        ocr_engine: IOCREngine,
        worker_runner: IWorkerRunner,
        engine: BenchmarkEngine,
        logger: Optional[StructuredLogger] = None,
    ):
        self._configuration = configuration
        self._corpus = corpus
        self._ground_truths = ground_truths
        self._ocr_engine = ocr_engine
        self._worker_runner = worker_runner
        self._engine = engine
        self._logger = logger or StructuredLogger(ComponentType.SWEEP)

    async def execute(self, request: RunSweepRequest) -> RunSweepResponse:
        """
        Run the sweep.

        Args:
            request: Corpus, candidates and options

        Returns:
            RunSweepResponse with leaderboards and recommendations

        Raises:
            BenchmarkError: If a corpus directory is missing or empty
            ModelLoadFailed: If the ground truth oracle cannot be loaded
        """
        positive_pdfs = self._enumerate(request.positive_dir)
        negative_pdfs = self._enumerate(request.negative_dir)
        all_pdfs = positive_pdfs + negative_pdfs
        self._logger.log_event(
            "sweep_started",
            document_type=request.document_type.value,
            positive=len(positive_pdfs),
            negative=len(negative_pdfs),
            visual_candidates=len(request.visual_models),
            text_candidates=len(request.text_models),
            pairs=len(request.pairs),
        )

        ocr_texts = await self._corpus.pre_extract_ocr_texts(all_pdfs, self._ocr_engine)
        ground_truths = await self._ground_truths.execute(
            positive_pdfs, negative_pdfs, ocr_texts, skip_existing=request.skip_existing
        )

        visual_results: List[VisualBenchmarkResult] = []
        for model_name in request.visual_models:
            worker_input = self._worker_input(
                BenchmarkPhase.VISUAL, model_name, positive_pdfs, negative_pdfs, request
            )
            visual_results.append(await self._run_worker(worker_input))

        text_data = TextPhaseData(ocr_texts=ocr_texts, ground_truths=ground_truths)
        text_results: List[TextBenchmarkResult] = []
        for model_name in request.text_models:
            worker_input = self._worker_input(
                BenchmarkPhase.TEXT, model_name, positive_pdfs, negative_pdfs, request, text_data
            )
            text_results.append(await self._run_worker(worker_input))

        pair_results = []
        for pair in request.pairs:
            pair_results.append(
                await self._engine.benchmark_model_pair(pair, all_pdfs, ground_truths, request.timeout_seconds)
            )

        response = RunSweepResponse(
            visual_results=leaderboard(visual_results),
            text_results=leaderboard(text_results),
            pair_results=leaderboard(pair_results),
            ground_truths=ground_truths,
        )
        self._recommend(response)

        if request.cleanup:
            response.deleted_models = self._engine.cleanup_benchmarked_models(
                request.pairs,
                keep_visual=response.recommended_visual_model,
                keep_text=response.recommended_text_model,
                extra_model_names=request.visual_models + request.text_models,
            )

        self._logger.log_event(
            "sweep_finished",
            recommended_visual=response.recommended_visual_model,
            recommended_text=response.recommended_text_model,
            deleted=len(response.deleted_models),
        )
        return response

    def _enumerate(self, directory: str) -> List[str]:
        pdfs = self._corpus.enumerate_pdfs(directory)
        if not pdfs:
            raise BenchmarkError(f"No PDF files found in {directory}")
        return pdfs

    def _worker_input(
        self,
        phase: BenchmarkPhase,
        model_name: str,
        positive_pdfs: List[str],
        negative_pdfs: List[str],
        request: RunSweepRequest,
        text_data: Optional[TextPhaseData] = None,
    ) -> BenchmarkWorkerInput:
        return BenchmarkWorkerInput(
            phase=phase,
            model_name=model_name,
            positive_pdfs=positive_pdfs,
            negative_pdfs=negative_pdfs,
            timeout_seconds=request.timeout_seconds,
            document_type=request.document_type,
            configuration=self._configuration,
            verbose=self._configuration.verbose,
            text_data=text_data,
        )

    async def _run_worker(self, worker_input: BenchmarkWorkerInput):
        outcome = await self._worker_runner.run(worker_input)
        result = outcome_to_output(worker_input, outcome).result
        if result.is_disqualified:
            self._logger.warning(
                "model_disqualified",
                model=worker_input.model_name,
                phase=worker_input.phase.value,
                reason=result.disqualification_reason,
            )
        return result

    @staticmethod
    def _recommend(response: RunSweepResponse) -> None:
        """Phase winners, falling back to the best pair's models when a phase did not run."""
        best_pair = next((r for r in response.pair_results if not r.is_disqualified), None)
        response.recommended_visual_model = best_model_name(response.visual_results) or (
            best_pair.pair.visual_model_name if best_pair else None
        )
        response.recommended_text_model = best_model_name(response.text_results) or (
            best_pair.pair.text_model_name if best_pair else None
        )
