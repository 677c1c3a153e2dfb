"""
Infrastructure: Benchmark Factory

Dependency injection factory for assembling all benchmark components.
Single source of truth for component wiring; the environment is read here
and nowhere else.
"""

import os
import shlex
from typing import List, Mapping, Optional

from docscan_bench.application.use_cases import (
    BenchmarkEngine,
    DocumentCorpus,
    GenerateGroundTruthsUseCase,
    RunSweepUseCase,
)
from docscan_bench.config import Configuration, get_benchmark_setting
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.services import MemoryEstimator
from docscan_bench.infrastructure.cache import ModelCache
from docscan_bench.infrastructure.documents import PDF2ImageRenderer, TesseractOCREngine
from docscan_bench.infrastructure.executors import SubprocessRunner
from docscan_bench.infrastructure.models import (
    DocumentDetectorFactory,
    TransformersTextModelFactory,
    TransformersVisualModelFactory,
)
from docscan_bench.infrastructure.storage import SidecarGroundTruthStore


class BenchmarkFactory:
    """
    Factory for creating benchmark components.

    Implements dependency injection pattern.
    """

    @staticmethod
    def create_memory_estimator() -> MemoryEstimator:
        return MemoryEstimator(
            headroom_factor=get_benchmark_setting("memory_headroom_factor"),
            overhead_factor=get_benchmark_setting("memory_overhead_factor"),
            default_bytes_per_param=get_benchmark_setting("default_bytes_per_param"),
        )

    @staticmethod
    def create_model_cache(
        configuration: Configuration, environ: Optional[Mapping[str, str]] = None
    ) -> ModelCache:
        """The configured cache directory wins over the Hugging Face environment."""
        if configuration.model_cache_dir:
            return ModelCache(os.path.expanduser(configuration.model_cache_dir))
        return ModelCache.from_environment(environ)

    @staticmethod
    def worker_command_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[List[str]]:
        environ = os.environ if environ is None else environ
        command = environ.get("DOCSCAN_WORKER_COMMAND", "").strip()
        return shlex.split(command) if command else None

    @staticmethod
    def create_worker_runner(environ: Optional[Mapping[str, str]] = None) -> SubprocessRunner:
        return SubprocessRunner(
            worker_command=BenchmarkFactory.worker_command_from_env(environ),
            model_loading_buffer_seconds=get_benchmark_setting("model_loading_buffer_seconds"),
            kill_escalation_seconds=get_benchmark_setting("kill_escalation_seconds"),
        )

    @staticmethod
    def create_ocr_engine(configuration: Configuration) -> TesseractOCREngine:
        return TesseractOCREngine(renderer=PDF2ImageRenderer(), dpi=configuration.processing.pdf_dpi)

    @staticmethod
    def create_engine(
        configuration: Configuration,
        document_type: DocumentType,
        verbose: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> BenchmarkEngine:
        """
        Create a BenchmarkEngine backed by transformers models.

        Args:
            configuration: Runtime configuration
            document_type: Type being benchmarked
            verbose: Print per-document progress
            environ: Environment for cache resolution, os.environ when omitted

        Returns:
            Fully configured BenchmarkEngine instance
        """
        renderer = PDF2ImageRenderer()
        detector_factory = DocumentDetectorFactory(
            visual_factory=TransformersVisualModelFactory(),
            text_factory=TransformersTextModelFactory(),
            renderer=renderer,
            ocr_engine=BenchmarkFactory.create_ocr_engine(configuration),
        )
        return BenchmarkEngine(
            configuration=configuration,
            document_type=document_type,
            verbose=verbose,
            detector_factory=detector_factory,
            pdf_renderer=renderer,
            memory_estimator=BenchmarkFactory.create_memory_estimator(),
            model_cache=BenchmarkFactory.create_model_cache(configuration, environ),
        )

    @staticmethod
    def create_run_sweep_use_case(
        configuration: Configuration,
        document_type: DocumentType,
        environ: Optional[Mapping[str, str]] = None,
    ) -> RunSweepUseCase:
        """
        Create fully wired RunSweepUseCase.

        The ground truth oracle is the configured text model.
        """
        store = SidecarGroundTruthStore()
        return RunSweepUseCase(
            configuration=configuration,
            corpus=DocumentCorpus(store),
            ground_truths=GenerateGroundTruthsUseCase(
                configuration=configuration,
                document_type=document_type,
                store=store,
                text_factory=TransformersTextModelFactory(),
            ),
            ocr_engine=BenchmarkFactory.create_ocr_engine(configuration),
            worker_runner=BenchmarkFactory.create_worker_runner(environ),
            engine=BenchmarkFactory.create_engine(
                configuration, document_type, verbose=configuration.verbose, environ=environ
            ),
        )
