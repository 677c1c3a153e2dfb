"""
Use Cases for the benchmark application layer
"""

from .benchmark_engine import BenchmarkEngine, TextBenchmarkContext, describe_error
from .document_corpus import DocumentCorpus
from .generate_ground_truths_use_case import GenerateGroundTruthsUseCase
from .run_sweep_use_case import RunSweepUseCase, leaderboard

__all__ = [
    "BenchmarkEngine",
    "TextBenchmarkContext",
    "describe_error",
    "DocumentCorpus",
    "GenerateGroundTruthsUseCase",
    "RunSweepUseCase",
    "leaderboard",
]
