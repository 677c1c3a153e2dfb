"""Value objects for the benchmark domain."""

from .ground_truth import GroundTruth, GroundTruthMetadata
from .pair_results import ModelPair, DocumentResult, BenchmarkMetrics, ModelPairResult
from .phase_results import (
    VisualDocumentResult,
    VisualBenchmarkResult,
    TextDocumentResult,
    TextBenchmarkResult,
)

__all__ = [
    "GroundTruth",
    "GroundTruthMetadata",
    "ModelPair",
    "DocumentResult",
    "BenchmarkMetrics",
    "ModelPairResult",
    "VisualDocumentResult",
    "VisualBenchmarkResult",
    "TextDocumentResult",
    "TextBenchmarkResult",
]
