"""
Value objects for full model-pair benchmarks.

Pure data structures with no I/O dependencies. Metrics are a pure function
of the document results they summarize.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class ModelPair:
    """One visual categorizer plus one text extractor, evaluated together."""
    visual_model_name: str
    text_model_name: str

    def __str__(self) -> str:
        return f"{self.visual_model_name} + {self.text_model_name}"


@dataclass
class DocumentResult:
    """
    Result for a single document within a pair benchmark.

    Attributes:
        filename: Base name of the document
        is_positive_sample: Ground truth says the document matches the type
        predicted_is_match: The pair's categorization verdict
        document_score: 0 (wrong), 1 (categorized, fields wrong) or 2 (fully correct)
    """
    filename: str
    is_positive_sample: bool
    predicted_is_match: bool
    document_score: int

    def __post_init__(self):
        """Validate invariants."""
        if self.document_score not in (0, 1, 2):
            raise ValueError(f"document_score must be 0, 1 or 2, got {self.document_score}")

    @property
    def categorization_correct(self) -> bool:
        return self.predicted_is_match == self.is_positive_sample

    @property
    def is_fully_correct(self) -> bool:
        return self.document_score == 2


@dataclass
class BenchmarkMetrics:
    """
    Aggregate over a set of document results.

    score is total_score / max_score, or 0.0 for an empty set.
    """
    document_count: int = 0
    total_score: int = 0
    max_score: int = 0
    has_negative_samples: bool = False
    fully_correct_count: int = 0
    partially_correct_count: int = 0
    fully_wrong_count: int = 0
    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0

    @property
    def score(self) -> float:
        if self.document_count == 0:
            return 0.0
        return self.total_score / self.max_score

    @classmethod
    def compute(cls, results: Sequence[DocumentResult]) -> "BenchmarkMetrics":
        scores = [r.document_score for r in results]
        return cls(
            document_count=len(results),
            total_score=sum(scores),
            max_score=2 * len(results),
            has_negative_samples=any(not r.is_positive_sample for r in results),
            fully_correct_count=scores.count(2),
            partially_correct_count=scores.count(1),
            fully_wrong_count=scores.count(0),
            true_positives=sum(1 for r in results if r.is_positive_sample and r.predicted_is_match),
            false_positives=sum(1 for r in results if not r.is_positive_sample and r.predicted_is_match),
            true_negatives=sum(1 for r in results if not r.is_positive_sample and not r.predicted_is_match),
            false_negatives=sum(1 for r in results if r.is_positive_sample and not r.predicted_is_match),
        )


@dataclass
class ModelPairResult:
    """
    Outcome of benchmarking one model pair.

    Disqualified results carry empty metrics and a human-readable reason;
    they are reported but never ranked.
    """
    pair: ModelPair
    metrics: BenchmarkMetrics
    document_results: List[DocumentResult] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    is_disqualified: bool = False
    disqualification_reason: Optional[str] = None

    def __post_init__(self):
        """Validate invariants."""
        if self.is_disqualified and not self.disqualification_reason:
            raise ValueError("Disqualified results require a disqualification_reason")
        if self.elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds cannot be negative, got {self.elapsed_seconds}")

    @property
    def score(self) -> float:
        return self.metrics.score

    @property
    def total_score(self) -> int:
        return self.metrics.total_score

    @property
    def max_score(self) -> int:
        return self.metrics.max_score

    @property
    def model_name(self) -> str:
        return str(self.pair)

    @classmethod
    def disqualified(cls, pair: ModelPair, reason: str) -> "ModelPairResult":
        return cls(
            pair=pair,
            metrics=BenchmarkMetrics.compute([]),
            is_disqualified=True,
            disqualification_reason=reason,
        )
