"""
Sweep DTOs

Request and response contracts for RunSweepUseCase.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.value_objects import (
    GroundTruth,
    ModelPair,
    ModelPairResult,
    TextBenchmarkResult,
    VisualBenchmarkResult,
)


@dataclass
class RunSweepRequest:
    """
    Request DTO for RunSweepUseCase.

    Attributes:
        positive_dir: Directory of documents of document_type
        negative_dir: Directory of documents of any other type
        document_type: Type being benchmarked
        timeout_seconds: Per-document inference timeout
        visual_models: Candidates for the visual phase
        text_models: Candidates for the text phase
        pairs: Pairs to benchmark in-process after both phases
        skip_existing: Keep existing ground truth sidecars
        cleanup: Delete cached files of every candidate except the winners
    """
    positive_dir: str
    negative_dir: str
    document_type: DocumentType
    timeout_seconds: float
    visual_models: List[str] = field(default_factory=list)
    text_models: List[str] = field(default_factory=list)
    pairs: List[ModelPair] = field(default_factory=list)
    skip_existing: bool = True
    cleanup: bool = False

    def __post_init__(self):
        """Validate invariants."""
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


@dataclass
class RunSweepResponse:
    """
    Leaderboards of one sweep.

    Every list holds all candidates, ranked ones first in rank order and
    disqualified ones after them in submission order.
    """
    visual_results: List[VisualBenchmarkResult] = field(default_factory=list)
    text_results: List[TextBenchmarkResult] = field(default_factory=list)
    pair_results: List[ModelPairResult] = field(default_factory=list)
    ground_truths: Dict[str, GroundTruth] = field(default_factory=dict)
    recommended_visual_model: Optional[str] = None
    recommended_text_model: Optional[str] = None
    deleted_models: List[str] = field(default_factory=list)

    @property
    def recommended_pair(self) -> Optional[ModelPair]:
        if self.recommended_visual_model is None or self.recommended_text_model is None:
            return None
        return ModelPair(self.recommended_visual_model, self.recommended_text_model)
