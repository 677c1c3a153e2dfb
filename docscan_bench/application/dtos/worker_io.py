"""
Worker IPC DTOs

Messages exchanged with an isolated benchmark worker process. The parent
writes a BenchmarkWorkerInput as JSON, the worker answers with a
BenchmarkWorkerOutput. Both are plain data; the only behaviour is building
a disqualified answer for a request without running any model.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from docscan_bench.config import Configuration
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.value_objects import GroundTruth, TextBenchmarkResult, VisualBenchmarkResult


class BenchmarkPhase(str, Enum):
    VISUAL = "visual"
    TEXT = "text"


class TextPhaseData(BaseModel):
    """Pre-extracted OCR text and ground truth, keyed by document path."""

    ocr_texts: Dict[str, str] = Field(default_factory=dict)
    ground_truths: Dict[str, GroundTruth] = Field(default_factory=dict)


class VisualPhaseOutput(BaseModel):
    phase: Literal["visual"] = "visual"
    result: VisualBenchmarkResult


class TextPhaseOutput(BaseModel):
    phase: Literal["text"] = "text"
    result: TextBenchmarkResult


class BenchmarkWorkerOutput(BaseModel):
    """
    Result of one worker run: exactly one phase result, tagged by phase.
    """

    payload: Annotated[Union[VisualPhaseOutput, TextPhaseOutput], Field(discriminator="phase")]

    @classmethod
    def visual(cls, result: VisualBenchmarkResult) -> "BenchmarkWorkerOutput":
        return cls(payload=VisualPhaseOutput(result=result))

    @classmethod
    def text(cls, result: TextBenchmarkResult) -> "BenchmarkWorkerOutput":
        return cls(payload=TextPhaseOutput(result=result))

    @property
    def phase(self) -> BenchmarkPhase:
        return BenchmarkPhase(self.payload.phase)

    @property
    def result(self) -> Union[VisualBenchmarkResult, TextBenchmarkResult]:
        return self.payload.result

    @property
    def visual_result(self) -> Optional[VisualBenchmarkResult]:
        return self.payload.result if isinstance(self.payload, VisualPhaseOutput) else None

    @property
    def text_result(self) -> Optional[TextBenchmarkResult]:
        return self.payload.result if isinstance(self.payload, TextPhaseOutput) else None


class BenchmarkWorkerInput(BaseModel):
    """
    Request for one worker run.

    Attributes:
        phase: Which model type to benchmark
        model_name: Model under test
        positive_pdfs: Documents that match document_type
        negative_pdfs: Documents that do not
        timeout_seconds: Per-document inference timeout
        document_type: Type being benchmarked
        configuration: Full runtime configuration
        verbose: Print per-document progress in the worker
        text_data: OCR texts and ground truths, text phase only
    """

    phase: BenchmarkPhase
    model_name: str
    positive_pdfs: List[str] = Field(default_factory=list)
    negative_pdfs: List[str] = Field(default_factory=list)
    timeout_seconds: float = Field(gt=0)
    document_type: DocumentType
    configuration: Configuration = Field(default_factory=Configuration)
    verbose: bool = False
    text_data: Optional[TextPhaseData] = None

    @property
    def document_count(self) -> int:
        return len(self.positive_pdfs) + len(self.negative_pdfs)

    def make_disqualified_output(self, reason: str) -> BenchmarkWorkerOutput:
        """Build a disqualified answer for this request's phase."""
        if self.phase is BenchmarkPhase.VISUAL:
            return BenchmarkWorkerOutput.visual(VisualBenchmarkResult.disqualified(self.model_name, reason))
        return BenchmarkWorkerOutput.text(TextBenchmarkResult.disqualified(self.model_name, reason))
