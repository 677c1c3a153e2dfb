"""
Value objects for single-model-type benchmark phases.

These results cross the worker process boundary, so they are pydantic
models. Every aggregate is derived from document_results on access, which
keeps the serialized form minimal and lossless.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class VisualDocumentResult(BaseModel):
    """Categorization verdict of a visual model for one document."""

    filename: str
    is_positive_sample: bool
    predicted_is_match: bool

    @property
    def correct(self) -> bool:
        return self.predicted_is_match == self.is_positive_sample

    @property
    def score(self) -> int:
        return 1 if self.correct else 0


class TextDocumentResult(BaseModel):
    """Categorization and extraction verdicts of a text model for one document."""

    filename: str
    is_positive_sample: bool
    categorization_correct: bool
    extraction_correct: bool

    @property
    def score(self) -> int:
        return int(self.categorization_correct) + int(self.extraction_correct)


class _PhaseResult(BaseModel):
    model_name: str
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
    is_disqualified: bool = False
    disqualification_reason: Optional[str] = None

    @model_validator(mode="after")
    def _reason_required_when_disqualified(self):
        if self.is_disqualified and not self.disqualification_reason:
            raise ValueError("Disqualified results require a disqualification_reason")
        return self

    @property
    def total_score(self) -> int:
        return sum(r.score for r in self.document_results)

    @property
    def score(self) -> float:
        if self.max_score == 0:
            return 0.0
        return self.total_score / self.max_score


class VisualBenchmarkResult(_PhaseResult):
    """
    Aggregate of a visual-phase run: one point per correct categorization.
    """

    document_results: List[VisualDocumentResult] = Field(default_factory=list)

    @property
    def max_score(self) -> int:
        return len(self.document_results)

    @property
    def true_positives(self) -> int:
        return sum(1 for r in self.document_results if r.is_positive_sample and r.predicted_is_match)

    @property
    def false_positives(self) -> int:
        return sum(1 for r in self.document_results if not r.is_positive_sample and r.predicted_is_match)

    @property
    def true_negatives(self) -> int:
        return sum(1 for r in self.document_results if not r.is_positive_sample and not r.predicted_is_match)

    @property
    def false_negatives(self) -> int:
        return sum(1 for r in self.document_results if r.is_positive_sample and not r.predicted_is_match)

    @classmethod
    def from_results(
        cls, model_name: str, document_results: List[VisualDocumentResult], elapsed_seconds: float
    ) -> "VisualBenchmarkResult":
        return cls(model_name=model_name, document_results=document_results, elapsed_seconds=elapsed_seconds)

    @classmethod
    def disqualified(cls, model_name: str, reason: str) -> "VisualBenchmarkResult":
        return cls(model_name=model_name, is_disqualified=True, disqualification_reason=reason)


class TextBenchmarkResult(_PhaseResult):
    """
    Aggregate of a text-phase run: up to two points per document.
    """

    document_results: List[TextDocumentResult] = Field(default_factory=list)

    @property
    def max_score(self) -> int:
        return 2 * len(self.document_results)

    @property
    def fully_correct_count(self) -> int:
        return sum(1 for r in self.document_results if r.score == 2)

    @property
    def partially_correct_count(self) -> int:
        return sum(1 for r in self.document_results if r.score == 1)

    @property
    def fully_wrong_count(self) -> int:
        return sum(1 for r in self.document_results if r.score == 0)

    @classmethod
    def from_results(
        cls, model_name: str, document_results: List[TextDocumentResult], elapsed_seconds: float
    ) -> "TextBenchmarkResult":
        return cls(model_name=model_name, document_results=document_results, elapsed_seconds=elapsed_seconds)

    @classmethod
    def disqualified(cls, model_name: str, reason: str) -> "TextBenchmarkResult":
        return cls(model_name=model_name, is_disqualified=True, disqualification_reason=reason)
