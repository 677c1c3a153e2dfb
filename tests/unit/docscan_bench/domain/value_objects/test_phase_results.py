"""
Unit tests for single-phase result value objects.
"""

import pytest
from pydantic import ValidationError

from docscan_bench.domain.value_objects import (
    TextBenchmarkResult,
    TextDocumentResult,
    VisualBenchmarkResult,
    VisualDocumentResult,
)


def visual(positive, predicted):
    return VisualDocumentResult(filename="x.pdf", is_positive_sample=positive, predicted_is_match=predicted)


def text(categorization, extraction):
    return TextDocumentResult(
        filename="x.pdf", is_positive_sample=True,
        categorization_correct=categorization, extraction_correct=extraction,
    )


class TestVisualBenchmarkResult:

    def test_one_point_per_correct_categorization(self):
        """Visual scoring counts correct verdicts out of the document count."""
        result = VisualBenchmarkResult.from_results(
            "org/vision-2B", [visual(True, True), visual(False, True), visual(False, False)], 4.0
        )

        assert result.total_score == 2
        assert result.max_score == 3
        assert result.score == pytest.approx(2 / 3)
        assert (result.true_positives, result.false_positives, result.true_negatives, result.false_negatives) == (1, 1, 1, 0)

    def test_empty_result_scores_zero(self):
        """No documents scores zero."""
        assert VisualBenchmarkResult(model_name="m").score == 0.0

    def test_disqualified(self):
        """A disqualified result keeps its reason and no documents."""
        result = VisualBenchmarkResult.disqualified("m", "Worker crashed (signal 9)")

        assert result.is_disqualified is True
        assert result.document_results == []

    def test_disqualification_requires_reason(self):
        """Validation rejects a disqualification without a reason."""
        with pytest.raises(ValidationError):
            VisualBenchmarkResult(model_name="m", is_disqualified=True)


class TestTextBenchmarkResult:

    def test_two_points_per_document(self):
        """Text scoring awards categorization and extraction separately."""
        result = TextBenchmarkResult.from_results(
            "org/text-3B", [text(True, True), text(True, False), text(False, False)], 2.0
        )

        assert result.total_score == 3
        assert result.max_score == 6
        assert result.score == 0.5
        assert (result.fully_correct_count, result.partially_correct_count, result.fully_wrong_count) == (1, 1, 1)

    def test_survives_json_round_trip(self):
        """Results cross process boundaries as JSON without losing aggregates."""
        result = TextBenchmarkResult.from_results("org/text-3B", [text(True, True)], 1.25)

        restored = TextBenchmarkResult.model_validate_json(result.model_dump_json())

        assert restored == result
        assert restored.total_score == 2

    def test_negative_elapsed_rejected(self):
        """Elapsed time cannot be negative."""
        with pytest.raises(ValidationError):
            TextBenchmarkResult(model_name="m", elapsed_seconds=-0.5)
