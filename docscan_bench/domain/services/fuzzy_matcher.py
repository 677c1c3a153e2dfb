"""
Domain Service: Fuzzy Matcher

Tolerant comparison of extracted values against ground truth, and the
single per-document scoring rule every aggregate is built on.

All functions are pure and total: malformed input yields a mismatch, never
an exception.
"""

import math
from dataclasses import dataclass
from typing import Optional

from docscan_bench.domain.services.date_parsing import parse_date
from docscan_bench.domain.value_objects.ground_truth import GroundTruth

NUMBER_TOLERANCE = 0.001


@dataclass(frozen=True)
class ScoringResult:
    """
    Outcome of scoring one document.

    Attributes:
        categorization_correct: Predicted match flag equals the expected one
        extraction_correct: All expected fields were reproduced (or nothing
            needed extracting)
    """
    categorization_correct: bool
    extraction_correct: bool

    @property
    def score(self) -> int:
        return int(self.categorization_correct) + int(self.extraction_correct)


class FuzzyMatcher:
    """Stateless matcher; every method is a static pure function."""

    @staticmethod
    def dates_match(expected: Optional[str], actual: Optional[str]) -> bool:
        if expected is None or actual is None:
            return expected is None and actual is None
        expected_date = parse_date(expected)
        actual_date = parse_date(actual)
        if expected_date is None or actual_date is None:
            return False
        return expected_date == actual_date

    @staticmethod
    def numbers_match(expected: Optional[str], actual: Optional[str]) -> bool:
        if expected is None or actual is None:
            return expected is None and actual is None
        try:
            expected_number = float(expected.strip())
            actual_number = float(actual.strip())
        except ValueError:
            return False
        if math.isnan(expected_number) or math.isnan(actual_number):
            return False
        return abs(expected_number - actual_number) < NUMBER_TOLERANCE

    @staticmethod
    def fields_match(expected: Optional[str], actual: Optional[str]) -> bool:
        if expected is None or actual is None:
            return expected is None and actual is None
        return FuzzyMatcher.normalize_field(expected) == FuzzyMatcher.normalize_field(actual)

    @staticmethod
    def normalize_field(value: str) -> str:
        """Case-fold, turn underscores into spaces and collapse whitespace."""
        return " ".join(value.casefold().replace("_", " ").split())

    @staticmethod
    def score_document(
        expected: GroundTruth,
        actual_is_match: bool,
        actual_date: Optional[str] = None,
        actual_secondary_field: Optional[str] = None,
        actual_patient_name: Optional[str] = None,
    ) -> ScoringResult:
        """
        Score a single document against its ground truth.

        Wrong categorization scores 0 (false positives and false negatives
        alike). A correctly rejected negative scores 2 since nothing needs
        extracting. A correctly accepted positive scores 2 when date,
        secondary field and patient name all match, else 1.

        Args:
            expected: Ground truth for the document
            actual_is_match: Model's categorization verdict
            actual_date: Extracted date (any supported format)
            actual_secondary_field: Extracted company or doctor
            actual_patient_name: Extracted patient name

        Returns:
            ScoringResult with score in {0, 1, 2}
        """
        if actual_is_match != expected.is_match:
            return ScoringResult(categorization_correct=False, extraction_correct=False)

        if not expected.is_match:
            return ScoringResult(categorization_correct=True, extraction_correct=True)

        extraction_correct = (
            FuzzyMatcher.dates_match(expected.date, actual_date)
            and FuzzyMatcher.fields_match(expected.secondary_field, actual_secondary_field)
            and FuzzyMatcher.fields_match(expected.patient_name, actual_patient_name)
        )
        return ScoringResult(categorization_correct=True, extraction_correct=extraction_correct)
