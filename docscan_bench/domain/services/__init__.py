"""Domain services for the benchmark domain."""

from .date_parsing import parse_date, format_date
from .fuzzy_matcher import FuzzyMatcher, ScoringResult
from .memory_estimator import MemoryEstimator, parse_param_billions
from .response_parser import ResponseParser, parse_yes_no_response
from .ranking import ranked_by_score, best_model_name

__all__ = [
    "parse_date",
    "format_date",
    "FuzzyMatcher",
    "ScoringResult",
    "MemoryEstimator",
    "parse_param_billions",
    "ResponseParser",
    "parse_yes_no_response",
    "ranked_by_score",
    "best_model_name",
]
