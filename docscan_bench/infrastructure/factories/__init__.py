"""Component wiring."""

from .benchmark_factory import BenchmarkFactory

__all__ = ["BenchmarkFactory"]
