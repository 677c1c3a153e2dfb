"""
Unit tests for the error taxonomy.
"""

import pytest

from docscan_bench.domain.errors import (
    BenchmarkError,
    BenchmarkTimeout,
    DocScanError,
    DocumentFileNotFound,
    InsufficientMemory,
    ModelLoadFailed,
)


class TestMessages:

    def test_prefixed_message(self):
        """Errors render as '<prefix>: <message>'."""
        assert str(ModelLoadFailed("weights not found")) == "Failed to load model: weights not found"

    def test_prefix_alone_without_message(self):
        """An empty message leaves only the prefix."""
        assert str(BenchmarkError()) == "Benchmark error"

    def test_timeout_message(self):
        """Timeouts name the limit."""
        error = BenchmarkTimeout(30.0)

        assert error.seconds == 30.0
        assert str(error) == "Timeout: exceeded 30s"

    def test_insufficient_memory_message(self):
        """The memory error names both sides of the comparison."""
        assert str(InsufficientMemory(9000, 6400)) == "Insufficient memory (~9000 MB needed, 6400 MB available)"


class TestHierarchy:

    def test_file_not_found_is_both(self):
        """Missing files are catchable as DocScanError and FileNotFoundError."""
        error = DocumentFileNotFound("/corpus/a.pdf.json")

        assert isinstance(error, DocScanError)
        assert isinstance(error, FileNotFoundError)
        assert error.path == "/corpus/a.pdf.json"
        assert str(error) == "File not found: /corpus/a.pdf.json"

    def test_catch_all(self):
        """Every benchmark error shares one base class."""
        with pytest.raises(DocScanError):
            raise BenchmarkError("corpus empty")
