"""
Shared fixtures for docscan_bench unit tests
"""

import pytest

from docscan_bench.config import Configuration


@pytest.fixture
def pdf_path(tmp_path):
    """A minimal PDF file on disk; content is never parsed by unit tests."""
    path = tmp_path / "invoice.pdf"
    path.write_bytes(b"%PDF-1.4")
    return str(path)


@pytest.fixture
def configuration():
    return Configuration(model_cache_dir="/models")
