"""
Benchmark Domain Layer

Core interfaces, services and value objects for model benchmarks.
"""

from .document_type import DocumentType
from .errors import (
    DocScanError,
    ModelLoadFailed,
    InferenceError,
    BenchmarkTimeout,
    DocumentFileNotFound,
    DecodingFailed,
    InsufficientMemory,
    BenchmarkError,
    ConfigurationError,
    PDFConversionFailed,
)

__all__ = [
    'DocumentType',

    # Errors
    'DocScanError',
    'ModelLoadFailed',
    'InferenceError',
    'BenchmarkTimeout',
    'DocumentFileNotFound',
    'DecodingFailed',
    'InsufficientMemory',
    'BenchmarkError',
    'ConfigurationError',
    'PDFConversionFailed',
]
