"""
Benchmark Domain Interfaces

Contracts for the external collaborators of the benchmark engine:
- Model providers and their factories
- Document rendering and OCR
- Ground truth persistence
"""

from .providers import ExtractionResult, IVisualProvider, ITextProvider
from .model_factories import (
    IVisualModelFactory,
    ITextModelFactory,
    IDocumentDetector,
    IDocumentDetectorFactory,
)
from .documents import IPDFRenderer, IOCREngine
from .ground_truth_store import IGroundTruthStore
from .model_cache import IModelCache

__all__ = [
    # Providers
    'ExtractionResult',
    'IVisualProvider',
    'ITextProvider',

    # Factories
    'IVisualModelFactory',
    'ITextModelFactory',
    'IDocumentDetector',
    'IDocumentDetectorFactory',

    # Documents
    'IPDFRenderer',
    'IOCREngine',

    # Storage
    'IGroundTruthStore',
    'IModelCache',
]
