"""Model runtime adapters backed by HuggingFace transformers."""

from .transformers_backend import TextTransformersBackend, VisualTransformersBackend
from .transformers_providers import (
    TransformersTextProvider,
    TransformersVisualProvider,
    TransformersTextModelFactory,
    TransformersVisualModelFactory,
)
from .document_detector import DocumentDetector, DocumentDetectorFactory

__all__ = [
    "TextTransformersBackend",
    "VisualTransformersBackend",
    "TransformersTextProvider",
    "TransformersVisualProvider",
    "TransformersTextModelFactory",
    "TransformersVisualModelFactory",
    "DocumentDetector",
    "DocumentDetectorFactory",
]
