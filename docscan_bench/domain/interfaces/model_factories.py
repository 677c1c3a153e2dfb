"""
Model Factory Interfaces

Each model type has its own factory so visual and text models can be
preloaded and released independently. Full pair benchmarks go through a
document detector factory that loads both at once.

Contract shared by all factories:
- preload raises (typically ModelLoadFailed) when the model cannot be loaded
- make_* returns None while nothing is loaded
- release is idempotent and safe to call when nothing is loaded
"""

from abc import ABC, abstractmethod
from typing import Optional

from docscan_bench.config import Configuration
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.interfaces.providers import ExtractionResult, ITextProvider, IVisualProvider


class IVisualModelFactory(ABC):

    @abstractmethod
    async def preload(self, model_name: str, config: Configuration) -> None:
        pass

    @abstractmethod
    def make_provider(self) -> Optional[IVisualProvider]:
        pass

    @abstractmethod
    async def release(self) -> None:
        pass


class ITextModelFactory(ABC):

    @abstractmethod
    async def preload(self, model_name: str, config: Configuration) -> None:
        pass

    @abstractmethod
    def make_provider(self) -> Optional[ITextProvider]:
        pass

    @abstractmethod
    async def release(self) -> None:
        pass


class IDocumentDetector(ABC):
    """
    Categorizes a document and extracts its fields using a loaded model pair.

    categorize must be called before extract_data; the detector keeps the
    document it categorized.
    """

    @abstractmethod
    async def categorize(self, pdf_path: str) -> bool:
        """Return True when the document matches the detector's document type."""
        pass

    @abstractmethod
    async def extract_data(self) -> ExtractionResult:
        pass


class IDocumentDetectorFactory(ABC):
    """Loads a visual + text model pair and hands out detectors bound to it."""

    @abstractmethod
    async def preload_models(self, config: Configuration) -> None:
        """Load config.visual_model_name and config.text_model_name."""
        pass

    @abstractmethod
    async def make_detector(self, config: Configuration, document_type: DocumentType) -> IDocumentDetector:
        pass

    @abstractmethod
    async def release_models(self) -> None:
        pass
