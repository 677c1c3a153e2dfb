"""
Model Provider Interfaces

Narrow async call contracts for the external model runtimes. The engine
only ever talks to these interfaces; real runtimes and test doubles are
interchangeable implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from docscan_bench.domain.document_type import DocumentType


@dataclass
class ExtractionResult:
    """
    Fields extracted from a document by a text model.

    Attributes:
        date: Document date, None if not found
        secondary_field: Company (invoice) or doctor (prescription)
        patient_name: Patient name, prescriptions only
    """
    date: Optional[date] = None
    secondary_field: Optional[str] = None
    patient_name: Optional[str] = None


class IVisualProvider(ABC):
    """A loaded visual model that answers prompts about a page image."""

    @abstractmethod
    async def generate_from_image(self, image: Any, prompt: str, model_name: Optional[str] = None) -> str:
        """
        Run the model on one rendered page.

        Args:
            image: Rendered page (a PIL image for the bundled renderer)
            prompt: Instruction for the model
            model_name: Optional override of the loaded model

        Returns:
            Raw model response text

        Raises:
            InferenceError: If generation fails
        """
        pass


class ITextProvider(ABC):
    """A loaded text model used for categorization and field extraction."""

    @abstractmethod
    async def generate(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        pass

    @abstractmethod
    async def extract_data(self, document_type: DocumentType, text: str) -> ExtractionResult:
        """
        Extract the fields for document_type from OCR text.

        Raises:
            InferenceError: If generation fails
        """
        pass
