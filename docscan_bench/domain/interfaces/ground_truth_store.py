"""
Ground Truth Store Interface

Defines how ground truth records are located, read and written.
The bundled implementation keeps one JSON sidecar per document.
"""

from abc import ABC, abstractmethod

from docscan_bench.domain.value_objects.ground_truth import GroundTruth


class IGroundTruthStore(ABC):

    @abstractmethod
    def sidecar_path(self, document_path: str) -> str:
        pass

    @abstractmethod
    def exists(self, document_path: str) -> bool:
        pass

    @abstractmethod
    def load(self, document_path: str) -> GroundTruth:
        """
        Load the ground truth of a document.

        Raises:
            DocumentFileNotFound: If the document has no sidecar
            DecodingFailed: If the sidecar is malformed
        """
        pass

    @abstractmethod
    def save(self, ground_truth: GroundTruth, document_path: str) -> str:
        """Persist a record and return the path written."""
        pass
