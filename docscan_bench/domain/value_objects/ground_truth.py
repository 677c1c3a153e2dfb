"""
Value object: ground truth for one document.

Serialized as a JSON sidecar next to the document with camelCase keys, so
the field aliases below are the on-disk schema.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from docscan_bench.domain.document_type import DocumentType


class GroundTruthMetadata(BaseModel):
    """Provenance of a ground truth record."""

    model_config = ConfigDict(populate_by_name=True)

    vlm_model: Optional[str] = Field(default=None, alias="vlmModel")
    text_model: Optional[str] = Field(default=None, alias="textModel")
    generated_at: Optional[datetime] = Field(default=None, alias="generatedAt")
    verified: bool = False


class GroundTruth(BaseModel):
    """
    Expected label and fields for a document.

    Attributes:
        is_match: Whether the document is of the benchmarked type
        document_type: Document type the label refers to
        date: Expected document date (ISO yyyy-MM-dd)
        secondary_field: Expected company (invoice) or doctor (prescription)
        patient_name: Expected patient name, prescriptions only
        metadata: Which oracle produced the record and whether a human verified it
    """

    model_config = ConfigDict(populate_by_name=True)

    is_match: bool = Field(alias="isMatch")
    document_type: DocumentType = Field(alias="documentType")
    date: Optional[str] = None
    secondary_field: Optional[str] = Field(default=None, alias="secondaryField")
    patient_name: Optional[str] = Field(default=None, alias="patientName")
    metadata: GroundTruthMetadata = Field(default_factory=GroundTruthMetadata)

    @property
    def is_verified(self) -> bool:
        return self.metadata.verified

    def to_json_dict(self) -> Dict[str, Any]:
        """Sidecar representation: camelCase keys, absent optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "GroundTruth":
        return cls.model_validate(data)
