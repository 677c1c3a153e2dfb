"""
Unit tests for the GroundTruth value object and its sidecar schema.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.value_objects import GroundTruth, GroundTruthMetadata


class TestSerialization:

    def test_camel_case_keys_and_omitted_optionals(self):
        """The sidecar uses camelCase and leaves out absent fields."""
        truth = GroundTruth(is_match=True, document_type=DocumentType.INVOICE, secondary_field="ACME GmbH")

        data = truth.to_json_dict()

        assert data["isMatch"] is True
        assert data["documentType"] == "invoice"
        assert data["secondaryField"] == "ACME GmbH"
        assert "date" not in data
        assert "patientName" not in data
        assert data["metadata"] == {"verified": False}

    def test_reads_sidecar_json(self):
        """Hand-written sidecars are accepted."""
        truth = GroundTruth.from_json_dict({
            "isMatch": True,
            "documentType": "prescription",
            "date": "2024-12-22",
            "secondaryField": "Gesine Kaiser",
            "patientName": "Max Mustermann",
            "metadata": {"vlmModel": "v", "textModel": "t", "generatedAt": "2025-01-02T03:04:05Z", "verified": True},
        })

        assert truth.document_type is DocumentType.PRESCRIPTION
        assert truth.patient_name == "Max Mustermann"
        assert truth.is_verified is True
        assert truth.metadata.generated_at == datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_metadata_is_optional(self):
        """Sidecars without metadata default to unverified."""
        truth = GroundTruth.from_json_dict({"isMatch": False, "documentType": "invoice"})

        assert truth.is_verified is False
        assert truth.metadata == GroundTruthMetadata()

    def test_round_trip(self):
        """Writing and reading a record preserves it."""
        truth = GroundTruth(
            is_match=True,
            document_type=DocumentType.INVOICE,
            date="2024-12-22",
            metadata=GroundTruthMetadata(vlm_model="v", generated_at=datetime(2025, 1, 2, tzinfo=timezone.utc)),
        )

        assert GroundTruth.from_json_dict(truth.to_json_dict()) == truth

    @pytest.mark.parametrize("data", [{"documentType": "invoice"}, {"isMatch": True, "documentType": "receipt"}])
    def test_invalid_records_are_rejected(self, data):
        """Missing labels and unknown types fail validation."""
        with pytest.raises(ValidationError):
            GroundTruth.from_json_dict(data)
