"""
Unit tests for DocumentType prompts and parsing.
"""

import pytest

from docscan_bench.domain.document_type import DocumentType


class TestParse:

    @pytest.mark.parametrize("value,expected", [
        ("invoice", DocumentType.INVOICE),
        (" Prescription ", DocumentType.PRESCRIPTION),
        ("INVOICE", DocumentType.INVOICE),
    ])
    def test_case_insensitive(self, value, expected):
        """Type names are parsed case-insensitively."""
        assert DocumentType.parse(value) is expected

    def test_unknown_type_lists_valid_ones(self):
        """Errors list the valid choices."""
        with pytest.raises(ValueError, match="invoice, prescription"):
            DocumentType.parse("receipt")


class TestPrompts:

    def test_secondary_field_labels(self):
        """Invoices extract a company, prescriptions a doctor."""
        assert DocumentType.INVOICE.secondary_field_label == "COMPANY"
        assert DocumentType.PRESCRIPTION.secondary_field_label == "DOCTOR"

    def test_extraction_prompt_embeds_text(self):
        """The document text is placed in the extraction prompt."""
        prompt = DocumentType.PRESCRIPTION.extraction_user_prompt("Rp. Ibuprofen 400")

        assert "Rp. Ibuprofen 400" in prompt
        assert "PATIENT:" in prompt

    def test_text_categorization_prompt_ends_with_text(self):
        """Categorization sends the question followed by the document text."""
        prompt = DocumentType.INVOICE.text_categorization_prompt("Rechnung Nr. 1")

        assert prompt.startswith(DocumentType.INVOICE.categorization_prompt)
        assert prompt.endswith("Document text:\nRechnung Nr. 1")

    def test_prompts_differ_per_type(self):
        """Each type asks its own question."""
        assert DocumentType.INVOICE.visual_prompt != DocumentType.PRESCRIPTION.visual_prompt
        assert "YES or NO" in DocumentType.INVOICE.visual_prompt

    def test_display_name(self):
        assert DocumentType.INVOICE.display_name == "Invoice"
