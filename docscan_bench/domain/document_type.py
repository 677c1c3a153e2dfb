"""
Document Types

Supported document categories and the prompts used to categorize them and
extract their fields.
"""

from enum import Enum

CATEGORIZATION_SYSTEM_PROMPT = "You are a document classification assistant. Answer only YES or NO."


class DocumentType(str, Enum):
    INVOICE = "invoice"
    PRESCRIPTION = "prescription"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def visual_prompt(self) -> str:
        """Yes/no prompt sent alongside the rendered page image."""
        if self is DocumentType.INVOICE:
            return (
                "Is this document an INVOICE (Rechnung)? Look for billing information, "
                "amounts, invoice numbers. Answer only YES or NO."
            )
        return (
            "Is this document a DOCTOR'S PRESCRIPTION (Arzt-Rezept)? Look for medication "
            "names, doctor information, patient details. Answer only YES or NO."
        )

    @property
    def categorization_prompt(self) -> str:
        """Yes/no prompt for categorizing OCR text with a text model."""
        if self is DocumentType.INVOICE:
            return (
                "Is the following document an INVOICE (Rechnung)? Invoices contain billing "
                "information, amounts, invoice numbers and an invoicing company. "
                "Answer only YES or NO."
            )
        return (
            "Is the following document a DOCTOR'S PRESCRIPTION (Arzt-Rezept)? Prescriptions "
            "contain medication names, a prescribing doctor and patient details. "
            "Answer only YES or NO."
        )

    def text_categorization_prompt(self, text: str) -> str:
        return self.categorization_prompt + "\n\nDocument text:\n" + text

    @property
    def secondary_field_label(self) -> str:
        return "COMPANY" if self is DocumentType.INVOICE else "DOCTOR"

    @property
    def extraction_system_prompt(self) -> str:
        if self is DocumentType.INVOICE:
            return (
                "You are an invoice data extraction assistant. Extract information "
                "accurately and respond in the exact format requested."
            )
        return (
            "You are a medical prescription data extraction assistant. Extract information "
            "accurately and respond in the exact format requested."
        )

    def extraction_user_prompt(self, text: str) -> str:
        if self is DocumentType.INVOICE:
            return (
                "Extract the following information from this invoice text:\n"
                "1. Invoice date (Rechnungsdatum): Provide in format YYYY-MM-DD\n"
                "2. Invoicing party (company name that issued the invoice)\n\n"
                "IMPORTANT RULES:\n"
                "- For date: Look for \"Rechnungsdatum\", \"Invoice Date\", or similar. "
                "Convert to YYYY-MM-DD format.\n"
                "- For company: Extract the company NAME that issued the invoice, NOT the customer name.\n"
                "- If you cannot find a value with certainty, respond with \"NOT_FOUND\" for that field.\n\n"
                f"Invoice text:\n---\n{text}\n---\n\n"
                "Respond in this exact format (no other text):\n"
                "DATE: YYYY-MM-DD\n"
                "COMPANY: Company Name"
            )
        return (
            "Extract the following information from this prescription text:\n"
            "1. Prescription date: Provide in format YYYY-MM-DD\n"
            "2. Prescribing doctor's name (without title like Dr. or Dr.med.)\n"
            "3. Patient name\n\n"
            "IMPORTANT RULES:\n"
            "- For date: Look for the prescription/issue date, NOT pharmacy stamp dates. "
            "Convert to YYYY-MM-DD format.\n"
            "- For doctor: Extract ONLY the name (e.g., \"Gesine Kaiser\"), NOT titles like \"Dr.\" or \"Dr.med.\"\n"
            "- If you cannot find a value with certainty, respond with \"NOT_FOUND\" for that field.\n\n"
            f"Prescription text:\n---\n{text}\n---\n\n"
            "Respond in this exact format (no other text):\n"
            "DATE: YYYY-MM-DD\n"
            "DOCTOR: Doctor Name\n"
            "PATIENT: Patient Name"
        )

    @classmethod
    def parse(cls, value: str) -> "DocumentType":
        """Parse a user-supplied type name (case-insensitive)."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Invalid document type '{value}'. Valid types: {valid}") from None
