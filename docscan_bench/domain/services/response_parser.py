"""
Domain Service: Response Parser

Parses raw model responses into structured verdicts and extracted fields.
"""

import re
import string
from typing import Optional

from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.interfaces.providers import ExtractionResult
from docscan_bench.domain.services.date_parsing import parse_date

NOT_FOUND = "NOT_FOUND"
_FIELD_LINE = re.compile(r"^\s*([A-Za-z_ ]+?)\s*:\s*(.*?)\s*$")


def parse_yes_no_response(response: str) -> bool:
    """
    Interpret a YES/NO answer.

    Whitespace and surrounding punctuation are stripped, then the text is
    compared case-insensitively. Anything starting with "yes" is true, as
    are "ja" and its comma or space prefixed forms ("Ja, Rechnung"). Everything
    else, including the empty string, is false.
    """
    normalized = response.strip().lower().strip(string.punctuation + string.whitespace)
    if normalized == "ja":
        return True
    return normalized.startswith(("yes", "ja,", "ja "))


class ResponseParser:
    """Parses extraction responses of the form "DATE: ...\\nCOMPANY: ..."."""

    def parse_extraction_response(self, response_text: str, document_type: DocumentType) -> ExtractionResult:
        fields = {}
        for line in response_text.splitlines():
            match = _FIELD_LINE.match(line)
            if match:
                fields[match.group(1).strip().upper()] = match.group(2)

        raw_date = self._clean(fields.get("DATE"))
        parsed = parse_date(raw_date) if raw_date else None

        return ExtractionResult(
            date=parsed,
            secondary_field=self._clean(fields.get(document_type.secondary_field_label)),
            patient_name=self._clean(fields.get("PATIENT")),
        )

    @staticmethod
    def _clean(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().strip('"').strip()
        if not value or value.upper() == NOT_FOUND:
            return None
        return value
