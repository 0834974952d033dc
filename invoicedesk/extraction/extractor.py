"""AI-powered invoice field extractor."""

import json
from collections.abc import Sequence
from pathlib import Path

from invoicedesk.extraction.base import BaseExtractor
from invoicedesk.extraction.client_base import BaseExtractionClient
from invoicedesk.extraction.exceptions import (
    ExtractionEmptyResponseError,
    ExtractionError,
    ExtractionValidationError,
)
from invoicedesk.extraction.prompt_loader import load_json_schema, load_prompt_template
from invoicedesk.extraction.validator import validate_and_build
from invoicedesk.logging.logger import Log
from invoicedesk.pdf.base import BasePdfExtractor
from invoicedesk.pdf.exceptions import PdfExtractionError
from invoicedesk.records.models import DocumentRecord, ExtractionResult

DEFAULT_SYSTEM_PROMPT = (
    "You read vendor invoices and return their header fields as JSON. Be precise."
)
_ATTACHED_DOCUMENT = "(see the attached PDF)"
_NO_HINTS = "(none yet)"


class Extractor(BaseExtractor):
    """Extracts invoice fields through an AI provider client."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        temperature: float = 0.0,
        pdf_extractor: BasePdfExtractor | None = None,
        max_hint_records: int = 5,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._pdf_extractor = pdf_extractor
        self._max_hint_records = max(0, max_hint_records)
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    def extract(
        self,
        document_bytes: bytes,
        hint_records: Sequence[DocumentRecord] = (),
    ) -> ExtractionResult | None:
        hints = list(hint_records)[: self._max_hint_records]
        if self._client.accepts_pdf:
            document_text = _ATTACHED_DOCUMENT
            attachment: bytes | None = document_bytes
        else:
            document_text = self._read_text(document_bytes)
            attachment = None
            if not document_text:
                Log.warning("Document has no text layer, nothing to send to a text-only provider")
                return None

        prompt = self._build_prompt(hints, document_text)
        Log.debug(f"Extraction prompt:\n{prompt}")

        try:
            raw_response = self._call_ai(prompt, attachment)
        except ExtractionEmptyResponseError as exc:
            Log.warning(f"Extraction returned no data: {exc}")
            return None
        Log.debug(f"AI raw response:\n{raw_response}")

        try:
            result = validate_and_build(self._parse_json(raw_response))
        except ExtractionValidationError as exc:
            Log.warning(f"Extraction response unusable: {exc}")
            return None

        Log.info(
            f"Extraction complete: vendor={result.vendor!r} "
            f"number={result.invoice_number!r} amount={result.amount}"
        )
        return result

    def _read_text(self, document_bytes: bytes) -> str:
        if self._pdf_extractor is None:
            raise ExtractionError("Text-only provider configured without a PDF extractor")
        try:
            return self._pdf_extractor.extract(document_bytes)
        except PdfExtractionError as exc:
            raise ExtractionError(f"Could not read PDF text: {exc}") from exc

    def _build_prompt(self, hints: list[DocumentRecord], document_text: str) -> str:
        return self._prompt_template.format(
            hints=self._format_hints(hints),
            document_text=document_text,
            json_schema=self._json_schema,
        )

    @staticmethod
    def _format_hints(hints: list[DocumentRecord]) -> str:
        if not hints:
            return _NO_HINTS
        return "\n".join(
            f'- vendor: "{r.vendor}", invoice number: "{r.invoice_number}", '
            f"date: {r.date}, amount: {r.amount} {r.currency}"
            for r in hints
        )

    def _call_ai(self, prompt: str, attachment: bytes | None) -> str:
        return self._client.generate(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
            document=attachment,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        if not cleaned:
            raise ExtractionValidationError("Empty JSON response")
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ExtractionValidationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ExtractionValidationError("JSON response must be an object")
        return parsed
