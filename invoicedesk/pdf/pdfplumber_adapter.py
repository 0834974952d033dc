import io

import pdfplumber

from invoicedesk.pdf.base import BasePdfExtractor
from invoicedesk.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads the invoice text layer with pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> str:
        if not pdf_bytes:
            raise PdfExtractionError("pdfplumber extraction failed: empty document")
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                texts = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return "\n".join(texts).strip()
