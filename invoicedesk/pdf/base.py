from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for PDF text extraction used by text-only AI providers."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from invoice PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content as uploaded.

        Returns:
            Page texts joined by newlines, stripped. Empty for scanned PDFs
            without a text layer.

        Raises:
            PdfExtractionError: if the PDF cannot be opened or read.
        """
