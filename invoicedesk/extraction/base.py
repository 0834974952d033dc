from abc import ABC, abstractmethod
from collections.abc import Sequence

from invoicedesk.records.models import DocumentRecord, ExtractionResult


class BaseExtractor(ABC):
    """Contract for the invoice extraction gateway."""

    @abstractmethod
    def extract(
        self,
        document_bytes: bytes,
        hint_records: Sequence[DocumentRecord] = (),
    ) -> ExtractionResult | None:
        """Read invoice fields from a PDF.

        Args:
            document_bytes: Raw PDF content.
            hint_records: Previously verified records shown to the model as
                examples of known vendors. Advisory only.

        Returns:
            ExtractionResult, or None when the provider produced no usable
            data (empty, unparseable or incomplete response).

        Raises:
            ExtractionNetworkError: when the provider call itself fails.
            ExtractionError: when the document cannot be prepared for the call.
        """
