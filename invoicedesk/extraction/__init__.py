from invoicedesk.extraction.base import BaseExtractor
from invoicedesk.extraction.extractor import Extractor
from invoicedesk.extraction.factory import ExtractorFactory

__all__ = ["BaseExtractor", "Extractor", "ExtractorFactory"]
