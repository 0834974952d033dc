"""Offline extraction client.

Handy for local development and demos without an AI provider key. Also a
template for new provider adapters: implement BaseExtractionClient and
register the provider in ExtractorFactory.
"""

import json
from typing import ClassVar

from invoicedesk.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Returns a fixed, valid extraction JSON without any network call."""

    accepts_pdf = True

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "invoiceNumber": "EX-0001",
        "vendor": "Example Srl",
        "date": "2024-01-31",
        "amount": 100.0,
        "currency": "EUR",
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    def generate(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        document: bytes | None = None,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema, document
        return json.dumps(self._response)
