import base64

import httpx
import openai

from invoicedesk.extraction.client_base import BaseExtractionClient
from invoicedesk.extraction.exceptions import ExtractionEmptyResponseError, ExtractionNetworkError


class OpenAIClientAdapter(BaseExtractionClient):
    """Extraction AI client adapter built on OpenAI-compatible chat API.

    The OpenAI endpoint reads PDFs sent as file parts; other compatible
    providers only get the document text inside the prompt.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        accepts_pdf: bool = False,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self.accepts_pdf = accepts_pdf

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
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "invoice_extraction",
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": self._user_content(user_prompt, document)},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionEmptyResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise ExtractionEmptyResponseError("AI returned empty response")
        return content

    def _user_content(self, user_prompt: str, document: bytes | None) -> str | list[dict[str, object]]:
        if document is None or not self.accepts_pdf:
            return user_prompt
        encoded = base64.b64encode(document).decode("ascii")
        return [
            {
                "type": "file",
                "file": {
                    "filename": "invoice.pdf",
                    "file_data": f"data:application/pdf;base64,{encoded}",
                },
            },
            {"type": "text", "text": user_prompt},
        ]
