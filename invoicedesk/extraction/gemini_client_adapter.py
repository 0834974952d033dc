import httpx
from google import genai
from google.genai import errors, types

from invoicedesk.extraction.client_base import BaseExtractionClient
from invoicedesk.extraction.exceptions import ExtractionEmptyResponseError, ExtractionNetworkError


class GeminiClientAdapter(BaseExtractionClient):
    """Extraction client for Gemini; the PDF is sent inline with the prompt."""

    accepts_pdf = True

    def __init__(self, *, api_key: str, timeout_seconds: int) -> None:
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_seconds * 1000),
        )

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
        # The schema is already embedded in the prompt text.
        _ = json_schema
        contents: list[types.Part | str] = []
        if document is not None:
            contents.append(types.Part.from_bytes(data=document, mime_type="application/pdf"))
        contents.append(user_prompt)

        try:
            response = self._client.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt or None,
                    temperature=temperature,
                    response_mime_type="application/json",
                ),
            )
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except errors.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        text = response.text
        if not text:
            raise ExtractionEmptyResponseError("AI returned empty response")
        return text
