from abc import ABC, abstractmethod


class BaseExtractionClient(ABC):
    """Contract for provider-specific extraction AI clients."""

    accepts_pdf: bool = False

    @abstractmethod
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
        """Return provider response as plain text.

        ``document`` is only passed to clients with ``accepts_pdf`` set.
        """
