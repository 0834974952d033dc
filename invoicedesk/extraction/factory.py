from typing import ClassVar

from invoicedesk.config.settings import Settings
from invoicedesk.extraction.base import BaseExtractor
from invoicedesk.extraction.client_base import BaseExtractionClient
from invoicedesk.extraction.example_client_adapter import ExampleClientAdapter
from invoicedesk.extraction.extractor import Extractor
from invoicedesk.extraction.gemini_client_adapter import GeminiClientAdapter
from invoicedesk.extraction.openai_client_adapter import OpenAIClientAdapter
from invoicedesk.pdf.factory import PdfExtractorFactory


class ExtractorFactory:
    """Creates the configured extraction gateway."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseExtractor:
        """Create a configured extractor from application settings."""
        provider = settings.extraction_provider.strip().lower()
        client, model = cls._create_client(provider, settings)
        pdf_extractor = None if client.accepts_pdf else PdfExtractorFactory.create(settings)
        return Extractor(
            client=client,
            model=model,
            temperature=settings.extraction_temperature,
            pdf_extractor=pdf_extractor,
            max_hint_records=settings.extraction_max_hint_records,
        )

    @classmethod
    def _create_client(
        cls, provider: str, settings: Settings
    ) -> tuple[BaseExtractionClient, str]:
        if provider == "example":
            return ExampleClientAdapter(), "example"
        if provider == "gemini":
            client = GeminiClientAdapter(
                api_key=settings.gemini_api_key,
                timeout_seconds=settings.gemini_timeout_seconds,
            )
            return client, settings.gemini_model_name
        openai_client = OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            base_url=cls._resolve_base_url(provider, settings),
            accepts_pdf=provider == "openai",
        )
        return openai_client, cls._resolve_model_name(provider, settings)

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "openai_compatible_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "gemini",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown extraction provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.openai_api_key,
            "openai_compatible": settings.openai_compatible_api_key,
            "openrouter": settings.openrouter_api_key,
            "groq": settings.groq_api_key,
            "together": settings.together_api_key,
            "deepseek": settings.deepseek_api_key,
            "ollama": settings.ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.openai_model_name,
            "openai_compatible": settings.openai_compatible_model_name,
            "openrouter": settings.openrouter_model_name,
            "groq": settings.groq_model_name,
            "together": settings.together_model_name,
            "deepseek": settings.deepseek_model_name,
            "ollama": settings.ollama_model_name,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        if provider == "openai":
            return settings.openai_timeout_seconds
        return settings.openai_compatible_timeout_seconds
