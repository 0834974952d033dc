from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "postgres"
    db_username: str = "postgres"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    supabase_url: str = ""
    supabase_anon_key: str = ""

    realtime_reconnect_delay_seconds: float = 5.0
    realtime_poll_timeout_seconds: float = 5.0

    extraction_provider: str = "gemini"
    extraction_temperature: float = 0.0
    extraction_max_hint_records: int = 5

    gemini_api_key: str = ""
    gemini_model_name: str = "gemini-2.0-flash"
    gemini_timeout_seconds: int = 60

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 60

    openai_compatible_base_url: str = ""
    openai_compatible_api_key: str = ""
    openai_compatible_model_name: str = ""
    openai_compatible_timeout_seconds: int = 60

    openrouter_api_key: str = ""
    openrouter_model_name: str = ""
    groq_api_key: str = ""
    groq_model_name: str = ""
    together_api_key: str = ""
    together_model_name: str = ""
    deepseek_api_key: str = ""
    deepseek_model_name: str = ""
    ollama_api_key: str = "ollama"
    ollama_model_name: str = ""

    pdf_engine: str = "pdfplumber"

    max_upload_bytes: int = 10 * 1024 * 1024
    default_currency: str = "EUR"
    multi_tenant: bool = False
