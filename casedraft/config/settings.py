from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "casedraft"
    db_username: str = "casedraft"
    db_password: str = "secret"

    pdf_engine: str = "pdfplumber"
    ocr_languages: str = "eng"
    tesseract_cmd: str = ""

    generation_provider: str = "http"
    generation_endpoint_url: str = "http://localhost:3000/api/process-document"
    generation_timeout_seconds: int = 60
    generation_temperature: float = 0.2

    generation_openai_api_key: str = ""
    generation_openai_model_name: str = "gpt-4o-mini"
    generation_openai_timeout_seconds: int = 30

    generation_openai_compatible_base_url: str = ""
    generation_openai_compatible_api_key: str = ""
    generation_openai_compatible_model_name: str = ""
    generation_openai_compatible_timeout_seconds: int = 30

    generation_openrouter_api_key: str = ""
    generation_openrouter_model_name: str = ""
    generation_groq_api_key: str = ""
    generation_groq_model_name: str = ""
    generation_together_api_key: str = ""
    generation_together_model_name: str = ""
    generation_deepseek_api_key: str = ""
    generation_deepseek_model_name: str = ""
    generation_ollama_api_key: str = "ollama"
    generation_ollama_model_name: str = ""

    max_source_chars: int = 4000

    verification_timeout_seconds: float = 15.0
    verification_narrative: bool = False

    local_store_dir: str = ".casedraft"
    files_root: str = ".casedraft/files"
    sample_letters_path: str = ""
