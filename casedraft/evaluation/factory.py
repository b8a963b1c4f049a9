from typing import ClassVar

from casedraft.config.settings import Settings
from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.example_client_adapter import ExampleClientAdapter
from casedraft.evaluation.http_client_adapter import HttpGenerationClient
from casedraft.evaluation.openai_client_adapter import OpenAIClientAdapter


class GenerationClientFactory:
    """Creates the configured text-generation client."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseGenerationClient:
        """Create a configured generation client from application settings."""
        provider = settings.generation_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "http":
            return HttpGenerationClient(
                endpoint_url=settings.generation_endpoint_url,
                timeout_seconds=settings.generation_timeout_seconds,
            )
        return OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            model=cls._resolve_model_name(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            temperature=settings.generation_temperature,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.generation_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "generation_openai_compatible_base_url is required for "
                    "generation_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "http",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown generation provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.generation_openai_api_key,
            "openai_compatible": settings.generation_openai_compatible_api_key,
            "openrouter": settings.generation_openrouter_api_key,
            "groq": settings.generation_groq_api_key,
            "together": settings.generation_together_api_key,
            "deepseek": settings.generation_deepseek_api_key,
            "ollama": settings.generation_ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.generation_openai_model_name,
            "openai_compatible": settings.generation_openai_compatible_model_name,
            "openrouter": settings.generation_openrouter_model_name,
            "groq": settings.generation_groq_model_name,
            "together": settings.generation_together_model_name,
            "deepseek": settings.generation_deepseek_model_name,
            "ollama": settings.generation_ollama_model_name,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        key_map = {
            "openai": settings.generation_openai_timeout_seconds,
            "openai_compatible": settings.generation_openai_compatible_timeout_seconds,
        }
        return key_map.get(provider, settings.generation_timeout_seconds) or 30
