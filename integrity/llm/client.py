"""Chat model client configuration."""

import structlog
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_ollama import ChatOllama

from integrity.config.settings import Settings, get_settings

logger = structlog.get_logger(__name__)

SUPPORTED_PROVIDERS = ("gemini", "ollama")


class LLMConfigurationError(Exception):
    """The chat model cannot be built from the current settings."""

    pass


def create_chat_model(settings: Settings | None = None) -> BaseChatModel:
    """Create the multimodal chat model used as the audit oracle.

    Args:
        settings: Optional custom settings. Uses defaults if not provided.

    Returns:
        Configured chat model.

    Raises:
        LLMConfigurationError: If the provider is unknown or its credential is missing.
    """
    settings = settings or get_settings()
    provider = settings.llm_provider.lower()

    if provider == "gemini":
        if not settings.gemini_api_key:
            raise LLMConfigurationError("GEMINI_API_KEY is not set")
        return ChatGoogleGenerativeAI(
            model=settings.llm_model_name,
            google_api_key=settings.gemini_api_key,
            temperature=settings.llm_temperature,
        )

    if provider == "ollama":
        return ChatOllama(
            model=settings.llm_model_name,
            base_url=settings.llm_ollama_base_url,
            temperature=settings.llm_temperature,
        )

    logger.error("unknown_llm_provider", provider=settings.llm_provider)
    raise LLMConfigurationError(
        f"Unknown LLM provider {settings.llm_provider!r}, expected one of {SUPPORTED_PROVIDERS}"
    )
