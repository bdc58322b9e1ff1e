"""LLM client and oracle chain helpers."""

from .client import LLMConfigurationError, create_chat_model
from .chains import (
    LLMChainError,
    build_media_message,
    parse_json_response,
    run_oracle_chain,
    to_data_url,
)

__all__ = [
    "LLMConfigurationError",
    "create_chat_model",
    "LLMChainError",
    "build_media_message",
    "parse_json_response",
    "run_oracle_chain",
    "to_data_url",
]
