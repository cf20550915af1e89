"""Chat-completion client built on LangChain's OpenAI chat model."""

import logging
from typing import Protocol

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from .errors import ExternalServiceFailure
from .settings import AppSettings

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class ChatClient(Protocol):
    def create(self, system_prompt: str, user_prompt: str) -> list[str]: ...


def _is_openrouter(model: str) -> bool:
    """Check if model is OpenRouter format (PROVIDER/MODEL)."""
    return "/" in model and len(model.split("/")) == 2


def _get_config(model: str, settings: AppSettings) -> tuple[str | None, str | None]:
    """Get API key and base URL based on model type."""
    if _is_openrouter(model):
        return settings.openrouter_api_key, OPENROUTER_BASE_URL
    return settings.openai_api_key, settings.openai_base_url


def chat_model(settings: AppSettings, temperature: float = 0.0, **kwargs) -> BaseChatModel:
    """Initialize an OpenAI or OpenRouter chat model.

    Args:
        settings: Runtime settings holding the model name and API keys
        temperature: Sampling temperature (0.0-2.0)
        **kwargs: Additional arguments passed to ChatOpenAI
    """
    api_key, base_url = _get_config(settings.chat_model, settings)
    return ChatOpenAI(
        model=settings.chat_model,
        api_key=api_key,
        base_url=base_url,
        temperature=temperature,
        **kwargs,
    )


class ChatCompletion:
    """Runs one system + user prompt and returns the content of every choice."""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "ChatCompletion":
        return cls(chat_model(settings))

    def create(self, system_prompt: str, user_prompt: str) -> list[str]:
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        try:
            result = self.llm.generate([messages])
        except Exception as exc:
            raise ExternalServiceFailure(f"Chat completion failed: {exc}") from exc

        choices = [generation.text for generation in result.generations[0]] if result.generations else []
        logger.info("Chat completion returned %s choice(s)", len(choices))
        return choices


def last_choice(choices: list[str]) -> str:
    """The payload is always read from the last choice."""
    if not choices:
        raise ExternalServiceFailure("Chat completion returned no choices")
    return choices[-1]
