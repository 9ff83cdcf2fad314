from __future__ import annotations

import logging
from typing import Any, Callable

import openai
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from salescast.core.config import settings
from salescast.core.errors import (
    CredentialError,
    ForecastProviderError,
    ProviderError,
    TransportError,
    provider_error_for,
)
from salescast.services.prompt_service import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

KEY_PREFIX = "sk-"
MIN_KEY_LENGTH = 10
PREVIEW_CHARS = 200


def validate_credential(credential: str | None) -> str:
    if not credential:
        raise CredentialError("no OpenAI API key configured")
    if len(credential) < MIN_KEY_LENGTH:
        raise CredentialError("OpenAI API key is too short")
    if not credential.startswith(KEY_PREFIX):
        raise CredentialError("OpenAI API key has an unexpected format")
    return credential


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


class ForecastProvider:
    """Chat-completion client used for LLM forecasts.

    ``chat_factory`` builds the chat model for one call; it receives the
    same keyword arguments as ``ChatOpenAI``.
    """

    def __init__(
        self,
        model: str | None = None,
        timeout: float | None = None,
        base_url: str | None = None,
        chat_factory: Callable[..., Any] = ChatOpenAI,
    ):
        self.model = model or settings.openai_model
        self.timeout = timeout if timeout is not None else settings.openai_timeout_seconds
        self.base_url = base_url if base_url is not None else settings.openai_base_url
        self.chat_factory = chat_factory

    def _chat(self, credential: str, timeout: float) -> Any:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "api_key": credential,
            "temperature": settings.openai_temperature,
            "timeout": timeout,
            "max_retries": 0,
        }
        if self.base_url:
            kwargs["base_url"] = self.base_url
        return self.chat_factory(**kwargs)

    def _invoke(self, credential: str, messages: list, timeout: float) -> str:
        try:
            reply = self._chat(credential, timeout).invoke(messages)
        except openai.APIConnectionError as exc:
            # APITimeoutError is a subclass
            raise TransportError(f"provider unreachable: {exc}") from exc
        except openai.APIStatusError as exc:
            err = provider_error_for(exc.status_code, str(exc))
            logger.warning("Provider returned status %d (%s)", exc.status_code, err.kind)
            raise err from exc
        except openai.OpenAIError as exc:
            # malformed replies and other client-side failures carry no usable status
            status = getattr(exc, "status_code", None)
            logger.warning("Provider request failed: %s", type(exc).__name__)
            raise ProviderError(status, str(exc) or type(exc).__name__) from exc
        return _content_text(reply.content)

    def call(self, prompt: str, credential: str | None) -> str:
        key = validate_credential(credential)
        logger.info("Requesting forecast from %s with key %s...", self.model, key[:7])
        logger.debug("Prompt preview: %s", prompt[:PREVIEW_CHARS])
        text = self._invoke(
            key,
            [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)],
            self.timeout,
        )
        logger.debug("Provider reply preview: %s", text[:PREVIEW_CHARS])
        return text

    def probe(self, credential: str | None) -> tuple[bool, str]:
        """Send a trivial request to check the key and endpoint; never raises."""
        try:
            key = validate_credential(credential)
            self._invoke(
                key,
                [HumanMessage(content="Hello, this is a test message. Please respond with 'OK'.")],
                settings.openai_probe_timeout_seconds,
            )
        except CredentialError:
            return False, "invalid_credential"
        except TransportError:
            return False, "network_unreachable"
        except ForecastProviderError as exc:
            status = getattr(exc, "status", None)
            return False, f"http_{status}" if status else "provider_error"
        return True, "ok"
