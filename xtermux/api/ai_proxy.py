"""ai_proxy
============

Pass-through client for an OpenAI-compatible chat-completion provider.

This module backs the two assistant modes of the app:

- **Chat** ("Neural Link"): a system prompt plus the running conversation is
  forwarded as-is and the first choice's content is returned.
- **Architect** ("X-Architect"): the provider is told to answer with a single
  JSON object describing a Termux script; the first ``{`` to the last ``}``
  of the reply is parsed. There is no repair and no retry.

The raw ``/chat/completions`` proxy used by the front end is also exposed
through :meth:`AIProxy.complete` and :meth:`AIProxy.stream`.

Environment/Settings
--------------------
The proxy is built from ``xtermux.database.config.config.settings``:

- ``AI_INTEGRATIONS_OPENAI_API_KEY``: provider API key. When empty the proxy
  is created unconfigured and every call raises :class:`AIUnavailableError`.
- ``AI_INTEGRATIONS_OPENAI_BASE_URL``: provider base URL (e.g. an OpenRouter
  compatible gateway).
- ``AI_DEFAULT_MODEL`` / ``AI_MAX_TOKENS``: request defaults.
"""

import json
import logging
import re
from typing import Any, AsyncIterator, Dict, List, Optional

from openai import AsyncOpenAI

from xtermux.database.config.config import Settings

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = "You are XTermux AI. Professional, concise, tech-focused."

ARCHITECT_SYSTEM_PROMPT = (
    "You are a professional Termux script architect. Return ONLY valid JSON: "
    '{ "scriptName": "", "description": "", "language": "", '
    '"dependencies": [], "code": "", "instructions": "" }'
)

EMPTY_REPLY = "Error link."

AVAILABLE_MODELS: List[Dict[str, str]] = [
    {"id": "deepseek/deepseek-chat", "name": "DeepSeek V3", "provider": "DeepSeek", "description": "Powerhouse for coding & logic"},
    {"id": "google/gemini-pro-1.5", "name": "Gemini 1.5 Pro", "provider": "Google", "description": "Massive context & multimodal"},
    {"id": "google/gemini-flash-1.5", "name": "Gemini 1.5 Flash", "provider": "Google", "description": "Ultra-fast & efficient"},
    {"id": "anthropic/claude-3.5-sonnet", "name": "Claude 3.5 Sonnet", "provider": "Anthropic", "description": "Most human-like & creative"},
    {"id": "meta-llama/llama-3.1-405b", "name": "Llama 3.1 405B", "provider": "Meta", "description": "State-of-the-art open model"},
    {"id": "openai/gpt-4o", "name": "GPT-4o", "provider": "OpenAI", "description": "The industry standard"},
    {"id": "mistralai/mistral-large", "name": "Mistral Large", "provider": "Mistral", "description": "European coding excellence"},
]

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIUnavailableError(RuntimeError):
    """Raised when no provider API key is configured."""


class ArchitectFormatError(ValueError):
    """Raised when an architect reply holds no parseable JSON object."""


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the span from the first ``{`` to the last ``}`` of ``text``.

    Args:
        text: Raw model output, possibly wrapped in prose or code fences.

    Returns:
        dict: The decoded object.

    Raises:
        ArchitectFormatError: If there is no brace span, it is not valid JSON,
            or it does not decode to an object.
    """
    match = _JSON_OBJECT.search(text or "")
    if match is None:
        raise ArchitectFormatError("Format error")
    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ArchitectFormatError(f"Format error: {exc.msg}") from exc
    if not isinstance(value, dict):
        raise ArchitectFormatError("Format error")
    return value


def first_choice_content(response: Dict[str, Any]) -> str:
    """Content of the first choice of a completion payload, or ``""``."""
    try:
        return response["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


class AIProxy:
    """Thin async wrapper around an OpenAI-compatible client.

    Attributes:
        client: The ``AsyncOpenAI`` (or compatible) client, or None when the
            provider is not configured.
        default_model: Model used when a request names none.
        max_tokens: ``max_tokens`` sent by the chat and architect modes.
    """

    def __init__(self, client: Optional[Any], default_model: str = "gpt-4o", max_tokens: int = 2048):
        self.client = client
        self.default_model = default_model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIProxy":
        client = None
        if settings.ai_configured:
            client = AsyncOpenAI(
                api_key=settings.AI_INTEGRATIONS_OPENAI_API_KEY,
                base_url=settings.AI_INTEGRATIONS_OPENAI_BASE_URL,
            )
        else:
            logger.warning("AI_INTEGRATIONS_OPENAI_API_KEY is not set; AI routes will answer 503")
        return cls(client, default_model=settings.AI_DEFAULT_MODEL, max_tokens=settings.AI_MAX_TOKENS)

    @property
    def configured(self) -> bool:
        return self.client is not None

    def _require_client(self) -> Any:
        if self.client is None:
            raise AIUnavailableError("AI provider is not configured")
        return self.client

    def _params(self, messages: List[Dict[str, Any]], model: Optional[str], max_tokens: Optional[int]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"model": model or self.default_model, "messages": messages}
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        return params

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Forward one completion request and return the provider payload.

        Args:
            messages: Chat messages in the provider's format.
            model: Provider model id; defaults to :attr:`default_model`.
            max_tokens: Optional output cap, omitted from the request when None.

        Returns:
            dict: The provider response, serialised as plain JSON types.
        """
        client = self._require_client()
        params = self._params(messages, model, max_tokens)
        logger.debug("Forwarding %d messages to %s", len(messages), params["model"])
        response = await client.chat.completions.create(**params)
        return response.model_dump()

    async def stream(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """Yield the content deltas of a streamed completion."""
        client = self._require_client()
        response = await client.chat.completions.create(stream=True, **self._params(messages, model, max_tokens))
        async for chunk in response:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

    async def chat(self, history: List[Dict[str, Any]], model: Optional[str] = None) -> str:
        """Answer the last turn of ``history`` in chat mode.

        The XTermux system prompt is prepended; ``history`` must already end
        with the user's new message.

        Returns:
            str: The assistant reply, or ``"Error link."`` when the provider
            returned no content.
        """
        messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}, *history]
        response = await self.complete(messages, model=model, max_tokens=self.max_tokens)
        return first_choice_content(response) or EMPTY_REPLY

    async def architect(self, prompt: str, model: Optional[str] = None) -> Dict[str, Any]:
        """Ask for a script blueprint and decode the JSON reply.

        Raises:
            ArchitectFormatError: If the reply holds no JSON object.
        """
        messages = [
            {"role": "system", "content": ARCHITECT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        response = await self.complete(messages, model=model, max_tokens=self.max_tokens)
        return extract_json_object(first_choice_content(response))
