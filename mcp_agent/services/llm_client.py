"""Chat-completion client for the campaign agent.

Talks to an OpenAI-compatible ``/chat/completions`` endpoint (Groq by
default). One attempt per call: the agent turns any failure into a chat
reply, so retrying here would only delay the user.

Usage:
    from mcp_agent.services.llm_client import ChatCompletionClient

    client = ChatCompletionClient(api_key="gsk_xxx")
    result = client.complete([{"role": "user", "content": "Oi"}])
    print(result.content, result.cost_usd)
"""

import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3-70b-8192"

# Pricing per 1M tokens
MODEL_PRICING = {
    "llama3-70b-8192": {"input_per_m": 0.59, "output_per_m": 0.79},
    "llama3-8b-8192": {"input_per_m": 0.05, "output_per_m": 0.08},
    "llama-3.3-70b-versatile": {"input_per_m": 0.59, "output_per_m": 0.79},
}

_EXTENSION_KEY = "mcp_agent.llm_client"


class LlmError(Exception):
    """Raised when the completion service cannot be used or returns garbage."""


class LlmResponse:
    """Structured response from a chat-completion call."""

    __slots__ = ("content", "has_tool_calls", "model", "input_tokens", "output_tokens", "cost_usd")

    def __init__(self, content, has_tool_calls, model, input_tokens, output_tokens, cost_usd):
        self.content = content
        self.has_tool_calls = has_tool_calls
        self.model = model
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.cost_usd = cost_usd


class ChatCompletionClient:
    """Single-shot chat-completion client."""

    def __init__(self, api_key, base_url="https://api.groq.com/openai/v1",
                 default_model=DEFAULT_MODEL, timeout=30,
                 temperature=0.3, max_tokens=1024):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    def complete(self, messages, model=None):
        """Send the assembled messages and return the raw reply.

        Args:
            messages: Ordered list of chat message dicts (system first).
            model: Model name (default: self.default_model)

        Returns:
            LlmResponse; ``content`` is "" when the model produced no text.

        Raises:
            LlmError: If no API key is configured or the body is malformed.
            requests.RequestException: On transport errors and non-2xx replies.
        """
        if not self.api_key:
            raise LlmError("LLM API key is not configured")

        model = model or self.default_model
        payload = {
            "model": model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {
            "Authorization": "Bearer {}".format(self.api_key),
            "Content-Type": "application/json",
        }

        resp = requests.post(
            "{}/chat/completions".format(self.base_url),
            headers=headers,
            json=payload,
            timeout=self.timeout,
        )
        resp.raise_for_status()

        try:
            data = resp.json()
            choices = data.get("choices") or []
            message = (choices[0].get("message") or {}) if choices else {}
        except (ValueError, AttributeError) as exc:
            raise LlmError("Malformed completion response: {}".format(exc)) from exc

        usage = data.get("usage") or {}
        input_tokens = usage.get("prompt_tokens") or 0
        output_tokens = usage.get("completion_tokens") or 0

        return LlmResponse(
            content=message.get("content") or "",
            has_tool_calls=bool(message.get("tool_calls")),
            model=data.get("model", model),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=self._estimate_cost(model, input_tokens, output_tokens),
        )

    @staticmethod
    def _estimate_cost(model, input_tokens, output_tokens):
        """Estimate USD cost based on model pricing."""
        pricing = MODEL_PRICING.get(model, MODEL_PRICING[DEFAULT_MODEL])
        input_cost = (input_tokens / 1_000_000) * pricing["input_per_m"]
        output_cost = (output_tokens / 1_000_000) * pricing["output_per_m"]
        return round(input_cost + output_cost, 6)


def get_llm_client():
    """Return the app's completion client, creating it on first use."""
    app = current_app._get_current_object()
    client = app.extensions.get(_EXTENSION_KEY)
    if client is None:
        cfg = app.config
        if not cfg.get("LLM_API_KEY"):
            logger.warning("LLM_API_KEY is not set; agent requests will fail")
        client = ChatCompletionClient(
            api_key=cfg.get("LLM_API_KEY", ""),
            base_url=cfg.get("LLM_BASE_URL", "https://api.groq.com/openai/v1"),
            default_model=cfg.get("LLM_MODEL", DEFAULT_MODEL),
            timeout=cfg.get("LLM_TIMEOUT", 30),
            temperature=cfg.get("LLM_TEMPERATURE", 0.3),
            max_tokens=cfg.get("LLM_MAX_TOKENS", 1024),
        )
        app.extensions[_EXTENSION_KEY] = client
    return client
