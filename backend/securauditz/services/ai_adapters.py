"""
AI Adapters: provider-agnostic interface for LLM API calls.
Supports Google Gemini, Anthropic Claude and OpenAI-compatible APIs.
Returns both text content and token usage.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

_DEFAULT_ENDPOINTS = {
    "gemini": "https://generativelanguage.googleapis.com",
    "anthropic": "https://api.anthropic.com",
    "openai_compatible": "https://api.openai.com",
}


@dataclass
class LLMResponse:
    """Response from LLM with text and usage metadata."""
    text: str
    tokens_input: int = 0
    tokens_output: int = 0
    model: str = ""


class AIAdapter(ABC):
    """Base adapter for any AI provider."""

    def __init__(self, endpoint: str, api_key: str, model: str):
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.model = model

    @abstractmethod
    async def chat_completion(self, system: str, user_message: str,
                              max_tokens: int, temperature: float,
                              timeout: int = 120) -> LLMResponse:
        """Send a prompt and return structured response with usage data."""


class GeminiAdapter(AIAdapter):
    """Adapter for Google Gemini API (/v1beta/models/{model}:generateContent)."""

    async def chat_completion(self, system, user_message, max_tokens, temperature,
                              timeout=120):
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                f"{self.endpoint}/v1beta/models/{self.model}:generateContent",
                headers={
                    "x-goog-api-key": self.api_key,
                    "content-type": "application/json",
                },
                json={
                    "systemInstruction": {"parts": [{"text": system}]},
                    "contents": [{"role": "user", "parts": [{"text": user_message}]}],
                    "generationConfig": {
                        "maxOutputTokens": max_tokens,
                        "temperature": temperature,
                    },
                },
            )
            response.raise_for_status()
            data = response.json()

            candidates = data.get("candidates") or []
            if not candidates:
                feedback = data.get("promptFeedback", {})
                raise ValueError(
                    f"Gemini API returned no candidates "
                    f"(blockReason={feedback.get('blockReason', '?')})"
                )
            parts = candidates[0].get("content", {}).get("parts") or []
            text = "".join(p.get("text", "") for p in parts)
            usage = data.get("usageMetadata", {})

            return LLMResponse(
                text=text,
                tokens_input=usage.get("promptTokenCount", 0),
                tokens_output=usage.get("candidatesTokenCount", 0),
                model=data.get("modelVersion", self.model),
            )


class AnthropicAdapter(AIAdapter):
    """Adapter for Anthropic Claude API (/v1/messages)."""

    async def chat_completion(self, system, user_message, max_tokens, temperature,
                              timeout=120):
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                f"{self.endpoint}/v1/messages",
                headers={
                    "x-api-key": self.api_key,
                    "anthropic-version": "2023-06-01",
                    "content-type": "application/json",
                },
                json={
                    "model": self.model,
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                    "system": system,
                    "messages": [{"role": "user", "content": user_message}],
                },
            )
            response.raise_for_status()
            data = response.json()

            content = data.get("content") or []
            if not content:
                raise ValueError(
                    f"Anthropic API returned an empty response "
                    f"(stop_reason={data.get('stop_reason', '?')})"
                )
            usage = data.get("usage", {})

            return LLMResponse(
                text=content[0].get("text", ""),
                tokens_input=usage.get("input_tokens", 0),
                tokens_output=usage.get("output_tokens", 0),
                model=data.get("model", self.model),
            )


class OpenAICompatibleAdapter(AIAdapter):
    """Adapter for OpenAI-compatible API (OpenAI, vLLM, Ollama, LocalAI)."""

    async def chat_completion(self, system, user_message, max_tokens, temperature,
                              timeout=120):
        headers = {"content-type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                f"{self.endpoint}/v1/chat/completions",
                headers=headers,
                json={
                    "model": self.model,
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                    "messages": [
                        {"role": "system", "content": system},
                        {"role": "user", "content": user_message},
                    ],
                },
            )
            response.raise_for_status()
            data = response.json()

            choices = data.get("choices") or []
            if not choices:
                raise ValueError("OpenAI API returned an empty response (no choices)")
            usage = data.get("usage", {})

            return LLMResponse(
                text=choices[0].get("message", {}).get("content", ""),
                tokens_input=usage.get("prompt_tokens", 0),
                tokens_output=usage.get("completion_tokens", 0),
                model=data.get("model", self.model),
            )


_ADAPTERS: dict[str, type[AIAdapter]] = {
    "gemini": GeminiAdapter,
    "anthropic": AnthropicAdapter,
    "openai_compatible": OpenAICompatibleAdapter,
}


def build_ai_adapter(settings) -> AIAdapter | None:
    """Factory: return adapter based on settings, or None if AI not configured."""
    provider = (settings.AI_PROVIDER or "none").lower()
    adapter_cls = _ADAPTERS.get(provider)
    if adapter_cls is None:
        return None
    # A local OpenAI-compatible server may run without a key
    keyless_local = provider == "openai_compatible" and bool(settings.AI_ENDPOINT)
    if not settings.AI_API_KEY and not keyless_local:
        return None
    endpoint = settings.AI_ENDPOINT or _DEFAULT_ENDPOINTS[provider]
    return adapter_cls(endpoint, settings.AI_API_KEY, settings.AI_MODEL)
