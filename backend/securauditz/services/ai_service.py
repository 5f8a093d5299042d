"""
AI Service: remediation recommendations on top of an AIAdapter.
Raises AINotConfiguredException when no provider is configured and
AIRequestException when the provider call fails.
"""
import logging
import time

import httpx

from securauditz.errors import UpstreamRequestError, UpstreamUnavailableError
from securauditz.services.ai_adapters import AIAdapter, LLMResponse
from securauditz.services.ai_prompts import SYSTEM_PROMPT_REMEDIATION, build_remediation_prompt

logger = logging.getLogger(__name__)


class AINotConfiguredException(UpstreamUnavailableError):
    """Raised when AI is not configured or disabled."""


class AIRequestException(UpstreamRequestError):
    """Raised when the AI provider rejects the call or returns nothing usable."""


class AIService:
    """Remediation text generation with explicit availability checks."""

    def __init__(self, adapter: AIAdapter | None, max_tokens: int = 1024,
                 temperature: float = 0.4, timeout: int = 60):
        self.adapter = adapter
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    @property
    def is_available(self) -> bool:
        return self.adapter is not None

    def _require_ai(self):
        if not self.is_available:
            raise AINotConfiguredException(
                "AI service is not available (API key missing or provider disabled)."
            )

    async def _call_llm(self, system: str, user_message: str) -> LLMResponse:
        self._require_ai()
        start_time = time.time()
        try:
            result = await self.adapter.chat_completion(
                system=system,
                user_message=user_message,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                timeout=self.timeout,
            )
        except httpx.HTTPStatusError as e:
            logger.error("AI provider returned HTTP %s", e.response.status_code)
            raise AIRequestException(
                f"AI provider error: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("AI provider call failed: %s", e)
            raise AIRequestException(f"Error generating AI recommendation: {e}") from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "AI call model=%s tokens_in=%d tokens_out=%d duration_ms=%d",
            result.model, result.tokens_input, result.tokens_output, duration_ms,
        )
        if not result.text.strip():
            raise AIRequestException("AI provider returned an empty recommendation")
        return result

    async def generate_recommendation(self, control_objective: str, audit_question: str,
                                      compliance_status: str,
                                      justification_text: str | None = None) -> LLMResponse:
        prompt = build_remediation_prompt(
            control_objective, audit_question, compliance_status, justification_text,
        )
        return await self._call_llm(SYSTEM_PROMPT_REMEDIATION, prompt)
