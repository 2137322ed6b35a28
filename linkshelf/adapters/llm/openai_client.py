"""OpenAI LLM client adapter."""

import json
import logging
from typing import Any

from openai import AsyncOpenAI

from linkshelf.adapters.llm.base import AbstractLLMClient
from linkshelf.core.errors import LLMAppError

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "Output JSON only. No extra text or markdown formatting."

_PASSTHROUGH_PARAMS = (
    "max_tokens",
    "top_p",
    "frequency_penalty",
    "presence_penalty",
    "seed",
)


class OpenAIClient(AbstractLLMClient):
    """Client for calling OpenAI chat completions and returning JSON.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model

    async def generate_json(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        schema: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Generate structured JSON using OpenAI chat completions.

        JSON mode is always requested; the summarizer only ever consumes JSON.

        Raises:
            LLMAppError: On transport/API failure, empty content, or invalid JSON.
        """
        messages = [
            {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.pop("temperature", 0.2),
            "response_format": {"type": "json_object"},
        }
        for param in _PASSTHROUGH_PARAMS:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except Exception as exc:
            logger.error(
                "llm.request_failed",
                extra={"model": self.model, "error_type": type(exc).__name__},
            )
            raise LLMAppError(
                code="llm_request_failed",
                message=f"OpenAI API error: {exc}",
                details={"model": self.model},
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise LLMAppError(
                code="llm_empty_response",
                message="LLM returned empty response",
                details={"model": self.model},
            )

        try:
            parsed = json.loads(content.strip())
        except json.JSONDecodeError as exc:
            raise LLMAppError(
                code="llm_invalid_json",
                message=f"LLM returned invalid JSON: {exc}",
                details={"model": self.model},
            ) from exc

        if not isinstance(parsed, dict):
            raise LLMAppError(
                code="llm_invalid_json",
                message="LLM returned JSON that is not an object",
                details={"model": self.model},
            )
        return parsed

    async def aclose(self) -> None:
        await self.client.close()
