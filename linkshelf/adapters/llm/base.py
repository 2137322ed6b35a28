from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for the model that summarizes bookmarked pages.

	Implementations return one JSON object per call. Each call counts
	against the summarizer budget, so callers go through the rate limiter
	guard first.
	"""

	@abstractmethod
	async def generate_json(
		self,
		prompt: str,
		*,
		system_prompt: str | None = None,
		schema: dict[str, Any] | None = None,
		**kwargs: Any,
	) -> dict[str, Any]:
		"""Send one prompt and return the decoded JSON object.

		Args:
			prompt: User message.
			system_prompt: System instruction; a JSON-only default is used when omitted.
			schema: JSON schema of the expected object, for providers that accept one.
			**kwargs: Sampling options such as temperature or max_tokens.

		Raises:
			LLMAppError: On provider failure, empty output or a non-object reply.
		"""
		...

	async def aclose(self) -> None:
		"""Release network resources held by the client."""
		return None
