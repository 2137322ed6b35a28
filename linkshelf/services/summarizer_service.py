"""Content summarizer service.

Turns scraped page metadata into a concise title, a short summary and a
single topic using the configured LLM client.
"""

from pydantic import ValidationError

from linkshelf.adapters.llm.base import AbstractLLMClient
from linkshelf.adapters.scraper.base import PageMetadata
from linkshelf.core.errors import LLMAppError
from linkshelf.schemas.bookmark import SummaryResult

# Prompt version for cache invalidation when prompt changes
PROMPT_VERSION = "v1"

SYSTEM_PROMPT = "You are a helpful assistant that generates concise bookmark information."


def build_prompt(url: str, page: PageMetadata) -> str:
    """Build the summarization prompt for a page.

    Args:
        url: Submitted URL.
        page: Scraped title and description.

    Returns:
        Prompt string asking for JSON with keys title, summary, topic.
    """
    return f"""
Generate a concise title, summary (max 30 words), and a single topic category for this content. Format as JSON with keys: title, summary, topic.

Content: {page.title}
Description: {page.description}
URL: {url}
""".strip()


class SummarizerService:
    """Ask the LLM to summarize and categorize a page.

    Attributes:
        llm: LLM client adapter for generating structured JSON.
    """

    def __init__(self, llm: AbstractLLMClient) -> None:
        self.llm = llm

    async def summarize(self, url: str, page: PageMetadata) -> SummaryResult:
        """Summarize a page.

        Args:
            url: Submitted URL.
            page: Scraped metadata used as model input.

        Returns:
            SummaryResult with stripped fields (possibly empty).

        Raises:
            LLMAppError: If the call fails or the response has the wrong shape.
        """
        raw_response = await self.llm.generate_json(
            build_prompt(url, page),
            system_prompt=SYSTEM_PROMPT,
            schema=SummaryResult.model_json_schema(),
        )

        try:
            return SummaryResult.model_validate(raw_response)
        except ValidationError as exc:
            raise LLMAppError(
                code="llm_invalid_response",
                message="LLM response did not match the expected summary shape.",
                details={"context": {"errors": exc.error_count()}},
            ) from exc
