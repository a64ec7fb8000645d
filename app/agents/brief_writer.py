"""Brief writer agent: turns a topic and search context into brief JSON text."""

import asyncio
import logging
from datetime import date

import httpx
from pydantic import BaseModel, Field
from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior

from app.agents.base_agent import BaseAgent
from app.config import settings
from app.core.exceptions import (
    APIKeyMissingError,
    MalformedResponseError,
    QuotaExhaustedError,
    RateLimitedError,
    UpstreamUnavailableError,
)
from app.integrations.web_search import SearchDocument
from app.models.brief import MAX_RADAR_POINTS

logger = logging.getLogger(__name__)

API_NAME = "BriefWriter"
EXCERPT_CHARS = 600


class BriefWriterInput(BaseModel):
    """Input for the brief writer agent."""

    topic: str
    documents: list[SearchDocument] = Field(default_factory=list)
    today: date


def build_brief_prompt(topic: str, documents: list[SearchDocument], today: date) -> str:
    """Render the user prompt asking for one brief as a bare JSON object."""
    if documents:
        context = "\n\n".join(
            f"[{index}] {doc.title}\nURL: {doc.url}\n{doc.excerpt[:EXCERPT_CHARS]}"
            for index, doc in enumerate(documents, start=1)
        )
    else:
        context = "No search results available. Rely on well-established developments only."

    return f"""Write this week's legal-intelligence brief.

Topic: {topic}
Date: {today.isoformat()}

Recent sources:
{context}

Return ONLY a JSON object (no markdown, no commentary) with these keys:
- "title": headline, at most 80 characters
- "deep_dive_text": about 500 words of markdown analysis for in-house counsel and founders
- "category": short tag such as "Legal Tech", "Privacy", "AI Regulation" or "Cybersecurity"
- "fun_fact": one surprising, verifiable sentence
- "radar_points": up to {MAX_RADAR_POINTS} one-line regional updates
- "jargon_term": one legal term used in the analysis
- "jargon_def": a plain-English definition of that term
- "social_caption": a LinkedIn-ready caption under 280 characters
- "cover_image": an image URL hint, or null"""


class BriefWriterAgent(BaseAgent[BriefWriterInput, str]):
    """Calls the text model and maps provider failures onto upstream error kinds."""

    temperature = 0.7

    @property
    def system_prompt(self) -> str:
        return (
            "You are the editor of dCorpo Intel, a weekly legal-intelligence newsletter "
            "covering Indian and global technology law (DPDPA, AI regulation, data "
            "protection, cybersecurity). You write precise, practical analysis and "
            "never invent statutes, case names or penalties. You always answer with a "
            "single JSON object."
        )

    @property
    def output_type(self) -> type[str]:
        return str

    def _build_prompt(self, input_data: BriefWriterInput) -> str:
        return build_brief_prompt(input_data.topic, input_data.documents, input_data.today)

    def _check_credentials(self) -> None:
        if self._model.startswith("openrouter:") and not settings.openrouter_api_key:
            raise APIKeyMissingError(API_NAME)

    async def complete(self, prompt: str) -> str:
        """Send `prompt` and return the raw model text."""
        self._check_credentials()
        try:
            return await self._run_prompt(
                prompt,
                model_settings={
                    "temperature": self.temperature,
                    "timeout": settings.llm_timeout_seconds,
                },
            )
        except ModelHTTPError as e:
            logger.warning(
                "Model HTTP error",
                extra={"status_code": e.status_code, "model": e.model_name, "body": str(e.body)},
            )
            if e.status_code == 429:
                raise RateLimitedError(API_NAME) from e
            if e.status_code == 402:
                raise QuotaExhaustedError(API_NAME) from e
            raise UpstreamUnavailableError(API_NAME, f"HTTP {e.status_code}") from e
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.warning("Model request timed out", extra={"model": self._model})
            raise UpstreamUnavailableError(API_NAME, "Request timed out") from e
        except httpx.TransportError as e:
            logger.warning("Model transport error", extra={"model": self._model, "error": str(e)})
            raise UpstreamUnavailableError(API_NAME, "Connection failed") from e
        except UnexpectedModelBehavior as e:
            logger.warning("Unexpected model behavior", extra={"model": self._model, "error": str(e)})
            raise MalformedResponseError(e.body or "", e.message) from e
