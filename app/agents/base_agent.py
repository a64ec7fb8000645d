"""Base class for Pydantic AI agents."""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar, cast

from pydantic import BaseModel
from pydantic_ai import Agent

from app.config import settings

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT")


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for Pydantic AI agents.

    Each agent should:
    1. Define the system_prompt property
    2. Define the output_type property
    3. Implement _build_prompt to construct the user prompt
    """

    # Explicit model override at the class level
    model: str | None = None
    temperature: float = 0.7
    max_retries: int = 1

    def __init__(self, model_override: str | None = None) -> None:
        """Initialize the agent.

        Model resolution priority:
        1. model_override parameter (explicit runtime override)
        2. model class attribute (if set by subclass)
        3. settings.get_brief_model() (env override, then per-environment default)
        """
        if model_override:
            self._model = model_override
            model_source = "runtime_override"
        elif self.model:
            self._model = self.model
            model_source = "class_override"
        else:
            self._model = settings.get_brief_model()
            model_source = "environment_default"
        self._agent: Agent[None, OutputT] | None = None

        logger.info(
            "Agent initialized",
            extra={
                "agent": self.__class__.__name__,
                "model": self._model,
                "model_source": model_source,
                "temperature": self.temperature,
            },
        )

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def agent(self) -> Agent[None, OutputT]:
        """Lazily initialize and return the Pydantic AI agent."""
        if self._agent is None:
            self._agent = cast(
                Agent[None, OutputT],
                Agent(
                    model=self._model,
                    output_type=self.output_type,
                    system_prompt=self._build_system_prompt(),
                    retries=self.max_retries,
                ),
            )
        agent = self._agent
        assert agent is not None
        return agent

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """System prompt for the agent."""
        pass

    @property
    @abstractmethod
    def output_type(self) -> type[OutputT]:
        """Output type (a pydantic model, or `str` for raw text)."""
        pass

    def _build_system_prompt(self, now: datetime | None = None) -> str:
        """System prompt plus the current date, so the model does not assume a stale year."""
        current = now or datetime.now(timezone.utc)
        return (
            f"{self.system_prompt}\n\n"
            "## Runtime Date Context\n"
            f"- Today: {current.date().isoformat()}\n"
            f"- Current year: {current.year}\n"
            "- Treat developments from outdated years as background, not news."
        )

    @abstractmethod
    def _build_prompt(self, input_data: InputT) -> str:
        """Build the user prompt from input data."""
        pass

    async def run(self, input_data: InputT) -> OutputT:
        """Build the prompt for `input_data` and run the agent on it."""
        logger.info(
            "Agent run started",
            extra={
                "agent": self.__class__.__name__,
                "input_type": type(input_data).__name__,
                "model": self._model,
            },
        )
        return await self._run_prompt(self._build_prompt(input_data))

    async def _run_prompt(self, prompt: str, **run_kwargs: Any) -> OutputT:
        agent_name = self.__class__.__name__
        logger.info(
            "Prompt built, sending to LLM",
            extra={
                "agent": agent_name,
                "prompt_length": len(prompt),
                "model": self._model,
            },
        )

        t0 = time.perf_counter()
        result = await self.agent.run(prompt, **run_kwargs)
        elapsed = time.perf_counter() - t0

        usage = result.usage()
        logger.info(
            "Agent run completed",
            extra={
                "agent": agent_name,
                "duration_s": round(elapsed, 2),
                "request_tokens": getattr(usage, "request_tokens", None),
                "response_tokens": getattr(usage, "response_tokens", None),
                "total_tokens": getattr(usage, "total_tokens", None),
                "output_type": type(result.output).__name__,
            },
        )
        return result.output
