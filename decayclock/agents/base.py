"""BaseAgent ABC for DecayClock research agents.

Research agents inherit from BaseAgent and implement run(). State flows
through ResearchContext; agents themselves hold no per-request data.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from decayclock.models.pipeline import ResearchContext

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """Abstract base class for DecayClock research agents.

    Args:
        name: Unique agent identifier (e.g. "ResearchAgent").
        version: Semantic version of this agent implementation.
    """

    name: str = "BaseAgent"
    version: str = "1.0.0"

    @abstractmethod
    def run(self, context: "ResearchContext") -> Any:
        """Execute the agent and return a typed result.

        The orchestrator stores the result on the context after this returns.

        Args:
            context: Shared research context with configuration and upstream results.

        Returns:
            A typed result (subclass-specific).
        """

    def _run_timed(self, context: "ResearchContext") -> Any:
        """Execute run() and log elapsed time under the request id."""
        start = time.monotonic()
        try:
            result = self.run(context)
            logger.info(
                "[%s] Agent %s completed in %.2fs",
                context.request_id or "-",
                self.name,
                time.monotonic() - start,
            )
            return result
        except Exception as exc:
            logger.error(
                "[%s] Agent %s failed after %.2fs: %s",
                context.request_id or "-",
                self.name,
                time.monotonic() - start,
                exc,
                exc_info=True,
            )
            raise
