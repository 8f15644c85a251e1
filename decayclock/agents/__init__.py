"""DecayClock agents package.

Agents inherit from BaseAgent and communicate through ResearchContext.
"""

from decayclock.agents.base import BaseAgent
from decayclock.agents.research_agent import (
    ResearchAgent,
    build_research_prompt,
    query_provider,
)
from decayclock.agents.verification_agent import (
    CrossVerificationAgent,
    cross_verify_results,
    determine_confidence,
    group_events,
)

__all__ = [
    "BaseAgent",
    "ResearchAgent",
    "build_research_prompt",
    "query_provider",
    "CrossVerificationAgent",
    "cross_verify_results",
    "determine_confidence",
    "group_events",
]
