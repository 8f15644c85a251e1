"""DecayClock: platform enshittification tracking with multi-provider research.

Public API surface:
    - ResearchConfig: Runtime configuration
    - research_platform: Research one platform and cross-verify the answers
    - research_and_save: Admin workflow that also persists the result
    - test_connection: Connectivity probe for one provider
"""

__version__ = "1.0.0"
__author__ = "DecayClock Contributors"

from config.settings import ResearchConfig
from decayclock.clients.providers import test_connection
from decayclock.pipeline import research_and_save, research_platform, run

__all__ = [
    "__version__",
    "ResearchConfig",
    "research_platform",
    "research_and_save",
    "run",
    "test_connection",
]
