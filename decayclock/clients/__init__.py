"""DecayClock clients package.

Provider API clients only. No business logic in this layer.
Each client handles SDK initialization and translates failures into
ProviderError subclasses.
"""

from decayclock.clients.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
)
from decayclock.clients.providers import (
    AnthropicProvider,
    BaseProvider,
    Dialect,
    OllamaProvider,
    OpenAICompatibleProvider,
    create_provider,
    detect_dialect,
    test_connection,
)

__all__ = [
    "ProviderError",
    "ProviderAuthError",
    "ProviderRateLimitError",
    "BaseProvider",
    "AnthropicProvider",
    "OllamaProvider",
    "OpenAICompatibleProvider",
    "Dialect",
    "create_provider",
    "detect_dialect",
    "test_connection",
]
