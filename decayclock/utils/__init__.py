"""DecayClock utilities package.

All utilities are stateless pure functions with no external calls or side effects.
"""

from decayclock.utils.date_utils import (
    is_same_month,
    is_valid_event_date,
    parse_event_date,
    years_between,
)
from decayclock.utils.key_codec import (
    EnvKeyProvider,
    StaticKeyProvider,
    decrypt_api_key,
    encrypt_api_key,
)
from decayclock.utils.text import contains_word, generate_slug, word_overlap, word_set

__all__ = [
    "parse_event_date",
    "is_valid_event_date",
    "is_same_month",
    "years_between",
    "EnvKeyProvider",
    "StaticKeyProvider",
    "encrypt_api_key",
    "decrypt_api_key",
    "contains_word",
    "generate_slug",
    "word_overlap",
    "word_set",
]
