"""DecayClock: all default threshold values and configuration constants.

All tuneable values live here. Never hard-code magic numbers in source files.
Import constants from this module; override via ResearchConfig at runtime.
"""

# ── Event vocabulary ───────────────────────────────────────────────────────────
# Ordered from least to most severe; position + 1 is the severity score
SEVERITIES = ("minor", "moderate", "significant", "major", "critical")

EVENT_TYPES = (
    "Paywall",
    "Privacy",
    "API",
    "Ads",
    "UX",
    "Algorithm",
    "Monetization",
    "Terms",
    "Other",
)

# Self-reported provider confidence tiers
SOURCE_CONFIDENCES = ("high", "medium", "low")

# Coercion targets for out-of-vocabulary enum values
DEFAULT_SEVERITY: str = "moderate"
DEFAULT_EVENT_TYPE: str = "Other"
DEFAULT_SOURCE_CONFIDENCE: str = "medium"

# Category treated as a wildcard when matching events across providers
WILDCARD_EVENT_TYPE: str = "Other"

# ── Cross-verification thresholds ──────────────────────────────────────────────
# Minimum title word overlap for two events to be considered the same
TITLE_OVERLAP_THRESHOLD: float = 0.4

# Minimum description word overlap (requires identical severity as well)
DESCRIPTION_OVERLAP_THRESHOLD: float = 0.5

# Words of this length or shorter are ignored by the overlap ratio
OVERLAP_MIN_WORD_LENGTH: int = 2

# Agreement count that verifies an event regardless of provider total
VERIFIED_AGREEMENT_COUNT: int = 3

# Agreement count that marks an event as likely
LIKELY_AGREEMENT_COUNT: int = 2

# Conflict flags: severity rank spread and date spread inside one group
CONFLICT_SEVERITY_SPREAD: int = 2
CONFLICT_DATE_SPREAD_DAYS: int = 14

# ── Provider calls ─────────────────────────────────────────────────────────────
# Per-provider wall-clock budget for one research query (seconds)
PROVIDER_TIMEOUT_SECONDS: float = 45.0

# Budget for the lightweight connectivity probe (seconds)
CONNECTION_TEST_TIMEOUT_SECONDS: float = 30.0

CONNECTION_TEST_PROMPT: str = 'Say "OK" and nothing else.'

# Retry hint surfaced for rate-limited providers when none is sent back
RATE_LIMIT_RETRY_AFTER_SECONDS: int = 60

# Hostnames that speak the Anthropic Messages API
ANTHROPIC_HOSTS = ("api.anthropic.com",)

# Hostnames and port that speak the native Ollama chat API
OLLAMA_HOSTS = ("ollama.com", "api.ollama.com")
OLLAMA_DEFAULT_PORT: int = 11434

# ── Fallback provider (ANTHROPIC_API_KEY from the environment) ─────────────────
FALLBACK_PROVIDER_ID: str = "env-anthropic"
FALLBACK_PROVIDER_NAME: str = "Anthropic (env)"
FALLBACK_PROVIDER_BASE_URL: str = "https://api.anthropic.com"
ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
PROVIDER_MAX_TOKENS: int = 4096
PROVIDER_TEMPERATURE: float = 0.7

# Key used to obfuscate provider API keys at rest when none is configured
DEFAULT_ENCRYPTION_KEY: str = "default-encryption-key"
ENCRYPTION_KEY_ENV_VAR: str = "AI_PROVIDER_ENCRYPTION_KEY"

# ── Admin workflow ─────────────────────────────────────────────────────────────
MIN_PLATFORM_NAME_LENGTH: int = 2

# Persisted field length limits
SERVICE_NAME_MAX_LENGTH: int = 100
SERVICE_DESCRIPTION_MAX_LENGTH: int = 500
SERVICE_CATEGORY_MAX_LENGTH: int = 50
EVENT_TITLE_MAX_LENGTH: int = 200
EVENT_DESCRIPTION_MAX_LENGTH: int = 2000
SLUG_MAX_LENGTH: int = 50

# Number of platforms returned by the recent-platforms listing
RECENT_PLATFORMS_LIMIT: int = 10

# ── Clock score ────────────────────────────────────────────────────────────────
# Total weighted score is divided by this constant, then scaled by CLOCK_SCALE
CLOCK_NORMALIZATION_CONSTANT: float = 2.0
CLOCK_SCALE: float = 10.0
CLOCK_MAX_LEVEL: int = 100

# (upper age bound in years, decay factor); ages beyond the last bound use CLOCK_FLOOR_DECAY
CLOCK_DECAY_STEPS = ((1.0, 1.0), (2.0, 0.8), (3.0, 0.6))
CLOCK_FLOOR_DECAY: float = 0.4

# (inclusive upper level, label, color)
CLOCK_BANDS = (
    (20, "Early warning", "green"),
    (40, "Noticeable decline", "yellow"),
    (60, "Significant degradation", "orange"),
    (80, "Severe enshittification", "red"),
    (100, "Critical / Terminal", "darkred"),
)

# ── Storage paths ──────────────────────────────────────────────────────────────
PROVIDERS_FILE: str = "data/providers.yaml"
STORE_PATH: str = "data/decayclock.json"

# ── Logging ────────────────────────────────────────────────────────────────────
DEFAULT_LOG_LEVEL: str = "INFO"
