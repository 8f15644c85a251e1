#!/usr/bin/env python3
"""DecayClock: pre-flight provider validation.

Checks:
  1. Required package imports (SDKs for every provider dialect)
  2. Environment variable presence
  3. Connectivity of every configured provider (a trivial "Say OK" prompt)

Usage:
    python scripts/validate_providers.py
    python scripts/validate_providers.py --skip-network
    python scripts/validate_providers.py --provider openrouter
"""

from __future__ import annotations

import argparse
import importlib
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Ensure project root is on sys.path
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from config.defaults import CONNECTION_TEST_TIMEOUT_SECONDS, ENCRYPTION_KEY_ENV_VAR  # noqa: E402
from config.settings import ResearchConfig  # noqa: E402
from decayclock.clients.providers import detect_dialect, test_connection  # noqa: E402
from decayclock.io.provider_store import load_provider_by_id, load_provider_configs  # noqa: E402
from decayclock.utils.key_codec import EnvKeyProvider  # noqa: E402

# ── ANSI colours ────────────────────────────────────────────────────────────────
_GREEN = "\033[32m"
_RED = "\033[31m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"
_BOLD = "\033[1m"

CheckResult = Tuple[Optional[bool], str]


def _ok(msg: str) -> str:
    return f"{_GREEN}✓{_RESET}  {msg}"


def _fail(msg: str) -> str:
    return f"{_RED}✗{_RESET}  {msg}"


def _warn(msg: str) -> str:
    return f"{_YELLOW}⚠{_RESET}  {msg}"


def _header(msg: str) -> str:
    return f"\n{_BOLD}{msg}{_RESET}"


# ── Check functions ──────────────────────────────────────────────────────────────

def check_package_imports() -> List[CheckResult]:
    """Verify the provider SDKs and support libraries can be imported."""
    required = [
        ("anthropic", "anthropic"),
        ("openai", "openai"),
        ("ollama", "ollama"),
        ("dotenv", "python-dotenv"),
        ("yaml", "PyYAML"),
        ("dateutil", "python-dateutil"),
    ]
    results: List[CheckResult] = []
    for import_name, package_name in required:
        try:
            mod = importlib.import_module(import_name)
            version = getattr(mod, "__version__", "?")
            results.append((True, f"{package_name} ({version})"))
        except ImportError:
            results.append((False, f"{package_name}: NOT installed (pip install {package_name})"))
    return results


def check_env_vars(config: ResearchConfig) -> List[CheckResult]:
    """Report the environment settings the research workflow reads."""
    results: List[CheckResult] = []
    if config.anthropic_api_key:
        key = config.anthropic_api_key
        masked = key[:8] + "..." + key[-4:] if len(key) > 12 else "***"
        results.append((True, f"ANTHROPIC_API_KEY = {masked}"))
    else:
        results.append((None, "ANTHROPIC_API_KEY: not set (no fallback provider)"))

    if os.getenv(ENCRYPTION_KEY_ENV_VAR):
        results.append((True, f"{ENCRYPTION_KEY_ENV_VAR} = set"))
    else:
        results.append((None, f"{ENCRYPTION_KEY_ENV_VAR}: not set (using the default key)"))

    results.append((True, f"Providers file = {config.providers_file!r}"))
    results.append((True, f"Provider timeout = {config.provider_timeout_seconds:g}s"))
    return results


def check_providers(
    config: ResearchConfig, provider_id: Optional[str], timeout: float, skip_network: bool
) -> List[CheckResult]:
    """Probe each configured provider (or the one named by provider_id)."""
    key_provider = EnvKeyProvider()
    if provider_id:
        provider = load_provider_by_id(
            provider_id, config.providers_file, key_provider, config.anthropic_api_key
        )
        providers = [provider] if provider else []
        if not providers:
            return [(False, f"Provider {provider_id!r} not found")]
    else:
        providers = load_provider_configs(
            config.providers_file, key_provider, config.anthropic_api_key
        )
    if not providers:
        return [(False, "No providers configured and ANTHROPIC_API_KEY is not set")]

    results: List[CheckResult] = []
    for provider in providers:
        label = f"{provider.name} [{detect_dialect(provider.base_url)}] {provider.model}"
        if skip_network:
            results.append((None, f"{label}: skipped"))
            continue
        outcome = test_connection(provider, timeout=timeout)
        results.append((outcome.success, f"{label}: {outcome.message}"))
    return results


# ── Report ───────────────────────────────────────────────────────────────────────

def _print_results(results: List[CheckResult], indent: int = 2) -> int:
    """Print check results and return count of failures."""
    failures = 0
    pad = " " * indent
    for ok, msg in results:
        if ok is True:
            print(f"{pad}{_ok(msg)}")
        elif ok is False:
            print(f"{pad}{_fail(msg)}")
            failures += 1
        else:
            print(f"{pad}{_warn(msg)}")
    return failures


def main() -> None:
    """Run all pre-flight checks and report results."""
    parser = argparse.ArgumentParser(description="DecayClock: provider pre-flight validation")
    parser.add_argument(
        "--skip-network",
        action="store_true",
        default=False,
        help="List providers without sending a probe prompt",
    )
    parser.add_argument(
        "--provider",
        type=str,
        default=None,
        help="Only probe the provider with this id",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=CONNECTION_TEST_TIMEOUT_SECONDS,
        help="Probe timeout in seconds",
    )
    args = parser.parse_args()

    config = ResearchConfig()
    failures = 0

    print(_header("Packages"))
    failures += _print_results(check_package_imports())

    print(_header("Environment"))
    failures += _print_results(check_env_vars(config))

    print(_header("Providers"))
    failures += _print_results(
        check_providers(config, args.provider, args.timeout, args.skip_network)
    )

    print()
    if failures:
        print(_fail(f"{failures} check(s) failed"))
        sys.exit(1)
    print(_ok("All checks passed"))


if __name__ == "__main__":
    main()
