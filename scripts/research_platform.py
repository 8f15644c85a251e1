#!/usr/bin/env python3
"""DecayClock CLI: research one platform with every configured provider.

Usage:
    python scripts/research_platform.py "Twitter"
    python scripts/research_platform.py "Reddit" --save
    python scripts/research_platform.py "Netflix" --json --timeout 60
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

# Ensure project root is on sys.path for consistent import resolution
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from config.defaults import DEFAULT_LOG_LEVEL, PROVIDER_TIMEOUT_SECONDS  # noqa: E402
from config.settings import ResearchConfig  # noqa: E402
from decayclock.io.event_store import JsonEventStore  # noqa: E402
from decayclock.io.provider_store import load_provider_configs  # noqa: E402
from decayclock.models.verification import CrossVerifiedResult  # noqa: E402
from decayclock.pipeline import research_and_save, research_platform  # noqa: E402
from decayclock.utils.key_codec import EnvKeyProvider  # noqa: E402
from decayclock.utils.logging_utils import configure_logging  # noqa: E402

logger = logging.getLogger("research_platform")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser for single-platform research."""
    parser = argparse.ArgumentParser(
        prog="research_platform",
        description="DecayClock: research enshittification events for one platform",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("platform", type=str, help="Platform name, e.g. 'Twitter'")
    parser.add_argument(
        "--save",
        action="store_true",
        default=False,
        help="Persist the cross-verified result to the event store",
    )
    parser.add_argument(
        "--providers-file",
        type=str,
        default=None,
        help="Providers YAML file (default: DECAYCLOCK_PROVIDERS_FILE or data/providers.yaml)",
    )
    parser.add_argument(
        "--store-path",
        type=str,
        default=None,
        help="Event store JSON file (default: DECAYCLOCK_STORE_PATH or data/decayclock.json)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=PROVIDER_TIMEOUT_SECONDS,
        help="Per-provider timeout in seconds",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the cross-verified result as JSON instead of a table",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity level",
    )
    return parser


def args_to_config(args: argparse.Namespace) -> ResearchConfig:
    """Convert parsed CLI arguments to a ResearchConfig instance."""
    config = ResearchConfig(provider_timeout_seconds=args.timeout, log_level=args.log_level)
    if args.providers_file:
        config.providers_file = args.providers_file
    if args.store_path:
        config.store_path = args.store_path
    return config


def print_result(result: CrossVerifiedResult) -> None:
    """Print the verified events as a table."""
    meta = result.metadata
    print(f"\n{result.service.name} ({result.service.category})")
    print(f"  {result.service.description}")
    print(
        f"  Providers: {len(meta.providers_succeeded)}/{len(meta.providers_queried)} succeeded"
        f" | consensus {meta.consensus_score}%"
        f" | {meta.verified_event_count}/{meta.total_event_count} verified"
        f" | {meta.conflict_count} conflicts"
    )
    print("-" * 78)
    for event in result.events:
        v = event.verification
        print(
            f"  {event.event_date}  {event.severity:<11} {event.event_type:<12} "
            f"{v.confidence:<10} {v.consensus_score:>3}%  {event.title[:60]}"
        )
        for flag in v.conflicts:
            print(f"{'':14}! {flag.dimension}: {flag.detail}")
    print("-" * 78)


def main() -> None:
    """CLI entrypoint: parse arguments, research, print and optionally save."""
    args = build_arg_parser().parse_args()
    configure_logging(log_level=args.log_level)
    config = args_to_config(args)

    if args.save:
        store = JsonEventStore(config.store_path)
        result = research_and_save(args.platform, store, config=config)
        print(result.message)
        sys.exit(0 if result.success else 1)

    providers = load_provider_configs(
        config.providers_file, EnvKeyProvider(), fallback_api_key=config.anthropic_api_key
    )
    try:
        outcome = research_platform(args.platform.strip(), providers, config=config)
    except KeyboardInterrupt:
        logger.info("Research interrupted by user")
        sys.exit(130)

    if not outcome.success:
        error = outcome.error
        suffix = f" (retry after {error.retry_after}s)" if error.retry_after else ""
        print(f"Research failed [{error.type}]: {error.message}{suffix}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(asdict(outcome.data), indent=2, ensure_ascii=False))
    else:
        print_result(outcome.data)


if __name__ == "__main__":
    main()
