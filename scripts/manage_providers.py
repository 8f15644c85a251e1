#!/usr/bin/env python3
"""DecayClock: manage provider records in the providers YAML file.

API keys are stored obfuscated with AI_PROVIDER_ENCRYPTION_KEY (or the
default key when unset); use the same key when researching.

Usage:
    python scripts/manage_providers.py list
    python scripts/manage_providers.py add --id openrouter --name OpenRouter \\
        --base-url https://openrouter.ai/api/v1 --model meta-llama/llama-3.1-70b-instruct \\
        --api-key-env OPENROUTER_API_KEY --priority 2
    python scripts/manage_providers.py disable openrouter
    python scripts/manage_providers.py remove openrouter
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Ensure project root is on sys.path for consistent import resolution
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from config.defaults import PROVIDER_MAX_TOKENS, PROVIDER_TEMPERATURE  # noqa: E402
from config.settings import ResearchConfig  # noqa: E402
from decayclock.clients.providers import detect_dialect  # noqa: E402
from decayclock.io.provider_store import (  # noqa: E402
    list_provider_records,
    load_provider_by_id,
    remove_provider_record,
    save_provider_record,
)
from decayclock.models.providers import ProviderConfig  # noqa: E402
from decayclock.utils.key_codec import EnvKeyProvider  # noqa: E402
from decayclock.utils.logging_utils import configure_logging  # noqa: E402

logger = logging.getLogger("manage_providers")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="manage_providers",
        description="DecayClock: add, list, enable/disable and remove research providers",
    )
    parser.add_argument(
        "--providers-file",
        type=str,
        default=None,
        help="Providers YAML file (default: DECAYCLOCK_PROVIDERS_FILE or data/providers.yaml)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List stored providers (keys are never printed)")

    add = sub.add_parser("add", help="Add or replace a provider")
    add.add_argument("--id", required=True, help="Unique provider id")
    add.add_argument("--name", required=True, help="Display name")
    add.add_argument("--base-url", default="", help="Endpoint URL (empty = Anthropic)")
    add.add_argument("--model", required=True, help="Model identifier")
    add.add_argument(
        "--api-key-env",
        default=None,
        help="Name of the environment variable holding the API key",
    )
    add.add_argument("--priority", type=int, default=1, help="Lower runs first")
    add.add_argument("--max-tokens", type=int, default=PROVIDER_MAX_TOKENS)
    add.add_argument("--temperature", type=float, default=PROVIDER_TEMPERATURE)
    add.add_argument("--disabled", action="store_true", default=False)

    for name in ("enable", "disable", "remove"):
        cmd = sub.add_parser(name, help=f"{name.capitalize()} a provider by id")
        cmd.add_argument("provider_id")
    return parser


def _cmd_list(path: str) -> int:
    providers = list_provider_records(path)
    if not providers:
        print(f"No providers stored in {path}")
        return 0
    for p in providers:
        state = "enabled " if p.enabled else "disabled"
        print(
            f"  {p.priority:>3}  {state}  {p.id:<20} {p.name:<24} "
            f"[{detect_dialect(p.base_url)}] {p.model}"
        )
    return 0


def _cmd_add(args: argparse.Namespace, path: str) -> int:
    api_key = ""
    if args.api_key_env:
        api_key = os.getenv(args.api_key_env, "")
        if not api_key:
            logger.error("Environment variable %s is not set", args.api_key_env)
            return 1
    config = ProviderConfig(
        id=args.id,
        name=args.name,
        base_url=args.base_url,
        api_key=api_key,
        model=args.model,
        enabled=not args.disabled,
        priority=args.priority,
        max_tokens=args.max_tokens,
        temperature=args.temperature,
    )
    save_provider_record(config, path, EnvKeyProvider())
    print(f"Saved provider {config.id} ({detect_dialect(config.base_url)} dialect)")
    return 0


def _cmd_set_enabled(provider_id: str, path: str, enabled: bool) -> int:
    key_provider = EnvKeyProvider()
    config = load_provider_by_id(provider_id, path, key_provider)
    if config is None:
        logger.error("Provider %s not found in %s", provider_id, path)
        return 1
    config.enabled = enabled
    save_provider_record(config, path, key_provider)
    print(f"Provider {provider_id} {'enabled' if enabled else 'disabled'}")
    return 0


def main() -> None:
    """CLI entrypoint."""
    args = build_arg_parser().parse_args()
    configure_logging(log_level="WARNING")
    path = args.providers_file or ResearchConfig().providers_file

    if args.command == "list":
        code = _cmd_list(path)
    elif args.command == "add":
        code = _cmd_add(args, path)
    elif args.command in ("enable", "disable"):
        code = _cmd_set_enabled(args.provider_id, path, args.command == "enable")
    else:
        removed = remove_provider_record(args.provider_id, path)
        print(f"Removed provider {args.provider_id}" if removed else "No such provider")
        code = 0 if removed else 1
    sys.exit(code)


if __name__ == "__main__":
    main()
