#!/usr/bin/env python3
"""DecayClock batch runner: research and store several platforms in sequence.

Usage:
    python scripts/batch_research.py --platforms platforms.yaml
    python scripts/batch_research.py --platforms platforms.txt --dry-run
    python scripts/batch_research.py --platforms platforms.yaml --delay-seconds 30

Platform list formats:
    YAML:
        platforms:
          - Twitter
          - Reddit
          - Netflix

    Plain text: one platform per line; blank lines and lines starting
    with '#' are ignored.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

# Ensure project root is on sys.path for consistent import resolution
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import yaml  # noqa: E402

from config.defaults import DEFAULT_LOG_LEVEL  # noqa: E402
from config.settings import ResearchConfig  # noqa: E402
from decayclock.io.event_store import JsonEventStore  # noqa: E402
from decayclock.pipeline import research_and_save  # noqa: E402
from decayclock.utils.logging_utils import configure_logging  # noqa: E402

logger = logging.getLogger("batch_research")


# ── Argument parsing ──────────────────────────────────────────────────────────────

def build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the batch runner."""
    parser = argparse.ArgumentParser(
        prog="batch_research",
        description="DecayClock batch runner: research and store a list of platforms",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--platforms",
        type=str,
        required=True,
        help="YAML (platforms: [...]) or plain-text file listing platforms",
    )
    parser.add_argument(
        "--store-path",
        type=str,
        default=None,
        help="Event store JSON file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Print the resolved platform list without researching",
    )
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        default=False,
        help="Halt the batch if any platform fails",
    )
    parser.add_argument(
        "--delay-seconds",
        type=float,
        default=5.0,
        help="Delay between consecutive platforms (eases provider rate limits)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )
    return parser


# ── Platform list loading ─────────────────────────────────────────────────────────

def load_platform_list(path: str) -> List[str]:
    """Load platform names from a YAML or plain-text file.

    Duplicate names (case-insensitive) are dropped, first occurrence kept.

    Args:
        path: File path (.yaml/.yml parsed as YAML, anything else as text).

    Returns:
        Platform names in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a YAML file lacks a 'platforms' list.
    """
    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8")

    if file_path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
        names = data.get("platforms") if isinstance(data, dict) else None
        if not isinstance(names, list):
            raise ValueError(f"{path}: expected a top-level 'platforms' list")
        candidates = [str(n).strip() for n in names if n is not None]
    else:
        candidates = [
            line.strip() for line in text.splitlines()
            if line.strip() and not line.strip().startswith("#")
        ]

    seen = set()
    platforms: List[str] = []
    for name in candidates:
        if name and name.lower() not in seen:
            seen.add(name.lower())
            platforms.append(name)
    return platforms


# ── Batch execution ───────────────────────────────────────────────────────────────

def run_batch(
    platforms: List[str],
    store: JsonEventStore,
    config: ResearchConfig,
    stop_on_error: bool = False,
    delay_seconds: float = 5.0,
    dry_run: bool = False,
) -> List[Dict[str, Any]]:
    """Research and store each platform sequentially.

    Returns:
        List of run summary dicts (one per platform).
    """
    results: List[Dict[str, Any]] = []
    total = len(platforms)

    for idx, platform in enumerate(platforms, start=1):
        logger.info("Batch research [%d/%d]: %s", idx, total, platform)

        if dry_run:
            print(f"  [DRY RUN] Would research: {platform!r}")
            results.append({"platform": platform, "status": "DRY_RUN"})
            continue

        start_ts = time.time()
        save_result = research_and_save(platform, store, config=config)
        elapsed = round(time.time() - start_ts, 2)
        results.append({
            "platform": platform,
            "status": "OK" if save_result.success else "FAILED",
            "message": save_result.message,
            "event_count": save_result.event_count or 0,
            "elapsed_seconds": elapsed,
        })
        if not save_result.success:
            logger.error("  FAILED after %.1fs: %s", elapsed, save_result.message)
            if stop_on_error:
                logger.error("Stopping batch due to --stop-on-error flag")
                break

        if idx < total and delay_seconds > 0:
            time.sleep(delay_seconds)

    return results


def print_summary(results: List[Dict[str, Any]]) -> None:
    """Print a tabular run summary to stdout."""
    print("\n" + "=" * 60)
    print("BATCH RESEARCH SUMMARY")
    print("=" * 60)
    ok = sum(1 for r in results if r["status"] == "OK")
    failed = sum(1 for r in results if r["status"] == "FAILED")
    print(f"Total: {len(results)}  OK: {ok}  FAILED: {failed}")
    for r in results:
        elapsed = f"{r['elapsed_seconds']:.1f}s" if "elapsed_seconds" in r else ""
        print(f"  {r['status']:<8}  {r['platform'][:40]:<42}  {elapsed}")
        if r["status"] == "FAILED":
            print(f"           {r['message']}")
    print("=" * 60)


# ── Entry point ───────────────────────────────────────────────────────────────────

def main() -> None:
    """Main entry point for the batch runner."""
    args = build_arg_parser().parse_args()
    configure_logging(log_level=args.log_level)

    try:
        platforms = load_platform_list(args.platforms)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Cannot read platform list: %s", exc)
        sys.exit(1)
    if not platforms:
        logger.error("Platform list %s is empty", args.platforms)
        sys.exit(1)

    config = ResearchConfig(log_level=args.log_level)
    if args.store_path:
        config.store_path = args.store_path

    results = run_batch(
        platforms,
        JsonEventStore(config.store_path),
        config,
        stop_on_error=args.stop_on_error,
        delay_seconds=args.delay_seconds,
        dry_run=args.dry_run,
    )
    print_summary(results)

    if any(r["status"] == "FAILED" for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
