#!/usr/bin/env python3
"""DecayClock: print the decay gauge and a per-platform event timeline.

Usage:
    python scripts/clock_status.py
    python scripts/clock_status.py --type Privacy
    python scripts/clock_status.py --platform twitter --recent
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path for consistent import resolution
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from config.defaults import EVENT_TYPES, RECENT_PLATFORMS_LIMIT  # noqa: E402
from config.settings import ResearchConfig  # noqa: E402
from decayclock.analysis.clock_calculator import calculate_clock_state  # noqa: E402
from decayclock.io.event_store import JsonEventStore  # noqa: E402
from decayclock.utils.timeline_helpers import (  # noqa: E402
    ALL_TYPES,
    filter_events_by_type,
    format_event_date_full,
    group_events_by_platform,
)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clock_status",
        description="DecayClock: decay gauge and event timeline",
    )
    parser.add_argument("--store-path", type=str, default=None, help="Event store JSON file")
    parser.add_argument(
        "--type",
        type=str,
        default=ALL_TYPES,
        choices=[ALL_TYPES, *EVENT_TYPES],
        help="Only show events of this category",
    )
    parser.add_argument("--platform", type=str, default=None, help="Only show this slug")
    parser.add_argument(
        "--recent",
        action="store_true",
        default=False,
        help="Also list the most recently researched platforms",
    )
    return parser


def main() -> None:
    args = build_arg_parser().parse_args()
    store = JsonEventStore(args.store_path or ResearchConfig().store_path)

    events = store.load_events(with_service=True)
    state = calculate_clock_state(events)
    print(f"Decay level: {state.level}/100  {state.position} ({state.color})")
    print(f"{state.event_count} events across {state.service_count} platforms\n")

    grouped = group_events_by_platform(filter_events_by_type(events, args.type))
    for slug, platform_events in grouped.items():
        if args.platform and slug != args.platform:
            continue
        service = platform_events[0].service
        print(service.name if service else slug)
        for event in platform_events:
            print(
                f"  {format_event_date_full(event.event_date):<14} "
                f"{event.severity:<11} {event.event_type:<12} {event.title}"
            )
        print()

    if args.recent:
        print(f"Recently researched (last {RECENT_PLATFORMS_LIMIT}):")
        for platform in store.recent_platforms():
            print(f"  {platform.updated_at[:19]}  {platform.name:<30} {platform.event_count} events")


if __name__ == "__main__":
    main()
