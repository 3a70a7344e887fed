# orrery/cli.py

from __future__ import annotations
import argparse
import asyncio
import json
import signal
import sys
from pathlib import Path
from typing import Any

from orrery.config import OrreryConfig, load_config
from orrery.engine.event_bus import COUNTDOWN_REFRESHED
from orrery.engine.session import Session
from orrery.feeds.neo.neows_feed import CloseApproachFeed, OfflineFeed
from orrery.logging_config import setup_logging


def build_feed(config: OrreryConfig, offline: bool) -> CloseApproachFeed | OfflineFeed:
    if offline:
        return OfflineFeed()
    return CloseApproachFeed(
        url=config.neo_feed_url,
        api_key=config.neo_api_key,
        timeout=config.request_timeout_seconds,
    )


def snapshot(session: Session) -> dict[str, Any]:
    """
    Summarise the session state for printing or JSON output.
    """
    clock = session.clock
    state = session.store.get()
    current = session.carousel.current
    return {
        "simulation_time": state["simulation_time"],
        "date": clock.date_label,
        "is_live": session.is_live(),
        "is_playing": state["is_playing"],
        "speed": clock.speed_label,
        "direction": state["time_direction"],
        "scrubber_position": round(session.scrubber_position(), 3),
        "selected_body": state["selected_body"],
        "focus_target": state["focus_target"],
        "camera_transitioning": state["camera_transitioning"],
        "feed_warning": state["feed_warning"],
        "current_approach": current.asteroid_id if current else None,
        "approaches": [
            {
                "asteroid_id": a.asteroid_id,
                "asteroid_name": a.asteroid_name,
                "approach_time": a.approach_time.isoformat(),
                "distance_km": a.distance_km,
                "estimated_size_m": a.estimated_size_m,
                "countdown": session.countdowns[a.asteroid_id].display(),
            }
            for a in state["close_approaches"]
        ],
    }


def print_snapshot(data: dict[str, Any]) -> None:
    live = " [LIVE]" if data["is_live"] else ""
    direction = "+" if data["direction"] > 0 else "-"
    playing = "playing" if data["is_playing"] else "paused"
    print(f"{data['date']}{live}  speed {direction}{data['speed']}  {playing}")
    print(f"JD {data['simulation_time']:.6f}  scrubber {data['scrubber_position']}")
    if data["focus_target"]:
        print(f"focus: {data['focus_target']}  selected: {data['selected_body']}")
    if data["feed_warning"]:
        print(f"[WARNING] {data['feed_warning']}", file=sys.stderr)
    for approach in data["approaches"]:
        marker = ">" if approach["asteroid_id"] == data["current_approach"] else " "
        print(
            f"{marker} {approach['asteroid_name']:<12} "
            f"{approach['approach_time']}  {approach['countdown']}"
        )


async def watch_countdowns(session: Session, feed: Any, seconds: float) -> None:
    """
    Run countdowns on the event loop for a while, printing every refresh.
    """
    def on_event(event: dict[str, Any]) -> None:
        if event.get("type") == COUNTDOWN_REFRESHED:
            print(f"{event['asteroid_id']:<24} {event['display']}", flush=True)

    session.store.event_bus.subscribe(on_event)
    session.load_approaches(feed)
    await asyncio.sleep(seconds)

    # Stop the intervals before the loop goes away
    for countdown in session.countdowns.values():
        countdown.cancel()


def main(argv: list[str] | None = None) -> int | None:
    parser = argparse.ArgumentParser(
        prog="orrery.cli",
        description="Run the solar-system time engine headlessly and report its state",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML file overriding speed table, epsilon and feed settings",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Number of frames to tick the simulation clock",
    )
    parser.add_argument(
        "--delta",
        type=float,
        default=1.0 / 60.0,
        help="Real seconds elapsed per frame",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=None,
        help="Speed table index (clamped to the table)",
    )
    parser.add_argument(
        "--reverse",
        action="store_true",
        help="Run simulated time backwards",
    )
    parser.add_argument(
        "--jump-jd",
        type=float,
        default=None,
        help="Jump to this Julian Date before ticking",
    )
    parser.add_argument(
        "--select",
        default=None,
        help="Select (and focus) a body by catalog id",
    )
    parser.add_argument(
        "--approaches",
        action="store_true",
        help="Load close approaches and report their countdowns",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the bundled sample approaches instead of the live feed",
    )
    parser.add_argument(
        "--watch",
        type=float,
        default=0.0,
        help="Keep countdowns running for this many seconds, printing each refresh",
    )
    parser.add_argument(
        "--output",
        choices=["cli", "json"],
        default="cli",
        help="Output mode: 'cli' prints to stdout; 'json' dumps the final state to a JSON file",
    )
    parser.add_argument(
        "--json-file",
        type=Path,
        default=Path("orrery_state.json"),
        help="Path to JSON output file if --output=json",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to $ORRERY_LOG_LEVEL or WARNING)",
    )

    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if args.config is not None and not args.config.exists():
        print(f"Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
    except Exception as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 2

    session = Session(config)
    session.enter_view()

    try:
        if args.jump_jd is not None:
            session.clock.jump_to_date(args.jump_jd)
        if args.speed is not None:
            session.clock.set_speed_index(args.speed)
        if args.reverse:
            session.clock.reverse_time()
        if args.select:
            session.selection.select_body(args.select)

        session.run_frames(args.frames, args.delta)

        feed = build_feed(config, args.offline)
        if args.watch > 0:
            asyncio.run(watch_countdowns(session, feed, args.watch))
        elif args.approaches:
            session.load_approaches(feed, start_countdowns=False)

        data = snapshot(session)
    except Exception as exc:
        print(f"Simulation failed: {exc}", file=sys.stderr)
        session.exit_view()
        return 3

    session.exit_view()

    if args.output == "json":
        try:
            args.json_file.parent.mkdir(parents=True, exist_ok=True)
            with args.json_file.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            print(f"State dumped to {args.json_file}")
        except Exception as exc:
            print(f"Failed to write JSON file: {exc}", file=sys.stderr)
            return 4
    else:
        print_snapshot(data)
        if (args.approaches or args.watch > 0) and not data["approaches"]:
            print("No upcoming close approaches")

    return 0  # success


if __name__ == "__main__":

    signal.signal(signal.SIGPIPE, signal.SIG_DFL)  # Ignore broken pipe
    sys.exit(main())
