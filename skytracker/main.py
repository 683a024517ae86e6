# skytracker/main.py
import argparse
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from skytracker.config import settings
from skytracker.data.tle_fetcher import fetch_group_text, read_tle_file
from skytracker.data.tle_parser import parse_element_sets
from skytracker.physics.timebase import instant_to_datetime
from skytracker.simulation.clock import SimulationClock
from skytracker.simulation.runner import FrameResult, SceneEngine

log = logging.getLogger("main")


def _setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-7s  %(message)s",
        datefmt="%H:%M:%S",
    )


def save_json(obj: Any, name_prefix: str) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    out_dir = Path(settings.OUTPUT_DIR)
    out_dir.mkdir(parents=True, exist_ok=True)
    filename = out_dir / f"{name_prefix}_{ts}.json"
    with open(filename, "w") as f:
        json.dump(obj, f, indent=2, default=lambda o: repr(o))
    return str(filename)


def summarize_frame(frame: FrameResult) -> Dict[str, Any]:
    return {
        "instant": frame.instant,
        "utc": instant_to_datetime(frame.instant).isoformat(),
        "earth_rotation_rad": frame.earth_rotation,
        "sidereal_angle_rad": frame.sidereal_angle,
        "sun": [frame.sun.x, frame.sun.y, frame.sun.z],
        "moon": [frame.moon.x, frame.moon.y, frame.moon.z],
        "tracked": len(frame.satellites),
        "skipped": frame.skipped,
    }


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Headless satellite/Sun/Moon scene computation")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--tle-file", help="read element sets from a local file")
    src.add_argument("--group", default=settings.DEFAULT_TLE_GROUP, help="CelesTrak GP group to download")
    p.add_argument("--scale", type=float, default=settings.TIME_SCALE_DEFAULT, help="time acceleration factor")
    p.add_argument("--frames", type=int, default=settings.DEFAULT_FRAMES)
    p.add_argument("--interval", type=float, default=settings.DEFAULT_FRAME_INTERVAL_S,
                   help="wall seconds between frames")
    p.add_argument("--workers", type=int, default=None, help="thread pool size for propagation")
    p.add_argument("--plot", action="store_true", help="save a snapshot of the last frame")
    p.add_argument("--save", action="store_true", help="write frame summaries to JSON")
    p.add_argument("--no-cache", action="store_true")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def run(args: argparse.Namespace, sleep=time.sleep) -> List[FrameResult]:
    if args.tle_file:
        text = read_tle_file(args.tle_file)
    else:
        text = fetch_group_text(args.group, use_cache=not args.no_cache)

    report = parse_element_sets(text)
    clock = SimulationClock(scale=args.scale)
    with SceneEngine(report.element_sets, clock=clock, max_workers=args.workers) as engine:
        log.info("Satellites loaded: %d (excluded at load: %d)", engine.tracked_count, len(engine.load_failures))

        frames: List[FrameResult] = []
        for i in range(max(0, args.frames)):
            if i:
                sleep(args.interval)
            frame = engine.compute_frame()
            frames.append(frame)
            log.info(
                "Frame %d: %s  tracked=%d skipped=%d earth=%.4f rad",
                i, instant_to_datetime(frame.instant).isoformat(timespec="seconds"),
                len(frame.satellites), frame.skipped, frame.earth_rotation,
            )

        if engine.total_skips:
            log.warning("Propagation skips across run: %d (objects affected: %d)",
                        engine.total_skips, len(engine.skip_counts))

    if frames and args.plot:
        from skytracker.visualization.plots import plot_frame
        plot_frame(frames[-1])
    if frames and args.save:
        out = save_json({"frames": [summarize_frame(f) for f in frames]}, "frames")
        log.info("Saved frame summaries: %s", out)

    return frames


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    settings.validate_settings()
    try:
        run(args)
    except (OSError, RuntimeError) as e:
        log.error("Run failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
