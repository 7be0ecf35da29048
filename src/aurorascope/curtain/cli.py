"""
CLI entry point for offline aurora rendering.

Usage:
    aurorascope-render [options]
    python -m aurorascope.curtain [options]
"""

import argparse
import sys
import time
from pathlib import Path

from aurorascope.curtain.base import PRESETS, CurtainConfig
from aurorascope.curtain.capture import FrameCapture
from aurorascope.curtain.driver import FrameDriver
from aurorascope.curtain.encoder import encode_video


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aurorascope-render",
        description="Render aurora curtains to a zip of PNG frames or an MP4",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output path (default: aurora_frames.zip or aurora.mp4)",
    )
    parser.add_argument(
        "--format", type=str, default="zip",
        choices=["zip", "mp4"],
        help="Output format (default: zip)",
    )
    parser.add_argument(
        "-p", "--preset", type=str, default="sketch",
        choices=sorted(PRESETS),
        help="Tuning preset (default: sketch)",
    )

    # Resolution & timing
    parser.add_argument("--width", type=int, default=None, help="Canvas width (default: 1280)")
    parser.add_argument("--height", type=int, default=None, help="Canvas height (default: 720)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Draw rate (default: 30)")
    length = parser.add_mutually_exclusive_group()
    length.add_argument(
        "--seconds", type=float, default=None,
        help="Length to render; for zip output this is the capture duration (default: 5)",
    )
    length.add_argument(
        "--frames", type=int, default=None,
        help="Number of frames to write instead of --seconds",
    )
    parser.add_argument(
        "--capture-fps", type=int, default=None,
        help="Frames per second stored in the zip (default: 5)",
    )

    # Visual
    parser.add_argument("--cols", type=int, default=None, help="Ribbons per layer (default: 150)")
    parser.add_argument("--step-y", type=int, default=None, help="Vertical sampling step in px (default: 10)")
    parser.add_argument(
        "--cursor", type=float, nargs=2, default=None, metavar=("X", "Y"),
        help="Fixed cursor position for wind and interaction",
    )
    parser.add_argument("--seed", type=int, default=0, help="Noise seed (default: 0)")
    parser.add_argument("--glow", action="store_true", help="Add glow bloom (mp4 only)")

    # Quality
    parser.add_argument(
        "-q", "--quality", type=str, default="medium",
        choices=["high", "medium", "fast"],
        help="Encoding quality (default: medium)",
    )
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)

    if any(v is not None and v < 2 for v in (args.width, args.height)):
        print("Error: width and height must be at least 2", file=sys.stderr)
        sys.exit(1)
    if args.frames is not None and args.frames < 1:
        print("Error: --frames must be at least 1", file=sys.stderr)
        sys.exit(1)

    try:
        config = CurtainConfig.from_preset(
            args.preset,
            width=args.width,
            height=args.height,
            fps=args.fps,
            cols=args.cols,
            step_y=args.step_y,
            capture_fps=args.capture_fps,
            capture_seconds=args.seconds,
            glow_enabled=args.glow or None,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.frames is not None:
        # zip length is measured in stored frames, mp4 length in drawn frames
        rate = config.capture_fps if args.format == "zip" else config.fps
        config.capture_seconds = args.frames / rate

    output = args.output
    if output is None:
        output = Path("aurora_frames.zip" if args.format == "zip" else "aurora.mp4")

    driver = FrameDriver(config, seed=args.seed)
    if args.cursor is not None:
        driver.set_cursor(tuple(args.cursor))

    t0 = time.time()
    if args.format == "zip":
        _render_zip(driver, config, output)
    else:
        _render_mp4(driver, config, output, args.quality)

    elapsed = time.time() - t0
    file_size_mb = output.stat().st_size / 1024 / 1024
    print(f"\nDone! {file_size_mb:.1f} MB in {elapsed:.1f}s")
    print(f"  Output: {output}")


def _render_zip(driver: FrameDriver, config: CurtainConfig, output: Path):
    capture = FrameCapture(
        fps=config.capture_fps,
        seconds=config.capture_seconds,
        prefix=config.capture_prefix,
    )
    driver.capture = capture
    frame_ms = 1000.0 / config.fps

    print(f"Capturing {config.capture_seconds}s at {config.width}x{config.height} "
          f"(draw {config.fps}fps, store {config.capture_fps}fps)")
    driver.start_capture(now_ms=0.0)
    i = done = 0
    while capture.recording:
        driver.step(now_ms=i * frame_ms)
        i += 1
        if capture.captured_frames != done:
            done = capture.captured_frames
            _progress_bar(done, capture.target_frames)

    try:
        if not capture.wait():
            print("Error: capture produced no archive", file=sys.stderr)
            sys.exit(1)
        capture.save(output)
    finally:
        capture.close()


def _render_mp4(driver: FrameDriver, config: CurtainConfig, output: Path, quality: str):
    total_frames = max(1, round(config.capture_seconds * config.fps))
    print(f"Rendering {total_frames} frames at {config.width}x{config.height} @ {config.fps}fps")

    try:
        encode_video(
            frame_iterator=driver.run(total_frames),
            output_path=output,
            width=config.width,
            height=config.height,
            fps=config.fps,
            quality=quality,
            total_frames=total_frames,
            progress_callback=_progress_bar,
        )
    except (RuntimeError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
