#!/usr/bin/env python3
"""
Command-line entry point: runs the focus engine over a camera or video file
at a fixed processing rate and prints the session report.
"""

import argparse
import json
import logging
import sys
import time
from typing import Optional, Union

from .core.engine import AttentionEngine, FrameResult
from .core.frame import InvalidFrame
from .core.video_capture import FrameSource
from .utils.config import config, EngineConfig
from .utils.logger import logger


def parse_source(value: str) -> Union[int, str]:
    """Device indices are integers, anything else is a file path."""
    return int(value) if value.isdigit() else value


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Real-time focus scoring engine")

    parser.add_argument("--source", "-s", type=parse_source, default=0,
                        help="Camera index or video file path (default: 0)")
    parser.add_argument("--width", "-w", type=int, default=640,
                        help="Camera frame width (default: 640)")
    parser.add_argument("--height", type=int, default=480,
                        help="Camera frame height (default: 480)")
    parser.add_argument("--fps", "-f", type=int, default=None,
                        help="Processing rate in frames/second "
                             f"(default: {config.performance.processing_fps})")
    parser.add_argument("--config", "-c", type=str, default="",
                        help="JSON configuration file (optional)")
    parser.add_argument("--max-frames", type=int, default=0,
                        help="Stop after this many frames (0 = until the source ends)")
    parser.add_argument("--report", "-o", type=str, default="",
                        help="Write the session report as JSON to this path (optional)")
    parser.add_argument("--no-throttle", action="store_true",
                        help="Process frames as fast as they can be read")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Print a status line for every frame")

    return parser.parse_args(argv)


def print_status(result: FrameResult, frame_count: int, fps: int, verbose: bool = False,
                 capture_fps: float = 0.0) -> None:
    """Print status information."""
    if not verbose and frame_count % fps != 0:
        return

    smoothed = result.smoothed
    print(f"Frame {frame_count:5d} | {result.state.value:10s} | "
          f"Score: {smoothed.score:.2f} | Head: {result.rotation_status} | "
          f"Yaw: {smoothed.yaw:+.1f} Pitch: {smoothed.pitch:+.1f} | "
          f"{result.processing_time_ms:.1f}ms | Capture: {capture_fps:.1f}fps")


def print_source_info(info: dict) -> None:
    print(f"Source: {info.get('source')!r} ({info.get('width', 0)}x{info.get('height', 0)}, "
          f"{info.get('fps', 0.0):.0f}fps, {info.get('backend', 'unknown')})")


def print_report(engine: AttentionEngine) -> None:
    report = engine.session_report()

    print("\n" + "=" * 60)
    print("SESSION SUMMARY")
    print("=" * 60)
    print(f"Duration: {report.duration_minutes:.1f} minutes")
    print(f"Total Frames: {report.total_frames}")
    if report.focus_percentage is not None:
        print(f"Focused: {report.focused_frames} ({report.focus_percentage:.1f}%)")
    print(f"Distracted: {report.distracted_frames} ({report.distracted_percentage:.1f}%)")
    print(f"No Face: {report.no_face_frames} ({report.no_face_percentage:.1f}%)")
    print(f"Assessment: {report.assessment}")
    if report.low_visibility:
        print("Face was often out of view - check camera position")
    print(f"Final Threshold: {engine.focus_threshold:.2f}")
    print("=" * 60)


def run(engine: AttentionEngine, source: FrameSource, fps: int, max_frames: int = 0,
        throttle: bool = True, verbose: bool = False) -> int:
    """Feed frames to the engine until the source ends. Returns frames processed."""
    interval = 1.0 / fps
    frame_count = 0

    while not max_frames or frame_count < max_frames:
        tick = time.time()

        ret, frame = source.read_frame()
        if not ret:
            break

        try:
            result = engine.process_frame(frame)
        except InvalidFrame as e:
            logger.warning(f"Skipping frame: {e}")
            continue

        frame_count += 1
        print_status(result, frame_count, fps, verbose, source.current_fps)

        if throttle:
            time.sleep(max(0.0, interval - (time.time() - tick)))

    return frame_count


def main(argv=None) -> int:
    """Main function."""
    args = parse_arguments(argv)

    if args.verbose:
        logger.set_console_level(logging.INFO)

    engine_config = EngineConfig(args.config) if args.config else config
    fps = args.fps or engine_config.performance.processing_fps
    if fps <= 0:
        print("Processing rate must be positive")
        return 1

    logger.log_system_info(engine_config)

    try:
        engine = AttentionEngine(engine_config)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    try:
        source = FrameSource(args.source, args.width, args.height)
    except RuntimeError as e:
        print(f"Failed to open video source: {e}")
        return 1

    print("=" * 60)
    print("Focus Engine")
    print("=" * 60)
    print_source_info(source.get_info())
    print(f"Processing rate: {fps} fps")
    print(f"Focus threshold: {engine.focus_threshold:.2f}")
    print("=" * 60)

    try:
        with source:
            run(engine, source, fps, args.max_frames, not args.no_throttle, args.verbose)
    except KeyboardInterrupt:
        print("\nMonitoring interrupted by user")

    print_report(engine)

    if args.report:
        save_report(engine, args.report)

    return 0


def save_report(engine: AttentionEngine, path: str) -> Optional[str]:
    try:
        with open(path, 'w') as f:
            json.dump(engine.session_report().to_dict(), f, indent=2)
    except OSError as e:
        logger.log_error_with_context(e, "report saving")
        return None

    print(f"Session report saved: {path}")
    return path


if __name__ == "__main__":
    sys.exit(main())
