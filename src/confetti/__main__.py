#!/usr/bin/env python3
"""
Confetti CLI Tool
=================

Renders bursts of confetti to a video file. Bursts fire at fixed times
(--burst-at) or on the beats of a soundtrack (--audio), in which case the
audio is attached to the output.

Usage:
    python -m confetti --burst-at 0.5 --burst-at 3 -o confetti.mp4
    python -m confetti --audio song.wav --output party.mp4
"""

import argparse
import logging
import os
import sys

import cv2
from moviepy import AudioFileClip, VideoClip

from confetti.confetti_renderer import ConfettiRenderer
from confetti.constants import (
    BURST_COUNT,
    DAMPING,
    DEFAULT_DURATION,
    DEFAULT_FPS,
    DEFAULT_RESOLUTION,
    GRAVITY,
    MAX_STEP,
    MIN_BURST_GAP,
)
from confetti.exceptions import InvalidConfiguration
from confetti.particle_system import ParticleSystem

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Render a confetti animation to a video file.")
    parser.add_argument("--output", "-o", default="confetti.mp4", help="Path to output video file")
    parser.add_argument("--width", type=int, default=DEFAULT_RESOLUTION[0], help="Video width")
    parser.add_argument("--height", type=int, default=DEFAULT_RESOLUTION[1], help="Video height")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Frames per second")
    parser.add_argument("--duration", type=float, help="Video length in seconds (defaults to the audio length)")
    parser.add_argument("--count", type=int, default=BURST_COUNT, help="Particles per burst")
    parser.add_argument(
        "--burst-at", type=float, action="append", default=[], metavar="SECONDS", help="Fire a burst at this time"
    )
    parser.add_argument("--audio", help="Soundtrack; bursts follow its beats")
    parser.add_argument("--min-gap", type=float, default=MIN_BURST_GAP, help="Minimum seconds between beat bursts")
    parser.add_argument("--gravity", type=float, default=GRAVITY, help="Downward acceleration")
    parser.add_argument("--damping", type=float, default=DAMPING, help="Velocity kept per frame, in (0, 1]")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine detail")
    return parser


def build_system(args):
    """
    Offline renders never stall, so the step ceiling must cover a whole frame
    or physics falls behind video time.
    """
    max_step = max(MAX_STEP, 1 / args.fps)
    return ParticleSystem(gravity=args.gravity, damping=args.damping, max_step=max_step)


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    # 1. Validation
    if args.audio and not os.path.exists(args.audio):
        sys.exit(f"[!] Input file not found: {args.audio}")
    if args.count < 0:
        sys.exit(f"[!] Burst count must be non-negative: {args.count}")
    if args.fps <= 0:
        sys.exit(f"[!] Frame rate must be positive: {args.fps}")
    if args.duration is not None and args.duration <= 0:
        sys.exit(f"[!] Duration must be positive: {args.duration}")

    try:
        system = build_system(args)
    except InvalidConfiguration as e:
        sys.exit(f"[!] Invalid physics settings: {e}")

    # 2. Work out burst times and duration
    burst_times = list(args.burst_at)
    duration = args.duration if args.duration is not None else DEFAULT_DURATION
    if args.audio:
        from confetti.audio_analyser import AudioAnalyser

        analyser = AudioAnalyser(args.audio)
        burst_times += analyser.get_burst_times(args.min_gap)
        duration = analyser.duration
        if args.duration is not None and args.duration < duration:
            duration = args.duration
            logger.info(f"[i] Truncating duration to {duration} seconds.")
    if not burst_times:
        burst_times = [0.0]

    logger.info(f"[+] Preparing render: {args.width}x{args.height} @ {args.fps}fps")
    logger.info(f"[+] Duration: {duration:.2f} seconds, {len(burst_times)} bursts")

    renderer = ConfettiRenderer(system, args.width, args.height)
    for t in burst_times:
        if t < duration:
            renderer.schedule_burst(t, args.count)

    # 3. Create MoviePy Clip (MoviePy expects RGB)
    def make_frame_wrapper(t):
        frame = renderer.make_frame(t)
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    video_clip = VideoClip(make_frame_wrapper, duration=duration)

    if args.audio:
        audio_clip = AudioFileClip(args.audio).subclipped(0, duration)
        video_clip = video_clip.with_audio(audio_clip)

    # 4. Export
    logger.info("[+] Rendering video...")
    video_clip.write_videofile(
        args.output,
        fps=args.fps,
        codec="libx264",
        audio_codec="aac",
        threads=4,
        preset="medium",
        logger="bar",
    )

    logger.info(f"[+] Done! Saved to {args.output}")


if __name__ == "__main__":
    main()
