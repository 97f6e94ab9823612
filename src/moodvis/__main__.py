#!/usr/bin/env python3
"""
Mood Visualiser CLI Tool
========================

Runs the audio mood tracker over a WAV/MP3 file or live microphone input and
logs the mood changes that would drive the visualisation.

Features:
- Energy, spectral centroid, zero-crossing rate, flux and low/high ratios per tick.
- Four moods (bass, treble, joyful, melancholic), re-classified every N ticks.
- Smoothed 0-1 intensity modulating the shape population.
- Timer-driven random mood cycling when no audio is used.

Usage:
    python -m moodvis input.wav
    python -m moodvis --mic --duration 30
    python -m moodvis --idle --duration 60
"""

import argparse
import logging
import os
import sys
import time
from collections import Counter

from moodvis.audio_analyser import AudioAnalyser, AudioLoadError
from moodvis.capture import CaptureError, MicrophoneCapture
from moodvis.constants import (
    CLASSIFY_EVERY,
    DEFAULT_FPS,
    DEFAULT_SAMPLE_RATE,
    FFT_SIZE,
    IDLE_CYCLE_SECONDS,
)
from moodvis.mood import MoodCycler
from moodvis.population import ShapePopulation
from moodvis.tracker import MoodTracker

logger = logging.getLogger("moodvis")


class RunSummary:
    """Accumulates per-tick results for the end-of-run report."""

    def __init__(self, fps):
        self.fps = fps
        self.mood_ticks = Counter()
        self.intensity_total = 0.0
        self.ticks = 0
        self.changes = 0

    def add(self, result):
        self.mood_ticks[result.mood] += 1
        self.intensity_total += result.intensity
        self.ticks += 1
        self.changes += int(result.changed)

    def log(self):
        if not self.ticks:
            logger.info("[i] No audio was analysed.")
            return
        logger.info(f"[+] Analysed {self.ticks} ticks, {self.changes} mood changes")
        for mood, count in self.mood_ticks.most_common():
            logger.info(f"    {mood.value:<12} {mood.label}  {count / self.fps:7.2f}s")
        logger.info(f"[+] Mean intensity: {self.intensity_total / self.ticks:.3f}")


def _log_change(t, result):
    logger.info(
        f"[+] {t:8.2f}s  {result.mood.value} ({result.mood.label})  "
        f"intensity={result.intensity:.2f}"
    )


def analyse_file(args):
    if not os.path.exists(args.input):
        sys.exit(f"[!] Input file not found: {args.input}")

    try:
        analyser = AudioAnalyser.from_file(args.input, fft_size=args.fft_size, fps=args.fps)
    except AudioLoadError as e:
        sys.exit(f"[!] {e}")

    duration = analyser.duration
    if args.duration and args.duration < duration:
        duration = args.duration
        logger.info(f"[i] Truncating duration to {duration} seconds.")
    logger.info(f"[+] Duration: {duration:.2f} seconds @ {args.fps} ticks/s")

    population = ShapePopulation()
    tracker = MoodTracker(
        analyser.analyser.frequency_bin_count,
        analyser.sr,
        classify_every=args.classify_every,
        on_mood_changed=population.regenerate,
    )
    summary = RunSummary(args.fps)

    for frame in analyser.frames(duration):
        result = tracker.process(frame)
        population.tune(result.intensity)
        population.step()
        summary.add(result)
        if result.changed:
            _log_change(frame.time, result)

    tracker.stop()
    return summary


def analyse_microphone(args):
    capture = MicrophoneCapture(
        sample_rate=args.sample_rate, fft_size=args.fft_size, device=args.device
    )
    population = ShapePopulation()
    tracker = MoodTracker(
        capture.analyser.frequency_bin_count,
        capture.sample_rate,
        classify_every=args.classify_every,
        on_mood_changed=population.regenerate,
    )
    summary = RunSummary(args.fps)
    tick_seconds = 1 / args.fps

    try:
        capture.start()
    except CaptureError as e:
        sys.exit(f"[!] {e}")

    logger.info("[+] Listening... (Ctrl+C to stop)")
    try:
        while args.duration is None or summary.ticks < args.duration * args.fps:
            frame = capture.read()
            result = tracker.process(frame)
            population.tune(result.intensity)
            population.step()
            summary.add(result)
            if result.changed:
                _log_change(frame.time, result)
            time.sleep(tick_seconds)
    except KeyboardInterrupt:
        logger.info("[i] Interrupted.")
    finally:
        capture.stop()
        tracker.stop()
    return summary


def cycle_idle(args):
    duration = args.duration or IDLE_CYCLE_SECONDS * 4
    population = ShapePopulation()
    cycler = MoodCycler(args.cycle_interval)
    tick_seconds = 1 / args.fps
    elapsed = 0.0

    logger.info(f"[+] Cycling moods every {args.cycle_interval}s for {duration}s")
    try:
        while elapsed < duration:
            mood = cycler.advance(tick_seconds)
            if mood is not None:
                population.regenerate(mood)
                logger.info(f"[+] {elapsed:8.2f}s  {mood.value} ({mood.label})")
            population.step()
            elapsed += tick_seconds
            time.sleep(tick_seconds)
    except KeyboardInterrupt:
        logger.info("[i] Interrupted.")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Track the mood of an audio signal for audio-reactive visuals."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("input", nargs="?", help="Path to input audio file (WAV/MP3)")
    source.add_argument("--mic", action="store_true", help="Analyse live microphone input")
    source.add_argument(
        "--idle", action="store_true", help="Cycle moods on a timer without audio"
    )
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Ticks per second")
    parser.add_argument("--fft-size", type=int, default=FFT_SIZE, help="Analyser FFT size")
    parser.add_argument(
        "--classify-every",
        type=int,
        default=CLASSIFY_EVERY,
        help="Ticks between mood classifications",
    )
    parser.add_argument(
        "--duration", type=float, help="Limit duration in seconds (optional)"
    )
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=DEFAULT_SAMPLE_RATE,
        help="Microphone sample rate",
    )
    parser.add_argument("--device", help="Microphone device name or index")
    parser.add_argument(
        "--cycle-interval",
        type=float,
        default=IDLE_CYCLE_SECONDS,
        help="Seconds between idle mood changes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-tick features")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    if args.device is not None and args.device.isdigit():
        args.device = int(args.device)

    if args.idle:
        cycle_idle(args)
        return

    summary = analyse_microphone(args) if args.mic else analyse_file(args)
    summary.log()


if __name__ == "__main__":
    main()
