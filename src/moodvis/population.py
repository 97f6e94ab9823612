import logging
import math

import numpy as np

from moodvis.constants import DEFAULT_CANVAS, MAX_VELOCITY, PALETTES
from moodvis.mood import DEFAULT_MOOD, Mood
from moodvis.shape import Shape

logger = logging.getLogger(__name__)

TAU = 2 * math.pi


def _pick(rng, palette):
    return palette[rng.integers(len(palette))]


def _clamp_velocity(v):
    return float(np.clip(v, -MAX_VELOCITY, MAX_VELOCITY))


def _bass(w, h, rng, palette):
    shapes = [
        Shape(
            "circle",
            x=rng.uniform(40, w - 40),
            y=rng.uniform(40, h - 40),
            vx=rng.uniform(-0.4, 0.4),
            vy=rng.uniform(-0.3, 0.3),
            size=rng.uniform(18, 42),
            phase=rng.uniform(0, TAU),
            color=_pick(rng, palette),
            glow=rng.uniform(6, 18),
        )
        for _ in range(26)
    ]
    shapes += [
        Shape(
            "ring",
            x=w * rng.uniform(0.15, 0.85),
            y=h * rng.uniform(0.2, 0.8),
            size=rng.uniform(80, 160),
            phase=rng.uniform(0, TAU),
            color=_pick(rng, palette),
            width=rng.uniform(1, 2),
        )
        for _ in range(4)
    ]
    return shapes


def _treble(w, h, rng, palette):
    shapes = [
        Shape(
            "star",
            x=rng.uniform(40, w - 40),
            y=rng.uniform(40, h - 40),
            vx=rng.uniform(-0.6, 0.6),
            vy=rng.uniform(-0.6, 0.6),
            size=rng.uniform(16, 34),
            phase=rng.uniform(0, TAU),
            color=_pick(rng, palette),
            points=int(rng.uniform(5, 8)),
            glow=rng.uniform(8, 16),
        )
        for _ in range(20)
    ]
    shapes += [
        Shape(
            "triangle",
            x=rng.uniform(20, w - 20),
            y=rng.uniform(20, h - 20),
            vx=rng.uniform(-0.8, 0.8),
            vy=rng.uniform(-0.8, 0.8),
            size=rng.uniform(14, 26),
            phase=rng.uniform(0, TAU),
            color=_pick(rng, palette),
            glow=rng.uniform(6, 14),
        )
        for _ in range(8)
    ]
    return shapes


def _joyful(w, h, rng, palette):
    return [
        Shape(
            "circle" if rng.random() < 0.6 else "triangle",
            x=rng.uniform(30, w - 30),
            y=rng.uniform(30, h - 30),
            vx=rng.uniform(-1.1, 1.1),
            vy=rng.uniform(-1.1, 1.1),
            size=rng.uniform(10, 22),
            phase=rng.uniform(0, TAU),
            color=_pick(rng, palette),
            glow=rng.uniform(6, 18),
        )
        for _ in range(36)
    ]


def _melancholic(w, h, rng, palette):
    shapes = [
        Shape(
            "wave",
            y=h * rng.uniform(0.25, 0.75),
            amplitude=rng.uniform(18, 30),
            freq=rng.uniform(0.008, 0.012),
            speed=rng.uniform(0.6, 0.9),
            color=_pick(rng, palette),
            width=rng.uniform(1.25, 2.25),
            phase=rng.uniform(0, TAU),
        )
        for _ in range(3)
    ]
    shapes += [
        Shape(
            "circle",
            x=rng.uniform(40, w - 40),
            y=rng.uniform(40, h - 40),
            vx=rng.uniform(-0.35, 0.35),
            vy=rng.uniform(-0.35, 0.35),
            size=rng.uniform(8, 20),
            phase=rng.uniform(0, TAU),
            color=_pick(rng, palette),
            glow=rng.uniform(5, 12),
        )
        for _ in range(22)
    ]
    return shapes


_BUILDERS = {
    Mood.BASS: _bass,
    Mood.TREBLE: _treble,
    Mood.JOYFUL: _joyful,
    Mood.MELANCHOLIC: _melancholic,
}


def create_shapes(mood, width, height, rng=None):
    """Build the shape population for a mood."""
    rng = rng if rng is not None else np.random.default_rng()
    mood = Mood(mood)
    return _BUILDERS[mood](width, height, rng, PALETTES[mood.value])


def tune_shapes(shapes, intensity, rng=None):
    """
    Ease shape parameters toward values driven by `intensity` (0-1).
    Velocities get a small random kick and are clamped to MAX_VELOCITY.
    """
    rng = rng if rng is not None else np.random.default_rng()
    jitter = 0.06 * (0.5 + intensity)

    for s in shapes:
        if s.moving:
            s.vx = _clamp_velocity(s.vx * 0.9 + (rng.random() - 0.5) * jitter)
            s.vy = _clamp_velocity(s.vy * 0.9 + (rng.random() - 0.5) * jitter)
            s.glow = (s.glow or 8) * 0.92 + 18 * intensity * 0.08
            s.size = s.size * 0.98 + s.size * 0.02 * (0.8 + intensity * 0.6)
        elif s.kind == "wave":
            s.amplitude = s.amplitude * 0.95 + 30 * intensity * 0.05
            s.speed = s.speed * 0.95 + 1.2 * intensity * 0.05
        elif s.kind == "ring":
            s.width = s.width * 0.95 + 2.2 * intensity * 0.05


class ShapePopulation:
    """
    The set of shapes currently on screen.

    Pass `regenerate` as the tracker's `on_mood_changed` callback.
    """

    def __init__(
        self, width=DEFAULT_CANVAS[0], height=DEFAULT_CANVAS[1], mood=DEFAULT_MOOD, rng=None
    ):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else np.random.default_rng()
        self.mood = Mood(mood)
        self.shapes = create_shapes(self.mood, width, height, self.rng)

    def __len__(self):
        return len(self.shapes)

    def regenerate(self, mood):
        self.mood = Mood(mood)
        self.shapes = create_shapes(self.mood, self.width, self.height, self.rng)
        logger.debug(f"Regenerated {len(self.shapes)} shapes for {self.mood.value}")

    def tune(self, intensity):
        tune_shapes(self.shapes, intensity, self.rng)

    def step(self):
        for s in self.shapes:
            s.update(self.width, self.height)
