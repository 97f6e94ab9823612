from dataclasses import dataclass

from moodvis.constants import EDGE_MARGIN

MOVING_KINDS = ("circle", "star", "triangle")


@dataclass
class Shape:
    """A single visual entity. Fields unused by a kind stay at zero."""

    kind: str
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    size: float = 0.0
    phase: float = 0.0
    color: str = "#ffffff"
    glow: float = 0.0
    width: float = 0.0  # Stroke width for rings and waves
    points: int = 0  # Star points
    amplitude: float = 0.0  # Waves only from here on
    freq: float = 0.0
    speed: float = 0.0

    @property
    def moving(self):
        return self.kind in MOVING_KINDS

    def update(self, width, height):
        """Move one step and bounce off the canvas edges."""
        if not self.moving:
            return
        self.x += self.vx
        self.y += self.vy
        if self.x < EDGE_MARGIN or self.x > width - EDGE_MARGIN:
            self.vx *= -1
        if self.y < EDGE_MARGIN or self.y > height - EDGE_MARGIN:
            self.vy *= -1
