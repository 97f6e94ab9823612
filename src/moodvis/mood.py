import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from moodvis.constants import (
    BASS_ENERGY,
    BASS_LOW_RATIO,
    CENTROID_NORM_HZ,
    CLASSIFY_EVERY,
    IDLE_CYCLE_SECONDS,
    JOYFUL_CENTROID,
    JOYFUL_ENERGY,
    JOYFUL_FLUX,
    MELANCHOLIC_ENERGY,
    MELANCHOLIC_FLUX,
    MOOD_LABELS,
    TREBLE_CENTROID,
    TREBLE_HIGH_RATIO,
)

logger = logging.getLogger(__name__)


class Mood(str, Enum):
    BASS = "bass"
    TREBLE = "treble"
    JOYFUL = "joyful"
    MELANCHOLIC = "melancholic"

    @property
    def label(self):
        """Display label shown next to the visual."""
        return MOOD_LABELS[self.value]


DEFAULT_MOOD = Mood.BASS


@dataclass(frozen=True)
class MoodThresholds:
    """
    Decision thresholds for classify_mood.
    Centroid thresholds apply to the centroid normalised by `centroid_norm_hz`.
    """

    joyful_energy: float = JOYFUL_ENERGY
    joyful_centroid: float = JOYFUL_CENTROID
    joyful_flux: float = JOYFUL_FLUX
    bass_low_ratio: float = BASS_LOW_RATIO
    bass_energy: float = BASS_ENERGY
    treble_centroid: float = TREBLE_CENTROID
    treble_high_ratio: float = TREBLE_HIGH_RATIO
    melancholic_energy: float = MELANCHOLIC_ENERGY
    melancholic_flux: float = MELANCHOLIC_FLUX
    centroid_norm_hz: float = CENTROID_NORM_HZ


DEFAULT_THRESHOLDS = MoodThresholds()


def classify_mood(features, previous, thresholds=DEFAULT_THRESHOLDS):
    """
    Map a FeatureVector to a Mood.

    Rules are checked in a fixed order and the first match wins. When none
    match, `previous` is returned unchanged.
    """
    t = thresholds
    c_norm = min(1.0, features.centroid / t.centroid_norm_hz)
    energy = features.energy
    flux = features.flux

    if energy > t.joyful_energy and c_norm > t.joyful_centroid and flux > t.joyful_flux:
        return Mood.JOYFUL
    if features.low_ratio > t.bass_low_ratio and energy > t.bass_energy:
        return Mood.BASS
    if c_norm > t.treble_centroid and features.high_ratio > t.treble_high_ratio:
        return Mood.TREBLE
    if energy < t.melancholic_energy and flux < t.melancholic_flux:
        return Mood.MELANCHOLIC
    return previous


class MoodClassifier:
    """
    Holds the current mood and re-classifies it every `classify_every` ticks.

    `on_mood_changed(mood)` is called whenever the mood label changes, so the
    visual population can be regenerated.
    """

    def __init__(
        self,
        initial=DEFAULT_MOOD,
        classify_every=CLASSIFY_EVERY,
        on_mood_changed=None,
        thresholds=DEFAULT_THRESHOLDS,
    ):
        if classify_every < 1:
            raise ValueError(f"classify_every must be >= 1, got {classify_every}")
        self.mood = Mood(initial)
        self.classify_every = classify_every
        self.on_mood_changed = on_mood_changed
        self.thresholds = thresholds
        self.tick = 0

    def update(self, features):
        """
        Advance one tick. Returns True if the mood changed on this tick.
        """
        self.tick += 1
        if self.tick % self.classify_every != 0:
            return False

        new_mood = classify_mood(features, self.mood, self.thresholds)
        if new_mood is self.mood:
            return False

        logger.info(f"[+] Mood changed: {self.mood.value} -> {new_mood.value}")
        self.mood = new_mood
        self._notify()
        return True

    def select(self, mood):
        """Explicitly choose a mood. Always notifies, even for the same mood."""
        self.mood = Mood(mood)
        logger.info(f"[+] Mood selected: {self.mood.value}")
        self._notify()

    def reset(self):
        self.tick = 0

    def _notify(self):
        if self.on_mood_changed is not None:
            self.on_mood_changed(self.mood)


def random_mood(rng=None):
    rng = rng if rng is not None else np.random.default_rng()
    moods = list(Mood)
    return moods[rng.integers(len(moods))]


class MoodCycler:
    """
    Timer-driven mood changes for when no audio is being analysed.
    """

    def __init__(self, interval=IDLE_CYCLE_SECONDS, rng=None):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self.rng = rng if rng is not None else np.random.default_rng()
        self.elapsed = 0.0

    def advance(self, dt):
        """
        Add `dt` seconds. Returns a random Mood when the interval elapses,
        otherwise None.
        """
        self.elapsed += dt
        if self.elapsed < self.interval:
            return None
        self.elapsed %= self.interval
        return random_mood(self.rng)

    def reset(self):
        self.elapsed = 0.0
