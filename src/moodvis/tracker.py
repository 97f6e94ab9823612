import logging
from dataclasses import dataclass

from moodvis.constants import CLASSIFY_EVERY
from moodvis.features import FeatureExtractor, FeatureVector
from moodvis.intensity import IntensitySmoother
from moodvis.mood import DEFAULT_MOOD, Mood, MoodClassifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """Everything the rendering side needs after one tick."""

    features: FeatureVector
    intensity: float
    mood: Mood
    changed: bool


class MoodTracker:
    """
    Runs extraction, smoothing and classification once per tick.

    Smoothing happens on every tick. Classification only runs on every
    `classify_every`-th tick and sees the features of that same tick.
    """

    def __init__(
        self,
        n_bins,
        sample_rate,
        classify_every=CLASSIFY_EVERY,
        initial_mood=DEFAULT_MOOD,
        on_mood_changed=None,
    ):
        self.sample_rate = sample_rate
        self.extractor = FeatureExtractor(n_bins)
        self.smoother = IntensitySmoother()
        self.classifier = MoodClassifier(
            initial=initial_mood,
            classify_every=classify_every,
            on_mood_changed=on_mood_changed,
        )

    @property
    def mood(self):
        return self.classifier.mood

    @property
    def intensity(self):
        return self.smoother.intensity

    def tick(self, freq_db, time_samples):
        features = self.extractor.extract(freq_db, time_samples, self.sample_rate)
        intensity = self.smoother.update(features)
        changed = self.classifier.update(features)
        return TickResult(
            features=features,
            intensity=intensity,
            mood=self.classifier.mood,
            changed=changed,
        )

    def process(self, frame):
        """Tick from an AudioFrame."""
        return self.tick(frame.freq_db, frame.time_samples)

    def stop(self):
        """
        Drop carried state between captures. The mood label is kept.
        """
        logger.info("[i] Tracker stopped, discarding carried state")
        self.extractor.reset()
        self.smoother.reset()
        self.classifier.reset()
