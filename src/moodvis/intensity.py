from moodvis.constants import (
    ENERGY_WEIGHT,
    FLUX_DECAY,
    FLUX_WEIGHT,
    INITIAL_INTENSITY,
)


class IntensitySmoother:
    """
    Continuous 0-1 intensity from energy and an exponential moving average of
    spectral flux. Updated every tick, independent of the mood label.
    """

    def __init__(
        self,
        decay=FLUX_DECAY,
        energy_weight=ENERGY_WEIGHT,
        flux_weight=FLUX_WEIGHT,
        initial=INITIAL_INTENSITY,
    ):
        self.decay = decay
        self.energy_weight = energy_weight
        self.flux_weight = flux_weight
        self.initial = initial
        self.flux_avg = 0.0
        self.intensity = initial

    def update(self, features):
        # current = decay * old + (1 - decay) * new
        self.flux_avg = self.flux_avg * self.decay + features.flux * (1 - self.decay)
        raw = features.energy * self.energy_weight + self.flux_avg * self.flux_weight
        self.intensity = min(1.0, max(0.0, raw))
        return self.intensity

    def reset(self):
        self.flux_avg = 0.0
        self.intensity = self.initial
