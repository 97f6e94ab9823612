import logging
from dataclasses import dataclass

import librosa
import numpy as np

from moodvis.constants import CENTROID_NORM_HZ, SPLIT_FREQ

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureVector:
    """Scalar audio features for a single tick."""

    energy: float  # RMS of the time-domain samples
    centroid: float  # Hz
    zcr: float  # 0-1
    flux: float  # Sum of positive spectral deltas since the last frame
    low_ratio: float  # Share of magnitude below SPLIT_FREQ
    high_ratio: float

    @property
    def centroid_norm(self):
        return min(1.0, self.centroid / CENTROID_NORM_HZ)


def bin_frequencies(n_bins, sample_rate):
    """
    Centre frequency (Hz) of each analyser bin.
    Bin i covers (i / N) * Nyquist.
    """
    return np.arange(n_bins) / n_bins * (sample_rate / 2)


class FeatureExtractor:
    """
    Turns one frame of analyser output into a FeatureVector.

    The previous magnitude spectrum is kept between calls so spectral flux
    can be computed. It is allocated once for `n_bins` and updated in place.
    """

    def __init__(self, n_bins, split_freq=SPLIT_FREQ):
        self.n_bins = n_bins
        self.split_freq = split_freq
        self._prev_mag = np.zeros(n_bins)
        self._seeded = False

    @property
    def seeded(self):
        return self._seeded

    def reset(self):
        """Forget the carried spectrum; the next frame re-seeds it."""
        self._prev_mag.fill(0.0)
        self._seeded = False

    def extract(self, freq_db, time_samples, sample_rate):
        freq_db = np.asarray(freq_db, dtype=np.float64)
        samples = np.asarray(time_samples, dtype=np.float64)

        if freq_db.shape != (self.n_bins,):
            raise ValueError(
                f"Expected {self.n_bins} frequency bins, got {freq_db.shape}"
            )

        energy = self._rms(samples)
        zcr = self._zero_crossing_rate(samples)

        # dB back to linear amplitude; -inf (silent bins) becomes 0
        mag = librosa.db_to_amplitude(freq_db)
        hz = bin_frequencies(self.n_bins, sample_rate)

        mag_sum = float(mag.sum())
        if mag_sum > 0:
            centroid = float(np.dot(hz, mag) / mag_sum)
            low_ratio = float(mag[hz < self.split_freq].sum() / mag_sum)
            high_ratio = float(mag[hz >= self.split_freq].sum() / mag_sum)
        else:
            centroid = low_ratio = high_ratio = 0.0

        flux = self._flux(mag)

        features = FeatureVector(
            energy=energy,
            centroid=centroid,
            zcr=zcr,
            flux=flux,
            low_ratio=low_ratio,
            high_ratio=high_ratio,
        )
        logger.debug(f"Features: {features}")
        return features

    def _flux(self, mag):
        if not self._seeded:
            np.copyto(self._prev_mag, mag)
            self._seeded = True
            return 0.0

        flux = float(np.maximum(mag - self._prev_mag, 0.0).sum())
        np.copyto(self._prev_mag, mag)
        return flux

    @staticmethod
    def _rms(samples):
        if samples.size == 0:
            return 0.0
        return float(np.sqrt(np.mean(samples**2)))

    @staticmethod
    def _zero_crossing_rate(samples):
        if samples.size == 0:
            return 0.0
        # Zero counts as non-negative
        non_negative = samples >= 0
        crossings = np.count_nonzero(non_negative[1:] != non_negative[:-1])
        return crossings / samples.size
