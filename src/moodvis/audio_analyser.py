import logging
from dataclasses import dataclass

import librosa
import numpy as np

from moodvis.constants import (
    DEFAULT_FPS,
    FFT_SIZE,
    MAX_FFT_SIZE,
    MIN_FFT_SIZE,
    SMOOTHING_TIME_CONSTANT,
)

logger = logging.getLogger(__name__)


class AudioLoadError(Exception):
    """Raised when an audio file cannot be loaded."""


@dataclass(frozen=True)
class AudioFrame:
    """Analyser output captured for one tick."""

    time: float
    freq_db: np.ndarray  # fft_size // 2 bins, dB
    time_samples: np.ndarray  # fft_size samples, linear
    sample_rate: float


class SpectrumAnalyser:
    """
    Real-time spectrum analyser.

    Keeps the latest `fft_size` samples. Frequency data is Blackman-windowed,
    scaled by 1/fft_size, averaged over time with `smoothing_time_constant`
    and returned in decibels.
    """

    def __init__(self, fft_size=FFT_SIZE, smoothing_time_constant=SMOOTHING_TIME_CONSTANT):
        if not (MIN_FFT_SIZE <= fft_size <= MAX_FFT_SIZE) or fft_size & (fft_size - 1):
            raise ValueError(
                f"fft_size must be a power of two between {MIN_FFT_SIZE} and "
                f"{MAX_FFT_SIZE}, got {fft_size}"
            )
        if not 0.0 <= smoothing_time_constant <= 1.0:
            raise ValueError(
                f"smoothing_time_constant must be in [0, 1], got {smoothing_time_constant}"
            )

        self.fft_size = fft_size
        self.smoothing_time_constant = smoothing_time_constant
        self.window = librosa.filters.get_window("blackman", fft_size, fftbins=True)
        self._buffer = np.zeros(fft_size, dtype=np.float32)
        self._smoothed = np.zeros(self.frequency_bin_count)

    @property
    def frequency_bin_count(self):
        return self.fft_size // 2

    def write(self, samples):
        """Push new samples, keeping only the most recent `fft_size`."""
        samples = np.asarray(samples, dtype=np.float32).ravel()
        if samples.size == 0:
            return
        if samples.size >= self.fft_size:
            self._buffer[:] = samples[-self.fft_size :]
            return
        self._buffer = np.roll(self._buffer, -samples.size)
        self._buffer[-samples.size :] = samples

    def get_float_time_domain_data(self):
        return self._buffer.astype(np.float64)

    def get_float_frequency_data(self):
        spectrum = np.fft.rfft(self._buffer * self.window)[: self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self.fft_size

        tau = self.smoothing_time_constant
        self._smoothed = tau * self._smoothed + (1 - tau) * magnitude

        # Silent bins come out as -inf dB
        with np.errstate(divide="ignore"):
            return 20 * np.log10(self._smoothed)

    def reset(self):
        self._buffer.fill(0.0)
        self._smoothed.fill(0.0)


class AudioAnalyser:
    """
    Plays a mono signal through a SpectrumAnalyser one tick at a time.
    """

    def __init__(
        self,
        y,
        sr,
        fft_size=FFT_SIZE,
        fps=DEFAULT_FPS,
        smoothing_time_constant=SMOOTHING_TIME_CONSTANT,
    ):
        self.y = np.asarray(y, dtype=np.float32)
        self.sr = sr
        self.fps = fps
        self.duration = len(self.y) / sr
        self.hop_length = max(1, int(round(sr / fps)))
        self.analyser = SpectrumAnalyser(fft_size, smoothing_time_constant)

    @classmethod
    def from_file(cls, filepath, **kwargs):
        logger.info(f"[+] Loading audio: {filepath}...")
        try:
            # Load audio with original sampling rate
            y, sr = librosa.load(filepath, sr=None, mono=True)
        except Exception as e:
            raise AudioLoadError(f"Error loading audio file: {e}") from e
        return cls(y, sr, **kwargs)

    @property
    def n_ticks(self):
        return int(np.ceil(len(self.y) / self.hop_length))

    def frames(self, duration=None):
        """
        Yield one AudioFrame per tick, up to `duration` seconds.
        """
        self.analyser.reset()
        end = len(self.y)
        if duration is not None:
            end = min(end, int(duration * self.sr))

        for start in range(0, end, self.hop_length):
            self.analyser.write(self.y[start : min(start + self.hop_length, end)])
            yield AudioFrame(
                time=start / self.sr,
                freq_db=self.analyser.get_float_frequency_data(),
                time_samples=self.analyser.get_float_time_domain_data(),
                sample_rate=self.sr,
            )
