"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from moodvis.features import FeatureVector

# Default sample rate for test audio
TEST_SR = 22050


@pytest.fixture
def sample_rate() -> int:
    """Default sample rate for tests."""
    return TEST_SR


@pytest.fixture
def make_tone(sample_rate: int):
    """
    Factory for sine tones.

    Returns:
        Callable (frequency, duration=1.0, amplitude=0.5) -> np.ndarray.
    """

    def _make(frequency: float, duration: float = 1.0, amplitude: float = 0.5) -> np.ndarray:
        t = np.arange(int(sample_rate * duration)) / sample_rate
        return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)

    return _make


@pytest.fixture
def silent_spectrum():
    """Factory for an all-silent dB spectrum (every bin is -inf)."""

    def _make(n_bins: int) -> np.ndarray:
        return np.full(n_bins, -np.inf)

    return _make


@pytest.fixture
def make_features():
    """Factory for FeatureVector with neutral defaults."""

    def _make(**overrides) -> FeatureVector:
        values = dict(
            energy=0.0,
            centroid=0.0,
            zcr=0.0,
            flux=0.0,
            low_ratio=0.0,
            high_ratio=0.0,
        )
        values.update(overrides)
        return FeatureVector(**values)

    return _make


@pytest.fixture
def temp_audio_file(tmp_path, make_tone, sample_rate):
    """Create a temporary WAV file: a bass tone followed by a high tone."""
    import soundfile as sf

    y = np.concatenate([make_tone(100.0, 1.5), make_tone(6000.0, 1.5)])
    audio_path = tmp_path / "test_audio.wav"
    sf.write(audio_path, y, sample_rate)
    return audio_path
