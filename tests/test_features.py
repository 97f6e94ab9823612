"""Tests for the FeatureExtractor module."""

import numpy as np
import pytest

from moodvis.features import FeatureExtractor, FeatureVector, bin_frequencies

N_BINS = 1024
SR = 44100


@pytest.fixture
def extractor():
    return FeatureExtractor(N_BINS)


@pytest.fixture
def flat_spectrum():
    """0 dB in every bin, i.e. linear magnitude 1."""
    return np.zeros(N_BINS)


class TestBinFrequencies:
    def test_bin_150_at_44100(self):
        """Bin i sits at (i / N) * Nyquist."""
        freqs = bin_frequencies(1024, 44100)
        assert freqs[150] == pytest.approx(150 / 1024 * 22050)
        assert freqs[150] == pytest.approx(3229.98, abs=0.01)

    def test_first_bin_is_dc(self):
        assert bin_frequencies(N_BINS, SR)[0] == 0.0


class TestTimeDomainFeatures:
    def test_silence_has_no_energy_or_crossings(self, extractor, flat_spectrum):
        f = extractor.extract(flat_spectrum, np.zeros(2048), SR)
        assert f.energy == 0.0
        assert f.zcr == 0.0

    def test_energy_is_rms(self, extractor, flat_spectrum):
        f = extractor.extract(flat_spectrum, np.full(2048, 0.5), SR)
        assert f.energy == pytest.approx(0.5)

    def test_sine_energy(self, extractor, flat_spectrum, make_tone):
        tone = make_tone(441.0, amplitude=0.8)
        f = extractor.extract(flat_spectrum, tone, SR)
        assert f.energy == pytest.approx(0.8 / np.sqrt(2), rel=1e-3)

    def test_zero_crossing_rate_alternating(self, extractor, flat_spectrum):
        f = extractor.extract(flat_spectrum, [1.0, -1.0, 1.0, -1.0], SR)
        assert f.zcr == pytest.approx(3 / 4)

    def test_zero_counts_as_non_negative(self, extractor, flat_spectrum):
        # 0 -> -1 and -1 -> 0 cross, 0 -> 1 does not
        f = extractor.extract(flat_spectrum, [0.0, -1.0, 0.0, 1.0], SR)
        assert f.zcr == pytest.approx(2 / 4)

    def test_empty_time_buffer(self, extractor, flat_spectrum):
        f = extractor.extract(flat_spectrum, [], SR)
        assert f.energy == 0.0
        assert f.zcr == 0.0


class TestSpectralFeatures:
    def test_silent_spectrum(self, extractor, silent_spectrum):
        f = extractor.extract(silent_spectrum(N_BINS), np.zeros(2048), SR)
        assert f.centroid == 0.0
        assert f.low_ratio == 0.0
        assert f.high_ratio == 0.0

    def test_single_bin_centroid(self, extractor, silent_spectrum):
        freq_db = silent_spectrum(N_BINS)
        freq_db[150] = 0.0
        f = extractor.extract(freq_db, np.zeros(2048), SR)

        assert f.centroid == pytest.approx(bin_frequencies(N_BINS, SR)[150])
        assert f.low_ratio == 0.0
        assert f.high_ratio == pytest.approx(1.0)

    def test_centroid_invariant_to_scaling(self, silent_spectrum):
        rng = np.random.default_rng(42)
        freq_db = rng.normal(-40, 10, N_BINS)
        # +20*log10(k) dB multiplies every linear magnitude by k
        scaled_db = freq_db + 20 * np.log10(3.0)

        a = FeatureExtractor(N_BINS).extract(freq_db, np.zeros(16), SR)
        b = FeatureExtractor(N_BINS).extract(scaled_db, np.zeros(16), SR)
        assert b.centroid == pytest.approx(a.centroid, rel=1e-9)

    def test_ratios_partition_total(self, extractor):
        rng = np.random.default_rng(7)
        f = extractor.extract(rng.normal(-30, 15, N_BINS), np.zeros(16), SR)
        assert f.low_ratio + f.high_ratio == pytest.approx(1.0)

    def test_low_ratio_split_at_300hz(self, extractor, flat_spectrum):
        f = extractor.extract(flat_spectrum, np.zeros(16), SR)
        n_low = int(np.count_nonzero(bin_frequencies(N_BINS, SR) < 300))
        assert n_low == 14
        assert f.low_ratio == pytest.approx(n_low / N_BINS)

    def test_centroid_norm_is_capped(self):
        f = FeatureVector(energy=0, centroid=8000, zcr=0, flux=0, low_ratio=0, high_ratio=1)
        assert f.centroid_norm == 1.0
        f = FeatureVector(energy=0, centroid=2000, zcr=0, flux=0, low_ratio=0, high_ratio=1)
        assert f.centroid_norm == pytest.approx(0.5)

    def test_mismatched_bin_count_raises(self, extractor):
        with pytest.raises(ValueError):
            extractor.extract(np.zeros(N_BINS // 2), np.zeros(16), SR)


class TestSpectralFlux:
    def test_first_call_seeds_without_flux(self, extractor, flat_spectrum):
        assert not extractor.seeded
        f = extractor.extract(flat_spectrum, np.zeros(16), SR)
        assert f.flux == 0.0
        assert extractor.seeded

    def test_identical_spectra_have_zero_flux(self, extractor):
        freq_db = np.random.default_rng(3).normal(-50, 10, N_BINS)
        extractor.extract(freq_db, np.zeros(16), SR)
        f = extractor.extract(freq_db.copy(), np.zeros(16), SR)
        assert f.flux == 0.0

    def test_flux_sums_only_increases(self, extractor):
        quiet = np.full(N_BINS, -20.0)  # magnitude 0.1
        loud = np.zeros(N_BINS)  # magnitude 1.0

        extractor.extract(quiet, np.zeros(16), SR)
        rising = extractor.extract(loud, np.zeros(16), SR)
        falling = extractor.extract(quiet, np.zeros(16), SR)

        assert rising.flux == pytest.approx(0.9 * N_BINS)
        assert falling.flux == 0.0

    def test_flux_is_non_negative(self, extractor):
        rng = np.random.default_rng(11)
        for _ in range(5):
            f = extractor.extract(rng.normal(-40, 20, N_BINS), np.zeros(16), SR)
            assert f.flux >= 0.0

    def test_reset_reseeds(self, extractor, silent_spectrum, flat_spectrum):
        extractor.extract(silent_spectrum(N_BINS), np.zeros(16), SR)
        extractor.reset()
        f = extractor.extract(flat_spectrum, np.zeros(16), SR)
        assert f.flux == 0.0
