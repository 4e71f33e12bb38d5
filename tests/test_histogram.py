import numpy as np
from pupiltrack.eye.histogram import histogram, find_spikes, spikes_of, SpikePair, MIN_SPIKE_SIZE

def test_flat_image_falls_back_to_full_range():
    gray = np.full((60,80), 128, np.uint8)
    assert spikes_of(gray) == SpikePair(0, 255)

def test_bimodal_spikes():
    gray = np.full((60,80), 200, np.uint8)
    gray[10:30, 10:30] = 25
    assert spikes_of(gray) == (25, 200)

def test_histogram_has_256_bins():
    gray = np.arange(256, dtype=np.uint8).reshape(16,16)
    hist = histogram(gray)
    assert hist.shape == (256,) and hist.sum() == 256

def test_spike_needs_min_samples():
    hist = np.zeros(256)
    hist[10] = MIN_SPIKE_SIZE; hist[90] = MIN_SPIKE_SIZE - 1; hist[240] = 500
    assert find_spikes(hist) == (10, 240)
    hist[10] = MIN_SPIKE_SIZE - 1
    assert find_spikes(hist) == (0, 255)
