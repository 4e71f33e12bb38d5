from __future__ import annotations
from typing import NamedTuple
import cv2, numpy as np

MIN_SPIKE_SIZE = 40

class SpikePair(NamedTuple):
    lowest: int
    highest: int

def histogram(gray: np.ndarray) -> np.ndarray:
    """256 bin counts over intensities 0..255."""
    return cv2.calcHist([gray], [0], None, [256], [0, 256]).ravel()

def find_spikes(hist: np.ndarray, min_spike_size: int = MIN_SPIKE_SIZE) -> SpikePair:
    """
    Lowest and highest bins holding at least `min_spike_size` samples.
    With fewer than two spikes the histogram is not bimodal enough to trust,
    so the full range (0, 255) is returned instead.
    """
    spikes = np.flatnonzero(np.asarray(hist) >= min_spike_size)
    if spikes.size < 2:
        return SpikePair(0, 255)
    return SpikePair(int(spikes[0]), int(spikes[-1]))

def spikes_of(gray: np.ndarray) -> SpikePair:
    return find_spikes(histogram(gray))
