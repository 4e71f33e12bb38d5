from __future__ import annotations
from typing import Optional, Tuple
import cv2, numpy as np
from .histogram import SpikePair

MORPH_KERNEL = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (7, 7))

def _at_most(gray: np.ndarray, upper: float) -> np.ndarray:
    # 255 where gray <= upper, else 0
    _, m = cv2.threshold(gray, upper, 255, cv2.THRESH_BINARY_INV)
    return m

def _bright_fraction(below: np.ndarray, roi: Optional[np.ndarray]) -> float:
    # share of eligible pixels above the cutoff; masked-out pixels do not count
    if roi is None or cv2.countNonZero(roi) == 0:
        return 1.0 - cv2.countNonZero(below) / float(below.size)
    eligible = cv2.countNonZero(roi)
    return 1.0 - cv2.countNonZero(cv2.bitwise_and(below, roi)) / float(eligible)

def dark_mask(gray: np.ndarray, lowest_spike: int, offset: int = 11) -> np.ndarray:
    """Candidate pupil region, grown to tolerate an underestimated threshold."""
    m = _at_most(gray, lowest_spike + offset)
    return cv2.dilate(m, MORPH_KERNEL, iterations=2)

def glint_mask(gray: np.ndarray, highest_spike: int, offset: int = 5,
               max_fraction: Optional[float] = 0.05, roi: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Region allowed to carry pupil edges: 255 everywhere except near glints.
    Glints are small; if more than `max_fraction` of the region of interest
    (`roi`, 0/255 sized like `gray`, whole frame when None) sits above the
    cutoff the bright mode is background and nothing is excluded.
    """
    m = _at_most(gray, highest_spike - offset)
    if max_fraction is not None and _bright_fraction(m, roi) > max_fraction:
        return np.full_like(m, 255)
    return cv2.erode(m, MORPH_KERNEL, iterations=1)

def build_masks(gray: np.ndarray, spikes: SpikePair, params,
                roi: Optional[np.ndarray] = None) -> Tuple[np.ndarray, np.ndarray]:
    dark = dark_mask(gray, spikes.lowest, params.pupil_intensity_offset)
    glint = glint_mask(gray, spikes.highest, params.glint_intensity_offset,
                       params.glint_max_fraction, roi)
    return dark, glint
