from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import cv2, numpy as np

RELAX_STEP = 2

@dataclass
class MergeResult:
    points: np.ndarray                      # (N,1,2) int32, all mergeable contours concatenated
    contours: List[np.ndarray] = field(default_factory=list)
    mergeable: List[bool] = field(default_factory=list)
    threshold: int = 0                      # size requirement that finally admitted a contour

    @property
    def ok(self) -> bool:
        return any(self.mergeable)

def find_contours(edges: np.ndarray) -> List[np.ndarray]:
    cnts, _ = cv2.findContours(edges, cv2.RETR_CCOMP, cv2.CHAIN_APPROX_SIMPLE)
    return list(cnts)

def max_relax_passes(min_contour_size: int) -> int:
    # after this many passes the requirement is <= 0 and every contour qualifies
    return max(1, math.ceil(min_contour_size / RELAX_STEP) + 1)

def select_mergeable(contours: Sequence[np.ndarray], min_contour_size: int) -> Tuple[List[bool], int]:
    """
    Flag contours with at least `min_contour_size` points. While none qualify the
    requirement drops by RELAX_STEP, so broken pupil boundaries still get through.
    """
    if len(contours) == 0:
        return [], min_contour_size
    sizes = [len(c) for c in contours]
    threshold = min_contour_size
    flags = [False] * len(sizes)
    for p in range(max_relax_passes(min_contour_size)):
        threshold = min_contour_size - p * RELAX_STEP
        flags = [n >= threshold for n in sizes]
        if any(flags):
            break
    return flags, threshold

def merge_contours(edges: np.ndarray, min_contour_size: int) -> MergeResult:
    cnts = find_contours(edges)
    flags, threshold = select_mergeable(cnts, min_contour_size)
    picked = [c for c, ok in zip(cnts, flags) if ok]
    pts = np.concatenate(picked) if picked else np.empty((0, 1, 2), np.int32)
    return MergeResult(points=pts, contours=cnts, mergeable=flags, threshold=threshold)

def draw(shape, contours: Sequence[np.ndarray], flags: Sequence[bool] | None = None) -> np.ndarray:
    """Binary image of the (optionally flagged) contours, for debug display."""
    out = np.zeros(shape[:2], np.uint8)
    for i, c in enumerate(contours):
        if flags is None or flags[i]:
            cv2.drawContours(out, contours, i, 255)
    return out
