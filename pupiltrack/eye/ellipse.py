from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import cv2, numpy as np

MIN_FIT_POINTS = 5

@dataclass(frozen=True)
class TrackingResult:
    """Fitted pupil ellipse. width/height are full axis lengths, angle in degrees."""
    cx: float; cy: float; width: float; height: float; angle: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.cx, self.cy)

    @property
    def axes(self) -> Tuple[float, float]:
        return (self.width, self.height)

    @property
    def major(self) -> float:
        return max(self.width, self.height)

    @property
    def minor(self) -> float:
        return min(self.width, self.height)

    def as_rect(self):
        """((cx, cy), (w, h), angle) as accepted by cv2.ellipse."""
        return ((self.cx, self.cy), (self.width, self.height), self.angle)

def fit_ellipse(points: np.ndarray) -> Optional[TrackingResult]:
    # least squares over every merged point, no outlier rejection
    pts = np.asarray(points).reshape(-1, 1, 2)
    if pts.dtype not in (np.int32, np.float32):
        pts = pts.astype(np.float32)
    if len(pts) < MIN_FIT_POINTS:
        return None
    (x, y), (w, h), angle = cv2.fitEllipse(pts)
    return TrackingResult(float(x), float(y), float(w), float(h), float(angle))
