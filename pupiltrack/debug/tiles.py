from __future__ import annotations
import math
from typing import List, Tuple
import cv2, numpy as np

class TileSink:
    """
    Collects the pipeline's intermediate images for one frame.
    Pass it as the tracker's sink, call clear() before each frame.
    """
    def __init__(self):
        self.images: List[Tuple[str, np.ndarray]] = []

    def __call__(self, stage: str, image: np.ndarray):
        self.images.append((stage, image))

    def clear(self):
        self.images.clear()

    def stages(self) -> List[str]:
        return [s for s, _ in self.images]

    def mosaic(self, tile_size=(640, 360), cols: int = 3) -> np.ndarray:
        return mosaic(self.images, tile_size, cols)

def _tile(img: np.ndarray, tile_size, label: str) -> np.ndarray:
    w, h = tile_size
    if img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if img.shape[:2] != (h, w):
        img = cv2.resize(img, (w, h), interpolation=cv2.INTER_NEAREST)
    else:
        img = img.copy()
    cv2.putText(img, label, (8, 20), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 200, 255), 1, cv2.LINE_AA)
    return img

def mosaic(images, tile_size=(640, 360), cols: int = 3) -> np.ndarray:
    """Grid of labelled tiles, row-major, empty cells black."""
    w, h = tile_size
    rows = max(1, math.ceil(len(images) / cols))
    out = np.zeros((h * rows, w * cols, 3), np.uint8)
    for i, (label, img) in enumerate(images):
        r, c = divmod(i, cols)
        out[r*h:(r+1)*h, c*w:(c+1)*w] = _tile(img, tile_size, label)
    return out

def annotate(frame: np.ndarray, result) -> np.ndarray:
    """Copy of the frame with centre cross (red) and ellipse (green)."""
    out = frame.copy() if frame.ndim == 3 else cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    if result is None:
        return out
    h, w = out.shape[:2]
    if 0 <= result.cx < w and 0 <= result.cy < h:
        cv2.drawMarker(out, (int(round(result.cx)), int(round(result.cy))), (0, 0, 255), cv2.MARKER_CROSS, 10, 1)
        cv2.ellipse(out, result.as_rect(), (0, 255, 0), 1)
    return out
