from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import numpy as np

from ..config.params import TrackerParams
from .preprocess import to_gray, fit_mask
from .histogram import SpikePair, spikes_of
from .masks import build_masks
from .edges import extract_edges
from .contours import merge_contours, draw
from .ellipse import TrackingResult, fit_ellipse

log = logging.getLogger(__name__)

# receives (stage name, image) once per pipeline stage when debug capture is on
DebugSink = Callable[[str, np.ndarray], None]

DEFAULT_FRAME_SIZE = (640, 360)

@dataclass
class Detection:
    ok: bool
    result: Optional[TrackingResult]
    points: np.ndarray          # merged boundary points fed to the fit
    spikes: SpikePair
    threshold: int              # contour size requirement after relaxation

def detect_pupil(frame: np.ndarray, params: TrackerParams, mask: np.ndarray | None = None,
                 sink: DebugSink | None = None) -> Detection:
    """
    One pass of the pipeline: grayscale -> histogram spikes -> dark/glint masks
    -> pruned edges -> merged contours -> ellipse. Pure in (frame, mask, params).
    Raises InvalidFrameError for unusable frames; a missing pupil is ok=False.
    """
    sink = sink if params.debug_capture else None
    gray = to_gray(frame, mask)
    roi = None if mask is None else fit_mask(np.asarray(mask), gray.shape[1], gray.shape[0])
    spikes = spikes_of(gray)
    dark, glint = build_masks(gray, spikes, params, roi)
    if sink is not None:
        sink("gray", gray); sink("dark_mask", dark); sink("glint_mask", glint)

    edges = extract_edges(gray, dark, glint, params, sink)
    merged = merge_contours(edges, params.min_contour_size)
    if sink is not None:
        sink("contours", draw(edges.shape, merged.contours))
        sink("contours_merged", draw(edges.shape, merged.contours, merged.mergeable))

    result = fit_ellipse(merged.points) if merged.ok else None
    log.debug("spikes=%s contours=%d threshold=%d points=%d fit=%s", tuple(spikes),
              len(merged.contours), merged.threshold, len(merged.points), result is not None)
    return Detection(result is not None, result, merged.points, spikes, merged.threshold)

class PupilTracker:
    """
    Per-stream tracker: holds the params, an optional region-of-interest mask
    and the last good ellipse. Not thread-safe; use one instance per stream.
    """
    def __init__(self, params: TrackerParams | None = None, frame_size: Tuple[int, int] = DEFAULT_FRAME_SIZE,
                 sink: DebugSink | None = None):
        self.params = params or TrackerParams()
        self.frame_size = frame_size
        self.sink = sink
        self._mask_source: np.ndarray | None = None   # caller's mask, binarised at its own size
        self._mask: np.ndarray | None = None
        self._result: TrackingResult | None = None

    def configure(self, **changes) -> TrackerParams:
        """Replace tunables; applies from the next find_pupil call."""
        self.params = self.params.with_changes(**changes)
        return self.params

    def set_frame_size(self, width: int, height: int):
        self.frame_size = (int(width), int(height))
        if self._mask_source is not None:
            self._mask = fit_mask(self._mask_source, *self.frame_size)

    def set_roi_mask(self, mask: np.ndarray | None):
        if mask is None:
            self._mask_source = self._mask = None
            return
        mask = np.asarray(mask)
        self._mask_source = fit_mask(mask, mask.shape[1], mask.shape[0])
        self._mask = fit_mask(self._mask_source, *self.frame_size)

    @property
    def roi_mask(self) -> np.ndarray | None:
        return self._mask

    def find_pupil(self, frame: np.ndarray) -> bool:
        det = detect_pupil(frame, self.params, self._mask, self.sink)
        if det.ok:
            self._result = det.result
        return det.ok

    @property
    def result(self) -> TrackingResult | None:
        return self._result

    def ellipse_center(self) -> Tuple[float, float] | None:
        return self._result.center if self._result else None

    def ellipse_rectangle(self):
        """((cx, cy), (w, h), angle) of the last good fit, or None."""
        return self._result.as_rect() if self._result else None
