from __future__ import annotations
import logging
import cv2, numpy as np

log = logging.getLogger(__name__)

class InvalidFrameError(ValueError):
    """Frame is missing, empty or not an image (distinct from 'no pupil found')."""

def check_frame(frame) -> np.ndarray:
    if frame is None:
        raise InvalidFrameError("frame is None")
    frame = np.asarray(frame)
    if frame.size == 0 or frame.ndim not in (2, 3):
        raise InvalidFrameError(f"expected a non-empty 2D or 3D image, got shape {frame.shape}")
    if frame.ndim == 3 and frame.shape[2] not in (1, 3, 4):
        raise InvalidFrameError(f"unsupported channel count {frame.shape[2]}")
    return frame

def fit_mask(mask: np.ndarray, width: int, height: int) -> np.ndarray:
    """Single-channel 0/255 copy of `mask` sized to (width, height)."""
    if mask.ndim == 3:
        mask = cv2.cvtColor(mask, cv2.COLOR_BGR2GRAY) if mask.shape[2] == 3 else mask[:, :, 0]
    if mask.shape[:2] != (height, width):
        log.debug("resizing mask %s -> %dx%d", mask.shape[:2], width, height)
        mask = cv2.resize(mask, (width, height), interpolation=cv2.INTER_NEAREST)
    return np.where(mask > 0, 255, 0).astype(np.uint8)

def apply_mask(frame: np.ndarray, mask: np.ndarray) -> np.ndarray:
    # masked-out area must read white, otherwise it looks like pupil
    h, w = frame.shape[:2]
    sel = fit_mask(mask, w, h) > 0
    inv = cv2.bitwise_not(frame)
    masked = np.zeros_like(inv)
    masked[sel] = inv[sel]
    return cv2.bitwise_not(masked)

def to_gray(frame, mask: np.ndarray | None = None) -> np.ndarray:
    """Grayscale, min-max stretched to 0..255. The caller's frame is never modified."""
    img = check_frame(frame)
    if img.dtype != np.uint8:
        img = cv2.normalize(img, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_8U)
    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]
    if mask is not None:
        img = apply_mask(img, mask)
    if img.ndim == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY if img.shape[2] == 4 else cv2.COLOR_BGR2GRAY)
    return cv2.normalize(img, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_8U)
