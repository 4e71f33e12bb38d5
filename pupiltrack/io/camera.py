from __future__ import annotations
import cv2, time
from pathlib import Path
from typing import Iterator, Dict, Any, Union
import numpy as np

def _source(camera: Union[int, str]):
    # "0" on the command line means camera index 0, anything else a file/URL
    if isinstance(camera, str) and camera.isdigit():
        return int(camera)
    return camera

def frames(camera: Union[int, str] = 0, width: int = 640, height: int = 480) -> Iterator[Dict[str, Any]]:
    cap = cv2.VideoCapture(_source(camera))
    if width:  cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    if height: cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    if not cap.isOpened():
        raise RuntimeError(f"Cannot open camera {camera}")
    try:
        i = 0
        while True:
            ok, frame = cap.read()
            if not ok: break
            yield {"image": frame, "meta": {"ts": time.time(), "index": i}}
            i += 1
    finally:
        cap.release()

def read_image(path: Union[str, Path]) -> np.ndarray:
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise FileNotFoundError(f"Cannot read image {path}")
    return img

def load_mask(path: Union[str, Path]) -> np.ndarray:
    """Region-of-interest mask; nonzero pixels are kept."""
    mask = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if mask is None:
        raise FileNotFoundError(f"Cannot read mask {path}")
    return mask
