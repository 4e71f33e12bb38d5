from __future__ import annotations
import cv2, numpy as np

def blur(gray: np.ndarray, ksize: int) -> np.ndarray:
    return cv2.blur(gray, (ksize, ksize)) if ksize > 1 else gray

def canny(img: np.ndarray, threshold: float, ratio: float, aperture: int) -> np.ndarray:
    return cv2.Canny(img, threshold, threshold * ratio, apertureSize=aperture)

def prune(edges: np.ndarray, dark: np.ndarray, glint: np.ndarray) -> np.ndarray:
    """Keep only edge pixels lying inside both masks."""
    return cv2.min(cv2.min(edges, dark), glint)

def extract_edges(gray: np.ndarray, dark: np.ndarray, glint: np.ndarray, params, sink=None) -> np.ndarray:
    blurred = blur(gray, params.blur_kernel_size)
    edges = canny(blurred, params.canny_threshold, params.canny_ratio, params.canny_aperture)
    pruned = prune(edges, dark, glint)
    if sink is not None:
        sink("blurred", blurred); sink("edges", edges); sink("edges_pruned", pruned)
    return pruned
