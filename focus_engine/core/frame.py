"""
Frame validation and pixel helpers shared by the detectors.

Frames are numpy arrays of shape (height, width, channels) holding RGB or
RGBA samples in the 0..255 range. Only the first three channels are read.
"""

import numpy as np


class InvalidFrame(ValueError):
    """Raised when a frame is not a usable (H, W, 3|4) pixel grid."""


def validate_frame(frame) -> np.ndarray:
    """Return the frame's RGB view as float64, or raise InvalidFrame."""
    if not isinstance(frame, np.ndarray):
        raise InvalidFrame(f"Expected numpy array, got {type(frame).__name__}")

    if frame.ndim != 3:
        raise InvalidFrame(f"Expected (height, width, channels), got shape {frame.shape}")

    height, width, channels = frame.shape
    if height == 0 or width == 0:
        raise InvalidFrame(f"Frame has zero size: {width}x{height}")

    if channels < 3:
        raise InvalidFrame(f"Expected RGB or RGBA samples, got {channels} channel(s)")

    if not np.issubdtype(frame.dtype, np.number) or np.issubdtype(frame.dtype, np.complexfloating):
        raise InvalidFrame(f"Unsupported pixel dtype: {frame.dtype}")

    return frame[:, :, :3].astype(np.float64)


def brightness(rgb: np.ndarray) -> np.ndarray:
    """Per-pixel brightness as the plain mean of R, G and B."""
    return rgb.sum(axis=2) / 3.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to [low, high]; NaN is treated as 0."""
    if value != value:
        value = 0.0
    return max(low, min(high, value))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)
