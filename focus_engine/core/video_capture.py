"""
Frame source for hosts driving the engine from a camera or a video file.

Only wraps OpenCV capture and colour conversion; camera permission
handling is left to the host platform.
"""

import time
from typing import Optional, Tuple, Dict, Any, Union

import cv2
import numpy as np

from ..utils.logger import get_logger, log_performance_metrics

logger = get_logger(__name__)


class FrameSource:
    """OpenCV capture that yields RGB frames."""

    def __init__(self, source: Union[int, str] = 0, width: Optional[int] = None,
                 height: Optional[int] = None):
        """
        Initialize frame source.

        Args:
            source: Camera device index or path to a video file
            width: Requested capture width (cameras only)
            height: Requested capture height (cameras only)
        """
        self.source = source
        self.cap = cv2.VideoCapture(source)

        if not self.cap.isOpened():
            raise RuntimeError(f"Could not open video source {source!r}")

        if isinstance(source, int):
            if width:
                self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            if height:
                self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        # FPS counter
        self.fps_counter = 0
        self.last_fps_time = time.time()
        self.current_fps = 0.0

        logger.info(f"Frame source opened: {source!r}")

    @log_performance_metrics
    def read_frame(self) -> Tuple[bool, Optional[np.ndarray]]:
        """Read the next frame as an RGB array."""
        if self.cap is None or not self.cap.isOpened():
            return False, None

        ret, frame = self.cap.read()
        if not ret or frame is None:
            return False, None

        self._update_fps()
        return True, to_rgb(frame)

    def _update_fps(self) -> None:
        self.fps_counter += 1
        current_time = time.time()

        if current_time - self.last_fps_time >= 1.0:
            self.current_fps = self.fps_counter / (current_time - self.last_fps_time)
            self.fps_counter = 0
            self.last_fps_time = current_time

    def get_info(self) -> Dict[str, Any]:
        """Source dimensions and rate."""
        if self.cap is None or not self.cap.isOpened():
            return {}

        return {
            'source': self.source,
            'width': int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            'height': int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            'fps': self.cap.get(cv2.CAP_PROP_FPS),
            'backend': self.cap.getBackendName(),
        }

    def release(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("Frame source released")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


def to_rgb(frame: np.ndarray) -> np.ndarray:
    """Convert an OpenCV BGR/BGRA/grayscale frame to RGB."""
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
