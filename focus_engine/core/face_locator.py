"""
Face Locator Module

Picks the most face-like block of a frame. No identity is kept between
frames: every call is an independent estimate.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .block_analysis import PixelBlockAnalyzer, PixelMaps
from ..utils.config import config
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FaceCandidate:
    """Best face block of a frame, center normalized to [0, 1]."""
    center_x: float
    center_y: float
    confidence: float
    yaw: float = 0.0
    pitch: float = 0.0


class FaceLocator:
    """Block-scan face locator."""

    def __init__(self, analyzer: Optional[PixelBlockAnalyzer] = None,
                 confidence_floor: Optional[float] = None):
        """
        Initialize face locator.

        Args:
            analyzer: Block analyzer used for the scan
            confidence_floor: A block must score strictly above this to qualify
        """
        self.analyzer = analyzer or PixelBlockAnalyzer()
        self.confidence_floor = (config.detection.confidence_floor
                                 if confidence_floor is None else confidence_floor)

        logger.info(f"Face locator initialized (block size: {self.analyzer.block_size}px, "
                    f"confidence floor: {self.confidence_floor})")

    def locate(self, rgb: np.ndarray) -> Optional[FaceCandidate]:
        """Locate the face block in a validated RGB frame, or return None."""
        return self.locate_in_maps(self.analyzer.prepare(rgb))

    def locate_in_maps(self, maps: PixelMaps) -> Optional[FaceCandidate]:
        best = None
        max_confidence = 0.0

        # Strict comparison keeps the first block in scan order on ties.
        for block in self.analyzer.analyze_frame(maps):
            if block.confidence > max_confidence and block.confidence > self.confidence_floor:
                max_confidence = block.confidence
                best = block

        if best is None:
            return None

        half = best.size / 2.0
        candidate = FaceCandidate(
            center_x=(best.x + half) / maps.width,
            center_y=(best.y + half) / maps.height,
            confidence=best.confidence,
            yaw=best.yaw,
            pitch=best.pitch,
        )
        logger.log_face_candidate(candidate.center_x, candidate.center_y, candidate.confidence,
                                  candidate.yaw, candidate.pitch)
        return candidate
