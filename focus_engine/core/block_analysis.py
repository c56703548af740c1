"""
Pixel Block Analysis Module

Scores fixed-size blocks of a frame for how face-like they are, using:
- Skin-tone ratio (two RGB rules, reddish and pale skin)
- Edge density (4-neighbour brightness difference)
- A bonus for moderate mean brightness

Per-pixel maps are computed once per frame; each block is then a pure,
read-only slice of those maps, so blocks can be evaluated in any order.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from .frame import brightness
from .rotation import RotationEstimator
from ..utils.config import config, EngineConfig


@dataclass(frozen=True)
class PixelMaps:
    """Per-pixel maps shared by every block of one frame."""
    gray: np.ndarray
    skin: np.ndarray
    edges: np.ndarray

    @property
    def height(self) -> int:
        return self.gray.shape[0]

    @property
    def width(self) -> int:
        return self.gray.shape[1]


@dataclass(frozen=True)
class BlockAnalysis:
    """Face-likeness of one block."""
    x: int
    y: int
    size: int
    confidence: float
    skin_ratio: float
    edge_ratio: float
    brightness: float
    yaw: float
    pitch: float


def skin_mask(rgb: np.ndarray) -> np.ndarray:
    """Boolean map of pixels matching either skin-tone rule."""
    r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
    spread = rgb.max(axis=2) - rgb.min(axis=2)
    rg = np.abs(r - g)

    reddish = ((r > 95) & (g > 40) & (b > 20) &
               (spread > 15) & (rg > 15) & (r > g) & (r > b))
    pale = ((r > 220) & (g > 210) & (b > 170) &
            (rg <= 15) & (r > b) & (g > b))

    return reddish | pale


def edge_mask(gray: np.ndarray, threshold: float) -> np.ndarray:
    """
    Boolean map of edge pixels.

    A pixel is an edge when its largest absolute brightness difference to
    the four direct neighbours exceeds the threshold. The outer border
    (first/last row and column) never counts as an edge.
    """
    edges = np.zeros(gray.shape, dtype=bool)
    if gray.shape[0] < 3 or gray.shape[1] < 3:
        return edges

    center = gray[1:-1, 1:-1]
    max_diff = np.maximum.reduce([
        np.abs(center - gray[:-2, 1:-1]),   # up
        np.abs(center - gray[1:-1, 2:]),    # right
        np.abs(center - gray[2:, 1:-1]),    # down
        np.abs(center - gray[1:-1, :-2]),   # left
    ])
    edges[1:-1, 1:-1] = max_diff > threshold
    return edges


class PixelBlockAnalyzer:
    """Scores frame blocks for face likelihood and estimates their rotation."""

    def __init__(self, block_size: Optional[int] = None,
                 rotation_estimator: Optional[RotationEstimator] = None,
                 engine_config: Optional[EngineConfig] = None):
        """
        Initialize block analyzer.

        Args:
            block_size: Block edge length in pixels
            rotation_estimator: Estimator fed with each block's border brightness
            engine_config: Source of the scoring weights (defaults to global config)
        """
        detection = (engine_config or config).detection
        self.block_size = detection.block_size if block_size is None else block_size
        self.rotation_estimator = rotation_estimator or RotationEstimator()

        self.skin_weight = detection.skin_weight
        self.edge_weight = detection.edge_weight
        self.brightness_bonus = detection.brightness_bonus
        self.min_brightness = detection.min_brightness
        self.max_brightness = detection.max_brightness
        self.edge_threshold = detection.edge_threshold

    def prepare(self, rgb: np.ndarray) -> PixelMaps:
        """Compute the per-pixel maps for a validated RGB frame."""
        gray = brightness(rgb)
        return PixelMaps(gray=gray, skin=skin_mask(rgb), edges=edge_mask(gray, self.edge_threshold))

    def analyze_block(self, maps: PixelMaps, x: int, y: int) -> BlockAnalysis:
        """Analyze the block whose top-left corner is (x, y)."""
        size = self.block_size
        gray = maps.gray[y:y + size, x:x + size]
        total = gray.size

        skin_ratio = float(np.count_nonzero(maps.skin[y:y + size, x:x + size])) / total
        edge_ratio = float(np.count_nonzero(maps.edges[y:y + size, x:x + size])) / total
        mean_brightness = float(gray.mean())

        confidence = skin_ratio * self.skin_weight + edge_ratio * self.edge_weight
        if self.min_brightness < mean_brightness < self.max_brightness:
            confidence += self.brightness_bonus

        yaw, pitch = self.rotation_estimator.estimate_from_block(gray)

        return BlockAnalysis(
            x=x, y=y, size=size,
            confidence=confidence,
            skin_ratio=skin_ratio,
            edge_ratio=edge_ratio,
            brightness=mean_brightness,
            yaw=yaw,
            pitch=pitch,
        )

    def block_origins(self, width: int, height: int) -> Iterator[tuple]:
        """Yield block origins in row-major order."""
        size = self.block_size
        for y in range(0, height - size, size):
            for x in range(0, width - size, size):
                yield x, y

    def analyze_frame(self, maps: PixelMaps) -> Iterator[BlockAnalysis]:
        """Analyze every scanned block of a frame, row-major."""
        for x, y in self.block_origins(maps.width, maps.height):
            yield self.analyze_block(maps, x, y)
