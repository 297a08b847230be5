"""Stand-in image classifier."""

from typing import Optional

import numpy as np

from ..logging_config import get_logger
from .interfaces import ImageClassifierInterface, NDArray

logger = get_logger("image_classifier")


class FakeImageClassifier(ImageClassifierInterface):
    """Answers 'is there a cat?' with a coin flip.

    Used in place of a real vision service during development and demos.
    Pass a seed to make the answers reproducible.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)
        self.scan_count = 0

    def image_contains_cat(self, image: NDArray, confidence_threshold: float) -> bool:
        if image is None or np.size(image) == 0:
            raise ValueError("No image data to classify")

        self.scan_count += 1
        result = bool(self._rng.random() < 0.5)
        logger.debug(
            f"Scan {self.scan_count}: image {np.shape(image)} "
            f"threshold {confidence_threshold} -> cat={result}"
        )
        return result
