"""Utility functions for the catpoint security system."""

import io
import os
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError


def ensure_directory_exists(path: str) -> None:
    """Ensure a directory exists, create if it doesn't."""
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def decode_image(data: Union[bytes, io.IOBase]) -> np.ndarray:
    """Decode encoded image bytes (JPEG, PNG, ...) into an RGB array.

    Raises:
        ValueError: If the data is empty or not a readable image
    """
    if isinstance(data, (bytes, bytearray)):
        if not data:
            raise ValueError("Empty image data")
        data = io.BytesIO(data)

    try:
        with Image.open(data) as img:
            return np.asarray(img.convert("RGB"))
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Unreadable image: {e}") from e
