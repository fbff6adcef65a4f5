"""
Preprocessing Module
====================

Turns RGB frames into model input tensors.
"""

import cv2
import numpy as np

MODEL_INPUT_SIZE = 224


def preprocess(image: np.ndarray, input_size: int = MODEL_INPUT_SIZE) -> np.ndarray:
    """
    Resize and normalise an RGB image for the banknote model.

    The image is bilinearly scaled to ``input_size`` square and every
    channel is mapped from [0, 255] to [-1, 1] with ``v / 127.5 - 1``.

    Args:
        image: RGB ``uint8`` array of shape (H, W, 3)
        input_size: Side length of the square model input

    Returns:
        ``float32`` tensor of shape (1, input_size, input_size, 3)
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an RGB image (H, W, 3), got shape {image.shape}")

    resized = cv2.resize(image, (input_size, input_size), interpolation=cv2.INTER_LINEAR)
    tensor = resized.astype(np.float32) / np.float32(127.5) - np.float32(1.0)
    return tensor[np.newaxis, ...]
