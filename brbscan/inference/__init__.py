"""
Inference Module
================

Frame conversion, model input preparation and TFLite execution.
"""

from .image_utils import (
    YuvFrame,
    YuvPlane,
    decode_image,
    encode_jpeg,
    rotate_frame,
    yuv420_to_rgb,
)
from .interpreter import TFLiteModel
from .preprocessing import MODEL_INPUT_SIZE, preprocess

__all__ = [
    "TFLiteModel",
    "MODEL_INPUT_SIZE",
    "preprocess",
    "YuvFrame",
    "YuvPlane",
    "decode_image",
    "encode_jpeg",
    "rotate_frame",
    "yuv420_to_rgb",
]
