"""
Image Utilities Module
======================

Conversion helpers between camera buffers, encoded images and RGB arrays.

Phones stream YUV_420_888 frames: a full-resolution luma plane followed by
two subsampled chroma planes, each with its own row and pixel stride.
"""

from dataclasses import dataclass
from typing import Sequence, Union

import cv2
import numpy as np

from ..errors import FrameDecodeError, UnsupportedFormatError

YUV_420_888 = "YUV_420_888"

# Value returned for reads past the end of a plane buffer
NEUTRAL_SAMPLE = 128

MIN_FRAME_SIZE = 10

# Largest accepted side of a raw camera frame
MAX_FRAME_SIDE = 2048

BufferLike = Union[bytes, bytearray, memoryview, np.ndarray]


@dataclass
class YuvPlane:
    """A single image plane with its stride layout."""
    buffer: BufferLike
    row_stride: int
    pixel_stride: int = 1

    def as_array(self) -> np.ndarray:
        if isinstance(self.buffer, np.ndarray):
            return self.buffer.reshape(-1).astype(np.uint8, copy=False)
        return np.frombuffer(bytes(self.buffer), dtype=np.uint8)


@dataclass
class YuvFrame:
    """Raw camera frame as delivered by a mobile camera pipeline."""
    width: int
    height: int
    planes: Sequence[YuvPlane]
    fmt: str = YUV_420_888


def _gather(buffer: np.ndarray, index: np.ndarray) -> np.ndarray:
    """Read ``buffer[index]`` returning NEUTRAL_SAMPLE for out of range indices."""
    if buffer.size == 0:
        return np.full(index.shape, NEUTRAL_SAMPLE, dtype=np.int32)
    valid = (index >= 0) & (index < buffer.size)
    values = buffer[np.clip(index, 0, buffer.size - 1)].astype(np.int32)
    return np.where(valid, values, NEUTRAL_SAMPLE)


def _scaled(coefficient: float, delta: np.ndarray) -> np.ndarray:
    # Single precision product truncated toward zero
    product = np.float32(coefficient) * delta.astype(np.float32)
    return np.trunc(product).astype(np.int32)


def yuv420_to_rgb(frame: YuvFrame, max_side: int = MAX_FRAME_SIDE) -> np.ndarray:
    """
    Convert a YUV_420_888 frame into an RGB image.

    Strides are honoured per plane; U and V share the row and pixel stride
    of the first chroma plane. Reads past the end of a plane are treated as
    neutral (128) so truncated buffers still produce an image.

    Args:
        frame: Frame with three planes (Y, U, V)
        max_side: Largest accepted width or height

    Returns:
        ``uint8`` array of shape (height, width, 3) in RGB order

    Raises:
        UnsupportedFormatError: If the frame is not YUV_420_888
        ValueError: If the frame size is not positive or exceeds max_side
    """
    if frame.fmt != YUV_420_888:
        raise UnsupportedFormatError(f"Unsupported image format: {frame.fmt}")
    if len(frame.planes) != 3:
        raise UnsupportedFormatError(
            f"Expected 3 planes for {YUV_420_888}, got {len(frame.planes)}"
        )
    if frame.width <= 0 or frame.height <= 0:
        raise ValueError(f"Invalid frame size {frame.width}x{frame.height}")
    if frame.width > max_side or frame.height > max_side:
        raise ValueError(
            f"Frame size {frame.width}x{frame.height} exceeds the {max_side} pixel limit"
        )

    y_plane, u_plane, v_plane = frame.planes
    ys = np.arange(frame.height, dtype=np.int64)[:, None]
    xs = np.arange(frame.width, dtype=np.int64)[None, :]

    y_index = ys * y_plane.row_stride + xs * y_plane.pixel_stride
    uv_index = (ys // 2) * u_plane.row_stride + (xs // 2) * u_plane.pixel_stride

    y_value = _gather(y_plane.as_array(), y_index)
    u_delta = _gather(u_plane.as_array(), uv_index) - 128
    v_delta = _gather(v_plane.as_array(), uv_index) - 128

    r = y_value + _scaled(1.402, v_delta)
    g = y_value - _scaled(0.344, u_delta) - _scaled(0.714, v_delta)
    b = y_value + _scaled(1.772, u_delta)

    rgb = np.stack([r, g, b], axis=-1)
    return np.clip(rgb, 0, 255).astype(np.uint8)


def rotate_frame(image: np.ndarray, degrees: int) -> np.ndarray:
    """
    Rotate an image clockwise by a multiple of 90 degrees.

    Args:
        image: Image array (H, W[, C])
        degrees: Clockwise rotation reported by the camera

    Returns:
        Rotated image (the input itself when no rotation is needed)
    """
    degrees = int(degrees) % 360
    if degrees % 90 != 0:
        raise ValueError(f"Rotation must be a multiple of 90 degrees, got {degrees}")
    if degrees == 0:
        return image
    return np.ascontiguousarray(np.rot90(image, k=-(degrees // 90)))


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode JPEG/PNG bytes into an RGB image.

    Raises:
        FrameDecodeError: If the data is not an image or is too small
    """
    nparr = np.frombuffer(data, np.uint8)
    frame = cv2.imdecode(nparr, cv2.IMREAD_COLOR) if nparr.size else None

    if frame is None or frame.size == 0:
        raise FrameDecodeError("Failed to decode image")
    if frame.shape[0] < MIN_FRAME_SIZE or frame.shape[1] < MIN_FRAME_SIZE:
        raise FrameDecodeError("Image too small")

    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


def encode_jpeg(frame: np.ndarray, quality: int = 85) -> bytes:
    """Encode a BGR frame to JPEG bytes (empty on failure)."""
    ret, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    return buffer.tobytes() if ret else b""
