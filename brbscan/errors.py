"""
Errors Module
=============

Exceptions raised by the scanning pipeline.
"""


class ScanError(Exception):
    """Base class for banknote scanning errors."""


class ModelLoadError(ScanError):
    """Raised when the TFLite model cannot be loaded or does not fit the labels."""


class FrameDecodeError(ScanError, ValueError):
    """Raised when an uploaded frame cannot be decoded into an image."""


class UnsupportedFormatError(ScanError, ValueError):
    """Raised for camera frames in a pixel format other than YUV_420_888."""
