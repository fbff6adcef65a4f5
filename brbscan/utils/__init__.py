"""
Utilities Module
================

Contains camera ownership and the mobile session registry.
"""

from .camera_manager import CameraManager
from .frame_processor import DEFAULT_SESSION, MobileFrameProcessor

__all__ = ["CameraManager", "MobileFrameProcessor", "DEFAULT_SESSION"]
