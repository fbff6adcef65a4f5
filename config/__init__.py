"""
Configuration Module
====================
"""

from .settings import (
    ServerConfig,
    CameraConfig,
    ModelConfig,
    ScannerConfig,
    get_server_config,
    get_camera_config,
    get_model_config,
    get_scanner_config,
)

__all__ = [
    "ServerConfig",
    "CameraConfig",
    "ModelConfig",
    "ScannerConfig",
    "get_server_config",
    "get_camera_config",
    "get_model_config",
    "get_scanner_config",
]
