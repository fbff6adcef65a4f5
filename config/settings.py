"""
Server Configuration
====================

Configuration settings for the banknote scanner server.
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class ServerConfig:
    """Server configuration settings."""
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    threaded: bool = True


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: Optional[int] = None  # None for auto-detect
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class ModelConfig:
    """TFLite model settings."""
    model_path: str = "models/banknote_model.tflite"
    input_size: int = 224
    temperature: float = 0.8
    num_threads: Optional[int] = None


@dataclass
class ScannerConfig:
    """Decision thresholds and session behaviour."""
    # Confidence thresholds
    general_threshold: float = 0.45
    min_confidence: float = 0.30
    fifty_threshold: float = 0.65

    # Probability adjustments applied after softmax
    fifty_penalty: float = 0.10
    twenty_boost: float = 0.10

    # Fifty-dinar predictions must repeat this many frames in a row
    max_consecutive_fifty: int = 3

    # Session behaviour
    analysis_interval_ms: int = 800
    no_detection_threshold: int = 5
    speech_enabled: bool = True

    # Session registry and raw frame limits
    max_sessions: int = 64
    max_frame_side: int = 2048


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def get_server_config() -> ServerConfig:
    """Get server configuration from environment."""
    return ServerConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        debug=_env_bool("DEBUG", "false"),
        threaded=True
    )


def get_camera_config() -> CameraConfig:
    """Get camera configuration from environment."""
    index = os.getenv("CAMERA_INDEX")
    return CameraConfig(
        index=int(index) if index else None,
        width=int(os.getenv("CAMERA_WIDTH", "640")),
        height=int(os.getenv("CAMERA_HEIGHT", "480")),
        fps=int(os.getenv("CAMERA_FPS", "30"))
    )


def get_model_config() -> ModelConfig:
    """Get model configuration from environment."""
    threads = os.getenv("MODEL_THREADS")
    return ModelConfig(
        model_path=os.getenv("MODEL_PATH", "models/banknote_model.tflite"),
        input_size=int(os.getenv("MODEL_INPUT_SIZE", "224")),
        temperature=float(os.getenv("SOFTMAX_TEMPERATURE", "0.8")),
        num_threads=int(threads) if threads else None
    )


def get_scanner_config() -> ScannerConfig:
    """Get scanner thresholds from environment."""
    return ScannerConfig(
        general_threshold=float(os.getenv("GENERAL_THRESHOLD", "0.45")),
        min_confidence=float(os.getenv("MIN_CONFIDENCE", "0.30")),
        fifty_threshold=float(os.getenv("FIFTY_DINAR_THRESHOLD", "0.65")),
        fifty_penalty=float(os.getenv("FIFTY_DINAR_PENALTY", "0.10")),
        twenty_boost=float(os.getenv("TWENTY_DINAR_BOOST", "0.10")),
        max_consecutive_fifty=int(os.getenv("MAX_CONSECUTIVE_FIFTY", "3")),
        analysis_interval_ms=int(os.getenv("ANALYSIS_INTERVAL_MS", "800")),
        no_detection_threshold=int(os.getenv("NO_DETECTION_THRESHOLD", "5")),
        speech_enabled=_env_bool("SPEECH_ENABLED", "true"),
        max_sessions=int(os.getenv("MAX_SESSIONS", "64")),
        max_frame_side=int(os.getenv("MAX_FRAME_SIDE", "2048"))
    )
