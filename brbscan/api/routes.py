"""
API Routes Module
=================

Flask API routes for the banknote scanner server.
"""

import base64
import binascii
import logging
import time
from typing import Callable, Optional

from flask import Response, jsonify, render_template_string, request
from werkzeug.exceptions import InternalServerError

from ..errors import FrameDecodeError, ModelLoadError, UnsupportedFormatError
from ..inference import YuvFrame, YuvPlane, decode_image, encode_jpeg, yuv420_to_rgb
from ..utils import DEFAULT_SESSION, CameraManager, MobileFrameProcessor

logger = logging.getLogger(__name__)

MODEL_LOAD_FAILED = "فشل في تحميل النموذج"
CAMERA_SCANNER = "camera"

# Shortest base64 payload accepted as an image
MIN_IMAGE_PAYLOAD = 100


class InvalidScanRequest(ValueError):
    """Client sent a malformed scan request."""


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidScanRequest("Request body must be a JSON object")
    return data


def _session(data: Optional[dict]) -> str:
    session = (data or {}).get("session") or DEFAULT_SESSION
    return str(session)


def _rotation(data: dict) -> int:
    try:
        rotation = int(data.get("rotation", 0))
    except (TypeError, ValueError):
        raise InvalidScanRequest("Rotation must be an integer")
    if rotation % 90 != 0:
        raise InvalidScanRequest("Rotation must be a multiple of 90 degrees")
    return rotation


def _b64decode(value, what: str) -> bytes:
    if not isinstance(value, str) or not value:
        raise InvalidScanRequest(f"Missing {what} data")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidScanRequest(f"Base64 decode error: {e}")


def _parse_yuv(data: dict) -> YuvFrame:
    planes = data.get("planes")
    if not isinstance(planes, list) or len(planes) != 3:
        raise InvalidScanRequest("Expected three YUV planes")
    try:
        width = int(data["width"])
        height = int(data["height"])
        parsed = [
            YuvPlane(
                buffer=_b64decode(plane.get("data"), "plane"),
                row_stride=int(plane["row_stride"]),
                pixel_stride=int(plane.get("pixel_stride", 1)),
            )
            for plane in planes
        ]
    except InvalidScanRequest:
        raise
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise InvalidScanRequest(f"Invalid YUV frame description: {e}")
    return YuvFrame(width, height, parsed, data.get("format", "YUV_420_888"))


def _stream_frames(camera_manager: CameraManager, camera_factory: Callable):
    """Generator for streaming annotated frames from the local camera."""
    if not camera_manager.start(camera_factory, CAMERA_SCANNER):
        return

    while camera_manager.running and camera_manager.get_scanner_name() == CAMERA_SCANNER:
        frame = camera_manager.get_frame()
        if frame is not None:
            chunk = encode_jpeg(frame)
            if chunk:
                yield (b"--frame\r\n" b"Content-Type: image/jpeg\r\n\r\n" + chunk + b"\r\n")
        time.sleep(0.03)  # ~30 FPS


def register_routes(
    app,
    html_template: str,
    processor: MobileFrameProcessor,
    camera_manager: CameraManager,
    camera_factory: Optional[Callable] = None,
):
    """
    Register all API routes with the Flask app.

    Args:
        app: Flask application instance
        html_template: HTML template string for the index page
        processor: Session registry for phone frames
        camera_manager: Owner of the local camera
        camera_factory: Builds the local CameraScanner, or None without a camera
    """

    def _scan(session: str, image, rotation: int):
        scanner = processor.get_scanner(session)
        result = scanner.analyze(image, rotation)
        return jsonify(result.to_dict())

    @app.errorhandler(InvalidScanRequest)
    def invalid_request(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(ModelLoadError)
    def model_unavailable(e):
        logger.error("Model unavailable: %s", e)
        return jsonify({"error": MODEL_LOAD_FAILED}), 503

    @app.errorhandler(InternalServerError)
    def internal_error(e):
        return jsonify({"error": "Internal server error"}), 500

    @app.route("/")
    def index():
        """Serve the main web interface."""
        return render_template_string(html_template, camera_enabled=camera_factory is not None)

    @app.route("/scan_feed")
    def scan_feed():
        """Stream MJPEG video of the local camera with scan overlay."""
        if camera_factory is None:
            return jsonify({"error": "No local camera configured"}), 404
        return Response(
            _stream_frames(camera_manager, camera_factory),
            mimetype="multipart/x-mixed-replace; boundary=frame",
        )

    @app.route("/process_frame", methods=["POST"])
    def process_frame():
        """
        Scan an encoded frame from a phone camera.

        Request JSON:
            {
                "image": "<base64-encoded-jpeg>",
                "rotation": 0 | 90 | 180 | 270,
                "session": "<client-id>"
            }

        Response JSON:
            ScanResult fields (label, key, confidence, message, ...)
        """
        data = _json_body()
        image_data = data.get("image")
        if not image_data:
            raise InvalidScanRequest("No image data")
        if len(image_data) < MIN_IMAGE_PAYLOAD:
            raise InvalidScanRequest("Invalid image data - too small")

        try:
            image = decode_image(_b64decode(image_data, "image"))
        except FrameDecodeError as e:
            raise InvalidScanRequest(str(e))

        return _scan(_session(data), image, _rotation(data))

    @app.route("/process_yuv", methods=["POST"])
    def process_yuv():
        """
        Scan a raw YUV_420_888 frame from a phone camera.

        Request JSON:
            {
                "width": 640, "height": 480, "rotation": 90,
                "session": "<client-id>",
                "planes": [
                    {"data": "<base64>", "row_stride": 640, "pixel_stride": 1},
                    {"data": "<base64>", "row_stride": 640, "pixel_stride": 2},
                    {"data": "<base64>", "row_stride": 640, "pixel_stride": 2}
                ]
            }
        """
        data = _json_body()
        rotation = _rotation(data)
        frame = _parse_yuv(data)
        try:
            image = yuv420_to_rgb(frame, processor.scanner_config.max_frame_side)
        except (UnsupportedFormatError, ValueError) as e:
            raise InvalidScanRequest(str(e))
        return _scan(_session(data), image, rotation)

    @app.route("/reset_scanner", methods=["POST"])
    def reset_scanner():
        """Reset a session's counters and throttle."""
        processor.reset(_session(request.get_json(silent=True)))
        return jsonify({"status": "ok"})

    @app.route("/pause_scanner", methods=["POST"])
    def pause_scanner():
        """Pause analysis for a session (app sent to background)."""
        processor.pause(_session(request.get_json(silent=True)))
        return jsonify({"status": "ok"})

    @app.route("/resume_scanner", methods=["POST"])
    def resume_scanner():
        """Resume analysis for a session."""
        processor.resume(_session(request.get_json(silent=True)))
        return jsonify({"status": "ok"})

    @app.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "model_loaded": processor.model_loaded(),
            "camera_running": camera_manager.is_running(),
            "camera_scanner": camera_manager.get_scanner_name(),
        })
