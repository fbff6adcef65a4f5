"""
BRB Scan Server
===============

Main entry point for the Flask server.

Usage:
    python run.py

Or with gunicorn:
    gunicorn -w 1 -b 0.0.0.0:5000 "run:create_app()"
"""

import logging
import os
import sys
from typing import Callable, Optional

# Add server source to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask

from config import (
    get_camera_config,
    get_model_config,
    get_scanner_config,
    get_server_config,
)
from brbscan.analyzers import (
    BanknoteScanner,
    CameraScanner,
    SpeechAnnouncer,
)
from brbscan.api import register_routes
from brbscan.inference import TFLiteModel
from brbscan.utils import CameraManager, MobileFrameProcessor
from templates.index import HTML_TEMPLATE

def _default_processor() -> MobileFrameProcessor:
    model_cfg = get_model_config()
    return MobileFrameProcessor(
        lambda: TFLiteModel(model_cfg.model_path, model_cfg.num_threads),
        get_scanner_config(),
        model_cfg,
    )


def _camera_factory(processor: MobileFrameProcessor) -> Callable[[], CameraScanner]:
    """Build CameraScanner instances that share the processor's model."""
    camera_cfg = get_camera_config()
    scanner_cfg = processor.scanner_config

    def factory() -> CameraScanner:
        classifier = processor.create_classifier()
        announcer = SpeechAnnouncer(enabled=scanner_cfg.speech_enabled)
        scanner = BanknoteScanner(classifier, scanner_cfg, is_speaking=announcer.is_speaking)
        return CameraScanner(scanner, camera_cfg.index, camera_cfg.width,
                             camera_cfg.height, announcer)

    return factory


def create_app(
    processor: Optional[MobileFrameProcessor] = None,
    camera_factory: Optional[Callable] = None,
) -> Flask:
    """
    Create the Flask application.

    Args:
        processor: Session registry; built from the environment when None
        camera_factory: Local camera scanner factory. When None a camera
            factory is built from the environment unless ``processor`` was
            supplied.
    """
    app = Flask(__name__)
    app.json.sort_keys = False
    app.json.ensure_ascii = False

    if processor is None:
        processor = _default_processor()
        if camera_factory is None and os.getenv("CAMERA_ENABLED", "true").lower() == "true":
            camera_factory = _camera_factory(processor)

    app.extensions["brbscan.processor"] = processor
    register_routes(app, HTML_TEMPLATE, processor, CameraManager(), camera_factory)
    return app


def main():
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    server = get_server_config()
    app = create_app()
    print(f"""
╔══════════════════════════════════════════════════════╗
║          BRB Scan - Banknote Scanner Server          ║
╠══════════════════════════════════════════════════════╣
║  Server running at: http://{server.host}:{server.port:<5}              ║
║  Debug mode: {str(server.debug):<5}                               ║
║                                                      ║
║  Endpoints:                                          ║
║    GET  /               - Web interface              ║
║    GET  /scan_feed      - Local camera scan stream   ║
║    POST /process_frame  - Scan encoded image         ║
║    POST /process_yuv    - Scan raw YUV_420_888 frame ║
║    POST /reset_scanner  - Reset session state        ║
║    POST /pause_scanner  - Pause session              ║
║    POST /resume_scanner - Resume session             ║
║    GET  /health         - Health check               ║
╚══════════════════════════════════════════════════════╝
    """)
    app.run(host=server.host, port=server.port, debug=server.debug,
            threaded=server.threaded)


if __name__ == "__main__":
    main()
