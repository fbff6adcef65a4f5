"""
Camera Scanner Module
=====================

Banknote scanning from a locally attached camera, with an on-frame
overlay and spoken feedback.

Usage:
    scanner = CameraScanner(BanknoteScanner(classifier))
    while scanner.is_opened():
        frame = scanner.read_frame()
"""

import logging
import time
from typing import Optional

import cv2
import numpy as np

from .speech import SpeechAnnouncer
from .banknote_scanner import BanknoteScanner, ScanResult

logger = logging.getLogger(__name__)

# Scan indicator fade-out, seconds
FLASH_DURATION = 0.5

HEADER_COLOR = (16, 117, 245)
FLASH_COLOR = (80, 220, 100)


class CameraScanner:
    """
    Camera-backed banknote scanner.

    Attributes:
        last_result (ScanResult): Most recent analysed (not skipped) result
    """

    def __init__(
        self,
        scanner: BanknoteScanner,
        camera_index: Optional[int] = None,
        width: int = 640,
        height: int = 480,
        announcer: Optional[SpeechAnnouncer] = None,
    ):
        """
        Initialize the camera scanner.

        Args:
            scanner: Session that analyses the captured frames
            camera_index: Specific camera index to use, or None for auto-detect
            width: Requested capture width
            height: Requested capture height
            announcer: Speech output for recognised bills
        """
        self.scanner = scanner
        self.announcer = announcer
        self.last_result: Optional[ScanResult] = None
        self._flash_started: Optional[float] = None
        self._init_camera(camera_index, width, height)

    def _init_camera(self, camera_index: Optional[int], width: int, height: int) -> None:
        """Initialize camera with auto-detection if needed."""
        if camera_index is None:
            self.cap = self._auto_detect_camera()
        else:
            self.cap = cv2.VideoCapture(camera_index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

    @staticmethod
    def _auto_detect_camera() -> cv2.VideoCapture:
        """Auto-detect a working camera that provides non-black frames."""
        for idx in [0, 1, 2]:
            cap = cv2.VideoCapture(idx)
            if cap.isOpened():
                ret, frame = cap.read()
                if ret and frame is not None and np.mean(frame) > 10:
                    logger.info("Using camera %d", idx)
                    return cap
            cap.release()

        logger.warning("No camera delivered a usable frame, falling back to index 0")
        return cv2.VideoCapture(0)

    def is_opened(self) -> bool:
        """Check if camera is opened and ready."""
        return self.cap.isOpened()

    def release(self) -> None:
        """Release camera and speech resources."""
        self.cap.release()
        if self.announcer:
            self.announcer.stop()

    def _apply_feedback(self, result: ScanResult) -> None:
        if result.skipped:
            return
        self.last_result = result
        if result.flash:
            self._flash_started = time.monotonic()
        if result.announce and self.announcer and result.prediction:
            self.announcer.speak(result.prediction.label)

    def _draw_overlay(self, image: np.ndarray) -> None:
        """Draw the status header, scan indicator and hint footer."""
        frame_h, frame_w = image.shape[:2]
        result = self.last_result

        cv2.rectangle(image, (0, 0), (frame_w, 50), HEADER_COLOR, -1)
        if result and result.prediction:
            text = f"{result.prediction.denomination.key.upper()}  {result.prediction.confidence:.0%}"
        elif result and result.error:
            text = "ERROR"
        else:
            text = "SCANNING"
        cv2.putText(image, text, (15, 35),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.0, (255, 255, 255), 2, cv2.LINE_AA)

        # Scan indicator fades out after a detection
        if self._flash_started is not None:
            elapsed = time.monotonic() - self._flash_started
            if elapsed < FLASH_DURATION:
                alpha = 1.0 - elapsed / FLASH_DURATION
                border = image.copy()
                cv2.rectangle(border, (0, 0), (frame_w - 1, frame_h - 1), FLASH_COLOR, 12)
                cv2.addWeighted(border, alpha, image, 1.0 - alpha, 0, dst=image)
            else:
                self._flash_started = None

        # OpenCV fonts cannot render Arabic, so the footer uses plain hints
        if result and result.message and not result.skipped:
            hint = ("Recognized: " + result.prediction.denomination.key
                    if result.detected else "Point the camera at a banknote")
            cv2.rectangle(image, (0, frame_h - 50), (frame_w, frame_h), (0, 0, 0), -1)
            cv2.putText(image, hint, (15, frame_h - 17),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 255), 2, cv2.LINE_AA)

    def read_frame(self) -> Optional[np.ndarray]:
        """
        Read, scan and annotate a frame from the camera.

        Returns:
            Annotated BGR frame, or None if capture failed
        """
        ret, frame = self.cap.read()
        if not ret:
            return None

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        result = self.scanner.analyze(rgb)
        self._apply_feedback(result)

        self._draw_overlay(frame)
        return frame


if __name__ == "__main__":
    # Standalone execution with the configured model
    from config import get_camera_config, get_model_config, get_scanner_config
    from ..inference import TFLiteModel
    from .classifier import BanknoteClassifier
    from .decision import DecisionPolicy

    logging.basicConfig(level=logging.INFO)
    model_cfg = get_model_config()
    scanner_cfg = get_scanner_config()
    camera_cfg = get_camera_config()

    announcer = SpeechAnnouncer(enabled=scanner_cfg.speech_enabled)
    classifier = BanknoteClassifier(
        TFLiteModel(model_cfg.model_path, model_cfg.num_threads),
        DecisionPolicy(scanner_cfg, model_cfg.temperature),
        model_cfg.input_size,
    )
    camera = CameraScanner(
        BanknoteScanner(classifier, scanner_cfg, is_speaking=announcer.is_speaking),
        camera_cfg.index, camera_cfg.width, camera_cfg.height, announcer,
    )
    while camera.is_opened():
        frame = camera.read_frame()
        if frame is None:
            break
        cv2.imshow("BRB Scan", frame)
        if cv2.waitKey(10) & 0xFF == ord("q"):
            break
    camera.release()
    classifier.close()
    cv2.destroyAllWindows()
