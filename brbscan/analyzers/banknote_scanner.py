"""
Banknote Scanner Module
=======================

Per-session scanning state: frame throttling, pause/resume, and the
feedback rules that decide what the user sees, hears and feels.

Classes:
    ScanResult: Outcome of offering one frame to the scanner
    BanknoteScanner: Stateful session wrapping a BanknoteClassifier
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from config import ScannerConfig

from ..inference.image_utils import rotate_frame
from .classifier import BanknoteClassifier
from .decision import Prediction

logger = logging.getLogger(__name__)

GUIDANCE_MESSAGE = "الرجاء توجيه الكاميرا نحو الورقة النقدية"
RECOGNIZED_PREFIX = "تم التعرف: "


def browser_pattern(pattern: Optional[Tuple[int, ...]]) -> Optional[list]:
    """
    Convert a wait-first vibration pattern to Web Vibration API order.

    ``navigator.vibrate`` starts with a vibration, so the leading wait is
    dropped; a non-zero leading wait is kept as a silent 0 ms pulse.
    """
    if not pattern:
        return None
    if pattern[0] == 0:
        return list(pattern[1:])
    return [0] + list(pattern)


@dataclass
class ScanResult:
    """
    Outcome of one analysed (or skipped) frame.

    Attributes:
        skipped: Frame was not analysed (paused or throttled)
        prediction: Classifier output, None when skipped or on error
        message: Text to show the user, if any
        announce: Speak the label now
        vibration: Vibration pattern to play, if any
        flash: Flash the scan indicator
        error: Error message when inference failed
    """
    skipped: bool = False
    prediction: Optional[Prediction] = None
    message: Optional[str] = None
    announce: bool = False
    vibration: Optional[Tuple[int, ...]] = None
    flash: bool = False
    error: Optional[str] = None

    @property
    def detected(self) -> bool:
        return self.prediction is not None and self.prediction.detected

    def to_dict(self) -> dict:
        prediction = self.prediction
        return {
            "skipped": self.skipped,
            "label": prediction.label if prediction else None,
            "key": prediction.denomination.key if prediction else None,
            "confidence": round(prediction.confidence, 4) if prediction else None,
            "detected": self.detected,
            "message": self.message,
            "announce": self.announce,
            "vibration": list(self.vibration) if self.vibration else None,
            "browser_vibration": browser_pattern(self.vibration),
            "flash": self.flash,
            "error": self.error,
        }


class BanknoteScanner:
    """
    Scanning session for a single camera stream.

    Frames arriving faster than ``analysis_interval_ms`` are dropped, like
    a keep-only-latest camera analyser. All state changes are serialised
    with a lock so HTTP handlers and capture threads can share a session.

    Attributes:
        no_detection_count (int): Consecutive analysed frames without a bill
        analyzing (bool): False while the session is paused
    """

    def __init__(
        self,
        classifier: BanknoteClassifier,
        config: Optional[ScannerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        is_speaking: Optional[Callable[[], bool]] = None,
    ):
        """
        Initialize the scanner.

        Args:
            classifier: Classifier used for analysed frames
            config: Thresholds and timing, defaults to ScannerConfig()
            clock: Monotonic clock in seconds
            is_speaking: Returns True while speech output is busy
        """
        self.classifier = classifier
        self.config = config or ScannerConfig()
        self._clock = clock
        self._is_speaking = is_speaking
        self._lock = threading.Lock()
        self._last_analysis: Optional[float] = None
        self.no_detection_count = 0
        self.analyzing = True

    def _should_skip(self) -> bool:
        if not self.analyzing:
            return True
        now = self._clock()
        interval = self.config.analysis_interval_ms / 1000.0
        if self._last_analysis is not None and now - self._last_analysis < interval:
            return True
        self._last_analysis = now
        return False

    def analyze(self, image: np.ndarray, rotation_degrees: int = 0) -> ScanResult:
        """
        Offer a frame to the session.

        Args:
            image: RGB frame as captured
            rotation_degrees: Clockwise rotation needed to make it upright

        Returns:
            ScanResult describing the feedback for this frame
        """
        with self._lock:
            if self._should_skip():
                return ScanResult(skipped=True)

            try:
                upright = rotate_frame(image, rotation_degrees)
                prediction = self.classifier.classify(upright)
            except Exception as e:
                logger.exception("Error processing frame")
                return ScanResult(error=str(e))

            return self._handle_prediction(prediction)

    def _handle_prediction(self, prediction: Prediction) -> ScanResult:
        if not prediction.detected:
            self.no_detection_count += 1
            message = None
            if self.no_detection_count >= self.config.no_detection_threshold:
                message = GUIDANCE_MESSAGE
            return ScanResult(prediction=prediction, message=message)

        self.no_detection_count = 0
        result = ScanResult(
            prediction=prediction,
            message=RECOGNIZED_PREFIX + prediction.label,
            flash=True,
        )
        if self._is_speaking is None or not self._is_speaking():
            result.announce = True
            result.vibration = prediction.denomination.vibration
        logger.info("Recognised %s (%.2f)", prediction.denomination.key, prediction.confidence)
        return result

    def pause(self) -> None:
        """Stop analysing frames until resume()."""
        with self._lock:
            self.analyzing = False

    def resume(self) -> None:
        """Resume analysis and clear detection streaks."""
        with self._lock:
            self.analyzing = True
            self.no_detection_count = 0
            self.classifier.reset()

    def reset(self) -> None:
        """Clear all counters and the throttle timestamp."""
        with self._lock:
            self.no_detection_count = 0
            self._last_analysis = None
            self.classifier.reset()
