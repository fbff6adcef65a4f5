"""
Camera Manager Module
=====================

Thread-safe ownership of the local camera scanner and its capture loop.
"""

import logging
import threading
import time
from typing import Any, Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)


class CameraManager:
    """
    Thread-safe camera manager for single camera access.

    Runs a background capture loop for one camera scanner at a time and
    keeps the latest annotated frame for streaming clients.

    Attributes:
        running (bool): Whether the capture loop is running
        scanner_name (str): Identifier of the active camera scanner
    """

    def __init__(self):
        """Initialize the camera manager."""
        self.lock = threading.Lock()
        self.scanner = None
        self.scanner_name: Optional[str] = None
        self.frame: Optional[np.ndarray] = None
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self, factory: Callable[[], Any], name: str) -> bool:
        """
        Start a camera scanner, replacing any other running one.

        Args:
            factory: Callable returning an object with ``is_opened``,
                ``read_frame`` and ``release``
            name: Identifier for this scanner

        Returns:
            True if the scanner is running, False otherwise
        """
        with self.lock:
            if self.scanner_name == name and self.running:
                return True

            self._stop_internal()

            try:
                self.scanner = factory()
            except Exception:
                logger.exception("Failed to start camera scanner %s", name)
                return False
            if not self.scanner.is_opened():
                logger.error("Camera for %s could not be opened", name)
                self.scanner.release()
                self.scanner = None
                return False
            self.scanner_name = name
            self.running = True
            self.thread = threading.Thread(target=self._capture_loop, daemon=True)
            self.thread.start()
            return True

    def _stop_internal(self) -> None:
        """Internal method to stop the current scanner (not thread-safe)."""
        self.running = False
        if self.thread:
            self.thread.join(timeout=2.0)
            self.thread = None
        if self.scanner:
            self.scanner.release()
            self.scanner = None
        self.frame = None
        self.scanner_name = None

    def stop(self) -> None:
        """Stop the current scanner (thread-safe)."""
        with self.lock:
            self._stop_internal()

    def _capture_loop(self) -> None:
        """Background capture loop for continuous frame acquisition."""
        while self.running and self.scanner and self.scanner.is_opened():
            try:
                frame = self.scanner.read_frame()
            except Exception:
                logger.exception("Capture error")
                self.running = False
                break
            if frame is not None:
                self.frame = frame.copy()
            else:
                time.sleep(0.01)

    def get_frame(self) -> Optional[np.ndarray]:
        """
        Get the latest captured frame (thread-safe copy).

        Returns:
            Copy of latest frame as numpy array, or None if no frame available
        """
        with self.lock:
            if self.frame is not None:
                return self.frame.copy()
            return None

    def is_running(self) -> bool:
        """Check if a camera scanner is currently running."""
        return self.running

    def get_scanner_name(self) -> Optional[str]:
        """Get the active camera scanner identifier."""
        return self.scanner_name
