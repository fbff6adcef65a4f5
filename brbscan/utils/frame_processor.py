"""
Mobile Frame Processor Module
=============================

Thread-safe registry of scanning sessions for frames sent by phones.
"""

import logging
import threading
from collections import OrderedDict
from typing import Callable, Optional

from config import ModelConfig, ScannerConfig

from ..analyzers import BanknoteClassifier, BanknoteScanner, DecisionPolicy

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"


class MobileFrameProcessor:
    """
    Thread-safe processor for mobile camera frames.

    The model is loaded lazily on first use and shared by every session;
    each session keeps its own scanner and decision state. At most
    ``max_sessions`` scanners are kept; the least recently used is evicted.

    Usage:
        processor = MobileFrameProcessor(lambda: TFLiteModel(path))
        result = processor.get_scanner("phone-1").analyze(frame)
    """

    def __init__(
        self,
        model_factory: Callable[[], object],
        scanner_config: Optional[ScannerConfig] = None,
        model_config: Optional[ModelConfig] = None,
    ):
        """
        Initialize the mobile frame processor.

        Args:
            model_factory: Callable that loads the model; may raise ModelLoadError
            scanner_config: Thresholds shared by all sessions
            model_config: Input size and softmax temperature
        """
        self._model_factory = model_factory
        self.scanner_config = scanner_config or ScannerConfig()
        self.model_config = model_config or ModelConfig()
        self._model = None
        self._scanners: "OrderedDict[str, BanknoteScanner]" = OrderedDict()
        self._lock = threading.Lock()

    def _get_model(self):
        if self._model is None:
            self._model = self._model_factory()
        return self._model

    def _new_classifier(self) -> BanknoteClassifier:
        return BanknoteClassifier(
            self._get_model(),
            DecisionPolicy(self.scanner_config, self.model_config.temperature),
            self.model_config.input_size,
        )

    def create_classifier(self) -> BanknoteClassifier:
        """
        Build a classifier with its own decision state on the shared model.

        Raises:
            ModelLoadError: If the model cannot be loaded
        """
        with self._lock:
            return self._new_classifier()

    def get_scanner(self, session: str = DEFAULT_SESSION) -> BanknoteScanner:
        """
        Get or create the scanner for a session.

        Raises:
            ModelLoadError: If the model cannot be loaded
        """
        with self._lock:
            scanner = self._scanners.get(session)
            if scanner is not None:
                self._scanners.move_to_end(session)
                return scanner

            scanner = BanknoteScanner(self._new_classifier(), self.scanner_config)
            self._scanners[session] = scanner
            logger.info("Created scanning session %s", session)
            while len(self._scanners) > max(1, self.scanner_config.max_sessions):
                evicted, _ = self._scanners.popitem(last=False)
                logger.info("Evicted idle scanning session %s", evicted)
            return scanner

    def find_scanner(self, session: str = DEFAULT_SESSION) -> Optional[BanknoteScanner]:
        """Existing scanner for a session, or None. Never creates one."""
        with self._lock:
            scanner = self._scanners.get(session)
            if scanner is not None:
                self._scanners.move_to_end(session)
            return scanner

    def session_count(self) -> int:
        return len(self._scanners)

    def reset(self, session: str = DEFAULT_SESSION) -> None:
        """Reset the session counters and throttle, if the session exists."""
        scanner = self.find_scanner(session)
        if scanner is not None:
            scanner.reset()

    def pause(self, session: str = DEFAULT_SESSION) -> None:
        scanner = self.find_scanner(session)
        if scanner is not None:
            scanner.pause()

    def resume(self, session: str = DEFAULT_SESSION) -> None:
        scanner = self.find_scanner(session)
        if scanner is not None:
            scanner.resume()

    def model_loaded(self) -> bool:
        return self._model is not None

    def close(self) -> None:
        """Drop all sessions and release the model."""
        with self._lock:
            self._scanners.clear()
            if self._model is not None:
                self._model.close()
                self._model = None
