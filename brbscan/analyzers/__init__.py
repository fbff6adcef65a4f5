"""
Banknote Analyzers Module
=========================

Classification, decision rules and scanning sessions for banknotes.
"""

from .labels import LABELS, Denomination
from .decision import DecisionPolicy, Prediction, softmax_with_temperature
from .classifier import BanknoteClassifier
from .banknote_scanner import BanknoteScanner, ScanResult
from .camera_scanner import CameraScanner
from .speech import SpeechAnnouncer

__all__ = [
    "LABELS",
    "Denomination",
    "DecisionPolicy",
    "Prediction",
    "softmax_with_temperature",
    "BanknoteClassifier",
    "BanknoteScanner",
    "ScanResult",
    "CameraScanner",
    "SpeechAnnouncer",
]
