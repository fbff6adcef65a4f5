"""
Decision Policy Module
======================

Post-processing that turns raw model logits into a banknote prediction.

The model tends to over-predict the fifty-dinar note and under-predict
the twenty, so probabilities are nudged after the softmax and a fifty is
only reported once it has been seen on several consecutive frames.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from config import ScannerConfig

from .labels import LABELS, Denomination

DEFAULT_TEMPERATURE = 0.8


@dataclass(frozen=True)
class Prediction:
    """Classification outcome for one frame."""
    denomination: Denomination
    confidence: float

    @property
    def label(self) -> str:
        return self.denomination.label

    @property
    def detected(self) -> bool:
        return self.denomination.is_bill


def softmax_with_temperature(logits: np.ndarray, temperature: float) -> np.ndarray:
    """
    Temperature-scaled softmax.

    Args:
        logits: Raw model outputs
        temperature: Values below 1 sharpen the distribution

    Returns:
        Probabilities summing to 1
    """
    if temperature <= 0:
        raise ValueError(f"Temperature must be positive, got {temperature}")
    scaled = np.asarray(logits, dtype=np.float64) / temperature
    exp = np.exp(scaled - np.max(scaled))
    return exp / exp.sum()


class DecisionPolicy:
    """
    Stateful decision rules applied to each frame's logits.

    Attributes:
        consecutive_fifty (int): Frames in a row whose top class was fifty
    """

    def __init__(self, config: Optional[ScannerConfig] = None,
                 temperature: float = DEFAULT_TEMPERATURE):
        self.config = config or ScannerConfig()
        self.temperature = temperature
        self.consecutive_fifty = 0

    def adjust(self, logits: np.ndarray) -> np.ndarray:
        """Softmax followed by the fifty penalty and twenty boost (no renormalisation)."""
        if len(logits) != len(LABELS):
            raise ValueError(f"Expected {len(LABELS)} logits, got {len(logits)}")
        probs = softmax_with_temperature(logits, self.temperature)
        probs[Denomination.FIFTY.index] *= 1.0 - self.config.fifty_penalty
        probs[Denomination.TWENTY.index] *= 1.0 + self.config.twenty_boost
        return probs

    def decide(self, logits: np.ndarray) -> Prediction:
        """
        Pick the prediction for one frame and update the fifty streak.

        Args:
            logits: Raw outputs in model label order

        Returns:
            Prediction whose confidence is the adjusted top probability
        """
        cfg = self.config
        probs = self.adjust(logits)

        # argmax keeps the first index on ties
        best = LABELS[int(np.argmax(probs))]
        max_prob = float(probs[best.index])

        if best is Denomination.FIFTY:
            self.consecutive_fifty += 1
            if (self.consecutive_fifty < cfg.max_consecutive_fifty
                    or max_prob < cfg.fifty_threshold):
                return Prediction(Denomination.NONE, max_prob)
        else:
            self.consecutive_fifty = 0

        if max_prob >= cfg.general_threshold and best.is_bill:
            return Prediction(best, max_prob)

        if max_prob >= cfg.min_confidence:
            return Prediction(best, max_prob)
        return Prediction(Denomination.NONE, max_prob)

    def reset(self) -> None:
        """Forget the fifty-dinar streak."""
        self.consecutive_fifty = 0
