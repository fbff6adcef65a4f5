"""
Banknote Classifier Module
==========================

Single-frame classification: preprocessing, TFLite inference and the
decision policy.

Usage:
    model = TFLiteModel("models/banknote_model.tflite")
    classifier = BanknoteClassifier(model)
    prediction = classifier.classify(rgb_frame)
"""

import logging
from typing import Optional

import numpy as np

from ..errors import ModelLoadError
from ..inference import MODEL_INPUT_SIZE, preprocess
from .decision import DecisionPolicy, Prediction
from .labels import LABELS

logger = logging.getLogger(__name__)


class BanknoteClassifier:
    """
    Classifies the banknote visible in an RGB frame.

    ``model`` is anything with ``run(tensor) -> logits``, ``output_size``
    and ``close()``; normally a ``TFLiteModel``.
    """

    def __init__(self, model, policy: Optional[DecisionPolicy] = None,
                 input_size: int = MODEL_INPUT_SIZE):
        if model.output_size != len(LABELS):
            raise ModelLoadError(
                f"Model has {model.output_size} outputs but {len(LABELS)} labels are defined"
            )
        self.model = model
        self.policy = policy or DecisionPolicy()
        self.input_size = input_size

    def classify(self, image: np.ndarray) -> Prediction:
        """
        Classify one RGB frame.

        Args:
            image: RGB ``uint8`` array (H, W, 3), already upright

        Returns:
            Prediction after the decision policy
        """
        tensor = preprocess(image, self.input_size)
        logits = self.model.run(tensor)
        prediction = self.policy.decide(logits)
        logger.debug("Prediction %s (%.3f)", prediction.denomination.key, prediction.confidence)
        return prediction

    def reset(self) -> None:
        self.policy.reset()

    def close(self) -> None:
        self.model.close()
