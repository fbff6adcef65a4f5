"""
TFLite Interpreter Module
=========================

Thin wrapper around the LiteRT (TensorFlow Lite) interpreter for
single-input, single-output classification models.
"""

import logging
import os
import threading
from typing import Optional

import numpy as np

from ..errors import ModelLoadError

logger = logging.getLogger(__name__)


class TFLiteModel:
    """
    Loaded TFLite classification model.

    TFLite interpreters are not thread-safe, so ``run`` is serialised with
    an internal lock.

    Attributes:
        model_path (str): Path of the loaded ``.tflite`` file
        output_size (int): Number of output classes
    """

    def __init__(self, model_path: str, num_threads: Optional[int] = None,
                 interpreter=None):
        """
        Load the model and allocate its tensors.

        Args:
            model_path: Path to the ``.tflite`` flatbuffer
            num_threads: Interpreter thread count, or None for the default
            interpreter: Already allocated interpreter to wrap instead of
                loading ``model_path``

        Raises:
            ModelLoadError: If the file is missing or cannot be loaded
        """
        if interpreter is None:
            interpreter = self._load(model_path, num_threads)
        self._interpreter = interpreter

        self.model_path = model_path
        self._input = self._interpreter.get_input_details()[0]
        self._output = self._interpreter.get_output_details()[0]
        self.output_size = int(np.prod(self._output["shape"]))
        self._lock = threading.Lock()

        logger.info(
            "Loaded model %s (input %s, %d classes)",
            model_path, tuple(self._input["shape"]), self.output_size,
        )

    @staticmethod
    def _load(model_path: str, num_threads: Optional[int]):
        if not os.path.isfile(model_path):
            raise ModelLoadError(f"Model file not found: {model_path}")

        # Imported here so the rest of the pipeline works without the runtime
        from ai_edge_litert.interpreter import Interpreter

        try:
            interpreter = Interpreter(model_path=model_path, num_threads=num_threads)
            interpreter.allocate_tensors()
        except (ValueError, RuntimeError) as e:
            raise ModelLoadError(f"Failed to load model {model_path}: {e}") from e
        return interpreter

    @property
    def input_shape(self) -> tuple:
        return tuple(int(d) for d in self._input["shape"])

    def run(self, tensor: np.ndarray) -> np.ndarray:
        """
        Run one inference.

        Args:
            tensor: Input tensor matching the model input shape

        Returns:
            1-D ``float32`` array of raw outputs (logits)
        """
        with self._lock:
            if self._interpreter is None:
                raise RuntimeError("Model has been closed")
            self._interpreter.set_tensor(
                self._input["index"], tensor.astype(self._input["dtype"], copy=False)
            )
            self._interpreter.invoke()
            output = self._interpreter.get_tensor(self._output["index"])
        return np.asarray(output, dtype=np.float32).reshape(-1)

    def close(self) -> None:
        """Release the interpreter."""
        with self._lock:
            self._interpreter = None
