"""
Shared test fixtures.

Fake models stand in for the TFLite interpreter so the pipeline can be
exercised without a model file.
"""

import os
import sys

import numpy as np
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Class order: five, ten, twenty, fifty, none
STRONG = 10.0


def strong_logits(index):
    """Logits that make one class dominate after softmax."""
    logits = np.zeros(5, dtype=np.float32)
    logits[index] = STRONG
    return logits


class FakeModel:
    """Model double returning scripted logits."""

    def __init__(self, *outputs, output_size=5):
        self.outputs = [np.asarray(o, dtype=np.float32) for o in outputs] or [strong_logits(0)]
        self.output_size = output_size
        self.inputs = []
        self.closed = False

    def run(self, tensor):
        self.inputs.append(tensor)
        index = min(len(self.inputs), len(self.outputs)) - 1
        return self.outputs[index]

    def close(self):
        self.closed = True


class FailingModel(FakeModel):
    """Model double whose inference always fails."""

    def run(self, tensor):
        raise RuntimeError("inference failed")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def frame():
    """A small RGB test frame."""
    return np.full((48, 64, 3), 90, dtype=np.uint8)


@pytest.fixture
def clock():
    return FakeClock()
