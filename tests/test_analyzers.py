"""
Unit tests for analyzer modules.

Tests for labels, the decision policy, preprocessing and the classifier.
"""

import pytest
import numpy as np

from config import ScannerConfig
from brbscan.analyzers import (
    LABELS,
    BanknoteClassifier,
    DecisionPolicy,
    Denomination,
    softmax_with_temperature,
)
from brbscan.errors import ModelLoadError
from brbscan.inference import TFLiteModel, preprocess

from conftest import FakeModel, strong_logits

FIVE, TEN, TWENTY, FIFTY, NONE = range(5)


class TestDenominations:
    """Test suite for the label table."""

    def test_model_order(self):
        assert [d.key for d in LABELS] == ["five", "ten", "twenty", "fifty", "none"]

    def test_lookup(self):
        assert Denomination.from_key("twenty") is Denomination.TWENTY
        assert Denomination.from_index(3) is Denomination.FIFTY

    def test_unknown_lookup(self):
        with pytest.raises(ValueError):
            Denomination.from_key("hundred")
        with pytest.raises(ValueError):
            Denomination.from_index(7)

    def test_vibration_patterns(self):
        assert Denomination.FIVE.vibration == (0, 200)
        assert Denomination.FIFTY.vibration == (0, 600, 400, 600)
        assert Denomination.NONE.vibration is None
        assert not Denomination.NONE.is_bill


class TestSoftmax:
    """Test suite for the temperature softmax."""

    def test_sums_to_one(self):
        probs = softmax_with_temperature(np.array([1.0, 2.0, 3.0]), 0.8)
        assert probs.sum() == pytest.approx(1.0)
        assert np.argmax(probs) == 2

    def test_large_logits_do_not_overflow(self):
        probs = softmax_with_temperature(np.array([1000.0, 0.0, -1000.0]), 0.8)
        assert probs[0] == pytest.approx(1.0)
        assert np.all(np.isfinite(probs))

    def test_lower_temperature_sharpens(self):
        logits = np.array([1.0, 0.0])
        assert (softmax_with_temperature(logits, 0.5)[0]
                > softmax_with_temperature(logits, 1.0)[0])

    def test_rejects_non_positive_temperature(self):
        with pytest.raises(ValueError):
            softmax_with_temperature(np.array([1.0]), 0)


class TestDecisionPolicy:
    """Test suite for DecisionPolicy rules."""

    @pytest.fixture
    def policy(self):
        return DecisionPolicy(ScannerConfig())

    def test_confident_bill(self, policy):
        prediction = policy.decide(strong_logits(FIVE))
        assert prediction.denomination is Denomination.FIVE
        assert prediction.confidence > 0.99
        assert prediction.label == "خمسة دنانير"

    def test_uniform_logits_fall_below_min_confidence(self, policy):
        """Twenty is boosted to 0.22, still under the 0.3 floor."""
        prediction = policy.decide(np.zeros(5))
        assert prediction.denomination is Denomination.NONE
        assert prediction.confidence == pytest.approx(0.22)

    def test_adjustments_are_not_renormalised(self, policy):
        probs = policy.adjust(np.zeros(5))
        assert probs[FIFTY] == pytest.approx(0.18)
        assert probs[TWENTY] == pytest.approx(0.22)
        assert policy.adjust(strong_logits(TWENTY))[TWENTY] > 1.0

    def test_moderate_confidence_still_reported(self, policy):
        """Between min_confidence and general_threshold the top class is returned."""
        logits = np.zeros(5)
        logits[TEN] = 0.785  # ~0.40 after softmax
        prediction = policy.decide(logits)
        assert prediction.denomination is Denomination.TEN
        assert 0.3 <= prediction.confidence < 0.45

    def test_none_class_wins(self, policy):
        prediction = policy.decide(strong_logits(NONE))
        assert prediction.denomination is Denomination.NONE
        assert not prediction.detected

    def test_ties_pick_first_class(self, policy):
        logits = np.zeros(5)
        logits[FIVE] = logits[TEN] = 10.0
        assert policy.decide(logits).denomination is Denomination.FIVE

    def test_fifty_needs_consecutive_frames(self, policy):
        results = [policy.decide(strong_logits(FIFTY)).denomination for _ in range(4)]
        assert results == [Denomination.NONE, Denomination.NONE,
                           Denomination.FIFTY, Denomination.FIFTY]
        assert policy.consecutive_fifty == 4

    def test_suppressed_fifty_keeps_confidence(self, policy):
        prediction = policy.decide(strong_logits(FIFTY))
        assert prediction.denomination is Denomination.NONE
        assert prediction.confidence == pytest.approx(0.9, abs=1e-3)

    def test_weak_fifty_is_suppressed_after_streak(self, policy):
        logits = np.zeros(5)
        logits[FIFTY] = 1.6  # ~0.58 after the penalty
        results = [policy.decide(logits).denomination for _ in range(4)]
        assert results == [Denomination.NONE] * 4

    def test_other_class_breaks_fifty_streak(self, policy):
        policy.decide(strong_logits(FIFTY))
        policy.decide(strong_logits(FIFTY))
        assert policy.decide(strong_logits(FIVE)).denomination is Denomination.FIVE
        assert policy.consecutive_fifty == 0
        assert policy.decide(strong_logits(FIFTY)).denomination is Denomination.NONE

    def test_reset(self, policy):
        policy.decide(strong_logits(FIFTY))
        policy.reset()
        assert policy.consecutive_fifty == 0

    def test_wrong_logit_count(self, policy):
        with pytest.raises(ValueError):
            policy.decide(np.zeros(3))


class TestPreprocessing:
    """Test suite for model input preparation."""

    def test_shape_and_dtype(self, frame):
        tensor = preprocess(frame)
        assert tensor.shape == (1, 224, 224, 3)
        assert tensor.dtype == np.float32

    def test_normalisation_range(self):
        image = np.zeros((30, 40, 3), dtype=np.uint8)
        image[:, :, 0] = 255
        tensor = preprocess(image, input_size=32)
        assert tensor.shape == (1, 32, 32, 3)
        assert tensor[0, 5, 5].tolist() == pytest.approx([1.0, -1.0, -1.0])

    def test_rejects_grayscale(self):
        with pytest.raises(ValueError):
            preprocess(np.zeros((10, 10), dtype=np.uint8))


class TestBanknoteClassifier:
    """Test suite for BanknoteClassifier."""

    def test_classify(self, frame):
        model = FakeModel(strong_logits(TWENTY))
        classifier = BanknoteClassifier(model)
        prediction = classifier.classify(frame)
        assert prediction.denomination is Denomination.TWENTY
        assert model.inputs[0].shape == (1, 224, 224, 3)

    def test_rejects_mismatched_model(self):
        with pytest.raises(ModelLoadError):
            BanknoteClassifier(FakeModel(output_size=3))

    def test_reset_and_close(self, frame):
        model = FakeModel(strong_logits(FIFTY))
        classifier = BanknoteClassifier(model)
        classifier.classify(frame)
        classifier.reset()
        assert classifier.policy.consecutive_fifty == 0
        classifier.close()
        assert model.closed


class FakeInterpreter:
    """LiteRT interpreter double with a 1x5 output tensor."""

    def __init__(self):
        self.tensors = {}
        self.invocations = 0

    def get_input_details(self):
        return [{"index": 0, "shape": np.array([1, 224, 224, 3]), "dtype": np.float32}]

    def get_output_details(self):
        return [{"index": 1, "shape": np.array([1, 5]), "dtype": np.float32}]

    def set_tensor(self, index, value):
        self.tensors[index] = value

    def invoke(self):
        self.invocations += 1

    def get_tensor(self, index):
        return np.arange(5, dtype=np.float32).reshape(1, 5)


class TestTFLiteModel:
    """Test suite for the interpreter wrapper."""

    def test_missing_model_file(self, tmp_path):
        with pytest.raises(ModelLoadError, match="not found"):
            TFLiteModel(str(tmp_path / "missing.tflite"))

    def test_run_flattens_output(self):
        interpreter = FakeInterpreter()
        model = TFLiteModel("fake.tflite", interpreter=interpreter)
        assert model.output_size == 5
        assert model.input_shape == (1, 224, 224, 3)

        tensor = np.zeros((1, 224, 224, 3), dtype=np.float64)
        output = model.run(tensor)

        assert output.shape == (5,)
        assert output.dtype == np.float32
        assert output.tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert interpreter.tensors[0].dtype == np.float32
        assert interpreter.invocations == 1

    def test_run_after_close_raises(self):
        model = TFLiteModel("fake.tflite", interpreter=FakeInterpreter())
        model.close()
        with pytest.raises(RuntimeError, match="closed"):
            model.run(np.zeros((1, 224, 224, 3), dtype=np.float32))


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
