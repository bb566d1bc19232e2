"""Tests for multiclass evaluation metrics."""

import math

import numpy as np
import pytest

from issue_classifier.metrics import evaluate_multiclass, prior_log_loss


LABELS = ["a", "b", "c"]


class TestEvaluateMulticlass:
    def test_perfect_predictions(self):
        y = [0, 1, 2, 0]
        proba = np.eye(3)[y]
        m = evaluate_multiclass(y, proba, LABELS)
        assert m.micro_accuracy == 1.0
        assert m.macro_accuracy == 1.0
        assert m.log_loss == pytest.approx(0.0, abs=1e-9)
        assert m.log_loss_reduction == pytest.approx(1.0)
        assert m.confusion_matrix == [[2, 0, 0], [0, 1, 0], [0, 0, 1]]

    def test_micro_and_macro_differ_on_imbalance(self):
        # class a: 3 of 3 right, class b: 0 of 1 right
        y = [0, 0, 0, 1]
        proba = np.array([[0.9, 0.1, 0.0]] * 4)
        m = evaluate_multiclass(y, proba, LABELS)
        assert m.micro_accuracy == pytest.approx(0.75)
        assert m.macro_accuracy == pytest.approx(0.5)

    def test_log_loss_and_reduction(self):
        y = [0, 1]
        proba = np.array([[0.5, 0.5, 0.0], [0.25, 0.75, 0.0]])
        m = evaluate_multiclass(y, proba, LABELS)
        expected = -(math.log(0.5) + math.log(0.75)) / 2
        assert m.log_loss == pytest.approx(expected)
        prior = math.log(2)
        assert m.log_loss_reduction == pytest.approx((prior - expected) / prior)
        assert m.per_class_log_loss[0] == pytest.approx(-math.log(0.5))
        assert math.isnan(m.per_class_log_loss[2])

    def test_zero_probability_is_clipped(self):
        m = evaluate_multiclass([2], np.array([[1.0, 0.0, 0.0]]), LABELS)
        assert math.isfinite(m.log_loss)
        assert m.log_loss_reduction == 0.0

    def test_top_k_accuracy(self):
        y = [2, 1]
        proba = np.array([[0.5, 0.3, 0.2], [0.5, 0.3, 0.2]])
        assert evaluate_multiclass(y, proba, LABELS, top_k=2).top_k_accuracy == 0.5
        assert evaluate_multiclass(y, proba, LABELS, top_k=5).top_k_accuracy == 1.0

    def test_empty_input(self):
        with pytest.raises(ValueError):
            evaluate_multiclass([], np.zeros((0, 3)), LABELS)

    def test_summary_and_dict(self):
        m = evaluate_multiclass([0, 1], np.eye(3)[[0, 1]], LABELS)
        assert "MicroAccuracy:100.00%" in m.summary()
        assert m.as_dict()["labels"] == LABELS


def test_prior_log_loss_uniform():
    assert prior_log_loss(np.array([0, 1, 2]), 3) == pytest.approx(math.log(3))
