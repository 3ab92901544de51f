import math
import pytest
import numpy as np
from skillrate import Glicko2
from skillrate.utils import PeriodDataset
from skillrate.metrics import (
    accuracy_without_draws,
    binary_accuracy,
    binary_log_loss,
    binary_metrics_suite,
    brier_score,
)


def test_binary_accuracy():
    probs = np.array([0.9, 0.2, 0.5, 0.7])
    outcomes = np.array([1.0, 0.0, 1.0, 0.0])
    assert binary_accuracy(probs, outcomes) == pytest.approx(2.5 / 4)


def test_accuracy_without_draws():
    probs = np.array([0.9, 0.6, 0.3])
    outcomes = np.array([1.0, 0.5, 1.0])
    assert accuracy_without_draws(probs, outcomes) == pytest.approx(0.5)


def test_log_loss_and_brier():
    probs = np.array([0.5, 0.5])
    outcomes = np.array([1.0, 0.0])
    assert binary_log_loss(probs, outcomes) == pytest.approx(math.log(2.0))
    assert brier_score(probs, outcomes) == pytest.approx(0.25)
    assert binary_log_loss(np.array([1.0]), np.array([0.0])) == pytest.approx(-math.log(1e-6))


def test_suite_keys():
    metrics = binary_metrics_suite(np.array([0.8, 0.3]), np.array([1.0, 0.0]))
    assert set(metrics) == {'accuracy', 'accuracy_without_draws', 'log_loss', 'brier_score'}
    assert metrics['accuracy'] == 1.0


def test_evaluate_scores_pre_match_predictions():
    dataset = PeriodDataset.init_from_arrays(
        time_steps=np.array([0, 0, 1, 2]),
        matchups=np.array([[0, 1], [2, 1], [0, 2], [0, 1]]),
        outcomes=np.array([1.0, 0.5, 1.0, 0.5]),
        competitors=['a', 'b', 'c'],
    )
    model = Glicko2(tau=0.5)
    metrics = model.evaluate(dataset)
    _, probs = Glicko2(tau=0.5).fit_dataset(dataset, return_pre_match_probs=True)
    assert set(metrics) == {'accuracy', 'accuracy_without_draws', 'log_loss', 'brier_score', 'duration'}
    assert metrics['log_loss'] == pytest.approx(binary_log_loss(probs, dataset.outcomes))
    # the first period is all coin flips, the third match is a favourite winning
    assert probs[2] > 0.5
    assert metrics['duration'] >= 0.0
