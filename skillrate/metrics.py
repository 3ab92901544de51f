"""metrics for judging pre-match predictions against what happened"""

import numpy as np


def binary_accuracy(probs: np.ndarray, outcomes: np.ndarray) -> float:
    """share of matches whose favourite won, a 0.5 prediction earns half a point"""
    favourite_mask = probs > 0.5
    underdog_mask = probs < 0.5
    coin_flip_mask = probs == 0.5
    correct = outcomes[favourite_mask].sum() + (1.0 - outcomes[underdog_mask]).sum() + 0.5 * coin_flip_mask.sum()
    return float(correct / probs.shape[0])


def accuracy_without_draws(probs: np.ndarray, outcomes: np.ndarray) -> float:
    decisive_mask = outcomes != 0.5
    return binary_accuracy(probs[decisive_mask], outcomes[decisive_mask])


def binary_log_loss(probs: np.ndarray, outcomes: np.ndarray, eps: float = 1e-6) -> float:
    probs = np.clip(probs, eps, 1.0 - eps)
    losses = -(np.log(probs) * outcomes) - (np.log(1.0 - probs) * (1.0 - outcomes))
    return float(losses.mean())


def brier_score(probs: np.ndarray, outcomes: np.ndarray) -> float:
    """mean squared error of the probabilities"""
    return float(np.square(probs - outcomes).mean())


def binary_metrics_suite(probs: np.ndarray, outcomes: np.ndarray):
    return {
        'accuracy': binary_accuracy(probs, outcomes),
        'accuracy_without_draws': accuracy_without_draws(probs, outcomes),
        'log_loss': binary_log_loss(probs, outcomes),
        'brier_score': brier_score(probs, outcomes),
    }
