"""Evaluation of rating estimators.

Provides error metrics over predicted ratings and a k-fold
cross-validation harness that fits a fresh estimator per fold.
"""

import logging
import time
from typing import Callable, Dict, Mapping, Sequence

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error
from sklearn.model_selection import KFold

from src.recommender.base import BaseEstimator
from src.recommender.dataset import TrainingSet
from src.recommender.options import FitOption

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_N_SPLITS = 5
DEFAULT_RANDOM_STATE = 0

Evaluator = Callable[[Sequence[float], Sequence[float]], float]


def _validate(truth: Sequence[float], prediction: Sequence[float]) -> None:
    if len(truth) != len(prediction):
        raise ValueError(
            f"truth and prediction differ in length: {len(truth)} != {len(prediction)}"
        )
    if len(truth) == 0:
        raise ValueError("Cannot evaluate an empty set of predictions")


def rmse(truth: Sequence[float], prediction: Sequence[float]) -> float:
    """Root mean squared error between observed and predicted ratings."""
    _validate(truth, prediction)
    return float(np.sqrt(mean_squared_error(truth, prediction)))


def mae(truth: Sequence[float], prediction: Sequence[float]) -> float:
    """Mean absolute error between observed and predicted ratings."""
    _validate(truth, prediction)
    return float(mean_absolute_error(truth, prediction))


DEFAULT_EVALUATORS: Dict[str, Evaluator] = {"rmse": rmse, "mae": mae}


def clone_estimator(estimator: BaseEstimator) -> BaseEstimator:
    """Create an unfitted estimator of the same type and hyperparameters."""
    return type(estimator)(estimator.get_params().copy())


def cross_validate(
    estimator: BaseEstimator,
    data: TrainingSet,
    evaluators: Mapping[str, Evaluator] = DEFAULT_EVALUATORS,
    n_splits: int = DEFAULT_N_SPLITS,
    random_state: int = DEFAULT_RANDOM_STATE,
    options: Sequence[FitOption] = (),
) -> Dict[str, np.ndarray]:
    """Score an estimator with k-fold cross-validation.

    Rows are shuffled into ``n_splits`` folds. For every fold a clone of
    ``estimator`` is fitted on the remaining rows and asked to predict the
    held-out rows by their external ids. ``estimator`` itself is never
    fitted.

    Args:
        estimator: Template estimator; only its type and params are used.
        data: Ratings to split.
        evaluators: Metric name to evaluator function.
        n_splits: Number of folds, at least 2.
        random_state: Seed of the fold shuffling.
        options: Runtime options passed to every fit.

    Returns:
        Dictionary mapping each metric name to an array of per-fold scores.

    Raises:
        ValueError: If ``n_splits`` is invalid for the size of ``data``.

    Example:
        >>> scores = cross_validate(BiasEstimator(), data, n_splits=5)
        >>> print(f"RMSE: {scores['rmse'].mean():.4f}")
    """
    if n_splits < 2:
        raise ValueError(f"n_splits must be at least 2, got {n_splits}")
    if len(data) < n_splits:
        raise ValueError(
            f"Cannot split {len(data)} ratings into {n_splits} folds"
        )

    logger.info(
        f"Cross-validating {type(estimator).__name__} with {n_splits} folds "
        f"on {len(data)} ratings"
    )

    scores: Dict[str, np.ndarray] = {
        name: np.zeros(n_splits) for name in evaluators
    }
    kfold = KFold(n_splits=n_splits, shuffle=True, random_state=random_state)

    for fold, (train_idx, test_idx) in enumerate(kfold.split(np.arange(len(data)))):
        start_time = time.time()
        model = clone_estimator(estimator)
        model.fit(data.subset(train_idx), *options)

        truth = np.empty(len(test_idx))
        prediction = np.empty(len(test_idx))
        for k, row in enumerate(test_idx):
            user_id, item_id, rating = data.get(int(row))
            truth[k] = rating
            prediction[k] = model.predict(user_id, item_id)

        for name, evaluator in evaluators.items():
            scores[name][fold] = evaluator(truth, prediction)

        logger.info(
            f"Fold {fold + 1}/{n_splits} completed",
            extra={
                "fold": fold,
                "scores": {name: round(float(s[fold]), 6) for name, s in scores.items()},
                "fit_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )

    return scores
