"""Baseline rating estimators.

Three non-personalized or lightly personalized models that every other
recommender is compared against:

* ``RandomEstimator`` draws ratings from a normal distribution fitted to
  the training ratings.
* ``BiasEstimator`` learns a global mean plus per-user and per-item
  offsets by stochastic gradient descent.
* ``PopularityEstimator`` scores an item by how often it was rated.
"""

import logging
import math
from typing import Hashable, Optional

import numpy as np

from src.recommender.base import BaseEstimator
from src.recommender.dataset import TrainingSet
from src.recommender.ids import NOT_FOUND
from src.recommender.options import FitOption
from src.recommender.params import ParamName, ParamSet

# Configure module logger
logger = logging.getLogger(__name__)

# Bias model defaults
DEFAULT_REG = 0.02
DEFAULT_LR = 0.005
DEFAULT_N_EPOCHS = 20


def _require_ratings(training_set: TrainingSet, estimator: str) -> None:
    if len(training_set) == 0:
        raise ValueError(f"Cannot fit {estimator} on an empty training set")


class RandomEstimator(BaseEstimator):
    """Predicts a random rating from the training distribution.

    The prediction is drawn from N(mean, std_dev^2), where both are the
    maximum-likelihood estimates over the training ratings, and is clipped
    to the observed rating range [low, high].

    Predictions consume the estimator's private generator, so a sequence of
    predictions is reproducible only when replayed in the same order after
    the same fit.
    """

    def __init__(self, params: Optional[ParamSet] = None):
        self.mean = 0.0
        self.std_dev = 0.0
        self.low = 0.0
        self.high = 0.0
        super().__init__(params)

    def fit(self, training_set: TrainingSet, *options: FitOption) -> "RandomEstimator":
        _require_ratings(training_set, type(self).__name__)
        self.init(training_set, options)
        self.mean = training_set.mean()
        self.std_dev = training_set.stddev()
        self.low, self.high = training_set.min(), training_set.max()

        logger.info(
            f"Fitted RandomEstimator: mean={self.mean:.4f}, "
            f"std_dev={self.std_dev:.4f}, range=[{self.low}, {self.high}]"
        )
        return self

    def predict(self, user_id: Hashable, item_id: Hashable) -> float:
        self._check_ready()
        ret = self.rng.standard_normal() * self.std_dev + self.mean
        # Crop prediction
        if ret < self.low:
            ret = self.low
        elif ret > self.high:
            ret = self.high
        return float(ret)


class BiasEstimator(BaseEstimator):
    """Baseline estimate for a user and an item.

        r_hat(u, i) = b(u, i) = mu + b_u + b_i

    If user u is unknown, its bias b_u is taken as zero. The same applies
    to item i with b_i.

    Hyperparameters:
        reg: Regularization weight of the cost function. Default 0.02.
        lr: Learning rate of SGD. Default 0.005.
        n_epochs: Number of passes over the training set. Default 20.

    Attributes:
        global_bias: mu, the mean training rating.
        user_bias: b_u indexed by dense user id.
        item_bias: b_i indexed by dense item id.
    """

    def __init__(self, params: Optional[ParamSet] = None):
        self.global_bias = 0.0
        self.user_bias = np.zeros(0)
        self.item_bias = np.zeros(0)
        super().__init__(params)

    def set_params(self, params: ParamSet) -> None:
        super().set_params(params)
        self.reg = self.params.get_float(ParamName.REG, DEFAULT_REG)
        self.lr = self.params.get_float(ParamName.LR, DEFAULT_LR)
        self.n_epochs = self.params.get_int(ParamName.N_EPOCHS, DEFAULT_N_EPOCHS)

    def predict(self, user_id: Hashable, item_id: Hashable) -> float:
        self._check_ready()
        dense_user = self.user_index.to_dense_id(user_id)
        dense_item = self.item_index.to_dense_id(item_id)
        return self._predict_dense(dense_user, dense_item)

    def _predict_dense(self, dense_user: int, dense_item: int) -> float:
        ret = self.global_bias
        if dense_user != NOT_FOUND:
            ret += float(self.user_bias[dense_user])
        if dense_item != NOT_FOUND:
            ret += float(self.item_bias[dense_item])
        return ret

    def fit(self, training_set: TrainingSet, *options: FitOption) -> "BiasEstimator":
        """Fit biases by SGD over the rows in their native order.

        Each row updates b_u and b_i in place from the same residual, and
        later rows of the same epoch see the updated values.
        """
        _require_ratings(training_set, type(self).__name__)
        self.init(training_set, options)

        global_bias = training_set.global_mean
        user_bias = [0.0] * training_set.user_count()
        item_bias = [0.0] * training_set.item_count()
        users = training_set.dense_users.tolist()
        items = training_set.dense_items.tolist()
        ratings = training_set.ratings.tolist()
        lr, reg = self.lr, self.reg
        verbose = self.fit_options.verbose

        for epoch in range(self.n_epochs):
            sq_error = 0.0
            for u, i, rating in zip(users, items, ratings):
                bu = user_bias[u]
                bi = item_bias[i]
                diff = global_bias + bu + bi - rating
                sq_error += diff * diff
                user_bias[u] = bu - lr * (diff + reg * bu)
                item_bias[i] = bi - lr * (diff + reg * bi)
            if verbose:
                logger.info(
                    f"Epoch {epoch + 1}/{self.n_epochs}: "
                    f"train RMSE={math.sqrt(sq_error / len(ratings)):.6f}"
                )

        self.global_bias = global_bias
        self.user_bias = np.asarray(user_bias, dtype=np.float64)
        self.item_bias = np.asarray(item_bias, dtype=np.float64)

        logger.info(
            "BiasEstimator training completed",
            extra={
                "global_bias": round(global_bias, 6),
                "num_users": len(user_bias),
                "num_items": len(item_bias),
                "n_epochs": self.n_epochs,
            },
        )
        return self


class PopularityEstimator(BaseEstimator):
    """Scores items by the number of training ratings they received."""

    def __init__(self, params: Optional[ParamSet] = None):
        self.popularity = np.zeros(0)
        super().__init__(params)

    def fit(
        self, training_set: TrainingSet, *options: FitOption
    ) -> "PopularityEstimator":
        self.init(training_set, options)
        self.popularity = np.array(
            [len(ratings) for ratings in training_set.dense_item_ratings],
            dtype=np.float64,
        )
        logger.info(f"Fitted PopularityEstimator on {len(self.popularity)} items")
        return self

    def predict(self, user_id: Hashable, item_id: Hashable) -> float:
        self._check_ready()
        dense_item = self.item_index.to_dense_id(item_id)
        if dense_item == NOT_FOUND:
            return 0.0
        return float(self.popularity[dense_item])
