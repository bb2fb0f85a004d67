"""Base class shared by every rating estimator.

An estimator goes through three states: configured (``set_params`` was
called, which the constructor always does), ready (``init`` copied the id
indexes of a training set and seeded the random generator) and back to
ready on every subsequent ``fit``. Concrete estimators implement ``fit``
and ``predict``; ``fit`` must start by calling ``init``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Hashable, Optional, Sequence

import numpy as np

from src.recommender.dataset import TrainingSet
from src.recommender.exceptions import (
    NotConfiguredError,
    NotFittedError,
    UnimplementedError,
)
from src.recommender.ids import IdentifierIndex
from src.recommender.options import FitOption, FitOptions
from src.recommender.params import ParamName, ParamSet

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_RANDOM_STATE = 0
_UINT64_MASK = (1 << 64) - 1


class BaseEstimator(ABC):
    """Lifecycle and shared state of estimators.

    Attributes:
        params: Hyperparameters given to ``set_params``.
        user_index: User id index of the last training set.
        item_index: Item id index of the last training set.
        rng: Private random generator, seeded in ``init``.
        random_state: Seed of ``rng``.
        fit_options: Runtime options of the last fit.
    """

    def __init__(self, params: Optional[ParamSet] = None):
        self.user_index: Optional[IdentifierIndex] = None
        self.item_index: Optional[IdentifierIndex] = None
        self.rng: Optional[np.random.Generator] = None
        self.fit_options: Optional[FitOptions] = None
        self._ready = False
        self.set_params(params if params is not None else ParamSet())

    def set_params(self, params: ParamSet) -> None:
        """Store hyperparameters and read the random seed.

        Subclasses read their own hyperparameters after calling this.
        """
        self.params = params
        self.random_state = params.get_int64(
            ParamName.RANDOM_STATE, DEFAULT_RANDOM_STATE
        )
        self._configured = True

    def get_params(self) -> ParamSet:
        return self.params

    @property
    def is_ready(self) -> bool:
        return self._ready

    def init(
        self,
        training_set: TrainingSet,
        options: Sequence[FitOption] = (),
    ) -> None:
        """Prepare the estimator for fitting on ``training_set``.

        Raises:
            NotConfiguredError: If ``set_params`` has not been called.
        """
        if not getattr(self, "_configured", False):
            raise NotConfiguredError(type(self).__name__)
        self.user_index = training_set.user_index
        self.item_index = training_set.item_index
        # negative seeds wrap to their unsigned 64-bit value
        self.rng = np.random.default_rng(self.random_state & _UINT64_MASK)
        self.fit_options = FitOptions.from_options(options)
        self._ready = True

        logger.debug(
            f"Initialized {type(self).__name__}",
            extra={
                "random_state": self.random_state,
                "num_users": len(self.user_index),
                "num_items": len(self.item_index),
            },
        )

    def _check_ready(self) -> None:
        if not self._ready:
            raise NotFittedError(type(self).__name__)

    @abstractmethod
    def fit(self, training_set: TrainingSet, *options: FitOption) -> "BaseEstimator":
        """Fit the model on ``training_set`` and return ``self``."""
        raise UnimplementedError("fit", type(self).__name__)

    @abstractmethod
    def predict(self, user_id: Hashable, item_id: Hashable) -> float:
        """Predict the rating ``user_id`` would give ``item_id``."""
        raise UnimplementedError("predict", type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.params!r})"
