"""Rating estimators for the RateBase package.

This module contains the hyperparameter container, the identifier index,
in-memory training sets and their loaders, the estimator base class, the
random, bias and popularity estimators, and cross-validation helpers.
"""

from src.recommender.base import BaseEstimator
from src.recommender.dataset import TrainingSet
from src.recommender.ids import NOT_FOUND, IdentifierIndex
from src.recommender.models import BiasEstimator, PopularityEstimator, RandomEstimator
from src.recommender.params import ParamName, ParamSet, ParamString

__all__ = [
    "NOT_FOUND",
    "BaseEstimator",
    "BiasEstimator",
    "IdentifierIndex",
    "ParamName",
    "ParamSet",
    "ParamString",
    "PopularityEstimator",
    "RandomEstimator",
    "TrainingSet",
]
