"""RateBase: baseline rating estimators for collaborative filtering.

This package learns models that predict unseen ratings from sparse
(user, item, rating) observations.

Modules:
    recommender: Hyperparameters, datasets, estimators and evaluation
"""

__version__ = "0.1.0"
