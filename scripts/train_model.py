"""Command-line interface for cross-validating a rating estimator.

This script loads ratings from a delimited file or a built-in dataset,
cross-validates one of the baseline estimators on them and reports the
mean RMSE and MAE over the folds.

Example:
    Evaluate the bias model on a CSV with a header line:
        $ python scripts/train_model.py data/fake_ratings.csv --header

    Evaluate on an unpacked built-in dataset with custom parameters:
        $ python scripts/train_model.py ml-100k \\
            --model baseline \\
            --lr 0.01 \\
            --n-epochs 30
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Type

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.base import BaseEstimator
from src.recommender.builtin import BUILTIN_DATASETS, DataDirs, load_builtin
from src.recommender.dataset import TrainingSet, load_data_from_csv
from src.recommender.evaluate import (
    DEFAULT_N_SPLITS,
    DEFAULT_RANDOM_STATE,
    cross_validate,
)
from src.recommender.exceptions import UnknownDataSetError
from src.recommender.logging_config import setup_logging
from src.recommender.models import (
    DEFAULT_LR,
    DEFAULT_N_EPOCHS,
    DEFAULT_REG,
    BiasEstimator,
    PopularityEstimator,
    RandomEstimator,
)
from src.recommender.options import with_verbose
from src.recommender.params import ParamName, ParamSet

MODELS: Dict[str, Type[BaseEstimator]] = {
    "baseline": BiasEstimator,
    "random": RandomEstimator,
    "pop": PopularityEstimator,
}


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list; ``sys.argv[1:]`` when None.

    Returns:
        Namespace object containing parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Cross-validate a baseline rating estimator.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Built-in datasets: {', '.join(sorted(BUILTIN_DATASETS))}

Examples:
  # Bias model on a CSV file with a header line
  python scripts/train_model.py data/fake_ratings.csv --header

  # Random model on MovieLens 100k unpacked under ~/.gorse/datasets
  python scripts/train_model.py ml-100k --model random
        """,
    )

    parser.add_argument(
        "source",
        type=str,
        help="Ratings file (user, item, rating columns) or built-in dataset name",
    )
    parser.add_argument(
        "--sep",
        type=str,
        default=",",
        help="Field separator of the ratings file (default: ',')",
    )
    parser.add_argument(
        "--header",
        action="store_true",
        help="The ratings file starts with a header line",
    )
    parser.add_argument(
        "--data-root",
        type=str,
        default=None,
        help="Root directory of built-in datasets (default: ~/.gorse)",
    )
    parser.add_argument(
        "--model",
        choices=sorted(MODELS),
        default="baseline",
        help="Estimator to evaluate (default: baseline)",
    )
    parser.add_argument(
        "--lr",
        type=float,
        default=DEFAULT_LR,
        help=f"Learning rate of the bias model (default: {DEFAULT_LR})",
    )
    parser.add_argument(
        "--reg",
        type=float,
        default=DEFAULT_REG,
        help=f"Regularization of the bias model (default: {DEFAULT_REG})",
    )
    parser.add_argument(
        "--n-epochs",
        type=int,
        default=DEFAULT_N_EPOCHS,
        help=f"Number of SGD epochs (default: {DEFAULT_N_EPOCHS})",
    )
    parser.add_argument(
        "--random-state",
        type=int,
        default=DEFAULT_RANDOM_STATE,
        help=f"Seed for the estimator and fold shuffling (default: {DEFAULT_RANDOM_STATE})",
    )
    parser.add_argument(
        "--n-splits",
        type=int,
        default=DEFAULT_N_SPLITS,
        help=f"Number of cross-validation folds (default: {DEFAULT_N_SPLITS})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level and per-epoch progress)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    return parser.parse_args(argv)


def load_source(args: argparse.Namespace) -> TrainingSet:
    """Load ratings from a built-in dataset name or a file path."""
    if args.source in BUILTIN_DATASETS:
        dirs = (
            DataDirs(root=Path(args.data_root))
            if args.data_root
            else DataDirs.from_home()
        )
        return load_builtin(args.source, dirs)
    return load_data_from_csv(args.source, sep=args.sep, header=args.header)


def build_params(args: argparse.Namespace) -> ParamSet:
    return ParamSet(
        {
            ParamName.LR: args.lr,
            ParamName.REG: args.reg,
            ParamName.N_EPOCHS: args.n_epochs,
            ParamName.RANDOM_STATE: args.random_state,
        }
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the evaluation script.

    Returns:
        Exit code: 0 on success, 1 on error, 130 when interrupted.
    """
    try:
        args = parse_arguments(argv)

        setup_logging(
            log_level="DEBUG" if args.verbose else "INFO",
            json_format=args.json_logs,
        )
        logger = logging.getLogger(__name__)

        data = load_source(args)
        estimator = MODELS[args.model](build_params(args))

        logger.info("=" * 70)
        logger.info("Evaluation Configuration")
        logger.info("=" * 70)
        logger.info(f"Source:         {args.source}")
        logger.info(f"Ratings:        {len(data)}")
        logger.info(f"Users / items:  {data.user_count()} / {data.item_count()}")
        logger.info(f"Model:          {estimator!r}")
        logger.info(f"Folds:          {args.n_splits}")
        logger.info("=" * 70)

        scores = cross_validate(
            estimator,
            data,
            n_splits=args.n_splits,
            random_state=args.random_state,
            options=[with_verbose(args.verbose)],
        )

        logger.info("=" * 70)
        logger.info("Evaluation Summary")
        logger.info("=" * 70)
        for name, values in scores.items():
            logger.info(f"{name.upper():6s} {values.mean():.6f} (+/- {values.std():.6f})")
        logger.info("=" * 70)
        return 0

    except FileNotFoundError as e:
        logging.error(f"File error: {e}")
        return 1
    except (ValueError, UnknownDataSetError) as e:
        logging.error(f"Validation error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.warning("Evaluation interrupted by user")
        return 130
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
