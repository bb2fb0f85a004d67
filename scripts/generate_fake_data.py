"""Generate fake rating data for testing and development.

This module creates synthetic explicit-feedback data for exercising the
rating estimators. Each rating is a global mean plus a hidden per-user and
per-item offset plus noise, rounded and clipped to a 1-5 star scale, so
the bias model has real signal to learn.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_ratings
        df = generate_fake_ratings(num_users=100, num_items=200)
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

# Default configuration constants
DEFAULT_NUM_USERS = 50
DEFAULT_NUM_ITEMS = 100
DEFAULT_NUM_RATINGS = 1000
DEFAULT_RANDOM_SEED = 42
DEFAULT_DAYS_BACK = 90
SECONDS_PER_DAY = 86400

GLOBAL_MEAN = 3.5
USER_SPREAD = 0.5
ITEM_SPREAD = 0.7
NOISE = 0.5
MIN_RATING, MAX_RATING = 1, 5


def generate_fake_ratings(
    num_users: int = DEFAULT_NUM_USERS,
    num_items: int = DEFAULT_NUM_ITEMS,
    num_ratings: int = DEFAULT_NUM_RATINGS,
    random_seed: int = DEFAULT_RANDOM_SEED,
    end_date: Optional[datetime] = None,
) -> pd.DataFrame:
    """Generate synthetic ratings.

    Args:
        num_users: Number of unique users to simulate. Must be positive.
        num_items: Number of unique items available. Must be positive.
        num_ratings: Total number of rating records. Must be positive.
        random_seed: Seed for reproducibility.
        end_date: Latest rating timestamp. Defaults to now.

    Returns:
        A pandas DataFrame with the following columns:
            - user_id: Integer user identifier (1 to num_users)
            - item_id: Integer item identifier (1 to num_items)
            - rating: Integer rating between 1 and 5
            - timestamp: Datetime of the rating event

        The DataFrame is sorted by timestamp in ascending order.

    Raises:
        ValueError: If any numeric parameter is non-positive.
    """
    if num_users <= 0 or num_items <= 0 or num_ratings <= 0:
        raise ValueError("num_users, num_items, and num_ratings must be positive")

    rng = np.random.default_rng(random_seed)
    if end_date is None:
        end_date = datetime.now()
    start_date = end_date - timedelta(days=DEFAULT_DAYS_BACK)

    user_offsets = rng.normal(0.0, USER_SPREAD, size=num_users)
    item_offsets = rng.normal(0.0, ITEM_SPREAD, size=num_items)

    users = rng.integers(1, num_users + 1, size=num_ratings)
    items = rng.integers(1, num_items + 1, size=num_ratings)
    raw = (
        GLOBAL_MEAN
        + user_offsets[users - 1]
        + item_offsets[items - 1]
        + rng.normal(0.0, NOISE, size=num_ratings)
    )
    ratings = np.clip(np.rint(raw), MIN_RATING, MAX_RATING).astype(int)

    offsets = rng.integers(0, DEFAULT_DAYS_BACK * SECONDS_PER_DAY, size=num_ratings)
    timestamps = [start_date + timedelta(seconds=int(s)) for s in offsets]

    df = pd.DataFrame(
        {
            "user_id": users,
            "item_id": items,
            "rating": ratings,
            "timestamp": timestamps,
        }
    )
    df = df.sort_values("timestamp").reset_index(drop=True)

    return df


def main() -> int:
    """Generate data/fake_ratings.csv and print a summary."""
    print(f"Generating {DEFAULT_NUM_RATINGS} fake ratings...")
    print(f"Users: {DEFAULT_NUM_USERS}, Items: {DEFAULT_NUM_ITEMS}")

    try:
        df = generate_fake_ratings()
    except ValueError as e:
        print(f"Error generating data: {e}")
        return 1

    data_dir = Path(__file__).parent.parent / "data"
    data_dir.mkdir(exist_ok=True)

    output_path = data_dir / "fake_ratings.csv"
    df.to_csv(output_path, index=False)

    print(f"\nData generated successfully!")
    print(f"Saved to: {output_path}")
    print(f"\nData summary:")
    print(f"  Total ratings: {len(df)}")
    print(f"  Unique users: {df['user_id'].nunique()}")
    print(f"  Unique items: {df['item_id'].nunique()}")
    print(f"  Mean rating: {df['rating'].mean():.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
