# config.py

"""
Run configuration for the Iris KNN classifier.

Values come from environment variables (a .env file is loaded by the CLI via
python-dotenv) and can be overridden per run:

  IRIS_KNN_K, IRIS_KNN_TRAIN_FRACTION, IRIS_KNN_SEED, IRIS_KNN_DATA
"""
import os
from dataclasses import dataclass
from typing import Optional

from knn.base import InvalidArgument

DEFAULT_K = 3
DEFAULT_TRAIN_FRACTION = 0.4
DEFAULT_DATA_PATH = "iris.data"


@dataclass
class KNNConfig:
    k: int = DEFAULT_K
    train_fraction: float = DEFAULT_TRAIN_FRACTION
    seed: Optional[int] = None
    data_path: str = DEFAULT_DATA_PATH

    @classmethod
    def from_env(cls) -> "KNNConfig":
        """Build a config from IRIS_KNN_* environment variables, falling back to defaults."""
        seed = os.getenv("IRIS_KNN_SEED")
        try:
            return cls(
                k=int(os.getenv("IRIS_KNN_K", DEFAULT_K)),
                train_fraction=float(os.getenv("IRIS_KNN_TRAIN_FRACTION", DEFAULT_TRAIN_FRACTION)),
                seed=int(seed) if seed not in (None, "") else None,
                data_path=os.getenv("IRIS_KNN_DATA", DEFAULT_DATA_PATH),
            )
        except ValueError as e:
            raise InvalidArgument(f"Bad IRIS_KNN_* environment value: {e}") from e

    def validate(self) -> "KNNConfig":
        if self.k <= 0:
            raise InvalidArgument(f"k must be a positive integer, got {self.k}")
        if not 0.0 < self.train_fraction < 1.0:
            raise InvalidArgument(f"train_fraction must be in (0, 1), got {self.train_fraction}")
        return self
