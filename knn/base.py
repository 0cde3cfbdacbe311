# knn/base.py

import datetime
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any, Tuple


class KNNError(Exception):
    """Base class for errors raised by the KNN core."""


class InvalidArgument(KNNError, ValueError):
    """Raised for a bad k, a bad train fraction or mismatched sequence lengths."""


class EmptyInput(KNNError, ValueError):
    """Raised when a training set, neighbor set or test set is empty."""


@dataclass(frozen=True)
class IrisRecord:
    """
    One row of the Iris dataset: four measurements (cm) and the species label.
    """
    sepal_length: float
    sepal_width: float
    petal_length: float
    petal_width: float
    species: str

    @property
    def features(self) -> Tuple[float, float, float, float]:
        return (self.sepal_length, self.sepal_width, self.petal_length, self.petal_width)


RecordSet = List[IrisRecord]


@dataclass(frozen=True)
class DistancePair:
    record: IrisRecord
    distance: float


@dataclass(frozen=True)
class ClassVote:
    label: str
    count: int


@dataclass
class KNNRunProvenance:
    """
    Describes the setup context of a single classification run.
    Intended for the JSON run report written by the CLI.
    """
    purpose: str
    split_strategy: str                  # class name
    labeling_strategy: str
    data_path: str
    k: int
    split_ratio: float
    random_seed: Optional[int] = None
    data_sha1: Optional[str] = None
    extra_params: Dict[str, Any] = field(default_factory=dict)
    created_utc: str = field(default_factory=lambda: datetime.datetime.now(datetime.timezone.utc).isoformat())

    def to_metadata(self) -> Dict[str, Any]:
        """Return dict suitable for the run report"""
        return {
            "provenance": asdict(self),
            "counts": {},  # populated by the pipeline
        }

    def to_description(self) -> str:
        train_pct = int(self.split_ratio * 100)
        test_pct = 100 - train_pct
        return f"""# Run purpose
{self.purpose}

# Creation details
- Created: {self.created_utc}
- Split strategy: {self.split_strategy}
- Labeling strategy: {self.labeling_strategy}
- Data file: {self.data_path} (sha1 {self.data_sha1 or 'unknown'})
- Neighbors (k): {self.k}
- Train/Test split: {train_pct}/{test_pct}
- Random seed: {'None' if self.random_seed is None else self.random_seed}

# Notes
{self.extra_params.get('notes', '') if self.extra_params else ''}
"""
