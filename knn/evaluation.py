# knn/evaluation.py


import logging
import numbers
from abc import ABC, abstractmethod
from collections import Counter
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .base import ClassVote, DistancePair, EmptyInput, InvalidArgument, IrisRecord, KNNRunProvenance, RecordSet
from .distance import euclidean_distance

logger = logging.getLogger(__name__)

RandomSource = Union[np.random.Generator, int, None]


class SplitSelectionStrategy(ABC):
    """
    Class which contains the logic and associated metadata for dividing a record set
    into training and test records.
    This would be run once per classification run.
    """
    train_fraction: float
    seed: Optional[int] = None

    @property
    def name(self) -> str:
        """Unique identifier for this split strategy."""
        raise NotImplementedError

    @property
    def description(self) -> str:
        """Human-readable description of what this strategy does."""
        raise NotImplementedError

    @abstractmethod
    def split(self, records: Sequence[IrisRecord]) -> Tuple[RecordSet, RecordSet]:
        """Return (training_set, test_set)."""
        raise NotImplementedError

    def assemble_provenance_info(self, labeling: "LabelingStrategy", data_path: str, k: int,
                                 data_sha1: Optional[str] = None) -> KNNRunProvenance:
        """Return the provenance information for a run using this split strategy."""
        return KNNRunProvenance(
            purpose=f"KNN classification run using {self.name}",
            split_strategy=self.name,
            labeling_strategy=labeling.name,
            data_path=data_path,
            k=k,
            split_ratio=self.train_fraction,
            random_seed=self.seed,
            data_sha1=data_sha1,
            extra_params={"notes": f"Split strategy: {self.description}"},
        )


class BernoulliSplit(SplitSelectionStrategy):
    """
    Assigns each record to the training set independently with probability
    `train_fraction`, otherwise to the test set.

    The resulting sizes follow a binomial distribution; either set may come out empty.
    """

    def __init__(self, train_fraction: float = 0.4, rng: RandomSource = None):
        if not 0.0 < train_fraction < 1.0:
            raise InvalidArgument(f"train_fraction must be in (0, 1), got {train_fraction}")
        self.train_fraction = train_fraction
        self.seed = int(rng) if isinstance(rng, numbers.Integral) else None
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    @property
    def name(self) -> str:
        return "bernoulli_split"

    @property
    def description(self) -> str:
        return f"per-record uniform draw, train if draw < {self.train_fraction}"

    def split(self, records: Sequence[IrisRecord]) -> Tuple[RecordSet, RecordSet]:
        training_set, test_set = [], []
        for record in records:
            if self.rng.random() < self.train_fraction:
                training_set.append(record)
            else:
                test_set.append(record)
        logger.debug(f"Split {len(records)} records into {len(training_set)} train / {len(test_set)} test")
        return training_set, test_set


def split(records: Sequence[IrisRecord], train_fraction: float = 0.4,
          rng: RandomSource = None) -> Tuple[RecordSet, RecordSet]:
    """Randomly partition records; see BernoulliSplit."""
    return BernoulliSplit(train_fraction, rng).split(records)


class NeighborFilterStrategy(ABC):
    """
    Class which contains the logic and associated metadata for choosing which training
    records take part in the vote for a given query record.
    """

    @property
    def name(self) -> str:
        """Unique identifier for this filter strategy."""
        raise NotImplementedError

    @property
    def description(self) -> str:
        """Human-readable description of what this filter does."""
        raise NotImplementedError

    @abstractmethod
    def filter(self, training_set: Sequence[IrisRecord], query: IrisRecord, k: int) -> RecordSet:
        """Return the subset of training_set allowed to vote for this query."""
        raise NotImplementedError


class NearestNeighborFilter(NeighborFilterStrategy):
    """
    Keeps the k training records closest to the query by Euclidean distance.

    Records at equal distance keep their training-set order, so the k-th neighbor
    is well defined when several records sit on the boundary.
    """

    @property
    def name(self) -> str:
        return "nearest_neighbors"

    @property
    def description(self) -> str:
        return "k closest training records, ties in training-set order"

    def annotate(self, training_set: Sequence[IrisRecord], query: IrisRecord) -> List[DistancePair]:
        """Return every training record paired with its distance to query, nearest first."""
        distances = np.array([euclidean_distance(query, t) for t in training_set], dtype=np.float64)
        order = np.argsort(distances, kind="stable")
        return [DistancePair(training_set[i], float(distances[i])) for i in order]

    def filter(self, training_set: Sequence[IrisRecord], query: IrisRecord, k: int) -> RecordSet:
        if not training_set:
            raise EmptyInput("training set is empty")
        if k <= 0 or k > len(training_set):
            raise InvalidArgument(f"k must be in [1, {len(training_set)}], got {k}")
        return [pair.record for pair in self.annotate(training_set, query)[:k]]


def get_neighbors(training_set: Sequence[IrisRecord], query: IrisRecord, k: int) -> RecordSet:
    return NearestNeighborFilter().filter(training_set, query, k)


class LabelingStrategy(ABC):
    """
    Class which contains the logic and associated metadata for inferring a label from neighbors.
    ie Logic for deciding how to combine neighbor labels into a single predicted label.
    """

    @property
    def name(self) -> str:
        """Unique identifier for this labeling strategy."""
        raise NotImplementedError

    @property
    def description(self) -> str:
        """Human-readable description of what this strategy does."""
        raise NotImplementedError

    @abstractmethod
    def rank(self, neighbors: Sequence[IrisRecord]) -> List[ClassVote]:
        """Return candidate labels, best first."""
        raise NotImplementedError

    def infer_label(self, neighbors: Sequence[IrisRecord]) -> str:
        return self.rank(neighbors)[0].label


class MajorityVoteLabeling(LabelingStrategy):
    """
    Tallies neighbor labels and ranks them by vote count, highest first.
    Equal counts are ordered by label, lexically ascending.
    """

    @property
    def name(self) -> str:
        return "majority_vote"

    @property
    def description(self) -> str:
        return "most frequent neighbor label, ties to the lexically smallest label"

    def rank(self, neighbors: Sequence[IrisRecord]) -> List[ClassVote]:
        if not neighbors:
            raise EmptyInput("no neighbors to vote")
        tally = Counter(n.species for n in neighbors)
        votes = [ClassVote(label, count) for label, count in tally.items()]
        return sorted(votes, key=lambda v: (-v.count, v.label))


def get_response(neighbors: Sequence[IrisRecord]) -> List[ClassVote]:
    return MajorityVoteLabeling().rank(neighbors)


def accuracy(test_set: Sequence[IrisRecord], predictions: Sequence[str]) -> float:
    """
    Percentage of test records whose species matches the parallel prediction.

    Parameters
    ----------
    test_set : Sequence[IrisRecord]
        Records with ground-truth labels.
    predictions : Sequence[str]
        One predicted label per test record, same order.

    Returns
    -------
    float
        Value in [0, 100].

    Raises
    ------
    InvalidArgument
        If the two sequences differ in length.
    EmptyInput
        If the test set is empty.
    """
    if len(test_set) != len(predictions):
        raise InvalidArgument(
            f"test set has {len(test_set)} records but {len(predictions)} predictions were given"
        )
    if not test_set:
        raise EmptyInput("cannot score an empty test set")
    correct = sum(1 for record, label in zip(test_set, predictions) if record.species == label)
    return correct / len(test_set) * 100.0
