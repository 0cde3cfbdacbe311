# knn/__init__.py

from .base import IrisRecord, ClassVote, DistancePair, KNNRunProvenance, KNNError, InvalidArgument, EmptyInput
from .distance import euclidean_distance
from .evaluation import (
    SplitSelectionStrategy, BernoulliSplit, NeighborFilterStrategy, NearestNeighborFilter,
    LabelingStrategy, MajorityVoteLabeling, split, get_neighbors, get_response, accuracy
)
from .knn import KNNClassifier, predict
from .dataset import DatasetError, parse_iris_record, load_iris_records

__all__ = [
    'IrisRecord',
    'ClassVote',
    'DistancePair',
    'KNNRunProvenance',
    'KNNError',
    'InvalidArgument',
    'EmptyInput',
    'euclidean_distance',
    'SplitSelectionStrategy',
    'BernoulliSplit',
    'NeighborFilterStrategy',
    'NearestNeighborFilter',
    'LabelingStrategy',
    'MajorityVoteLabeling',
    'split',
    'get_neighbors',
    'get_response',
    'accuracy',
    'KNNClassifier',
    'predict',
    'DatasetError',
    'parse_iris_record',
    'load_iris_records',
]
