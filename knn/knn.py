# knn/knn.py

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .base import IrisRecord
from .evaluation import LabelingStrategy, MajorityVoteLabeling, NearestNeighborFilter, NeighborFilterStrategy

logger = logging.getLogger(__name__)

PredictionCallback = Callable[[IrisRecord, str], None]


def format_prediction(record: IrisRecord, predicted: str) -> str:
    return f"Predicted: {predicted}, Actual: {record.species}"


@dataclass
class KNNClassifier:
    """
    Lazy k-nearest-neighbors classifier: nothing is fitted, every prediction
    scans the training set.

    on_prediction, when given, is called once per test record with the record
    and its predicted label, in test-set order.
    """
    k: int = 3
    neighbor_filter: NeighborFilterStrategy = field(default_factory=NearestNeighborFilter)
    labeling: LabelingStrategy = field(default_factory=MajorityVoteLabeling)
    on_prediction: Optional[PredictionCallback] = None

    def predict_one(self, training_set: Sequence[IrisRecord], query: IrisRecord) -> str:
        neighbors = self.neighbor_filter.filter(training_set, query, self.k)
        return self.labeling.infer_label(neighbors)

    def predict(self, training_set: Sequence[IrisRecord], test_set: Sequence[IrisRecord]) -> List[str]:
        predictions = []
        for record in test_set:
            label = self.predict_one(training_set, record)
            predictions.append(label)
            logger.debug(format_prediction(record, label))
            if self.on_prediction is not None:
                self.on_prediction(record, label)
        return predictions


def predict(training_set: Sequence[IrisRecord], test_set: Sequence[IrisRecord], k: int,
            on_prediction: Optional[PredictionCallback] = None) -> List[str]:
    return KNNClassifier(k=k, on_prediction=on_prediction).predict(training_set, test_set)
