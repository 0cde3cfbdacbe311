# pipeline/classify_pipeline.py

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from config import KNNConfig
from knn.base import IrisRecord, KNNRunProvenance
from knn.dataset import load_iris_records
from knn.evaluation import BernoulliSplit, MajorityVoteLabeling, NearestNeighborFilter, accuracy
from knn.knn import KNNClassifier, format_prediction
from utils import get_hash

logger = logging.getLogger(__name__)

Echo = Callable[[str], None]


@dataclass
class ClassificationResult:
    """
    Outcome of one split / predict / score run.
    """
    training_size: int
    test_size: int
    predictions: List[str]
    accuracy: float
    provenance: KNNRunProvenance

    def to_metadata(self) -> dict:
        meta = self.provenance.to_metadata()
        meta["counts"] = {"train": self.training_size, "test": self.test_size}
        meta["accuracy"] = self.accuracy
        return meta


def format_accuracy(value: float) -> str:
    return f"Accuracy: {value:f}%"


def run_classification(
    records: Sequence[IrisRecord],
    config: KNNConfig,
    echo: Echo = print,
    data_sha1: Optional[str] = None,
) -> ClassificationResult:
    """Split records, classify the test part against the training part and score it.

    Steps:
      1. Partition records with a per-record Bernoulli draw (seeded from config.seed)
      2. Predict every test record by majority vote of its k nearest training records,
         echoing a "Predicted: ..., Actual: ..." line for each
      3. Echo the "Accuracy: ...%" line

    Parameters:
        records (Sequence[IrisRecord]): Full record set
        config (KNNConfig): k, train fraction, seed and data path
        echo (Callable[[str], None]): Sink for the output lines
        data_sha1 (Optional[str]): Hash of the data file, recorded in the provenance

    Raises:
        InvalidArgument: bad k / train fraction, or k larger than the training set
        EmptyInput: the split left the training or the test set empty
    """
    config.validate()
    splitter = BernoulliSplit(config.train_fraction, config.seed)
    neighbor_filter = NearestNeighborFilter()
    labeling = MajorityVoteLabeling()

    training_set, test_set = splitter.split(records)
    logger.info(f"Training on {len(training_set)} records, testing {len(test_set)} (k={config.k})")

    classifier = KNNClassifier(
        k=config.k,
        neighbor_filter=neighbor_filter,
        labeling=labeling,
        on_prediction=lambda record, label: echo(format_prediction(record, label)),
    )
    predictions = classifier.predict(training_set, test_set)
    score = accuracy(test_set, predictions)
    echo(format_accuracy(score))
    logger.info(f"Accuracy {score:.2f}% over {len(test_set)} test records")

    provenance = splitter.assemble_provenance_info(labeling, str(config.data_path), config.k, data_sha1)
    return ClassificationResult(
        training_size=len(training_set),
        test_size=len(test_set),
        predictions=predictions,
        accuracy=score,
        provenance=provenance,
    )


def process_iris_file(config: KNNConfig, echo: Echo = print) -> ClassificationResult:
    """Load config.data_path and run the classification over it.

    Raises FileNotFoundError / DatasetError from loading, plus everything run_classification raises.
    """
    path = Path(config.data_path)
    records = load_iris_records(path)
    sha1 = get_hash(path)
    logger.debug(f"Data file {path} sha1 {sha1}")
    return run_classification(records, config, echo=echo, data_sha1=sha1)
