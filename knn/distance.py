# knn/distance.py

import numpy as np
from numpy.linalg import norm

from .base import IrisRecord


def euclidean_distance(a: IrisRecord, b: IrisRecord) -> float:
    """
    Euclidean distance between the four measurements of two records.

    NaN or infinite measurements are not guarded here and propagate into the result.
    """
    return float(norm(np.subtract(a.features, b.features)))
