# knn/dataset.py  –– reading Iris records from a headerless CSV file

import csv
import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence

from .base import IrisRecord

logger = logging.getLogger(__name__)

FIELD_COUNT = 5


class DatasetError(ValueError):
    """A row of the data file could not be turned into an IrisRecord."""

    def __init__(self, message: str, path: Optional[str] = None, line_no: Optional[int] = None):
        self.path = path
        self.line_no = line_no
        location = f"{path}:{line_no}: " if path is not None and line_no is not None else ""
        super().__init__(f"{location}{message}")


def parse_iris_record(row: Sequence[str], path: Optional[str] = None, line_no: Optional[int] = None) -> IrisRecord:
    """
    Build an IrisRecord from one CSV row.

    Parameters
    ----------
    row : Sequence[str]
        sepal length, sepal width, petal length, petal width, species.
    path, line_no :
        Only used to locate the row in error messages.

    Raises
    ------
    DatasetError
        Wrong column count, a measurement that is not a finite number, or an empty species.
    """
    if len(row) != FIELD_COUNT:
        raise DatasetError(f"expected {FIELD_COUNT} fields, got {len(row)}", path, line_no)

    measurements = []
    for raw in row[:4]:
        try:
            value = float(raw)
        except ValueError:
            raise DatasetError(f"not a number: {raw!r}", path, line_no) from None
        if not math.isfinite(value):
            raise DatasetError(f"measurement must be finite: {raw!r}", path, line_no)
        measurements.append(value)

    species = row[4].strip()
    if not species:
        raise DatasetError("empty species label", path, line_no)

    return IrisRecord(*measurements, species=species)


def load_iris_records(path: str | Path) -> List[IrisRecord]:
    """
    Read every record of an iris.data style file. Blank lines are skipped.

    Raises OSError (FileNotFoundError, IsADirectoryError, ...) if the file cannot be opened,
    and DatasetError on the first bad row or if the file is not UTF-8 text.
    """
    path = Path(path)
    records = []
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            for line_no, row in enumerate(csv.reader(f), start=1):
                if not row or all(not cell.strip() for cell in row):
                    continue
                records.append(parse_iris_record(row, str(path), line_no))
    except UnicodeDecodeError as e:
        raise DatasetError(f"{path}: not UTF-8 text ({e.reason})", str(path)) from e

    logger.info(f"Loaded {len(records)} records from {path}")
    return records
