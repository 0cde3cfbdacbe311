# test_classify_pipeline.py

import hashlib
import json
import logging

import pytest
from click.testing import CliRunner

from cli.classify import classify
from config import KNNConfig
from knn import EmptyInput, InvalidArgument, IrisRecord
from pipeline.classify_pipeline import format_accuracy, process_iris_file, run_classification
from utils import get_hash

ENV_VARS = ("IRIS_KNN_K", "IRIS_KNN_TRAIN_FRACTION", "IRIS_KNN_SEED", "IRIS_KNN_DATA")


def two_clusters(per_class=25):
    """Two well separated species, so k=1 classifies every test record correctly."""
    records = []
    for i in range(per_class):
        jitter = i / 100
        records.append(IrisRecord(1.0 + jitter, 1.0, 1.0, 1.0 - jitter, "Iris-setosa"))
        records.append(IrisRecord(6.0 + jitter, 3.0, 5.0, 2.0 - jitter, "Iris-virginica"))
    return records


def write_data(path, records):
    lines = [f"{r.sepal_length},{r.sepal_width},{r.petal_length},{r.petal_width},{r.species}" for r in records]
    path.write_text("\n".join(lines) + "\n\n", encoding="utf-8")
    return path


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def reset_loggers():
    yield
    for name in ("cli.classify", "pipeline", "knn"):
        logger = logging.getLogger(name)
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


# --- config ---

def test_config_defaults(clean_env):
    config = KNNConfig.from_env()
    assert (config.k, config.train_fraction, config.seed, config.data_path) == (3, 0.4, None, "iris.data")


def test_config_from_env(clean_env):
    clean_env.setenv("IRIS_KNN_K", "5")
    clean_env.setenv("IRIS_KNN_TRAIN_FRACTION", "0.6")
    clean_env.setenv("IRIS_KNN_SEED", "42")
    clean_env.setenv("IRIS_KNN_DATA", "other.data")
    config = KNNConfig.from_env()
    assert (config.k, config.train_fraction, config.seed, config.data_path) == (5, 0.6, 42, "other.data")


def test_config_bad_env_value(clean_env):
    clean_env.setenv("IRIS_KNN_K", "three")
    with pytest.raises(InvalidArgument):
        KNNConfig.from_env()


@pytest.mark.parametrize("k, fraction", [(0, 0.4), (-2, 0.4), (3, 0.0), (3, 1.0)])
def test_config_validate(k, fraction):
    with pytest.raises(InvalidArgument):
        KNNConfig(k=k, train_fraction=fraction).validate()


# --- pipeline ---

def test_run_classification_output_lines():
    lines = []
    result = run_classification(two_clusters(), KNNConfig(k=1, train_fraction=0.5, seed=4), echo=lines.append)

    assert result.training_size + result.test_size == 50
    assert len(result.predictions) == result.test_size
    assert len(lines) == result.test_size + 1
    assert all(line.startswith("Predicted: ") and ", Actual: " in line for line in lines[:-1])
    assert lines[-1] == format_accuracy(result.accuracy)
    assert result.accuracy == 100.0


def test_run_classification_is_reproducible():
    config = KNNConfig(k=3, train_fraction=0.4, seed=21)
    first = run_classification(two_clusters(), config, echo=lambda _line: None)
    second = run_classification(two_clusters(), config, echo=lambda _line: None)
    assert first.predictions == second.predictions
    assert first.training_size == second.training_size


def test_run_classification_k_larger_than_training_set():
    lines = []
    with pytest.raises(InvalidArgument):
        run_classification(two_clusters(), KNNConfig(k=500, seed=1), echo=lines.append)
    assert not any(line.startswith("Accuracy") for line in lines)


def test_run_classification_empty_input():
    with pytest.raises(EmptyInput):
        run_classification([], KNNConfig(k=1, seed=1), echo=lambda _line: None)


def test_format_accuracy():
    assert format_accuracy(93.75) == "Accuracy: 93.750000%"


def test_process_iris_file_metadata(tmp_path):
    data = write_data(tmp_path / "iris.data", two_clusters())
    result = process_iris_file(KNNConfig(k=1, seed=8, data_path=str(data)), echo=lambda _line: None)
    meta = result.to_metadata()
    assert meta["counts"] == {"train": result.training_size, "test": result.test_size}
    assert meta["provenance"]["k"] == 1
    assert meta["provenance"]["random_seed"] == 8
    assert len(meta["provenance"]["data_sha1"]) == 40


# --- cli ---

def test_cli_classify(tmp_path, clean_env, reset_loggers):
    data = write_data(tmp_path / "iris.data", two_clusters())
    report = tmp_path / "report.json"
    runner = CliRunner()
    result = runner.invoke(classify, [
        "--data", str(data), "-k", "1", "--train-fraction", "0.5", "--seed", "3",
        "--report", str(report), "--log-file", str(tmp_path / "run.log"),
    ])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert any(line.startswith("Predicted: ") for line in lines)
    assert "Accuracy: 100.000000%" in lines
    meta = json.loads(report.read_text(encoding="utf-8"))
    assert meta["accuracy"] == 100.0
    assert meta["provenance"]["split_ratio"] == 0.5


def test_cli_uses_env_config(tmp_path, clean_env, reset_loggers):
    data = write_data(tmp_path / "iris.data", two_clusters())
    clean_env.setenv("IRIS_KNN_DATA", str(data))
    clean_env.setenv("IRIS_KNN_K", "1")
    clean_env.setenv("IRIS_KNN_SEED", "9")
    result = CliRunner().invoke(classify, ["--log-file", str(tmp_path / "run.log")])
    assert result.exit_code == 0, result.output
    assert "Accuracy: 100.000000%" in result.output.splitlines()


def test_cli_invalid_k(tmp_path, clean_env, reset_loggers):
    data = write_data(tmp_path / "iris.data", two_clusters())
    result = CliRunner().invoke(classify, [
        "--data", str(data), "-k", "0", "--log-file", str(tmp_path / "run.log"),
    ])
    assert result.exit_code == 1
    assert "Accuracy:" not in result.output


def test_cli_missing_file(tmp_path, clean_env, reset_loggers):
    result = CliRunner().invoke(classify, [
        "--data", str(tmp_path / "nope.data"), "--log-file", str(tmp_path / "run.log"),
    ])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_cli_malformed_file(tmp_path, clean_env, reset_loggers):
    data = tmp_path / "iris.data"
    data.write_text("5.1,3.5,1.4,0.2,Iris-setosa\n5.1,3.5,oops,0.2,Iris-setosa\n", encoding="utf-8")
    result = CliRunner().invoke(classify, ["--data", str(data), "--log-file", str(tmp_path / "run.log")])
    assert result.exit_code == 1
    assert "Accuracy:" not in result.output


def test_cli_non_utf8_file(tmp_path, clean_env, reset_loggers):
    data = tmp_path / "iris.data"
    data.write_bytes(b"5.1,3.5,1.4,0.2,Iris-setosa\n5.1,3.5,1.4,0.2,Iris-\xff\xfe\n")
    result = CliRunner().invoke(classify, ["--data", str(data), "--log-file", str(tmp_path / "run.log")])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "UTF-8" in result.output


def test_cli_data_is_directory(tmp_path, clean_env, reset_loggers):
    result = CliRunner().invoke(classify, ["--data", str(tmp_path), "--log-file", str(tmp_path / "run.log")])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Cannot read data file" in result.output


def test_cli_empty_data_env_var(tmp_path, clean_env, reset_loggers):
    clean_env.chdir(tmp_path)
    clean_env.setenv("IRIS_KNN_DATA", "")
    result = CliRunner().invoke(classify, ["--log-file", str(tmp_path / "run.log")])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Accuracy:" not in result.output


def test_cli_unwritable_report(tmp_path, clean_env, reset_loggers):
    data = write_data(tmp_path / "iris.data", two_clusters())
    result = CliRunner().invoke(classify, [
        "--data", str(data), "-k", "1", "--seed", "3",
        "--report", str(tmp_path / "missing_dir" / "report.json"), "--log-file", str(tmp_path / "run.log"),
    ])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Cannot write run report" in result.output


def test_get_hash_matches_sha1(tmp_path):
    data = write_data(tmp_path / "iris.data", two_clusters(per_class=3))
    assert get_hash(data) == hashlib.sha1(data.read_bytes()).hexdigest()
