# cli/classify.py

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

import json
import logging
from pathlib import Path

import click

from config import KNNConfig
from knn.base import KNNError
from knn.dataset import DatasetError
from logging_setups import setup_logger
from pipeline.classify_pipeline import process_iris_file


@click.command()
@click.option('--data', '-d', default=None, help='Headerless iris.data CSV file [env IRIS_KNN_DATA, default iris.data]')
@click.option('--k', '-k', 'k', type=int, default=None, help='Number of neighbors that vote [env IRIS_KNN_K, default 3]')
@click.option('--train-fraction', '-f', type=float, default=None,
              help='Probability of a record going to the training set [env IRIS_KNN_TRAIN_FRACTION, default 0.4]')
@click.option('--seed', '-s', type=int, default=None, help='Seed for the train/test split [env IRIS_KNN_SEED]')
@click.option('--report', type=click.Path(dir_okay=False), default=None, help='Write run metadata as JSON to this file')
@click.option('--log-file', default='app.log', show_default=True, help='Log file path')
@click.option('--log-level', default='INFO', show_default=True,
              type=click.Choice(['DEBUG','INFO','WARNING','ERROR','CRITICAL'], case_sensitive=False))
def classify(data, k, train_fraction, seed, report, log_file, log_level):
    """
    Classify Iris records with k-nearest-neighbors and print the accuracy.

    Example command:
        python -m cli.classify --data iris.data -k 3 --train-fraction 0.4 --seed 42
    """
    level = getattr(logging, log_level.upper())
    cli_logger = setup_logger(name='cli.classify', log_file=log_file, level=level, console=True)
    # also wire up the pipeline and core loggers
    setup_logger(name='pipeline', log_file=log_file, level=level, console=True)
    setup_logger(name='knn', log_file=log_file, level=level, console=True)

    try:
        config = KNNConfig.from_env()
        if data is not None:
            config.data_path = data
        if k is not None:
            config.k = k
        if train_fraction is not None:
            config.train_fraction = train_fraction
        if seed is not None:
            config.seed = seed
        config.validate()

        cli_logger.info(f"Starting classification of {config.data_path}")
        result = process_iris_file(config, echo=click.echo)
    except FileNotFoundError as e:
        cli_logger.error(f"Data file not found: {e.filename}")
        raise click.ClickException(f"Data file not found: {e.filename}")
    except OSError as e:
        cli_logger.error(f"Cannot read data file {e.filename}: {e.strerror}")
        raise click.ClickException(f"Cannot read data file {e.filename}: {e.strerror}")
    except (KNNError, DatasetError) as e:
        cli_logger.error(f"Classification failed: {e}")
        raise click.ClickException(str(e))

    if report:
        try:
            Path(report).write_text(json.dumps(result.to_metadata(), indent=2), encoding="utf-8")
        except OSError as e:
            cli_logger.error(f"Cannot write run report {report}: {e.strerror}")
            raise click.ClickException(f"Cannot write run report {report}: {e.strerror}")
        cli_logger.info(f"Run report written to {report}")
    cli_logger.info("Completed classification.")


if __name__ == '__main__':
    classify()
