"""
Data loading module for the German Credit analysis.

Reads either the one-hot CSV layout (61 predictors + Class) or the raw UCI
``german.data`` file, and separates predictors from the encoded target.
"""
import pandas as pd
from pathlib import Path
from typing import Optional, Tuple
import logging

from german_credit import config

logger = logging.getLogger(__name__)


def load_raw_data(file_path: Optional[str] = None) -> pd.DataFrame:
    """
    Load the German Credit dataset from disk.

    Files with a ``.data`` suffix are treated as the raw UCI format and decoded
    into the one-hot layout; anything else is read as CSV.

    Args:
        file_path: Path to the data file. If None, uses config.RAW_DATA_PATH.

    Returns:
        DataFrame with predictor columns and the Class column (Good/Bad).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pd.errors.EmptyDataError: If the file is empty.

    Example:
        >>> df = load_raw_data()
        >>> print(df.shape)
        (1000, 62)
    """
    if file_path is None:
        file_path = config.RAW_DATA_PATH
    file_path = Path(file_path)

    logger.info(f"Loading raw data from: {file_path}")

    try:
        if file_path.suffix == ".data":
            raw = pd.read_csv(file_path, sep=r"\s+", header=None, names=config.UCI_COLUMNS)
            df = decode_uci_records(raw)
        else:
            df = pd.read_csv(file_path)
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except pd.errors.EmptyDataError:
        logger.error(f"File is empty: {file_path}")
        raise

    logger.info(f"Loaded {len(df):,} rows × {len(df.columns)} columns")

    if len(df) != config.RAW_DATA_ROWS or len(df.columns) != config.N_PREDICTORS + 1:
        logger.warning(
            f"Unexpected shape {df.shape}; the published dataset has "
            f"{config.RAW_DATA_ROWS} rows × {config.N_PREDICTORS + 1} columns"
        )

    return df


def decode_uci_records(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Decode the coded UCI attributes into the 61-column one-hot layout.

    Numeric attributes are kept as is, Telephone and ForeignWorker become 0/1
    indicators and every other coded attribute is expanded into one column per
    level (``CheckingAccountStatus.lt.0`` etc.), including levels that never
    occur in the data.

    Args:
        raw: DataFrame with the 21 columns in config.UCI_COLUMNS.

    Returns:
        DataFrame with 61 predictors and the Class column.

    Raises:
        ValueError: If an attribute holds a code outside the documented set.
    """
    df = raw[config.NUMERIC_COLUMNS].astype(int)

    for column, mapping in config.BINARY_CODE_MAPPING.items():
        df[column] = _map_codes(raw[column], mapping, column)

    for column, mapping in config.CATEGORICAL_CODE_MAPPING.items():
        levels = list(mapping.values())
        decoded = pd.Categorical(_map_codes(raw[column], mapping, column), categories=levels)
        dummies = pd.get_dummies(decoded, prefix=column, prefix_sep=".", dtype=int)
        dummies.index = raw.index
        df = pd.concat([df, dummies], axis=1)

    df[config.TARGET_COLUMN] = _map_codes(
        raw[config.TARGET_COLUMN], config.UCI_CLASS_MAPPING, config.TARGET_COLUMN
    )

    logger.info(f"Decoded UCI records into {df.shape[1] - 1} predictors")

    return df


def _map_codes(series: pd.Series, mapping: dict, column: str) -> pd.Series:
    mapped = series.map(mapping)
    unknown = series[mapped.isna()].unique().tolist()
    if unknown:
        raise ValueError(f"Unknown codes in '{column}': {unknown}")
    return mapped


def split_features_target(df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.Series]:
    """
    Split dataset into features (X) and encoded target (y).

    Returns:
        Tuple of (X, y) where y is 0 = Good, 1 = Bad.

    Raises:
        KeyError: If the Class column is missing.
        ValueError: If Class holds labels other than Good/Bad.
    """
    if config.TARGET_COLUMN not in df.columns:
        raise KeyError(f"Target column '{config.TARGET_COLUMN}' not found in data")

    invalid = set(df[config.TARGET_COLUMN].unique()) - set(config.VALID_CLASSES)
    if invalid:
        raise ValueError(f"Unexpected class labels: {sorted(map(str, invalid))}")

    y = df[config.TARGET_COLUMN].map(config.TARGET_MAPPING).astype(int)
    X = df.drop(columns=[config.TARGET_COLUMN])

    logger.info(f"Data loaded: X shape = {X.shape}, y shape = {y.shape}")
    logger.info(
        f"Class distribution: "
        f"Good (0) = {(y == 0).sum():,} ({(y == 0).mean()*100:.2f}%), "
        f"Bad (1) = {(y == 1).sum():,} ({(y == 1).mean()*100:.2f}%)"
    )

    return X, y
