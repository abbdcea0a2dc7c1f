"""
Column filtering for the German Credit predictors.

The one-hot layout contains full dummy groups, so some columns are exact
linear combinations of others, and a few levels are (almost) never observed.
Both kinds of column are removed before modelling. Centering and scaling is
not done here: it happens inside each model's pipeline so that it is fit on
the training folds only.
"""
import pandas as pd
import numpy as np
from typing import Dict, List, Tuple
import logging

from german_credit import config

logger = logging.getLogger(__name__)


def find_linear_combinations(X: pd.DataFrame) -> List[str]:
    """
    Find columns that are linear combinations of earlier columns.

    Columns are scanned left to right; a column is flagged when appending it
    does not increase the rank of the columns kept so far. All-zero columns
    are flagged as well.

    Args:
        X: Numeric feature matrix.

    Returns:
        Names of the columns to remove, in column order.

    Example:
        >>> find_linear_combinations(df[['a', 'b', 'a_plus_b']])
        ['a_plus_b']
    """
    values = X.to_numpy(dtype=float)
    kept: List[int] = []
    dependent: List[str] = []
    rank = 0

    for idx, column in enumerate(X.columns):
        new_rank = np.linalg.matrix_rank(values[:, kept + [idx]])
        if new_rank > rank:
            kept.append(idx)
            rank = new_rank
        else:
            dependent.append(column)

    logger.info(f"Found {len(dependent)} linearly dependent columns: {dependent}")

    return dependent


def near_zero_variance(
    X: pd.DataFrame,
    freq_cut: float = None,
    unique_cut: float = None
) -> pd.DataFrame:
    """
    Compute near-zero-variance diagnostics for every column.

    A column is flagged when it has a single distinct value, or when the
    ratio of its most common value to the second most common exceeds
    ``freq_cut`` while the share of distinct values is at most ``unique_cut``
    percent.

    Args:
        X: Feature matrix.
        freq_cut: Frequency ratio cutoff. If None, uses config.NZV_FREQ_CUT.
        unique_cut: Percent-unique cutoff. If None, uses config.NZV_UNIQUE_CUT.

    Returns:
        DataFrame indexed by column name with freq_ratio, percent_unique,
        zero_var and nzv columns.
    """
    if freq_cut is None:
        freq_cut = config.NZV_FREQ_CUT
    if unique_cut is None:
        unique_cut = config.NZV_UNIQUE_CUT

    rows = []
    for column in X.columns:
        counts = X[column].value_counts()
        zero_var = len(counts) <= 1
        freq_ratio = np.inf if zero_var else counts.iloc[0] / counts.iloc[1]
        percent_unique = 100.0 * len(counts) / len(X)
        rows.append({
            'feature': column,
            'freq_ratio': freq_ratio,
            'percent_unique': percent_unique,
            'zero_var': zero_var,
            'nzv': zero_var or (freq_ratio > freq_cut and percent_unique <= unique_cut),
        })

    return pd.DataFrame(rows).set_index('feature')


def remove_uninformative_columns(X: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[str, List[str]]]:
    """
    Drop linearly dependent and near-zero-variance columns.

    Args:
        X: Feature matrix (61 predictors for the full dataset).

    Returns:
        Tuple of (reduced copy of X, dict of dropped column lists keyed by
        'linear_combinations' and 'near_zero_variance').
    """
    cols_before = X.shape[1]

    dependent = find_linear_combinations(X)
    X_reduced = X.drop(columns=dependent)

    nzv_table = near_zero_variance(X_reduced)
    low_variance = nzv_table.index[nzv_table['nzv']].tolist()
    X_reduced = X_reduced.drop(columns=low_variance)

    logger.info(f"Dropped {len(low_variance)} near-zero-variance columns: {low_variance}")
    logger.info(f"Predictors: {cols_before} → {X_reduced.shape[1]}")

    return X_reduced, {
        'linear_combinations': dependent,
        'near_zero_variance': low_variance,
    }
