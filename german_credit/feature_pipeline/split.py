"""
Stratified partitioning into the base-model training subset and the
held-out blending subset.
"""
import pandas as pd
import logging
from sklearn.model_selection import train_test_split
from typing import Tuple

from german_credit import config

logger = logging.getLogger(__name__)


def split_train_blend(
    X: pd.DataFrame,
    y: pd.Series,
    blend_size: float = None,
    random_state: int = None
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """
    Perform stratified train/blend split.

    Base models only ever see the training subset; the blending subset is
    reserved for the meta-model.

    Args:
        X: Feature matrix.
        y: Target vector.
        blend_size: Fraction of rows for the blending subset. If None, uses config.BLEND_SIZE.
        random_state: Random seed. If None, uses config.RANDOM_STATE.

    Returns:
        Tuple of (X_train, X_blend, y_train, y_blend). Original row labels are
        preserved in the indexes.

    Example:
        >>> X_train, X_blend, y_train, y_blend = split_train_blend(X, y)
        >>> print(X_train.shape, X_blend.shape)
        (700, 49) (300, 49)
    """
    if blend_size is None:
        blend_size = config.BLEND_SIZE
    if random_state is None:
        random_state = config.RANDOM_STATE

    X_train, X_blend, y_train, y_blend = train_test_split(
        X, y,
        test_size=blend_size,
        random_state=random_state,
        stratify=y
    )

    logger.info("Train/blend split complete:")
    logger.info(f"  Train: {X_train.shape[0]:,} samples")
    logger.info(f"  Blend: {X_blend.shape[0]:,} samples")
    logger.info(
        f"  Train class distribution: "
        f"Good = {(y_train == 0).sum():,} ({(y_train == 0).mean()*100:.2f}%), "
        f"Bad = {(y_train == 1).sum():,} ({(y_train == 1).mean()*100:.2f}%)"
    )

    return X_train, X_blend, y_train, y_blend
