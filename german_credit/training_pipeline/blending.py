"""
Blending stage for the German Credit analysis.

The base models predict labels for the held-out blending subset; a logistic
regression then learns how to combine those predictions. The blender is
cross-validated like the base models but without upsampling.
"""
import pandas as pd
import numpy as np
import logging
from typing import Dict, Optional

from german_credit.training_pipeline.models import ModelSpec, get_blender_spec
from german_credit.training_pipeline.training import TrainedModel, train_model

logger = logging.getLogger(__name__)


def build_blend_features(
    models: Dict[str, TrainedModel],
    X: pd.DataFrame
) -> pd.DataFrame:
    """
    Build the meta-model input table.

    Args:
        models: Trained base models keyed by name.
        X: Rows to predict (normally the blending subset).

    Returns:
        DataFrame indexed like X with one 0/1 column per base model.

    Example:
        >>> blend_X = build_blend_features(base_models, X_blend)
        >>> print(blend_X.columns.tolist())
        ['svm', 'gbm', 'glmnet']
    """
    features = pd.DataFrame(
        {name: model.predict(X) for name, model in models.items()},
        index=X.index
    ).astype(int)

    for name in features.columns:
        if features[name].nunique() == 1:
            logger.warning(
                f"{name} predicts a constant label ({features[name].iloc[0]}) "
                f"on {len(features)} rows; its column carries no information"
            )

    return features


def train_blender(
    models: Dict[str, TrainedModel],
    X_blend: pd.DataFrame,
    y_blend: pd.Series,
    cv_folds: int = None,
    cv_repeats: int = None,
    random_state: int = None,
    spec: Optional[ModelSpec] = None
) -> TrainedModel:
    """
    Fit the logistic-regression meta-model on the base models' predictions.

    Args:
        models: Trained base models keyed by name. None of them may have
            seen X_blend during training.
        X_blend: Blending subset features.
        y_blend: Blending subset target.
        cv_folds: Folds per repeat. If None, uses config.CV_FOLDS.
        cv_repeats: Number of repeats. If None, uses config.CV_REPEATS.
        random_state: Seed. If None, uses config.RANDOM_STATE.
        spec: Meta-model spec. If None, uses get_blender_spec().

    Returns:
        TrainedModel whose features are the base model names.

    Raises:
        ValueError: If no base model is available.
    """
    if not models:
        raise ValueError("Cannot blend: no trained base models available")
    if spec is None:
        spec = get_blender_spec()

    logger.info(f"Blending {len(models)} base models on {len(X_blend):,} rows: {list(models)}")

    blend_X = build_blend_features(models, X_blend)

    return train_model(
        spec, blend_X, y_blend,
        cv_folds=cv_folds,
        cv_repeats=cv_repeats,
        random_state=random_state
    )


def predict_blend(
    blender: TrainedModel,
    models: Dict[str, TrainedModel],
    X: pd.DataFrame
) -> np.ndarray:
    """Predict labels for X by running the base models and then the blender."""
    return blender.predict(build_blend_features(models, X))
