"""
Cross-validated training module for the German Credit analysis.

Selects hyperparameters by grid search over repeated stratified k-fold
cross-validation, maximising weighted accuracy. For base models the minority
class of every training fold is upsampled with replacement before fitting;
validation folds are scored untouched.
"""
import pandas as pd
import numpy as np
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from imblearn.over_sampling import RandomOverSampler
from imblearn.pipeline import Pipeline
from sklearn.model_selection import GridSearchCV, RepeatedStratifiedKFold
from sklearn.preprocessing import StandardScaler

from german_credit import config
from german_credit.training_pipeline.metrics import build_scorers
from german_credit.training_pipeline.models import ModelSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainedModel:
    """
    A fitted model together with its resampling results.

    Attributes:
        name: Model name (svm, gbm, glmnet, blender).
        estimator: Pipeline refit on the full training data with best_params.
        best_params: Selected hyperparameters (without pipeline prefix).
        resamples: One row per fold × repeat with every reported metric.
        cv_results: Full grid-search results, one row per candidate.
        feature_names: Columns the model was trained on, in order.
    """
    name: str
    estimator: Pipeline
    best_params: Dict[str, Any]
    resamples: pd.DataFrame
    cv_results: pd.DataFrame
    feature_names: List[str] = field(default_factory=list)

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """Predict labels (0 = Good, 1 = Bad)."""
        return self.estimator.predict(X[self.feature_names])


def build_pipeline(spec: ModelSpec, random_state: int = None) -> Pipeline:
    """
    Assemble the fitting pipeline for one spec.

    Steps: upsample (if spec.upsample) → scale (if spec.scale) → model.
    The upsampling step only runs during fit, so predictions and validation
    scores always use the original rows.

    Args:
        spec: Model specification.
        random_state: Seed for the sampler and estimator. If None, uses config.RANDOM_STATE.

    Returns:
        Unfitted imbalanced-learn Pipeline.
    """
    if random_state is None:
        random_state = config.RANDOM_STATE

    steps = []
    if spec.upsample:
        steps.append(('upsample', RandomOverSampler(random_state=random_state)))
    if spec.scale:
        steps.append(('scale', StandardScaler()))
    steps.append(('model', spec.make_estimator(random_state)))

    return Pipeline(steps)


def extract_resamples(
    cv_results: Dict[str, np.ndarray],
    candidate_index: int,
    cv_folds: int,
    cv_repeats: int
) -> pd.DataFrame:
    """
    Collect per-split test scores of one grid candidate.

    RepeatedStratifiedKFold yields all folds of a repeat before the next
    repeat starts, so split i belongs to repeat i // cv_folds.

    Returns:
        DataFrame with repeat, fold and one column per reported metric.
    """
    rows = []
    for split in range(cv_folds * cv_repeats):
        row = {'repeat': split // cv_folds + 1, 'fold': split % cv_folds + 1}
        for metric in config.REPORT_METRICS:
            row[metric] = float(cv_results[f'split{split}_test_{metric}'][candidate_index])
        rows.append(row)

    return pd.DataFrame(rows)


def train_model(
    spec: ModelSpec,
    X: pd.DataFrame,
    y: pd.Series,
    cv_folds: int = None,
    cv_repeats: int = None,
    random_state: int = None
) -> TrainedModel:
    """
    Select hyperparameters by repeated cross-validation and fit the final model.

    Args:
        spec: Model specification.
        X: Training features.
        y: Training target (0 = Good, 1 = Bad).
        cv_folds: Folds per repeat. If None, uses config.CV_FOLDS.
        cv_repeats: Number of repeats. If None, uses config.CV_REPEATS.
        random_state: Seed for fold assignment, upsampling and estimators.
            If None, uses config.RANDOM_STATE.

    Returns:
        TrainedModel refit on all of X with the parameters that maximise mean
        weighted accuracy across every fold × repeat.

    Example:
        >>> model = train_model(get_svm_spec(), X_train, y_train)
        >>> print(model.best_params)
        {'C': 0.5, 'gamma': 'scale'}
    """
    if cv_folds is None:
        cv_folds = config.CV_FOLDS
    if cv_repeats is None:
        cv_repeats = config.CV_REPEATS
    if random_state is None:
        random_state = config.RANDOM_STATE

    logger.info("=" * 80)
    logger.info(f"TRAINING {spec.name.upper()}")
    logger.info("=" * 80)
    logger.info(f"Resampling: {cv_repeats} × {cv_folds}-fold stratified CV")
    logger.info(f"Upsampling: {'on' if spec.upsample else 'off'}")
    logger.info(f"Objective: Maximize {config.SELECTION_METRIC}")

    pipeline = build_pipeline(spec, random_state)
    param_grid = {f'model__{name}': values for name, values in spec.param_grid.items()}
    cv = RepeatedStratifiedKFold(
        n_splits=cv_folds, n_repeats=cv_repeats, random_state=random_state
    )

    search = GridSearchCV(
        pipeline,
        param_grid,
        scoring=build_scorers(),
        refit=config.SELECTION_METRIC,
        cv=cv,
        n_jobs=config.N_JOBS,
        error_score='raise'
    )
    search.fit(X, y)

    best_params = {
        name.replace('model__', '', 1): value
        for name, value in search.best_params_.items()
    }
    resamples = extract_resamples(search.cv_results_, search.best_index_, cv_folds, cv_repeats)

    logger.info(f"✓ {spec.name} trained")
    logger.info(f"Best {config.SELECTION_METRIC} (CV): {search.best_score_:.4f}")
    logger.info("Best parameters:")
    for param, value in best_params.items():
        logger.info(f"  {param:20s}: {value}")

    return TrainedModel(
        name=spec.name,
        estimator=search.best_estimator_,
        best_params=best_params,
        resamples=resamples,
        cv_results=pd.DataFrame(search.cv_results_),
        feature_names=list(X.columns)
    )


def train_base_models(
    specs: List[ModelSpec],
    X_train: pd.DataFrame,
    y_train: pd.Series,
    cv_folds: int = None,
    cv_repeats: int = None,
    random_state: int = None
) -> Tuple[Dict[str, TrainedModel], Dict[str, str]]:
    """
    Train every base model, isolating failures.

    A model whose fit raises is logged and reported in the failures mapping;
    the remaining models are still trained.

    Returns:
        Tuple of (trained models keyed by name, error messages keyed by name).
    """
    models: Dict[str, TrainedModel] = {}
    failures: Dict[str, str] = {}

    for spec in specs:
        try:
            models[spec.name] = train_model(
                spec, X_train, y_train,
                cv_folds=cv_folds,
                cv_repeats=cv_repeats,
                random_state=random_state
            )
        except Exception as e:
            logger.error(f"❌ Training {spec.name} failed: {e}")
            failures[spec.name] = f"{type(e).__name__}: {e}"

    logger.info(f"Base models trained: {list(models)}; failed: {list(failures)}")

    return models, failures
