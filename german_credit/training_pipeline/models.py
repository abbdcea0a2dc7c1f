"""
Model specifications for the German Credit analysis.

Each specification bundles an estimator factory with its hyperparameter grid
and tells the trainer whether to upsample and scale. Three base models are
blended by a logistic-regression meta-model:
- svm:     RBF kernel support vector classifier
- gbm:     XGBoost gradient-boosted trees
- glmnet:  elastic-net regularised logistic regression
- blender: plain logistic regression over the base models' predictions
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from sklearn.base import BaseEstimator
from sklearn.linear_model import LogisticRegression
from sklearn.svm import SVC
from xgboost import XGBClassifier

from german_credit import config


@dataclass(frozen=True)
class ModelSpec:
    """
    Recipe for fitting one model family.

    Attributes:
        name: Short model name used in reports.
        make_estimator: Builds an unfitted estimator from a random seed.
        param_grid: Grid of estimator parameters (without pipeline prefix).
        upsample: Balance classes inside every training fold before fitting.
        scale: Center and scale predictors before the estimator.
    """
    name: str
    make_estimator: Callable[[int], BaseEstimator]
    param_grid: Dict[str, list]
    upsample: bool = True
    scale: bool = True


def make_svm(random_state: int) -> SVC:
    return SVC(kernel='rbf', random_state=random_state)


def make_gbm(random_state: int) -> XGBClassifier:
    return XGBClassifier(**config.BASE_XGB_PARAMS, random_state=random_state)


def make_glmnet(random_state: int) -> LogisticRegression:
    # penalty= is removed in scikit-learn 1.10, see the bound in pyproject.toml
    return LogisticRegression(
        penalty='elasticnet',
        solver='saga',
        l1_ratio=0.5,
        max_iter=5000,
        random_state=random_state
    )


def make_blender(random_state: int) -> LogisticRegression:
    return LogisticRegression(max_iter=1000, random_state=random_state)


def get_svm_spec(param_grid: Optional[Dict[str, list]] = None) -> ModelSpec:
    """Kernel SVM spec. If param_grid is None, uses config.SVM_PARAM_GRID."""
    return ModelSpec(
        name='svm',
        make_estimator=make_svm,
        param_grid=param_grid if param_grid is not None else config.SVM_PARAM_GRID
    )


def get_gbm_spec(param_grid: Optional[Dict[str, list]] = None) -> ModelSpec:
    """Boosted-tree spec. If param_grid is None, uses config.GBM_PARAM_GRID."""
    return ModelSpec(
        name='gbm',
        make_estimator=make_gbm,
        param_grid=param_grid if param_grid is not None else config.GBM_PARAM_GRID
    )


def get_glmnet_spec(param_grid: Optional[Dict[str, list]] = None) -> ModelSpec:
    """Elastic-net spec. If param_grid is None, uses config.GLMNET_PARAM_GRID."""
    return ModelSpec(
        name='glmnet',
        make_estimator=make_glmnet,
        param_grid=param_grid if param_grid is not None else config.GLMNET_PARAM_GRID
    )


def get_blender_spec(param_grid: Optional[Dict[str, list]] = None) -> ModelSpec:
    """
    Meta-model spec.

    The blender works on 0/1 predicted labels, so it neither scales nor
    upsamples its training folds.
    """
    return ModelSpec(
        name=config.BLENDER_NAME,
        make_estimator=make_blender,
        param_grid=param_grid if param_grid is not None else config.BLENDER_PARAM_GRID,
        upsample=False,
        scale=False
    )


def get_base_model_specs() -> List[ModelSpec]:
    """Specs for the three base models, in config.BASE_MODEL_NAMES order."""
    return [get_svm_spec(), get_gbm_spec(), get_glmnet_spec()]
