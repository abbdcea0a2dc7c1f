"""
Shared fixtures for the German Credit test suite.

Builds a synthetic dataset in the raw UCI coding so tests exercise the same
decoding and filtering path as the real data, with small grids and few folds
to keep model training fast.
"""
import matplotlib
matplotlib.use("Agg")

import pytest
import pandas as pd
from collections import Counter
import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin

from german_credit import config
from german_credit.feature_pipeline import (
    decode_uci_records,
    remove_uninformative_columns,
    split_features_target,
    split_train_blend
)
from german_credit.training_pipeline.models import (
    ModelSpec,
    get_svm_spec,
    get_gbm_spec,
    get_glmnet_spec,
    get_blender_spec
)
from german_credit.training_pipeline.training import train_base_models

N_ROWS = 300
N_BAD = 90


def make_uci_records(n_rows: int = N_ROWS, n_bad: int = N_BAD, seed: int = 0) -> pd.DataFrame:
    """Random UCI-coded applications; the riskiest n_bad rows are labelled Bad (2)."""
    rng = np.random.default_rng(seed)
    raw = pd.DataFrame(index=range(n_rows))

    for column in config.UCI_COLUMNS[:-1]:
        if column in config.NUMERIC_COLUMNS:
            raw[column] = rng.integers(1, 5, n_rows)
        elif column in config.BINARY_CODE_MAPPING:
            raw[column] = rng.choice(list(config.BINARY_CODE_MAPPING[column]), n_rows)
        else:
            codes = [c for c in config.CATEGORICAL_CODE_MAPPING[column] if c != "A47"]
            raw[column] = rng.choice(codes, n_rows)

    raw["Duration"] = rng.integers(6, 60, n_rows)
    raw["Amount"] = rng.integers(250, 15000, n_rows)
    raw["Age"] = rng.integers(19, 75, n_rows)

    risk = (
        1.5 * (raw["CheckingAccountStatus"] == "A11") +
        raw["Duration"] / 24 +
        rng.normal(0, 0.5, n_rows)
    )
    bad_rows = risk.sort_values(ascending=False).index[:n_bad]
    raw[config.TARGET_COLUMN] = 1
    raw.loc[bad_rows, config.TARGET_COLUMN] = 2

    return raw[config.UCI_COLUMNS]


@pytest.fixture
def uci_raw():
    """Synthetic records in raw UCI coding (300 rows, 30% Bad)."""
    return make_uci_records()


@pytest.fixture
def credit_df(uci_raw):
    """Synthetic dataset in the 61-predictor one-hot layout."""
    return decode_uci_records(uci_raw)


@pytest.fixture
def credit_xy(credit_df):
    """Features and encoded target of the synthetic dataset."""
    return split_features_target(credit_df)


@pytest.fixture
def small_specs():
    """Base model specs with tiny grids."""
    return [
        get_svm_spec({"C": [0.5, 1.0], "gamma": ["scale"]}),
        get_gbm_spec({"n_estimators": [20], "max_depth": [1, 2], "learning_rate": [0.1]}),
        get_glmnet_spec({"l1_ratio": [0.5], "C": [0.1, 1.0]}),
    ]


@pytest.fixture
def blender_spec():
    return get_blender_spec()


@pytest.fixture(scope="session")
def trained_base_models():
    """Base models trained once per session on the synthetic training subset."""
    X, y = split_features_target(decode_uci_records(make_uci_records()))
    X, _ = remove_uninformative_columns(X)
    X_train, X_blend, y_train, y_blend = split_train_blend(X, y, random_state=0)
    specs = [
        get_svm_spec({"C": [1.0], "gamma": ["scale"]}),
        get_gbm_spec({"n_estimators": [20], "max_depth": [2], "learning_rate": [0.1]}),
        get_glmnet_spec({"l1_ratio": [0.5], "C": [1.0]}),
    ]
    models, _ = train_base_models(specs, X_train, y_train, cv_folds=3, cv_repeats=2, random_state=0)
    return models, X_train, X_blend, y_train, y_blend


class FailingClassifier(ClassifierMixin, BaseEstimator):
    """Estimator whose fit always fails, standing in for a non-converging model."""

    def __init__(self, alpha=1.0):
        self.alpha = alpha

    def fit(self, X, y):
        raise RuntimeError("solver did not converge")

    def predict(self, X):
        return np.zeros(len(X), dtype=int)


class RecordingClassifier(ClassifierMixin, BaseEstimator):
    """Majority-class estimator that records the row labels of every fit."""

    fitted_indices = []

    def __init__(self, alpha=1.0):
        self.alpha = alpha

    def fit(self, X, y):
        RecordingClassifier.fitted_indices.append(set(X.index))
        self.classes_ = np.unique(y)
        self.majority_ = pd.Series(y).mode().iloc[0]
        return self

    def predict(self, X):
        return np.full(len(X), self.majority_)


class BalanceRecordingClassifier(ClassifierMixin, BaseEstimator):
    """Majority-class estimator that records class counts at fit and row counts at predict."""

    fit_counts = []
    predict_sizes = []

    def __init__(self, alpha=1.0):
        self.alpha = alpha

    def fit(self, X, y):
        BalanceRecordingClassifier.fit_counts.append(Counter(np.asarray(y).tolist()))
        self.classes_ = np.unique(y)
        return self

    def predict(self, X):
        BalanceRecordingClassifier.predict_sizes.append(len(X))
        return np.full(len(X), self.classes_[0])


@pytest.fixture
def failing_spec():
    return ModelSpec(
        name='failing',
        make_estimator=lambda random_state: FailingClassifier(),
        param_grid={'alpha': [1.0]}
    )


@pytest.fixture
def recording_spec():
    """Spec without upsampling or scaling so fitted rows keep their labels."""
    RecordingClassifier.fitted_indices.clear()
    return ModelSpec(
        name='recording',
        make_estimator=lambda random_state: RecordingClassifier(),
        param_grid={'alpha': [1.0]},
        upsample=False,
        scale=False
    )


@pytest.fixture
def balance_recording_spec():
    """Upsampled spec whose estimator records what each fit and predict sees."""
    BalanceRecordingClassifier.fit_counts.clear()
    BalanceRecordingClassifier.predict_sizes.clear()
    return ModelSpec(
        name='balance_recording',
        make_estimator=lambda random_state: BalanceRecordingClassifier(),
        param_grid={'alpha': [1.0]},
        upsample=True,
        scale=False
    )
