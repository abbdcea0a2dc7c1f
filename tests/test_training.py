"""
Tests for the upsampled repeated cross-validation trainer.

Run with: pytest tests/test_training.py -v
"""
import pytest
import pandas as pd
import numpy as np
from collections import Counter
from dataclasses import replace
from sklearn.model_selection import RepeatedStratifiedKFold

from german_credit import config
from german_credit.feature_pipeline import remove_uninformative_columns
from german_credit.training_pipeline.models import (
    get_base_model_specs,
    get_blender_spec,
    get_gbm_spec,
    get_glmnet_spec
)
from german_credit.training_pipeline.training import (
    build_pipeline,
    extract_resamples,
    train_base_models,
    train_model
)
from conftest import BalanceRecordingClassifier


@pytest.fixture
def train_xy(credit_xy):
    X, y = credit_xy
    X_reduced, _ = remove_uninformative_columns(X)
    return X_reduced, y


class TestPipeline:
    """Test suite for pipeline assembly."""

    def test_base_model_pipeline_steps(self):
        for spec in get_base_model_specs():
            pipeline = build_pipeline(spec, random_state=0)
            assert list(pipeline.named_steps) == ['upsample', 'scale', 'model']

    def test_blender_pipeline_has_no_upsampling(self):
        pipeline = build_pipeline(get_blender_spec(), random_state=0)

        assert list(pipeline.named_steps) == ['model']

    def test_base_spec_names(self):
        assert [spec.name for spec in get_base_model_specs()] == config.BASE_MODEL_NAMES


class TestUpsampling:
    """Test suite for minority-class upsampling inside training folds."""

    def test_cv_fits_are_balanced_and_scoring_uses_raw_folds(self, train_xy, balance_recording_spec):
        X, y = train_xy
        splits = list(RepeatedStratifiedKFold(n_splits=3, n_repeats=2, random_state=0).split(X, y))

        train_model(balance_recording_spec, X, y, cv_folds=3, cv_repeats=2, random_state=0)

        # 6 CV fits then the refit on all rows
        fit_counts = BalanceRecordingClassifier.fit_counts
        expected = [Counter(y.iloc[train_idx].tolist()) for train_idx, _ in splits] + [Counter(y.tolist())]
        assert len(fit_counts) == len(expected) == 7
        for seen, original in zip(fit_counts, expected):
            assert original[0] > original[1]
            assert seen[0] == seen[1] == original[0]

        predict_sizes = BalanceRecordingClassifier.predict_sizes
        val_sizes = [len(val_idx) for _, val_idx in splits]
        assert len(predict_sizes) >= len(splits)
        assert set(predict_sizes) == set(val_sizes)
        assert 2 * max(val_sizes) not in predict_sizes

    def test_fits_without_upsampling_keep_class_balance(self, train_xy, balance_recording_spec):
        X, y = train_xy
        spec = replace(balance_recording_spec, upsample=False)

        train_model(spec, X, y, cv_folds=3, cv_repeats=1, random_state=0)

        for seen in BalanceRecordingClassifier.fit_counts:
            assert seen[0] > seen[1]
        assert BalanceRecordingClassifier.fit_counts[-1] == Counter(y.tolist())


class TestTrainModel:
    """Test suite for grid search over repeated CV."""

    def test_resamples_cover_every_fold_and_repeat(self, train_xy):
        X, y = train_xy
        spec = get_glmnet_spec({'l1_ratio': [0.5], 'C': [0.1, 1.0]})

        model = train_model(spec, X, y, cv_folds=3, cv_repeats=2, random_state=0)

        assert len(model.resamples) == 6
        assert model.resamples[['repeat', 'fold']].drop_duplicates().shape[0] == 6
        assert set(model.resamples.columns) >= set(config.REPORT_METRICS)
        assert model.resamples['weighted_accuracy'].between(0, 1).all()

    def test_best_params_maximise_mean_weighted_accuracy(self, train_xy):
        X, y = train_xy
        spec = get_glmnet_spec({'l1_ratio': [0.5], 'C': [0.01, 1.0]})

        model = train_model(spec, X, y, cv_folds=3, cv_repeats=2, random_state=0)

        best = model.cv_results['mean_test_weighted_accuracy'].max()
        assert set(model.best_params) == {'l1_ratio', 'C'}
        assert model.resamples['weighted_accuracy'].mean() == pytest.approx(best)

    def test_model_refit_on_all_rows(self, train_xy):
        X, y = train_xy
        spec = get_glmnet_spec({'l1_ratio': [0.5], 'C': [1.0]})

        model = train_model(spec, X, y, cv_folds=3, cv_repeats=1, random_state=0)

        assert model.feature_names == list(X.columns)
        assert set(np.unique(model.predict(X))) <= {0, 1}

    def test_same_seed_is_reproducible(self, train_xy, small_specs):
        X, y = train_xy

        for spec in small_specs:
            first = train_model(spec, X, y, cv_folds=3, cv_repeats=2, random_state=11)
            second = train_model(spec, X, y, cv_folds=3, cv_repeats=2, random_state=11)

            assert first.best_params == second.best_params
            pd.testing.assert_frame_equal(first.resamples, second.resamples)
            np.testing.assert_array_equal(first.predict(X), second.predict(X))

    def test_glmnet_applies_l1_penalty(self, train_xy):
        X, y = train_xy
        spec = get_glmnet_spec({'l1_ratio': [1.0], 'C': [0.01]})

        model = train_model(spec, X, y, cv_folds=3, cv_repeats=1, random_state=0)
        coef = model.estimator.named_steps['model'].coef_

        assert model.estimator.named_steps['model'].l1_ratio == 1.0
        assert (coef == 0).sum() > 0

    def test_gbm_grid_matches_config(self):
        spec = get_gbm_spec()

        assert spec.param_grid == config.GBM_PARAM_GRID
        assert spec.param_grid['min_child_weight'] == [10]

    def test_failing_estimator_raises(self, train_xy, failing_spec):
        X, y = train_xy

        with pytest.raises(RuntimeError, match="did not converge"):
            train_model(failing_spec, X, y, cv_folds=3, cv_repeats=1)


class TestExtractResamples:
    """Test suite for per-split score extraction."""

    def test_split_order_is_repeat_major(self):
        cv_results = {}
        for split in range(4):
            for metric in config.REPORT_METRICS:
                cv_results[f'split{split}_test_{metric}'] = np.array([0.0, split / 10])

        resamples = extract_resamples(cv_results, candidate_index=1, cv_folds=2, cv_repeats=2)

        assert resamples['repeat'].tolist() == [1, 1, 2, 2]
        assert resamples['fold'].tolist() == [1, 2, 1, 2]
        assert resamples['accuracy'].tolist() == [0.0, 0.1, 0.2, 0.3]


class TestTrainBaseModels:
    """Test suite for failure isolation across base models."""

    def test_failure_is_recorded_and_others_trained(self, train_xy, failing_spec):
        X, y = train_xy
        specs = [failing_spec, get_glmnet_spec({'l1_ratio': [0.5], 'C': [1.0]})]

        models, failures = train_base_models(specs, X, y, cv_folds=3, cv_repeats=1, random_state=0)

        assert list(models) == ['glmnet']
        assert list(failures) == ['failing']
        assert 'RuntimeError' in failures['failing']
