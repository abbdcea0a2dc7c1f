"""
Feature pipeline for the German Credit analysis.

Public API for loading the dataset, filtering uninformative predictors and
splitting off the blending subset.
"""
from german_credit.feature_pipeline.load import (
    load_raw_data,
    decode_uci_records,
    split_features_target
)
from german_credit.feature_pipeline.preprocessing import (
    find_linear_combinations,
    near_zero_variance,
    remove_uninformative_columns
)
from german_credit.feature_pipeline.split import split_train_blend

__all__ = [
    'load_raw_data',
    'decode_uci_records',
    'split_features_target',
    'find_linear_combinations',
    'near_zero_variance',
    'remove_uninformative_columns',
    'split_train_blend',
]
