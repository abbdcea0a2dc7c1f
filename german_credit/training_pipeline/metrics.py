"""
Classification metrics for the German Credit analysis.

Provides the cost-weighted accuracy used for model selection together with
the standard metrics reported alongside it:
- Accuracy
- Weighted accuracy (misclassification costs from config.COST_MATRIX)
- Precision and Recall on the Bad class
- Specificity (recall on the Good class)
"""
import numpy as np
from sklearn.metrics import accuracy_score, precision_score, recall_score, make_scorer
from typing import Any, Callable, Dict

from german_credit import config

def weighted_accuracy(
    y_true: Any,
    y_pred: Any,
    positive_label: Any = None,
    false_positive_cost: float = None,
    false_negative_cost: float = None
) -> float:
    """
    Calculate cost-weighted accuracy.

    Formula: 1 - total_cost / (n_positive * fn_cost + n_negative * fp_cost)

    Every missed positive costs ``false_negative_cost`` and every wrongly
    flagged negative costs ``false_positive_cost``. The denominator is the cost
    of getting every record wrong, so the score stays on a 0-1 scale and
    equals plain accuracy when both costs are 1.

    Args:
        y_true: Observed labels.
        y_pred: Predicted labels.
        positive_label: Label of the positive class. If None, uses config.POSITIVE_CLASS.
        false_positive_cost: Cost of a negative predicted positive. If None, uses config.FALSE_POSITIVE_COST.
        false_negative_cost: Cost of a positive predicted negative. If None, uses config.FALSE_NEGATIVE_COST.

    Returns:
        Weighted accuracy in [0, 1].

    Raises:
        ValueError: If lengths differ, a cost is not positive, or y_true
            lacks either class.

    Example:
        >>> round(weighted_accuracy([1, 1, 0, 0, 0], [0, 0, 0, 0, 0]), 4)
        0.2308
    """
    if positive_label is None:
        positive_label = config.POSITIVE_CLASS
    if false_positive_cost is None:
        false_positive_cost = config.FALSE_POSITIVE_COST
    if false_negative_cost is None:
        false_negative_cost = config.FALSE_NEGATIVE_COST

    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)

    if y_true.shape != y_pred.shape:
        raise ValueError(
            f"y_true and y_pred have different shapes: {y_true.shape} vs {y_pred.shape}"
        )
    if false_positive_cost <= 0 or false_negative_cost <= 0:
        raise ValueError("Misclassification costs must be positive")

    is_positive = y_true == positive_label
    n_positive = int(is_positive.sum())
    n_negative = int((~is_positive).sum())

    if n_positive == 0 or n_negative == 0:
        raise ValueError(
            f"Weighted accuracy needs both classes in y_true "
            f"(positive = {n_positive}, negative = {n_negative})"
        )

    errors = y_true != y_pred
    total_cost = (
        false_negative_cost * np.sum(errors & is_positive) +
        false_positive_cost * np.sum(errors & ~is_positive)
    )
    max_cost = n_positive * false_negative_cost + n_negative * false_positive_cost

    return float(1.0 - total_cost / max_cost)


def weighted_accuracy_scorer(
    positive_label: Any = None,
    false_positive_cost: float = None,
    false_negative_cost: float = None
) -> Callable:
    """Wrap weighted_accuracy as a scikit-learn scorer (greater is better)."""
    return make_scorer(
        weighted_accuracy,
        positive_label=positive_label,
        false_positive_cost=false_positive_cost,
        false_negative_cost=false_negative_cost
    )


def specificity_score(y_true: Any, y_pred: Any, negative_label: Any = None) -> float:
    """True negative rate: recall computed on the negative (Good) class."""
    if negative_label is None:
        negative_label = config.NEGATIVE_CLASS
    return recall_score(y_true, y_pred, pos_label=negative_label, zero_division=0)


def build_scorers() -> Dict[str, Callable]:
    """
    Build the scorer dictionary for multi-metric cross-validation.

    Keys match config.REPORT_METRICS.
    """
    return {
        'accuracy': make_scorer(accuracy_score),
        'weighted_accuracy': weighted_accuracy_scorer(),
        'precision': make_scorer(precision_score, pos_label=config.POSITIVE_CLASS, zero_division=0),
        'recall': make_scorer(recall_score, pos_label=config.POSITIVE_CLASS, zero_division=0),
        'specificity': make_scorer(specificity_score),
    }


def classification_summary(y_true: Any, y_pred: Any) -> Dict[str, float]:
    """
    Compute every reported metric for one set of predictions.

    Args:
        y_true: Observed labels (0 = Good, 1 = Bad).
        y_pred: Predicted labels.

    Returns:
        Dictionary keyed by config.REPORT_METRICS.

    Example:
        >>> summary = classification_summary(y_blend, model.predict(X_blend))
        >>> print(f"Weighted accuracy: {summary['weighted_accuracy']:.4f}")
    """
    return {
        'accuracy': float(accuracy_score(y_true, y_pred)),
        'weighted_accuracy': weighted_accuracy(y_true, y_pred),
        'precision': float(precision_score(y_true, y_pred, pos_label=config.POSITIVE_CLASS, zero_division=0)),
        'recall': float(recall_score(y_true, y_pred, pos_label=config.POSITIVE_CLASS, zero_division=0)),
        'specificity': float(specificity_score(y_true, y_pred)),
    }
