"""
German Credit blending analysis - end-to-end run.

Pipeline:
1. Load data
2. Drop linearly dependent and near-zero-variance predictors
3. Stratified train/blend split
4. All-Good baseline on the blending subset
5. Train base models (SVM, XGBoost, elastic net) with upsampled repeated CV
6. Train the logistic-regression blender on the blending subset
7. Report: resampling summary, held-out base-model metrics, model correlation, plots

The blender is fit on the blending subset, so its performance is reported
from its cross-validation resamples only; the held-out table covers the base
models and the baseline, all scored on the same blending rows.
"""
import pandas as pd
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from german_credit import config
from german_credit.feature_pipeline import (
    load_raw_data,
    split_features_target,
    remove_uninformative_columns,
    split_train_blend
)
from german_credit.training_pipeline.blending import train_blender
from german_credit.training_pipeline.evaluation import (
    baseline_metrics,
    evaluate_model,
    get_feature_importance,
    model_correlation,
    plot_feature_importance,
    plot_model_correlation,
    plot_resamples,
    save_report,
    summarize_resamples
)
from german_credit.training_pipeline.models import ModelSpec, get_base_model_specs
from german_credit.training_pipeline.training import TrainedModel, train_base_models

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything produced by one run of the analysis."""
    base_models: Dict[str, TrainedModel]
    blender: Optional[TrainedModel]
    failures: Dict[str, str]
    dropped_columns: Dict[str, List[str]]
    train_index: pd.Index
    blend_index: pd.Index
    baseline: Dict[str, float]
    resample_summary: pd.DataFrame
    holdout_metrics: pd.DataFrame
    correlation: Optional[pd.DataFrame] = None
    report_paths: Dict[str, Path] = field(default_factory=dict)


def run_analysis(
    df: Optional[pd.DataFrame] = None,
    data_path: Optional[str] = None,
    random_state: int = None,
    cv_folds: int = None,
    cv_repeats: int = None,
    blend_size: float = None,
    base_specs: Optional[List[ModelSpec]] = None,
    blender_spec: Optional[ModelSpec] = None,
    output_dir: Optional[Path] = None,
    make_plots: bool = True,
    save_tables: bool = True
) -> AnalysisResult:
    """
    Execute the complete analysis.

    Args:
        df: Dataset with predictors and Class column. If None, loaded from data_path.
        data_path: Data file. If None, uses config.RAW_DATA_PATH.
        random_state: Seed for the split, folds, upsampling and estimators.
            If None, uses config.RANDOM_STATE.
        cv_folds: Folds per repeat. If None, uses config.CV_FOLDS.
        cv_repeats: CV repeats. If None, uses config.CV_REPEATS.
        blend_size: Blending subset fraction. If None, uses config.BLEND_SIZE.
        base_specs: Base model specs. If None, uses get_base_model_specs().
        blender_spec: Meta-model spec. If None, uses get_blender_spec().
        output_dir: Report directory. If None, uses config.OUTPUT_DIR.
        make_plots: If True, write PNG plots into output_dir.
        save_tables: If True, write CSV tables into output_dir.

    Returns:
        AnalysisResult with models, failures and report tables.

    Raises:
        ValueError: If every base model fails to train.

    Example:
        >>> result = run_analysis(random_state=42)
        >>> print(result.holdout_metrics['weighted_accuracy'])
    """
    if random_state is None:
        random_state = config.RANDOM_STATE
    if base_specs is None:
        base_specs = get_base_model_specs()
    if output_dir is None:
        output_dir = config.OUTPUT_DIR
    output_dir = Path(output_dir)

    logger.info("=" * 80)
    logger.info("GERMAN CREDIT BLENDING ANALYSIS")
    logger.info("=" * 80)
    logger.info(f"Seed: {random_state}")

    # Step 1: Load data
    logger.info("\n[1/7] Loading data...")
    if df is None:
        df = load_raw_data(data_path)
    X, y = split_features_target(df)

    # Step 2: Column filtering
    logger.info("\n[2/7] Removing uninformative predictors...")
    X, dropped_columns = remove_uninformative_columns(X)

    # Step 3: Train/blend split
    logger.info("\n[3/7] Splitting train/blend...")
    X_train, X_blend, y_train, y_blend = split_train_blend(
        X, y, blend_size=blend_size, random_state=random_state
    )

    # Step 4: Baseline
    logger.info("\n[4/7] Scoring all-Good baseline on the blending subset...")
    baseline = baseline_metrics(y_blend)

    # Step 5: Base models
    logger.info("\n[5/7] Training base models...")
    base_models, failures = train_base_models(
        base_specs, X_train, y_train,
        cv_folds=cv_folds,
        cv_repeats=cv_repeats,
        random_state=random_state
    )
    if not base_models:
        raise ValueError(f"Every base model failed to train: {failures}")

    # Step 6: Blender
    logger.info("\n[6/7] Training blender...")
    blender = None
    try:
        blender = train_blender(
            base_models, X_blend, y_blend,
            cv_folds=cv_folds,
            cv_repeats=cv_repeats,
            random_state=random_state,
            spec=blender_spec
        )
    except Exception as e:
        logger.error(f"❌ Training blender failed: {e}")
        failures[config.BLENDER_NAME] = f"{type(e).__name__}: {e}"

    # Step 7: Report
    logger.info("\n[7/7] Reporting...")
    all_models = dict(base_models)
    if blender is not None:
        all_models[blender.name] = blender

    resample_summary = summarize_resamples(all_models)

    holdout = {name: evaluate_model(model, X_blend, y_blend) for name, model in base_models.items()}
    holdout['baseline'] = baseline
    holdout_metrics = pd.DataFrame(holdout).T[config.REPORT_METRICS]

    correlation = model_correlation(base_models) if len(base_models) > 1 else None

    logger.info("\nResampling summary:\n" + resample_summary.round(4).to_string())
    logger.info("\nHeld-out (blending subset) metrics:\n" + holdout_metrics.round(4).to_string())
    if blender is not None:
        logger.info(
            f"Blender {config.SELECTION_METRIC} (CV on blending subset): "
            f"{blender.resamples[config.SELECTION_METRIC].mean():.4f}"
        )
    if correlation is not None:
        logger.info("\nBase model correlation:\n" + correlation.round(3).to_string())

    report_paths: Dict[str, Path] = {}
    if save_tables:
        tables = {
            'resample_summary': resample_summary,
            'holdout_metrics': holdout_metrics,
        }
        if correlation is not None:
            tables['model_correlation'] = correlation
        report_paths.update(save_report(tables, output_dir))

    if make_plots:
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / "resamples.png"
        plot_resamples(all_models, save_path=path)
        report_paths['resamples_plot'] = path

        for name, model in base_models.items():
            importance_df = get_feature_importance(
                model, X_train, y_train, random_state=random_state
            )
            path = output_dir / f"importance_{name}.png"
            plot_feature_importance(
                importance_df,
                title=f"Top {len(importance_df)} Feature Importances ({name})",
                save_path=path
            )
            report_paths[f'importance_{name}_plot'] = path

        if correlation is not None:
            path = output_dir / "model_correlation.png"
            plot_model_correlation(correlation, save_path=path)
            report_paths['correlation_plot'] = path

    logger.info("\n" + "=" * 80)
    logger.info("✓ ANALYSIS COMPLETE")
    logger.info("=" * 80)
    if failures:
        logger.warning(f"Models that failed to train: {list(failures)}")

    return AnalysisResult(
        base_models=base_models,
        blender=blender,
        failures=failures,
        dropped_columns=dropped_columns,
        train_index=X_train.index,
        blend_index=X_blend.index,
        baseline=baseline,
        resample_summary=resample_summary,
        holdout_metrics=holdout_metrics,
        correlation=correlation,
        report_paths=report_paths
    )
