"""
Command-line runner for the German Credit blending analysis.

Executes the complete analysis: load → filter → split → base models →
blender → report.

Usage:
    python run_pipeline.py                          # Default data path and settings
    python run_pipeline.py --data data/raw/german.data
    python run_pipeline.py --seed 7 --cv-repeats 5  # Different resampling
    python run_pipeline.py --no-plots               # Tables only
"""
import argparse
import logging
import sys
from pathlib import Path

from german_credit import config
from german_credit.main import run_analysis

logger = logging.getLogger(__name__)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run the German Credit blending analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with the default CSV (61 predictors + Class)
  python run_pipeline.py

  # Use the raw UCI file instead
  python run_pipeline.py --data data/raw/german.data

  # Quick run with fewer resamples
  python run_pipeline.py --cv-folds 3 --cv-repeats 1 --no-plots
        """
    )
    parser.add_argument(
        '--data',
        type=Path,
        default=None,
        help=f'Data file, CSV or UCI .data (default: {config.RAW_DATA_PATH})'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        default=None,
        help=f'Directory for tables and plots (default: {config.OUTPUT_DIR})'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help=f'Seed for split, folds and upsampling (default: {config.RANDOM_STATE})'
    )
    parser.add_argument(
        '--cv-folds',
        type=int,
        default=None,
        help=f'Folds per CV repeat (default: {config.CV_FOLDS})'
    )
    parser.add_argument(
        '--cv-repeats',
        type=int,
        default=None,
        help=f'Number of CV repeats (default: {config.CV_REPEATS})'
    )
    parser.add_argument(
        '--blend-size',
        type=float,
        default=None,
        help=f'Fraction of rows held out for blending (default: {config.BLEND_SIZE})'
    )
    parser.add_argument(
        '--no-plots',
        action='store_true',
        help='Skip writing plots'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        result = run_analysis(
            data_path=args.data,
            random_state=args.seed,
            cv_folds=args.cv_folds,
            cv_repeats=args.cv_repeats,
            blend_size=args.blend_size,
            output_dir=args.output_dir,
            make_plots=not args.no_plots
        )
    except Exception as e:
        logger.error(f"❌ Analysis failed: {e}")
        sys.exit(1)

    if result.report_paths:
        logger.info("\nReport artifacts:")
        for name, path in result.report_paths.items():
            logger.info(f"  {name:28s}: {path}")


if __name__ == "__main__":
    main()
