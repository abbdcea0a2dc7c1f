"""
Training pipeline for the German Credit analysis.

Contains modules for the weighted-accuracy metric, model specifications,
upsampled cross-validated training, blending, and evaluation/reporting.
"""
