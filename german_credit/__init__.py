"""
German Credit blending analysis.

Trains an RBF SVM, XGBoost and an elastic-net logistic regression on the
Statlog German Credit data, blends them with a logistic-regression
meta-model and reports cost-weighted cross-validated performance.
"""
__version__ = "0.1.0"
