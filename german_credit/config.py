"""
Configuration module for the German Credit blending analysis.

Contains all constants, file paths, column names, cost settings and
hyperparameter grids used throughout the pipeline.
"""
import os
from pathlib import Path
from typing import List, Dict

# ============================================================================
# FILE PATHS
# ============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
RAW_DATA_PATH = Path(
    os.getenv('GERMAN_CREDIT_DATA_PATH', PROJECT_ROOT / "data" / "raw" / "german_credit.csv")
)
OUTPUT_DIR = Path(
    os.getenv('GERMAN_CREDIT_OUTPUT_DIR', PROJECT_ROOT / "reports")
)

# ============================================================================
# TARGET DEFINITION
# ============================================================================
TARGET_COLUMN = "Class"
VALID_CLASSES = ["Good", "Bad"]
TARGET_MAPPING = {"Good": 0, "Bad": 1}  # 0=Good, 1=Bad
POSITIVE_CLASS = 1
NEGATIVE_CLASS = 0

# UCI german.data encodes the class as 1 (good) / 2 (bad)
UCI_CLASS_MAPPING = {1: "Good", 2: "Bad"}

# ============================================================================
# COST MATRIX
# ============================================================================
# Rows = true class, columns = predicted class. Labelling a Bad applicant as
# Good costs five times more than turning away a Good one.
COST_MATRIX: Dict[str, Dict[str, float]] = {
    "Good": {"Good": 0.0, "Bad": 1.0},
    "Bad": {"Good": 5.0, "Bad": 0.0},
}
FALSE_POSITIVE_COST = COST_MATRIX["Good"]["Bad"]
FALSE_NEGATIVE_COST = COST_MATRIX["Bad"]["Good"]

# ============================================================================
# UCI RAW FORMAT
# ============================================================================
# Attribute order of the space-separated german.data file
UCI_COLUMNS: List[str] = [
    "CheckingAccountStatus", "Duration", "CreditHistory", "Purpose", "Amount",
    "SavingsAccountBonds", "EmploymentDuration", "InstallmentRatePercentage",
    "Personal", "OtherDebtorsGuarantors", "ResidenceDuration", "Property",
    "Age", "OtherInstallmentPlans", "Housing", "NumberExistingCredits", "Job",
    "NumberPeopleMaintenance", "Telephone", "ForeignWorker", TARGET_COLUMN,
]

NUMERIC_COLUMNS: List[str] = [
    "Duration", "Amount", "InstallmentRatePercentage", "ResidenceDuration",
    "Age", "NumberExistingCredits", "NumberPeopleMaintenance",
]

# Binary attributes kept as a single 0/1 column
BINARY_CODE_MAPPING: Dict[str, Dict[str, int]] = {
    "Telephone": {"A191": 0, "A192": 1},
    "ForeignWorker": {"A201": 1, "A202": 0},
}

# Coded categorical attributes -> level names used for one-hot columns.
# Every level is listed so the encoded layout is fixed even when a level
# never occurs (A47 / Vacation is absent from the published data).
CATEGORICAL_CODE_MAPPING: Dict[str, Dict[str, str]] = {
    "CheckingAccountStatus": {
        "A11": "lt.0", "A12": "0.to.200", "A13": "gt.200", "A14": "none",
    },
    "CreditHistory": {
        "A30": "NoCredit.AllPaid", "A31": "ThisBank.AllPaid", "A32": "PaidDuly",
        "A33": "Delay", "A34": "Critical",
    },
    "Purpose": {
        "A40": "NewCar", "A41": "UsedCar", "A42": "Furniture.Equipment",
        "A43": "Radio.Television", "A44": "DomesticAppliance", "A45": "Repairs",
        "A46": "Education", "A47": "Vacation", "A48": "Retraining",
        "A49": "Business", "A410": "Other",
    },
    "SavingsAccountBonds": {
        "A61": "lt.100", "A62": "100.to.500", "A63": "500.to.1000",
        "A64": "gt.1000", "A65": "Unknown",
    },
    "EmploymentDuration": {
        "A72": "lt.1", "A73": "1.to.4", "A74": "4.to.7", "A75": "gt.7",
        "A71": "Unemployed",
    },
    "Personal": {
        "A91": "Male.Divorced.Seperated", "A92": "Female.NotSingle",
        "A93": "Male.Single", "A94": "Male.Married.Widowed",
        "A95": "Female.Single",
    },
    "OtherDebtorsGuarantors": {
        "A101": "None", "A102": "CoApplicant", "A103": "Guarantor",
    },
    "Property": {
        "A121": "RealEstate", "A122": "Insurance", "A123": "CarOther",
        "A124": "Unknown",
    },
    "OtherInstallmentPlans": {
        "A141": "Bank", "A142": "Stores", "A143": "None",
    },
    "Housing": {
        "A151": "Rent", "A152": "Own", "A153": "ForFree",
    },
    "Job": {
        "A171": "UnemployedUnskilled", "A172": "UnskilledResident",
        "A173": "SkilledEmployee", "A174": "Management.SelfEmp.HighlyQualified",
    },
}

# ============================================================================
# EXPECTED DIMENSIONS (for validation)
# ============================================================================
RAW_DATA_ROWS = 1_000
N_PREDICTORS = 61

# ============================================================================
# PREPROCESSING
# ============================================================================
# Near-zero-variance thresholds: ratio of the most common value to the second
# most common, and percentage of distinct values.
NZV_FREQ_CUT = 95 / 5
NZV_UNIQUE_CUT = 10.0

# ============================================================================
# TRAINING CONFIGURATION
# ============================================================================
RANDOM_STATE = 42
BLEND_SIZE = 0.3
CV_FOLDS = 5
CV_REPEATS = 3
N_JOBS = 1  # GridSearchCV workers

BASE_MODEL_NAMES = ["svm", "gbm", "glmnet"]
BLENDER_NAME = "blender"

# Hyperparameter grids (keys are estimator parameters, prefixed at build time)
SVM_PARAM_GRID = {
    "C": [0.25, 0.5, 1.0],
    "gamma": ["scale", 0.01],
}

GBM_PARAM_GRID = {
    "n_estimators": [50, 100, 150],
    "max_depth": [1, 2, 3],
    "learning_rate": [0.1],
    "min_child_weight": [10],
}

GLMNET_PARAM_GRID = {
    "l1_ratio": [0.1, 0.55, 1.0],
    "C": [0.01, 0.1, 1.0],
}

BLENDER_PARAM_GRID = {
    "C": [1.0],
}

BASE_XGB_PARAMS = {
    "objective": "binary:logistic",
    "eval_metric": "logloss",
    "n_jobs": 1,
    "verbosity": 0,
}

# ============================================================================
# REPORTING
# ============================================================================
REPORT_METRICS = ["accuracy", "weighted_accuracy", "precision", "recall", "specificity"]
SELECTION_METRIC = "weighted_accuracy"
TOP_N_FEATURES = 20
