"""
Shared constants: label tolerance, learner defaults, and experiment knobs.
"""

# Labels are real scalars; any two within this distance are the same class.
LABEL_TOLERANCE = 1e-3

POSITIVE_LABEL = 1.0
NEGATIVE_LABEL = -1.0

DEFAULT_LEARNING_RATE = 0.01
DEFAULT_ITERATIONS = 10
DEFAULT_L2 = 0.001

# Experiment defaults used by main.py
DEFAULT_FOLDS = 10
DEFAULT_DEPTHS = (1, 2, 3)
DEFAULT_BEST_DEPTH = 19
DEFAULT_SWEEP_ITERATIONS = (5, 10, 20, 50, 100)
DEFAULT_SWEEP_LEARNING_RATES = (0.001, 0.005, 0.01, 0.05, 0.1)
DEFAULT_HOLDOUT_FRACTION = 0.8
DEFAULT_REPEATS = 10
DEFAULT_RANDOM_STATE = 42
FINE_TUNE_STEP = 5
FINE_TUNE_MAX_ITERATIONS = 200
