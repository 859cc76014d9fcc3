"""Model loaders for the supported runtimes.

Loaders detect how a model directory was exported (SavedModel or joblib
estimator with a signature manifest) and build the matching runtime.
"""
