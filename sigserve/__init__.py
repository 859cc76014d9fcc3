"""Shared libraries for the signature serving shim.

Subpackages:
- ``sigserve.common``: configuration, logging and metrics.
- ``sigserve.swagger``: interface description synthesis from model signatures.
- ``sigserve.runtime``: signature sources and model runtimes (joblib, TensorFlow).

Notes:
- Keep transport code out of here; the FastAPI service lives in
  ``service-model-serving/app``.
"""
