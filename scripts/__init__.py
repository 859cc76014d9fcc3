"""Utility scripts for operating the serving shim.

Scripts include:
- ``export_swagger.py``: write the Swagger document of a model directory.
"""
