"""Model serving service package.

Layout:
- ``api``: prediction endpoints and the Swagger document.
- ``loaders``: framework detection and runtime construction.
- ``runtime``: model manager and service-scoped helpers.

Import convenience:
- from app.main import create_app
"""
