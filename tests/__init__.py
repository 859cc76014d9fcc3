"""Tests for the signature serving shim.

Covers document synthesis (dtype classification, schema derivation,
assembly), request conversion, runtimes and the HTTP service. The
SavedModel tests run only when tensorflow is installed.
"""
