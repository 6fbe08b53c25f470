"""
Top-level package for the Laundry Order API.

All functionality lives in submodules under ``app``; this marker makes
``laundry_api.app.main`` importable from the project root and tests.
"""

__all__ = []
