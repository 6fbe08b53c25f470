"""
Application package initializer.

The API is split into ``core`` (configuration, database, identity and
errors), ``schemas`` (request and response models), ``services``
(catalog reads and the order lifecycle) and versioned routers under
``api``.
"""

from .main import app  # noqa: F401
