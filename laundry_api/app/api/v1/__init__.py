"""
Version 1 of the API.

Bundles the customer-facing catalog and order endpoints.  Breaking
changes belong in a new version subpackage.
"""
