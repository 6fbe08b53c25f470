"""
Pydantic schema definitions for API payloads.

Catalog and order models live in their own modules.  Schemas are
separated from the SQL in the service layer to decouple the API
representation from persistence.
"""
