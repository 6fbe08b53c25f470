"""Configuration, database access, identity resolution and error types."""
