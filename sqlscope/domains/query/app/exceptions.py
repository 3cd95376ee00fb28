"""Custom exceptions for schema services."""


class SchemaServiceError(Exception):
    """Base exception for schema service failures."""


class SchemaLoadError(SchemaServiceError):
    """Exception raised when a schema source cannot be read."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not load schema from {source}: {reason}")
