"""Exceptions raised by the pagination engine."""


class PageforgeError(Exception):
    """Base class for all pageforge errors."""


class ConfigurationError(PageforgeError):
    """Raised when a list request cannot be turned into a query.

    Covers a missing data source (neither a prebuilt query nor a repository),
    unknown relations or columns, and malformed column references.
    """


class UnsupportedKeyType(PageforgeError):
    """Raised when a primary-key value has no canonical string form."""

    def __init__(self, value: object):
        self.type_name = type(value).__qualname__
        super().__init__(f"Unsupported primary key type: {self.type_name}")
