class DataTablesError(Exception):
    """Base class for everything raised while processing a DataTables request."""


class ConfigurationError(DataTablesError):
    """Invalid processor options: unknown model, bad column keys, bad flags."""


class RenderError(DataTablesError):
    """A column's display logic could not read what it needed from a record."""

    def __init__(self, column: str, message: str | None = None):
        self.column = column
        super().__init__(message or f"Undefined property '{column}'")


class SerializationError(DataTablesError):
    """The output could not be encoded as JSON."""
