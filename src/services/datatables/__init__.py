import logging

from src.services.datatables.columns import ColumnSpec, default_display, normalize_column, normalize_columns, read_field
from src.services.datatables.exceptions import ConfigurationError, DataTablesError, RenderError, SerializationError
from src.services.datatables.params import RequestParams, SortInstruction
from src.services.datatables.processor import TableConfig, TableQueryProcessor
from src.services.datatables.query import QueryOptions, build_query_options
from src.services.datatables.schema import DataTablesResponse

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

__all__ = [
    "TableQueryProcessor",
    "TableConfig",
    "ColumnSpec",
    "RequestParams",
    "SortInstruction",
    "QueryOptions",
    "DataTablesResponse",
    "DataTablesError",
    "ConfigurationError",
    "RenderError",
    "SerializationError",
    "build_query_options",
    "default_display",
    "normalize_column",
    "normalize_columns",
    "read_field",
]
