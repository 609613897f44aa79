"""Infrastructure I/O layer.

Readers that turn external exports into the ``SourceData`` payload, and the
typed errors they raise.
"""

from .csv_reader import CSVReader, CSVReadOptions, CSVSourceRepository
from .exceptions import (
    DataParseError,
    DataSourceError,
    DataSourceNotFoundError,
    MigrationInfrastructureError,
    SchemaLoadError,
)

__all__ = [
    "CSVReadOptions",
    "CSVReader",
    "CSVSourceRepository",
    "DataParseError",
    "DataSourceError",
    "DataSourceNotFoundError",
    "MigrationInfrastructureError",
    "SchemaLoadError",
]
