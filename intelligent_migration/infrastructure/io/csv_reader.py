from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ...domain.entities.source_dna import SourceData
from .exceptions import DataParseError, DataSourceNotFoundError


@dataclass(slots=True)
class CSVReadOptions:
    normalize_headers: bool = True
    encoding: str = "utf-8"
    delimiter: str | None = ","


class CSVReader:
    """Reads delimited exports as all-text frames.

    Values are kept as strings so that leading zeros and code formats reach
    the profiler untouched; only empty cells become nulls.
    """

    def read(self, path: Path, options: CSVReadOptions | None = None) -> pd.DataFrame:
        if options is None:
            options = CSVReadOptions()
        if not path.exists():
            raise DataSourceNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise DataSourceNotFoundError(f"Not a file: {path}")
        try:
            df = pd.read_csv(
                path,
                sep=options.delimiter,
                engine="python" if options.delimiter is None else "c",
                dtype=str,
                keep_default_na=False,
                na_values=[""],
                encoding=options.encoding,
            )
        except FileNotFoundError as e:
            raise DataSourceNotFoundError(f"File not found: {path}") from e
        except (pd.errors.ParserError, csv.Error) as e:
            raise DataParseError(f"Failed to parse CSV {path}: {e}") from e
        except pd.errors.EmptyDataError as e:
            raise DataParseError(f"CSV file is empty: {path}") from e
        except UnicodeDecodeError as e:
            raise DataParseError(
                f"Encoding error reading {path}. Try a different encoding: {e}"
            ) from e
        if df.shape[1] == 0:
            raise DataParseError(f"CSV file has no columns: {path}")
        if options.normalize_headers:
            df.columns = [str(col).strip() for col in df.columns]
        return df


class CSVSourceRepository:
    """Adapts CSV files to the ``SourceData`` payload the engine consumes."""

    def __init__(
        self,
        reader: CSVReader | None = None,
        options: CSVReadOptions | None = None,
    ) -> None:
        super().__init__()
        self._reader = reader or CSVReader()
        self._options = options

    def read_source(
        self,
        file_path: str | Path,
        *,
        source_type: str = "CSV",
        source_system: str | None = None,
    ) -> SourceData:
        frame = self._reader.read(Path(file_path), self._options)
        return SourceData.from_frame(
            frame, source_type=source_type, source_system=source_system
        )
