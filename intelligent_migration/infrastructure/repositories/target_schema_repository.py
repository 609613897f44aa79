from __future__ import annotations

from importlib import resources
import json
from pathlib import Path

from pydantic import ValidationError

from ...domain.entities.target_schema import TargetSchema
from ..io.exceptions import DataSourceNotFoundError, SchemaLoadError

DEFAULT_SCHEMA_RESOURCE = "data/default_target_schema.json"


class TargetSchemaRepository:
    """Loads the pattern-to-field affinity table.

    Without a path the bundled healthcare schema is used. The file holds
    ``{"tables": {table: {column: [PATTERN, ...]}}, "synonyms": {...}}``.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        super().__init__()
        self.path = Path(path) if path is not None else None
        self._schema: TargetSchema | None = None

    def load(self) -> TargetSchema:
        if self._schema is None:
            self._schema = self._read()
        return self._schema

    def _read(self) -> TargetSchema:
        label = str(self.path) if self.path else "built-in target schema"
        try:
            text = self._read_text()
            schema = TargetSchema.model_validate(json.loads(text))
        except json.JSONDecodeError as exc:
            raise SchemaLoadError(f"Invalid JSON in {label}: {exc}") from exc
        except ValidationError as exc:
            raise SchemaLoadError(f"Invalid target schema in {label}: {exc}") from exc
        except OSError as exc:
            raise SchemaLoadError(f"Failed to read {label}: {exc}") from exc
        if schema.field_count == 0:
            raise SchemaLoadError(f"{label} defines no target fields")
        return schema

    def _read_text(self) -> str:
        if self.path is None:
            resource = resources.files(__package__).joinpath(DEFAULT_SCHEMA_RESOURCE)
            return resource.read_text(encoding="utf-8")
        if not self.path.exists():
            raise DataSourceNotFoundError(f"Target schema not found: {self.path}")
        return self.path.read_text(encoding="utf-8")
