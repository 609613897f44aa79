from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
import os
from pathlib import Path
import tomllib
from typing import cast
import warnings

DEFAULT_CONFIG_FILE = Path("intelligent_migration.toml")


@dataclass(frozen=True, slots=True)
class MigrationEngineConfig:
    sample_size: int = 100
    sample_seed: int = 42
    pattern_floor: float = 0.15
    confidence_floor: float = 0.35
    top_k: int = 5
    max_alternatives: int = 3
    history_min_similarity: float = 0.5
    name_similarity_threshold: float = 0.5
    pattern_weight: float = 0.6
    name_weight: float = 0.85
    history_weight: float = 0.9
    max_workers: int = 4
    corpus_path: Path | None = None
    schema_path: Path | None = None

    def __post_init__(self) -> None:
        for key in (
            "pattern_floor",
            "confidence_floor",
            "history_min_similarity",
            "name_similarity_threshold",
            "pattern_weight",
            "name_weight",
            "history_weight",
        ):
            value = getattr(self, key)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{key} must be between 0.0 and 1.0, got {value}")
        if self.sample_size < 1:
            raise ValueError(f"sample_size must be positive, got {self.sample_size}")
        if self.top_k < 1:
            raise ValueError(f"top_k must be positive, got {self.top_k}")
        if self.max_alternatives < 0:
            raise ValueError(
                f"max_alternatives must not be negative, got {self.max_alternatives}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    @classmethod
    def from_env(cls) -> MigrationEngineConfig:
        corpus = os.getenv("IM_CORPUS_PATH")
        schema = os.getenv("IM_SCHEMA_PATH")
        return cls(
            sample_size=int(os.getenv("IM_SAMPLE_SIZE", "100")),
            sample_seed=int(os.getenv("IM_SAMPLE_SEED", "42")),
            pattern_floor=float(os.getenv("IM_PATTERN_FLOOR", "0.15")),
            confidence_floor=float(os.getenv("IM_CONFIDENCE_FLOOR", "0.35")),
            top_k=int(os.getenv("IM_TOP_K", "5")),
            max_alternatives=int(os.getenv("IM_MAX_ALTERNATIVES", "3")),
            history_min_similarity=float(
                os.getenv("IM_HISTORY_MIN_SIMILARITY", "0.5")
            ),
            name_similarity_threshold=float(
                os.getenv("IM_NAME_SIMILARITY_THRESHOLD", "0.5")
            ),
            pattern_weight=float(os.getenv("IM_PATTERN_WEIGHT", "0.6")),
            name_weight=float(os.getenv("IM_NAME_WEIGHT", "0.85")),
            history_weight=float(os.getenv("IM_HISTORY_WEIGHT", "0.9")),
            max_workers=int(os.getenv("IM_MAX_WORKERS", "4")),
            corpus_path=Path(corpus.strip()) if corpus and corpus.strip() else None,
            schema_path=Path(schema.strip()) if schema and schema.strip() else None,
        )


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> MigrationEngineConfig:
        config = MigrationEngineConfig.from_env()
        if config_file is None:
            config_file = DEFAULT_CONFIG_FILE
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(
        config_file: Path, base_config: MigrationEngineConfig
    ) -> MigrationEngineConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        profiling = _get_table(data, "profiling")
        suggestion = _get_table(data, "suggestion")
        history = _get_table(data, "history")
        paths = _get_table(data, "paths")

        updates: dict[str, object] = {}
        for section, name, keys in (
            (profiling, "profiling", ("sample_size", "sample_seed", "max_workers")),
            (suggestion, "suggestion", ("top_k", "max_alternatives")),
        ):
            for key in keys:
                if (value := section.get(key)) is not None:
                    updates[key] = _coerce_int(value, key=f"{name}.{key}")
        for section, name, keys in (
            (profiling, "profiling", ("pattern_floor",)),
            (
                suggestion,
                "suggestion",
                (
                    "confidence_floor",
                    "name_similarity_threshold",
                    "pattern_weight",
                    "name_weight",
                    "history_weight",
                ),
            ),
            (history, "history", ("history_min_similarity",)),
        ):
            for key in keys:
                if (value := section.get(key)) is not None:
                    updates[key] = _coerce_float(value, key=f"{name}.{key}")
        if value := paths.get("corpus"):
            updates["corpus_path"] = Path(str(value))
        if value := paths.get("schema"):
            updates["schema_path"] = Path(str(value))
        return replace(base_config, **updates)


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_float(value: object, *, key: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be numeric, got bool")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value)
    raise ValueError(f"{key} must be numeric or string, got {type(value).__name__}")


def _coerce_int(value: object, *, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"{key} must be int-like or string, got {type(value).__name__}")
