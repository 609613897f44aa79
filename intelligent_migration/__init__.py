"""Intelligent Migration Engine.

Profiles columns of a legacy data export, fingerprints the source as a whole,
and suggests target-schema mappings from pattern affinity, name similarity
and the outcomes of similar past migrations. Confirmed reviews are recorded
so later suggestions learn from them.
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("intelligent-migration")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from intelligent_migration.config import ConfigLoader, MigrationEngineConfig
from intelligent_migration.domain.entities.data_pattern import DataPattern
from intelligent_migration.domain.services.dna.extractor import SourceDNAExtractor
from intelligent_migration.domain.services.feedback.feedback_loop import FeedbackLoop
from intelligent_migration.domain.services.mapping.suggester import MappingSuggester
from intelligent_migration.infrastructure.container import DependencyContainer

__all__ = [
    "__version__",
    # Configuration
    "ConfigLoader",
    "DependencyContainer",
    "MigrationEngineConfig",
    # Engine
    "DataPattern",
    "FeedbackLoop",
    "MappingSuggester",
    "SourceDNAExtractor",
]
