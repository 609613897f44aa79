from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from ..application.analysis_use_case import AnalysisDependencies, AnalyzeSourceUseCase
from ..application.review_use_case import ReviewDependencies, ReviewSessionUseCase
from ..config import MigrationEngineConfig
from ..domain.services.dna.extractor import SourceDNAExtractor
from ..domain.services.mapping.suggester import MappingSuggester, ScoringWeights
from ..domain.services.patterns.detector import PatternDetector
from ..domain.services.profiling.column_profiler import ColumnProfiler
from .io.csv_reader import CSVReader, CSVSourceRepository
from .logging.console_logger import ConsoleLogger
from .logging.null_logger import NullLogger
from .repositories.session_store import InMemorySessionStore
from .repositories.similarity_index import (
    InMemorySimilarityIndex,
    JsonlSimilarityIndex,
)
from .repositories.target_schema_repository import TargetSchemaRepository

if TYPE_CHECKING:
    from ..application.ports.repositories import (
        SessionStorePort,
        SimilarityIndexPort,
        SourceDataRepositoryPort,
        TargetSchemaRepositoryPort,
    )
    from ..application.ports.services import LoggerPort


class DependencyContainer:
    """Wires one engine instance from a ``MigrationEngineConfig``.

    Every ``create_*`` call returns the same instance for the lifetime of the
    container, so the analysis and review use cases share one session store
    and one corpus.
    """

    def __init__(
        self,
        config: MigrationEngineConfig | None = None,
        verbose: int = 0,
        console: Console | None = None,
        use_null_logger: bool = False,
    ) -> None:
        super().__init__()
        self.config = config or MigrationEngineConfig()
        self.verbose = verbose
        self.console = console or Console()
        self.use_null_logger = use_null_logger
        self._logger_instance: LoggerPort | None = None
        self._source_repository_instance: SourceDataRepositoryPort | None = None
        self._similarity_index_instance: SimilarityIndexPort | None = None
        self._schema_repository_instance: TargetSchemaRepositoryPort | None = None
        self._session_store_instance: SessionStorePort | None = None
        self._extractor_instance: SourceDNAExtractor | None = None
        self._suggester_instance: MappingSuggester | None = None

    def create_logger(self) -> LoggerPort:
        if self._logger_instance is None:
            if self.use_null_logger:
                self._logger_instance = NullLogger()
            else:
                self._logger_instance = ConsoleLogger(
                    console=self.console, verbosity=self.verbose
                )
        return self._logger_instance

    def create_source_repository(self) -> SourceDataRepositoryPort:
        if self._source_repository_instance is None:
            self._source_repository_instance = CSVSourceRepository(reader=CSVReader())
        return self._source_repository_instance

    def create_similarity_index(self) -> SimilarityIndexPort:
        if self._similarity_index_instance is None:
            if self.config.corpus_path is None:
                self._similarity_index_instance = InMemorySimilarityIndex()
            else:
                self._similarity_index_instance = JsonlSimilarityIndex(
                    self.config.corpus_path
                )
        return self._similarity_index_instance

    def create_schema_repository(self) -> TargetSchemaRepositoryPort:
        if self._schema_repository_instance is None:
            self._schema_repository_instance = TargetSchemaRepository(
                self.config.schema_path
            )
        return self._schema_repository_instance

    def create_session_store(self) -> SessionStorePort:
        if self._session_store_instance is None:
            self._session_store_instance = InMemorySessionStore()
        return self._session_store_instance

    def create_extractor(self) -> SourceDNAExtractor:
        if self._extractor_instance is None:
            self._extractor_instance = SourceDNAExtractor(
                ColumnProfiler(
                    sample_size=self.config.sample_size, seed=self.config.sample_seed
                ),
                PatternDetector(floor=self.config.pattern_floor),
                max_workers=self.config.max_workers,
            )
        return self._extractor_instance

    def create_suggester(self) -> MappingSuggester:
        if self._suggester_instance is None:
            config = self.config
            self._suggester_instance = MappingSuggester(
                self.create_schema_repository().load(),
                self.create_similarity_index(),
                weights=ScoringWeights(
                    pattern=config.pattern_weight,
                    name=config.name_weight,
                    history=config.history_weight,
                ),
                confidence_floor=config.confidence_floor,
                top_k=config.top_k,
                max_alternatives=config.max_alternatives,
                history_min_similarity=config.history_min_similarity,
                name_similarity_threshold=config.name_similarity_threshold,
            )
        return self._suggester_instance

    def create_analysis_use_case(self) -> AnalyzeSourceUseCase:
        return AnalyzeSourceUseCase(
            AnalysisDependencies(
                logger=self.create_logger(),
                source_repository=self.create_source_repository(),
                extractor=self.create_extractor(),
                suggester=self.create_suggester(),
                session_store=self.create_session_store(),
            )
        )

    def create_review_use_case(self) -> ReviewSessionUseCase:
        return ReviewSessionUseCase(
            ReviewDependencies(
                logger=self.create_logger(),
                session_store=self.create_session_store(),
                similarity_index=self.create_similarity_index(),
            )
        )

    def reset_singletons(self) -> None:
        self._logger_instance = None
        self._source_repository_instance = None
        self._similarity_index_instance = None
        self._schema_repository_instance = None
        self._session_store_instance = None
        self._extractor_instance = None
        self._suggester_instance = None


def create_default_container(
    config: MigrationEngineConfig | None = None, verbose: int = 0
) -> DependencyContainer:
    return DependencyContainer(config=config, verbose=verbose)
