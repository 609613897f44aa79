from __future__ import annotations

from dataclasses import dataclass
import traceback
from typing import TYPE_CHECKING

from ..domain.entities.session import MigrationSession
from ..domain.exceptions import DegenerateInputWarning
from ..domain.services.mapping.transforms import estimate_accuracy
from .models import AnalyzeSourceResponse, SimilarMigrationSummary

if TYPE_CHECKING:
    from ..domain.entities.source_dna import SourceData
    from ..domain.services.dna.extractor import SourceDNAExtractor
    from ..domain.services.mapping.suggester import MappingSuggester
    from .models import AnalyzeSourceRequest
    from .ports.repositories import SessionStorePort, SourceDataRepositoryPort
    from .ports.services import LoggerPort

VERBOSE_TRACEBACK_LEVEL = 2
CORPUS_UNAVAILABLE_WARNING = (
    "Migration corpus unavailable; suggestions exclude historical priors"
)


@dataclass(slots=True)
class AnalysisDependencies:
    logger: LoggerPort
    source_repository: SourceDataRepositoryPort
    extractor: SourceDNAExtractor
    suggester: MappingSuggester
    session_store: SessionStorePort


class AnalyzeSourceUseCase:
    """Profile a source, suggest mappings and open a review session.

    Example:
        >>> use_case = container.create_analysis_use_case()
        >>> response = use_case.execute(AnalyzeSourceRequest(Path("staff.csv")))
        >>> response.estimated_accuracy
        0.91
    """

    def __init__(self, dependencies: AnalysisDependencies) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._source_repository = dependencies.source_repository
        self._extractor = dependencies.extractor
        self._suggester = dependencies.suggester
        self._session_store = dependencies.session_store

    def execute(self, request: AnalyzeSourceRequest) -> AnalyzeSourceResponse:
        try:
            source = self._source_repository.read_source(
                request.source_path,
                source_type=request.source_type,
                source_system=request.source_system,
            )
            return self.analyze(source, source_name=request.source_path.name)
        except Exception as exc:
            self.logger.error(f"{request.source_path.name}: {exc}")
            if request.verbose >= VERBOSE_TRACEBACK_LEVEL:
                self.logger.error(traceback.format_exc())
            return AnalyzeSourceResponse(success=False, error=str(exc))

    def analyze(self, source: SourceData, *, source_name: str) -> AnalyzeSourceResponse:
        """Run one profiling and suggestion pass over an in-memory source.

        Raises:
            EmptySourceError: The source has no columns
        """
        self.logger.log_analysis_start(
            source_name,
            row_count=len(source.rows),
            column_count=len(source.columns()),
        )
        source_dna = self._extractor.extract(source)
        for warning in source_dna.warnings:
            self.logger.warning(f"{DegenerateInputWarning.__name__}: {warning}")
        self.logger.log_source_dna(source_dna)

        session = MigrationSession(source_dna=source_dna)
        run = self._suggester.suggest(source_dna)
        warnings = list(source_dna.warnings)
        if not run.corpus_available:
            self.logger.warning(CORPUS_UNAVAILABLE_WARNING)
            warnings.append(CORPUS_UNAVAILABLE_WARNING)

        session.mark_suggested(list(run.suggestions), list(run.similar_migrations))
        session.begin_review()
        self._session_store.save(session)

        accuracy = estimate_accuracy(run.suggestions, run.similar_migrations)
        self.logger.log_suggestions(run.suggestions, accuracy)
        return AnalyzeSourceResponse(
            success=True,
            source_dna=source_dna,
            suggestions=list(run.suggestions),
            estimated_accuracy=accuracy,
            similar_past_migrations=[
                SimilarMigrationSummary.from_match(match)
                for match in run.similar_migrations
            ],
            corpus_available=run.corpus_available,
            warnings=warnings,
        )
