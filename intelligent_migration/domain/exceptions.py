class MigrationEngineError(Exception):
    pass


class EmptySourceError(MigrationEngineError):
    pass


class MalformedSampleError(MigrationEngineError):
    pass


class CorpusUnavailableError(MigrationEngineError):
    pass


class FeedbackError(MigrationEngineError):
    pass


class InvalidSessionTransitionError(MigrationEngineError):
    pass


class SessionNotFoundError(MigrationEngineError):
    pass


class DegenerateInputWarning(UserWarning):
    """Recoverable profiling condition (all-null column, empty or tiny source).

    Never raised by the engine; the category name is attached to logged
    warnings so callers can filter them.
    """
