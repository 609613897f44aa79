class MigrationInfrastructureError(Exception):
    pass


class DataSourceError(MigrationInfrastructureError):
    pass


class DataSourceNotFoundError(DataSourceError):
    pass


class DataParseError(DataSourceError):
    pass


class SchemaLoadError(MigrationInfrastructureError):
    pass
