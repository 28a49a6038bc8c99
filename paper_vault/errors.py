"""Exceptions raised by the upstream source clients."""


class DataSourceError(Exception):
    """Base exception for data source failures."""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"[{source}] {message}")


class SourceUnavailableError(DataSourceError):
    """The upstream could not be reached or answered with a non-success status."""

    pass


class MalformedPayloadError(DataSourceError):
    """The upstream answered, but not with the shape we expect."""

    pass
