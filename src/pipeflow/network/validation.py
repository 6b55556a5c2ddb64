class SnapshotError(ValueError):
    """Raised when an import document cannot be mapped onto network records."""

    def __init__(self, message: str, record: str | None = None):
        self.record = record
        if record is not None:
            message = f"{record}: {message}"
        super().__init__(message)
