"""Domain exceptions."""


class ReportStorageError(Exception):
    """Raised when the local fallback store cannot be read or written."""
