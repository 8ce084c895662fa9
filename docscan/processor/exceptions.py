class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the record store."""


class DocumentFileMissingError(ProcessorError):
    """Raised when a document's raw file is not on disk."""

    MESSAGE = "File not found on disk"

    def __init__(self, message: str = MESSAGE) -> None:
        super().__init__(message)
