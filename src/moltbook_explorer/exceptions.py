"""Exception types raised by moltbook explorer."""

from typing import Optional


class MoltbookExplorerError(Exception):
    """Base exception for explorer errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class CorpusLoadError(MoltbookExplorerError):
    """Raised when the corpus violates the data model at load time."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
