"""Errors raised by the results cache."""
from typing import Optional

CLOSED_MESSAGE = "Results cache has been closed"


class ResultsCacheError(Exception):
    """Raised when an operation on the results cache fails."""

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


CacheError = ResultsCacheError
