"""Base interface for a cache of results."""
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional, Union


class ResultsCache(ABC):
    """
    A cache of opaque results addressed by generated keys.

    Every operation raises ResultsCacheError if the cache fails or has been
    closed. Caches are context managers and are closed on exit.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Retrieve a previously stored result.

        Args:
            key: the key previously returned by `put` for the result

        Returns:
            The result if the key is found, otherwise None
        """
        raise NotImplementedError

    @abstractmethod
    def put(self, result: bytes) -> str:
        """
        Store a result for later use.

        Returns:
            A key that retrieves the result later, or an empty string if the
            store refused to save it
        """
        raise NotImplementedError

    @abstractmethod
    def add_time_to_live(self, key: str) -> None:
        """Start time to live processing for a result."""
        raise NotImplementedError

    @abstractmethod
    def update_time_to_live(self, key: str) -> None:
        """Replace the time to live marker on a result with the current time."""
        raise NotImplementedError

    @abstractmethod
    def process_time_to_live(self, duration: Union[timedelta, int, float]) -> None:
        """
        Remove every result whose time to live marker is older than `duration`.

        Args:
            duration: how long a result lives past its marker, as a timedelta
                or a number of seconds
        """
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    def __getitem__(self, key: str) -> Optional[bytes]:
        return self.get(key)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
