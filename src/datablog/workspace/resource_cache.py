"""Implementations of download caches for raw datablog resources."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, NamedTuple

import datablog.logging_helpers

logger = datablog.logging_helpers.get_logger(__name__)


class ResourceKey(NamedTuple):
    """Uniquely identifies a specific downloaded resource."""

    dataset: str
    name: str

    def __repr__(self) -> str:
        """Returns string representation of ResourceKey."""
        return f"Resource({self.dataset}/{self.name})"

    def get_local_path(self) -> Path:
        """Returns (relative) path that should be used when caching this resource."""
        return Path(self.dataset) / self.name


class AbstractCache(ABC):
    """Defines interaface for the generic resource caching layer."""

    def __init__(self, read_only: bool = False):
        """Constructs instance and sets read_only attribute."""
        self._read_only = read_only

    def is_read_only(self) -> bool:
        """Returns true if the cache is read-only and should not be modified."""
        return self._read_only

    @abstractmethod
    def get(self, resource: ResourceKey) -> bytes:
        """Retrieves content of given resource or throws KeyError."""

    @abstractmethod
    def add(self, resource: ResourceKey, content: bytes) -> None:
        """Adds resource to the cache and sets the content."""

    @abstractmethod
    def delete(self, resource: ResourceKey) -> None:
        """Removes the resource from cache."""

    @abstractmethod
    def contains(self, resource: ResourceKey) -> bool:
        """Returns True if the resource is present in the cache."""


class LocalFileCache(AbstractCache):
    """Simple key-value store mapping ResourceKeys to files on the local disk."""

    def __init__(self, cache_root_dir: Path, **kwargs: Any):
        """Constructs LocalFileCache that stores resources under cache_root_dir."""
        super().__init__(**kwargs)
        self.cache_root_dir = Path(cache_root_dir)

    def _resource_path(self, resource: ResourceKey) -> Path:
        return self.cache_root_dir / resource.get_local_path()

    def get(self, resource: ResourceKey) -> bytes:
        """Retrieves value associated with a given resource."""
        path = self._resource_path(resource)
        logger.debug(f"Getting {resource} from local file cache at {path}")
        try:
            return path.read_bytes()
        except FileNotFoundError as err:
            raise KeyError(f"{resource} not found at {path}") from err

    def add(self, resource: ResourceKey, content: bytes) -> None:
        """Adds (or updates) resource to the cache with given value."""
        if self.is_read_only():
            logger.warning(f"Read only cache: ignoring add({resource})")
            return
        path = self._resource_path(resource)
        logger.debug(f"Adding {resource} to local file cache at {path}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def delete(self, resource: ResourceKey) -> None:
        """Deletes resource from the cache."""
        if self.is_read_only():
            logger.warning(f"Read only cache: ignoring delete({resource})")
            return
        self._resource_path(resource).unlink(missing_ok=True)

    def contains(self, resource: ResourceKey) -> bool:
        """Returns True if resource is present in the cache."""
        return self._resource_path(resource).exists()
