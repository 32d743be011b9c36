"""Tools for retrieving and caching the raw inputs to datablog."""

from . import fetcher, resource_cache, setup  # noqa: F401
