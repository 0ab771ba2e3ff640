"""
Engine configuration.

The data-access handle is configured exactly once at startup and then
passed by reference to every component that needs it; there is no
module-level state.  Anything that needs the handle fails fast with
:class:`~dynamic_filters.exceptions.ConfigurationError` when it is
missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigurationError
from .request import DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class EngineConfig:
    """
    Immutable engine configuration.

    Attributes:
        session_factory: Data-access handle, e.g. an
            ``async_sessionmaker[AsyncSession]`` or, for the in-memory
            executor, a zero-argument callable returning the rows.
        default_page_size: Page size used when a request has no pagination.
        concurrent_queries: Issue fetch and count concurrently.
        case_insensitive_contains: Substring matches ignore case.
    """

    session_factory: Any
    default_page_size: int = DEFAULT_PAGE_SIZE
    concurrent_queries: bool = True
    case_insensitive_contains: bool = True

    def __post_init__(self) -> None:
        if self.session_factory is None:
            raise ConfigurationError(
                "Data-access handle not configured. "
                "Pass a session factory to configure() at startup."
            )
        if self.default_page_size < 0:
            raise ConfigurationError("default_page_size must be >= 0")


def configure(session_factory: Any, **options: Any) -> EngineConfig:
    """One-time startup entry point; returns the config to inject."""
    return EngineConfig(session_factory=session_factory, **options)


def require_config(config: EngineConfig | None) -> EngineConfig:
    """Return *config* or raise before any query is attempted."""
    if config is None:
        raise ConfigurationError(
            "Filter engine not configured. Call configure() at startup first."
        )
    return config
