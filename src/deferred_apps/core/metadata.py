"""
Package metadata resolution.

Looks up packages in an injected repository and derives the executable
name, description and license freedom, each with its own fallback rules:

- executable: explicit value, else `mainProgram`, else the pname itself;
  a missing package is an error.
- description: explicit value, else `description`, else "Application";
  a missing package degrades to the default.
- license: unfree if any license is unfree; a missing package counts as free.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from deferred_apps.core.errors import PackageNotFoundError
from deferred_apps.models.app import DEFAULT_DESCRIPTION, PackageMetadata

logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 1


@runtime_checkable
class MetadataRepository(Protocol):
    """
    Protocol that all metadata sources must implement.

    Identifiers are opaque keys; a repository returns None for anything it
    does not know, including nested paths it cannot resolve.
    """

    def lookup(self, pname: str) -> PackageMetadata | None:
        """Return metadata for a package, or None if it is not available."""
        ...


def is_supported_attr_path(pname: str) -> bool:
    """Top-level names and one level of nesting ("ns.name") are supported."""
    return pname.count(".") <= MAX_NESTING_DEPTH


class MemoizedRepository:
    """Caches lookups of a wrapped repository for the duration of one run."""

    def __init__(self, repository: MetadataRepository):
        self.repository = repository
        self._cache: dict[str, PackageMetadata | None] = {}

    def lookup(self, pname: str) -> PackageMetadata | None:
        if pname not in self._cache:
            self._cache[pname] = self.repository.lookup(pname)
        return self._cache[pname]


def require_package(repository: MetadataRepository, pname: str) -> PackageMetadata:
    """Look up a package, raising PackageNotFoundError if it is absent."""
    meta = repository.lookup(pname)
    if meta is None:
        raise PackageNotFoundError(pname)
    return meta


def resolve_executable(repository: MetadataRepository, pname: str, exe: str | None = None) -> str:
    """Explicit exe, else `meta.mainProgram`, else pname (e.g., obs-studio -> "obs")."""
    if exe is not None:
        return exe
    meta = require_package(repository, pname)
    return meta.main_program or pname


def resolve_description(
    repository: MetadataRepository, pname: str, description: str | None = None
) -> str:
    """Explicit description, else `meta.description`, else "Application"."""
    if description is not None:
        return description
    meta = repository.lookup(pname)
    if meta is None:
        return DEFAULT_DESCRIPTION
    return meta.description or DEFAULT_DESCRIPTION


def resolve_license_freedom(repository: MetadataRepository, pname: str) -> bool:
    """True if the package is free; unknown packages are assumed free."""
    meta = repository.lookup(pname)
    if meta is None:
        logger.debug(f"[META] {pname}: no metadata, assuming free")
        return True
    return meta.is_free


def is_package_unfree(repository: MetadataRepository, pname: str) -> bool:
    return not resolve_license_freedom(repository, pname)
