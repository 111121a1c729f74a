"""Metadata repository bindings."""

from pathlib import Path

from deferred_apps.core.metadata import MetadataRepository
from deferred_apps.repositories.json_dump import JSONDumpRepository
from deferred_apps.repositories.memory import InMemoryRepository
from deferred_apps.repositories.nix_eval import NixEvalRepository


def get_repository(
    metadata: str | None = None,
    nix_eval: bool = False,
    flake_ref: str = "nixpkgs",
    packages: dict | None = None,
) -> MetadataRepository:
    """
    Factory function picking a repository from settings / CLI options.

    A metadata dump wins over `nix eval`; with neither, only the inline
    `packages` mapping is known.
    """
    if metadata:
        repo = JSONDumpRepository.from_file(Path(metadata))
        for pname, meta in (packages or {}).items():
            repo.add(pname, meta)
        return repo
    if nix_eval:
        return NixEvalRepository(flake_ref=flake_ref)
    return InMemoryRepository(packages)


__all__ = [
    "MetadataRepository",
    "InMemoryRepository",
    "JSONDumpRepository",
    "NixEvalRepository",
    "get_repository",
]
