"""
JSON metadata dump repository.

Reads the `packages.json` published with nixpkgs channels (or produced by
`nix-env -qa --json --meta`):

    {"version": 2, "packages": {"obs-studio": {"meta": {...}, ...}, ...}}

A flat `{"obs-studio": {...meta...}}` mapping is accepted too. Attribute
paths are opaque keys, so "python313Packages.numpy" is a single entry.
"""

import json
import logging
from pathlib import Path

from deferred_apps.core.errors import ConfigError
from deferred_apps.repositories.memory import InMemoryRepository

logger = logging.getLogger(__name__)


class JSONDumpRepository(InMemoryRepository):
    """Metadata repository loaded from a nixpkgs metadata dump."""

    def __init__(self, packages: dict | None = None, source: Path | None = None):
        super().__init__(packages)
        self.source = source

    @classmethod
    def from_file(cls, path: Path) -> "JSONDumpRepository":
        """Load a dump from disk, raising ConfigError if it cannot be parsed."""
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"deferred-apps: cannot read metadata dump {path}: {e}") from e

        repo = cls(extract_packages(data), source=path)
        logger.info(f"[REPO] Loaded metadata for {len(repo)} packages from {path}")
        return repo


def extract_packages(data) -> dict[str, dict]:
    """Pull `attr -> meta` pairs out of either dump shape."""
    if not isinstance(data, dict):
        raise ConfigError("deferred-apps: metadata dump must be a JSON object")

    entries = data.get("packages", data)
    if not isinstance(entries, dict):
        raise ConfigError("deferred-apps: 'packages' in metadata dump must be a JSON object")

    packages = {}
    for pname, entry in entries.items():
        if not isinstance(entry, dict):
            logger.debug(f"[REPO] Skipping malformed entry {pname!r}")
            continue
        packages[pname] = entry.get("meta", entry)
    return packages
