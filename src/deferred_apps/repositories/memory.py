"""In-memory metadata repository, used for tests and inline settings metadata."""

from deferred_apps.core.metadata import is_supported_attr_path
from deferred_apps.models.app import PackageMetadata


class InMemoryRepository:
    """
    Repository backed by a plain mapping.

    Values may be PackageMetadata objects or raw nixpkgs `meta` dicts.
    """

    def __init__(self, packages: dict | None = None):
        self.packages: dict[str, PackageMetadata] = {}
        for pname, meta in (packages or {}).items():
            self.add(pname, meta)

    def add(self, pname: str, meta) -> None:
        if not isinstance(meta, PackageMetadata):
            meta = PackageMetadata.from_meta(meta)
        self.packages[pname] = meta

    def lookup(self, pname: str) -> PackageMetadata | None:
        if not is_supported_attr_path(pname):
            return None
        return self.packages.get(pname)

    def __len__(self) -> int:
        return len(self.packages)
