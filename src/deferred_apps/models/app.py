"""
Deferred App Model — configuration, package metadata and resolved descriptors.

Defines the value types passed between the validator, metadata resolver,
icon resolver and builder, and the two output records consumed by the
file generators (wrapper script and desktop entry).
"""

from dataclasses import asdict, dataclass, field

from deferred_apps.core.errors import ConfigError

DEFAULT_FLAKE_REF = "nixpkgs"
DEFAULT_DESCRIPTION = "Application"
DEFAULT_CATEGORIES = ("Application",)


def parse_categories(value, owner: str) -> list[str]:
    """Desktop categories from config, defaulting when unset."""
    if value is None:
        return list(DEFAULT_CATEGORIES)
    if not isinstance(value, list) or not all(isinstance(c, str) for c in value):
        raise ConfigError(
            f"deferred-apps: categories of '{owner}' must be a list of strings (got: {value!r})"
        )
    return list(value)


@dataclass(frozen=True)
class License:
    """A single license entry from package metadata."""

    free: bool = True
    short_name: str | None = None

    @classmethod
    def from_meta(cls, value) -> "License":
        """
        Build a License from a nixpkgs `meta.license` entry.

        Entries are usually attribute sets with a `free` flag; some metadata
        dumps flatten them to a bare name, where only "unfree" is non-free.
        """
        if isinstance(value, dict):
            free = value.get("free")
            return cls(
                free=True if free is None else bool(free),
                short_name=value.get("shortName") or value.get("spdxId"),
            )
        if isinstance(value, str):
            return cls(free=value.lower() != "unfree", short_name=value)
        return cls()


@dataclass(frozen=True)
class PackageMetadata:
    """Resolved facts about one package in the repository."""

    main_program: str | None = None
    description: str | None = None
    licenses: tuple[License, ...] = ()

    @property
    def is_free(self) -> bool:
        """A package is free only if every one of its licenses is free."""
        return all(lic.free for lic in self.licenses)

    @classmethod
    def from_meta(cls, meta: dict) -> "PackageMetadata":
        """Normalize a nixpkgs `meta` attribute set (single license or list)."""
        raw_license = meta.get("license", [])
        if not isinstance(raw_license, list):
            raw_license = [raw_license]
        return cls(
            main_program=meta.get("mainProgram"),
            description=meta.get("description"),
            licenses=tuple(License.from_meta(entry) for entry in raw_license),
        )


@dataclass
class AppConfig:
    """
    User-supplied configuration for a single deferred app.

    Only `pname` is required; everything else is auto-detected from
    package metadata or falls back to a default.
    """

    pname: str
    exe: str | None = None
    desktop_name: str | None = None
    description: str | None = None
    icon: str | None = None
    categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    flake_ref: str = DEFAULT_FLAKE_REF
    create_terminal_command: bool = True
    allow_unfree: bool = False
    gc_root: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """Deserialize from a dictionary using camelCase or snake_case keys."""

        def pick(camel: str, snake: str, default=None):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        return cls(
            pname=data["pname"],
            exe=data.get("exe"),
            desktop_name=pick("desktopName", "desktop_name"),
            description=data.get("description"),
            icon=data.get("icon"),
            categories=parse_categories(data.get("categories"), data["pname"]),
            flake_ref=pick("flakeRef", "flake_ref", DEFAULT_FLAKE_REF),
            create_terminal_command=pick("createTerminalCommand", "create_terminal_command", True),
            allow_unfree=pick("allowUnfree", "allow_unfree", False),
            gc_root=pick("gcRoot", "gc_root", False),
        )


@dataclass(frozen=True)
class WrapperConfig:
    """Values substituted into the wrapper script."""

    package_id: str
    flake_ref: str
    executable_name: str
    icon_path: str
    needs_unsafe_mode: bool
    gc_root_enabled: bool


@dataclass(frozen=True)
class DesktopEntryConfig:
    """Values rendered into a freedesktop.org desktop entry."""

    id: str
    display_name: str
    description: str
    icon_path: str
    categories: tuple[str, ...]
    startup_window_class: str
    exec_path: str = ""
    terminal: bool = False
    startup_notify: bool = True


@dataclass(frozen=True)
class ResolvedApp:
    """Fully computed descriptor for one deferred app."""

    pname: str
    final_exe: str
    terminal_command: str
    display_name: str
    description: str
    resolved_icon_path: str
    needs_unsafe_mode: bool
    icon_found: bool = True
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    flake_ref: str = DEFAULT_FLAKE_REF
    create_terminal_command: bool = True
    gc_root: bool = False

    @property
    def wrapper_name(self) -> str:
        return f"deferred-{self.pname}"

    def wrapper_config(self) -> WrapperConfig:
        return WrapperConfig(
            package_id=self.pname,
            flake_ref=self.flake_ref,
            executable_name=self.final_exe,
            icon_path=self.resolved_icon_path,
            needs_unsafe_mode=self.needs_unsafe_mode,
            gc_root_enabled=self.gc_root,
        )

    def desktop_entry(self, exec_path: str = "") -> DesktopEntryConfig:
        """Desktop entry record; `exec_path` is the installed wrapper location."""
        return DesktopEntryConfig(
            id=self.pname,
            display_name=self.display_name,
            description=self.description,
            icon_path=self.resolved_icon_path,
            categories=self.categories,
            startup_window_class=self.final_exe,
            exec_path=exec_path,
        )

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dictionary."""
        data = asdict(self)
        data["categories"] = list(self.categories)
        return data


@dataclass(frozen=True)
class CollisionCandidate:
    """The facts about one app that collision detection looks at."""

    pname: str
    terminal_command: str
    terminal_enabled: bool = True
