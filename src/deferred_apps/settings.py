"""
Deferred Apps settings — the JSON equivalent of the NixOS/Home Manager options.

Example:

    {
      "apps": ["spotify", "obs-studio", "python313Packages.numpy"],
      "flakeRef": "github:NixOS/nixpkgs/nixos-unstable",
      "allowUnfree": true,
      "iconTheme": {"path": "/run/current-system/sw", "name": "Papirus-Dark"},
      "extraApps": {
        "spotify": {"createTerminalCommand": false},
        "my-custom-app": {"exe": "custom-binary", "categories": ["Development"]}
      }
    }

An app listed in both `apps` and `extraApps` uses its `extraApps` entry.
Per-app `flakeRef`, `allowUnfree` and `gcRoot` left unset inherit the
global values.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from deferred_apps.core.errors import ConfigError
from deferred_apps.core.icons import DEFAULT_ICON_THEME, IconTheme
from deferred_apps.models.app import DEFAULT_CATEGORIES, DEFAULT_FLAKE_REF, AppConfig, parse_categories

logger = logging.getLogger(__name__)

FLAKE_REF_ENV = "DEFERRED_APPS_FLAKE_REF"


def _object(value, key: str) -> dict:
    """`value` as a settings object; a missing or null entry is empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"deferred-apps: '{key}' must be an object (got: {value!r})")
    return value


@dataclass
class IconThemeSettings:
    """
    Where to find the icon theme used for generation-time resolution.

    `enable` says whether the surrounding system installs the theme. Icons
    are resolved against `path` whenever it is set.
    """

    enable: bool = True
    path: str | None = None  # icon theme package root (contains share/icons)
    name: str = DEFAULT_ICON_THEME

    def theme_root(self) -> Path | None:
        if not self.path:
            return None
        return IconTheme(Path(self.path), self.name).root

    @classmethod
    def from_dict(cls, data: dict) -> "IconThemeSettings":
        return cls(
            enable=data.get("enable", True),
            path=data.get("path"),
            name=data.get("name", DEFAULT_ICON_THEME),
        )


@dataclass
class ExtraAppSettings:
    """Per-app overrides; None means "use the global value"."""

    exe: str | None = None
    desktop_name: str | None = None
    description: str | None = None
    icon: str | None = None
    categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    create_terminal_command: bool = True
    allow_unfree: bool | None = None
    gc_root: bool | None = None
    flake_ref: str | None = None

    @classmethod
    def from_dict(cls, pname: str, data: dict) -> "ExtraAppSettings":
        return cls(
            exe=data.get("exe"),
            desktop_name=data.get("desktopName"),
            description=data.get("description"),
            icon=data.get("icon"),
            categories=parse_categories(data.get("categories"), pname),
            create_terminal_command=data.get("createTerminalCommand", True),
            allow_unfree=data.get("allowUnfree"),
            gc_root=data.get("gcRoot"),
            flake_ref=data.get("flakeRef"),
        )


@dataclass
class DeferredAppsSettings:
    """Global options plus the list of apps to generate."""

    apps: list[str] = field(default_factory=list)
    extra_apps: dict[str, ExtraAppSettings] = field(default_factory=dict)
    flake_ref: str = DEFAULT_FLAKE_REF
    allow_unfree: bool = False
    gc_root: bool = False
    icon_theme: IconThemeSettings = field(default_factory=IconThemeSettings)
    metadata: str | None = None  # path to a metadata dump
    packages: dict[str, dict] = field(default_factory=dict)  # inline metadata

    def app_configs(self) -> list[AppConfig]:
        """Merge `apps` and `extraApps` into the full batch, in that order."""
        standard = [
            AppConfig(
                pname=pname,
                flake_ref=self.flake_ref,
                allow_unfree=self.allow_unfree,
                gc_root=self.gc_root,
            )
            for pname in self.apps
            if pname not in self.extra_apps
        ]

        extra = []
        for pname, opts in self.extra_apps.items():
            extra.append(
                AppConfig(
                    pname=pname,
                    exe=opts.exe,
                    desktop_name=opts.desktop_name,
                    description=opts.description,
                    icon=opts.icon,
                    categories=list(opts.categories),
                    flake_ref=opts.flake_ref if opts.flake_ref is not None else self.flake_ref,
                    create_terminal_command=opts.create_terminal_command,
                    allow_unfree=opts.allow_unfree if opts.allow_unfree is not None else self.allow_unfree,
                    gc_root=opts.gc_root if opts.gc_root is not None else self.gc_root,
                )
            )
        return standard + extra

    @classmethod
    def from_dict(cls, data: dict) -> "DeferredAppsSettings":
        """Deserialize from the settings file structure."""
        if not isinstance(data, dict):
            raise ConfigError("deferred-apps: settings must be a JSON object")

        apps = data.get("apps", [])
        if not isinstance(apps, list) or not all(isinstance(a, str) for a in apps):
            raise ConfigError("deferred-apps: 'apps' must be a list of package names")

        extra_apps = data.get("extraApps", {})
        if not isinstance(extra_apps, dict):
            raise ConfigError("deferred-apps: 'extraApps' must be an object keyed by package name")

        packages = _object(data.get("packages"), "packages")
        for pname, entry in packages.items():
            if not isinstance(entry, dict):
                raise ConfigError(f"deferred-apps: 'packages.{pname}' must be a metadata object (got: {entry!r})")

        return cls(
            apps=list(apps),
            extra_apps={
                pname: ExtraAppSettings.from_dict(pname, _object(opts, f"extraApps.{pname}"))
                for pname, opts in extra_apps.items()
            },
            flake_ref=data.get("flakeRef") or os.environ.get(FLAKE_REF_ENV, DEFAULT_FLAKE_REF),
            allow_unfree=data.get("allowUnfree", False),
            gc_root=data.get("gcRoot", False),
            icon_theme=IconThemeSettings.from_dict(_object(data.get("iconTheme"), "iconTheme")),
            metadata=data.get("metadata"),
            packages=dict(packages),
        )


def load_settings(path: Path) -> DeferredAppsSettings:
    """Load settings from a JSON file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"deferred-apps: cannot read settings {path}: {e}") from e

    settings = DeferredAppsSettings.from_dict(data)
    logger.debug(
        f"[SETTINGS] {path}: {len(settings.apps)} apps, {len(settings.extra_apps)} extra apps"
    )
    return settings
