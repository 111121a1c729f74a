"""
Deferred App Builder — turns an AppConfig into a ResolvedApp.

Resolution order matters for which error a caller sees first:

1. validate the pname
2. executable (explicit or `mainProgram`), then the lowercase terminal command
3. display name and description
4. license freedom
5. icon (explicit name or pname, then the executable as fallback)
6. unfree policy gate, last, so every field is resolved before refusing
"""

import logging
from pathlib import Path

from deferred_apps.core.errors import UnfreePackageError
from deferred_apps.core.icons import ICON_SIZES, IconResolution, is_absolute_icon, resolve_icon
from deferred_apps.core.metadata import (
    MemoizedRepository,
    MetadataRepository,
    resolve_description,
    resolve_executable,
    resolve_license_freedom,
)
from deferred_apps.core.naming import to_display_name, to_terminal_command
from deferred_apps.core.validation import validate_pname
from deferred_apps.models.app import AppConfig, ResolvedApp

logger = logging.getLogger(__name__)


class DeferredAppBuilder:
    """
    Builds ResolvedApp descriptors against one repository and icon theme.

    The repository is wrapped in a MemoizedRepository so a batch only looks
    each package up once.
    """

    def __init__(
        self,
        repository: MetadataRepository,
        icon_theme_root: Path | None = None,
        icon_sizes=ICON_SIZES,
    ):
        if isinstance(repository, MemoizedRepository):
            self.repository = repository
        else:
            self.repository = MemoizedRepository(repository)
        self.icon_theme_root = icon_theme_root
        self.icon_sizes = icon_sizes

    def resolve_terminal_command(self, config: AppConfig) -> str:
        """Terminal command an app would get, without building the whole app."""
        pname = validate_pname(config.pname)
        return to_terminal_command(resolve_executable(self.repository, pname, config.exe))

    def build(self, config: AppConfig) -> ResolvedApp:
        """
        Resolve every field of a deferred app.

        Raises:
            ValidationError: malformed pname.
            PackageNotFoundError: no explicit exe and the package is unknown.
            UnfreePackageError: unfree package without `allow_unfree`.
        """
        pname = validate_pname(config.pname)

        final_exe = resolve_executable(self.repository, pname, config.exe)
        terminal_command = to_terminal_command(final_exe)

        display_name = config.desktop_name if config.desktop_name is not None else to_display_name(pname)
        description = resolve_description(self.repository, pname, config.description)

        is_unfree = not resolve_license_freedom(self.repository, pname)
        needs_unsafe_mode = is_unfree and config.allow_unfree

        icon = self._resolve_icon(pname, config.icon, final_exe)

        if is_unfree and not config.allow_unfree:
            raise UnfreePackageError(pname)

        app = ResolvedApp(
            pname=pname,
            final_exe=final_exe,
            terminal_command=terminal_command,
            display_name=display_name,
            description=description,
            resolved_icon_path=icon.path,
            needs_unsafe_mode=needs_unsafe_mode,
            icon_found=icon.found,
            categories=tuple(config.categories),
            flake_ref=config.flake_ref,
            create_terminal_command=config.create_terminal_command,
            gc_root=config.gc_root,
        )
        logger.debug(
            f"[BUILD] {pname}: exe={final_exe}, command={terminal_command}, "
            f"icon={icon.path}, unsafe={needs_unsafe_mode}"
        )
        return app

    def _resolve_icon(self, pname: str, icon: str | None, final_exe: str) -> IconResolution:
        if is_absolute_icon(icon):
            return IconResolution(path=icon, found=True)

        icon_name = icon if icon is not None else pname
        return resolve_icon([icon_name, final_exe], self.icon_theme_root, self.icon_sizes)


def build_app(
    config: AppConfig,
    repository: MetadataRepository,
    icon_theme_root: Path | None = None,
) -> ResolvedApp:
    """Build a single app without keeping a builder around."""
    return DeferredAppBuilder(repository, icon_theme_root).build(config)
