"""
Generation-time icon resolution.

Icons are resolved to absolute paths inside a configured icon theme
(Papirus-Dark by default), so launchers show the right icon regardless of
the theme the user's desktop is running. Themes are inconsistent about
which sizes they ship, so several size directories are searched.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Search order: 64x64 suits app launchers best, scalable SVGs are next
ICON_SIZES = (
    "64x64",
    "scalable",
    "48x48",
    "128x128",
    "96x96",
    "256x256",
    "32x32",
    "24x24",
    "22x22",
    "16x16",
)

DEFAULT_ICON_THEME = "Papirus-Dark"


@dataclass(frozen=True)
class IconResolution:
    """Result of icon resolution; `found` is False when falling back to a name."""

    path: str
    found: bool


@dataclass(frozen=True)
class IconTheme:
    """An installed icon theme package, e.g. the papirus-icon-theme store path."""

    package_root: Path
    name: str = DEFAULT_ICON_THEME

    @property
    def root(self) -> Path:
        return self.package_root / "share" / "icons" / self.name


def is_absolute_icon(icon: str | None) -> bool:
    return icon is not None and icon.startswith("/")


def find_icon(name: str, theme_root: Path | None, sizes=ICON_SIZES) -> Path | None:
    """
    Find `{theme_root}/{size}/apps/{name}.svg` for the first matching size.

    Returns:
        The real path (symlinks resolved), or None if no size has the icon.
    """
    if theme_root is None or not name:
        return None

    for size in sizes:
        icon_path = Path(theme_root) / size / "apps" / f"{name}.svg"
        if icon_path.exists():
            return icon_path.resolve()
    return None


def resolve_icon(candidates: list[str], theme_root: Path | None, sizes=ICON_SIZES) -> IconResolution:
    """
    Resolve the first candidate name found in the theme.

    An absolute path as first candidate is used verbatim. If no candidate
    matches, the first candidate is returned unchanged so the desktop
    environment can try its own lookup.
    """
    requested = candidates[0] if candidates else ""
    if is_absolute_icon(requested):
        return IconResolution(path=requested, found=True)

    tried = set()
    for name in candidates:
        if not name or name in tried:
            continue
        tried.add(name)

        found = find_icon(name, theme_root, sizes)
        if found is not None:
            logger.debug(f"[ICON] {requested}: using {found}")
            return IconResolution(path=str(found), found=True)

    logger.warning(f"[ICON] Icon '{requested}' not found in theme. Desktop may show missing icon.")
    return IconResolution(path=requested, found=False)
