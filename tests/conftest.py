"""Shared fixtures: a fake package repository and an on-disk icon theme."""

import json
from pathlib import Path

import pytest

from deferred_apps.core.builder import DeferredAppBuilder
from deferred_apps.repositories.memory import InMemoryRepository

UNFREE = {"free": False, "shortName": "unfree"}
MIT = {"free": True, "shortName": "mit"}
GPL2 = {"free": True, "shortName": "gpl2Plus"}

PACKAGES = {
    "obs-studio": {
        "mainProgram": "obs",
        "description": "Free and open source software for video recording and live streaming",
        "license": GPL2,
    },
    "discord": {
        "mainProgram": "Discord",
        "description": "All-in-one cross-platform voice and text chat for gamers",
        "license": UNFREE,
    },
    "spotify": {"mainProgram": "spotify", "description": "Play music from the Spotify music service", "license": UNFREE},
    "firefox": {"mainProgram": "firefox", "description": "Web browser built from Firefox source tree", "license": MIT},
    "hello": {"description": "Program that produces a familiar, friendly greeting", "license": [GPL2]},
    "nodesc": {"mainProgram": "nodesc", "license": []},
    "dual-licensed": {"mainProgram": "dual", "license": [MIT, UNFREE]},
    "python313Packages.numpy": {"description": "Scientific tools for Python", "license": {"shortName": "bsd3"}},
    "obs-wrapper": {"mainProgram": "OBS", "license": MIT},
}


@pytest.fixture
def repository():
    return InMemoryRepository(PACKAGES)


def make_icon(theme_root: Path, size: str, name: str) -> Path:
    path = theme_root / size / "apps" / f"{name}.svg"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<svg/>")
    return path


@pytest.fixture
def icon_theme(tmp_path):
    """Papirus-like theme: obs only in scalable, firefox in 64x64 and 48x48."""
    root = tmp_path / "icons" / "share" / "icons" / "Papirus-Dark"
    make_icon(root, "scalable", "obs")
    make_icon(root, "48x48", "firefox")
    make_icon(root, "64x64", "firefox")
    make_icon(root, "64x64", "spotify")
    return root


@pytest.fixture
def builder(repository, icon_theme):
    return DeferredAppBuilder(repository, icon_theme_root=icon_theme)


@pytest.fixture
def add_icon():
    """make_icon as a fixture, for tests that build their own theme."""
    return make_icon


@pytest.fixture
def metadata_file(tmp_path):
    """PACKAGES written out in the nixpkgs packages.json shape."""
    path = tmp_path / "packages.json"
    dump = {"version": 2, "packages": {pname: {"meta": meta} for pname, meta in PACKAGES.items()}}
    path.write_text(json.dumps(dump))
    return str(path)
