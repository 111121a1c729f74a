"""Tests for wrapper/desktop rendering and the output generators."""

import json
import os

import pytest

from deferred_apps.generators import ManifestGenerator, TreeGenerator, generate_all, get_generator
from deferred_apps.generators.desktop import escape_value, quote_exec_arg, render_desktop_entry
from deferred_apps.generators.wrapper import render_wrapper_script
from deferred_apps.models.app import DesktopEntryConfig, ResolvedApp, WrapperConfig


@pytest.fixture
def sample_app():
    return ResolvedApp(
        pname="obs-studio",
        final_exe="obs",
        terminal_command="obs",
        display_name="Obs Studio",
        description="Video recording and live streaming",
        resolved_icon_path="/icons/scalable/apps/obs.svg",
        needs_unsafe_mode=False,
        categories=("AudioVideo", "Recorder"),
    )


# ═══════════════════════════════════════════
# Wrapper Script
# ═══════════════════════════════════════════


class TestWrapperScript:
    def test_pure_mode(self, sample_app):
        script = render_wrapper_script(sample_app.wrapper_config())
        assert script.startswith("#!/usr/bin/env bash\n")
        assert "PNAME=obs-studio\n" in script
        assert "FLAKE_REF=nixpkgs\n" in script
        assert "EXE=obs\n" in script
        assert "NEEDS_IMPURE=0\n" in script
        assert "GC_ROOT=0\n" in script
        assert 'exec nix shell "$FLAKE_REF#$PNAME" --command "$EXE" "$@"' in script
        assert "${XDG_DATA_HOME:-$HOME/.local/share}/deferred-apps/gcroots" in script

    def test_unsafe_mode_and_gc_root(self):
        config = WrapperConfig("spotify", "github:me/flake", "spotify", "/i.svg", True, True)
        script = render_wrapper_script(config)
        assert "NEEDS_IMPURE=1\n" in script
        assert "GC_ROOT=1\n" in script
        assert "export NIXPKGS_ALLOW_UNFREE=1" in script
        assert "exec nix shell --impure" in script

    def test_values_are_shell_quoted(self):
        config = WrapperConfig("app", "path:/my flake", "run $(rm)", "icon", False, False)
        script = render_wrapper_script(config)
        assert "FLAKE_REF='path:/my flake'\n" in script
        assert "EXE='run $(rm)'\n" in script


# ═══════════════════════════════════════════
# Desktop Entry
# ═══════════════════════════════════════════


class TestDesktopEntry:
    def test_render(self, sample_app):
        text = render_desktop_entry(sample_app.desktop_entry(exec_path="/out/libexec/deferred-obs-studio"))
        lines = text.splitlines()
        assert lines[0] == "[Desktop Entry]"
        assert "Name=Obs Studio" in lines
        assert "Comment=Video recording and live streaming" in lines
        assert "Exec=/out/libexec/deferred-obs-studio %U" in lines
        assert "Icon=/icons/scalable/apps/obs.svg" in lines
        assert "Terminal=false" in lines
        assert "StartupNotify=true" in lines
        assert "StartupWMClass=obs" in lines
        assert "Categories=AudioVideo;Recorder;" in lines

    def test_one_entry_per_line(self):
        entry = DesktopEntryConfig(
            id="x",
            display_name="Line\nBreak",
            description="Tab\there",
            icon_path="x",
            categories=("Application",),
            startup_window_class="x",
        )
        text = render_desktop_entry(entry)
        assert "Name=Line\\nBreak" in text.splitlines()
        assert "Comment=Tab\\there" in text.splitlines()
        assert all("=" in line for line in text.splitlines()[1:])

    def test_escape_backslash(self):
        assert escape_value("a\\b") == "a\\\\b"

    def test_exec_quoting(self):
        assert quote_exec_arg("/plain/path") == "/plain/path"
        assert quote_exec_arg("/with space/app") == '"/with space/app"'


# ═══════════════════════════════════════════
# Tree Generator
# ═══════════════════════════════════════════


class TestTreeGenerator:
    @pytest.mark.asyncio
    async def test_writes_tree(self, tmp_path, sample_app):
        generator = TreeGenerator(output_dir=tmp_path)
        await generator.generate(sample_app)
        await generator.finalize()

        wrapper = tmp_path / "libexec" / "deferred-obs-studio"
        assert wrapper.exists()
        assert os.access(wrapper, os.X_OK)

        desktop = tmp_path / "share" / "applications" / "obs-studio.desktop"
        assert f"Exec={wrapper.resolve()} %U" in desktop.read_text().splitlines()

        command = tmp_path / "bin" / "obs"
        assert command.is_symlink()
        assert command.resolve() == wrapper.resolve()
        assert generator.count == 1

    @pytest.mark.asyncio
    async def test_no_terminal_command(self, tmp_path):
        app = ResolvedApp(
            pname="spotify",
            final_exe="spotify",
            terminal_command="spotify",
            display_name="Spotify",
            description="Music",
            resolved_icon_path="spotify",
            needs_unsafe_mode=True,
            create_terminal_command=False,
        )
        generator = TreeGenerator(output_dir=tmp_path)
        await generator.generate(app)
        assert not (tmp_path / "bin").exists()
        assert (tmp_path / "libexec" / "deferred-spotify").exists()

    @pytest.mark.asyncio
    async def test_regenerate_replaces_symlink(self, tmp_path, sample_app):
        generator = TreeGenerator(output_dir=tmp_path)
        await generator.generate(sample_app)
        await generator.generate(sample_app)
        assert (tmp_path / "bin" / "obs").is_symlink()


# ═══════════════════════════════════════════
# Manifest Generator
# ═══════════════════════════════════════════


class TestManifestGenerator:
    @pytest.mark.asyncio
    async def test_manifest(self, tmp_path, sample_app):
        generator = ManifestGenerator(output_dir=tmp_path)
        await generate_all([sample_app], [generator])

        data = json.loads((tmp_path / "deferred-apps.json").read_text())
        assert data["version"] == "1.0.0"
        assert data["apps"][0]["pname"] == "obs-studio"
        assert data["apps"][0]["categories"] == ["AudioVideo", "Recorder"]


class TestFactory:
    def test_get_generator(self, tmp_path):
        assert isinstance(get_generator("tree", str(tmp_path)), TreeGenerator)
        assert isinstance(get_generator("manifest", str(tmp_path)), ManifestGenerator)

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            get_generator("zip", str(tmp_path))
