"""
Tree Generator — writes installable launcher files.

Output structure:
    output_dir/
    ├── libexec/
    │   └── deferred-obs-studio        (wrapper script, executable)
    ├── share/applications/
    │   └── obs-studio.desktop
    └── bin/
        └── obs -> ../libexec/deferred-obs-studio
"""

import logging
import os
from pathlib import Path

import aiofiles

from deferred_apps.generators.desktop import render_desktop_entry
from deferred_apps.generators.wrapper import render_wrapper_script
from deferred_apps.models.app import ResolvedApp

logger = logging.getLogger(__name__)


class TreeGenerator:
    """
    Writes a wrapper script, desktop entry and optional terminal command.

    The desktop entry points at the wrapper's absolute path; the `bin/`
    entry is a relative symlink so the tree can be moved as a whole.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.count = 0

    def wrapper_path(self, app: ResolvedApp) -> Path:
        return self.output_dir / "libexec" / app.wrapper_name

    def desktop_path(self, app: ResolvedApp) -> Path:
        return self.output_dir / "share" / "applications" / f"{app.pname}.desktop"

    def command_path(self, app: ResolvedApp) -> Path:
        return self.output_dir / "bin" / app.terminal_command

    async def generate(self, app: ResolvedApp) -> None:
        """Write all files for one app."""
        wrapper = self.wrapper_path(app)
        wrapper.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(wrapper, "w") as f:
            await f.write(render_wrapper_script(app.wrapper_config()))
        wrapper.chmod(0o755)

        desktop = self.desktop_path(app)
        desktop.parent.mkdir(parents=True, exist_ok=True)
        entry = app.desktop_entry(exec_path=str(wrapper.resolve()))
        async with aiofiles.open(desktop, "w") as f:
            await f.write(render_desktop_entry(entry))

        if app.create_terminal_command:
            command = self.command_path(app)
            command.parent.mkdir(parents=True, exist_ok=True)
            if command.is_symlink() or command.exists():
                command.unlink()
            command.symlink_to(os.path.relpath(wrapper, command.parent))

        self.count += 1
        logger.debug(f"[TREE] Generated {app.pname}")

    async def finalize(self) -> None:
        """Log generation summary."""
        logger.info(f"[TREE] Generation complete: {self.count} apps written to {self.output_dir}")
