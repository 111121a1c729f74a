"""
Manifest Generator — writes every resolved app into one JSON file.

Useful for inspecting what a settings file resolves to, or for feeding
another tool that does its own file generation.
"""

import json
import logging
from pathlib import Path

import aiofiles

from deferred_apps import __version__
from deferred_apps.models.app import ResolvedApp

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "deferred-apps.json"


class ManifestGenerator:
    """Collects apps and writes `deferred-apps.json` on finalize."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.apps: list[dict] = []

    @property
    def manifest_path(self) -> Path:
        return self.output_dir / MANIFEST_FILENAME

    async def generate(self, app: ResolvedApp) -> None:
        self.apps.append(app.to_dict())

    async def finalize(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        payload = {"version": __version__, "apps": self.apps}
        async with aiofiles.open(self.manifest_path, "w") as f:
            await f.write(json.dumps(payload, indent=2))
        logger.info(f"[MANIFEST] {len(self.apps)} apps written to {self.manifest_path}")
