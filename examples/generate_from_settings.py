"""
Example: Generate deferred launchers from a settings file.

Usage:
    deferred-apps fetch-metadata https://example.org/nixpkgs/packages.json --dest packages.json
    python examples/generate_from_settings.py examples/deferred-apps.json
"""

import asyncio
import sys
from pathlib import Path

from deferred_apps import DeferredAppBuilder
from deferred_apps.core.batch import make_deferred_apps_advanced
from deferred_apps.generators import TreeGenerator, generate_all
from deferred_apps.repositories import get_repository
from deferred_apps.settings import load_settings


async def main(settings_path: Path):
    settings = load_settings(settings_path)
    repository = get_repository(metadata=settings.metadata, packages=settings.packages)
    builder = DeferredAppBuilder(repository, icon_theme_root=settings.icon_theme.theme_root())

    apps = make_deferred_apps_advanced(settings.app_configs(), builder)

    output_dir = Path("./deferred-apps-output")
    await generate_all(apps, [TreeGenerator(output_dir=output_dir)])

    print(f"\n✅ {len(apps)} launchers written to: {output_dir.absolute()}")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1])))
