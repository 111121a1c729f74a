"""Output backends for resolved deferred apps."""

from deferred_apps.generators.base import Generator
from deferred_apps.generators.manifest import ManifestGenerator
from deferred_apps.generators.tree import TreeGenerator


def get_generator(format_name: str, output_dir: str) -> Generator:
    """Factory function to create a generator by format name."""
    from pathlib import Path

    out = Path(output_dir)
    match format_name:
        case "tree":
            return TreeGenerator(output_dir=out)
        case "manifest":
            return ManifestGenerator(output_dir=out)
        case _:
            raise ValueError(f"Unknown output format: {format_name!r}. Use 'tree' or 'manifest'.")


async def generate_all(apps, generators: list[Generator]) -> None:
    """Run every generator over the batch, then finalize each one."""
    for app in apps:
        for generator in generators:
            await generator.generate(app)
    for generator in generators:
        await generator.finalize()


__all__ = ["Generator", "TreeGenerator", "ManifestGenerator", "get_generator", "generate_all"]
