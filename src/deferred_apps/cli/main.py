"""
Deferred Apps CLI — Generate launchers that download on first launch.

Usage:
    deferred-apps generate spotify obs-studio --metadata packages.json --allow-unfree
    deferred-apps generate --config deferred-apps.json --output-dir ./out
    deferred-apps check --config deferred-apps.json --nix-eval
    deferred-apps show obs-studio --metadata packages.json
    deferred-apps fetch-metadata https://example.org/nixpkgs/packages.json --dest packages.json
"""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from deferred_apps.core.errors import DeferredAppsError

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_batch(pnames, config, metadata, nix_eval, flake_ref, icon_theme, allow_unfree, gc_root, no_terminal):
    """Build (settings, app configs, builder) from a settings file and/or CLI options."""
    from deferred_apps.core.builder import DeferredAppBuilder
    from deferred_apps.repositories import get_repository
    from deferred_apps.settings import DeferredAppsSettings, ExtraAppSettings, load_settings

    settings = load_settings(Path(config)) if config else DeferredAppsSettings()

    if flake_ref:
        settings.flake_ref = flake_ref
    if allow_unfree:
        settings.allow_unfree = True
    if gc_root:
        settings.gc_root = True
    if metadata:
        settings.metadata = metadata
    if icon_theme:
        settings.icon_theme.path = icon_theme

    for pname in pnames:
        if no_terminal:
            settings.extra_apps.setdefault(pname, ExtraAppSettings(create_terminal_command=False))
        elif pname not in settings.apps:
            settings.apps.append(pname)

    repository = get_repository(
        metadata=settings.metadata,
        nix_eval=nix_eval,
        flake_ref=settings.flake_ref,
        packages=settings.packages,
    )
    builder = DeferredAppBuilder(repository, icon_theme_root=settings.icon_theme.theme_root())
    return settings, settings.app_configs(), builder


def _fail(error: DeferredAppsError) -> None:
    err_console.print(error.message, style="bold red", markup=False, highlight=False, soft_wrap=True)
    raise SystemExit(1)


def _source_options(f):
    """Options shared by every command that resolves packages."""
    f = click.option("--nix-eval", is_flag=True, help="Look packages up with `nix eval`.")(f)
    f = click.option(
        "--metadata", "-m", type=click.Path(exists=True, dir_okay=False), default=None,
        help="nixpkgs metadata dump (packages.json).",
    )(f)
    f = click.option(
        "--config", "-c", type=click.Path(exists=True, dir_okay=False), default=None,
        help="JSON settings file.",
    )(f)
    return f


@click.group()
@click.version_option(package_name="deferred-apps")
def cli():
    """Deferred Apps — Launchers that download their package on first launch."""
    pass


@cli.command()
@click.argument("pnames", nargs=-1)
@_source_options
@click.option("--flake-ref", "-r", type=str, default=None, help="Flake reference used at launch time.")
@click.option(
    "--icon-theme", "-i", type=click.Path(file_okay=False), default=None,
    help="Icon theme package root (containing share/icons).",
)
@click.option("--allow-unfree", is_flag=True, help="Allow unfree packages (runs them with --impure).")
@click.option("--gc-root", is_flag=True, help="Protect downloaded packages from garbage collection.")
@click.option("--no-terminal", is_flag=True, help="Don't create terminal commands for PNAMES.")
@click.option(
    "--format",
    "-f",
    "fmts",
    multiple=True,
    default=["tree"],
    type=click.Choice(["tree", "manifest"]),
    help="Output format.",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(),
    default="./deferred-apps",
    help="Output directory for generated files.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def generate(
    pnames, config, metadata, nix_eval, flake_ref, icon_theme, allow_unfree, gc_root,
    no_terminal, fmts, output_dir, verbose,
):
    """Generate deferred launchers for PNAMES and/or a settings file."""
    from deferred_apps.core.batch import make_deferred_apps_advanced
    from deferred_apps.generators import generate_all, get_generator

    _configure_logging(verbose)

    try:
        _, configs, builder = _load_batch(
            pnames, config, metadata, nix_eval, flake_ref, icon_theme, allow_unfree, gc_root, no_terminal
        )
        if not configs:
            raise click.UsageError("No apps given. Pass package names or --config.")

        apps = make_deferred_apps_advanced(configs, builder)
    except DeferredAppsError as e:
        _fail(e)

    generators = [get_generator(fmt, output_dir) for fmt in dict.fromkeys(fmts)]
    asyncio.run(generate_all(apps, generators))

    missing_icons = [app.pname for app in apps if not app.icon_found]
    console.print(f"[bold green][DONE][/bold green] {len(apps)} deferred apps written to {output_dir}")
    if missing_icons:
        console.print(f"[yellow]Icons not found in theme:[/yellow] {', '.join(missing_icons)}")


@cli.command()
@click.argument("pnames", nargs=-1)
@_source_options
@click.option("--no-terminal", is_flag=True, help="Treat PNAMES as having no terminal command.")
def check(pnames, config, metadata, nix_eval, no_terminal):
    """Check a batch for terminal command collisions without generating."""
    from deferred_apps.core.collisions import collision_candidates, detect_collisions

    _configure_logging(False)

    try:
        _, configs, builder = _load_batch(
            pnames, config, metadata, nix_eval, None, None, False, False, no_terminal
        )
        report = detect_collisions(collision_candidates(configs, builder.repository))
    except DeferredAppsError as e:
        _fail(e)

    if report is not None:
        err_console.print(report.message(), style="bold red", markup=False, highlight=False, soft_wrap=True)
        raise SystemExit(1)

    console.print(f"[bold green]OK[/bold green] {len(configs)} apps, no terminal command collisions")


@cli.command()
@click.argument("pname")
@_source_options
@click.option("--exe", type=str, default=None, help="Executable name override.")
@click.option("--icon", type=str, default=None, help="Icon name or absolute path.")
@click.option("--icon-theme", "-i", type=click.Path(file_okay=False), default=None, help="Icon theme package root.")
@click.option("--allow-unfree", is_flag=True, help="Allow unfree packages.")
def show(pname, config, metadata, nix_eval, exe, icon, icon_theme, allow_unfree):
    """Resolve a single app and print its descriptor."""
    from dataclasses import replace

    from deferred_apps.models.app import AppConfig

    _configure_logging(False)

    try:
        settings, configs, builder = _load_batch(
            (), config, metadata, nix_eval, None, icon_theme, allow_unfree, False, False
        )
        app_config = next((c for c in configs if c.pname == pname), None)
        if app_config is None:
            app_config = AppConfig(
                pname=pname,
                flake_ref=settings.flake_ref,
                allow_unfree=settings.allow_unfree,
                gc_root=settings.gc_root,
            )
        if allow_unfree:
            app_config = replace(app_config, allow_unfree=True)
        if exe:
            app_config = replace(app_config, exe=exe)
        if icon:
            app_config = replace(app_config, icon=icon)
        app = builder.build(app_config)
    except DeferredAppsError as e:
        _fail(e)

    table = Table(title=f"Deferred app: {app.pname}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in app.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)


@cli.command("fetch-metadata")
@click.argument("url")
@click.option(
    "--dest", "-d", type=click.Path(dir_okay=False), default="./packages.json",
    help="Where to save the metadata dump.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def fetch_metadata(url, dest, verbose):
    """Download a nixpkgs metadata dump for offline resolution."""
    from deferred_apps.repositories.fetch import download_metadata_dump

    _configure_logging(verbose)

    try:
        path = asyncio.run(download_metadata_dump(url, Path(dest)))
    except DeferredAppsError as e:
        _fail(e)

    console.print(f"[bold green][DONE][/bold green] Metadata saved to {path}")


if __name__ == "__main__":
    cli()
