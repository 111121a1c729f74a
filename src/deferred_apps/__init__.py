"""
Deferred Apps - Desktop launchers that download their package on first launch.

Resolves nixpkgs metadata (executable, description, license) and icons at
generation time, and renders wrapper scripts and desktop entries that defer
the actual package fetch to `nix shell`.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for the builder and config model."""
    if name == "DeferredAppBuilder":
        from deferred_apps.core.builder import DeferredAppBuilder

        return DeferredAppBuilder
    if name == "AppConfig":
        from deferred_apps.models.app import AppConfig

        return AppConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["DeferredAppBuilder", "AppConfig", "__version__"]
