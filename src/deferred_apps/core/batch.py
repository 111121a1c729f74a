"""
Batch entry points.

Each batch is all-or-nothing: collisions are checked across every app
before the first one is built, and the first per-app failure propagates.
"""

import logging

from deferred_apps.core.builder import DeferredAppBuilder
from deferred_apps.core.collisions import ensure_no_collisions
from deferred_apps.models.app import DEFAULT_FLAKE_REF, AppConfig, ResolvedApp

logger = logging.getLogger(__name__)


def make_deferred_apps(pnames: list[str], builder: DeferredAppBuilder) -> list[ResolvedApp]:
    """Deferred apps for plain package names with the default flake reference."""
    return make_deferred_apps_from(DEFAULT_FLAKE_REF, pnames, builder)


def make_deferred_apps_from(
    flake_ref: str, pnames: list[str], builder: DeferredAppBuilder
) -> list[ResolvedApp]:
    """Deferred apps for plain package names fetched from `flake_ref`."""
    configs = [AppConfig(pname=pname, flake_ref=flake_ref) for pname in pnames]
    return make_deferred_apps_advanced(configs, builder)


def make_deferred_apps_advanced(
    configs: list[AppConfig], builder: DeferredAppBuilder
) -> list[ResolvedApp]:
    """Deferred apps for fully customized configs."""
    ensure_no_collisions(configs, builder.repository)

    apps = [builder.build(config) for config in configs]
    logger.info(f"[BATCH] Resolved {len(apps)} deferred apps")
    return apps
