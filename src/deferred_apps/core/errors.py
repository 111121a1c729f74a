"""
Error types raised while resolving and generating deferred apps.

Every failure mode is a distinct exception so callers can tell a malformed
package name from a missing package, a license policy refusal, or a batch
with clashing terminal commands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deferred_apps.core.collisions import CollisionReport


class DeferredAppsError(Exception):
    """Base exception for deferred-apps errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DeferredAppsError):
    """A package identifier failed validation."""

    def __init__(self, rule: str, value: str):
        if value:
            message = f"deferred-apps: pname {rule} (got: {value})"
        else:
            message = f"deferred-apps: pname {rule}"
        super().__init__(message)
        self.rule = rule
        self.value = value


class PackageNotFoundError(DeferredAppsError):
    """The package does not exist in the metadata repository."""

    def __init__(self, pname: str):
        super().__init__(
            f"deferred-apps: Package '{pname}' not found in nixpkgs.\n"
            "Check the spelling or use 'extraApps' with manual configuration.\n"
            "Note: Nested packages are only supported one level deep "
            "(e.g., 'python313Packages.numpy')."
        )
        self.pname = pname


class UnfreePackageError(DeferredAppsError):
    """The package is unfree and the caller has not opted in."""

    def __init__(self, pname: str):
        super().__init__(
            f"deferred-apps: Package '{pname}' is unfree. "
            "Set 'allowUnfree = true' to enable it (uses --impure, which lets "
            "environment variables influence the evaluation)."
        )
        self.pname = pname


class TerminalCollisionError(DeferredAppsError):
    """Two or more apps in a batch would share a terminal command."""

    def __init__(self, report: CollisionReport):
        super().__init__(report.message())
        self.report = report


class ConfigError(DeferredAppsError):
    """Settings file or command-line input could not be used."""
