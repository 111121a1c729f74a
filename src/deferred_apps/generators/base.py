"""
Generator Protocol — Base interface for all output backends.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from deferred_apps.models.app import ResolvedApp


@runtime_checkable
class Generator(Protocol):
    """
    Protocol that all generators must implement.

    Generators receive fully resolved apps (a batch has already passed
    collision detection) and write them out in their own format.
    """

    async def generate(self, app: ResolvedApp) -> None:
        """Write the files for a single app."""
        ...

    async def finalize(self) -> None:
        """Called after every app in the batch has been generated."""
        ...
