"""
Terminal command collision detection.

Two apps whose executables lowercase to the same name would both try to
install `bin/<name>`. The whole batch is checked before anything is built.
"""

import logging
from dataclasses import dataclass, field

from deferred_apps.core.errors import TerminalCollisionError
from deferred_apps.core.metadata import MetadataRepository, resolve_executable
from deferred_apps.core.naming import to_terminal_command
from deferred_apps.core.validation import validate_pname
from deferred_apps.models.app import AppConfig, CollisionCandidate

logger = logging.getLogger(__name__)


@dataclass
class CollisionReport:
    """Terminal commands claimed by more than one package."""

    conflicts: dict[str, list[str]] = field(default_factory=dict)

    def message(self) -> str:
        lines = [
            "deferred-apps: Terminal command collision detected!",
            "Multiple packages would create the same terminal command:",
        ]
        for command, pnames in self.conflicts.items():
            owners = ", ".join(f"'{pname}'" for pname in pnames)
            lines.append(f"  '{command}' -> {owners}")
        lines.append(
            "Fix: Set 'createTerminalCommand = false' for some packages, or use 'exe' to override."
        )
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.message()


def detect_collisions(candidates: list[CollisionCandidate]) -> CollisionReport | None:
    """
    Group enabled apps by terminal command and report shared commands.

    Returns:
        None if every enabled command is unique, otherwise a report with
        commands sorted and owners in batch order.
    """
    grouped: dict[str, list[str]] = {}
    for candidate in candidates:
        if not candidate.terminal_enabled:
            continue
        grouped.setdefault(candidate.terminal_command, []).append(candidate.pname)

    duplicates = {
        command: pnames for command, pnames in sorted(grouped.items()) if len(pnames) > 1
    }
    if not duplicates:
        return None

    logger.debug(f"[COLLISION] {len(duplicates)} shared terminal commands: {sorted(duplicates)}")
    return CollisionReport(conflicts=duplicates)


def collision_candidates(
    configs: list[AppConfig], repository: MetadataRepository
) -> list[CollisionCandidate]:
    """
    Derive collision candidates from app configs.

    Apps with the terminal command disabled are never looked up.
    """
    candidates = []
    for config in configs:
        if not config.create_terminal_command:
            candidates.append(CollisionCandidate(config.pname, "", terminal_enabled=False))
            continue
        pname = validate_pname(config.pname)
        exe = resolve_executable(repository, pname, config.exe)
        candidates.append(CollisionCandidate(pname, to_terminal_command(exe)))
    return candidates


def ensure_no_collisions(configs: list[AppConfig], repository: MetadataRepository) -> None:
    """Raise TerminalCollisionError if any two configs share a terminal command."""
    report = detect_collisions(collision_candidates(configs, repository))
    if report is not None:
        raise TerminalCollisionError(report)
