"""Tests for terminal command collision detection."""

import pytest

from deferred_apps.core.collisions import (
    CollisionReport,
    collision_candidates,
    detect_collisions,
    ensure_no_collisions,
)
from deferred_apps.core.errors import PackageNotFoundError, TerminalCollisionError
from deferred_apps.models.app import AppConfig, CollisionCandidate


# ═══════════════════════════════════════════
# Detection
# ═══════════════════════════════════════════


class TestDetectCollisions:
    def test_collision(self):
        report = detect_collisions(
            [CollisionCandidate("a", "x", True), CollisionCandidate("b", "x", True)]
        )
        assert report is not None
        assert report.conflicts == {"x": ["a", "b"]}
        message = report.message()
        assert "'x' -> 'a', 'b'" in message
        assert "createTerminalCommand = false" in message

    def test_disabled_entries_excluded(self):
        report = detect_collisions(
            [CollisionCandidate("a", "x", True), CollisionCandidate("b", "x", False)]
        )
        assert report is None

    def test_unique_commands(self):
        assert detect_collisions([CollisionCandidate("a", "x"), CollisionCandidate("b", "y")]) is None

    def test_empty_batch(self):
        assert detect_collisions([]) is None

    def test_multiple_groups_one_line_each(self):
        report = detect_collisions(
            [
                CollisionCandidate("p1", "zed"),
                CollisionCandidate("p2", "abc"),
                CollisionCandidate("p3", "zed"),
                CollisionCandidate("p4", "abc"),
                CollisionCandidate("p5", "abc"),
                CollisionCandidate("p6", "solo"),
            ]
        )
        assert list(report.conflicts) == ["abc", "zed"]
        lines = report.message().splitlines()
        assert "  'abc' -> 'p2', 'p4', 'p5'" in lines
        assert "  'zed' -> 'p1', 'p3'" in lines
        assert not any("solo" in line for line in lines)

    def test_str_is_message(self):
        report = CollisionReport({"x": ["a", "b"]})
        assert str(report) == report.message()


# ═══════════════════════════════════════════
# Candidates from Configs
# ═══════════════════════════════════════════


class TestCandidatesFromConfigs:
    def test_case_insensitive_collision(self, repository):
        # obs-wrapper's mainProgram is "OBS", obs-studio's is "obs"
        configs = [AppConfig(pname="obs-studio"), AppConfig(pname="obs-wrapper")]
        report = detect_collisions(collision_candidates(configs, repository))
        assert report.conflicts == {"obs": ["obs-studio", "obs-wrapper"]}

    def test_exe_override_resolves_collision(self, repository):
        configs = [AppConfig(pname="obs-studio"), AppConfig(pname="obs-wrapper", exe="obs-wrap")]
        assert detect_collisions(collision_candidates(configs, repository)) is None

    def test_disabled_apps_not_looked_up(self, repository):
        configs = [AppConfig(pname="not-in-repo", create_terminal_command=False)]
        candidates = collision_candidates(configs, repository)
        assert candidates[0].terminal_enabled is False

    def test_unknown_package_fails(self, repository):
        with pytest.raises(PackageNotFoundError):
            collision_candidates([AppConfig(pname="not-in-repo")], repository)

    def test_ensure_no_collisions_raises(self, repository):
        configs = [AppConfig(pname="a", exe="same"), AppConfig(pname="b", exe="SAME")]
        with pytest.raises(TerminalCollisionError) as exc:
            ensure_no_collisions(configs, repository)
        assert exc.value.report.conflicts == {"same": ["a", "b"]}
        assert "Terminal command collision detected" in str(exc.value)
