"""Tests for package identifier validation."""

import pytest

from deferred_apps.core.errors import ValidationError
from deferred_apps.core.validation import validate_pname


# ═══════════════════════════════════════════
# Valid Identifiers
# ═══════════════════════════════════════════


class TestValidNames:
    @pytest.mark.parametrize(
        "pname",
        ["spotify", "obs-studio", "python313Packages.numpy", "a.b.c", "_private", "x", "Pkg_2-3"],
    )
    def test_identity(self, pname):
        assert validate_pname(pname) == pname


# ═══════════════════════════════════════════
# Rule Violations
# ═══════════════════════════════════════════


class TestInvalidNames:
    def test_empty(self):
        with pytest.raises(ValidationError) as exc:
            validate_pname("")
        assert "cannot be empty" in str(exc.value)

    @pytest.mark.parametrize("pname", ["foo/bar", "/abs", "trailing/"])
    def test_slash(self, pname):
        with pytest.raises(ValidationError) as exc:
            validate_pname(pname)
        assert "cannot contain '/'" in str(exc.value)
        assert pname in str(exc.value)

    def test_space(self):
        with pytest.raises(ValidationError) as exc:
            validate_pname("my app")
        assert "cannot contain spaces" in str(exc.value)
        assert exc.value.value == "my app"

    def test_leading_dot(self):
        with pytest.raises(ValidationError) as exc:
            validate_pname(".hidden")
        assert "cannot start with '.'" in str(exc.value)

    def test_leading_dash(self):
        with pytest.raises(ValidationError) as exc:
            validate_pname("-flag")
        assert "cannot start with '-'" in str(exc.value)

    def test_rules_checked_in_order(self):
        # Both '/' and ' ' are present; '/' is checked first
        with pytest.raises(ValidationError) as exc:
            validate_pname("a/b c")
        assert exc.value.rule == "cannot contain '/'"

        with pytest.raises(ValidationError) as exc:
            validate_pname(".a b")
        assert exc.value.rule == "cannot contain spaces"
