"""
Repository backed by `nix eval`.

Evaluates `<flakeRef>#<pname>.meta` without building anything, the same
lazy metadata access the launcher relies on at generation time.
"""

import json
import logging
import subprocess

from deferred_apps.core.metadata import is_supported_attr_path
from deferred_apps.models.app import DEFAULT_FLAKE_REF, PackageMetadata

logger = logging.getLogger(__name__)


class NixEvalRepository:
    """Looks packages up by evaluating their `meta` attribute with the nix CLI."""

    def __init__(self, flake_ref: str = DEFAULT_FLAKE_REF, nix_binary: str = "nix", timeout: float = 60.0):
        self.flake_ref = flake_ref
        self.nix_binary = nix_binary
        self.timeout = timeout

    def command(self, pname: str) -> list[str]:
        return [
            self.nix_binary,
            "eval",
            "--json",
            "--extra-experimental-features",
            "nix-command flakes",
            f"{self.flake_ref}#{pname}.meta",
        ]

    def lookup(self, pname: str) -> PackageMetadata | None:
        if not is_supported_attr_path(pname):
            return None

        try:
            result = subprocess.run(
                self.command(pname),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.warning(f"[REPO] '{self.nix_binary}' not found; cannot look up {pname}")
            return None
        except subprocess.TimeoutExpired:
            logger.warning(f"[REPO] nix eval timed out for {pname}")
            return None

        if result.returncode != 0:
            logger.debug(f"[REPO] nix eval failed for {pname}: {result.stderr.strip()}")
            return None

        try:
            meta = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            logger.warning(f"[REPO] Invalid JSON from nix eval for {pname}: {e}")
            return None

        if not isinstance(meta, dict):
            return None
        return PackageMetadata.from_meta(meta)
