"""
Wrapper script rendering.

The wrapper pre-fetches the package with `nix build` (optionally pinning it
with a GC root), shows a first-run notification, then execs the program via
`nix shell`. Unfree packages run with `--impure` and NIXPKGS_ALLOW_UNFREE=1;
free packages always run pure.
"""

import shlex

from deferred_apps.models.app import WrapperConfig

WRAPPER_TEMPLATE = """\
#!/usr/bin/env bash
set -euo pipefail

PNAME={pname}
FLAKE_REF={flake_ref}
EXE={exe}
ICON={icon}
NEEDS_IMPURE={needs_impure}
GC_ROOT={gc_root}

GC_ROOT_DIR="${{XDG_DATA_HOME:-$HOME/.local/share}}/deferred-apps/gcroots"

# The GC root doubles as the "already downloaded" marker
maybe_notify() {{
  if [ "$GC_ROOT" = "1" ] && [ -L "$GC_ROOT_DIR/$PNAME" ]; then
    return
  fi
  if command -v notify-send &>/dev/null; then
    notify-send \\
      --app-name="Deferred Apps" \\
      --urgency=low \\
      --icon="$ICON" \\
      "Starting $PNAME..." \\
      "Downloading application (first run only)..." &
  fi
}}

ensure_downloaded() {{
  local build_args=("$FLAKE_REF#$PNAME" "--no-link" "--print-out-paths")

  if [ "$NEEDS_IMPURE" = "1" ]; then
    export NIXPKGS_ALLOW_UNFREE=1
    build_args=("--impure" "${{build_args[@]}}")
  fi

  local store_path
  store_path=$(nix build "${{build_args[@]}}" 2>/dev/null) || return 0

  if [ "$GC_ROOT" = "1" ] && [ -n "$store_path" ]; then
    mkdir -p "$GC_ROOT_DIR"
    nix-store --add-root "$GC_ROOT_DIR/$PNAME" --indirect -r "$store_path" &>/dev/null || true
  fi
}}

maybe_notify
ensure_downloaded

if [ "$NEEDS_IMPURE" = "1" ]; then
  export NIXPKGS_ALLOW_UNFREE=1
  exec nix shell --impure "$FLAKE_REF#$PNAME" --command "$EXE" "$@"
else
  exec nix shell "$FLAKE_REF#$PNAME" --command "$EXE" "$@"
fi
"""


def render_wrapper_script(config: WrapperConfig) -> str:
    """Render the bash wrapper for one app."""
    return WRAPPER_TEMPLATE.format(
        pname=shlex.quote(config.package_id),
        flake_ref=shlex.quote(config.flake_ref),
        exe=shlex.quote(config.executable_name),
        icon=shlex.quote(config.icon_path),
        needs_impure="1" if config.needs_unsafe_mode else "0",
        gc_root="1" if config.gc_root_enabled else "0",
    )
