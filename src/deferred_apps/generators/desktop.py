"""
Desktop entry rendering (freedesktop.org Desktop Entry Specification).

One `Key=Value` per line; string values have backslash, newline, tab and
carriage return escaped so a value can never spill onto another line.
"""

from deferred_apps.models.app import DesktopEntryConfig


def escape_value(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )


def quote_exec_arg(arg: str) -> str:
    """Quote an Exec argument if it contains reserved characters."""
    reserved = set(" \t\n\"'\\><~|&;$*?#()`")
    if not any(ch in reserved for ch in arg):
        return arg
    escaped = "".join("\\" + ch if ch in '"`$\\' else ch for ch in arg)
    return f'"{escaped}"'


def _bool(value: bool) -> str:
    return "true" if value else "false"


def render_desktop_entry(entry: DesktopEntryConfig) -> str:
    """Render a `.desktop` file body."""
    lines = [
        "[Desktop Entry]",
        "Type=Application",
        f"Name={escape_value(entry.display_name)}",
        f"Comment={escape_value(entry.description)}",
    ]
    if entry.exec_path:
        lines.append(f"Exec={escape_value(quote_exec_arg(entry.exec_path))} %U")
    lines.append(f"Icon={escape_value(entry.icon_path)}")
    lines.append(f"Terminal={_bool(entry.terminal)}")
    lines.append(f"StartupNotify={_bool(entry.startup_notify)}")
    lines.append(f"StartupWMClass={escape_value(entry.startup_window_class)}")
    if entry.categories:
        categories = "".join(f"{escape_value(c)};" for c in entry.categories)
        lines.append(f"Categories={categories}")
    return "\n".join(lines) + "\n"
