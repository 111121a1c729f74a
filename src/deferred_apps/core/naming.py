"""Display-name and terminal-command normalization."""


def capitalize(s: str) -> str:
    """Uppercase the first character only: "fooBar" -> "FooBar"."""
    return s[:1].upper() + s[1:]


def to_display_name(pname: str) -> str:
    """
    "obs-studio" -> "Obs Studio".

    Only '-' separates words; a nested name such as "python313Packages.numpy"
    stays one word ("Python313Packages.numpy").
    """
    return " ".join(capitalize(part) for part in pname.split("-"))


def to_terminal_command(exe: str) -> str:
    """Lowercase the executable name: "Discord" -> "discord"."""
    return exe.lower()
