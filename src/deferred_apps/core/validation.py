"""
Package identifier validation.

Catches common mistakes in package names before any metadata lookup.
No normalization is performed: a valid name is returned unchanged.
"""

from deferred_apps.core.errors import ValidationError

# (predicate that flags a bad name, rule description), checked in order
_RULES = [
    (lambda pname: pname == "", "cannot be empty"),
    (lambda pname: "/" in pname, "cannot contain '/'"),
    (lambda pname: " " in pname, "cannot contain spaces"),
    (lambda pname: pname.startswith("."), "cannot start with '.'"),
    (lambda pname: pname.startswith("-"), "cannot start with '-'"),
]


def validate_pname(pname: str) -> str:
    """
    Validate a package identifier.

    Args:
        pname: nixpkgs attribute name, optionally one level nested ("ns.name").

    Returns:
        The same identifier.

    Raises:
        ValidationError: naming the first rule the identifier breaks.
    """
    for is_invalid, rule in _RULES:
        if is_invalid(pname):
            raise ValidationError(rule, pname)
    return pname
