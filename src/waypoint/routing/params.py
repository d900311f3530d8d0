"""Path placeholder converters.

A placeholder is ``{name}`` or ``{name:type}``. The converter decides
which path segments the placeholder accepts. Matched values are always
handed to controllers as strings.
"""

import re

# Segment regex for each supported converter
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}

_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_param_name(name: str) -> bool:
    """Placeholder names must be Python identifiers."""
    return _NAME.match(name) is not None
