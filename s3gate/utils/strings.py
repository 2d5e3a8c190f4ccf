"""String utilities."""

import re

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_constant_case(value: str) -> str:
    """Convert a CamelCase or snake_case name to CONSTANT_CASE.

    Example:
        `MalformedInputException` -> `MALFORMED_INPUT_EXCEPTION`

    """
    return _CAMEL_BOUNDARY_RE.sub("_", value).replace("-", "_").upper()
