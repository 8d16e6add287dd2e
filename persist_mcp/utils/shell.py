"""Shell command quoting utilities."""

import re

# Characters that stay special inside a double-quoted shell string
_DOUBLE_QUOTE_SPECIAL = re.compile(r'([\\"$`])')


def shell_escape_arg(value: str) -> str:
    """Wrap a value in single quotes for use as one shell word.

    Always quotes, even when the value is already shell-safe, so the result
    can be embedded in a larger command verbatim.

    Args:
        value: Raw argument (typically a path)

    Returns:
        Single-quoted argument
    """
    return "'" + value.replace("'", "'\\''") + "'"


def login_shell(script: str) -> str:
    """Wrap a script as ``sh -lc "<script>"``.

    Args:
        script: Shell script whose arguments are already escaped

    Returns:
        Command string for the sandbox process API
    """
    escaped = _DOUBLE_QUOTE_SPECIAL.sub(r"\\\1", script)
    return f'sh -lc "{escaped}"'
