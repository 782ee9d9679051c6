"""Source-path trimming for portable trace output.

Absolute paths differ between machines and virtualenvs. Trimming a file path
to start at its module's package path keeps rendered traces stable:

    >>> trim_path("errstack/tests/test_stack.test_x", "/srv/app/src/errstack/tests/test_stack.py")
    'errstack/tests/test_stack.py'
"""

from __future__ import annotations


def package_path(name: str) -> str:
    """Package path of a qualified function name (text before the first '.' after the last '/')."""
    slash = name.rfind("/")
    dot = name.find(".", slash + 1)
    return name[:dot] if dot >= 0 else name


def trim_path(name: str, file: str) -> str:
    """Return `file` from the first occurrence of the package path of `name` onward.

    Best effort: a package path that cannot be located in `file` leaves it unchanged.
    """
    pkg = package_path(name)
    if not pkg or (i := file.find(pkg)) < 0:
        return file
    return file[i:]
