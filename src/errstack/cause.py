"""Cause-chain traversal.

Walks wrappers through the Unwrapper capability only, one layer at a time and
without recursion. A chain that loops back on itself stops at the first node
seen twice and logs a warning.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import Unwrapper
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

log = get_logger("errstack.cause")


def cause(err: BaseException | None) -> BaseException | None:
    """Return the innermost error of the chain starting at `err`.

    Unwrapping stops at the first value that has no `unwrap()` or when
    `unwrap()` returns None (then None is returned).

    Examples:
        >>> root = new("ooh")
        >>> cause(wrap(wrap(root, "a"), "b")) is root
        True
        >>> cause(None) is None
        True
    """
    seen: set[int] = set()
    while err is not None and isinstance(err, Unwrapper):
        if id(err) in seen:
            log.warning("cause chain cycle detected", error_type=type(err).__name__, depth=len(seen))
            return err
        seen.add(id(err))
        err = err.unwrap()
    return err


def iter_causes(err: BaseException | None) -> Iterator[BaseException]:
    """Yield `err` and each error it wraps, outermost first."""
    seen: set[int] = set()
    while err is not None:
        if id(err) in seen:
            log.warning("cause chain cycle detected", error_type=type(err).__name__, depth=len(seen))
            return
        seen.add(id(err))
        yield err
        if not isinstance(err, Unwrapper):
            return
        err = err.unwrap()
