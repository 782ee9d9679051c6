"""Call-stack capture and aggregate formatting.

A StackTrace is an immutable tuple of Frames, most recent call first.
Formatting applies one per-frame verb to every frame:

    >>> st = callers()
    >>> f"{st:s}"    # '[test_stack.py runner.py]'
    >>> f"{st}"      # '[test_stack.py:42 runner.py:17]'
    >>> f"{st:+v}"   # '\\nmod.func\\n\\tpkg/mod.py:42\\nmod.caller\\n\\tpkg/mod.py:17'
    >>> f"{st:#v}"   # 'StackTrace([test_stack.py:42, runner.py:17])'
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, overload

from .frame import Frame
from .logging import get_logger
from .settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import SupportsIndex

log = get_logger("errstack.stack")


class StackTrace(tuple[Frame, ...]):
    """Ordered frames captured at one point in time. Slicing yields a StackTrace."""

    __slots__ = ()

    def __new__(cls, frames: Iterable[Frame] = ()) -> StackTrace:
        return super().__new__(cls, frames)

    @overload
    def __getitem__(self, index: SupportsIndex) -> Frame: ...
    @overload
    def __getitem__(self, index: slice) -> StackTrace: ...

    def __getitem__(self, index: SupportsIndex | slice) -> Frame | StackTrace:
        if isinstance(index, slice):
            return StackTrace(super().__getitem__(index))
        return super().__getitem__(index)

    def __format__(self, spec: str) -> str:
        match spec:
            case "+v":
                return "".join(f"\n{frame:+v}" for frame in self)
            case "#v":
                return repr(self)
            case "" | "v" | "s" | "+s":
                return f"[{' '.join(format(frame, spec or 'v') for frame in self)}]"
            case _:
                raise ValueError(f"Unknown format code {spec!r} for object of type 'StackTrace'")

    def __str__(self) -> str:
        return format(self, "v")

    def __repr__(self) -> str:
        return f"StackTrace([{', '.join(format(frame, 'v') for frame in self)}])"


EMPTY = StackTrace()


def callers(skip: int = 0, depth: int | None = None) -> StackTrace:
    """Capture the stack starting at the caller of `callers`.

    Args:
        skip: Additional frames to skip above the caller
        depth: Maximum frames to record (default: ERRSTACK_STACK_DEPTH)

    Returns:
        StackTrace whose first frame is the call site `skip` levels above the caller.
        Empty when the interpreter offers no frame introspection.
    """
    limit = depth if depth is not None else get_settings().stack_depth
    try:
        frame = sys._getframe(skip + 1)
    except (AttributeError, ValueError):
        log.debug("stack capture unavailable", skip=skip)
        return EMPTY

    frames: list[Frame] = []
    while frame is not None and len(frames) < limit:
        frames.append(Frame.from_frame(frame))
        frame = frame.f_back
    return StackTrace(frames)
