"""errstack - errors that remember where they came from.

Wrap a failure with context while keeping the original recoverable, and
render where it was created and where it was wrapped.

Quick Start:
    >>> from errstack import cause, new, wrap
    >>>
    >>> def read_config(path: str) -> Exception:
    ...     return new(f"missing key in {path}")
    >>>
    >>> err = wrap(read_config("app.toml"), "loading settings")
    >>> str(err)
    'loading settings'
    >>> str(cause(err))
    'missing key in app.toml'
    >>> print(f"{err:+v}")          # message followed by the wrap site stack
    >>> print(f"{cause(err):+v}")   # message followed by the creation site stack

Stack rendering verbs (Frame and StackTrace):
    "s"   file base name                   "[a.py b.py]"
    "d"   line number (Frame only)
    "n"   short function name (Frame only)
    "v"   file:line                        "[a.py:1 b.py:2]"
    "+s"  qualified name + trimmed path
    "+v"  qualified name + trimmed path:line, one block per frame
    "#v"  StackTrace([a.py:1, b.py:2])     (StackTrace only)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .cause import cause, iter_causes
from .errors import (
    Fundamental,
    StackTracer,
    TracedError,
    Unwrapper,
    Wrapped,
    errorf,
    new,
    with_message,
    with_messagef,
    with_stack,
    wrap,
    wrapf,
)
from .frame import Frame, funcname
from .paths import trim_path
from .stack import StackTrace, callers

__all__ = [
    # Constructors
    "new", "errorf", "wrap", "wrapf", "with_message", "with_messagef", "with_stack",
    # Cause chain
    "cause", "iter_causes",
    # Error types & capabilities
    "TracedError", "Fundamental", "Wrapped", "StackTracer", "Unwrapper",
    # Stack capture & formatting
    "Frame", "StackTrace", "callers", "funcname", "trim_path",
]
