"""Error values that carry their provenance.

Two capabilities drive everything here, and any exception type may implement
either one:

- StackTracer: `stack_trace()` returns where the error was created or wrapped
- Unwrapper: `unwrap()` returns the error it was built from

`Fundamental` is a terminal error with a message and a stack. `Wrapped` is a
node on a cause chain: it holds one cause, optionally a message, optionally
its own stack. A node without a stack reports its cause's stack.

    >>> err = wrap(new("connection reset"), "fetching user 42")
    >>> str(err)
    'fetching user 42'
    >>> print(f"{err:+v}")
    fetching user 42
    myapp/client.fetch_user
    \tmyapp/client.py:31
    ...
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .stack import EMPTY, StackTrace, callers


@runtime_checkable
class StackTracer(Protocol):
    """Anything that can report the stack it was captured with."""

    def stack_trace(self) -> StackTrace: ...


@runtime_checkable
class Unwrapper(Protocol):
    """Anything that exposes the error it wraps."""

    def unwrap(self) -> BaseException | None: ...


class TracedError(Exception):
    """Base for errstack errors: message rendering plus format verbs.

    Format verbs:
        "", "s", "v": the message (same as str())
        "q": the message as a quoted literal
        "+v": the message followed by the verbose stack trace
    """

    __slots__ = ()

    def stack_trace(self) -> StackTrace:
        return EMPTY

    def __format__(self, spec: str) -> str:
        match spec:
            case "" | "s" | "v":
                return str(self)
            case "q":
                return repr(str(self))
            case "+v":
                return f"{self}{self.stack_trace():+v}"
            case _:
                raise ValueError(f"Unknown format code {spec!r} for object of type {type(self).__name__!r}")


class Fundamental(TracedError):
    """Terminal error: a message and the stack where it was created. Has no cause."""

    __slots__ = ("_message", "_stack")

    def __init__(self, message: str, stack: StackTrace | None = None) -> None:
        super().__init__(message)
        self._message = message
        self._stack = stack if stack is not None else callers(1)

    @property
    def message(self) -> str:
        return self._message

    def stack_trace(self) -> StackTrace:
        return self._stack

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r})"

    def __reduce__(self) -> tuple[type[Fundamental], tuple[str, StackTrace]]:
        return type(self), (self._message, self._stack)


class Wrapped(TracedError):
    """Cause-chain node: one cause plus an optional message and an optional stack.

    Attributes are read-only. The cause is also set as `__cause__` so the
    interpreter's traceback shows the chain when a wrapper is raised.
    """

    __slots__ = ("_cause", "_message", "_stack")

    def __init__(
        self,
        cause: BaseException,
        message: str | None = None,
        stack: StackTrace | None = None,
    ) -> None:
        super().__init__(*(() if message is None else (message,)))
        self._cause = cause
        self._message = message
        self._stack = stack
        self.__cause__ = cause

    @property
    def message(self) -> str | None:
        return self._message

    def unwrap(self) -> BaseException:
        return self._cause

    def stack_trace(self) -> StackTrace:
        """Own stack if this node captured one, otherwise the nearest one down the chain."""
        node: BaseException = self
        while isinstance(node, Wrapped):
            if node._stack is not None:
                return node._stack
            node = node._cause
        return node.stack_trace() if isinstance(node, StackTracer) else EMPTY

    def __str__(self) -> str:
        node: BaseException = self
        while isinstance(node, Wrapped):
            if node._message is not None:
                return node._message
            node = node._cause
        return str(node)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cause!r}, {self._message!r})"

    def __reduce__(self) -> tuple[type[Wrapped], tuple[BaseException, str | None, StackTrace | None]]:
        return type(self), (self._cause, self._message, self._stack)


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def new(message: str) -> Fundamental:
    """Create an error with `message` and the stack at the call site."""
    return Fundamental(message, callers(1))


def errorf(fmt: str, /, *args: Any, **kwargs: Any) -> Fundamental:
    """Create an error from a `str.format` template, recording the stack at the call site."""
    return Fundamental(fmt.format(*args, **kwargs), callers(1))


def wrap(err: BaseException | None, message: str) -> Wrapped | None:
    """Annotate `err` with `message` and the stack at the call site. None in, None out."""
    if err is None:
        return None
    return Wrapped(err, message, callers(1))


def wrapf(err: BaseException | None, fmt: str, /, *args: Any, **kwargs: Any) -> Wrapped | None:
    """wrap() with a `str.format` message. None in, None out."""
    if err is None:
        return None
    return Wrapped(err, fmt.format(*args, **kwargs), callers(1))


def with_message(err: BaseException | None, message: str) -> Wrapped | None:
    """Annotate `err` with `message` only; the stack stays the cause's."""
    if err is None:
        return None
    return Wrapped(err, message)


def with_messagef(err: BaseException | None, fmt: str, /, *args: Any, **kwargs: Any) -> Wrapped | None:
    """with_message() with a `str.format` message. None in, None out."""
    if err is None:
        return None
    return Wrapped(err, fmt.format(*args, **kwargs))


def with_stack(err: BaseException | None) -> Wrapped | None:
    """Record the stack at the call site on `err` without changing its message."""
    if err is None:
        return None
    return Wrapped(err, stack=callers(1))
