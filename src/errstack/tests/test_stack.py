"""Tests for stack capture and StackTrace formatting."""

from __future__ import annotations

import io
import os
import re
import sys

import orjson
import pytest

from errstack import Frame, StackTrace, callers
from errstack import stack as stack_module
from errstack.logging import configure_logging
from errstack.settings import clear_settings_cache, get_settings

MOD = __name__.replace(".", "/")
BASE = os.path.basename(__file__)


def _lineno() -> int:
    return sys._getframe(1).f_lineno


def stack_trace() -> StackTrace:
    return callers(0, depth=8)


STACK_TRACE_LINE = stack_trace.__code__.co_firstlineno + 1


def verbose(func: str, line: int | None = None) -> str:
    pattern = rf"{re.escape(MOD)}\.{re.escape(func)}\n\t(.+/)?{re.escape(MOD)}\.py"
    return pattern if line is None else f"{pattern}:{line}"


# ═════════════════════════════════════════════════════════════════════════════
# Empty Traces
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(("spec", "want"), [("s", "[]"), ("v", "[]"), ("", "[]"), ("+s", "[]"), ("+v", "")])
def test_empty_trace(spec: str, want: str) -> None:
    assert format(StackTrace(), spec) == want


def test_empty_trace_debug_form() -> None:
    assert format(StackTrace(), "#v") == "StackTrace([])"
    assert repr(StackTrace()) == "StackTrace([])"


# ═════════════════════════════════════════════════════════════════════════════
# Captured Traces
# ═════════════════════════════════════════════════════════════════════════════


def test_short_form() -> None:
    st = stack_trace()[:2]
    assert format(st, "s") == f"[{BASE} {BASE}]"


def test_compact_form() -> None:
    st, line = stack_trace()[:2], _lineno()
    want = f"[{BASE}:{STACK_TRACE_LINE} {BASE}:{line}]"
    assert format(st, "v") == want
    assert str(st) == want
    assert f"{st}" == want


def test_verbose_form() -> None:
    st, line = stack_trace()[:2], _lineno()
    want = "\n" + verbose("stack_trace", STACK_TRACE_LINE) + "\n" + verbose("test_verbose_form", line)
    assert re.fullmatch(want, format(st, "+v"))


def test_verbose_short_form() -> None:
    st = stack_trace()[:1]
    assert re.fullmatch(r"\[" + verbose("stack_trace") + r"\]", format(st, "+s"))


def test_debug_form() -> None:
    st, line = stack_trace()[:2], _lineno()
    assert format(st, "#v") == f"StackTrace([{BASE}:{STACK_TRACE_LINE}, {BASE}:{line}])"
    assert repr(st) == format(st, "#v")


def test_unknown_verb() -> None:
    with pytest.raises(ValueError):
        format(stack_trace(), "d")


# ═════════════════════════════════════════════════════════════════════════════
# Capture
# ═════════════════════════════════════════════════════════════════════════════


def test_first_frame_is_caller() -> None:
    st, line = callers(), _lineno()
    assert st[0].line == line
    assert format(st[0], "n") == "test_first_frame_is_caller"


def test_skip() -> None:
    def helper() -> StackTrace:
        return callers(1)

    st, line = helper(), _lineno()
    assert st[0].line == line
    assert format(st[0], "n") == "test_skip"


def test_order_is_most_recent_first() -> None:
    def inner() -> StackTrace:
        return callers()

    def outer() -> StackTrace:
        return inner()

    st = outer()
    assert [format(f, "n") for f in st[:3]] == [
        "test_order_is_most_recent_first.<locals>.inner",
        "test_order_is_most_recent_first.<locals>.outer",
        "test_order_is_most_recent_first",
    ]


def test_slicing_and_indexing() -> None:
    st = stack_trace()
    assert isinstance(st, tuple)
    assert isinstance(st[0], Frame)
    assert isinstance(st[:2], StackTrace)
    assert isinstance(st[1:], StackTrace)
    assert len(st[:2]) == 2


def test_immutable() -> None:
    st = stack_trace()
    with pytest.raises(TypeError):
        st[0] = Frame()  # type: ignore[index]


def test_depth_argument() -> None:
    assert len(callers(depth=3)) == 3


def test_depth_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERRSTACK_STACK_DEPTH", "2")
    clear_settings_cache()
    assert len(callers()) == 2


def test_skip_past_the_stack_is_empty() -> None:
    assert callers(skip=100_000) == StackTrace()


def test_capture_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    """No frame introspection: empty trace plus a debug log line."""
    out = io.StringIO()
    configure_logging(format="json", level="DEBUG", output=out)
    get_settings()

    def unsupported(depth: int = 0) -> object:
        raise AttributeError("_getframe")

    with monkeypatch.context() as m:
        m.setattr(stack_module.sys, "_getframe", unsupported)
        st = callers()

    assert st == StackTrace()
    entry = orjson.loads(out.getvalue().splitlines()[0])
    assert entry["event"] == "stack capture unavailable"
    assert entry["level"] == "debug"
    assert entry["logger"] == "errstack.stack"
