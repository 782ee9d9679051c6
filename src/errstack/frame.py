"""A single captured call site with lazy symbol resolution.

A Frame keeps only what the interpreter hands over at capture time (the code
object, the executing line and the defining module). Names, files and trimmed
paths are derived when the frame is rendered, so capturing stays cheap on the
common path where an error is created but never printed.

Rendering uses the standard format protocol:

    >>> f"{frame}"       # 'test_stack.py:42'
    >>> f"{frame:n}"     # 'TestStack.test_capture'
    >>> f"{frame:+v}"    # 'errstack/tests/test_stack.TestStack.test_capture\\n\\terrstack/tests/test_stack.py:42'
"""

from __future__ import annotations

import marshal
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .paths import trim_path
from .settings import get_settings

if TYPE_CHECKING:
    from types import CodeType, FrameType

UNKNOWN = "unknown"


def funcname(name: str) -> str:
    """Strip the package path from a qualified function name, keeping any receiver/class prefix.

    Examples:
        >>> funcname("runtime.main")
        'main'
        >>> funcname("main.(*R).Write")
        '(*R).Write'
        >>> funcname("errstack/tests/test_frame.Receiver.method")
        'Receiver.method'
    """
    name = name[name.rfind("/") + 1:]
    return name[name.find(".") + 1:]


@dataclass(frozen=True, slots=True, repr=False)
class Frame:
    """One call site on a captured stack. `Frame()` is the zero frame: no location.

    Attributes:
        code: Code object executing at the call site (None for the zero frame)
        lineno: Line being executed when the stack was captured
        module: Dotted name of the module defining `code`
    """

    code: CodeType | None = None
    lineno: int = 0
    module: str = ""

    @classmethod
    def from_frame(cls, frame: FrameType) -> Frame:
        """Capture the call site of a live interpreter frame."""
        return cls(frame.f_code, frame.f_lineno or 0, frame.f_globals.get("__name__") or "")

    def __bool__(self) -> bool:
        return self.code is not None

    # ─── Resolution ──────────────────────────────────────────────────

    @property
    def name(self) -> str:
        """Qualified function name: module path with '/' separators, then '.', then the qualname."""
        if self.code is None:
            return UNKNOWN
        qualname = self.code.co_qualname
        return f"{self.module.replace('.', '/')}.{qualname}" if self.module else qualname

    @property
    def file(self) -> str:
        return UNKNOWN if self.code is None else self.code.co_filename

    @property
    def line(self) -> int:
        return 0 if self.code is None else self.lineno

    @property
    def trimmed_file(self) -> str:
        """Source path starting at the module's package path (full path if it can't be located)."""
        if self.code is None or not self.module:
            return self.file
        return trim_path(self.name, self.file)

    # ─── Rendering ───────────────────────────────────────────────────

    def _verbose(self) -> str:
        if self.code is None:
            return UNKNOWN
        path = self.trimmed_file if get_settings().trim_paths else self.file
        return f"{self.name}\n\t{path}"

    def __format__(self, spec: str) -> str:
        match spec:
            case "s":
                return os.path.basename(self.file)
            case "+s":
                return self._verbose()
            case "d":
                return str(self.line)
            case "n":
                return funcname(self.name) if self.code is not None else ""
            case "" | "v":
                return f"{os.path.basename(self.file)}:{self.line}"
            case "+v":
                return f"{self._verbose()}:{self.line}"
            case _:
                raise ValueError(f"Unknown format code {spec!r} for object of type 'Frame'")

    def __str__(self) -> str:
        return format(self, "v")

    def __repr__(self) -> str:
        return f"Frame({self})"

    def __reduce__(self) -> tuple[object, tuple[bytes | None, int, str]]:
        # code objects only pickle through marshal
        code = None if self.code is None else marshal.dumps(self.code)
        return _load_frame, (code, self.lineno, self.module)


def _load_frame(code: bytes | None, lineno: int, module: str) -> Frame:
    return Frame(None if code is None else marshal.loads(code), lineno, module)
