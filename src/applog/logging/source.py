"""Caller source location lookup.

This module walks the active call stack to find the application code that
called into the logging facade.
"""

import sys
from dataclasses import dataclass
from types import FrameType
from typing import List, Optional

# Frames from this package belong to the facade itself
_FACADE_PACKAGE = __name__.rpartition(".")[0]


@dataclass(frozen=True)
class SourceLocation:
    """Code location a log call originated from.

    Attributes:
        type_name: Module-qualified name of the originating class, or the
            module name for module-level code and plain functions.
        method_name: Name of the calling function.
        line_number: Line being executed in the calling function.
        present: False when no caller frame could be found.
    """

    type_name: str = ""
    method_name: str = ""
    line_number: int = 0
    present: bool = True

    @classmethod
    def absent(cls) -> "SourceLocation":
        return cls(present=False)


def locate(skip_self: bool = True) -> SourceLocation:
    """Find the first frame that belongs to caller code.

    Args:
        skip_self: Skip every frame of the logging facade. When False, only
            this module's frames are skipped and the direct caller of
            ``locate`` is reported.

    Returns:
        Location of the caller, or an absent location if the stack is
        exhausted or not inspectable. Never raises.
    """
    getframe = getattr(sys, "_getframe", None)
    if getframe is None:
        return SourceLocation.absent()

    frame: Optional[FrameType] = getframe(0)
    while frame is not None:
        module = frame.f_globals.get("__name__", "")
        if not _is_internal(module, skip_self):
            return _describe(frame, module)
        frame = frame.f_back
    return SourceLocation.absent()


def _is_internal(module: str, skip_self: bool) -> bool:
    if not skip_self:
        return module == __name__
    return module == _FACADE_PACKAGE or module.startswith(_FACADE_PACKAGE + ".")


def _describe(frame: FrameType, module: str) -> SourceLocation:
    owner = _owner_name(frame)
    if owner and module:
        type_name = f"{module}.{owner}"
    else:
        type_name = owner or module or "<unknown>"
    return SourceLocation(
        type_name=type_name,
        method_name=frame.f_code.co_name,
        line_number=frame.f_lineno or 0,
    )


def _owner_name(frame: FrameType) -> str:
    code = frame.f_code
    f_locals = frame.f_locals

    # Class body being executed
    if "__module__" in f_locals and "__qualname__" in f_locals:
        return _strip_locals(str(f_locals["__qualname__"]).split("."))

    qualname = getattr(code, "co_qualname", None)
    if qualname is not None:
        return _strip_locals(qualname.split(".")[:-1])

    # Python < 3.11
    if "self" in f_locals:
        return _strip_locals(type(f_locals["self"]).__qualname__.split("."))
    cls = f_locals.get("cls")
    if isinstance(cls, type):
        return _strip_locals(cls.__qualname__.split("."))
    return ""


def _strip_locals(parts: List[str]) -> str:
    """Drop the enclosing-function part of a qualified name."""
    if "<locals>" in parts:
        last = len(parts) - 1 - parts[::-1].index("<locals>")
        parts = parts[last + 1:]
    return ".".join(parts)
