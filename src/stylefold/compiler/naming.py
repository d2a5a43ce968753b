"""Generated-identifier allocation.

The allocator is the only mutable state shared between call sites.  It lives
for one transform run and is guarded by a lock so call sites can be compiled
concurrently.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Mapping

from stylefold.errors import NamingError

__all__ = ["CompilationContext", "NamingFunction", "default_naming", "IdAllocator"]


@dataclass(frozen=True)
class CompilationContext:
    """What a naming function (and plugins) know about the current call site.

    Attributes:
        call_index: 0-based position of the call among recognized calls.
        sequence: Run-wide allocation counter, set by the allocator.
        filename: Name of the module being transformed.
        options: Free-form options passed through from the configuration.
    """

    call_index: int = 0
    sequence: int = 0
    filename: str = "<input>"
    options: Mapping[str, object] = field(default_factory=dict)


NamingFunction = Callable[[str, CompilationContext], str]

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def default_naming(selector: str, context: CompilationContext) -> str:
    """``<class_prefix><selector>-<sequence>``, with unsafe characters dashed."""
    prefix = context.options.get("class_prefix", "")
    safe = _UNSAFE_CHARS.sub("-", selector).strip("-") or "rule"
    return f"{prefix}{safe}-{context.sequence}"


class IdAllocator:
    """Hand out generated identifiers, unique within each call site."""

    def __init__(self, naming_function: NamingFunction):
        self._naming_function = naming_function
        self._lock = threading.Lock()
        self._sequence = 0
        self._issued: dict[int, set[str]] = {}

    def allocate(self, selector: str, context: CompilationContext) -> str:
        with self._lock:
            self._sequence += 1
            identifier = self._naming_function(
                selector, replace(context, sequence=self._sequence)
            )
            if not isinstance(identifier, str) or not identifier:
                raise NamingError(
                    f"Naming function returned {identifier!r} for selector {selector!r}",
                    selector=selector,
                )
            issued = self._issued.setdefault(context.call_index, set())
            if identifier in issued:
                raise NamingError(
                    f"Generated identifier {identifier!r} for selector {selector!r} "
                    "is already used in this call",
                    selector=selector,
                )
            issued.add(identifier)
            return identifier
