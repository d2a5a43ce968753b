"""Error hierarchy for the style-sheet precompiler."""

from __future__ import annotations

from stylefold.model.nodes import Span


class StylefoldError(Exception):
    """Base error for all stylefold errors."""


class ConfigurationError(StylefoldError):
    """The transform configuration is unusable; raised before any source is read."""


class MalformedStyleDescription(StylefoldError):
    """A recognized call's style argument cannot be precompiled.

    The call is skipped and left exactly as written.
    """

    def __init__(self, message: str, span: Span | None = None) -> None:
        super().__init__(message)
        self.span = span


class NamingError(StylefoldError):
    """The naming function returned an unusable or duplicate identifier."""

    def __init__(self, message: str, selector: str = "") -> None:
        super().__init__(message)
        self.selector = selector


class SerializationOverflow(StylefoldError):
    """A static value has no text form; the property stays dynamic."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Cannot serialize value {value!r}")
        self.value = value
