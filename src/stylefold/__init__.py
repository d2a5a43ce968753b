"""stylefold: precompile static JSS style descriptions in JavaScript modules."""

from stylefold.config import TransformConfig
from stylefold.errors import (
    ConfigurationError,
    MalformedStyleDescription,
    NamingError,
    StylefoldError,
)
from stylefold.parser import ParseError
from stylefold.transform import StyleSheetPrecompiler, TransformResult, transform_source

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "TransformConfig",
    "StyleSheetPrecompiler",
    "TransformResult",
    "transform_source",
    "StylefoldError",
    "ConfigurationError",
    "MalformedStyleDescription",
    "NamingError",
    "ParseError",
]
