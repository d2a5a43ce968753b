from stylefold.compiler.base import CompilerPlugin
from stylefold.compiler.default_unit import DefaultUnitPlugin
from stylefold.compiler.hyphenate import HyphenatePlugin
from stylefold.compiler.naming import (
    CompilationContext,
    IdAllocator,
    NamingFunction,
    default_naming,
)
from stylefold.compiler.pipeline import CompiledSheet, StyleSheetCompiler, apply_plugins

BUILTIN_PLUGINS = {
    "hyphenate": HyphenatePlugin,
    "default-unit": DefaultUnitPlugin,
}

__all__ = [
    "BUILTIN_PLUGINS",
    "CompilerPlugin",
    "HyphenatePlugin",
    "DefaultUnitPlugin",
    "CompilationContext",
    "IdAllocator",
    "NamingFunction",
    "default_naming",
    "CompiledSheet",
    "StyleSheetCompiler",
    "apply_plugins",
]
