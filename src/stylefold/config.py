from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from stylefold.compiler import BUILTIN_PLUGINS, CompilerPlugin, NamingFunction, default_naming
from stylefold.errors import ConfigurationError
from stylefold.recognizer import DEFAULT_IDENTIFIERS


@dataclass(frozen=True)
class TransformConfig:
    recognized_names: frozenset[str] = DEFAULT_IDENTIFIERS
    naming_function: NamingFunction = default_naming
    plugins: tuple[CompilerPlugin, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise ConfigurationError if this configuration cannot be used."""
        if not callable(self.naming_function):
            raise ConfigurationError(
                f"naming_function must be callable, got {self.naming_function!r}"
            )
        if not self.recognized_names:
            raise ConfigurationError("At least one recognized call name is required")
        for name in self.recognized_names:
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Invalid recognized call name: {name!r}")
        for plugin in self.plugins:
            if not callable(getattr(plugin, "process_properties", None)):
                raise ConfigurationError(
                    f"Plugin {plugin!r} does not define process_properties()"
                )

    @classmethod
    def from_options(
        cls,
        identifiers: Iterable[str] = (),
        class_prefix: str = "",
        plugin_names: Iterable[str] = (),
    ) -> TransformConfig:
        """Build a configuration from command-line style primitives.

        Plugin names are looked up in the built-in plugin registry; an unknown
        name raises ConfigurationError.
        """
        plugins = []
        for name in plugin_names:
            try:
                plugins.append(BUILTIN_PLUGINS[name]())
            except KeyError:
                known = ", ".join(sorted(BUILTIN_PLUGINS))
                raise ConfigurationError(
                    f"Unknown plugin {name!r} (available: {known})"
                ) from None
        names = frozenset(identifiers) or DEFAULT_IDENTIFIERS
        options = {"class_prefix": class_prefix} if class_prefix else {}
        config = cls(recognized_names=names, plugins=tuple(plugins), options=options)
        config.validate()
        return config
