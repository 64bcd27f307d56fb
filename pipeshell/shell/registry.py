"""Builtin catalog and the read-only command registry built from it."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .common import BuiltinHandler, ShellBuiltin


@dataclass(slots=True)
class BuiltinSpec:
    name: str
    handler: ShellBuiltin
    description: str = ""


class BuiltinCatalog:
    """Builtin definitions gathered by decorator as command modules are imported.

    The catalog is only read once, when a Shell freezes it into a registry.
    """

    def __init__(self) -> None:
        self._builtins: list[BuiltinSpec] = []

    def register(
        self,
        name: str,
        handler: ShellBuiltin,
        *,
        description: str = "",
    ) -> ShellBuiltin:
        self._builtins.append(BuiltinSpec(name, handler, description))
        return handler

    def command(
        self,
        name: str,
        *,
        description: str = "",
    ) -> Callable[[ShellBuiltin], ShellBuiltin]:
        """Decorator variant for registering builtins."""

        def decorator(func: ShellBuiltin) -> ShellBuiltin:
            return self.register(name, func, description=description)

        return decorator

    def iter_builtins(self) -> Iterable[BuiltinSpec]:
        return tuple(self._builtins)


BUILTIN_CATALOG = BuiltinCatalog()

DEFAULT_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "list": "ls",
        "show": "cat",
        "remove": "rm",
        "removef": "rm -r",
        "create": "touch",
        "createf": "mkdir",
    }
)


class CommandRegistry:
    """Lookup tables mapping command names to builtins or external aliases.

    The tables are copied on construction and exposed read-only, so a
    registry can be shared by every pipeline the shell runs.
    """

    def __init__(
        self,
        builtins: Mapping[str, BuiltinHandler] | None = None,
        aliases: Mapping[str, str] | None = None,
        *,
        descriptions: Mapping[str, str] | None = None,
    ) -> None:
        self._builtins: Mapping[str, BuiltinHandler] = MappingProxyType(dict(builtins or {}))
        self._aliases: Mapping[str, str] = MappingProxyType(dict(aliases or {}))
        self._descriptions: Mapping[str, str] = MappingProxyType(dict(descriptions or {}))

    @property
    def builtins(self) -> Mapping[str, BuiltinHandler]:
        return self._builtins

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def get_builtin(self, name: str) -> BuiltinHandler | None:
        return self._builtins.get(name)

    def is_builtin(self, name: str) -> bool:
        return name in self._builtins

    def resolve_alias(self, name: str) -> list[str]:
        """Return the program and argument prefix ``name`` stands for."""

        target = self._aliases.get(name)
        if target is None:
            return [name]
        return target.split()

    def argv_for(self, name: str, args: Iterable[str]) -> list[str]:
        if self.is_builtin(name):
            raise KeyError(f"{name} is a builtin and is never spawned")
        return [*self.resolve_alias(name), *args]

    def describe(self, name: str) -> str:
        if name in self._aliases:
            return self._descriptions.get(name) or f"alias for {self._aliases[name]}"
        return self._descriptions.get(name, "")

    def builtin_names(self) -> list[str]:
        return sorted(self._builtins)

    def alias_names(self) -> list[str]:
        return sorted(self._aliases)


__all__ = [
    "BUILTIN_CATALOG",
    "DEFAULT_ALIASES",
    "BuiltinCatalog",
    "BuiltinSpec",
    "CommandRegistry",
]
