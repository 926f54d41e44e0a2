"""
Context store for typewright

Registry of the variables, functions and aliases that directives can reach.
Registration validates its arguments and overwrites silently on conflict.
"""

from typing import Any, Callable, Dict, Optional, Union

from ..models.directives import AliasKind, AliasSpec, reserved_is
from .log import LOG


class ConfigurationError(ValueError):
    """Raised when the engine or its context is given invalid arguments"""
    pass


def key_check(key: Any, what: str, method: str) -> None:
    """Raise ConfigurationError unless key is a non-blank string"""
    if not isinstance(key, str) or not key.strip():
        raise ConfigurationError(
            f"Invalid {what} name. '{method}' requires a non-empty string key."
        )


class ContextStore:
    """
    Variables, functions and aliases available to directive execution

    Three independent mappings; keys are unique per mapping.
    """

    def __init__(self) -> None:
        self.variables: Dict[str, Any] = {}
        self.functions: Dict[str, Callable[..., Any]] = {}
        self.aliases: Dict[str, AliasSpec] = {}

    def variable_set(self, key: str, value: Any) -> None:
        """
        Register a variable for ``[@var:key]``

        Raises:
            ConfigurationError: If key is not a non-blank string
        """
        key_check(key, "variable", "variable_set")
        self.variables[key] = value
        LOG(f"Variable '{key}' set", level=3)

    def function_set(self, key: str, fn: Callable[..., Any]) -> None:
        """
        Register a function for ``run``, ``async`` and ``eval`` directives

        The function may be synchronous, a coroutine function, or return
        any awaitable.

        Raises:
            ConfigurationError: If key is blank or fn is not callable
        """
        key_check(key, "function", "function_set")
        if not callable(fn):
            raise ConfigurationError(
                f"Invalid function provided for key '{key}'. It must be callable."
            )
        self.functions[key] = fn
        LOG(f"Function '{key}' set", level=3)

    def alias_set(
        self, key: str, function_name: str, kind: Union[str, AliasKind] = "run"
    ) -> AliasSpec:
        """
        Register an alias directive ``[@key:X]`` for ``[@kind:function_name(X)]``

        Args:
            key: Alias name, must not be a built-in directive name
            function_name: Name of a function registered with function_set
            kind: "run", "async" or "eval"; anything else falls back to "run"

        Returns:
            The registered AliasSpec

        Raises:
            ConfigurationError: If key is blank or reserved, or function_name is blank
        """
        key_check(key, "alias", "alias_set")
        if reserved_is(key):
            raise ConfigurationError(
                f"Alias '{key}' conflicts with a built-in directive. Please choose another name."
            )
        if not isinstance(function_name, str) or not function_name.strip():
            raise ConfigurationError(
                "Invalid function name. 'alias_set' requires a non-empty string 'function_name'."
            )

        if isinstance(kind, AliasKind):
            resolved_kind = kind
        else:
            try:
                resolved_kind = AliasKind(kind)
            except ValueError:
                resolved_kind = AliasKind.RUN

        alias = AliasSpec(name=key, function_name=function_name, kind=resolved_kind)
        self.aliases[key] = alias
        LOG(f"Alias '{key}' -> {resolved_kind.value}:{function_name}()", level=3)
        return alias

    def variable_has(self, key: str) -> bool:
        return key in self.variables

    def variable_get(self, key: str) -> Any:
        return self.variables.get(key)

    def function_get(self, key: str) -> Optional[Callable[..., Any]]:
        return self.functions.get(key)

    def alias_get(self, key: str) -> Optional[AliasSpec]:
        return self.aliases.get(key)
