from typing import Any, Dict, Optional
from toylang.errors import ToyRuntimeError, UNDEFINED_VARIABLE
from toylang.types import ErrorVal


class Environment:
    """Represents a scope environment mapping identifiers to values.

    ``parent`` is only followed for lookups; a scope never owns the scope
    that encloses it.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any) -> Any:
        # Redeclaring a name in the same scope overwrites it.
        self.values[name] = value
        return value

    def lookup_scope(self, name: str) -> Optional['Environment']:
        """Return the innermost scope that binds ``name``, if any."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def get(self, name: str) -> Any:
        scope = self.lookup_scope(name)
        if scope is None:
            raise ToyRuntimeError(ErrorVal(UNDEFINED_VARIABLE, f'Undefined variable "{name}"'))
        return scope.values[name]

    def assign(self, name: str, value: Any) -> Any:
        # Assignment never creates a binding.
        scope = self.lookup_scope(name)
        if scope is None:
            raise ToyRuntimeError(ErrorVal(UNDEFINED_VARIABLE, f'Undefined variable "{name}"'))
        scope.values[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.lookup_scope(name) is not None
