from typing import Any, Callable, Dict, Optional

from .errors import ScriptNameError


TraceHook = Callable[[int, str], None]


class Scope:
    """A lexical environment mapping names to values and functions.

    Scopes only point to their parent, never to their children, so a
    chain is released as soon as no evaluation path references it.
    """
    def __init__(self, parent: Optional['Scope'] = None, trace_hook: Optional[TraceHook] = None,
                 debug_level: int = 0):
        self.parent = parent
        self.variables: Dict[str, Any] = {}
        self.functions: Dict[str, Any] = {}
        # children share the root's hook and level
        if trace_hook is None and parent is not None:
            trace_hook = parent.trace_hook
            debug_level = parent.debug_level
        self.trace_hook = trace_hook
        self.debug_level = debug_level if trace_hook is not None else 0

    def child(self) -> 'Scope':
        return Scope(parent=self)

    def get(self, name: str) -> Any:
        if name in self.variables:
            return self.variables[name]
        if self.parent:
            return self.parent.get(name)
        raise ScriptNameError(f'Undefined variable: {name}')

    def declare(self, name: str, value: Any) -> None:
        # a fresh binding always lands in this scope, shadowing any parent
        self.variables[name] = value

    def assign(self, name: str, value: Any) -> None:
        if name in self.variables:
            self.variables[name] = value
        elif self.parent:
            self.parent.assign(name, value)
        else:
            raise ScriptNameError(f'Undefined variable: {name}')

    def define_function(self, name: str, func: Any) -> None:
        self.functions[name] = func

    def lookup_function(self, name: str) -> Optional[Any]:
        if name in self.functions:
            return self.functions[name]
        if self.parent:
            return self.parent.lookup_function(name)
        return None

    def tracing(self, level: int) -> bool:
        """Whether messages of `level` are wanted; check before formatting one."""
        return level <= self.debug_level

    def trace(self, level: int, message: str) -> None:
        if self.tracing(level):
            self.trace_hook(level, message)
