from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .errors import ScriptValueError


def _expects(kind: str, name: str, arity: int) -> str:
    if arity == 0:
        return f"{kind} {name}() doesn't expect any arguments"
    plural = 'argument' if arity == 1 else 'arguments'
    return f"{kind} {name}() expects exactly {arity} {plural}"


@dataclass
class BuiltinFunction:
    """A free function provided by the runtime.

    `fn` receives the unevaluated argument nodes and the calling scope so
    it controls its own evaluation order. `arity` of None means any
    number of arguments.
    """
    name: str
    arity: Optional[int]
    fn: Callable[[List[Any], Any], Any]

    def invoke(self, args: List[Any], scope: Any) -> Any:
        if self.arity is not None and len(args) != self.arity:
            raise ScriptValueError(f"{_expects('Function', self.name, self.arity)}, but got {len(args)}")
        return self.fn(args, scope)

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


@dataclass
class BuiltinMethod:
    """A method of a list, dictionary or string.

    When `mutates` is set the result of `fn` is the updated receiver and
    the caller writes it back through the access chain.
    """
    name: str
    arity: int
    fn: Callable[[Any, List[Any], Any], Any]
    mutates: bool = False

    def invoke(self, receiver: Any, args: List[Any], scope: Any) -> Any:
        if len(args) != self.arity:
            raise ScriptValueError(_expects('Method', self.name, self.arity))
        return self.fn(receiver, args, scope)

    def __repr__(self) -> str:
        return f"<method {self.name}>"
