"""Abstract Syntax Tree (AST) definitions for stoplang.

Every node is a dataclass that owns its children and exposes
``evaluate(scope)``, which walks the subtree against a `Scope` and returns
a runtime value (see `stoplang.types`). Statements are expressions too:
each one yields exactly one value, `NULL` when there is nothing better to
return.

Non-local exits (break, continue and return) unwind as the signals from
`stoplang.errors`; loops and function calls are the only places that
catch them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .errors import (
    BreakSignal, ContinueSignal, ReturnSignal, ScriptIndexError, ScriptNameError,
    ScriptSyntaxError, ScriptTypeError, ScriptValueError,
)
from .operators import apply_binary_op, apply_unary_op
from .scope import Scope
from .std import is_builtin_function, lookup_function, lookup_method
from .types import (
    NULL, DictVal, ListVal, cast_value, is_int, is_scalar, render, type_name,
)


MAX_WHILE_ITERATIONS = 1_000_000


@dataclass
class Node:
    """Base class for all AST nodes."""

    def evaluate(self, scope: Scope) -> Any:
        raise NotImplementedError(f"evaluate: unexpected node type {type(self).__name__}")


@dataclass
class Program:
    """Top-level statements, evaluated one by one by the driver."""
    body: List[Node]


@dataclass
class Literal(Node):
    value: Any

    def evaluate(self, scope: Scope) -> Any:
        return self.value


@dataclass
class TypeCast(Node):
    operand: Node
    target: str  # 'int', 'float', 'str', 'bool'

    def evaluate(self, scope: Scope) -> Any:
        return cast_value(self.operand.evaluate(scope), self.target)


@dataclass
class UnaryOp(Node):
    op: str  # 'not', '-', 'abs', '?'
    operand: Node

    def evaluate(self, scope: Scope) -> Any:
        return apply_unary_op(self.op, self.operand.evaluate(scope))


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node

    def evaluate(self, scope: Scope) -> Any:
        left = self.left.evaluate(scope)
        right = self.right.evaluate(scope)
        return apply_binary_op(self.op, left, right)


@dataclass
class Assign(Node):
    """`name = value` (rebind, `reassign=True`) or `name := value`."""
    name: str
    value: Node
    reassign: bool = True

    def evaluate(self, scope: Scope) -> Any:
        value = self.value.evaluate(scope)
        if self.reassign:
            scope.assign(self.name, value)
        else:
            scope.declare(self.name, value)
        if scope.tracing(2):
            action = 'assign' if self.reassign else 'declare'
            scope.trace(2, f"{action} {self.name}: {type_name(value)} = {render(value)}")
        return value


@dataclass
class Ident(Node):
    name: str

    def evaluate(self, scope: Scope) -> Any:
        return scope.get(self.name)


@dataclass
class ListLit(Node):
    elements: List[Node]

    def evaluate(self, scope: Scope) -> Any:
        return ListVal([el.evaluate(scope) for el in self.elements])


@dataclass
class DictLit(Node):
    entries: List[Tuple[Node, Node]]

    def evaluate(self, scope: Scope) -> Any:
        result = DictVal()
        for key_node, value_node in self.entries:
            key = key_node.evaluate(scope)
            if not is_scalar(key):
                raise ScriptTypeError('Dictionary key must be a basic type')
            # later duplicates overwrite earlier ones
            result.set(key, value_node.evaluate(scope))
        return result


def _list_index(container: ListVal, index: Any) -> int:
    if not is_int(index):
        raise ScriptTypeError('List index must be an integer')
    if index < 0 or index >= len(container):
        raise ScriptIndexError(f'Index ({index}) out of range')
    return index


def store_into(container: Any, index: Any, value: Any) -> None:
    """Write `value` into a list slot or dictionary entry in place."""
    if isinstance(container, ListVal):
        container.items[_list_index(container, index)] = value
    elif isinstance(container, DictVal):
        container.set(index, value)
    else:
        raise ScriptTypeError('Index assignment can only be performed on lists and dictionaries')


def propagate(node: Node, updated: Any, scope: Scope) -> None:
    """Write an updated value back through the access chain `node`.

    `a[0][1].ltrim(" ")` produces a new string which must land in
    `a[0][1]`; that in turn re-stores `a[0]` into `a` and finally rebinds
    the variable `a`. Chains rooted in anything other than a variable
    (a literal, a call result) end without a write.
    """
    while True:
        if isinstance(node, Index):
            parent = node.target.evaluate(scope)
            if not isinstance(parent, (ListVal, DictVal)):
                return
            store_into(parent, node.index.evaluate(scope), updated)
            node, updated = node.target, parent
            continue
        if isinstance(node, Ident):
            scope.assign(node.name, updated)
        return


@dataclass
class Index(Node):
    target: Node
    index: Node

    def evaluate(self, scope: Scope) -> Any:
        container = self.target.evaluate(scope)
        index = self.index.evaluate(scope)
        if isinstance(container, ListVal):
            return container.items[_list_index(container, index)]
        if isinstance(container, DictVal):
            return container.get(index)
        if isinstance(container, str):
            # code point offset, not byte offset
            if not is_int(index):
                raise ScriptTypeError('String index must be an integer')
            if index < 0 or index >= len(container):
                raise ScriptIndexError(f'Index ({index}) out of range')
            return container[index]
        raise ScriptTypeError('Indexing can only be performed on lists, dictionaries and strings')


@dataclass
class IndexAssign(Node):
    target: Index
    value: Node

    def evaluate(self, scope: Scope) -> Any:
        container = self.target.target.evaluate(scope)
        index = self.target.index.evaluate(scope)
        new_value = self.value.evaluate(scope)
        store_into(container, index, new_value)
        propagate(self.target.target, container, scope)
        return new_value


@dataclass
class MethodCall(Node):
    target: Node
    name: str
    args: List[Node] = field(default_factory=list)

    def evaluate(self, scope: Scope) -> Any:
        receiver = self.target.evaluate(scope)
        method = lookup_method(receiver, self.name)
        result = method.invoke(receiver, self.args, scope)
        if method.mutates:
            propagate(self.target, result, scope)
        return result


@dataclass
class Block(Node):
    statements: List[Node]

    def evaluate(self, scope: Scope) -> Any:
        block_scope = scope.child()
        result: Any = NULL
        for stmt in self.statements:
            result = stmt.evaluate(block_scope)
        return result


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Block] = None

    def evaluate(self, scope: Scope) -> Any:
        cond = self.condition.evaluate(scope)
        if not isinstance(cond, bool):
            raise ScriptTypeError("Expected boolean expression after 'if'")
        if scope.tracing(3):
            scope.trace(3, f"if condition -> {render(cond)}")
        if cond:
            return self.then_block.evaluate(scope)
        if self.else_block is not None:
            return self.else_block.evaluate(scope)
        return NULL


def _int_bound(value: Any, what: str) -> int:
    if not is_int(value):
        raise ScriptTypeError(f'Loop {what} must be an integer')
    return value


@dataclass
class ForStmt(Node):
    """Range loop `for i in a..b[:step]` or key loop `for k in dict`.

    For a key loop `end` is None and `start` is the dictionary expression.
    """
    var: str
    start: Node
    end: Optional[Node]
    step: Optional[Node]
    body: Block

    def evaluate(self, scope: Scope) -> Any:
        loop_scope = scope.child()
        if self.end is not None:
            values = self._range(scope)
        else:
            iterable = self.start.evaluate(scope)
            if not isinstance(iterable, DictVal):
                raise ScriptTypeError('Cannot iterate: not a dictionary')
            # snapshot, mutations in the body don't change the key set
            values = iter(iterable.keys())
        result: Any = NULL
        for value in values:
            loop_scope.declare(self.var, value)
            try:
                result = self.body.evaluate(loop_scope)
            except BreakSignal:
                if scope.tracing(3):
                    scope.trace(3, f"for {self.var}: break at {render(value)}")
                break
            except ContinueSignal:
                continue
        return result

    def _range(self, scope: Scope):
        start = _int_bound(self.start.evaluate(scope), 'range start')
        end = _int_bound(self.end.evaluate(scope), 'range end')
        if self.step is not None:
            step = _int_bound(self.step.evaluate(scope), 'step')
            if step == 0:
                raise ScriptValueError('Loop step cannot be zero')
        else:
            step = 1 if start <= end else -1
        if (step > 0 and start > end) or (step < 0 and start < end):
            raise ScriptValueError('Invalid loop range and step combination')
        if scope.tracing(3):
            scope.trace(3, f"for {self.var} in {start}..{end}:{step}")
        i = start
        while (i <= end) if step > 0 else (i >= end):
            yield i
            i += step


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Block

    def evaluate(self, scope: Scope) -> Any:
        result: Any = NULL
        iterations = 0
        while self._check(scope):
            if iterations >= MAX_WHILE_ITERATIONS:
                if scope.tracing(3):
                    scope.trace(3, f"while: stopped after {MAX_WHILE_ITERATIONS} iterations")
                break
            iterations += 1
            try:
                result = self.body.evaluate(scope)
            except BreakSignal:
                break
            except ContinueSignal:
                continue
        return result

    def _check(self, scope: Scope) -> bool:
        cond = self.condition.evaluate(scope)
        if not isinstance(cond, bool):
            raise ScriptTypeError("Expected boolean expression after 'while'")
        return cond


@dataclass
class LoopControl(Node):
    kind: str  # 'break' or 'continue'

    def evaluate(self, scope: Scope) -> Any:
        if self.kind == 'break':
            raise BreakSignal()
        raise ContinueSignal()


@dataclass
class ReturnStmt(Node):
    value: Optional[Node] = None

    def evaluate(self, scope: Scope) -> Any:
        value = self.value.evaluate(scope) if self.value is not None else NULL
        raise ReturnSignal(value)


@dataclass
class FuncDecl(Node):
    name: str
    params: List[str]
    body: Block
    variadic: bool = False  # last parameter collects the remaining arguments

    def evaluate(self, scope: Scope) -> Any:
        if is_builtin_function(self.name):
            raise ScriptNameError(f'Function {self.name}() is a built-in function and cannot be redefined')
        scope.define_function(self.name, FunctionValue(self, scope))
        if scope.tracing(2):
            scope.trace(2, f"define function {self.name}({', '.join(self.params)})")
        return NULL


class FunctionValue:
    """A user-defined function together with the scope it was declared in."""
    def __init__(self, decl: FuncDecl, closure: Scope):
        self.decl = decl
        self.closure = closure

    @property
    def name(self) -> str:
        return self.decl.name

    def __repr__(self) -> str:
        return f"<function {self.name}>"

    def check_arity(self, count: int) -> None:
        params = self.decl.params
        if self.decl.variadic:
            required = len(params) - 1
            if count < required:
                raise ScriptValueError(
                    f'Function {self.name}() expects at least {required} arguments, but got {count}')
        elif count != len(params):
            raise ScriptValueError(
                f'Function {self.name}() expects exactly {len(params)} arguments, but got {count}')

    def bind(self, args: List[Any]) -> Scope:
        call_scope = self.closure.child()
        params = self.decl.params
        fixed = params[:-1] if self.decl.variadic else params
        for name, value in zip(fixed, args):
            call_scope.declare(name, value)
        if self.decl.variadic:
            call_scope.declare(params[-1], ListVal(list(args[len(fixed):])))
        return call_scope


@dataclass
class Call(Node):
    name: str
    args: List[Node] = field(default_factory=list)

    def evaluate(self, scope: Scope) -> Any:
        builtin = lookup_function(self.name)
        if builtin is not None:
            return builtin.invoke(self.args, scope)
        func = scope.lookup_function(self.name)
        if func is None:
            raise ScriptNameError(f'Unidentified function: {self.name}')
        func.check_arity(len(self.args))
        args = [arg.evaluate(scope) for arg in self.args]
        call_scope = func.bind(args)
        try:
            return func.decl.body.evaluate(call_scope)
        except ReturnSignal as r:
            return r.value
        except (BreakSignal, ContinueSignal) as signal:
            raise ScriptSyntaxError(f"'{signal.keyword}' used outside a loop in function {self.name}()")
