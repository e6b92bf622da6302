"""Recursive-descent parser for stoplang.

The parser pulls tokens from a `Lexer` one at a time and keeps a single
current-token buffer. Expressions are parsed with one method per
precedence level, from the loosest binding to the tightest:

    logic       a & b, a | b (also `and` / `or`)
    comparison  == != < <= > >=
    additive    + -
    multiplicative  * / // % **
    cast        x as int
    unary       !x  -x  _x  ?x   and primary expressions

A primary is a literal, a parenthesised statement, a list or dict
literal, a variable or a function call, optionally followed by a chain of
``[index]`` and ``.method(args)`` postfixes. An index chain followed by
``=`` becomes an index assignment.

Statements start with a keyword (`if`, `for`, `while`, `def`, `break`,
`continue`, `return`), are a plain assignment (``name = expr`` rebinds,
``name := expr`` declares), or fall through to an expression.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    Program, Node, Literal, TypeCast, UnaryOp, BinaryOp, Assign, Ident,
    ListLit, DictLit, Index, IndexAssign, MethodCall, Block, IfStmt,
    ForStmt, WhileStmt, LoopControl, ReturnStmt, FuncDecl, Call,
)
from .errors import ParserError, ScriptSyntaxError
from .lexer import Lexer, Token


COMPARISON_OPS = ('==', '!=', '<', '<=', '>', '>=')
ADDITIVE_OPS = ('+', '-')
MULTIPLICATIVE_OPS = ('*', '/', '//', '%', '**')
LOGIC_OPS = {'&': 'and', 'and': 'and', '|': 'or', 'or': 'or'}
UNARY_OPS = {'!': 'not', 'not': 'not', '-': '-', '_': 'abs', '?': '?'}

LITERAL_TOKENS = ('INT', 'FLOAT', 'STRING', 'BOOL')

# Compound statements and the keyword that must follow their header.
OPENERS = {'if': 'then', 'for': 'do', 'while': 'do', 'def': 'as'}

STATEMENT_END = (';', 'EOL', 'END')
BLOCK_END = ('stop', 'else', 'END')


class Parser:
    def __init__(self, lexer: Optional[Lexer] = None):
        self.lexer = lexer if lexer is not None else Lexer()
        self.current: Token = self.lexer.next_token()

    def reset(self, source: str) -> None:
        self.lexer.reset(source)
        self.advance()

    # Token buffer helpers

    def advance(self) -> None:
        self.current = self.lexer.next_token()

    def match(self, *types: str) -> bool:
        return self.current.type in types

    def accept(self, token_type: str) -> bool:
        if self.current.type == token_type:
            self.advance()
            return True
        return False

    def consume(self, token_type: str, message: str) -> Token:
        token = self.current
        if token.type != token_type:
            raise ScriptSyntaxError(f"{message} at {token.line}:{token.column}, got {token.describe()}")
        self.advance()
        return token

    def skip_newlines(self) -> None:
        while self.current.type == 'EOL':
            self.advance()

    # Statement completeness

    def is_statement_complete(self) -> bool:
        """Check whether the buffered input holds complete statements.

        Scans ahead from the current token without consuming anything:
        every `if`/`for`/`while`/`def` opens a level that `stop` closes,
        and the keyword that ends its header (`then`/`do`/`as`) must have
        been seen. The lexer cursor and the current token are restored
        afterwards; lexer errors met during the scan propagate.
        """
        state = self.lexer.mark()
        saved = self.current
        try:
            token = self.current
            depth = 0
            pending: List[str] = []
            while token.type != 'END':
                if token.type in OPENERS:
                    depth += 1
                    pending.append(OPENERS[token.type])
                elif pending and token.type == pending[-1]:
                    pending.pop()
                elif token.type == 'stop':
                    depth -= 1
                token = self.lexer.next_token()
            return depth <= 0 and not pending
        finally:
            self.lexer.rewind(state)
            self.current = saved

    # Statements

    def parse(self) -> List[Node]:
        statements: List[Node] = []
        while not self.match('END'):
            if self.accept('EOL') or self.accept(';'):
                continue
            statements.append(self.parse_statement())
            if not self.match(*STATEMENT_END):
                token = self.current
                raise ScriptSyntaxError(
                    f"Expected ';' or new line after statement at {token.line}:{token.column}, "
                    f"got {token.describe()}")
        return statements

    def parse_program(self) -> Program:
        return Program(self.parse())

    def parse_statement(self) -> Node:
        token_type = self.current.type
        if token_type == 'if':
            return self.parse_if_stmt()
        if token_type == 'for':
            return self.parse_for_stmt()
        if token_type == 'while':
            return self.parse_while_stmt()
        if token_type == 'def':
            return self.parse_func_decl()
        if token_type in ('break', 'continue'):
            self.advance()
            return LoopControl(token_type)
        if token_type == 'return':
            return self.parse_return_stmt()
        if token_type == 'IDENT' and self.lexer.peek_next_token_type() in ('=', ':='):
            name = self.current.value
            self.advance()
            reassign = self.current.type == '='
            self.advance()
            return Assign(name, self.parse_expression(), reassign)
        return self.parse_expression()

    def parse_block(self) -> Block:
        statements: List[Node] = []
        while True:
            if self.accept('EOL') or self.accept(';'):
                continue
            if self.match(*BLOCK_END):
                break
            statements.append(self.parse_statement())
        return Block(statements)

    def parse_if_stmt(self) -> IfStmt:
        self.advance()
        if self.match('EOL', 'END', 'then'):
            raise ScriptSyntaxError("Expected condition after 'if'")
        condition = self.parse_expression()
        self.consume('then', "Expected 'then' after if condition")
        then_block = self.parse_block()
        else_block = None
        if self.accept('else'):
            else_block = self.parse_block()
        self.consume('stop', "Expected 'stop' at the end of if statement")
        return IfStmt(condition, then_block, else_block)

    def parse_for_stmt(self) -> ForStmt:
        self.advance()
        name = self.consume('IDENT', "Expected loop variable name after 'for'").value
        self.consume('in', "Expected 'in' after loop variable")
        start = self.parse_expression()
        end: Optional[Node] = None
        step: Optional[Node] = None
        if self.accept('..'):
            end = self.parse_expression()
            if self.accept(':'):
                step = self.parse_expression()
        self.consume('do', "Expected 'do' after for loop header")
        body = self.parse_block()
        self.consume('stop', "Expected 'stop' at the end of for loop")
        return ForStmt(name, start, end, step, body)

    def parse_while_stmt(self) -> WhileStmt:
        self.advance()
        if self.match('EOL', 'END', 'do'):
            raise ScriptSyntaxError("Expected condition after 'while'")
        condition = self.parse_expression()
        self.consume('do', "Expected 'do' after while condition")
        body = self.parse_block()
        self.consume('stop', "Expected 'stop' at the end of while loop")
        return WhileStmt(condition, body)

    def parse_func_decl(self) -> FuncDecl:
        self.advance()
        name = self.consume('IDENT', "Expected function name after 'def'").value
        self.consume('(', "Expected '(' after function name")
        params: List[str] = []
        variadic = False
        if not self.match(')'):
            while True:
                params.append(self.consume('IDENT', 'Expected parameter name').value)
                if self.accept('..'):
                    variadic = True
                    if self.match(','):
                        raise ScriptSyntaxError('Variadic parameter must be the last parameter')
                    break
                if not self.accept(','):
                    break
        self.consume(')', "Expected ')' after function parameters")
        self.consume('as', "Expected 'as' after function signature")
        body = self.parse_block()
        self.consume('stop', "Expected 'stop' at the end of function definition")
        return FuncDecl(name, params, body, variadic)

    def parse_return_stmt(self) -> ReturnStmt:
        self.advance()
        if self.match(*STATEMENT_END, *BLOCK_END):
            return ReturnStmt(None)
        return ReturnStmt(self.parse_expression())

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_logic()

    def parse_logic(self) -> Node:
        node = self.parse_comparison()
        while self.current.type in LOGIC_OPS:
            op = LOGIC_OPS[self.current.type]
            self.advance()
            node = BinaryOp(op, node, self.parse_comparison())
        return node

    def parse_comparison(self) -> Node:
        node = self.parse_additive()
        while self.match(*COMPARISON_OPS):
            op = self.current.type
            self.advance()
            node = BinaryOp(op, node, self.parse_additive())
        return node

    def parse_additive(self) -> Node:
        node = self.parse_multiplicative()
        while self.match(*ADDITIVE_OPS):
            op = self.current.type
            self.advance()
            node = BinaryOp(op, node, self.parse_multiplicative())
        return node

    def parse_multiplicative(self) -> Node:
        node = self.parse_cast()
        while self.match(*MULTIPLICATIVE_OPS):
            op = self.current.type
            self.advance()
            node = BinaryOp(op, node, self.parse_cast())
        return node

    def parse_cast(self) -> Node:
        node = self.parse_unary()
        while self.accept('as'):
            target = self.consume('TYPE', "Expected type name after 'as'")
            node = TypeCast(node, target.value)
        return node

    def parse_unary(self) -> Node:
        if self.current.type in UNARY_OPS:
            op = UNARY_OPS[self.current.type]
            self.advance()
            return UnaryOp(op, self.parse_unary())
        return self.parse_postfix(self.parse_primary())

    def parse_primary(self) -> Node:
        token = self.current
        if token.type in LITERAL_TOKENS:
            self.advance()
            return Literal(token.value)
        if token.type == '(':
            self.advance()
            node = self.parse_statement()
            self.consume(')', "Expected closing parenthesis ')'")
            return node
        if token.type == '[':
            return self.parse_list()
        if token.type == '{':
            return self.parse_dict()
        if token.type == 'IDENT':
            self.advance()
            if self.match('('):
                self.advance()
                return Call(token.value, self.parse_arguments())
            return Ident(token.value)
        raise ParserError(f"Unexpected token {token.describe()} at {token.line}:{token.column}")

    def parse_postfix(self, node: Node) -> Node:
        while self.match('[', '.'):
            if self.accept('['):
                index = self.parse_expression()
                self.consume(']', "Expected ']' after index")
                node = Index(node, index)
                if self.accept('='):
                    node = IndexAssign(node, self.parse_expression())
            else:
                self.advance()
                name = self.consume('IDENT', "Expected method name after '.'").value
                self.consume('(', "Expected '(' after method name")
                node = MethodCall(node, name, self.parse_arguments())
        return node

    def parse_arguments(self) -> List[Node]:
        # the opening parenthesis is already consumed
        args: List[Node] = []
        self.skip_newlines()
        while not self.match(')'):
            args.append(self.parse_expression())
            self.skip_newlines()
            if not self.accept(','):
                break
            self.skip_newlines()
        self.consume(')', "Expected ')' after arguments")
        return args

    def parse_list(self) -> ListLit:
        self.advance()
        elements: List[Node] = []
        self.skip_newlines()
        while not self.match(']'):
            elements.append(self.parse_expression())
            self.skip_newlines()
            if self.accept(','):
                self.skip_newlines()
                continue
            if not self.match(']'):
                raise ScriptSyntaxError("Expected ',' or ']' when creating a list")
        self.advance()
        return ListLit(elements)

    def parse_dict(self) -> DictLit:
        self.advance()
        entries: List[Tuple[Node, Node]] = []
        self.skip_newlines()
        while not self.match('}'):
            key = self.parse_expression()
            self.consume(':', "Expected ':' after dictionary key")
            self.skip_newlines()
            value = self.parse_expression()
            entries.append((key, value))
            self.skip_newlines()
            if self.accept(','):
                self.skip_newlines()
                continue
            if not self.match('}'):
                raise ScriptSyntaxError("Expected ',' or '}' when creating a dictionary")
        self.advance()
        return DictLit(entries)


def parse_program(source: str) -> Program:
    """Parse stoplang source code into a Program AST."""
    return Parser(Lexer(source)).parse_program()


def is_statement_complete(source: str) -> bool:
    return Parser(Lexer(source)).is_statement_complete()
