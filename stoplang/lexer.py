"""Tokenizer for stoplang.

The lexer is lazy: `Lexer.next_token` scans exactly one token from the
current cursor. Newlines are significant and come out as ``EOL`` tokens;
the end of the input is a first-class ``END`` token so the parser can
reason about statement boundaries with a single token of lookahead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from .errors import LexError
from .types import INT_MAX


KEYWORDS = {
    'if', 'then', 'else', 'stop',
    'for', 'in', 'while', 'do', 'break', 'continue',
    'def', 'as', 'return',
    'and', 'or', 'not',
}

TYPE_NAMES = {'int', 'float', 'str', 'bool'}

BOOL_LITERALS = {'true': True, 'false': False}

# Longest match first: each entry is tried in order at the cursor.
OPERATORS = [
    '**', '//', '==', '!=', '>=', '<=', ':=', '..',
    '+', '-', '*', '/', '%', '=', '<', '>', '!', '&', '|', '?', '_',
    '(', ')', '[', ']', '{', '}', ',', ':', ';', '.',
]

ESCAPES = {'n': '\n', 't': '\t', '"': '"', "'": "'", '\\': '\\'}


@dataclass
class Token:
    type: str
    value: Any = None
    line: int = 1
    column: int = 1

    def describe(self) -> str:
        if self.type in ('EOL', 'END'):
            return 'end of line' if self.type == 'EOL' else 'end of input'
        if self.value is not None and self.type in ('INT', 'FLOAT', 'STRING', 'IDENT', 'TYPE'):
            return f"{self.type} {self.value!r}"
        return repr(self.type)


LexerState = Tuple[int, int, int]


class Lexer:
    def __init__(self, source: str = ''):
        self.reset(source)

    def reset(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.line = 1
        self.column = 1

    def mark(self) -> LexerState:
        return (self.pos, self.line, self.column)

    def rewind(self, state: LexerState) -> None:
        self.pos, self.line, self.column = state

    def _peek_char(self, offset: int = 0) -> str:
        idx = self.pos + offset
        return self.source[idx] if idx < self.length else ''

    def _advance(self, n: int = 1) -> None:
        for _ in range(n):
            if self.pos < self.length and self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def next_token(self) -> Token:
        while self.pos < self.length:
            c = self.source[self.pos]
            if c == '\n':
                token = Token('EOL', None, self.line, self.column)
                self._advance()
                return token
            if c.isspace():
                self._advance()
                continue
            if c.isdecimal():
                return self._read_number()
            if c.isalpha():
                return self._read_word()
            if c in ('"', "'"):
                return self._read_string()
            for op in OPERATORS:
                if self.source.startswith(op, self.pos):
                    token = Token(op, None, self.line, self.column)
                    self._advance(len(op))
                    return token
            raise LexError(f"Unexpected character {c!r} at {self.line}:{self.column}")
        return Token('END', None, self.line, self.column)

    def peek_next_token_type(self) -> str:
        """Return the type of the next token without moving the cursor."""
        state = self.mark()
        try:
            return self.next_token().type
        finally:
            self.rewind(state)

    def _read_number(self) -> Token:
        line, column = self.line, self.column
        start = self.pos
        is_float = False
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch.isdecimal():
                self._advance()
            elif ch == '.' and not is_float and self._peek_char(1).isdecimal():
                # a dot only belongs to the number when a digit follows, so
                # `1..5` stays INT .. INT
                is_float = True
                self._advance()
            else:
                break
        text = self.source[start:self.pos]
        if is_float:
            return Token('FLOAT', float(text), line, column)
        # more than 19 significant digits cannot fit in 64 bits
        if len(text.lstrip('0')) > 19 or int(text) > INT_MAX:
            raise LexError(f"Integer literal out of range at {line}:{column}")
        return Token('INT', int(text), line, column)

    def _read_word(self) -> Token:
        line, column = self.line, self.column
        start = self.pos
        while self.pos < self.length and (self.source[self.pos].isalnum() or self.source[self.pos] == '_'):
            self._advance()
        word = self.source[start:self.pos]
        if word in BOOL_LITERALS:
            return Token('BOOL', BOOL_LITERALS[word], line, column)
        if word in TYPE_NAMES:
            return Token('TYPE', word, line, column)
        if word in KEYWORDS:
            return Token(word, None, line, column)
        return Token('IDENT', word, line, column)

    def _read_string(self) -> Token:
        line, column = self.line, self.column
        quote = self.source[self.pos]
        self._advance()
        chars: List[str] = []
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch == quote:
                self._advance()
                return Token('STRING', ''.join(chars), line, column)
            if ch == '\\' and self.pos + 1 < self.length:
                escaped = self.source[self.pos + 1]
                chars.append(ESCAPES.get(escaped, escaped))
                self._advance(2)
                continue
            chars.append(ch)
            self._advance()
        raise LexError(f"Unterminated string starting at {line}:{column}")


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens, ending with ``END``."""
    lexer = Lexer(source)
    tokens: List[Token] = []
    while True:
        token = lexer.next_token()
        tokens.append(token)
        if token.type == 'END':
            return tokens
