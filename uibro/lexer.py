"""
UIBro Lexer - Tokenizes UIBro script source
Uses the shared language definition from uibro.json
"""

import json
import os
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .errors import Diagnostics


class TokenType(Enum):
    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    DOT = auto()
    COMMA = auto()
    SEMICOLON = auto()
    ASSIGN = auto()
    COLON = auto()

    # Operators
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    EQ = auto()
    NEQ = auto()
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()
    AND = auto()
    OR = auto()
    NOT = auto()

    # Keywords
    IF = auto()
    ELSE = auto()
    ELSEIF = auto()
    WHILE = auto()
    FOR = auto()
    COMPONENT = auto()

    EOF = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    col: int


def load_language_config() -> Dict[str, Any]:
    """Load the language definition from uibro.json next to this module."""
    path = os.path.join(os.path.dirname(__file__), 'uibro.json')
    if not os.path.exists(path):
        raise FileNotFoundError(f"Could not find {path}")
    with open(path, encoding='utf-8') as f:
        return json.load(f)


# Load config at module level
UI = load_language_config()

KEYWORDS = {word: TokenType[name] for word, name in UI['keywords'].items()}
COMPONENTS = frozenset(UI['components'])
OPERATORS = {symbol: TokenType[name] for symbol, name in UI['operators'].items()}
PUNCTUATION = {symbol: TokenType[name] for symbol, name in UI['punctuation'].items()}
ESCAPES = UI['escapes']


def is_ident_start(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def is_ident_char(ch: str) -> bool:
    return is_ident_start(ch) or ('0' <= ch <= '9')


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    def __init__(self, source: str, diagnostics: Optional[Diagnostics] = None):
        self.source = source
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: List[Token] = []

    def peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        return self.source[pos] if pos < len(self.source) else ''

    def advance(self, count: int = 1) -> str:
        result = self.source[self.pos:self.pos + count]
        for ch in result:
            if ch == '\n':
                self.line += 1
                self.col = 1
            else:
                self.col += 1
        self.pos += count
        return result

    def add_token(self, type: TokenType, value: str, line: int, col: int):
        self.tokens.append(Token(type, value, line, col))

    def report(self, message: str, line: int, col: int):
        self.diagnostics.report('lexer', message, line, col)

    def tokenize(self) -> List[Token]:
        while self.pos < len(self.source):
            self.scan_token()
        self.add_token(TokenType.EOF, '', self.line, self.col)
        return self.tokens

    def scan_token(self):
        ch = self.peek()
        line, col = self.line, self.col

        if ch.isspace():
            self.advance()
            return

        # Comments
        if ch == '/' and self.peek(1) == '/':
            while self.peek() and self.peek() != '\n':
                self.advance()
            return

        if ch in ('"', "'"):
            self.scan_string(ch, line, col)
            return

        if is_digit(ch):
            start = self.pos
            while is_digit(self.peek()) or self.peek() == '.':
                self.advance()
            self.add_token(TokenType.NUMBER, self.source[start:self.pos], line, col)
            return

        if is_ident_start(ch):
            start = self.pos
            while is_ident_char(self.peek()):
                self.advance()
            word = self.source[start:self.pos]
            if word in KEYWORDS:
                self.add_token(KEYWORDS[word], word, line, col)
            elif word in COMPONENTS:
                self.add_token(TokenType.COMPONENT, word, line, col)
            else:
                self.add_token(TokenType.IDENTIFIER, word, line, col)
            return

        pair = ch + self.peek(1)
        if pair in OPERATORS:
            self.advance(2)
            self.add_token(OPERATORS[pair], pair, line, col)
            return

        if ch in PUNCTUATION:
            self.advance()
            self.add_token(PUNCTUATION[ch], ch, line, col)
            return

        # A lone '&' or '|' produces no token, like any other stray character
        self.advance()
        if ch in '&|':
            self.report(f"Discarded lone '{ch}'", line, col)
        else:
            self.report(f"Skipped unexpected character {ch!r}", line, col)

    def scan_string(self, quote: str, line: int, col: int):
        self.advance()  # opening quote
        value = ''
        while self.peek() and self.peek() != quote:
            if self.peek() == '\\':
                self.advance()
                escaped = self.peek()
                if not escaped:
                    break
                value += ESCAPES.get(escaped, escaped)
                self.advance()
            else:
                value += self.advance()
        if self.peek() == quote:
            self.advance()  # closing quote
        else:
            self.report("Unterminated string literal", line, col)
        self.add_token(TokenType.STRING, value, line, col)


def tokenize(text: str, diagnostics: Optional[Diagnostics] = None) -> List[Token]:
    return Lexer(text, diagnostics).tokenize()
