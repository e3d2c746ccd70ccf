"""Tokenizer for ToyLang.

The lexer walks the source with an ordered table of recognition rules.
Each rule pairs a compiled pattern with a token type, or with ``None``
when the match is discarded (whitespace and comments). Rules are tried in
table order at the cursor and the first one that matches wins, so
keywords sit before identifiers and two-character operators before their
one-character prefixes.

Tokens are produced one at a time by :meth:`Lexer.next_token`; iterating
a lexer yields them lazily until the end-of-input token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Pattern, Tuple

from .errors import LexError
from .keywords import DEFAULT_KEYWORDS, KEYWORD_KINDS, keyword_pattern


class TokenCategory(Enum):
    KEYWORD = 'keyword'
    PUNCTUATION = 'punctuation'
    OPERATOR = 'operator'
    LITERAL = 'literal'
    IDENTIFIER = 'identifier'
    EOF = 'end-of-input'


class TokenType(Enum):
    # keywords
    LET = 'LET'
    IF = 'IF'
    ELSE = 'ELSE'
    WHILE = 'WHILE'
    DO = 'DO'
    FOR = 'FOR'
    TRUE = 'TRUE'
    FALSE = 'FALSE'
    NULL = 'NULL'
    DEF = 'DEF'
    RETURN = 'RETURN'
    # punctuation
    SEMI = 'SEMI'
    CURLY_START = 'CURLY_START'
    CURLY_END = 'CURLY_END'
    PAREN_START = 'PAREN_START'
    PAREN_END = 'PAREN_END'
    COMMA = 'COMMA'
    # literals and names
    NUMBER = 'NUMBER'
    STRING = 'STRING'
    IDENTIFIER = 'IDENTIFIER'
    # operators
    EQUALITY_OPERATOR = 'EQUALITY_OPERATOR'
    SIMPLE_ASSIGNMENT = 'SIMPLE_ASSIGNMENT'
    COMPLEX_ASSIGNMENT = 'COMPLEX_ASSIGNMENT'
    ADDITIVE_OPERATOR = 'ADDITIVE_OPERATOR'
    MULTIPLICATIVE_OPERATOR = 'MULTIPLICATIVE_OPERATOR'
    RELATIONAL_OPERATOR = 'RELATIONAL_OPERATOR'
    LOGICAL_AND = 'LOGICAL_AND'
    LOGICAL_OR = 'LOGICAL_OR'
    LOGICAL_NOT = 'LOGICAL_NOT'
    EOF = 'EOF'

    @property
    def category(self) -> TokenCategory:
        return _CATEGORIES[self]

    @property
    def display(self) -> str:
        """Human readable spelling used in parse error messages."""
        return _DISPLAY.get(self, self.value)


_PUNCTUATION = {
    TokenType.SEMI, TokenType.CURLY_START, TokenType.CURLY_END,
    TokenType.PAREN_START, TokenType.PAREN_END, TokenType.COMMA,
}
_LITERALS = {TokenType.NUMBER, TokenType.STRING}

_CATEGORIES: Dict[TokenType, TokenCategory] = {}
for _type in TokenType:
    if _type.name in KEYWORD_KINDS:
        _CATEGORIES[_type] = TokenCategory.KEYWORD
    elif _type in _PUNCTUATION:
        _CATEGORIES[_type] = TokenCategory.PUNCTUATION
    elif _type in _LITERALS:
        _CATEGORIES[_type] = TokenCategory.LITERAL
    elif _type is TokenType.IDENTIFIER:
        _CATEGORIES[_type] = TokenCategory.IDENTIFIER
    elif _type is TokenType.EOF:
        _CATEGORIES[_type] = TokenCategory.EOF
    else:
        _CATEGORIES[_type] = TokenCategory.OPERATOR

_DISPLAY = {
    TokenType.SEMI: '";"',
    TokenType.CURLY_START: '"{"',
    TokenType.CURLY_END: '"}"',
    TokenType.PAREN_START: '"("',
    TokenType.PAREN_END: '")"',
    TokenType.COMMA: '","',
    TokenType.SIMPLE_ASSIGNMENT: '"="',
    TokenType.EOF: 'end of input',
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    start: int
    end: int

    @property
    def category(self) -> TokenCategory:
        return self.type.category


Rule = Tuple[Pattern[str], Optional[TokenType]]


def build_rules(keywords: Optional[Dict[str, Tuple[str, ...]]] = None) -> List[Rule]:
    """Compile the ordered rule table for a keyword spelling table."""
    keywords = DEFAULT_KEYWORDS if keywords is None else keywords
    table: List[Tuple[str, Optional[TokenType]]] = [
        (r'\s+', None),
        (r'//[^\n]*', None),
        (r'/\*[\s\S]*?\*/', None),

        (r';', TokenType.SEMI),
        (r'\}', TokenType.CURLY_END),
        (r'\{', TokenType.CURLY_START),
        (r'\(', TokenType.PAREN_START),
        (r'\)', TokenType.PAREN_END),
        (r',', TokenType.COMMA),
    ]
    for kind in KEYWORD_KINDS:
        spellings = keywords.get(kind, ())
        if spellings:
            table.append((keyword_pattern(spellings), TokenType[kind]))
    table += [
        (r'\d+(?:\.\d+)?', TokenType.NUMBER),
        (r'[A-Za-z_]\w*', TokenType.IDENTIFIER),

        (r'[=!]=', TokenType.EQUALITY_OPERATOR),
        (r'=', TokenType.SIMPLE_ASSIGNMENT),
        (r'[*/+\-]=', TokenType.COMPLEX_ASSIGNMENT),
        (r'[+\-]', TokenType.ADDITIVE_OPERATOR),
        (r'[*/]', TokenType.MULTIPLICATIVE_OPERATOR),
        (r'[<>]=?', TokenType.RELATIONAL_OPERATOR),
        (r'&&', TokenType.LOGICAL_AND),
        (r'\|\|', TokenType.LOGICAL_OR),
        (r'!', TokenType.LOGICAL_NOT),

        (r'"[^"\n]*"', TokenType.STRING),
        (r"'[^'\n]*'", TokenType.STRING),
    ]
    return [(re.compile(pattern), token_type) for pattern, token_type in table]


_DEFAULT_RULES = build_rules()


class Lexer:
    """Produces tokens from source text one at a time."""

    def __init__(self, source: str = '', keywords: Optional[Dict[str, Tuple[str, ...]]] = None):
        self.rules = _DEFAULT_RULES if keywords is None else build_rules(keywords)
        self.init(source)

    def init(self, source: str) -> None:
        self.source = source
        self.cursor = 0

    def has_more_tokens(self) -> bool:
        return self.cursor < len(self.source)

    def next_token(self) -> Token:
        # A discarded match restarts the scan at the new cursor.
        while self.has_more_tokens():
            for pattern, token_type in self.rules:
                matched = pattern.match(self.source, self.cursor)
                if matched is None:
                    continue
                start = self.cursor
                self.cursor = matched.end()
                if token_type is None:
                    break
                return Token(token_type, matched.group(0), start, self.cursor)
            else:
                self._fail()
        end = len(self.source)
        return Token(TokenType.EOF, '', end, end)

    def _fail(self) -> None:
        char = self.source[self.cursor]
        if char in '"\'':
            raise LexError('Unterminated string literal', self.cursor, self.cursor + 1, unterminated=True)
        raise LexError(f'Invalid token: {char!r}', self.cursor, self.cursor + 1)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return


def tokenize(source: str, keywords: Optional[Dict[str, Tuple[str, ...]]] = None) -> List[Token]:
    """Convert source code into a list of tokens ending with ``EOF``."""
    return list(Lexer(source, keywords))
