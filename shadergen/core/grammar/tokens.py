"""
Grammar Tokeniser
=================

Turns grammar source text into a lazy stream of `(result, span)` pairs, where
`result` is either a `Token` or a `TokenError`. Token errors are yielded, not
raised: the stream keeps going past a bad character and the caller decides
whether to bail.

Whitespace and `#` line comments are skipped. Single-character tokens are
`(`, `)`, `,`, `|`, `:` (separates a rule name from its branches) and `;`
(terminates a rule). Any other maximal run of alphanumeric or underscore
characters is an identifier.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, NamedTuple, Optional, Tuple, Union

from ...utils.exceptions import SourceTooLarge, TokenError, UnexpectedChar

# Spans use 16-bit lines and 8-bit columns.
MAX_LINES = 65536
MAX_COLUMNS = 255


class TokenKind(Enum):
    IDENT = "ident"
    LPAR = "("
    RPAR = ")"
    COMMA = ","
    BAR = "|"
    COLON = ":"
    SEMICOLON = ";"


SINGLE_CHAR_TOKENS = {
    "(": TokenKind.LPAR,
    ")": TokenKind.RPAR,
    ",": TokenKind.COMMA,
    "|": TokenKind.BAR,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
}

RULE_TERMINATOR = TokenKind.SEMICOLON
COMMENT_CHAR = "#"


class Span(NamedTuple):
    """Source location of a token: 0-based line and start column, and length."""
    line: int
    start: int
    length: int


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    name: Optional[str] = None  # set for identifiers only

    def as_str(self) -> str:
        """Source spelling of the token."""
        if self.kind is TokenKind.IDENT:
            return self.name
        return self.kind.value


TokenResult = Tuple[Union[Token, TokenError], Span]


def _is_ident_char(c: str) -> bool:
    return c == "_" or c.isalnum()


class TokenStream:
    """
    Iterator over the tokens of a character stream.

    The stream is consumed as it is read and cannot be restarted.
    """

    def __init__(self, chars: Iterable[str]):
        self._chars = iter(chars)
        self._current: Optional[str] = next(self._chars, None)
        self._line = 0
        self._column = 0

    def __iter__(self) -> Iterator[TokenResult]:
        return self

    def _advance(self) -> None:
        if self._current == "\n":
            self._line += 1
            self._column = 0
        elif self._current is not None:
            self._column += 1
        self._current = next(self._chars, None)

    def _skip_blank(self) -> None:
        while self._current is not None:
            if self._current.isspace():
                self._advance()
            elif self._current == COMMENT_CHAR:
                while self._current is not None and self._current != "\n":
                    self._advance()
            else:
                return

    def __next__(self) -> TokenResult:
        self._skip_blank()
        c = self._current
        if c is None:
            raise StopIteration

        line, start = self._line, self._column
        if c in SINGLE_CHAR_TOKENS:
            self._advance()
            result: Union[Token, TokenError] = Token(SINGLE_CHAR_TOKENS[c])
        elif _is_ident_char(c):
            chars = []
            while self._current is not None and _is_ident_char(self._current):
                chars.append(self._current)
                self._advance()
            result = Token(TokenKind.IDENT, "".join(chars))
        else:
            self._advance()
            result = UnexpectedChar(c)

        length = self._column - start
        if line >= MAX_LINES or self._column > MAX_COLUMNS:
            result = SourceTooLarge(line, self._column)
        return result, Span(line, start, length)


def tokenize(text: Iterable[str]) -> TokenStream:
    """Tokenise grammar source text (any iterable of characters)."""
    return TokenStream(text)
