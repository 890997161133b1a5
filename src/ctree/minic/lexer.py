"""
Mini-C Lexer (Tokenizer)
========================

This module implements the lexer for Mini-C, the small C-like teaching
language analysed by ctree. It converts source text into an ordered list
of positioned tokens for the parser.

Token Categories
----------------
- Keywords: int, char, float, double, void, if, else, while, for,
  return, printf
- Identifiers: letters, digits and '_', not starting with a digit
- Numbers: digits, optionally one '.' and more digits (``10``, ``3.14``)
- Operators: + - * / % = < > ! & | and the pairs
  == != <= >= && || ++ --
- Punctuation: ; , ( ) { } [ ]
- Comments: ``// ...`` to end of line and ``/* ... */``

Comments are emitted as COMMENT tokens (text includes the delimiters) so
that a token table can show them; the parser skips them.

Positions
---------
Lines and columns are 1-indexed. A newline moves to the next line and
resets the column to 1; every other character, tabs included, advances
the column by one. A token's position is that of its first character.

Example Usage
-------------
>>> from ctree.minic.lexer import tokenize
>>> for token in tokenize("int x = 10;"):
...     print(token)
Token(KEYWORD, 'int', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(OPERATOR, '=', 1:7)
Token(NUMBER, '10', 1:9)
Token(PUNCTUATION, ';', 1:11)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional
import string

from ctree.errors import SourceLocation
from ctree.minic.errors import (
    InvalidCharacterError,
    MalformedNumberError,
    UnterminatedCommentError,
)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Lexical categories of Mini-C.

    The vocabulary is deliberately coarse: the parser distinguishes
    individual keywords and operators by their text.
    """

    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    COMMENT = "COMMENT"


# =============================================================================
# Character Classes
# =============================================================================

KEYWORDS = frozenset({
    # Type specifiers
    "int", "char", "float", "double", "void",
    # Control flow
    "if", "else", "while", "for", "return",
    # Builtins
    "printf",
})

TYPE_KEYWORDS = frozenset({"int", "char", "float", "double", "void"})

OPERATOR_CHARS = frozenset("+-*/%=<>!&|")

# Second characters that extend a single-character operator
TWO_CHAR_OPERATORS = frozenset({"==", "!=", "<=", ">=", "&&", "||", "++", "--"})

PUNCTUATION_CHARS = frozenset(";,(){}[]")

WHITESPACE_CHARS = " \t\r\n\f\v"


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single classified, positioned lexical unit.

    Attributes:
        kind: The TokenKind classification
        text: Exact source text of the token
        line: Line of the first character (1-indexed)
        column: Column of the first character (1-indexed)
        filename: Name of the source the token came from
    """
    kind: TokenKind
    text: str
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_type_keyword(self) -> bool:
        return self.kind == TokenKind.KEYWORD and self.text in TYPE_KEYWORDS

    def describe(self) -> str:
        """Kind and text, as used in syntax error messages."""
        return f"{self.kind.name} '{self.text}'"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "text": self.text,
            "line": self.line,
            "column": self.column,
        }


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Mini-C source code.

    Scanning is a single left-to-right pass with one character of
    lookahead (two when telling '/' from a comment opener). The first
    lexical error stops the scan.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The Mini-C source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

        # Track line start position for error context
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects in source order

        Raises:
            LexicalError: If the source cannot be tokenized
        """
        while True:
            self._skip_whitespace()
            if self._at_end():
                return
            yield self._scan_token()

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking.
        """
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _location(self, line: Optional[int] = None, column: Optional[int] = None) -> SourceLocation:
        return SourceLocation(
            self.filename,
            self._line if line is None else line,
            self._column if column is None else column,
        )

    def _current_line_text(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    def _make_token(self, kind: TokenKind, text: str, line: int, column: int) -> Token:
        return Token(kind=kind, text=text, line=line, column=column, filename=self.filename)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._peek() in WHITESPACE_CHARS:
            self._advance()

    def _scan_token(self) -> Token:
        """Scan the next token, which starts at a non-whitespace character."""
        start_line = self._line
        start_column = self._column
        char = self._peek()

        if char == "/" and self._peek(1) == "/":
            return self._scan_line_comment(start_line, start_column)

        if char == "/" and self._peek(1) == "*":
            return self._scan_block_comment(start_line, start_column)

        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char in string.digits:
            return self._scan_number(start_line, start_column)

        if char in OPERATOR_CHARS:
            return self._scan_operator(start_line, start_column)

        if char in PUNCTUATION_CHARS:
            self._advance()
            return self._make_token(TokenKind.PUNCTUATION, char, start_line, start_column)

        raise InvalidCharacterError(
            char,
            self._location(start_line, start_column),
            self._current_line_text(),
        )

    def _scan_line_comment(self, start_line: int, start_column: int) -> Token:
        """Scan a '//' comment up to, not including, the newline."""
        chars = []
        while not self._at_end() and self._peek() != "\n":
            chars.append(self._advance())
        return self._make_token(TokenKind.COMMENT, "".join(chars), start_line, start_column)

    def _scan_block_comment(self, start_line: int, start_column: int) -> Token:
        """
        Scan a '/* ... */' comment, tracking lines through it.

        Raises:
            UnterminatedCommentError: At the end-of-input position if the
                closing marker never appears
        """
        chars = [self._advance(), self._advance()]  # the /*

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                chars.append(self._advance())
                chars.append(self._advance())
                return self._make_token(
                    TokenKind.COMMENT, "".join(chars), start_line, start_column
                )
            chars.append(self._advance())

        raise UnterminatedCommentError(
            self._location(),
            opened_at=self._location(start_line, start_column),
            source_line=self._current_line_text(),
        )

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """
        Scan an identifier or keyword.

        Keywords are recognised by exact text after the maximal run of
        identifier characters has been taken, so ``integer`` is an
        identifier.
        """
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)
        kind = TokenKind.KEYWORD if name in KEYWORDS else TokenKind.IDENTIFIER
        return self._make_token(kind, name, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """
        Scan a numeric literal: digits with at most one decimal point.

        Raises:
            MalformedNumberError: At the position of a second '.'
        """
        chars = []
        seen_dot = False

        while self._peek() and (self._peek() in string.digits or self._peek() == "."):
            if self._peek() == ".":
                if seen_dot:
                    raise MalformedNumberError(
                        self._location(),
                        self._current_line_text(),
                    )
                seen_dot = True
            chars.append(self._advance())

        return self._make_token(TokenKind.NUMBER, "".join(chars), start_line, start_column)

    def _scan_operator(self, start_line: int, start_column: int) -> Token:
        """Scan a one- or two-character operator."""
        text = self._advance()
        if text + self._peek() in TWO_CHAR_OPERATORS:
            text += self._advance()
        return self._make_token(TokenKind.OPERATOR, text, start_line, start_column)


# =============================================================================
# Convenience Function
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize Mini-C source into a list.

    Args:
        source: The Mini-C source code
        filename: Source filename for error messages

    Returns:
        All tokens, comments included, in source order

    Raises:
        LexicalError: If the source cannot be tokenized
    """
    return list(Lexer(source, filename).tokenize())
