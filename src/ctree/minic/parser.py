"""
Mini-C Recursive Descent Parser
===============================

This module implements a recursive descent parser for Mini-C. It takes
the token list from the lexer and builds the AST defined in
ctree.minic.ast.

Grammar (Simplified EBNF)
-------------------------
program         ::= declaration*
declaration     ::= type IDENTIFIER '(' params ')' block
                  | type IDENTIFIER ('=' expression)? ';'
                  | statement
type            ::= 'int' | 'char' | 'float' | 'double' | 'void'
params          ::= ε | 'void' | type IDENTIFIER (',' type IDENTIFIER)*

statement       ::= if_stmt | while_stmt | for_stmt | return_stmt
                  | block | expression ';'
if_stmt         ::= 'if' '(' expression ')' statement ('else' statement)?
while_stmt      ::= 'while' '(' expression ')' statement
for_stmt        ::= 'for' '(' for_init expression? ';' expression? ')' statement
for_init        ::= ';' | type IDENTIFIER ('=' expression)? ';' | expression ';'
return_stmt     ::= 'return' expression? ';'
block           ::= '{' declaration* '}'

Expression Precedence (lowest to highest)
-----------------------------------------
1. assignment     =            (right-associative, target must be a name)
2. equality       == !=
3. comparison     < <= > >=
4. term           + -
5. factor         * / %
6. unary          ! -          (right-associative)
7. primary        NUMBER, IDENTIFIER, '(' expression ')'

Comments
--------
COMMENT tokens carry no meaning for the grammar and are dropped before
parsing starts, so a comment may appear between any two tokens.

Error Recovery
--------------
A syntax error inside a top-level declaration is recorded, then the
parser resynchronises (panic mode): it skips the offending token and
keeps skipping until it has just passed a ';' or the next token is one of
``if while for return int float char void``. Parsing resumes from there.
Every recorded error is kept on ``Parser.errors``; nothing is discarded.

Example Usage
-------------
>>> from ctree.minic.lexer import tokenize
>>> from ctree.minic.parser import parse
>>> ast = parse(tokenize("int x = 10;"))
>>> ast.children[0].kind
<NodeKind.VARIABLE_DECLARATION: 'VARIABLE_DECLARATION'>
"""

import logging
from typing import Callable, Optional

from ctree.errors import SourceLocation
from ctree.minic.ast import ASTNode, NodeKind, make_node
from ctree.minic.lexer import Lexer, Token, TokenKind
from ctree.minic.errors import (
    CSyntaxError,
    CompilationFailed,
    ErrorCollector,
    InvalidAssignmentTargetError,
    MissingTokenError,
    NestingTooDeepError,
    UnexpectedTokenError,
)

logger = logging.getLogger(__name__)

# Keywords at which panic-mode recovery stops skipping
SYNC_KEYWORDS = frozenset({"if", "while", "for", "return", "int", "float", "char", "void"})

DEFAULT_MAX_NESTING_DEPTH = 64


class Parser:
    """
    Recursive descent parser for Mini-C.

    Parses a list of tokens into a PROGRAM-rooted AST. Uses one method per
    grammar rule and a shared helper for the left-associative binary
    levels.

    The parser keeps going after a syntax error in a top-level
    declaration so that later declarations are still parsed; the errors
    are available on ``errors`` once parse() returns.

    Attributes:
        tokens: Tokens to parse, comments removed
        filename: Source filename for error reporting
        errors: Syntax errors recorded by the last parse(), in order
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        max_errors: int = 100,
        max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Tokens from the lexer (COMMENT tokens are ignored)
            filename: Source filename for error messages
            source_lines: Original source lines for error context
            max_errors: Stop parsing after this many syntax errors
            max_nesting_depth: Deepest statement/expression nesting accepted
        """
        self.tokens = [t for t in tokens if t.kind != TokenKind.COMMENT]
        self.filename = filename
        self.source_lines = source_lines or []
        self.max_nesting_depth = max_nesting_depth

        # Current position in token stream
        self._pos = 0
        self._depth = 0
        self._deepest = 0

        self._errors = ErrorCollector(max_errors=max_errors)

    @property
    def errors(self) -> list[CSyntaxError]:
        return list(self._errors.errors)

    def parse(self) -> ASTNode:
        """
        Parse the token stream into an AST.

        Returns:
            The PROGRAM node. When ``errors`` is non-empty it holds only
            the declarations that parsed cleanly.
        """
        self._pos = 0
        self._depth = 0
        self._deepest = 0
        self._errors.clear()

        declarations = []

        while not self._at_end():
            try:
                declarations.append(self._parse_top_level_declaration())
            except CSyntaxError as e:
                self._errors.add(e)
                if self._errors.should_stop():
                    logger.warning(
                        f"Stopped parsing after {self._errors.error_count()} errors"
                    )
                    break
                self._synchronize()
                logger.debug(f"Recovered from '{e.message}' at {e.location}; "
                             f"resuming at {self._peek()!r}")

        return make_node(NodeKind.PROGRAM, None, *declarations)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    def _peek(self, offset: int = 0) -> Optional[Token]:
        """Look at token at current position + offset, None past the end."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return None
        return self.tokens[pos]

    def _previous(self) -> Optional[Token]:
        if self._pos == 0:
            return None
        return self.tokens[self._pos - 1]

    def _advance(self) -> Optional[Token]:
        """Consume and return the current token."""
        if self._at_end():
            return None
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _check(self, kind: TokenKind, *texts: str) -> bool:
        """Check if current token has the kind and, if given, one of the texts."""
        token = self._peek()
        if token is None or token.kind != kind:
            return False
        return not texts or token.text in texts

    def _match(self, kind: TokenKind, *texts: str) -> Optional[Token]:
        """
        Consume current token if it matches.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(kind, *texts):
            return self._advance()
        return None

    def _expect(self, kind: TokenKind, text: Optional[str] = None, context: str = "") -> Token:
        """
        Expect and consume a specific token.

        Args:
            kind: The expected token kind
            text: The expected token text, if a particular one is required
            context: Where in the grammar we are, e.g. "after 'if'"

        Raises:
            MissingTokenError: If the expected token is not next
        """
        if text is None:
            token = self._match(kind)
        else:
            token = self._match(kind, text)
        if token is not None:
            return token

        expected = f"'{text}'" if text is not None else kind.name.lower()
        location = self._current_location()
        raise MissingTokenError(
            expected,
            context,
            self._describe_current(),
            location,
            self._get_source_line(location.line),
        )

    def _current_location(self) -> SourceLocation:
        """Location of the current token, or just past the last one at end."""
        token = self._peek()
        if token is not None:
            return token.location
        if not self.tokens:
            return SourceLocation(self.filename, 1, 1)
        last = self.tokens[-1]
        return SourceLocation(self.filename, last.line, last.column + len(last.text))

    def _describe_current(self) -> str:
        token = self._peek()
        return token.describe() if token is not None else "end of input"

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _unexpected(self, expected: str, hint: Optional[str] = None) -> UnexpectedTokenError:
        location = self._current_location()
        return UnexpectedTokenError(
            expected,
            self._describe_current(),
            location,
            hint=hint,
            source_line=self._get_source_line(location.line),
        )

    def _synchronize(self) -> None:
        """
        Skip tokens after a syntax error (panic-mode recovery).

        Always consumes the offending token, then stops right after a ';'
        or in front of a token that begins a new declaration or statement.
        """
        self._advance()

        while not self._at_end():
            previous = self._previous()
            if previous is not None and previous.kind == TokenKind.PUNCTUATION \
                    and previous.text == ";":
                return
            if self._check(TokenKind.KEYWORD, *SYNC_KEYWORDS):
                return
            self._advance()

    def _nested(self, parse_rule: Callable[[], ASTNode]) -> ASTNode:
        """Run a parse rule one nesting level deeper, enforcing the limit."""
        if self._depth >= self.max_nesting_depth:
            raise self._nesting_error(self.max_nesting_depth)
        self._depth += 1
        self._deepest = max(self._deepest, self._depth)
        try:
            return parse_rule()
        finally:
            self._depth -= 1

    def _nesting_error(self, limit: int) -> NestingTooDeepError:
        location = self._current_location()
        return NestingTooDeepError(limit, location, self._get_source_line(location.line))

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_top_level_declaration(self) -> ASTNode:
        """
        Parse one top-level declaration.

        The interpreter stack can run out before max_nesting_depth is
        reached when the limit has been raised; that is reported as a
        NestingTooDeepError at the token where parsing stopped.
        """
        self._deepest = 0
        try:
            return self._parse_declaration()
        except RecursionError:
            raise self._nesting_error(self._deepest) from None

    def _parse_declaration(self) -> ASTNode:
        """Parse a function or variable declaration, or fall back to a statement."""
        return self._nested(self._parse_declaration_body)

    def _parse_declaration_body(self) -> ASTNode:
        token = self._peek()
        if token is None or not token.is_type_keyword():
            return self._parse_statement()

        type_token = self._advance()
        name_token = self._expect(
            TokenKind.IDENTIFIER, context=f"after type '{type_token.text}'"
        )

        if self._match(TokenKind.PUNCTUATION, "("):
            return self._parse_function(type_token, name_token)

        return self._parse_variable_declaration(type_token, name_token)

    def _parse_function(self, type_token: Token, name_token: Token) -> ASTNode:
        """Parse the rest of a function definition after '('."""
        parameters = self._parse_parameters()
        self._expect(
            TokenKind.PUNCTUATION, "{",
            context=f"to begin the body of function '{name_token.text}'",
        )
        body = self._parse_block()

        return make_node(
            NodeKind.FUNCTION_DECLARATION,
            name_token.text,
            make_node(NodeKind.TYPE, type_token.text),
            parameters,
            body,
        )

    def _parse_parameters(self) -> ASTNode:
        """
        Parse a parameter list up to and including ')'.

        ``()`` and ``(void)`` both mean no parameters.
        """
        parameters = []

        if self._match(TokenKind.PUNCTUATION, ")"):
            return make_node(NodeKind.PARAMETERS)

        next_token = self._peek(1)
        if self._check(TokenKind.KEYWORD, "void") and next_token is not None \
                and next_token.kind == TokenKind.PUNCTUATION and next_token.text == ")":
            self._advance()  # consume void
            self._advance()  # consume )
            return make_node(NodeKind.PARAMETERS)

        while True:
            type_token = self._peek()
            if type_token is None or not type_token.is_type_keyword():
                raise self._unexpected("parameter type")
            self._advance()
            name_token = self._expect(
                TokenKind.IDENTIFIER, context=f"after parameter type '{type_token.text}'"
            )
            parameters.append(make_node(
                NodeKind.PARAMETER,
                name_token.text,
                make_node(NodeKind.TYPE, type_token.text),
            ))

            if not self._match(TokenKind.PUNCTUATION, ","):
                break

        self._expect(TokenKind.PUNCTUATION, ")", context="after parameters")
        return make_node(NodeKind.PARAMETERS, None, *parameters)

    def _parse_variable_declaration(self, type_token: Token, name_token: Token) -> ASTNode:
        """Parse ``['=' expression] ';'`` after the type and name."""
        children = [make_node(NodeKind.TYPE, type_token.text)]

        if self._match(TokenKind.OPERATOR, "="):
            children.append(make_node(NodeKind.INITIALIZATION, None, self._parse_expression()))

        self._expect(TokenKind.PUNCTUATION, ";", context="after variable declaration")

        return make_node(NodeKind.VARIABLE_DECLARATION, name_token.text, *children)

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> ASTNode:
        """Parse any statement."""
        if self._match(TokenKind.KEYWORD, "if"):
            return self._parse_if_statement()
        if self._match(TokenKind.KEYWORD, "while"):
            return self._parse_while_statement()
        if self._match(TokenKind.KEYWORD, "for"):
            return self._parse_for_statement()
        if self._match(TokenKind.KEYWORD, "return"):
            return self._parse_return_statement()
        if self._match(TokenKind.PUNCTUATION, "{"):
            return self._parse_block()

        return self._parse_expression_statement()

    def _parse_if_statement(self) -> ASTNode:
        self._expect(TokenKind.PUNCTUATION, "(", context="after 'if'")
        condition = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ")", context="after if condition")

        children = [condition, self._nested(self._parse_statement)]

        if self._match(TokenKind.KEYWORD, "else"):
            children.append(self._nested(self._parse_statement))

        return make_node(NodeKind.IF_STATEMENT, None, *children)

    def _parse_while_statement(self) -> ASTNode:
        self._expect(TokenKind.PUNCTUATION, "(", context="after 'while'")
        condition = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ")", context="after while condition")

        body = self._nested(self._parse_statement)

        return make_node(NodeKind.WHILE_STATEMENT, None, condition, body)

    def _parse_for_statement(self) -> ASTNode:
        """
        Parse ``for (init; condition; increment) body``.

        The three clause nodes are always present; an omitted clause is an
        empty node.
        """
        self._expect(TokenKind.PUNCTUATION, "(", context="after 'for'")

        # Initializer: declaration (consumes its ';'), expression, or empty
        init_children = []
        if not self._match(TokenKind.PUNCTUATION, ";"):
            token = self._peek()
            if token is not None and token.is_type_keyword():
                type_token = self._advance()
                name_token = self._expect(
                    TokenKind.IDENTIFIER, context=f"after type '{type_token.text}'"
                )
                init_children.append(self._parse_variable_declaration(type_token, name_token))
            else:
                init_children.append(self._parse_expression())
                self._expect(TokenKind.PUNCTUATION, ";", context="after for initializer")

        condition_children = []
        if not self._check(TokenKind.PUNCTUATION, ";"):
            condition_children.append(self._parse_expression())
        self._expect(TokenKind.PUNCTUATION, ";", context="after for condition")

        increment_children = []
        if not self._check(TokenKind.PUNCTUATION, ")"):
            increment_children.append(self._parse_expression())
        self._expect(TokenKind.PUNCTUATION, ")", context="after for clauses")

        body = self._nested(self._parse_statement)

        return make_node(
            NodeKind.FOR_STATEMENT,
            None,
            make_node(NodeKind.FOR_INIT, None, *init_children),
            make_node(NodeKind.FOR_CONDITION, None, *condition_children),
            make_node(NodeKind.FOR_INCREMENT, None, *increment_children),
            body,
        )

    def _parse_return_statement(self) -> ASTNode:
        children = []
        if not self._check(TokenKind.PUNCTUATION, ";"):
            children.append(self._parse_expression())

        self._expect(TokenKind.PUNCTUATION, ";", context="after return value")

        return make_node(NodeKind.RETURN_STATEMENT, None, *children)

    def _parse_block(self) -> ASTNode:
        """Parse the rest of a block after '{'."""
        children = []

        while not self._at_end() and not self._check(TokenKind.PUNCTUATION, "}"):
            children.append(self._parse_declaration())

        self._expect(TokenKind.PUNCTUATION, "}", context="to close block")

        return make_node(NodeKind.BLOCK, None, *children)

    def _parse_expression_statement(self) -> ASTNode:
        """An expression followed by ';'; the node is the expression itself."""
        expression = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ";", context="after expression")
        return expression

    # =========================================================================
    # Expression Parsing (Operator Precedence)
    # =========================================================================

    def _parse_expression(self) -> ASTNode:
        return self._nested(self._parse_assignment)

    def _parse_assignment(self) -> ASTNode:
        """Parse assignment expression (right-associative)."""
        target = self._parse_equality()

        equals = self._match(TokenKind.OPERATOR, "=")
        if equals is None:
            return target

        value = self._nested(self._parse_assignment)

        if target.kind != NodeKind.IDENTIFIER:
            raise InvalidAssignmentTargetError(
                equals.location,
                self._get_source_line(equals.line),
            )

        return make_node(NodeKind.ASSIGNMENT, target.value, value)

    def _parse_equality(self) -> ASTNode:
        return self._parse_binary(self._parse_comparison, ("==", "!="))

    def _parse_comparison(self) -> ASTNode:
        return self._parse_binary(self._parse_term, ("<", "<=", ">", ">="))

    def _parse_term(self) -> ASTNode:
        return self._parse_binary(self._parse_factor, ("+", "-"))

    def _parse_factor(self) -> ASTNode:
        return self._parse_binary(self._parse_unary, ("*", "/", "%"))

    def _parse_binary(
        self,
        operand_parser: Callable[[], ASTNode],
        operators: tuple[str, ...],
    ) -> ASTNode:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands (next precedence level)
            operators: Operator texts handled at this level
        """
        expr = operand_parser()

        while self._check(TokenKind.OPERATOR, *operators):
            op_token = self._advance()
            right = operand_parser()
            expr = make_node(NodeKind.BINARY, op_token.text, expr, right)

        return expr

    def _parse_unary(self) -> ASTNode:
        """Parse unary expression (! -), right-associative."""
        op_token = self._match(TokenKind.OPERATOR, "!", "-")
        if op_token is not None:
            operand = self._nested(self._parse_unary)
            return make_node(NodeKind.UNARY, op_token.text, operand)

        return self._parse_primary()

    def _parse_primary(self) -> ASTNode:
        """Parse a literal, a name, or a parenthesized expression."""
        token = self._match(TokenKind.NUMBER)
        if token is not None:
            return make_node(NodeKind.LITERAL, token.text)

        token = self._match(TokenKind.IDENTIFIER)
        if token is not None:
            return make_node(NodeKind.IDENTIFIER, token.text)

        if self._match(TokenKind.PUNCTUATION, "("):
            expression = self._parse_expression()
            self._expect(TokenKind.PUNCTUATION, ")", context="after expression")
            return make_node(NodeKind.GROUPING, None, expression)

        raise self._unexpected("expression")


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    tokens: list[Token],
    filename: str = "<input>",
    source_lines: Optional[list[str]] = None,
) -> ASTNode:
    """
    Parse tokens into an AST, failing if any syntax error was found.

    Raises:
        CompilationFailed: With every recorded syntax error and the partial
            PROGRAM node as ``partial``
    """
    parser = Parser(tokens, filename, source_lines)
    program = parser.parse()
    if parser.errors:
        raise CompilationFailed(parser.errors, partial=program)
    return program


def parse_source(source: str, filename: str = "<input>") -> ASTNode:
    """
    Parse Mini-C source code into an AST.

    This is a convenience function that combines lexing and parsing.

    Raises:
        LexicalError: If tokenizing fails
        CompilationFailed: If parsing records any syntax error
    """
    tokens = list(Lexer(source, filename).tokenize())
    return parse(tokens, filename, source.split("\n"))
