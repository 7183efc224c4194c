"""Statement parser.

Turns statement text into one of three structured statements using the
lexer in ``lexer.py`` and a small recursive-descent parser.

Grammar (keywords case-insensitive, one statement, optional trailing ``;``):

    statement  := select | insert | delete
    select     := SELECT ( "*" | names ) FROM name [ WHERE condition ]
    insert     := INSERT INTO name "(" names ")" VALUES "(" literals ")"
    delete     := DELETE FROM name [ WHERE condition ]
    names      := name ( "," name )*
    literals   := literal ( "," literal )*
    literal    := STRING | NUMBER
    condition  := name OPERATOR ( literal | name )

A bare word on the right of a condition is an unquoted text literal.
There is no AND/OR and no nesting.

Literals are kept as written, quotes included. Coercion against the schema
removes one layer of quotes, so ``'Alice'`` is the text ``Alice`` and
``'20'`` is the integer 20 when compared with an Integer attribute.

Example:
    >>> parser = SQLParser()
    >>> stmt = parser.parse("SELECT name, age FROM Students WHERE age >= 18")
    >>> stmt.attributes, stmt.table_name, str(stmt.condition)
    (('name', 'age'), 'Students', 'age >= 18')
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from query_engine.adapters.inbound.lexer import QueryLexer, Token, TokenKind
from query_engine.domain.exceptions import MalformedCondition, ParseError
from query_engine.domain.value_objects import ComparisonOp, Condition


class StatementType(Enum):
    """Types of statements."""

    SELECT = "select"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class SelectStatement:
    """``SELECT attributes FROM table [WHERE condition]``.

    ``select_all`` is set for ``SELECT *``; ``attributes`` is then empty and
    the executor expands it to the full schema.
    """

    attributes: tuple[str, ...]
    table_name: str
    condition: Condition | None = None
    select_all: bool = False

    statement_type = StatementType.SELECT

    def __str__(self) -> str:
        columns = "*" if self.select_all else ", ".join(self.attributes)
        where = f" WHERE {self.condition}" if self.condition else ""
        return f"SELECT {columns} FROM {self.table_name}{where}"


@dataclass(frozen=True)
class InsertStatement:
    """``INSERT INTO table (attributes) VALUES (literals)``."""

    table_name: str
    attributes: tuple[str, ...]
    literals: tuple[str, ...]

    statement_type = StatementType.INSERT

    def __str__(self) -> str:
        return (
            f"INSERT INTO {self.table_name} ({', '.join(self.attributes)}) "
            f"VALUES ({', '.join(self.literals)})"
        )


@dataclass(frozen=True)
class DeleteStatement:
    """``DELETE FROM table [WHERE condition]``."""

    table_name: str
    condition: Condition | None = None

    statement_type = StatementType.DELETE

    def __str__(self) -> str:
        where = f" WHERE {self.condition}" if self.condition else ""
        return f"DELETE FROM {self.table_name}{where}"


Statement = Union[SelectStatement, InsertStatement, DeleteStatement]


class _TokenStream:
    """Cursor over a token list."""

    def __init__(self, tokens: list[Token], sql: str) -> None:
        self._tokens = tokens
        self._sql = sql
        self._index = 0

    def peek(self) -> Token:
        return self._tokens[self._index]

    def advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind is not TokenKind.END:
            self._index += 1
        return token

    def accept(self, kind: TokenKind) -> Token | None:
        if self.peek().kind is kind:
            return self.advance()
        return None

    def accept_keyword(self, keyword: str) -> bool:
        if self.peek().is_keyword(keyword):
            self.advance()
            return True
        return False

    def expect(self, kind: TokenKind, what: str) -> Token:
        token = self.peek()
        if token.kind is not kind:
            raise ParseError(f"Expected {what}, found {token}", self.rest(token))
        return self.advance()

    def expect_keyword(self, keyword: str) -> None:
        token = self.peek()
        if not token.is_keyword(keyword):
            raise ParseError(f"Expected {keyword}, found {token}", self.rest(token))
        self.advance()

    def rest(self, token: Token | None = None) -> str:
        """Statement text from ``token`` (default: the current token) on."""
        start = (token or self.peek()).position
        return self._sql[start:].strip()

    def slice(self, start: Token, end: Token) -> str:
        """Statement text from ``start`` up to (not including) ``end``."""
        return self._sql[start.position:end.position].strip()


class SQLParser:
    """Parser for SELECT / INSERT / DELETE statements.

    The parser is stateless between calls; one instance can be shared.
    """

    def __init__(self, lexer: QueryLexer | None = None) -> None:
        self._lexer = lexer or QueryLexer()

    def parse(self, sql: str) -> Statement:
        """Parse one statement.

        Args:
            sql: The statement text.

        Returns:
            A SelectStatement, InsertStatement or DeleteStatement.

        Raises:
            ParseError: If the text is not a valid statement. The error's
                ``clause`` holds the offending part of the text.
            MalformedCondition: If the WHERE clause is not a single
                ``attribute operator literal`` predicate.
        """
        if not sql or not sql.strip():
            raise ParseError("Empty statement")

        stream = _TokenStream(self._lexer.tokenize(sql), sql)
        first = stream.peek()

        if first.is_keyword("SELECT"):
            statement: Statement = self._parse_select(stream)
        elif first.is_keyword("INSERT"):
            statement = self._parse_insert(stream)
        elif first.is_keyword("DELETE"):
            statement = self._parse_delete(stream)
        else:
            raise ParseError("Unsupported statement, expected SELECT, INSERT or DELETE", sql.strip())

        stream.accept(TokenKind.SEMICOLON)
        if stream.peek().kind is not TokenKind.END:
            raise ParseError("Unexpected text after statement", stream.rest())
        return statement

    def _parse_select(self, stream: _TokenStream) -> SelectStatement:
        stream.expect_keyword("SELECT")
        if stream.accept(TokenKind.STAR):
            attributes: tuple[str, ...] = ()
            select_all = True
        else:
            attributes = self._parse_names(stream, "attribute name")
            select_all = False
        stream.expect_keyword("FROM")
        table_name = stream.expect(TokenKind.IDENTIFIER, "table name").text
        condition = self._parse_where(stream)
        return SelectStatement(
            attributes=attributes,
            table_name=table_name,
            condition=condition,
            select_all=select_all,
        )

    def _parse_insert(self, stream: _TokenStream) -> InsertStatement:
        stream.expect_keyword("INSERT")
        stream.expect_keyword("INTO")
        table_name = stream.expect(TokenKind.IDENTIFIER, "table name").text

        stream.expect(TokenKind.LPAREN, "'(' before attribute list")
        attributes = self._parse_names(stream, "attribute name")
        stream.expect(TokenKind.RPAREN, "')' after attribute list")

        stream.expect_keyword("VALUES")
        stream.expect(TokenKind.LPAREN, "'(' before value list")
        literals = [self._parse_literal(stream)]
        while stream.accept(TokenKind.COMMA):
            literals.append(self._parse_literal(stream))
        stream.expect(TokenKind.RPAREN, "')' after value list")

        return InsertStatement(
            table_name=table_name,
            attributes=attributes,
            literals=tuple(literals),
        )

    def _parse_delete(self, stream: _TokenStream) -> DeleteStatement:
        stream.expect_keyword("DELETE")
        stream.expect_keyword("FROM")
        table_name = stream.expect(TokenKind.IDENTIFIER, "table name").text
        condition = self._parse_where(stream)
        return DeleteStatement(table_name=table_name, condition=condition)

    def _parse_names(self, stream: _TokenStream, what: str) -> tuple[str, ...]:
        names = [stream.expect(TokenKind.IDENTIFIER, what).text]
        while stream.accept(TokenKind.COMMA):
            names.append(stream.expect(TokenKind.IDENTIFIER, what).text)
        return tuple(names)

    def _parse_literal(self, stream: _TokenStream) -> str:
        token = stream.peek()
        if token.kind is TokenKind.STRING:
            stream.advance()
            return f"'{token.text}'"
        if token.kind is TokenKind.NUMBER:
            stream.advance()
            return token.text
        raise ParseError(f"Expected a quoted text or numeric literal, found {token}", stream.rest(token))

    def _parse_where(self, stream: _TokenStream) -> Condition | None:
        if not stream.accept_keyword("WHERE"):
            return None
        return self._parse_condition(stream)

    def _parse_condition(self, stream: _TokenStream) -> Condition:
        start = stream.peek()
        clause_tokens: list[Token] = []
        while stream.peek().kind not in (TokenKind.END, TokenKind.SEMICOLON):
            clause_tokens.append(stream.advance())
        clause = stream.slice(start, stream.peek())

        if not clause_tokens:
            raise MalformedCondition("Empty WHERE clause", clause)

        operators = [i for i, token in enumerate(clause_tokens) if token.kind is TokenKind.OPERATOR]
        if not operators:
            raise MalformedCondition("No comparison operator in WHERE clause", clause)
        if len(operators) > 1:
            raise MalformedCondition("More than one comparison operator in WHERE clause", clause)

        split = operators[0]
        left, right = clause_tokens[:split], clause_tokens[split + 1:]
        if len(left) != 1 or left[0].kind is not TokenKind.IDENTIFIER:
            raise MalformedCondition("Left side of a condition must be one attribute name", clause)
        if len(right) != 1:
            raise MalformedCondition("Right side of a condition must be one literal", clause)

        operand = right[0]
        if operand.kind is TokenKind.STRING:
            literal = f"'{operand.text}'"
        elif operand.kind in (TokenKind.NUMBER, TokenKind.IDENTIFIER):
            literal = operand.text
        else:
            raise MalformedCondition(f"Expected a literal, found {operand}", clause)

        return Condition(
            attribute=left[0].text,
            op=ComparisonOp.from_symbol(clause_tokens[split].text),
            literal=literal,
        )
