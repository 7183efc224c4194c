"""Lexer for the query language.

Raw scanning is delegated to sqlglot's tokenizer (quoting, operators,
numbers, keyword case-folding). Its tokens are then normalized into the
small token set the statement grammar needs:

    KEYWORD     SELECT FROM WHERE INSERT INTO VALUES DELETE (upper-cased)
    IDENTIFIER  any other word, case preserved (also "double quoted")
    OPERATOR    = != < > <= >=   (<> is normalized to !=)
    STRING      'single quoted' text, quotes removed
    NUMBER      integer or decimal, with a sign merged in when one precedes it
    COMMA LPAREN RPAREN STAR SEMICOLON END

Anything else is a ParseError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from sqlglot.errors import TokenError
from sqlglot.tokens import Token as SqlglotToken
from sqlglot.tokens import Tokenizer, TokenType

from query_engine.domain.exceptions import ParseError


class TokenKind(Enum):
    """Grammar token kinds."""

    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    STRING = "string"
    NUMBER = "number"
    COMMA = "comma"
    LPAREN = "lparen"
    RPAREN = "rparen"
    STAR = "star"
    SEMICOLON = "semicolon"
    END = "end"


@dataclass(frozen=True)
class Token:
    """A grammar token.

    Attributes:
        kind: The token kind.
        text: Normalized text (keywords upper-cased, quotes removed).
        position: Character offset of the token in the statement.
    """

    kind: TokenKind
    text: str
    position: int

    def is_keyword(self, keyword: str) -> bool:
        return self.kind is TokenKind.KEYWORD and self.text == keyword

    def __str__(self) -> str:
        if self.kind is TokenKind.END:
            return "end of statement"
        if self.kind is TokenKind.STRING:
            return f"'{self.text}'"
        return self.text


KEYWORDS: dict[TokenType, str] = {
    TokenType.SELECT: "SELECT",
    TokenType.FROM: "FROM",
    TokenType.WHERE: "WHERE",
    TokenType.INSERT: "INSERT",
    TokenType.INTO: "INTO",
    TokenType.VALUES: "VALUES",
    TokenType.DELETE: "DELETE",
}

OPERATORS: dict[TokenType, str] = {
    TokenType.EQ: "=",
    TokenType.NEQ: "!=",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LTE: "<=",
    TokenType.GTE: ">=",
}

PUNCTUATION: dict[TokenType, TokenKind] = {
    TokenType.COMMA: TokenKind.COMMA,
    TokenType.L_PAREN: TokenKind.LPAREN,
    TokenType.R_PAREN: TokenKind.RPAREN,
    TokenType.STAR: TokenKind.STAR,
    TokenType.SEMICOLON: TokenKind.SEMICOLON,
}

_SIGNS = {TokenType.DASH: "-", TokenType.PLUS: "+"}
_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*")


class QueryLexer:
    """Turns statement text into grammar tokens."""

    def __init__(self) -> None:
        self._tokenizer = Tokenizer()

    def tokenize(self, sql: str) -> list[Token]:
        """Tokenize ``sql``. The returned list always ends with an END token.

        Raises:
            ParseError: On unterminated quotes or unexpected characters.
        """
        try:
            raw_tokens = self._tokenizer.tokenize(sql)
        except TokenError as e:
            raise ParseError(f"Could not tokenize statement ({e})", sql.strip()) from e

        tokens: list[Token] = []
        index = 0
        while index < len(raw_tokens):
            raw = raw_tokens[index]
            following = raw_tokens[index + 1] if index + 1 < len(raw_tokens) else None

            if raw.token_type in _SIGNS and following is not None and following.token_type == TokenType.NUMBER:
                tokens.append(
                    Token(TokenKind.NUMBER, _SIGNS[raw.token_type] + following.text, raw.start)
                )
                index += 2
                continue

            tokens.append(self._convert(raw, sql))
            index += 1

        tokens.append(Token(TokenKind.END, "", len(sql)))
        return tokens

    def _convert(self, raw: SqlglotToken, sql: str) -> Token:
        token_type = raw.token_type
        if token_type in KEYWORDS:
            return Token(TokenKind.KEYWORD, KEYWORDS[token_type], raw.start)
        if token_type in OPERATORS:
            return Token(TokenKind.OPERATOR, OPERATORS[token_type], raw.start)
        if token_type in PUNCTUATION:
            return Token(PUNCTUATION[token_type], raw.text, raw.start)
        if token_type == TokenType.STRING:
            return Token(TokenKind.STRING, raw.text, raw.start)
        if token_type == TokenType.NUMBER:
            return Token(TokenKind.NUMBER, raw.text, raw.start)
        if token_type == TokenType.IDENTIFIER or _WORD_RE.fullmatch(raw.text):
            # sqlglot reserves many words (TEXT, DATE, NAME...) that are
            # ordinary attribute or table names here.
            return Token(TokenKind.IDENTIFIER, raw.text, raw.start)
        raise ParseError("Unexpected token", sql[raw.start:].strip() or raw.text)


def tokenize(sql: str) -> list[Token]:
    """Tokenize a statement with a fresh ``QueryLexer``."""
    return QueryLexer().tokenize(sql)
