"""Inbound adapters for the query engine.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    Lexer:
        - QueryLexer / tokenize: Statement text to tokens
        - Token, TokenKind: Token types
    SQL Parser:
        - SQLParser: Parser that converts statement text to statements
        - SelectStatement, InsertStatement, DeleteStatement: Parsed statements
        - StatementType: Statement variant names

The REPL (``repl``) and REST API (``rest_api``) modules sit on top of the
application layer and are imported directly.
"""

from query_engine.adapters.inbound.lexer import QueryLexer, Token, TokenKind, tokenize
from query_engine.adapters.inbound.sql_parser import (
    DeleteStatement,
    InsertStatement,
    SelectStatement,
    SQLParser,
    Statement,
    StatementType,
)

__all__ = [
    # Lexer
    "QueryLexer",
    "Token",
    "TokenKind",
    "tokenize",
    # SQL Parser
    "SQLParser",
    "Statement",
    "StatementType",
    "SelectStatement",
    "InsertStatement",
    "DeleteStatement",
]
