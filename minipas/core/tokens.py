"""Token kinds and the Token type produced by the lexer."""

from dataclasses import dataclass

from minipas.core.value import Value


class TokenType:
    """Token kinds. Plain string constants so they read well in error messages."""
    INTEGER_CONST = "INTEGER_CONST"
    FLOAT_CONST = "FLOAT_CONST"
    PLUS = "PLUS"
    MINUS = "MINUS"
    MULTIPLY = "MULTIPLY"
    DIVISION = "DIVISION"
    MODULUS = "MODULUS"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    IDENTIFIER = "IDENTIFIER"
    ASSIGNMENT = "ASSIGNMENT"
    SEMI = "SEMI"
    BEGIN = "BEGIN"
    END = "END"
    PROGRAM = "PROGRAM"
    DOT = "DOT"
    VAR = "VAR"
    INTEGER_DIVISION = "INTEGER_DIVISION"
    COLON = "COLON"
    COMMA = "COMMA"
    INTEGER_TYPE = "INTEGER_TYPE"
    FLOAT_TYPE = "FLOAT_TYPE"
    PROCEDURE = "PROCEDURE"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexed token. value is a Value consistent with kind: numeric constants carry INTEGER/FLOAT values, everything
    else carries its source text (the empty text for EOF). line and col locate the token's first character.
    """
    kind: str
    value: Value
    line: int = 0
    col: int = 0

    @property
    def text(self):
        """Source-like rendering of the token, used in error messages."""
        return str(self.value) if self.kind != TokenType.EOF else "<end of input>"

    def __repr__(self):
        return f"Token({self.kind}, {self.value!r}, {self.line}:{self.col})"
