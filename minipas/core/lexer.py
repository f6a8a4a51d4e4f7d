"""Lexical analysis: turns source text into a stream of Tokens, one token per call to next_token.

```
<integer>    ::= <digit>+
<float>      ::= <digit>+ "." <digit>*                 ; decimal only, no exponent
<identifier> ::= <alpha> (<alnum> | "_")*             ; reserved words are matched case-insensitively
<comment>    ::= "{" <char>* "}"                      ; unterminated comments run to end of input
<symbol>     ::= "+" | "-" | "*" | "/" | "%" | "=" | "(" | ")" | ";" | "." | ":" | ","
```

Whitespace and comments are skipped. Once input is exhausted, every call returns an EOF token.
"""

from minipas.core.tokens import Token, TokenType
from minipas.core.value import Value
from minipas.lang.error import UnexpectedChar


class Lexer:
    """Pull-based tokenizer. Tracks line/col of the current character for diagnostics."""
    RESERVED_KEYWORDS = {
        "PROGRAM": TokenType.PROGRAM,
        "VAR": TokenType.VAR,
        "BEGIN": TokenType.BEGIN,
        "END": TokenType.END,
        "PROCEDURE": TokenType.PROCEDURE,
        "INTEGER": TokenType.INTEGER_TYPE,
        "REAL": TokenType.FLOAT_TYPE,
        "DIV": TokenType.INTEGER_DIVISION,
    }
    RESERVED_SYMBOLS = {
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.MULTIPLY,
        "/": TokenType.DIVISION,
        "%": TokenType.MODULUS,
        "=": TokenType.ASSIGNMENT,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        ";": TokenType.SEMI,
        ".": TokenType.DOT,
        ":": TokenType.COLON,
        ",": TokenType.COMMA,
    }

    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line = 1
        self.col = 1

    @property
    def current_char(self):
        """Next unconsumed character, or None at end of input. The parser peeks at it to tell calls from assignments.
        """
        return self.text[self.pos] if self.pos < len(self.text) else None

    def advance(self):
        """Consumes current_char, keeping line/col in step."""
        if self.current_char == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        self.pos += 1

    def skip_whitespace(self):
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_comment(self):
        """Skips from '{' through the first '}'."""
        while self.current_char is not None and self.current_char != "}":
            self.advance()
        if self.current_char is not None:
            self.advance()

    def number(self):
        """Returns an INTEGER_CONST or FLOAT_CONST token consumed from input."""
        line, col = self.line, self.col

        result = ""
        while self.current_char is not None and self.current_char.isdecimal():
            result += self.current_char
            self.advance()

        if self.current_char == ".":
            result += self.current_char
            self.advance()

            while self.current_char is not None and self.current_char.isdecimal():
                result += self.current_char
                self.advance()
            return Token(TokenType.FLOAT_CONST, Value.from_float(result), line, col)

        return Token(TokenType.INTEGER_CONST, Value.from_int(result), line, col)

    def identifier(self):
        """Returns a reserved-word or IDENTIFIER token. Identifiers keep their original case."""
        line, col = self.line, self.col

        result = ""
        while self.current_char is not None and (self.current_char.isalnum() or self.current_char == "_"):
            result += self.current_char
            self.advance()

        kind = Lexer.RESERVED_KEYWORDS.get(result.upper(), TokenType.IDENTIFIER)
        return Token(kind, Value.from_str(result), line, col)

    def next_token(self):
        """Returns the next token in input, raising UnexpectedChar on a character no token starts with."""
        while self.current_char is not None:
            char = self.current_char

            if char.isspace():
                self.skip_whitespace()
                continue

            if char == "{":
                self.skip_comment()
                continue

            if char.isdecimal():
                return self.number()

            if char in Lexer.RESERVED_SYMBOLS:
                token = Token(Lexer.RESERVED_SYMBOLS[char], Value.from_str(char), self.line, self.col)
                self.advance()
                return token

            if char.isalpha():
                return self.identifier()

            raise UnexpectedChar(char, self.line, self.col)

        return Token(TokenType.EOF, Value.from_str(""), self.line, self.col)

    def __iter__(self):
        """Yields tokens up to and including the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenType.EOF:
                return
