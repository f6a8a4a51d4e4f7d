"""Recursive-descent parser with one token of lookahead, producing a complete AST before any other work begins.

Grammar (precedence low -> high):

```
program              ::= PROGRAM <identifier> ";" block "."
block                ::= declarations compound_statement
declarations         ::= (VAR (variable_declaration ";")+)? procedure_declaration*
variable_declaration ::= <identifier> ("," <identifier>)* ":" type_spec
procedure_declaration::= PROCEDURE <identifier> ("(" formal_parameter_list? ")")? ";" block ";"
formal_parameter_list::= formal_parameters (";" formal_parameters)*
formal_parameters    ::= <identifier> ("," <identifier>)* ":" type_spec
type_spec            ::= INTEGER | REAL | <identifier>
compound_statement   ::= BEGIN statement (";" statement)* END
statement            ::= compound_statement | procedure_call | assignment | empty
procedure_call       ::= <identifier> "(" (expr ("," expr)*)? ")"   ; "(" must follow the name immediately
assignment           ::= variable ":" "=" expr
expr                 ::= term (("+" | "-") term)*
term                 ::= factor (("*" | "/" | DIV | "%") factor)*
factor               ::= <integer> | <float> | "(" expr ")" | ("+" | "-") factor | variable
variable             ::= <identifier>
```

The first syntax error aborts parsing: there is no recovery.
"""

from minipas.core.lexer import Lexer
from minipas.core.nodes import (
    Assign, BinaryOp, Block, Compound, NoOp, Num, Param, ProcedureCall, ProcedureDecl, Program, Type, UnaryOp, Var,
    VarDecl,
)
from minipas.core.tokens import TokenType
from minipas.lang.error import UnexpectedToken, UnknownType


class Parser:
    """Builds a Program node from source text. Tokens are pulled from the lexer on demand."""
    EXPR_OPS = (TokenType.PLUS, TokenType.MINUS)
    TERM_OPS = (TokenType.MULTIPLY, TokenType.DIVISION, TokenType.INTEGER_DIVISION, TokenType.MODULUS)
    TYPE_KINDS = (TokenType.INTEGER_TYPE, TokenType.FLOAT_TYPE, TokenType.IDENTIFIER)

    def __init__(self, text):
        self.lexer = Lexer(text)
        self.current_token = self.lexer.next_token()

    def eat(self, kind):
        """Consumes current_token if it is of kind, else raises UnexpectedToken. Returns the consumed token."""
        token = self.current_token
        if token.kind != kind:
            raise UnexpectedToken(token, kind)
        self.current_token = self.lexer.next_token()
        return token

    def parse(self):
        """Parses the whole input as a program. Trailing input after the final '.' is ignored."""
        return self.program()

    def program(self):
        token = self.eat(TokenType.PROGRAM)
        name = self.eat(TokenType.IDENTIFIER).value.to_str()
        self.eat(TokenType.SEMI)

        block = self.block()
        self.eat(TokenType.DOT)
        return Program(name, block, token)

    def block(self):
        declarations = self.declarations()
        return Block(declarations, self.compound_statement())

    def declarations(self):
        declarations = []

        if self.current_token.kind == TokenType.VAR:
            self.eat(TokenType.VAR)
            while self.current_token.kind == TokenType.IDENTIFIER:
                declarations.extend(self.variable_declaration())
                self.eat(TokenType.SEMI)

        while self.current_token.kind == TokenType.PROCEDURE:
            declarations.append(self.procedure_declaration())

        return declarations

    def _identifier_list(self):
        """<identifier> ("," <identifier>)*, as Var nodes."""
        variables = [Var(self.eat(TokenType.IDENTIFIER))]
        while self.current_token.kind == TokenType.COMMA:
            self.eat(TokenType.COMMA)
            variables.append(Var(self.eat(TokenType.IDENTIFIER)))
        return variables

    def variable_declaration(self):
        variables = self._identifier_list()
        self.eat(TokenType.COLON)

        type_node = self.type_spec()
        return [VarDecl(var, type_node) for var in variables]

    def type_spec(self):
        """Builtin type keywords and plain identifiers are both accepted here; the analyzer decides whether an
        identifier names a type.
        """
        token = self.current_token
        if token.kind not in Parser.TYPE_KINDS:
            raise UnknownType(token.text, token.line, token.col, stage="parse")
        self.eat(token.kind)
        return Type(token)

    def formal_parameters(self):
        variables = self._identifier_list()
        self.eat(TokenType.COLON)

        type_node = self.type_spec()
        return [Param(var, type_node) for var in variables]

    def formal_parameter_list(self):
        if self.current_token.kind != TokenType.IDENTIFIER:
            return []

        params = self.formal_parameters()
        while self.current_token.kind == TokenType.SEMI:
            self.eat(TokenType.SEMI)
            params.extend(self.formal_parameters())
        return params

    def procedure_declaration(self):
        token = self.eat(TokenType.PROCEDURE)
        name = self.eat(TokenType.IDENTIFIER).value.to_str()

        params = []
        if self.current_token.kind == TokenType.LPAREN:
            self.eat(TokenType.LPAREN)
            params = self.formal_parameter_list()
            self.eat(TokenType.RPAREN)
        self.eat(TokenType.SEMI)

        block = self.block()
        self.eat(TokenType.SEMI)
        return ProcedureDecl(name, params, block, token)

    def compound_statement(self):
        token = self.eat(TokenType.BEGIN)
        children = self.statement_list()
        self.eat(TokenType.END)
        return Compound(children, token)

    def statement_list(self):
        statements = [self.statement()]
        while self.current_token.kind == TokenType.SEMI:
            self.eat(TokenType.SEMI)
            statements.append(self.statement())
        return statements

    def statement(self):
        kind = self.current_token.kind
        if kind == TokenType.BEGIN:
            return self.compound_statement()
        if kind == TokenType.IDENTIFIER:
            # the lexer has consumed exactly the identifier, so its current char is the raw character after it
            if self.lexer.current_char == "(":
                return self.procedure_call()
            return self.assignment()
        return self.empty()

    def procedure_call(self):
        token = self.eat(TokenType.IDENTIFIER)
        self.eat(TokenType.LPAREN)

        actual_params = []
        if self.current_token.kind != TokenType.RPAREN:
            actual_params.append(self.expr())
            while self.current_token.kind == TokenType.COMMA:
                self.eat(TokenType.COMMA)
                actual_params.append(self.expr())
        self.eat(TokenType.RPAREN)

        return ProcedureCall(token.value.to_str(), actual_params, token)

    def assignment(self):
        left = self.variable()
        token = self.eat(TokenType.COLON)
        self.eat(TokenType.ASSIGNMENT)
        return Assign(left, self.expr(), token)

    def variable(self):
        return Var(self.eat(TokenType.IDENTIFIER))

    @staticmethod
    def empty():
        return NoOp()

    def expr(self):
        node = self.term()
        while self.current_token.kind in Parser.EXPR_OPS:
            op = self.eat(self.current_token.kind)
            node = BinaryOp(node, op, self.term())
        return node

    def term(self):
        node = self.factor()
        while self.current_token.kind in Parser.TERM_OPS:
            op = self.eat(self.current_token.kind)
            node = BinaryOp(node, op, self.factor())
        return node

    def factor(self):
        token = self.current_token

        if token.kind in (TokenType.INTEGER_CONST, TokenType.FLOAT_CONST):
            return Num(self.eat(token.kind))

        if token.kind == TokenType.LPAREN:
            self.eat(TokenType.LPAREN)
            node = self.expr()
            self.eat(TokenType.RPAREN)
            return node

        if token.kind in (TokenType.PLUS, TokenType.MINUS):
            op = self.eat(token.kind)
            return UnaryOp(op, self.factor())

        if token.kind == TokenType.IDENTIFIER:
            return self.variable()

        raise UnexpectedToken(token, TokenType.EOF)
