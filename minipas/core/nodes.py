"""Abstract syntax tree for minipas programs, built once by the parser and walked by the analyzer and the evaluator.

The node kinds form a closed set:

```
Program        name, block
Block          declarations, compound            ; declaration block + statement part
VarDecl        var, type_node
Type           token                             ; INTEGER, REAL or an identifier naming a type
ProcedureDecl  name, params, block
Param          var, type_node
Compound       children
Assign         left, right
ProcedureCall  name, actual_params, proc_symbol  ; proc_symbol is written once by the analyzer
NoOp
BinaryOp       left, op, right
UnaryOp        op, expr
Num            token
Var            token
```

Passes never branch on node classes themselves: they subclass NodeVisitor and provide one visit_<NodeClass> method
per kind.
"""

from minipas.lang.error import PascalError


class Node:
    """Superclass for every AST node. _fields lists the child attributes used for equality and display."""
    _fields = ()

    def __init__(self, token=None):
        self.token = token  # source token, used for error positions
        self._cls = type(self).__name__

    @property
    def line(self):
        return self.token.line if self.token is not None else None

    @property
    def col(self):
        return self.token.col if self.token is not None else None

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(
            <field>=<Node>(...),
            <field>=[<Node>(...), ...],
            <field>='<value>'
        )
        """
        pad = "    " * indents
        if not self._fields:
            return f"{pad}{self._cls}()"

        result = f"{pad}{self._cls}("
        for field in self._fields:
            value = getattr(self, field)
            if isinstance(value, Node):
                result += f"\n{pad}    {field}=" + value.display(indents + 1).lstrip() + ","
            elif isinstance(value, list):
                result += f"\n{pad}    {field}=["
                for item in value:
                    result += "\n" + item.display(indents + 2) + ","
                result += f"\n{pad}    ],"
            else:
                result += f"\n{pad}    {field}='{value}',"
        return result[:-1] + f"\n{pad})"

    def __repr__(self):
        args = ", ".join(f"{field}={getattr(self, field)!r}" for field in self._fields)
        return f"{self._cls}({args})"

    def __eq__(self, other):
        return type(self) is type(other) and all(getattr(self, f) == getattr(other, f) for f in self._fields)

    __hash__ = object.__hash__


class Num(Node):
    """Integer or float literal."""
    _fields = ("value",)

    @property
    def value(self):
        return self.token.value


class Var(Node):
    """Reference to a variable by name, either read or the target of an assignment."""
    _fields = ("name",)

    @property
    def name(self):
        return self.token.value.to_str()


class BinaryOp(Node):
    _fields = ("left", "op", "right")

    def __init__(self, left, op, right):
        super().__init__(op)
        self.left = left
        self.right = right

    @property
    def op(self):
        return self.token.kind


class UnaryOp(Node):
    _fields = ("op", "expr")

    def __init__(self, op, expr):
        super().__init__(op)
        self.expr = expr

    @property
    def op(self):
        return self.token.kind


class Compound(Node):
    """BEGIN ... END: statements run strictly in sequence."""
    _fields = ("children",)

    def __init__(self, children, token=None):
        super().__init__(token)
        self.children = children


class Assign(Node):
    _fields = ("left", "right")

    def __init__(self, left, right, token=None):
        super().__init__(token)
        self.left = left
        self.right = right


class NoOp(Node):
    """Empty statement."""


class Program(Node):
    _fields = ("name", "block")

    def __init__(self, name, block, token=None):
        super().__init__(token)
        self.name = name
        self.block = block


class Block(Node):
    _fields = ("declarations", "compound")

    def __init__(self, declarations, compound):
        super().__init__(compound.token)
        self.declarations = declarations
        self.compound = compound


class Type(Node):
    _fields = ("name",)

    @property
    def name(self):
        return self.token.value.to_str()


class VarDecl(Node):
    _fields = ("var", "type_node")

    def __init__(self, var, type_node):
        super().__init__(var.token)
        self.var = var
        self.type_node = type_node


class Param(Node):
    """Formal parameter of a procedure."""
    _fields = ("var", "type_node")

    def __init__(self, var, type_node):
        super().__init__(var.token)
        self.var = var
        self.type_node = type_node


class ProcedureDecl(Node):
    _fields = ("name", "params", "block")

    def __init__(self, name, params, block, token=None):
        super().__init__(token)
        self.name = name
        self.params = params
        self.block = block


class ProcedureCall(Node):
    """Call site. proc_symbol is the ProcedureSymbol bound by semantic analysis; evaluation never looks it up again.
    """
    _fields = ("name", "actual_params")

    def __init__(self, name, actual_params, token=None):
        super().__init__(token)
        self.name = name
        self.actual_params = actual_params
        self._proc_symbol = None

    @property
    def proc_symbol(self):
        return self._proc_symbol

    @proc_symbol.setter
    def proc_symbol(self, symbol):
        if self._proc_symbol is not None:
            raise PascalError("call site '{}' is already bound", self.name, self.line, self.col, internal=True)
        self._proc_symbol = symbol


class NodeVisitor:
    """Dispatches each node to the visit_<NodeClass> method of a pass. A pass must cover every node kind it can meet;
    a missing method is an implementation error.
    """

    def visit(self, node):
        method = getattr(self, "visit_" + type(node).__name__, None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    def generic_visit(self, node):
        msg = "{} has no visit method for '{}'"
        raise PascalError(msg, (type(self).__name__, type(node).__name__), node.line, node.col, internal=True)
