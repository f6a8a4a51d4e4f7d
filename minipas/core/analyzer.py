"""Semantic analysis: one pass over the completed AST that checks declarations and name resolution and binds every
procedure call site to the procedure it names. Any failure aborts the pass; nothing downstream runs.

Checks, applied in AST order:
1. Variable declarations: the type must resolve through the scope chain (UnknownType), and the name must not
   already be declared in the current scope (VariableRedefinition). Shadowing an outer declaration is allowed.
2. Variable references: the name must resolve through the scope chain (UndefinedVariable).
3. Procedure declarations: the procedure is defined in the enclosing scope before its body is analyzed, so recursive
   and later sibling calls resolve.
4. Procedure calls: arguments are analyzed in the caller's scope, then the call site is bound to the resolved
   ProcedureSymbol. An unresolved call is left unbound and reported at run time.
"""

from minipas.core.nodes import NodeVisitor
from minipas.core.symbols import BuiltinTypeSymbol, ProcedureSymbol, ScopedSymbolTable, VarSymbol
from minipas.lang.error import IllformedVarExpr, UndefinedVariable, UnknownType, VariableRedefinition


class SemanticAnalyzer(NodeVisitor):
    """Walks a Program once. The scope chain is local to a single analyze call."""
    GLOBAL_SCOPE = "global"

    def __init__(self):
        self.current_scope = None

    def analyze(self, program):
        """Analyzes program in place. Returns nothing; raises the first PascalError found."""
        self.current_scope = None
        self.visit(program)

    @property
    def level(self):
        return self.current_scope.level if self.current_scope is not None else 0

    def enter_scope(self, name):
        self.current_scope = ScopedSymbolTable(name, self.level + 1, self.current_scope)
        return self.current_scope

    def leave_scope(self):
        self.current_scope = self.current_scope.enclosing_scope

    def _resolve_type(self, type_node):
        name = type_node.name
        if not name:
            raise IllformedVarExpr(type_node.token.text, type_node.line, type_node.col)

        type_symbol = self.current_scope.lookup(name)
        if type_symbol is None:
            raise UnknownType(name, type_node.line, type_node.col)
        if not isinstance(type_symbol, BuiltinTypeSymbol):
            raise IllformedVarExpr(name, type_node.line, type_node.col)
        return type_symbol

    def visit_Program(self, node):
        self.enter_scope(SemanticAnalyzer.GLOBAL_SCOPE)
        try:
            self.visit(node.block)
        finally:
            self.leave_scope()

    def visit_Block(self, node):
        for declaration in node.declarations:
            self.visit(declaration)
        self.visit(node.compound)

    def visit_VarDecl(self, node):
        type_symbol = self._resolve_type(node.type_node)

        name = node.var.name
        if not name:
            raise IllformedVarExpr(node.var.token.text, node.line, node.col)
        if name in self.current_scope:
            raise VariableRedefinition(name.lower(), node.line, node.col)

        self.current_scope.define(VarSymbol(name, type_symbol, self.level))

    def visit_Type(self, node):
        self._resolve_type(node)

    def visit_ProcedureDecl(self, node):
        params = [(param.var.name, self._resolve_type(param.type_node)) for param in node.params]
        self.current_scope.define(ProcedureSymbol(node.name, params, self.level, node.block))

        self.enter_scope(node.name.lower())
        try:
            for param in node.params:
                self.visit(param)
            self.visit(node.block)
        finally:
            self.leave_scope()

    def visit_Param(self, node):
        name = node.var.name
        if name in self.current_scope:
            raise VariableRedefinition(name.lower(), node.line, node.col)
        self.current_scope.define(VarSymbol(name, self._resolve_type(node.type_node), self.level))

    def visit_Compound(self, node):
        for child in node.children:
            self.visit(child)

    def visit_NoOp(self, node):
        pass

    def visit_Assign(self, node):
        self.visit(node.right)
        self.visit(node.left)

    def visit_ProcedureCall(self, node):
        for param in node.actual_params:
            self.visit(param)

        symbol = self.current_scope.lookup(node.name)
        if isinstance(symbol, ProcedureSymbol):
            node.proc_symbol = symbol

    def visit_Var(self, node):
        name = node.name
        if not name:
            raise IllformedVarExpr(node.token.text, node.line, node.col)
        if self.current_scope.lookup(name) is None:
            raise UndefinedVariable(name, node.line, node.col)

    def visit_BinaryOp(self, node):
        self.visit(node.left)
        self.visit(node.right)

    def visit_UnaryOp(self, node):
        self.visit(node.expr)

    def visit_Num(self, node):
        pass
