"""Symbols and scoped symbol tables used by semantic analysis.

Scopes form a tree rooted at the program's global scope (nesting level 1). Each procedure opens a scope one level
deeper than the scope it is declared in. Lookups walk outward through enclosing scopes, never downward or sideways.
Names are case-insensitive.
"""


class Symbol:
    """A statically known declared entity."""

    def __init__(self, name, level):
        self.name = name
        self.level = level  # nesting level of the declaring scope, fixed at declaration
        self._cls = type(self).__name__

    def __repr__(self):
        return f"{self._cls}(name='{self.name}', level={self.level})"


class BuiltinTypeSymbol(Symbol):
    """Builtin type (integer or real). Pre-defined in every scope at that scope's own level."""


class VarSymbol(Symbol):
    def __init__(self, name, type_symbol, level):
        super().__init__(name, level)
        self.type = type_symbol

    def __repr__(self):
        return f"{self._cls}(name='{self.name}', type='{self.type.name}', level={self.level})"


class ProcedureSymbol(Symbol):
    """Procedure. params is the formal parameter list as (name, type symbol) pairs; block is the procedure's body.
    Call sites keep a reference to this symbol, so it carries everything the evaluator needs to run a call.
    """

    def __init__(self, name, params, level, block):
        super().__init__(name, level)
        self.params = params
        self.block = block

    def __repr__(self):
        params = ", ".join(f"{name}: {type_symbol.name}" for name, type_symbol in self.params)
        return f"{self._cls}(name='{self.name}', params=[{params}], level={self.level})"


class ScopedSymbolTable:
    """Symbols declared in one lexical block, chained to the enclosing block's table."""
    BUILTIN_TYPES = ("integer", "real")

    def __init__(self, name, level, enclosing_scope=None):
        self.name = name
        self.level = level
        self.enclosing_scope = enclosing_scope
        self.symbols = {}

        for type_name in ScopedSymbolTable.BUILTIN_TYPES:
            self.define(BuiltinTypeSymbol(type_name, level))

    def define(self, symbol):
        self.symbols[symbol.name.lower()] = symbol
        return symbol

    def lookup(self, name, current_scope_only=False):
        """Returns the symbol bound to name, searching enclosing scopes unless current_scope_only. None if unbound."""
        symbol = self.symbols.get(name.lower())
        if symbol is not None or current_scope_only:
            return symbol

        if self.enclosing_scope is not None:
            return self.enclosing_scope.lookup(name)
        return None

    def __contains__(self, name):
        return name.lower() in self.symbols
