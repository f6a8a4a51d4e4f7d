"""Runtime values shared by every stage of the pipeline: the lexer attaches them to tokens, the evaluator computes with
them and activation records store them.

A Value is a tagged variant over four kinds:

```
<value> ::= TEXT      ; identifier/punctuation text carried by tokens, concatenates with '+'
          | INTEGER   ; unbounded integer
          | FLOAT     ; 64-bit float
          | BOOLEAN
```

Arithmetic promotion rules:
- `+`, `-`, `*`: int op int -> int; any other numeric combination -> float; `+` also joins two texts
- `/`: numeric operands, always true division (float result)
- `DIV`, `%`: int op int only

Integers are Python ints: 64-bit wraparound and overflow are not modelled, so results past the 64-bit range stay
exact.
"""

import math
from dataclasses import dataclass
from typing import Union

from minipas.lang.error import DivisionByZero, UnsupportedOperandTypes


@dataclass(frozen=True)
class Value:
    """Tagged runtime value. Build with the from_* constructors rather than directly so kind and data stay consistent.
    """
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"

    kind: str
    data: Union[str, int, float, bool]

    @classmethod
    def from_str(cls, text):
        return cls(Value.TEXT, str(text))

    @classmethod
    def from_int(cls, num):
        return cls(Value.INTEGER, int(num))

    @classmethod
    def from_float(cls, num):
        return cls(Value.FLOAT, float(num))

    @classmethod
    def from_bool(cls, boolean):
        return cls(Value.BOOLEAN, bool(boolean))

    @property
    def is_numeric(self):
        return self.kind in (Value.INTEGER, Value.FLOAT)

    def to_str(self):
        """Returns text if this is a TEXT value, else None."""
        return self.data if self.kind == Value.TEXT else None

    def to_int(self):
        """Returns integer if this is an INTEGER value, else None."""
        return self.data if self.kind == Value.INTEGER else None

    def to_float(self):
        """Returns float for any numeric value (integers are widened), else None."""
        return float(self.data) if self.is_numeric else None

    def _arithmetic(self, other, op, func):
        """Applies func with the int/float promotion rule: int op int stays int, anything else numeric is float."""
        if not (self.is_numeric and other.is_numeric):
            raise UnsupportedOperandTypes(op, self, other)
        if self.kind == other.kind == Value.INTEGER:
            return Value.from_int(func(self.data, other.data))
        return Value.from_float(func(self.to_float(), other.to_float()))

    def __add__(self, other):
        if self.kind == other.kind == Value.TEXT:
            return Value.from_str(self.data + other.data)
        return self._arithmetic(other, "+", lambda x, y: x + y)

    def __sub__(self, other):
        return self._arithmetic(other, "-", lambda x, y: x - y)

    def __mul__(self, other):
        return self._arithmetic(other, "*", lambda x, y: x * y)

    def __truediv__(self, other):
        """True division. Only an integer zero divisor is rejected; a float zero divisor follows IEEE rules."""
        if not (self.is_numeric and other.is_numeric):
            raise UnsupportedOperandTypes("/", self, other)
        if other.to_int() == 0:
            raise DivisionByZero()

        try:
            return Value.from_float(self.to_float() / other.to_float())
        except ZeroDivisionError:
            return Value.from_float(_ieee_divide(self.to_float(), other.to_float()))

    def __floordiv__(self, other):
        """Integer division (DIV), truncating toward zero."""
        left, right = self._integers(other, "DIV")
        quotient = abs(left) // abs(right)
        return Value.from_int(quotient if (left < 0) == (right < 0) else -quotient)

    def __mod__(self, other):
        """Remainder matching __floordiv__: takes the sign of the dividend."""
        left, right = self._integers(other, "%")
        remainder = abs(left) % abs(right)
        return Value.from_int(remainder if left >= 0 else -remainder)

    def _integers(self, other, op):
        if self.kind != Value.INTEGER or other.kind != Value.INTEGER:
            raise UnsupportedOperandTypes(op, self, other)
        if other.data == 0:
            raise DivisionByZero()
        return self.data, other.data

    def __str__(self):
        if self.kind == Value.TEXT:
            return self.data
        if self.kind == Value.BOOLEAN:
            return "true" if self.data else "false"
        return str(self.data)

    def __repr__(self):
        return f"{self.kind}({self.data!r})"


def _ieee_divide(dividend, divisor):
    """Python refuses float division by zero; produce the IEEE 754 result instead."""
    if dividend == 0 or dividend != dividend:
        return float("nan")
    negative = (dividend < 0) != (math.copysign(1.0, divisor) < 0)
    return float("-inf") if negative else float("inf")
