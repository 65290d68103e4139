"""
The primitive binary operators, and what they mean in both worlds:
the static side (what operand and result types the typechecker expects)
and the dynamic side (the Python function that does the work).

Equality is special: it works on any pair of consistent types,
so it gets no entry in the integer table.
"""
import operator
from .lattice import StratagemType, BOOL, INT
from .values import VALUE, same_value, wrap_int

class ZeroDivisor(ArithmeticError):
	""" The evaluator turns this into a proper Stratagem error with a location. """

def _divide(a:int, b:int) -> int:
	# Truncate toward zero, as machine division does; Python's // floors instead.
	if b == 0: raise ZeroDivisor()
	q = abs(a) // abs(b)
	return q if (a < 0) == (b < 0) else -q

def _remainder(a:int, b:int) -> int:
	# The sign follows the dividend, so that a == b*(a/b) + a%b.
	if b == 0: raise ZeroDivisor()
	return a - b * _divide(a, b)

def _arithmetic(fn):
	return lambda a, b: wrap_int(fn(a, b))

EQUALITY = {
	"==" : same_value,
	"!=" : lambda a, b: not same_value(a, b),
}

ARITHMETIC = {
	"+" : _arithmetic(operator.add),
	"-" : _arithmetic(operator.sub),
	"*" : _arithmetic(operator.mul),
	"/" : _arithmetic(_divide),
	"%" : _arithmetic(_remainder),
}

RELATIONAL = {
	"<"  : operator.lt,
	"<=" : operator.le,
	">"  : operator.gt,
	">=" : operator.ge,
}

RESULT_TYPE : dict[str, StratagemType] = {}
RESULT_TYPE.update((glyph, BOOL) for glyph in EQUALITY)
RESULT_TYPE.update((glyph, INT) for glyph in ARITHMETIC)
RESULT_TYPE.update((glyph, BOOL) for glyph in RELATIONAL)

INTEGER_OPS = {**ARITHMETIC, **RELATIONAL}

def is_equality(glyph:str) -> bool: return glyph in EQUALITY

def apply_integer_op(glyph:str, a:int, b:int) -> VALUE:
	return INTEGER_OPS[glyph](a, b)

GLYPHS = frozenset(RESULT_TYPE)
