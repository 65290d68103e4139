"""
This module defines the specialized value-types that the evaluator operates in terms of.
Basic primitive values play themselves (bool, int, and str), but special things
like closures, reference cells, and the unit value need more help.

Every value can report its run-time type. That is what a Cast compares
against its target when the program crosses from dynamic to static code.
"""
from typing import Optional, Union
from .environment import Environment
from .lattice import StratagemType, ClosureType, RefType, BOOL, INT, STRING, UNIT as UNIT_TYPE

INT_BITS = 64
INT_MIN = -(1 << (INT_BITS-1))
INT_MAX = (1 << (INT_BITS-1)) - 1

class StratagemValue:
	""" Root for classes that implement specialized run-time data structures """
	def runtime_type(self) -> StratagemType: raise NotImplementedError(type(self))
	def display(self) -> str: raise NotImplementedError(type(self))

class Unit(StratagemValue):
	def runtime_type(self): return UNIT_TYPE
	def display(self): return "()"
	def __repr__(self): return "UNIT"

UNIT = Unit()

VALUE = Union[bool, int, str, StratagemValue]
ValueEnvironment = Environment[VALUE]

class Closure(StratagemValue):
	"""
	The run-time manifestation of a function: a callable value tied to its natal environment.
	The environment is shared, not copied, by every call of the closure.
	The return type was fixed once and for all by the typechecker.
	"""
	def __init__(self, param_name:str, param_type:StratagemType, return_type:StratagemType, body, captured_env:ValueEnvironment):
		self.param_name = param_name
		self.param_type = param_type
		self.return_type = return_type
		self.body = body
		self.captured_env = captured_env

	def runtime_type(self): return ClosureType(self.param_type, self.return_type)
	def display(self): return "fn(%s: %s): %s {...}"%(self.param_name, self.param_type, self.return_type)
	def __repr__(self): return "<Closure %s>"%self.display()

class Cell:
	"""
	A mutable box. Its type is fixed when it is allocated;
	only the contents ever change.
	"""
	def __init__(self, cell_type:StratagemType, contents:VALUE):
		self.cell_type = cell_type
		self.contents = contents

class Reference(StratagemValue):
	""" Names one cell, forever. Copies of the reference alias the same cell. """
	__slots__ = ("_cell",)
	def __init__(self, cell:Cell):
		self._cell = cell
	@property
	def cell(self) -> Cell: return self._cell
	def fetch(self) -> VALUE: return self._cell.contents
	def store(self, value:VALUE):
		self._cell.contents = value
	def runtime_type(self): return RefType(self._cell.cell_type)
	def display(self, rendering:Optional[set]=None):
		# A cell of ? can hold a way back to itself.
		if rendering is None: rendering = set()
		if self._cell in rendering: return "ref ..."
		rendering.add(self._cell)
		try: return "ref "+display(self._cell.contents, rendering)
		finally: rendering.discard(self._cell)
	def __eq__(self, other): return isinstance(other, Reference) and self._cell is other._cell
	def __hash__(self): return id(self._cell)
	def __repr__(self): return "<Reference %s>"%self.display()

def allocate(cell_type:StratagemType, contents:VALUE) -> Reference:
	return Reference(Cell(cell_type, contents))

###############################################################################

def type_of(value:VALUE) -> StratagemType:
	# bool must come before int, since Python considers True to be an int.
	if isinstance(value, bool): return BOOL
	if isinstance(value, int): return INT
	if isinstance(value, str): return STRING
	if isinstance(value, StratagemValue): return value.runtime_type()
	raise TypeError("Not a Stratagem value: %r"%(value,))

def is_int(value:VALUE) -> bool:
	return isinstance(value, int) and not isinstance(value, bool)

def same_value(a:VALUE, b:VALUE) -> bool:
	"""
	Structural equality, as the == operator sees it.
	Values of different run-time variants are never equal, so `true` is not `1`.
	Closures are equal only to themselves; references when they name the same cell.
	"""
	if isinstance(a, bool) or isinstance(b, bool):
		return isinstance(a, bool) and isinstance(b, bool) and a == b
	if isinstance(a, Closure) or isinstance(b, Closure):
		return a is b
	return type(a) is type(b) and a == b

def wrap_int(n:int) -> int:
	""" Keep integer results in the signed 64-bit range, wrapping like machine arithmetic. """
	if INT_MIN <= n <= INT_MAX: return n
	return ((n - INT_MIN) % (1 << INT_BITS)) + INT_MIN

def display(value:VALUE, rendering:Optional[set]=None) -> str:
	""" The textual form that `print` emits. """
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, (int, str)): return str(value)
	if isinstance(value, Reference): return value.display(rendering)
	return value.display()
