"""
The Lattice of Gradual Types
=============================

Types here are value objects. Each one gets numbered into an equivalence
class keyed on its structure, so equality and hashing are just a matter
of comparing those numbers. The primitive leaves are singletons.

Two relations matter for gradual typing:

* Consistency (written ~) is what the typechecker uses instead of equality.
  The unknown type ``?`` (Any) is consistent with everything, so the relation
  is reflexive and symmetric but NOT transitive: Int ~ ? ~ Bool, yet Int !~ Bool.

* Join finds the most precise type which two types can both be treated as.
  The if-expression uses it to reconcile its two branches.

Reference types are invariant: two ref types are consistent (or join to
something better than ?) only when their cell types are the same type.
Otherwise a precisely-typed cell could be written through a looser alias.

---------------------------------------------------------------------------
"""

from boozetools.support.foundation import Visitor

_TYPE_NUMBERING = {}

class StratagemType:
	equivalence_class: int

	def __init__(self, domain_key):
		type_key = (type(self), domain_key)
		try:
			self.equivalence_class = _TYPE_NUMBERING[type_key]
		except KeyError:
			self.equivalence_class = _TYPE_NUMBERING[type_key] = len(_TYPE_NUMBERING)

	def __eq__(self, other):
		return isinstance(other, StratagemType) and self.equivalence_class == other.equivalence_class
	def __ne__(self, other): return not self == other
	def __hash__(self): return self.equivalence_class
	def __repr__(self) -> str: return self.render()
	def render(self) -> str: raise NotImplementedError(type(self))

def is_equivalent(s:StratagemType, t:StratagemType) -> bool:
	return s.equivalence_class == t.equivalence_class

class _Leaf(StratagemType):
	""" Primitive types have no structure, so one of each is plenty. """
	def __init__(self, text:str):
		self._text = text
		super().__init__(None)
	def render(self) -> str: return self._text

class _Any(_Leaf): pass
class _Bool(_Leaf): pass
class _Int(_Leaf): pass
class _String(_Leaf): pass
class _Unit(_Leaf): pass

ANY = _Any("?")
BOOL = _Bool("Bool")
INT = _Int("Int")
STRING = _String("String")
UNIT = _Unit("()")

class ClosureType(StratagemType):
	""" Functions take one argument and have one result. """
	def __init__(self, arg:StratagemType, ret:StratagemType):
		assert isinstance(arg, StratagemType), arg
		assert isinstance(ret, StratagemType), ret
		self.arg, self.ret = arg, ret
		super().__init__((arg.equivalence_class, ret.equivalence_class))
	def render(self) -> str:
		arg = self.arg.render()
		if isinstance(self.arg, ClosureType): arg = "(%s)"%arg
		return "%s -> %s"%(arg, self.ret.render())

class RefType(StratagemType):
	""" The type of a mutable cell holding a value of the cell type. """
	def __init__(self, cell:StratagemType):
		assert isinstance(cell, StratagemType), cell
		self.cell = cell
		super().__init__(cell.equivalence_class)
	def render(self) -> str:
		cell = self.cell.render()
		if isinstance(self.cell, ClosureType): cell = "(%s)"%cell
		return "ref "+cell

PRIMITIVES = (ANY, BOOL, INT, STRING, UNIT)

###################
#

class Consistency(Visitor):
	"""
	Decides the ~ relation. Each visit method sees a pair
	in which neither side is the unknown type.
	"""
	def check(self, this:StratagemType, that:StratagemType) -> bool:
		if this is ANY or that is ANY: return True
		return self.visit(this, that)

	@staticmethod
	def _same_leaf(this:_Leaf, that:StratagemType):
		return this is that
	visit__Bool = visit__Int = visit__String = visit__Unit = _same_leaf

	def visit_ClosureType(self, this:ClosureType, that:StratagemType):
		return (
			isinstance(that, ClosureType)
			and self.check(this.arg, that.arg)
			and self.check(this.ret, that.ret)
		)

	@staticmethod
	def visit_RefType(this:RefType, that:StratagemType):
		# Invariance: equality of cell types, not mere consistency.
		return isinstance(that, RefType) and is_equivalent(this.cell, that.cell)

class SupertypeFinder(Visitor):
	"""
	Works out the join of two types: the most precise type
	that both of them can be safely treated as.
	"""
	def do(self, this:StratagemType, that:StratagemType) -> StratagemType:
		if is_equivalent(this, that): return this
		return self.visit(this, that)

	@staticmethod
	def _distinct_leaves(_this:_Leaf, _that:StratagemType):
		# Distinct leaves (or a leaf with anything composite) have only ? above them.
		return ANY
	visit__Any = visit__Bool = visit__Int = visit__String = visit__Unit = _distinct_leaves

	def visit_ClosureType(self, this:ClosureType, that:StratagemType):
		if isinstance(that, ClosureType):
			return ClosureType(self.do(this.arg, that.arg), self.do(this.ret, that.ret))
		return ANY

	@staticmethod
	def visit_RefType(_this, _that):
		# Equal ref types never get this far.
		return ANY

_consistency = Consistency()
_supertype_finder = SupertypeFinder()

def consistent_with(a:StratagemType, b:StratagemType) -> bool:
	return _consistency.check(a, b)

def join(a:StratagemType, b:StratagemType) -> StratagemType:
	return _supertype_finder.do(a, b)
