"""
Simplest possible environment concept: the canonical list-structured search.

One scope is a dictionary plus a link to the scope around it. The typechecker
runs over a chain of these holding types; the evaluator runs over a chain of
exactly the same shape holding values.
"""
from typing import Generic, Optional, TypeVar
from .errors import UnboundNameError, RedeclarationError
from .lattice import StratagemType

T = TypeVar('T')

class Environment(Generic[T]):
	_bindings : dict[str, T]
	outer : Optional["Environment[T]"]

	def __init__(self, outer:Optional["Environment[T]"]=None):
		self._bindings = {}
		self.outer = outer

	def is_global(self) -> bool: return self.outer is None
	def holds(self, name:str) -> bool: return name in self._bindings

	def create(self, name:str, item:T) -> T:
		""" Bind a name in this very scope. Shadowing something further out is fine. """
		if name in self._bindings:
			raise RedeclarationError(name)
		self._bindings[name] = item
		return item

	def resolve(self, name:str) -> T:
		scope = self
		while scope is not None:
			try: return scope._bindings[name]
			except KeyError: scope = scope.outer
		raise UnboundNameError(name)

	def update(self, name:str, item:T) -> T:
		"""
		Overwrite the nearest binding of `name`.
		If there is none anywhere, the name springs into being at global scope.
		"""
		scope = self
		while not (name in scope._bindings or scope.outer is None):
			scope = scope.outer
		scope._bindings[name] = item
		return item

	def __repr__(self):
		chain = []
		scope = self
		while scope is not None:
			chain.append("{%s}"%", ".join("%s: %r"%pair for pair in scope._bindings.items()))
			scope = scope.outer
		return "<Environment %s>"%" -> ".join(chain)

TypeEnvironment = Environment[StratagemType]

# The value side gets parameterized in values.py,
# since closures need to point back at their environments.
