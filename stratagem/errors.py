"""
Everything that can go wrong in the core, as exceptions.

The core never recovers from these internally, and it never logs them either.
Whoever called `typecheck` or `evaluate` gets to decide what happens next;
the executive, for instance, turns them into entries in a diagnostic Report.

Most of these carry the guilty expression node, if there is one,
so that whatever prints the complaint can show where it came from.
"""

class StratagemError(Exception):
	""" Root of the taxonomy. """
	def __init__(self, message:str, node=None):
		super().__init__(message)
		self.message = message
		self.node = node
	def __str__(self): return self.message

###############################################################################
# Name-resolution problems can arise in either pass,
# because both passes run over the same kind of environment chain.

class ScopeError(StratagemError): pass

class UnboundNameError(ScopeError):
	def __init__(self, name:str, node=None):
		super().__init__("Unbound variable: %s"%name, node)
		self.name = name

class RedeclarationError(ScopeError):
	def __init__(self, name:str, node=None):
		super().__init__("Redeclaring existing variable: %s"%name, node)
		self.name = name

###############################################################################
# Typecheck-time failures. These mean the program is wrong.

class TypecheckError(StratagemError): pass

class TypeMismatchError(TypecheckError):
	def __init__(self, message:str, node=None, need=None, got=None):
		super().__init__(message, node)
		self.need, self.got = need, got

class NotAFunctionError(TypecheckError):
	def __init__(self, got, node=None):
		super().__init__("Function called on a non-function: %s"%got, node)
		self.got = got

class NotAReferenceError(TypecheckError):
	def __init__(self, got, node=None):
		super().__init__("Expected a reference, got: %s"%got, node)
		self.got = got

###############################################################################
# Run-time failures which a correctly-typechecked program can still suffer.

class StratagemRuntimeError(StratagemError): pass

class CastError(StratagemRuntimeError):
	"""
	The one expected run-time type failure. Each of these traces back
	to exactly one Cast node, and thus to one inserted boundary check,
	or else to the argument of a function which was called through a
	looser closure type than its own.
	"""
	def __init__(self, node, value, runtime_type, target):
		message = "Cannot cast %s of type %s to %s"%(_brief(value), runtime_type, target)
		super().__init__(message, node)
		self.value = value
		self.runtime_type = runtime_type
		self.target = target

class DivisionByZeroError(StratagemRuntimeError):
	def __init__(self, node=None):
		super().__init__("Division by zero", node)

###############################################################################
# Things that cannot happen unless the core itself is broken.

class InternalRuntimeError(StratagemError):
	"""
	A value turned up where typechecking promised something else.
	This is a bug in cast insertion, not in the Stratagem program.
	"""

class UncheckedTreeError(InternalRuntimeError):
	""" Somebody tried to evaluate a tree that never went through typecheck. """


def _brief(value) -> str:
	# Late import: the value model depends on nothing here,
	# but rendering wants to say "true" rather than "True".
	from .values import display
	text = display(value)
	return text if len(text) < 40 else text[:37]+"..."
