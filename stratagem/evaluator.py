"""
The tree-walking evaluator. It only ever sees trees that came out of `typecheck`,
so every inserted Cast is where the dynamic world gets checked.
Anything else that goes wrong with a value's shape is the core's own fault,
and gets reported as an InternalRuntimeError.
"""

from typing import Optional
from . import syntax, primitive
from .errors import UnboundNameError, CastError, DivisionByZeroError, InternalRuntimeError, UncheckedTreeError
from .lattice import consistent_with
from .values import (
	VALUE, UNIT, ValueEnvironment, Closure, Reference,
	allocate, type_of, is_int, display,
)

def emit(text:str):
	""" Where `print` sends its output. Tests swap this out. """
	print(text)

def evaluate(expr:syntax.Expression, env:Optional[ValueEnvironment]=None) -> VALUE:
	if env is None: env = ValueEnvironment()
	try: fn = EVALUATE[type(expr)]
	except KeyError: raise NotImplementedError(type(expr), expr)
	return fn(expr, env)

EVALUATE = {}

def attach_evaluation_methods(python_scope):
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_eval_"):
			_t = _v.__annotations__["expr"]
			assert isinstance(_t, type), (_k, _t)
			EVALUATE[_t] = _v

def _absurd(expr:syntax.Expression, what:str, value:VALUE):
	return InternalRuntimeError("Expected %s, got %s: %s"%(what, type_of(value), display(value)), expr)

###############################################################################

def _eval_literal(expr:syntax.Literal, env:ValueEnvironment):
	return expr.value

def _eval_var(expr:syntax.Var, env:ValueEnvironment):
	try: return env.resolve(expr.name)
	except UnboundNameError as ex:
		ex.node = expr
		raise

def _eval_bin_op(expr:syntax.BinOp, env:ValueEnvironment):
	a = evaluate(expr.lhs, env)
	b = evaluate(expr.rhs, env)
	if primitive.is_equality(expr.op):
		return primitive.EQUALITY[expr.op](a, b)
	if not is_int(a): raise _absurd(expr.lhs, "an integer", a)
	if not is_int(b): raise _absurd(expr.rhs, "an integer", b)
	try: return primitive.apply_integer_op(expr.op, a, b)
	except primitive.ZeroDivisor: raise DivisionByZeroError(expr) from None

def _eval_if(expr:syntax.If, env:ValueEnvironment):
	if_part = evaluate(expr.if_part, env)
	if not isinstance(if_part, bool): raise _absurd(expr.if_part, "a boolean", if_part)
	sequel = expr.then_part if if_part else expr.else_part
	return evaluate(sequel, env)

def _eval_function_decl(expr:syntax.FunctionDecl, env:ValueEnvironment):
	if expr.return_type is None:
		raise UncheckedTreeError("Function has no settled return type: %s"%expr, expr)
	return Closure(expr.param_name, expr.param_type, expr.return_type, expr.body, env)

def _eval_function_app(expr:syntax.FunctionApp, env:ValueEnvironment):
	function = evaluate(expr.callee, env)
	if not isinstance(function, Closure): raise _absurd(expr.callee, "a function", function)
	arg = evaluate(expr.arg, env)
	# A function reached through a looser closure type (say, ? -> ?)
	# still only accepts what its own parameter type allows.
	arg_type = type_of(arg)
	if not consistent_with(arg_type, function.param_type):
		raise CastError(expr.arg, arg, arg_type, function.param_type)
	inner = ValueEnvironment(function.captured_env)
	inner.create(function.param_name, arg)
	return evaluate(function.body, inner)

def _eval_seq(expr:syntax.Seq, env:ValueEnvironment):
	value = UNIT
	for step in expr.exprs:
		value = evaluate(step, env)
	return value

def _eval_assign(expr:syntax.Assign, env:ValueEnvironment):
	ref = evaluate(expr.ref_expr, env)
	if not isinstance(ref, Reference): raise _absurd(expr.ref_expr, "a reference", ref)
	ref.store(evaluate(expr.value_expr, env))
	return ref

def _eval_deref(expr:syntax.Deref, env:ValueEnvironment):
	ref = evaluate(expr.ref_expr, env)
	if not isinstance(ref, Reference): raise _absurd(expr.ref_expr, "a reference", ref)
	return ref.fetch()

def _eval_ref(expr:syntax.Ref, env:ValueEnvironment):
	if expr.cell_type is None:
		raise UncheckedTreeError("Reference has no settled cell type: %s"%expr, expr)
	return allocate(expr.cell_type, evaluate(expr.value_expr, env))

def _eval_print(expr:syntax.Print, env:ValueEnvironment):
	emit(display(evaluate(expr.arg, env)))
	return UNIT

def _eval_cast(expr:syntax.Cast, env:ValueEnvironment):
	value = evaluate(expr.body, env)
	runtime_type = type_of(value)
	if consistent_with(runtime_type, expr.target): return value
	raise CastError(expr, value, runtime_type, expr.target)

def _eval_let(expr:syntax.Let, env:ValueEnvironment):
	inner = ValueEnvironment(env)
	inner.create(expr.name, evaluate(expr.value, env))
	return evaluate(expr.body, inner)

attach_evaluation_methods(globals())
