"""
The typecheck pass, which is also the cast-insertion pass.

Each visit method takes a node and the current type environment, and returns
a judgement: the node's static type together with a rewritten copy of the node.
Wherever a value crosses from ``?`` into a place that expects something more
precise, or two branches disagree about their type, the rewritten copy wraps
the offending child in a Cast node. The input tree is left as it was.

The rule names in the comments (CIf1, CApp2, and so on) follow the usual
presentation of cast-insertion for the gradually-typed lambda calculus.
"""

from typing import NamedTuple, Optional
from boozetools.support.foundation import Visitor
from . import syntax, primitive
from .environment import TypeEnvironment
from .errors import (
	StratagemError, TypeMismatchError, NotAFunctionError, NotAReferenceError,
)
from .lattice import (
	StratagemType, ClosureType, RefType,
	ANY, BOOL, INT, UNIT,
	consistent_with, join, is_equivalent,
)
from .values import type_of

class Checked(NamedTuple):
	type: StratagemType
	expr: syntax.Expression

def _cast_unless_same(target:StratagemType, checked:Checked) -> syntax.Expression:
	if is_equivalent(checked.type, target): return checked.expr
	return syntax.Cast(target, checked.expr)

class TypeChecker(Visitor):

	def check(self, expr:syntax.Expression, env:TypeEnvironment) -> Checked:
		# Housekeeping around the generic visitation protocol,
		# so that errors remain reasonably localized.
		try: judgement = self.visit(expr, env)
		except StratagemError as ex:
			if ex.node is None: ex.node = expr
			raise
		assert isinstance(judgement, Checked), type(expr)
		return judgement

	@staticmethod
	def visit_Literal(expr:syntax.Literal, env:TypeEnvironment) -> Checked:
		return Checked(type_of(expr.value), expr)

	@staticmethod
	def visit_Var(expr:syntax.Var, env:TypeEnvironment) -> Checked:
		return Checked(env.resolve(expr.name), expr)

	def visit_BinOp(self, expr:syntax.BinOp, env:TypeEnvironment) -> Checked:
		lhs, rhs = self.check(expr.lhs, env), self.check(expr.rhs, env)
		rewritten = syntax.BinOp(expr.op, lhs.expr, rhs.expr)
		if primitive.is_equality(expr.op):
			if not consistent_with(lhs.type, rhs.type):
				raise TypeMismatchError(
					"Operator %s expected consistent types, got: %s and %s"%(expr.op, lhs.type, rhs.type),
					expr, lhs.type, rhs.type,
				)
		elif not (consistent_with(lhs.type, INT) and consistent_with(rhs.type, INT)):
			raise TypeMismatchError(
				"Operator %s expected integer arguments, got: %s and %s"%(expr.op, lhs.type, rhs.type),
				expr, INT, rhs.type if consistent_with(lhs.type, INT) else lhs.type,
			)
		return Checked(primitive.RESULT_TYPE[expr.op], rewritten)

	def visit_If(self, expr:syntax.If, env:TypeEnvironment) -> Checked:
		cond = self.check(expr.if_part, env)
		then_part = self.check(expr.then_part, env)
		else_part = self.check(expr.else_part, env)
		if not consistent_with(cond.type, BOOL):
			raise TypeMismatchError(
				"If-expression expected boolean in condition, got: %s"%cond.type,
				expr.if_part, BOOL, cond.type,
			)
		# CIf1: a condition of unknown type must turn out boolean at run time.
		if_part = _cast_unless_same(BOOL, cond)
		# CIf2 and CIf3: both branches meet at their join.
		supertype = join(then_part.type, else_part.type)
		rewritten = syntax.If(if_part, _cast_unless_same(supertype, then_part), _cast_unless_same(supertype, else_part))
		return Checked(supertype, rewritten)

	def visit_FunctionDecl(self, expr:syntax.FunctionDecl, env:TypeEnvironment) -> Checked:
		inner = TypeEnvironment(env)
		inner.create(expr.param_name, expr.param_type)
		body = self.check(expr.body, inner)
		declared = expr.declared_return_type
		if declared is None:
			# Infer the result type from what the body turned out to be.
			return_type, body_expr = body.type, body.expr
		elif consistent_with(body.type, declared):
			# CFun: the ascribed result type holds at run time too.
			return_type, body_expr = declared, _cast_unless_same(declared, body)
		else:
			raise TypeMismatchError(
				"Function's body doesn't have ascribed type, ascribed: %s, had: %s"%(declared, body.type),
				expr, declared, body.type,
			)
		rewritten = syntax.FunctionDecl(expr.param_name, expr.param_type, declared, body_expr, return_type)
		return Checked(ClosureType(expr.param_type, return_type), rewritten)

	def visit_FunctionApp(self, expr:syntax.FunctionApp, env:TypeEnvironment) -> Checked:
		callee = self.check(expr.callee, env)
		arg = self.check(expr.arg, env)
		if callee.type is ANY:
			# CApp1: whatever it is had better accept our argument.
			closure_type = ClosureType(arg.type, ANY)
			callee_expr = syntax.Cast(closure_type, callee.expr)
		elif isinstance(callee.type, ClosureType):
			closure_type, callee_expr = callee.type, callee.expr
		else:
			raise NotAFunctionError(callee.type, expr.callee)
		if not consistent_with(closure_type.arg, arg.type):
			raise TypeMismatchError(
				"Inconsistent argument type: expected %s, got %s"%(closure_type.arg, arg.type),
				expr.arg, closure_type.arg, arg.type,
			)
		# CApp2: the argument had better be what the function wants.
		rewritten = syntax.FunctionApp(callee_expr, _cast_unless_same(closure_type.arg, arg))
		return Checked(closure_type.ret, rewritten)

	def visit_Seq(self, expr:syntax.Seq, env:TypeEnvironment) -> Checked:
		typ, exprs = UNIT, []
		for e in expr.exprs:
			typ, rewritten = self.check(e, env)
			exprs.append(rewritten)
		return Checked(typ, syntax.Seq(exprs))

	def _reference(self, expr:syntax.Expression, env:TypeEnvironment) -> Checked:
		""" Shared by assignment and dereference. Whatever it is must at least be able to be a ref. """
		ref = self.check(expr, env)
		if ref.type is ANY or isinstance(ref.type, RefType): return ref
		raise NotAReferenceError(ref.type, expr)

	@staticmethod
	def _cast_to_ref(ref:Checked, cell_if_unknown:StratagemType) -> Checked:
		if ref.type is not ANY: return ref
		ref_type = RefType(cell_if_unknown)
		return Checked(ref_type, syntax.Cast(ref_type, ref.expr))

	def visit_Assign(self, expr:syntax.Assign, env:TypeEnvironment) -> Checked:
		ref = self._reference(expr.ref_expr, env)
		value = self.check(expr.value_expr, env)
		# CAssign1: an unknown ref gets cast to a cell of the value's type.
		ref = self._cast_to_ref(ref, value.type)
		cell_type = ref.type.cell
		if not consistent_with(cell_type, value.type):
			raise TypeMismatchError(
				"Cannot assign %s into a cell of %s"%(value.type, cell_type),
				expr.value_expr, cell_type, value.type,
			)
		# CAssign2
		rewritten = syntax.Assign(ref.expr, _cast_unless_same(cell_type, value))
		return Checked(ref.type, rewritten)

	def visit_Deref(self, expr:syntax.Deref, env:TypeEnvironment) -> Checked:
		# CDeref1
		ref = self._cast_to_ref(self._reference(expr.ref_expr, env), ANY)
		return Checked(ref.type.cell, syntax.Deref(ref.expr))

	def visit_Ref(self, expr:syntax.Ref, env:TypeEnvironment) -> Checked:
		value = self.check(expr.value_expr, env)
		return Checked(RefType(value.type), syntax.Ref(value.expr, value.type))

	def visit_Print(self, expr:syntax.Print, env:TypeEnvironment) -> Checked:
		arg = self.check(expr.arg, env)
		return Checked(UNIT, syntax.Print(arg.expr))

	def visit_Cast(self, expr:syntax.Cast, env:TypeEnvironment) -> Checked:
		# The body's own type is of no further interest:
		# a cast only schedules a run-time check.
		body = self.check(expr.body, env)
		return Checked(expr.target, syntax.Cast(expr.target, body.expr))

	def visit_Let(self, expr:syntax.Let, env:TypeEnvironment) -> Checked:
		value = self.check(expr.value, env)
		declared = expr.declared_type
		if declared is None:
			binding_type, value_expr = value.type, value.expr
		elif consistent_with(declared, value.type):
			binding_type, value_expr = declared, _cast_unless_same(declared, value)
		else:
			raise TypeMismatchError(
				"Cannot bind %s of type %s to %s"%(expr.name, value.type, declared),
				expr.value, declared, value.type,
			)
		inner = TypeEnvironment(env)
		inner.create(expr.name, binding_type)
		body = self.check(expr.body, inner)
		return Checked(body.type, syntax.Let(expr.name, declared, value_expr, body.expr))

def typecheck(expr:syntax.Expression, env:Optional[TypeEnvironment]=None) -> Checked:
	"""
	Work out the static type of `expr` and return it along with
	a rewritten tree that has run-time casts at every gradual-typing boundary.
	Evaluate the rewritten tree, never the original.
	"""
	if env is None: env = TypeEnvironment()
	return TypeChecker().check(expr, env)
