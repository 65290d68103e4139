"""
Where the dynamic world meets the static one.
Every inserted cast either lets a value through unchanged or stops the program
with a CastError that points at that one cast.
"""
import unittest
from unittest import mock

from stratagem.syntax import (
	Literal, Var, BinOp, If, FunctionDecl, FunctionApp, Seq,
	Assign, Deref, Ref, Print, Cast, Let,
)
from stratagem.checker import typecheck
from stratagem.evaluator import evaluate
from stratagem.errors import CastError
from stratagem.lattice import ANY, BOOL, INT, STRING, UNIT, ClosureType, RefType
from stratagem.values import UNIT as UNIT_VALUE

def succ():
	return FunctionDecl("x", INT, INT, BinOp("+", Var("x"), Literal(1)))

def dynamic(name, value, body):
	return Let(name, ANY, value, body)

def run(program):
	return evaluate(typecheck(program).expr)

class CastFailures(unittest.TestCase):

	def fails(self, program) -> CastError:
		with self.assertRaises(CastError) as cm:
			run(program)
		self.assertIsInstance(cm.exception.node, Cast)
		return cm.exception

	def test_argument_of_the_wrong_sort(self):
		sink = FunctionDecl("s", STRING, UNIT, Literal(UNIT_VALUE))
		ex = self.fails(dynamic("n", Literal(1), FunctionApp(sink, Var("n"))))
		self.assertEqual(1, ex.value)
		self.assertEqual(INT, ex.runtime_type)
		self.assertEqual(STRING, ex.target)
		self.assertEqual("Cannot cast 1 of type Int to String", ex.message)

	def test_the_failure_happens_after_earlier_effects(self):
		sink = FunctionDecl("s", STRING, UNIT, Literal(UNIT_VALUE))
		program = dynamic("n", Literal(1), Seq([
			Print(Literal("before")),
			FunctionApp(sink, Var("n")),
			Print(Literal("after")),
		]))
		with mock.patch("stratagem.evaluator.emit") as emit:
			with self.assertRaises(CastError):
				run(program)
		emit.assert_called_once_with("before")

	def test_calling_a_non_function(self):
		ex = self.fails(dynamic("f", Literal(5), FunctionApp(Var("f"), Literal(1))))
		self.assertEqual(ClosureType(INT, ANY), ex.target)

	def test_calling_a_function_with_the_wrong_parameter(self):
		# The callee cast compares closure types structurally.
		ex = self.fails(dynamic("f", succ(), FunctionApp(Var("f"), Literal(True))))
		self.assertEqual(ClosureType(INT, INT), ex.runtime_type)
		self.assertEqual(ClosureType(BOOL, ANY), ex.target)

	def test_dynamic_callee_still_checks_its_parameter(self):
		# The callee passes as ? -> ?, so the argument gets no cast of its own.
		program = dynamic("f", succ(), dynamic("v", Literal("s"), FunctionApp(Var("f"), Var("v"))))
		with self.assertRaises(CastError) as cm:
			run(program)
		ex = cm.exception
		self.assertEqual("s", ex.value)
		self.assertEqual(STRING, ex.runtime_type)
		self.assertEqual(INT, ex.target)
		self.assertIsInstance(ex.node, Var)

	def test_condition_not_boolean(self):
		ex = self.fails(dynamic("c", Literal(0), If(Var("c"), Literal(1), Literal(2))))
		self.assertEqual(BOOL, ex.target)

	def test_declared_result_enforced(self):
		fn = FunctionDecl("x", ANY, INT, Var("x"))
		ex = self.fails(FunctionApp(fn, Literal("text")))
		self.assertEqual(STRING, ex.runtime_type)
		self.assertEqual(INT, ex.target)

	def test_assign_through_unknown_into_other_cell(self):
		ex = self.fails(dynamic("r", Ref(Literal(True)), Assign(Var("r"), Literal(7))))
		self.assertEqual(RefType(BOOL), ex.runtime_type)
		self.assertEqual(RefType(INT), ex.target)

	def test_assign_through_unknown_into_non_reference(self):
		self.fails(dynamic("r", Literal("no"), Assign(Var("r"), Literal(7))))

	def test_dereference_through_unknown_respects_invariance(self):
		# The cell was allocated at Int, and ref Int is not consistent with ref ?.
		ex = self.fails(dynamic("r", Ref(Literal(5)), Deref(Var("r"))))
		self.assertEqual(RefType(INT), ex.runtime_type)
		self.assertEqual(RefType(ANY), ex.target)

class CastSuccesses(unittest.TestCase):

	def test_dynamic_argument_of_the_right_sort(self):
		self.assertEqual(8, run(dynamic("n", Literal(7), FunctionApp(succ(), Var("n")))))

	def test_dynamic_callee(self):
		self.assertEqual(2, run(dynamic("f", succ(), FunctionApp(Var("f"), Literal(1)))))

	def test_dynamic_condition(self):
		self.assertEqual("yes", run(dynamic("c", Literal(True), If(Var("c"), Literal("yes"), Literal("no")))))

	def test_joined_branches(self):
		self.assertIs(UNIT_VALUE, run(If(Literal(False), Literal(True), Literal(UNIT_VALUE))))
		self.assertIs(True, run(If(Literal(True), Literal(True), Literal(UNIT_VALUE))))

	def test_assign_through_unknown(self):
		program = Let("cell", None, Ref(Literal(5)), dynamic("r", Var("cell"), Seq([
			Assign(Var("r"), Literal(7)),
			Deref(Var("cell")),
		])))
		self.assertEqual(7, run(program))

	def test_cell_of_unknown_holds_anything(self):
		program = dynamic("a", Literal(5), Let("r", None, Ref(Var("a")), Seq([
			Assign(Var("r"), Literal("text")),
			dynamic("q", Var("r"), Deref(Var("q"))),
		])))
		self.assertEqual("text", run(program))

	def test_values_pass_through_unchanged(self):
		program = dynamic("x", Literal(3), BinOp("*", Var("x"), Literal(2)))
		self.assertEqual(6, run(program))

if __name__ == '__main__':
	unittest.main()
